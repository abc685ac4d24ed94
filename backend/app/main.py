import time
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.services.backend_client import BackendClient
from app.services.directory_client import DirectoryClient
from app.utils.logger import get_logger, setup_logging

# Routers
from app.routers import pages as pages_router
from app.routers import proxy as proxy_router

logger = get_logger("main")
settings = get_settings()


def create_app(
    backend_transport: Optional[httpx.AsyncBaseTransport] = None,
    log_to_files: bool = True,
) -> FastAPI:
    """Build the app. ``backend_transport`` replaces the network transport used for the external backend."""
    setup_logging(to_files=log_to_files)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME} (backend: {settings.BACKEND_BASE_URL})")
        app.state.backend_client = BackendClient.from_settings(transport=backend_transport)
        app.state.directory_client = DirectoryClient.for_app(app)
        try:
            yield
        finally:
            await app.state.directory_client.aclose()
            await app.state.backend_client.aclose()
            logger.info("Shutting down application...")

    app = FastAPI(
        title="MedConsult",
        version="1.0.0",
        debug=settings.APP_DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(proxy_router.router)
    app.include_router(pages_router.router)

    # Error handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"HTTP {exc.status_code}: {exc.detail} - Path: {request.url.path}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "status_code": exc.status_code}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error", "status_code": 500}
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s"
        )
        return response

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    return app


app = create_app()
