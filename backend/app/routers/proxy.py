"""Pass-through routes to the external doctors backend."""
import json

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.constants import (
    ADD_DOCTOR_FAILED,
    ADD_DOCTOR_PATH,
    FETCH_DOCTORS_FAILED,
    LIST_DOCTORS_PATH,
)
from app.schemas import ErrorOut
from app.services.backend_client import BackendBadResponse, BackendClient, BackendUnavailable
from app.utils.logger import get_logger

logger = get_logger("proxy_router")

router = APIRouter(tags=["proxy"])

ERROR_RESPONSES = {400: {"model": ErrorOut}, 500: {"model": ErrorOut}, 502: {"model": ErrorOut}}


def get_backend_client(request: Request) -> BackendClient:
    return request.app.state.backend_client


@router.post(ADD_DOCTOR_PATH, responses=ERROR_RESPONSES)
async def add_doctor(request: Request, backend: BackendClient = Depends(get_backend_client)):
    """Forward the JSON body unchanged and relay the backend's JSON and status."""
    raw = await request.body()
    try:
        body = json.loads(raw) if raw else None
    except ValueError:
        logger.warning(f"Add doctor: invalid JSON body ({len(raw)} bytes)")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid JSON body"})

    try:
        resp = await backend.add_doctor(body)
    except BackendUnavailable as e:
        logger.error(f"API Error: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": ADD_DOCTOR_FAILED},
        )
    except BackendBadResponse as e:
        logger.error(f"API Error: {e}")
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"error": ADD_DOCTOR_FAILED})

    return JSONResponse(status_code=resp.status_code, content=resp.data)


@router.get(LIST_DOCTORS_PATH, responses=ERROR_RESPONSES)
async def list_doctors_with_filter(request: Request, backend: BackendClient = Depends(get_backend_client)):
    """Append the incoming query string unchanged to the backend list endpoint."""
    try:
        resp = await backend.list_doctors(request.url.query)
    except BackendUnavailable as e:
        logger.error(f"API Error: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": FETCH_DOCTORS_FAILED},
        )
    except BackendBadResponse as e:
        logger.error(f"API Error: {e}")
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"error": FETCH_DOCTORS_FAILED})

    return JSONResponse(status_code=resp.status_code, content=resp.data)
