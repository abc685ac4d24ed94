from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List
import os


class Settings(BaseSettings):
    """Global app settings loaded from environment.
    - Keep defaults light for dev.
    - Override via .env or real env vars.
    """

    APP_NAME: str = "medconsult"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True

    # External doctors backend (source of truth for doctor records)
    BACKEND_BASE_URL: str = "https://codecollabhub-beld.onrender.com"
    BACKEND_TIMEOUT_SECONDS: float = 10.0

    # Where the pages reach the local /api routes. Empty = in-process (ASGI transport).
    DIRECTORY_API_BASE_URL: str | None = None

    # Result cache for list queries
    QUERY_CACHE_TTL_SECONDS: int = 300
    QUERY_CACHE_MAX_ENTRIES: int = 256

    # Completed add-doctor submission ids remembered for the submit lock
    SUBMISSION_LEDGER_SIZE: int = 1024

    # After a successful add, the page navigates to the listing after this delay
    REDIRECT_DELAY_SECONDS: float = 1.5
    DEFAULT_LISTING_SLUG: str = "general-physician-internal-medicine"

    # Raw CORS string from env (comma-separated); parsed via cors_origins property
    CORS_ORIGINS: str | None = None

    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def cors_origins(self) -> List[str]:
        """Return CORS origins as a list, parsing comma-separated env string."""
        raw = self.CORS_ORIGINS or os.getenv("CORS_ORIGINS", "") or ""
        return [o.strip() for o in raw.split(",") if o.strip()]

    @property
    def default_listing_path(self) -> str:
        return f"/doctors/{self.DEFAULT_LISTING_SLUG}"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
