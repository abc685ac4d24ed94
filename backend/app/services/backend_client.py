from dataclasses import dataclass
from typing import Any, Optional

import httpx

from app.config import get_settings
from app.constants import ADD_DOCTOR_PATH, LIST_DOCTORS_PATH
from app.utils.logger import get_logger

logger = get_logger("backend_client")


class BackendUnavailable(RuntimeError):
    """The external backend could not be reached (connect error, timeout, ...)."""


class BackendBadResponse(RuntimeError):
    """The external backend answered with something that is not JSON."""

    def __init__(self, status_code: int, text: str):
        super().__init__(f"Backend returned non-JSON response ({status_code}): {text[:200]}")
        self.status_code = status_code


@dataclass
class BackendResponse:
    status_code: int
    data: Any


class BackendClient:
    """Thin relay to the fixed external doctors backend.

    Nothing is retried: every call is exactly one outbound request.
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "BackendClient":
        settings = get_settings()
        client = httpx.AsyncClient(
            base_url=settings.BACKEND_BASE_URL.rstrip("/"),
            timeout=settings.BACKEND_TIMEOUT_SECONDS,
            transport=transport,
        )
        return cls(client)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, request: httpx.Request) -> BackendResponse:
        try:
            resp = await self._client.send(request)
        except httpx.HTTPError as e:
            raise BackendUnavailable(f"{request.method} {request.url} failed: {e!r}") from e

        logger.info(f"{request.method} {request.url} -> {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            raise BackendBadResponse(resp.status_code, resp.text) from e
        return BackendResponse(status_code=resp.status_code, data=data)

    async def add_doctor(self, payload: Any) -> BackendResponse:
        request = self._client.build_request(
            "POST",
            ADD_DOCTOR_PATH,
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        return await self._send(request)

    async def list_doctors(self, query_string: str = "") -> BackendResponse:
        # query string is forwarded byte-for-byte, not re-encoded
        url = f"{LIST_DOCTORS_PATH}?{query_string}" if query_string else LIST_DOCTORS_PATH
        request = self._client.build_request("GET", url)
        return await self._send(request)
