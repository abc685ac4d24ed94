import asyncio
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import httpx

from app.config import get_settings
from app.constants import (
    ADD_DOCTOR_FAILED,
    ADD_DOCTOR_PATH,
    FETCH_DOCTORS_FAILED,
    LIST_DOCTORS_PATH,
)
from app.schemas import DoctorCreate
from app.services.query_cache import QueryCache
from app.utils.logger import get_logger

logger = get_logger("directory_client")

# Host used when the pages talk to the local /api routes in-process
LOCAL_API_BASE_URL = "http://directory.local"


class DirectoryError(RuntimeError):
    """The add-doctor mutation did not succeed."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or ADD_DOCTOR_FAILED)
        self.message = message
        self.status_code = status_code


@dataclass
class ListResult:
    # backend JSON, verbatim
    doctors: Any
    status_code: Optional[int] = 200
    error: Optional[str] = None
    cached: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def items(self) -> List[Any]:
        """The doctor entries to render; an error counts as no results."""
        if not self.ok:
            return []
        if isinstance(self.doctors, list):
            return self.doctors
        if isinstance(self.doctors, dict):
            for key in ("doctors", "data", "results"):
                if isinstance(self.doctors.get(key), list):
                    return self.doctors[key]
        return []


def _pairs(params: Any) -> List[Tuple[str, str]]:
    if params is None:
        return []
    if hasattr(params, "multi_items"):
        return [(str(k), str(v)) for k, v in params.multi_items()]
    if hasattr(params, "items"):
        return [(str(k), str(v)) for k, v in params.items()]
    return [(str(k), str(v)) for k, v in params]


def _error_message(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return None


class DirectoryClient:
    """Data-fetch layer used by the pages.

    Talks to the local proxy routes, caches list results by query identity and
    drops them after a successful add. Each completed submission id is
    remembered so a repeated submit of the same form does not create a second
    record.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: Optional[QueryCache] = None,
        ledger_size: int = 1024,
    ):
        self._client = client
        self.cache = cache or QueryCache()
        self.ledger_size = ledger_size
        self._submissions: "OrderedDict[str, asyncio.Future]" = OrderedDict()

    @classmethod
    def for_app(cls, app) -> "DirectoryClient":
        settings = get_settings()
        if settings.DIRECTORY_API_BASE_URL:
            client = httpx.AsyncClient(
                base_url=settings.DIRECTORY_API_BASE_URL.rstrip("/"),
                timeout=settings.BACKEND_TIMEOUT_SECONDS,
            )
        else:
            client = httpx.AsyncClient(
                transport=httpx.ASGITransport(app=app, raise_app_exceptions=False),
                base_url=LOCAL_API_BASE_URL,
            )
        cache = QueryCache(
            ttl=settings.QUERY_CACHE_TTL_SECONDS,
            max_entries=settings.QUERY_CACHE_MAX_ENTRIES,
        )
        return cls(client, cache=cache, ledger_size=settings.SUBMISSION_LEDGER_SIZE)

    async def aclose(self) -> None:
        await self._client.aclose()

    # -------------------- list --------------------

    async def list_doctors(self, params: Any = None) -> ListResult:
        pairs = _pairs(params)
        key = QueryCache.make_key(LIST_DOCTORS_PATH, pairs)
        cached = self.cache.get(key)
        if cached is not None:
            return ListResult(doctors=cached, cached=True)

        try:
            resp = await self._client.get(LIST_DOCTORS_PATH, params=pairs)
        except httpx.HTTPError as e:
            logger.error(f"List doctors request failed: {e!r}", exc_info=True)
            return ListResult(doctors=[], status_code=None, error=FETCH_DOCTORS_FAILED)

        try:
            data = resp.json()
        except ValueError:
            logger.warning(f"List doctors returned non-JSON ({resp.status_code})")
            return ListResult(doctors=[], status_code=resp.status_code, error=FETCH_DOCTORS_FAILED)

        if resp.is_error or (isinstance(data, dict) and "error" in data):
            message = _error_message(resp) or FETCH_DOCTORS_FAILED
            logger.warning(f"List doctors failed ({resp.status_code}): {message}")
            return ListResult(doctors=data, status_code=resp.status_code, error=message)

        self.cache.set(key, data)
        return ListResult(doctors=data, status_code=resp.status_code)

    # -------------------- add --------------------

    async def submit_doctor(self, form: dict, submission_id: Optional[str] = None) -> Any:
        """Validate then add. Raises ``pydantic.ValidationError`` before any request is made."""
        doctor = DoctorCreate.model_validate(form)
        return await self.add_doctor(doctor, submission_id=submission_id)

    async def add_doctor(self, doctor: DoctorCreate, submission_id: Optional[str] = None) -> Any:
        if not submission_id:
            return await self._post_doctor(doctor)

        previous = self._submissions.get(submission_id)
        if previous is not None:
            logger.info(f"Duplicate submission {submission_id}; reusing first result")
            return await asyncio.shield(previous)

        future = asyncio.get_running_loop().create_future()
        self._remember(submission_id, future)
        try:
            result = await self._post_doctor(doctor)
        except Exception as e:
            future.set_exception(e)
            future.exception()  # mark retrieved
            raise
        else:
            future.set_result(result)
            return result
        finally:
            if not future.done() or future.exception() is not None:
                # a failed submission may be sent again with the same id
                self._submissions.pop(submission_id, None)
                future.cancel()

    def _remember(self, submission_id: str, future: asyncio.Future) -> None:
        self._submissions[submission_id] = future
        while len(self._submissions) > self.ledger_size:
            self._submissions.popitem(last=False)

    async def _post_doctor(self, doctor: DoctorCreate) -> Any:
        payload = doctor.model_dump(mode="json")
        try:
            resp = await self._client.post(ADD_DOCTOR_PATH, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Add doctor request failed: {e!r}", exc_info=True)
            raise DirectoryError() from e

        if resp.is_error:
            message = _error_message(resp) or ADD_DOCTOR_FAILED
            logger.warning(f"Add doctor failed ({resp.status_code}): {message}")
            raise DirectoryError(message, status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError:
            data = None

        self.cache.invalidate(LIST_DOCTORS_PATH)
        logger.info(f"Doctor added: {doctor.name}")
        return data
