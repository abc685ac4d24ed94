from pathlib import Path
from typing import Any, Dict, List, Optional
import uuid

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from app.config import get_settings
from app.constants import ADD_DOCTOR_FALLBACK, City, Gender, Specialty
from app.schemas import DOCTOR_FORM_DEFAULTS, DoctorOut
from app.services.directory_client import DirectoryClient, DirectoryError
from app.utils.forms import doctor_form_values, field_errors
from app.utils.logger import get_logger

logger = get_logger("pages_router")
settings = get_settings()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

router = APIRouter(tags=["pages"], include_in_schema=False)


def get_directory_client(request: Request) -> DirectoryClient:
    return request.app.state.directory_client


def slug_title(slug: str) -> str:
    return " ".join(part.capitalize() for part in slug.split("-") if part)


def _doctors_for_display(items: List[Any]) -> List[DoctorOut]:
    doctors = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            doctors.append(DoctorOut.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed doctor entry: {e.errors()}")
    return doctors


def _render_form(
    request: Request,
    *,
    values: Dict[str, Any],
    errors: Optional[Dict[str, str]] = None,
    notification: Optional[Dict[str, str]] = None,
    redirect_to: Optional[str] = None,
    submission_id: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "add_doctor.html",
        {
            "values": values,
            "errors": errors or {},
            "notification": notification,
            "redirect_to": redirect_to,
            "redirect_delay": settings.REDIRECT_DELAY_SECONDS,
            "submission_id": submission_id or uuid.uuid4().hex,
            "specialties": [s.value for s in Specialty],
            "genders": [g.value for g in Gender],
            "cities": [c.value for c in City],
            "listing_path": settings.default_listing_path,
        },
        status_code=status_code,
    )


@router.get("/")
async def home():
    return RedirectResponse(url=settings.default_listing_path)


@router.get("/doctors/{specialty_slug}", response_class=HTMLResponse)
async def list_doctors_page(
    request: Request,
    specialty_slug: str,
    directory: DirectoryClient = Depends(get_directory_client),
):
    query = list(request.query_params.multi_items())
    params = query if any(k == "specialty" for k, _ in query) else [("specialty", specialty_slug), *query]

    result = await directory.list_doctors(params)
    notification = None
    if not result.ok:
        notification = {"title": "Error", "description": result.error, "variant": "destructive"}

    return templates.TemplateResponse(
        request,
        "doctors.html",
        {
            "specialty_slug": specialty_slug,
            "specialty_title": slug_title(specialty_slug),
            "doctors": _doctors_for_display(result.items),
            "filters": dict(request.query_params),
            "cities": [c.value for c in City],
            "genders": [g.value for g in Gender],
            "notification": notification,
            "listing_path": settings.default_listing_path,
        },
    )


@router.get("/add-doctor", response_class=HTMLResponse)
async def add_doctor_page(request: Request):
    return _render_form(request, values=dict(DOCTOR_FORM_DEFAULTS))


@router.post("/add-doctor", response_class=HTMLResponse)
async def submit_add_doctor(request: Request, directory: DirectoryClient = Depends(get_directory_client)):
    form = await request.form()
    values = doctor_form_values(form)
    submission_id = form.get("submission_id") or None

    try:
        await directory.submit_doctor(values, submission_id=submission_id)
    except ValidationError as e:
        return _render_form(
            request,
            values=values,
            submission_id=submission_id,
            errors=field_errors(e),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    except DirectoryError as e:
        return _render_form(
            request,
            values=values,
            submission_id=submission_id,
            notification={
                "title": "Error",
                "description": e.message or ADD_DOCTOR_FALLBACK,
                "variant": "destructive",
            },
            status_code=status.HTTP_502_BAD_GATEWAY,
        )

    return _render_form(
        request,
        values=dict(DOCTOR_FORM_DEFAULTS),
        notification={
            "title": "Success!",
            "description": "Doctor has been added successfully.",
            "variant": "default",
        },
        redirect_to=settings.default_listing_path,
    )
