from urllib.parse import urlparse
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Any, Union

from app.constants import MAX_INT_DIGITS, City, Gender, Specialty

# -------------------- Doctor Schemas --------------------


class DoctorCreate(BaseModel):
    """Payload of the add-doctor form, forwarded as-is to the backend."""

    name: str = Field(..., min_length=1)
    specialty: Specialty = Specialty.GENERAL_PHYSICIAN
    gender: Gender = Gender.MALE
    city: City
    experience: int = Field(0, ge=0, description="years")
    rating: float = Field(0, ge=0, le=5)
    image: str
    hospital: Optional[str] = None
    fee: int = Field(0, ge=0)
    reviewCount: Optional[int] = Field(0, ge=0)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v

    @field_validator("experience", "fee", "reviewCount", mode="before")
    @classmethod
    def _int_not_too_long(cls, v: Any) -> Any:
        if isinstance(v, str) and len(v.strip().lstrip("+-")) > MAX_INT_DIGITS:
            raise ValueError("Number is too large")
        return v

    @field_validator("image")
    @classmethod
    def _image_is_url(cls, v: str) -> str:
        parsed = urlparse(v.strip())
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Image must be a valid URL")
        return v


class DoctorOut(BaseModel):
    """A doctor as returned by the backend listing. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "_id"))
    name: Optional[str] = None
    specialty: Optional[str] = None
    gender: Optional[str] = None
    city: Optional[str] = None
    experience: Optional[Union[int, float]] = None
    rating: Optional[float] = None
    image: Optional[str] = None
    hospital: Optional[str] = None
    fee: Optional[Union[int, float]] = None
    reviewCount: Optional[int] = 0

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return str(v) if v is not None else v


class ErrorOut(BaseModel):
    error: str


# Form defaults used when rendering an empty add-doctor form
DOCTOR_FORM_DEFAULTS = {
    "name": "",
    "specialty": Specialty.GENERAL_PHYSICIAN.value,
    "gender": Gender.MALE.value,
    "city": "",
    "experience": 0,
    "rating": 0,
    "image": "",
    "hospital": "",
    "fee": 0,
    "reviewCount": 0,
}

DOCTOR_FORM_FIELDS: List[str] = list(DOCTOR_FORM_DEFAULTS)
