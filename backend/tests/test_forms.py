import pytest
from pydantic import ValidationError

from app.schemas import DoctorCreate, DoctorOut
from app.utils.forms import doctor_form_values, field_errors, parse_float, parse_int

from conftest import VALID_DOCTOR, VALID_FORM


@pytest.mark.parametrize(
    "raw, expected",
    [("12", 12), ("4.7", 4), ("  7 years", 7), ("", 0), ("abc", 0), (None, 0), ("-3", -3), (5, 5)],
)
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


def test_parse_int_leaves_oversized_numbers_for_validation():
    assert parse_int("9" * 5000) == "9" * 5000
    assert parse_int("1" * 18) == int("1" * 18)


@pytest.mark.parametrize(
    "raw, expected",
    [("4.5", 4.5), (".5", 0.5), ("3", 3.0), ("", 0.0), ("x", 0.0), ("4.5stars", 4.5), (2, 2.0)],
)
def test_parse_float(raw, expected):
    assert parse_float(raw) == expected


def test_form_values_coerce_numbers():
    assert doctor_form_values(VALID_FORM) == VALID_DOCTOR


def test_form_values_fill_missing_fields():
    values = doctor_form_values({"name": "Dr. X"})
    assert values["specialty"] == "General Physician"
    assert values["gender"] == "male"
    assert values["city"] == ""
    assert values["image"] == ""
    assert values["rating"] == 0.0
    assert values["reviewCount"] == 0


def test_field_errors_one_message_per_field():
    with pytest.raises(ValidationError) as exc:
        DoctorCreate.model_validate({**VALID_DOCTOR, "name": "  ", "rating": 6, "image": "nope"})
    errors = field_errors(exc.value)
    assert set(errors) == {"name", "rating", "image"}
    assert errors["name"] == "Name is required"
    assert errors["image"] == "Image must be a valid URL"


def test_review_count_defaults_to_zero():
    payload = {k: v for k, v in VALID_DOCTOR.items() if k not in ("reviewCount", "hospital")}
    doctor = DoctorCreate.model_validate(payload)
    assert doctor.reviewCount == 0
    assert doctor.hospital is None


def test_oversized_number_is_a_field_error():
    with pytest.raises(ValidationError) as exc:
        DoctorCreate.model_validate({**VALID_DOCTOR, "experience": "9" * 5000})
    assert field_errors(exc.value) == {"experience": "Number is too large"}


def test_doctor_out_accepts_fractional_numbers():
    doctor = DoctorOut.model_validate({"name": "Dr. Z", "experience": 5.5, "fee": 300})
    assert doctor.experience == 5.5
    assert doctor.fee == 300
    assert isinstance(doctor.fee, int)


def test_doctor_out_keeps_unknown_fields():
    doctor = DoctorOut.model_validate({"_id": 17, "name": "Dr. Y", "languages": ["en", "hi"]})
    assert doctor.id == "17"
    assert doctor.model_extra == {"languages": ["en", "hi"]}
