import re
from typing import Any, Dict, Mapping

from pydantic import ValidationError

from app.constants import MAX_INT_DIGITS
from app.schemas import DOCTOR_FORM_DEFAULTS, DOCTOR_FORM_FIELDS

INT_FIELDS = ("experience", "fee", "reviewCount")
FLOAT_FIELDS = ("rating",)

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_int(raw: Any) -> int | str:
    """Leading-integer parse; anything unparsable becomes 0 ("4.7" -> 4, "abc" -> 0).

    A number longer than MAX_INT_DIGITS digits is returned as its string so
    that validation rejects it.
    """
    if isinstance(raw, int):
        return raw
    m = _INT_PREFIX.match(str(raw or ""))
    if not m:
        return 0
    digits = m.group(1)
    if len(digits.lstrip("+-")) > MAX_INT_DIGITS:
        return digits
    return int(digits)


def parse_float(raw: Any) -> float:
    if isinstance(raw, (int, float)):
        return float(raw)
    m = _FLOAT_PREFIX.match(str(raw or ""))
    return float(m.group(1)) if m else 0.0


def doctor_form_values(form: Mapping[str, Any]) -> Dict[str, Any]:
    """Collect the add-doctor fields from submitted form data.

    Missing text fields fall back to "" so they fail the required checks;
    numeric inputs are coerced the way the form's number inputs do.
    """
    values: Dict[str, Any] = {}
    for field in DOCTOR_FORM_FIELDS:
        raw = form.get(field)
        if field in INT_FIELDS:
            values[field] = parse_int(raw)
        elif field in FLOAT_FIELDS:
            values[field] = parse_float(raw)
        else:
            values[field] = raw if raw is not None else DOCTOR_FORM_DEFAULTS[field] or ""
    return values


def field_errors(exc: ValidationError) -> Dict[str, str]:
    """First error message per field, for inline display."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ("__all__",)
        field = str(loc[0])
        if field in errors:
            continue
        msg = err.get("msg", "Invalid value")
        # pydantic prefixes custom ValueError messages
        errors[field] = msg.removeprefix("Value error, ")
    return errors
