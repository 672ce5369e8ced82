"""Form validation for camp, donor and request input.

All checks run before any store call, so a ValidationError always means
nothing was written."""

from __future__ import annotations

from typing import Any

from ..errors import ValidationError
from ..models import INTERACTIVE_STATUSES, BloodType, RequestStatus


def require_text(value: Any, message: str) -> str:
    """Return the trimmed value, or raise with `message` when blank"""
    if value is None or not str(value).strip():
        raise ValidationError(message)
    return str(value).strip()


def parse_units(value: Any) -> int:
    """Parse a unit count from form input.

    Accepts positive ints and strings holding one ("3", " 4 "). Booleans,
    fractions, zero, negatives and non-numeric text are rejected.
    """
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Please fill in all fields")

    if isinstance(value, int):
        units = value
    elif isinstance(value, float) and value.is_integer():
        units = int(value)
    elif isinstance(value, str):
        try:
            units = int(value.strip())
        except ValueError:
            units = 0
    else:
        units = 0

    if units <= 0:
        raise ValidationError("Please enter a valid number of units (greater than 0)")
    return units


def parse_blood_type(value: Any) -> BloodType:
    if isinstance(value, BloodType):
        return value
    try:
        return BloodType(str(value).strip().upper())
    except ValueError:
        valid = ", ".join(blood_type.value for blood_type in BloodType)
        raise ValidationError(f"Invalid blood type: {value!r}. Must be one of {valid}") from None


def parse_request_status(value: Any) -> RequestStatus:
    """Parse a status chosen in the triage control (terminal status excluded)"""
    if isinstance(value, RequestStatus):
        status = value
    else:
        try:
            status = RequestStatus(str(value).strip())
        except ValueError:
            status = None

    if status not in INTERACTIVE_STATUSES:
        valid = ", ".join(s.value for s in INTERACTIVE_STATUSES)
        raise ValidationError(f"Invalid request status: {value!r}. Must be one of {valid}")
    return status
