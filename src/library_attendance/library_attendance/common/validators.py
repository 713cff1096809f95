from __future__ import annotations

import math
import numbers
from typing import Any, Optional

from ..core.exceptions import LocationRequiredError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def is_real_number(value: Any) -> bool:
    """True for finite ints/floats; bools are rejected even though they are ints."""

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(float(value))


def require_bool(value: Any, field_name: str, *, default: bool = False) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a boolean")
    return value


def optional_positive_int(value: Any, field_name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return value


def has_coordinates(payload: Any) -> bool:
    return (
        isinstance(payload, dict)
        and is_real_number(payload.get("lat"))
        and is_real_number(payload.get("lng"))
    )


def require_coordinates(payload: Any, message: str = "Location required") -> dict:
    if not has_coordinates(payload):
        raise LocationRequiredError(message)
    return payload
