from __future__ import annotations

from typing import Any

from studiopos.time_utils import parse_calendar_date


# Upper bound for any single amount (Rp 1,000,000,000)
MAX_AMOUNT = 1_000_000_000


class ValidationError(ValueError):
    """400-level input problem, tied to the offending field."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")

    def to_dict(self) -> dict:
        return {"error": str(self), "field": self.field, "reason": self.reason}


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., slot already booked)."""

    def to_dict(self) -> dict:
        return {"error": str(self)}


def coerce_int(field: str, value: Any, *, minimum: int | None = None) -> int:
    """
    Strict integer coercion for amounts, ids and quantities.

    Accepts ints and plain-digit strings. Rejects bools, floats, decimals
    and scientific notation.
    """
    if value is None:
        raise ValidationError(field, "is required")

    if isinstance(value, bool):
        raise ValidationError(field, "must be an integer")

    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(field, "must be an integer")
        # Reject scientific notation (e.g., "1e5") and decimals (e.g., "12.5")
        if "e" in stripped.lower() or "." in stripped:
            raise ValidationError(field, "must be a plain integer")
        try:
            result = int(stripped)
        except ValueError:
            raise ValidationError(field, "must be an integer")
    elif isinstance(value, float):
        raise ValidationError(field, "must be an integer, not a decimal")
    else:
        raise ValidationError(field, "must be an integer")

    if minimum is not None and result < minimum:
        raise ValidationError(field, f"must be at least {minimum}")
    if result > MAX_AMOUNT:
        raise ValidationError(field, f"must not exceed {MAX_AMOUNT}")
    return result


def coerce_optional_int(field: str, value: Any, *, minimum: int | None = None) -> int | None:
    if value is None or value == "":
        return None
    return coerce_int(field, value, minimum=minimum)


def coerce_date(field: str, value: Any):
    """Parse a calendar date; see time_utils.parse_calendar_date."""
    try:
        result = parse_calendar_date(value)
    except (TypeError, ValueError):
        raise ValidationError(field, "must be an ISO date (YYYY-MM-DD)")
    if result is None:
        raise ValidationError(field, "is required")
    return result


def clean_str(field: str, value: Any, *, max_length: int | None = None) -> str | None:
    """
    Strip a string field; empty becomes None.

    Non-strings and values longer than max_length are rejected, never coerced or cut.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(field, "must be a string")
    s = value.strip()
    if not s:
        return None
    if max_length is not None and len(s) > max_length:
        raise ValidationError(field, f"must be at most {max_length} characters")
    return s
