"""
Field validators shared by every entity schema.

Each validator takes a raw input value and either returns the
normalised value (trimmed string, rounded price, coerced integer,
lower-cased email) or raises :class:`ValidationError` with a
human-readable message.  The schemas in ``inventory_api.app.schemas``
call these from their ``field_validator`` hooks so the same rules
apply to every entity.
"""

import math
import re
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from .errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _to_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` if it is not one."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _to_int(value: Any) -> Optional[int]:
    """Return ``value`` as an int if it is integral, otherwise ``None``."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = _to_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def round_money(value: float) -> float:
    """Round half-up to two decimal places."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def validate_text(value: Any, label: str, max_length: int = 100) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{label} must be a non-empty string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{label} cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"{label} cannot exceed {max_length} characters")
    return trimmed


def validate_optional_text(value: Any, label: str, max_length: int = 1000) -> str:
    """Like :func:`validate_text` but ``None`` and blanks become ``""``."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be a string")
    trimmed = value.strip()
    if len(trimmed) > max_length:
        raise ValidationError(f"{label} must be {max_length} characters or fewer")
    return trimmed


def validate_price(value: Any, label: str = "Price", allow_zero: bool = False) -> float:
    number = _to_number(value)
    if number is None or number < 0 or (number == 0 and not allow_zero):
        qualifier = "non-negative" if allow_zero else "positive"
        raise ValidationError(f"{label} must be a {qualifier} number")
    return round_money(number)


def validate_non_negative_int(value: Any, label: str) -> int:
    number = _to_int(value)
    if number is None or number < 0:
        raise ValidationError(f"{label} must be a non-negative integer")
    return number


def validate_positive_int(value: Any, label: str) -> int:
    number = _to_int(value)
    if number is None or number < 1:
        raise ValidationError(f"{label} must be a positive integer")
    return number


def validate_rating(value: Any) -> int:
    number = _to_int(value)
    if number is None or not 1 <= number <= 5:
        raise ValidationError("Rating must be an integer between 1 and 5")
    return number


def validate_choice(value: Any, choices: Iterable[str], label: str = "status") -> str:
    allowed = tuple(choices)
    if value not in allowed:
        raise ValidationError(f"Invalid {label}. Must be one of: {', '.join(allowed)}")
    return value


def validate_email(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Email must be a non-empty string")
    normalised = value.strip().lower()
    if not EMAIL_RE.match(normalised):
        raise ValidationError("Invalid email format")
    return normalised


def validate_id(value: Any) -> int:
    """Parse a record identifier taken from a path or payload."""
    number = _to_int(value)
    if number is None:
        raise ValidationError(f"Invalid id: {value}")
    return number


def validate_pattern(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError("Pattern must be a non-empty string")
    return value


def parse_datetime(value: Any, label: str = "date") -> datetime:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid {label} format") from None
    else:
        raise ValidationError(f"Invalid {label} format")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
