import math
import re
import time
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from jagacuan.errors import ValidationError


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# datetime cannot represent the end of year 9999, so whole-year windows stop one year short
MIN_YEAR = 1970
MAX_YEAR = 9998


def require_text(body: Dict[str, Any], field: str, label: str = None, max_length: int = None) -> str:
    """Return a stripped, non-empty string field or raise ValidationError."""
    label = label or field
    value = body.get(field)
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required", field)
    value = value.strip()
    if max_length and len(value) > max_length:
        raise ValidationError(f"{label} must be at most {max_length} characters", field)
    return value


def optional_text(body: Dict[str, Any], field: str) -> Optional[str]:
    value = body.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", field)
    return value.strip() or None


def parse_amount(value: Any, field: str = "amount", allow_zero: bool = False) -> float:
    """Parse a money amount; must be > 0, or >= 0 when allow_zero."""
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"{field} is required", field)
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", field)
    if math.isnan(amount) or math.isinf(amount):
        raise ValidationError(f"{field} must be a number", field)
    if allow_zero:
        if amount < 0:
            raise ValidationError(f"{field} must not be negative", field)
    elif amount <= 0:
        raise ValidationError(f"{field} must be greater than 0", field)
    return amount


def parse_int(value: Any, field: str, minimum: int = 0, maximum: int = None) -> int:
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"{field} is required", field)
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be an integer", field)
    if number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}", field)
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field} must be at most {maximum}", field)
    return number


def parse_year(value: Any, field: str = "year") -> int:
    return parse_int(value, field, minimum=MIN_YEAR, maximum=MAX_YEAR)


def parse_choice(value: Any, field: str, choices: Iterable[str], aliases: Dict[str, str] = None) -> str:
    """Match value case-insensitively against choices, returning the canonical spelling."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required", field)
    key = value.strip().lower()
    if aliases and key in aliases:
        key = aliases[key]
    for choice in choices:
        if choice.lower() == key:
            return choice
    raise ValidationError(f"{field} must be one of: {', '.join(choices)}", field)


def _parse_datetime(value: str) -> datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_timestamp(value: Any, field: str = "date", default_now: bool = True) -> Optional[int]:
    """Accept unix seconds or an ISO date/datetime string; return unix seconds."""
    if value is None or value == "":
        return int(time.time()) if default_now else None
    timestamp = None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if math.isfinite(value):
            timestamp = int(value)
    elif isinstance(value, str):
        try:
            timestamp = int(_parse_datetime(value).timestamp())
        except (ValueError, OverflowError, OSError):
            pass
    if timestamp is None:
        raise ValidationError(f"{field} must be an ISO date", field)

    try:
        year = datetime.fromtimestamp(timestamp).year
    except (ValueError, OverflowError, OSError):
        year = None
    if year is None or not MIN_YEAR <= year <= MAX_YEAR:
        raise ValidationError(f"{field} must be between {MIN_YEAR} and {MAX_YEAR}", field)
    return timestamp


def parse_day(value: Any, field: str) -> Optional[str]:
    """Normalise an optional ISO date to YYYY-MM-DD."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return _parse_datetime(value).date().isoformat()
        except ValueError:
            pass
    raise ValidationError(f"{field} must be an ISO date", field)


def validate_email(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Email is required", "email")
    email = value.strip().lower()
    if len(email) > 255 or not EMAIL_RE.match(email):
        raise ValidationError("Email is not valid", "email")
    return email
