"""Coercion of untyped raw values to declared field types.

Coercion never raises. Anything that cannot be converted becomes None and
the decision about whether that is acceptable is left to validation.
"""

import math
import re
from datetime import UTC, date, datetime
from typing import Any

from fieldforge.core.types import FieldType

TRUTHY_STRINGS = frozenset({"true", "1", "yes", "on"})
FALSY_STRINGS = frozenset({"false", "0", "no", "off"})

# Leading decimal literal, the way a lenient float parser reads "42.5kg"
_LEADING_NUMBER = re.compile(
    r"^[+-]?(?:inf(?:inity)?|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)",
    re.IGNORECASE,
)


def convert_value(value: Any, field_type: FieldType | str) -> Any:
    """Convert a raw value to the shape implied by a field type.

    Args:
        value: Raw, untyped input (decoded JSON, form data, YAML default)
        field_type: Target field type

    Returns:
        The typed value, or None when the value is absent or cannot be converted.
    """
    try:
        field_type = FieldType(field_type)
    except ValueError:
        return None

    value = _normalize_empty(value, field_type)
    if value is None:
        return None

    match field_type:
        case FieldType.TEXT | FieldType.TEXTAREA | FieldType.RICH_TEXT:
            return to_text(value)
        case FieldType.NUMBER:
            return to_number(value)
        case FieldType.BOOLEAN:
            return to_boolean(value)
        case FieldType.DATE:
            return to_datetime(value)


def _normalize_empty(value: Any, field_type: FieldType) -> Any:
    """Map "" to None for every type outside the string family."""
    if isinstance(value, str) and value == "" and not field_type.is_string:
        return None
    return value


def to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return format_iso(value)
    return str(value)


def to_number(value: Any) -> int | float | None:
    # bool is an int subclass, so it must be checked first
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        match = _LEADING_NUMBER.match(text)
        if not match:
            return None
        parsed = float(match.group(0))
        if not math.isfinite(parsed):
            return None
        return parsed
    return None


def to_boolean(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.lower().strip()
        if lowered in TRUTHY_STRINGS:
            return True
        if lowered in FALSY_STRINGS:
            return False
        return None
    return bool(value)


def to_datetime(value: Any) -> datetime | date | None:
    """Parse a value into a point in time.

    Native dates pass through unchanged. Strings are read as ISO-8601 and
    numbers as epoch milliseconds; naive results are taken as UTC.
    """
    if isinstance(value, (datetime, date)):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed
    return None


def as_utc(value: datetime | date) -> datetime:
    """Normalize a date or datetime to an aware UTC datetime for comparison."""
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_iso(value: datetime | date) -> str:
    """Render an instant as YYYY-MM-DDTHH:MM:SS.mmmZ."""
    instant = as_utc(value)
    return instant.strftime("%Y-%m-%dT%H:%M:%S.") + f"{instant.microsecond // 1000:03d}Z"
