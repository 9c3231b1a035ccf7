"""Field-level constraint checks for custom fields.

Checks run against the already-coerced value, in a fixed order, and the
first violated rule wins:

- required: Field must have a non-empty value
- minLength/maxLength/pattern: String family bounds and format
- minValue/maxValue: Date range (with a date type check) and numeric bounds
- boolean: Value must be strictly boolean
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any

from fieldforge.core.types import FieldType
from fieldforge.errors import SchemaConfigurationError
from fieldforge.metadata.loader import FieldDefinition, ValidationRules, numeric_bound
from fieldforge.validation.coercion import as_utc, format_iso, to_datetime, to_number
from fieldforge.validation.types import FieldError


def is_empty(value: Any) -> bool:
    """None and "" count as empty; whitespace and 0 do not."""
    return value is None or (isinstance(value, str) and value == "")


@dataclass
class FieldConstraintValidator:
    """Validates a single field value against its definition."""

    field: FieldDefinition

    def validate(self, value: Any) -> FieldError | None:
        """Validate field constraints.

        Raises:
            SchemaConfigurationError: If the declared pattern is not a valid regex,
                or a number bound is not numeric.
        """
        key = self.field.key

        if is_empty(value):
            if self.field.required:
                return self._error(f"Field '{key}' is required", "REQUIRED")
            # Nothing else is checked against an intentionally absent optional value
            return None

        rules = self.field.validation
        if rules is None:
            return None

        match self.field.type:
            case FieldType.TEXT | FieldType.TEXTAREA | FieldType.RICH_TEXT:
                return self._validate_string(value, rules)
            case FieldType.DATE:
                return self._validate_date(value, rules)
            case FieldType.BOOLEAN:
                if not isinstance(value, bool):
                    return self._error(
                        f"Field '{key}' must be a boolean value", "INVALID_BOOLEAN"
                    )
                return None
            case FieldType.NUMBER:
                return self._validate_number(value, rules)

    def _error(self, message: str, code: str) -> FieldError:
        return FieldError(field=self.field.key, message=message, code=code)

    def _validate_string(self, value: Any, rules: ValidationRules) -> FieldError | None:
        key = self.field.key
        text = value if isinstance(value, str) else str(value)

        # A zero length bound is the same as no bound
        if rules.min_length and len(text) < rules.min_length:
            return self._error(
                f"Field '{key}' must be at least {rules.min_length} characters",
                "MIN_LENGTH",
            )
        if rules.max_length and len(text) > rules.max_length:
            return self._error(
                f"Field '{key}' must not exceed {rules.max_length} characters",
                "MAX_LENGTH",
            )
        if rules.pattern and not _compile_pattern(key, rules.pattern).search(text):
            return self._error(f"Field '{key}' format is invalid", "PATTERN_MISMATCH")
        return None

    def _validate_date(self, value: Any, rules: ValidationRules) -> FieldError | None:
        key = self.field.key
        if not isinstance(value, date):
            return self._error(f"Field '{key}' must be a valid date", "INVALID_DATE")

        instant = as_utc(value)

        lower = _date_bound(rules.min_value)
        if lower is not None and instant < lower:
            return self._error(
                f"Field '{key}' must be after {format_iso(lower)}", "MIN_VALUE"
            )

        upper = _date_bound(rules.max_value)
        if upper is not None and instant > upper:
            return self._error(
                f"Field '{key}' must be before {format_iso(upper)}", "MAX_VALUE"
            )
        return None

    def _validate_number(self, value: Any, rules: ValidationRules) -> FieldError | None:
        key = self.field.key
        number = to_number(value)
        lower = numeric_bound(key, "minValue", rules.min_value)
        upper = numeric_bound(key, "maxValue", rules.max_value)

        # A value that is not a number fails any declared bound
        if lower is not None and (number is None or number < lower):
            return self._error(
                f"Field '{key}' must be at least {_format_number(lower)}",
                "MIN_VALUE",
            )
        if upper is not None and (number is None or number > upper):
            return self._error(
                f"Field '{key}' must not exceed {_format_number(upper)}",
                "MAX_VALUE",
            )
        return None


def _compile_pattern(key: str, pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise SchemaConfigurationError(
            f"Field '{key}' has an invalid pattern {pattern!r}: {e}"
        ) from e


def _date_bound(bound: Any):
    """Resolve a minValue/maxValue into a UTC datetime; 0 and "" mean no bound."""
    if not bound:
        return None
    parsed = to_datetime(bound)
    if parsed is None:
        return None
    return as_utc(parsed)


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def validate_field(field: FieldDefinition, value: Any) -> str | None:
    """Validate one coerced value; return the first error message or None."""
    error = FieldConstraintValidator(field=field).validate(value)
    return error.message if error else None
