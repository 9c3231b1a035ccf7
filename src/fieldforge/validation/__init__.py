"""FieldForge custom field validation.

Raw values flow through three steps:
- Coercion: untyped input -> declared field type (never raises)
- Defaults: declared default substituted when coercion yields None
- Constraints: required, length, pattern, range and type checks

Usage:
    from fieldforge.validation import process_custom_fields

    record = process_custom_fields(fields, request_body)
"""

from fieldforge.validation.coercion import convert_value
from fieldforge.validation.field_constraints import (
    FieldConstraintValidator,
    validate_field,
)
from fieldforge.validation.processing import (
    evaluate_custom_fields,
    process_custom_fields,
)
from fieldforge.validation.types import FieldError, FieldValidationResult

__all__ = [
    # Types
    "FieldError",
    "FieldValidationResult",
    # Steps
    "convert_value",
    "FieldConstraintValidator",
    "validate_field",
    # Driver
    "evaluate_custom_fields",
    "process_custom_fields",
]
