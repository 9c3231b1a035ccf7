"""Process raw custom field input against a field schema.

The schema is authoritative: only declared keys are read from the raw input
and written to the output record. Every field is processed even after a
failure so that all errors are reported at once.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from fieldforge.errors import CustomFieldValidationError
from fieldforge.metadata.loader import FieldDefinition
from fieldforge.validation.coercion import convert_value
from fieldforge.validation.field_constraints import FieldConstraintValidator
from fieldforge.validation.types import FieldError, FieldValidationResult

logger = logging.getLogger(__name__)


def resolve_value(field: FieldDefinition, raw_value: Any) -> Any:
    """Coerce a raw value, falling back to the coerced default when it yields None."""
    value = convert_value(raw_value, field.type)
    if value is None and field.has_default:
        value = convert_value(field.default_value, field.type)
    return value


def evaluate_custom_fields(
    fields: Sequence[FieldDefinition],
    raw_data: Mapping[str, Any],
) -> FieldValidationResult:
    """Coerce, default and validate raw values against a field schema.

    Args:
        fields: The field schema, in order
        raw_data: Untyped input keyed by field key; undeclared keys are ignored

    Returns:
        A FieldValidationResult. The record is only populated when every
        field is valid, so a partially valid record is never exposed.

    Raises:
        SchemaConfigurationError: If a field declares a malformed pattern.
    """
    if not fields:
        return FieldValidationResult()

    record: dict[str, Any] = {}
    errors: list[FieldError] = []

    for field in fields:
        value = resolve_value(field, raw_data.get(field.key))
        record[field.key] = value

        error = FieldConstraintValidator(field=field).validate(value)
        if error is not None:
            errors.append(error)

    if errors:
        logger.debug(
            "Custom field validation failed for %d of %d field(s)",
            len(errors),
            len(fields),
        )
        return FieldValidationResult(errors=errors)

    return FieldValidationResult(record=record)


def process_custom_fields(
    fields: Sequence[FieldDefinition],
    raw_data: Mapping[str, Any],
) -> dict[str, Any]:
    """Return the typed record for raw input, raising if any field is invalid.

    Raises:
        CustomFieldValidationError: With every field error, joined by "; ".
        SchemaConfigurationError: If a field declares a malformed pattern.
    """
    result = evaluate_custom_fields(fields, raw_data)
    if not result.valid:
        raise CustomFieldValidationError(result.errors)
    return result.record
