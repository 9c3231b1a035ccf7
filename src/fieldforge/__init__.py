"""FieldForge: schema-driven custom fields and filter queries.

Usage:
    from fieldforge import process_custom_fields, build_complete_query

    record = process_custom_fields(fields, raw_data)
    query = build_complete_query(conditions, page=2, page_size=20)
"""

from fieldforge.core.types import FieldType, FilterFieldType, FilterOperator
from fieldforge.errors import (
    CustomFieldValidationError,
    FieldForgeError,
    SchemaConfigurationError,
)
from fieldforge.filters import (
    FilterCondition,
    build_complete_query,
    build_filter_query,
    parse_query,
    parse_value,
)
from fieldforge.metadata.loader import FieldDefinition, FilterFieldConfig, ValidationRules
from fieldforge.validation import (
    convert_value,
    evaluate_custom_fields,
    process_custom_fields,
    validate_field,
)
from fieldforge.views import FilterView, FilterViewCollection

__version__ = "0.1.0"

__all__ = [
    "FieldType",
    "FilterFieldType",
    "FilterOperator",
    "CustomFieldValidationError",
    "FieldForgeError",
    "SchemaConfigurationError",
    "FilterCondition",
    "build_complete_query",
    "build_filter_query",
    "parse_query",
    "parse_value",
    "FieldDefinition",
    "FilterFieldConfig",
    "ValidationRules",
    "convert_value",
    "evaluate_custom_fields",
    "process_custom_fields",
    "validate_field",
    "FilterView",
    "FilterViewCollection",
]
