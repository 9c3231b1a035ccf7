"""Field type and filter operator registry."""

from enum import Enum


class FieldType(str, Enum):
    """Types a custom field value can be coerced to."""

    TEXT = "text"
    TEXTAREA = "textarea"
    RICH_TEXT = "rich-text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"

    @property
    def is_string(self) -> bool:
        return self in STRING_FIELD_TYPES


# Free-form string variants; these keep "" as a real value
STRING_FIELD_TYPES: frozenset[FieldType] = frozenset(
    {FieldType.TEXT, FieldType.TEXTAREA, FieldType.RICH_TEXT}
)


class FilterOperator(str, Enum):
    """Operators a filter condition can carry."""

    EQUALS = "equals"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    NIN = "nin"
    CONTAINS = "contains"
    STARTSWITH = "startswith"
    ENDSWITH = "endswith"
    EXISTS = "exists"
    REGEX = "regex"


class FilterFieldType(str, Enum):
    """Types a filterable field can be declared as."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    SELECT = "select"
    ARRAY = "array"


_COMPARISON_OPERATORS = [
    FilterOperator.EQUALS,
    FilterOperator.NE,
    FilterOperator.GT,
    FilterOperator.GTE,
    FilterOperator.LT,
    FilterOperator.LTE,
    FilterOperator.EXISTS,
]


# Operators offered when a filter field does not declare its own
DEFAULT_OPERATORS: dict[FilterFieldType, list[FilterOperator]] = {
    FilterFieldType.STRING: [
        FilterOperator.EQUALS,
        FilterOperator.NE,
        FilterOperator.CONTAINS,
        FilterOperator.STARTSWITH,
        FilterOperator.ENDSWITH,
        FilterOperator.EXISTS,
    ],
    FilterFieldType.NUMBER: list(_COMPARISON_OPERATORS),
    FilterFieldType.DATE: list(_COMPARISON_OPERATORS),
    FilterFieldType.BOOLEAN: [
        FilterOperator.EQUALS,
        FilterOperator.NE,
    ],
    FilterFieldType.SELECT: [
        FilterOperator.EQUALS,
        FilterOperator.NE,
        FilterOperator.IN,
        FilterOperator.NIN,
        FilterOperator.EXISTS,
    ],
    FilterFieldType.ARRAY: [
        FilterOperator.IN,
        FilterOperator.NIN,
        FilterOperator.EXISTS,
    ],
}


def get_default_operators(field_type: FilterFieldType | str) -> list[FilterOperator]:
    """Get the default operators for a filter field type."""
    return list(DEFAULT_OPERATORS[FilterFieldType(field_type)])
