"""Compile filter conditions into flat query parameters.

Keys follow the bracket convention read by list endpoints:
    status=active                 (equals)
    price[gt]=10                  (any other operator)
    page[number]=2, page[size]=20, sort=-createdAt

Only which keys and values exist is decided here; serializing them into a
query string (repeated vs comma-joined arrays) is left to the caller.
"""

import re
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from fieldforge.core.types import FilterOperator, get_default_operators
from fieldforge.filters.types import FilterCondition
from fieldforge.metadata.loader import FilterFieldConfig
from fieldforge.validation.coercion import format_iso, to_datetime

DATE_PREFIX_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")

ConditionLike = FilterCondition | dict[str, Any]


def is_empty_value(condition: ConditionLike) -> bool:
    """Whether a condition carries no value and should be dropped.

    An exists condition is never empty: its boolean is the signal itself.
    """
    condition = FilterCondition.coerce(condition)
    if condition.operator == FilterOperator.EXISTS:
        return False

    value = condition.value
    if value is None or (isinstance(value, str) and value == ""):
        return True
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def parse_value(value: Any) -> Any:
    """Normalize a condition value for the query.

    Strings starting with a YYYY-MM-DD date are re-serialized as a full ISO
    instant; every other value passes through untouched.
    """
    if value is None:
        return value
    if isinstance(value, (list, tuple, bool)):
        return value
    if isinstance(value, str) and DATE_PREFIX_PATTERN.match(value):
        parsed = to_datetime(value)
        return format_iso(parsed) if isinstance(parsed, datetime) else value
    return value


def condition_key(condition: FilterCondition) -> str:
    if condition.operator == FilterOperator.EQUALS:
        return condition.field
    return f"{condition.field}[{condition.operator_name}]"


def build_filter_query(conditions: Iterable[ConditionLike]) -> dict[str, Any]:
    """Convert filter conditions to query parameters.

    Conditions with an empty value are dropped. A later condition on the
    same key replaces an earlier one.
    """
    query: dict[str, Any] = {}
    for raw in conditions:
        condition = FilterCondition.coerce(raw)
        if is_empty_value(condition):
            continue
        query[condition_key(condition)] = parse_value(condition.value)
    return query


def build_complete_query(
    conditions: Iterable[ConditionLike],
    page: int | None = None,
    page_size: int | None = None,
    sort: str | None = None,
) -> dict[str, Any]:
    """Build the filter query plus pagination and sorting.

    Each of page, page_size and sort is only added when provided.
    """
    query = build_filter_query(conditions)

    if page is not None:
        query["page[number]"] = page

    if page_size is not None:
        query["page[size]"] = page_size

    if sort:
        query["sort"] = sort

    return query


def available_operators(config: FilterFieldConfig) -> list[FilterOperator]:
    """Operators offered for a filter field: its own list, else its type's defaults."""
    if config.operators:
        return list(config.operators)
    return get_default_operators(config.type)


def count_active_filters(conditions: Sequence[ConditionLike]) -> int:
    """Number of conditions that would end up in the query."""
    return sum(1 for c in conditions if not is_empty_value(c))
