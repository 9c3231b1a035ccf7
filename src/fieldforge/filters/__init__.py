"""Filter conditions, the query compiler and the query parser."""

from fieldforge.filters.query_builder import (
    available_operators,
    build_complete_query,
    build_filter_query,
    count_active_filters,
    is_empty_value,
    parse_value,
)
from fieldforge.filters.query_parser import ParsedQuery, QueryParser, parse_query
from fieldforge.filters.types import FilterCondition

__all__ = [
    "FilterCondition",
    "available_operators",
    "build_complete_query",
    "build_filter_query",
    "count_active_filters",
    "is_empty_value",
    "parse_value",
    "ParsedQuery",
    "QueryParser",
    "parse_query",
]
