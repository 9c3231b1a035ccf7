"""Read flat list-endpoint query parameters back into a structured query.

This is the receiving side of build_complete_query:

    {"page[number]": "2", "page[size]": "10", "status": "active",
     "createdAt[gte]": "2023-01-01", "sort": "-createdAt,name"}

becomes

    ParsedQuery(
        filter={"status": "active", "createdAt": {"$gte": datetime(2023, 1, 1)}},
        sort={"createdAt": -1, "name": 1},
        skip=10,
        take=10,
    )

Anything suspicious (unknown operators, odd field names, fields outside the
allow-list) is dropped with a warning rather than rejected.
"""

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote

from fieldforge.config import QueryParsingConfig
from fieldforge.validation.coercion import to_datetime

logger = logging.getLogger(__name__)

MAX_SAFE_INTEGER = 2**53 - 1
MAX_STRING_LENGTH = 1000

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}:\d{2}(\.\d{3})?Z?)?$")
NUMERIC_PATTERN = re.compile(r"^-?\d+(\.\d+)?$")
OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
FIELD_NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_.]*$")
LEADING_INTEGER_PATTERN = re.compile(r"^\s*([+-]?\d+)")
UNSAFE_CHARACTERS = re.compile(r"[<>'\"&]")

RESERVED_FIELD_NAMES = frozenset({
    "$where", "$expr", "$jsonSchema", "$regex", "$options",
    "$elemMatch", "$all", "$size", "$mod", "$type", "$exists",
    "constructor", "prototype", "__proto__",
})

ALLOWED_OPERATORS = frozenset({
    "gte", "lte", "gt", "lt", "ne", "in", "nin",
    "contains", "like", "startswith", "endswith",
    "exists", "size", "regex",
})

# Pagination and sort keys, including common misspellings
SPECIAL_PARAMETERS = (
    re.compile(r"^page\[size\]$", re.IGNORECASE),
    re.compile(r"^page\[number\]$", re.IGNORECASE),
    re.compile(r"^sort$", re.IGNORECASE),
    re.compile(r"^pgae\[size\]$", re.IGNORECASE),
    re.compile(r"^pgae\[number\]$", re.IGNORECASE),
    re.compile(r"^page\[szie\]$", re.IGNORECASE),
    re.compile(r"^page\[nubmer\]$", re.IGNORECASE),
)


@dataclass
class ParsedQuery:
    """A structured list query.

    Attributes:
        filter: Field -> value, or field -> {"$op": value} for operator filters
        sort: Field -> 1 (ascending) or -1 (descending)
        skip: Number of records to skip
        take: Number of records to return
    """

    filter: dict[str, Any] = field(default_factory=dict)
    sort: dict[str, int] = field(default_factory=dict)
    skip: int = 0
    take: int = 10

    def to_dict(self) -> dict[str, Any]:
        return {
            "filter": self.filter,
            "sort": self.sort,
            "skip": self.skip,
            "take": self.take,
        }


class QueryParser:
    """Parses flat query parameters according to a QueryParsingConfig."""

    def __init__(self, config: QueryParsingConfig | None = None):
        self.config = config or QueryParsingConfig()

    def parse(self, params: Mapping[str, Any]) -> ParsedQuery:
        result = ParsedQuery(
            sort=dict(self.config.default_sort),
            take=self.config.default_limit,
        )
        self._parse_pagination(params, result)
        self._parse_sorting(params, result)
        self._parse_filters(params, result)
        return result

    # ------------------------------------------------------------------
    # Pagination and sorting
    # ------------------------------------------------------------------

    def _parse_pagination(self, params: Mapping[str, Any], result: ParsedQuery) -> None:
        if "page[number]" not in params and "page[size]" not in params:
            result.skip = 0
            result.take = self.config.default_limit
            return

        page_number = _parse_integer(params.get("page[number]"), 1)
        page_size = min(
            _parse_integer(params.get("page[size]"), self.config.default_limit),
            self.config.max_limit,
        )
        result.skip = (page_number - 1) * page_size
        result.take = page_size

    def _parse_sorting(self, params: Mapping[str, Any], result: ParsedQuery) -> None:
        raw = params.get("sort")
        if not raw:
            result.sort = dict(self.config.default_sort)
            return

        fields = raw if isinstance(raw, (list, tuple)) else str(raw).split(",")
        sort: dict[str, int] = {}
        for name in fields:
            name = str(name).strip()
            if name.startswith("-"):
                sort[name[1:]] = -1
            elif name:
                sort[name] = 1

        result.sort = sort or dict(self.config.default_sort)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def _parse_filters(self, params: Mapping[str, Any], result: ParsedQuery) -> None:
        allowed = self.config.allowed_filters

        for key, value in params.items():
            if is_special_parameter(key):
                continue
            if value is None or (isinstance(value, str) and value == ""):
                continue

            field_name = key.split("[", 1)[0]
            if not is_valid_field_name(field_name):
                logger.warning("Invalid field name '%s' detected and ignored", field_name)
                continue

            if allowed and field_name not in allowed:
                logger.warning(
                    "Filter '%s' is not in allowed_filters and will be ignored",
                    field_name,
                )
                continue

            if "[" in key and "]" in key:
                self._parse_operator_filter(key, value, result.filter)
            else:
                result.filter[key] = parse_query_value(value)

    def _parse_operator_filter(self, key: str, value: Any, filter: dict[str, Any]) -> None:
        field_name, _, rest = key.partition("[")
        operator = rest.replace("]", "")

        if not is_valid_operator(operator):
            logger.warning("Invalid operator '%s' detected and ignored", operator)
            return

        clause = build_operator_clause(operator, value)
        existing = filter.get(field_name)
        if isinstance(existing, dict):
            existing.update(clause)
        else:
            filter[field_name] = clause


def build_operator_clause(operator: str, value: Any) -> dict[str, Any]:
    """Convert an operator and raw value into a {"$op": value} clause."""
    op = operator.lower()
    match op:
        case "gte" | "lte" | "gt" | "lt" | "ne":
            return {f"${op}": parse_query_value(value)}
        case "in" | "nin":
            if isinstance(value, (list, tuple)):
                return {f"${op}": [parse_query_value(v) for v in value]}
            return {f"${op}": [parse_query_value(value)]}
        case "contains" | "like" | "regex":
            return {"$regex": value, "$options": "i"}
        case "startswith":
            return {"$regex": f"^{value}", "$options": "i"}
        case "endswith":
            return {"$regex": f"{value}$", "$options": "i"}
        case "exists":
            return {"$exists": value is True or value == "true"}
        case "size":
            return {"$size": _parse_integer(value, 0)}
        case _:
            logger.warning("Unknown operator '%s', treating as equality", operator)
            return {"$eq": parse_query_value(value)}


def parse_query_value(value: Any) -> Any:
    """Convert a raw query string value to bool, datetime, number or a cleaned string."""
    if value is None:
        return value

    if isinstance(value, Mapping):
        logger.warning("Object values not allowed in filters, converting to string")
        return str(value)
    if isinstance(value, (list, tuple)):
        logger.warning("Array values not allowed in filters, converting to string")
        return ",".join(str(v) for v in value)

    if not isinstance(value, str):
        return value

    if len(value) > MAX_STRING_LENGTH:
        logger.warning("String too long, truncating")
        value = value[:MAX_STRING_LENGTH]

    if value == "true":
        return True
    if value == "false":
        return False

    if ISO_DATE_PATTERN.match(value):
        parsed = to_datetime(value)
        if parsed is not None:
            return parsed

    if NUMERIC_PATTERN.match(value):
        number = float(value) if "." in value else int(value)
        if abs(number) > MAX_SAFE_INTEGER:
            logger.warning("Number too large, clamping to %d", MAX_SAFE_INTEGER)
            return MAX_SAFE_INTEGER if number > 0 else -MAX_SAFE_INTEGER
        return number

    if OBJECT_ID_PATTERN.match(value):
        return value

    return UNSAFE_CHARACTERS.sub("", value)


def is_special_parameter(key: str) -> bool:
    normalized = unquote(key).lower()
    return any(pattern.match(normalized) for pattern in SPECIAL_PARAMETERS)


def is_valid_field_name(name: str) -> bool:
    return bool(FIELD_NAME_PATTERN.match(name)) and name not in RESERVED_FIELD_NAMES


def is_valid_operator(operator: str) -> bool:
    return operator.lower() in ALLOWED_OPERATORS


def _parse_integer(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        match = LEADING_INTEGER_PATTERN.match(value)
        if match:
            return int(match.group(1))
    return default


def parse_query(
    params: Mapping[str, Any],
    config: QueryParsingConfig | None = None,
) -> ParsedQuery:
    """Parse flat query parameters with the given (or default) configuration."""
    return QueryParser(config).parse(params)
