"""Tests for compiling filter conditions into query parameters."""

import pytest

from fieldforge.core.types import FilterFieldType, FilterOperator, get_default_operators
from fieldforge.filters import (
    FilterCondition,
    available_operators,
    build_complete_query,
    build_filter_query,
    count_active_filters,
    is_empty_value,
    parse_value,
)
from fieldforge.metadata.loader import FilterFieldConfig


def make_condition(field: str, operator=FilterOperator.EQUALS, value="", id: str = "c1"):
    return FilterCondition(id=id, field=field, operator=operator, value=value)


class TestIsEmptyValue:
    @pytest.mark.parametrize("value", [None, "", [], ()])
    def test_empty_values(self, value):
        assert is_empty_value(make_condition("a", value=value))

    @pytest.mark.parametrize("value", [0, False, " ", ["x"], "abc"])
    def test_non_empty_values(self, value):
        assert not is_empty_value(make_condition("a", value=value))

    @pytest.mark.parametrize("value", [False, None, ""])
    def test_exists_is_never_empty(self, value):
        assert not is_empty_value(make_condition("a", FilterOperator.EXISTS, value))


class TestParseValue:
    def test_date_prefix_becomes_iso_instant(self):
        assert parse_value("2024-01-01") == "2024-01-01T00:00:00.000Z"

    def test_datetime_with_offset_normalized_to_utc(self):
        assert parse_value("2024-01-01T10:30:00+02:00") == "2024-01-01T08:30:00.000Z"

    def test_unparseable_date_prefix_kept(self):
        assert parse_value("2024-13-45") == "2024-13-45"

    def test_date_not_at_start_kept(self):
        assert parse_value(" 2024-01-01") == " 2024-01-01"
        assert parse_value("due 2024-01-01") == "due 2024-01-01"

    @pytest.mark.parametrize("value", ["hello", 10, 2.5, True, False, None, ["2024-01-01"]])
    def test_other_values_pass_through(self, value):
        assert parse_value(value) == value


class TestBuildFilterQuery:
    def test_equals_and_operator_keys(self):
        query = build_filter_query([
            make_condition("status", value="active"),
            make_condition("price", FilterOperator.GT, 10),
        ])
        assert query == {"status": "active", "price[gt]": 10}

    def test_empty_conditions_are_dropped(self):
        query = build_filter_query([
            make_condition("status", value=""),
            make_condition("tags", FilterOperator.IN, []),
            make_condition("owner", value=None),
        ])
        assert query == {}

    def test_date_value_is_normalized(self):
        query = build_filter_query([
            make_condition("createdAt", FilterOperator.GTE, "2024-01-01"),
        ])
        assert query["createdAt[gte]"].startswith("2024-01-01T")

    def test_exists_false_is_kept(self):
        query = build_filter_query([make_condition("tags", FilterOperator.EXISTS, False)])
        assert query == {"tags[exists]": False}

    def test_list_value_is_kept_as_list(self):
        query = build_filter_query([make_condition("status", FilterOperator.IN, ["a", "b"])])
        assert query == {"status[in]": ["a", "b"]}

    def test_later_condition_on_same_key_wins(self):
        query = build_filter_query([
            make_condition("status", value="draft", id="1"),
            make_condition("status", value="published", id="2"),
        ])
        assert query == {"status": "published"}

    def test_unknown_operator_passes_through(self):
        query = build_filter_query([make_condition("title", "fuzzy", "abc")])
        assert query == {"title[fuzzy]": "abc"}

    def test_accepts_plain_dicts(self):
        query = build_filter_query([
            {"id": "1", "field": "title", "operator": "contains", "value": "news"},
            {"field": "status", "value": "active"},
        ])
        assert query == {"title[contains]": "news", "status": "active"}

    def test_no_conditions(self):
        assert build_filter_query([]) == {}


class TestBuildCompleteQuery:
    def test_pagination_and_sort(self):
        query = build_complete_query(
            [make_condition("status", value="active")],
            page=2,
            page_size=20,
            sort="-createdAt",
        )
        assert query == {
            "status": "active",
            "page[number]": 2,
            "page[size]": 20,
            "sort": "-createdAt",
        }

    def test_page_only_has_no_sort_key(self):
        query = build_complete_query([], page=1)
        assert query == {"page[number]": 1}
        assert "sort" not in query
        assert "page[size]" not in query

    def test_empty_sort_is_omitted(self):
        assert build_complete_query([], sort="") == {}

    def test_zero_page_is_kept(self):
        assert build_complete_query([], page=0) == {"page[number]": 0}


class TestAvailableOperators:
    def test_defaults_by_type(self):
        config = FilterFieldConfig(key="status", label="Status", type=FilterFieldType.SELECT)
        assert available_operators(config) == [
            FilterOperator.EQUALS,
            FilterOperator.NE,
            FilterOperator.IN,
            FilterOperator.NIN,
            FilterOperator.EXISTS,
        ]

    def test_boolean_defaults(self):
        config = FilterFieldConfig(key="flag", label="Flag", type=FilterFieldType.BOOLEAN)
        assert available_operators(config) == [FilterOperator.EQUALS, FilterOperator.NE]

    def test_lookup_by_type_name(self):
        assert get_default_operators("array") == [
            FilterOperator.IN,
            FilterOperator.NIN,
            FilterOperator.EXISTS,
        ]

    def test_declared_operators_override(self):
        config = FilterFieldConfig(
            key="slug",
            label="Slug",
            type=FilterFieldType.STRING,
            operators=(FilterOperator.EQUALS, FilterOperator.REGEX),
        )
        assert available_operators(config) == [FilterOperator.EQUALS, FilterOperator.REGEX]


class TestCountActiveFilters:
    def test_counts_conditions_that_reach_the_query(self):
        conditions = [
            make_condition("status", value="active"),
            make_condition("title", value=""),
            make_condition("tags", FilterOperator.EXISTS, False),
            make_condition("ids", FilterOperator.IN, []),
        ]
        assert count_active_filters(conditions) == 2

    def test_no_conditions(self):
        assert count_active_filters([]) == 0
