"""Tests for filter views and the YAML view loader."""

from pathlib import Path

import pytest
import yaml

from fieldforge.core.types import FilterOperator
from fieldforge.filters import build_filter_query
from fieldforge.filters.types import FilterCondition
from fieldforge.views import FilterView, FilterViewCollection, ViewConfigLoader, ViewSource


@pytest.fixture
def views_dir(tmp_path):
    """Create a temporary views directory with test YAML files."""
    views = tmp_path / "views"
    views.mkdir()

    (views / "active-items.yaml").write_text(yaml.dump({
        "view": {
            "name": "Active items",
            "description": "Everything still in play",
            "conditions": [
                {"id": "c1", "field": "status", "operator": "equals", "value": "active"},
                {"id": "c2", "field": "price", "operator": "gte", "value": 10},
            ],
        }
    }))

    (views / "untagged.yaml").write_text(yaml.dump({
        "view": {
            "name": "Untagged",
            "conditions": [
                {"field": "tags", "operator": "exists", "value": False},
            ],
        }
    }))

    (views / "notes.yaml").write_text(yaml.dump({"title": "not a view"}))

    return views


def make_condition(field: str = "status", value="active", operator=FilterOperator.EQUALS):
    return FilterCondition(id="c1", field=field, operator=operator, value=value)


class TestViewConfigLoader:
    def test_loads_views_with_yaml_ids(self, views_dir):
        loader = ViewConfigLoader(views_dir)
        loader.load_all()

        ids = sorted(v.id for v in loader.list_views())
        assert ids == ["yaml:active-items", "yaml:untagged"]

    def test_view_contents(self, views_dir):
        loader = ViewConfigLoader(views_dir)
        loader.load_all()

        view = loader.get_view("yaml:active-items")
        assert view.name == "Active items"
        assert view.description == "Everything still in play"
        assert view.source == ViewSource.YAML
        assert [c.operator for c in view.conditions] == [
            FilterOperator.EQUALS,
            FilterOperator.GTE,
        ]

    def test_condition_without_id_gets_one(self, views_dir):
        loader = ViewConfigLoader(views_dir)
        loader.load_all()

        condition = loader.get_view("yaml:untagged").conditions[0]
        assert condition.id
        assert condition.value is False

    def test_view_compiles_to_query(self, views_dir):
        loader = ViewConfigLoader(views_dir)
        loader.load_all()

        query = build_filter_query(loader.get_view("yaml:untagged").conditions)
        assert query == {"tags[exists]": False}

    def test_file_without_view_key_is_skipped(self, views_dir, caplog):
        loader = ViewConfigLoader(views_dir)
        loader.load_all()

        assert loader.get_view("yaml:notes") is None
        assert "no 'view' key" in caplog.text

    def test_missing_directory(self, tmp_path):
        loader = ViewConfigLoader(tmp_path / "nope")
        loader.load_all()
        assert loader.list_views() == []

    def test_unknown_view(self, views_dir):
        loader = ViewConfigLoader(views_dir)
        loader.load_all()
        assert loader.get_view("yaml:missing") is None

    def test_collection(self, views_dir):
        loader = ViewConfigLoader(views_dir)
        loader.load_all()
        assert len(loader.collection()) == 2


class TestFilterView:
    def test_create_snapshots_conditions(self):
        view = FilterView.create("  My view ", [make_condition()], description="  ")
        assert view.name == "My view"
        assert view.description is None
        assert view.source == ViewSource.SESSION
        assert view.conditions == (make_condition(),)
        assert view.id

    def test_create_accepts_dicts(self):
        view = FilterView.create("Drafts", [{"field": "status", "value": "draft"}])
        assert view.conditions[0].operator == FilterOperator.EQUALS

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError, match="name is required"):
            FilterView.create("   ", [make_condition()])

    def test_dict_round_trip(self):
        view = FilterView.create("Cheap", [make_condition("price", 5, FilterOperator.LT)])
        data = view.to_dict()
        assert data["conditions"] == [
            {"id": "c1", "field": "price", "operator": "lt", "value": 5}
        ]
        assert FilterView.from_dict(data) == view


class TestFilterViewCollection:
    def test_save_appends(self):
        a = FilterView.create("A", [])
        b = FilterView.create("B", [])
        collection = FilterViewCollection().save(a).save(b)
        assert [v.name for v in collection] == ["A", "B"]

    def test_save_replaces_in_place(self):
        a = FilterView.create("A", [])
        b = FilterView.create("B", [])
        renamed = FilterView(id=a.id, name="A2")
        collection = FilterViewCollection.of([a, b]).save(renamed)
        assert [v.name for v in collection] == ["A2", "B"]

    def test_collections_are_not_mutated(self):
        original = FilterViewCollection()
        original.save(FilterView.create("A", []))
        assert len(original) == 0

    def test_delete(self):
        a = FilterView.create("A", [])
        collection = FilterViewCollection.of([a]).delete(a.id)
        assert len(collection) == 0
        assert collection.get(a.id) is None

    def test_delete_unknown_is_noop(self):
        a = FilterView.create("A", [])
        collection = FilterViewCollection.of([a])
        assert collection.delete("missing") == collection


def test_repo_views_load():
    views_path = Path(__file__).resolve().parents[1] / "metadata" / "views"
    loader = ViewConfigLoader(views_path)
    loader.load_all()
    assert loader.get_view("yaml:published-this-year") is not None
