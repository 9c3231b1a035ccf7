"""Tests for FieldForge CLI commands."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from fieldforge.cli.main import cli


METADATA_DIR = Path(__file__).resolve().parents[1] / "metadata"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner):
    """Invoke the CLI against the repository's sample metadata."""

    def _invoke(*args):
        return runner.invoke(cli, ["--metadata-path", str(METADATA_DIR), *args])

    return _invoke


def _write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data))
    return path


class TestFieldsProcess:
    def test_valid_data_prints_record(self, invoke, tmp_path):
        data = _write_json(tmp_path / "data.json", {
            "subtitle": "Hi",
            "readingTime": "12",
            "embargoUntil": "2024-03-01",
            "sku": "ABC-1234",
            "unrelated": True,
        })
        result = invoke("fields", "process", "article", str(data))

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "subtitle": "Hi",
            "readingTime": 12.0,
            "featured": False,
            "embargoUntil": "2024-03-01T00:00:00.000Z",
            "sku": "ABC-1234",
            "summary": None,
        }

    def test_defaults_fill_missing_values(self, invoke, tmp_path):
        data = _write_json(tmp_path / "data.json", {"sku": "XYZ-0001"})
        result = invoke("fields", "process", "article", str(data))

        record = json.loads(result.output)
        assert record["readingTime"] == 5
        assert record["featured"] is False

    def test_invalid_data_lists_every_error(self, invoke, tmp_path):
        data = _write_json(tmp_path / "data.json", {"sku": "bad", "readingTime": 500})
        result = invoke("fields", "process", "article", str(data))

        assert result.exit_code == 1
        assert "readingTime: Field 'readingTime' must not exceed 120" in result.output
        assert "sku: Field 'sku' format is invalid" in result.output
        assert "2 field error(s)" in result.output

    def test_yaml_data_file(self, invoke, tmp_path):
        data = tmp_path / "data.yaml"
        data.write_text("sku: ABC-9999\nfeatured: 'yes'\n")
        result = invoke("fields", "process", "article", str(data))

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["featured"] is True

    def test_unknown_schema(self, invoke, tmp_path):
        data = _write_json(tmp_path / "data.json", {})
        result = invoke("fields", "process", "nope", str(data))
        assert result.exit_code == 1
        assert "Unknown schema 'nope'" in result.output

    def test_non_mapping_data(self, invoke, tmp_path):
        data = _write_json(tmp_path / "data.json", [1, 2])
        result = invoke("fields", "process", "article", str(data))
        assert result.exit_code == 1


class TestFieldsShow:
    def test_shows_resolved_schema(self, invoke):
        result = invoke("fields", "show", "article")

        assert result.exit_code == 0, result.output
        fields = json.loads(result.output)
        assert [f["key"] for f in fields] == [
            "subtitle", "readingTime", "featured", "embargoUntil", "sku", "summary",
        ]
        assert fields[5]["label"] == "Summary"


class TestFiltersBuild:
    def test_from_conditions_file(self, invoke, tmp_path):
        conditions = _write_json(tmp_path / "conditions.json", [
            {"id": "1", "field": "status", "operator": "equals", "value": "published"},
            {"id": "2", "field": "views", "operator": "gt", "value": 100},
            {"id": "3", "field": "title", "operator": "contains", "value": ""},
        ])
        result = invoke(
            "filters", "build", str(conditions), "--page", "2", "--page-size", "20"
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "status": "published",
            "views[gt]": 100,
            "page[number]": 2,
            "page[size]": 20,
        }

    def test_conditions_under_key(self, invoke, tmp_path):
        conditions = _write_json(tmp_path / "conditions.json", {
            "conditions": [{"field": "tags", "operator": "exists", "value": False}],
        })
        result = invoke("filters", "build", str(conditions), "--sort", "-createdAt")
        assert json.loads(result.output) == {"tags[exists]": False, "sort": "-createdAt"}

    def test_from_view(self, invoke):
        result = invoke("filters", "build", "--view", "yaml:published-this-year")

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "status": "published",
            "createdAt[gte]": "2024-01-01T00:00:00.000Z",
        }

    def test_unknown_view(self, invoke):
        result = invoke("filters", "build", "--view", "yaml:nope")
        assert result.exit_code == 1
        assert "Unknown view" in result.output

    def test_requires_exactly_one_source(self, invoke, tmp_path):
        conditions = _write_json(tmp_path / "c.json", [])
        assert invoke("filters", "build").exit_code == 2
        assert invoke("filters", "build", str(conditions), "--view", "x").exit_code == 2

    def test_malformed_condition(self, invoke, tmp_path):
        conditions = _write_json(tmp_path / "c.json", [{"operator": "gt"}])
        result = invoke("filters", "build", str(conditions))
        assert result.exit_code == 2
        assert "malformed condition" in result.output


class TestFiltersParse:
    def test_parses_query_string(self, invoke):
        result = invoke(
            "filters",
            "parse",
            "status=active&createdAt%5Bgte%5D=2023-01-01"
            "&page%5Bnumber%5D=2&page%5Bsize%5D=10&sort=-createdAt",
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "filter": {
                "status": "active",
                "createdAt": {"$gte": "2023-01-01T00:00:00.000Z"},
            },
            "sort": {"createdAt": -1},
            "skip": 10,
            "take": 10,
        }

    def test_allow_list(self, invoke):
        result = invoke("filters", "parse", "?status=active&views=3", "--allow", "views")
        assert result.exit_code == 0
        assert json.loads(result.stdout)["filter"] == {"views": 3}

    def test_page_size_limit_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("FIELDFORGE_MAX_LIMIT", "25")
        result = runner.invoke(cli, ["filters", "parse", "page%5Bsize%5D=100"])
        assert json.loads(result.output)["take"] == 25


class TestFiltersOperators:
    def test_lists_operators(self, invoke):
        result = invoke("filters", "operators", "articles")

        assert result.exit_code == 0, result.output
        assert "  status (select): equals, ne, in, nin, exists" in result.output
        assert "  slug (string): equals, startswith, regex" in result.output
        assert "  featured (boolean): equals, ne" in result.output

    def test_unknown_filter_set(self, invoke):
        result = invoke("filters", "operators", "nope")
        assert result.exit_code == 1


class TestHelp:
    def test_lists_command_groups(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for group in ("fields", "filters", "metadata"):
            assert group in result.output
