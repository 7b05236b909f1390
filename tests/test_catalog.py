"""Tests for catalog loading and validation."""

import json

import pytest

from generators.step_01_catalog import (
    CatalogError,
    find_entity,
    load_catalog,
    load_catalogs,
    load_optional_catalog,
    read_json_array,
    validate_catalog,
)


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestReadJsonArray:
    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            read_json_array(tmp_path / "players.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "players.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(CatalogError, match="Invalid JSON"):
            read_json_array(path)

    def test_not_an_array(self, tmp_path):
        path = _write(tmp_path / "players.json", {"id": "kodi"})
        with pytest.raises(CatalogError, match="JSON array"):
            read_json_array(path)

    def test_catalog_error_is_value_error(self, tmp_path):
        with pytest.raises(ValueError):
            read_json_array(tmp_path / "nope.json")


class TestValidateCatalog:
    def test_fixture_catalogs_are_valid(self, players, devices, features, issues):
        assert validate_catalog(players, "player") == []
        assert validate_catalog(devices, "device") == []
        assert validate_catalog(features, "feature") == []
        assert validate_catalog(issues, "issue") == []

    def test_missing_required_fields(self):
        errors = validate_catalog([{"id": "kodi"}], "player")
        assert any("'slug' is required" in e for e in errors)
        assert any("'name' is required" in e for e in errors)

    def test_duplicate_id(self):
        records = [
            {"id": "kodi", "slug": "kodi", "name": "Kodi"},
            {"id": "kodi", "slug": "kodi-2", "name": "Kodi Again"},
        ]
        errors = validate_catalog(records, "player")
        assert errors == ["player 2: duplicate id 'kodi'"]

    def test_duplicate_slug(self):
        records = [
            {"id": "a", "slug": "same", "name": "A"},
            {"id": "b", "slug": "same", "name": "B"},
        ]
        assert validate_catalog(records, "device") == ["device 2: duplicate slug 'same'"]

    def test_list_field_type(self):
        errors = validate_catalog([{"id": "a", "slug": "a", "name": "A", "platforms": "android"}], "player")
        assert errors == ["player 1 (a): 'platforms' must be a list"]

    def test_null_list_fields_are_treated_as_missing(self):
        record = {"id": "a", "slug": "a", "name": "A", "platforms": None, "features": None,
                  "pros": None, "cons": None, "keywords": None}
        assert validate_catalog([record], "player") == []

    def test_malformed_text_fields_fall_back(self):
        record = {"id": "a", "slug": "a", "name": "A", "pros": "Fast", "keywords": {"x": 1}}
        assert validate_catalog([record], "player") == []

    def test_non_string_id_and_slug(self):
        errors = validate_catalog([{"id": ["a"], "slug": 7, "name": "A"}], "player")
        assert errors == [
            "player 1: 'id' must be a string, got list",
            "player 1: 'slug' must be a string, got int",
        ]

    def test_non_string_ids_do_not_break_duplicate_check(self):
        records = [
            {"id": {"k": "v"}, "slug": "a", "name": "A"},
            {"id": "b", "slug": ["b"], "name": "B"},
        ]
        errors = validate_catalog(records, "device")
        assert len(errors) == 2
        assert all("must be a string" in e for e in errors)

    def test_non_object_record(self):
        errors = validate_catalog(["kodi"], "player")
        assert errors == ["player 1: expected an object, got str"]


class TestLoadCatalog:
    def test_reports_every_problem_at_once(self, tmp_path):
        path = _write(tmp_path / "players.json", [
            {"id": "a", "slug": "a"},
            {"id": "a", "slug": "b", "name": "B"},
        ])
        with pytest.raises(CatalogError) as exc:
            load_catalog(path, "player")
        message = str(exc.value)
        assert message.startswith("players.json validation failed:")
        assert "'name' is required" in message
        assert "duplicate id 'a'" in message

    def test_optional_catalog_absent(self, tmp_path):
        assert load_optional_catalog(tmp_path / "features.json", "feature") is None

    def test_optional_catalog_malformed_is_fatal(self, tmp_path):
        path = tmp_path / "issues.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_optional_catalog(path, "issue")


class TestLoadCatalogs:
    def test_loads_all(self, data_dir):
        catalogs = load_catalogs(data_dir)
        assert len(catalogs["players"]) == 4
        assert len(catalogs["devices"]) == 5
        assert len(catalogs["features"]) == 2
        assert len(catalogs["issues"]) == 2

    def test_optional_catalogs_none_when_missing(self, data_dir):
        (data_dir / "features.json").unlink()
        (data_dir / "issues.json").unlink()
        catalogs = load_catalogs(data_dir)
        assert catalogs["features"] is None
        assert catalogs["issues"] is None

    def test_missing_devices_is_fatal(self, data_dir):
        (data_dir / "devices.json").unlink()
        with pytest.raises(CatalogError, match="devices.json"):
            load_catalogs(data_dir)


class TestFindEntity:
    def test_by_id_or_slug(self):
        records = [{"id": "p1", "slug": "tivimate"}]
        assert find_entity(records, "p1") is records[0]
        assert find_entity(records, "tivimate") is records[0]
        assert find_entity(records, "kodi") is None
