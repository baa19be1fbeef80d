"""Tests for Settings serialization and the JSON settings store."""

import json

from simplecalc.models import DEFAULT_OPERATIONS, Settings
from simplecalc.store import load_settings, save_settings


def test_defaults():
    s = Settings()
    assert s.display_name == "User"
    assert s.precision == 2
    assert s.allowed_operations == ["+", "-", "*", "/", "^", "sqrt"]


def test_default_operations_are_not_shared():
    a = Settings()
    a.allowed_operations.append("%")
    assert Settings().allowed_operations == DEFAULT_OPERATIONS
    assert "%" not in DEFAULT_OPERATIONS


def test_allows_is_case_insensitive():
    s = Settings(allowed_operations=["Sqrt", "x"])
    assert s.allows("sqrt")
    assert s.allows("SQRT")
    assert s.allows("X")
    assert not s.allows("+")


def test_save_and_load(tmp_path):
    path = tmp_path / "calc.json"
    original = Settings(display_name="Ada", precision=4, allowed_operations=["+", "sqrt"])
    assert save_settings(original, path) == path
    assert load_settings(path) == original


def test_saved_file_is_indented_json(tmp_path):
    path = tmp_path / "calc.json"
    save_settings(Settings(), path)
    text = path.read_text(encoding="utf-8")
    assert "\n  " in text
    assert json.loads(text) == {
        "display_name": "User",
        "precision": 2,
        "allowed_operations": ["+", "-", "*", "/", "^", "sqrt"],
    }


def test_save_creates_parent_dirs(tmp_path):
    path = tmp_path / "nested" / "dir" / "calc.json"
    save_settings(Settings(), path)
    assert path.exists()


def test_load_missing_file(tmp_path):
    assert load_settings(tmp_path / "nope.json") is None


def test_load_corrupt_file(tmp_path):
    path = tmp_path / "calc.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_settings(path) is None


def test_load_non_object(tmp_path):
    path = tmp_path / "calc.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert load_settings(path) is None


def test_load_fills_missing_fields(tmp_path):
    path = tmp_path / "calc.json"
    path.write_text(json.dumps({"display_name": "Bo"}), encoding="utf-8")
    assert load_settings(path) == Settings(display_name="Bo")


def test_load_repairs_invalid_fields(tmp_path):
    path = tmp_path / "calc.json"
    path.write_text(json.dumps({
        "display_name": "   ",
        "precision": -3,
        "allowed_operations": "+,-",
    }), encoding="utf-8")
    assert load_settings(path) == Settings()


def test_load_rejects_boolean_precision():
    assert Settings.from_dict({"precision": True}).precision == 2


def test_load_cleans_operation_entries():
    s = Settings.from_dict({"allowed_operations": [" + ", "", 3, None, "sqrt"]})
    assert s.allowed_operations == ["+", "sqrt"]


def test_load_keeps_empty_operation_list():
    s = Settings.from_dict({"allowed_operations": []})
    assert s.allowed_operations == []


def test_name_is_trimmed():
    assert Settings.from_dict({"display_name": "  Cy  "}).display_name == "Cy"
