import json
from pathlib import Path

import pytest

from ansiview.settings import (
    InvalidKey,
    InvalidValue,
    Schema,
    Settings,
    SettingsError,
    get_setting,
    load_settings,
)
from ansiview.settings_schema import SCHEMA

DEFAULTS = {
    "ansi": {
        "foreground": "rgb(204,204,204)",
        "background": "rgb(31,31,31)",
        "contrast_correction": True,
        "minimum_contrast": 4.5,
    }
}


def test_build_default() -> None:
    assert Schema(SCHEMA).build_default() == DEFAULTS


def test_get_setting() -> None:
    assert get_setting(DEFAULTS, "ansi.foreground", str) == "rgb(204,204,204)"
    assert get_setting(DEFAULTS, "ansi.minimum_contrast", (int, float)) == 4.5
    with pytest.raises(InvalidValue):
        get_setting(DEFAULTS, "ansi.foreground", int)
    with pytest.raises(InvalidValue):
        get_setting(DEFAULTS, "ansi.foreground.red")
    with pytest.raises(KeyError):
        get_setting(DEFAULTS, "ansi.missing")


def test_settings_get_expands_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANSIVIEW_TEST_BACKGROUND", "#000000")
    schema = Schema(SCHEMA)
    settings = Settings(schema, schema.build_default())
    settings.set("ansi.background", "$ANSIVIEW_TEST_BACKGROUND")
    assert settings.get("ansi.background", str) == "#000000"


def test_settings_set() -> None:
    schema = Schema(SCHEMA)
    settings = Settings(schema, {})
    settings.set("ansi.minimum_contrast", 7)
    assert settings.data == {"ansi": {"minimum_contrast": 7}}
    with pytest.raises(InvalidKey):
        settings.set("ansi.nope", 1)
    with pytest.raises(InvalidKey):
        settings.set("colors", 1)


def test_load_settings_writes_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    settings = load_settings(Schema(SCHEMA), path)
    assert settings.data == DEFAULTS
    assert json.loads(path.read_text("utf-8")) == DEFAULTS


def test_load_settings_merges_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"ansi": {"background": "#ffffff"}}), "utf-8")
    settings = load_settings(Schema(SCHEMA), path)
    assert settings.get("ansi.background", str) == "#ffffff"
    assert settings.get("ansi.foreground", str) == "rgb(204,204,204)"


@pytest.mark.parametrize("text", ["{not json", "[1, 2]"])
def test_load_settings_invalid(tmp_path: Path, text: str) -> None:
    path = tmp_path / "settings.json"
    path.write_text(text, "utf-8")
    with pytest.raises(SettingsError):
        load_settings(Schema(SCHEMA), path)
