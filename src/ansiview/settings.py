from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Required, Sequence, TypeAlias, TypedDict, TypeVar

from ansiview._loop import loop_last

log = logging.getLogger(__name__)


class SchemaDict(TypedDict, total=False):
    """Typing for schema data structure."""

    key: Required[str]
    title: Required[str]
    type: Required[str]
    help: str
    default: object
    fields: list[SchemaDict]


SettingsType: TypeAlias = dict[str, object]

ExpectType = TypeVar("ExpectType")


INPUT_TYPES = {"boolean", "number", "string"}


class SettingsError(Exception):
    """Base class for settings related errors."""


class InvalidKey(SettingsError):
    """The key is not in the schema."""


class InvalidValue(SettingsError):
    """The value was not of the expected type."""


def parse_key(key: str) -> Sequence[str]:
    return key.split(".")


def _type_name(expect_type: type | tuple[type, ...]) -> str:
    if isinstance(expect_type, tuple):
        return " or ".join(type_.__name__ for type_ in expect_type)
    return expect_type.__name__


def get_setting(
    settings: dict[str, object],
    key: str,
    expect_type: type[ExpectType] | tuple[type, ...] = object,
) -> ExpectType:
    """Get a key from a settings structure.

    Args:
        settings: A settings dictionary.
        key: A dot delimited key, e.g. "ansi.background"
        expect_type: The expected type of the value.

    Raises:
        InvalidValue: If the value is not the expected type.
        KeyError: If the key doesn't exist in settings.

    Returns:
        The value matching they key.
    """
    for last, key_component in loop_last(parse_key(key)):
        if last:
            result = settings[key_component]
            if not isinstance(result, expect_type):
                raise InvalidValue(
                    f"Expected {_type_name(expect_type)} type for {key!r}; found {result!r}"
                )
            return result  # type: ignore[return-value]
        else:
            sub_settings = settings[key_component]
            if not isinstance(sub_settings, dict):
                raise InvalidValue(f"Expected object for {key_component!r}")
            settings = sub_settings
    raise KeyError(key)


class Schema:
    def __init__(self, schema: list[SchemaDict]) -> None:
        self.schema = schema

    def get_field(self, key: str) -> SchemaDict:
        """Get the schema for a dotted key.

        Raises:
            InvalidKey: If the key is not in the schema.
        """
        fields = self.schema
        for last, key_component in loop_last(parse_key(key)):
            for field in fields:
                if field["key"] == key_component:
                    break
            else:
                raise InvalidKey(key)
            if last:
                return field
            fields = field.get("fields", [])
        raise InvalidKey(key)

    def build_default(self) -> dict[str, object]:
        settings: dict[str, object] = {}

        def set_defaults(schema: list[SchemaDict], settings: dict[str, object]) -> None:
            for sub_schema in schema:
                key = sub_schema["key"]
                type = sub_schema["type"]
                if type in INPUT_TYPES:
                    if (default := sub_schema.get("default")) is not None:
                        settings[key] = default

                elif type == "object":
                    if fields := sub_schema.get("fields"):
                        sub_settings = settings[key] = {}
                        set_defaults(fields, sub_settings)

        set_defaults(self.schema, settings)
        return settings

    def merge_defaults(self, settings: dict[str, object]) -> dict[str, object]:
        """Fill in any keys missing from `settings` with defaults."""

        def merge(defaults: dict[str, object], settings: dict[str, object]) -> None:
            for key, default in defaults.items():
                if key not in settings:
                    settings[key] = default
                elif isinstance(default, dict) and isinstance(settings[key], dict):
                    merge(default, settings[key])  # type: ignore[arg-type]

        merge(self.build_default(), settings)
        return settings


class Settings:
    """Stores schema backed settings."""

    def __init__(self, schema: Schema, settings: dict[str, object]) -> None:
        self._schema = schema
        self._settings = settings

    def __repr__(self) -> str:
        return f"Settings({self._settings!r})"

    @property
    def data(self) -> dict[str, object]:
        return self._settings

    def get(
        self,
        key: str,
        expect_type: type[ExpectType] | tuple[type, ...] = object,
    ) -> ExpectType:
        from os.path import expandvars

        setting = get_setting(self._settings, key, expect_type=expect_type)
        if isinstance(setting, str):
            setting = expandvars(setting)
        return setting  # type: ignore[return-value]

    def set(self, key: str, value: object) -> None:
        """Set a value.

        Raises:
            InvalidKey: If the key is not in the schema.
        """
        self._schema.get_field(key)
        *path, last_key = parse_key(key)
        settings = self._settings
        for key_component in path:
            settings = settings.setdefault(key_component, {})  # type: ignore[assignment]
        settings[last_key] = value


def load_settings(schema: Schema, path: Path) -> Settings:
    """Load settings from a JSON file, writing defaults if it doesn't exist.

    Args:
        schema: Settings schema.
        path: Path to settings JSON.

    Raises:
        SettingsError: If the file is not valid JSON.

    Returns:
        Settings.
    """
    if path.exists():
        try:
            settings = json.loads(path.read_text("utf-8"))
        except json.JSONDecodeError as error:
            raise SettingsError(f"Unable to read {str(path)!r}; {error}") from None
        if not isinstance(settings, dict):
            raise SettingsError(f"Expected a JSON object in {str(path)!r}")
        schema.merge_defaults(settings)
    else:
        settings = schema.build_default()
        path.write_text(json.dumps(settings, indent=4), "utf-8")
        log.info("wrote default settings to %s", path)
    return Settings(schema, settings)
