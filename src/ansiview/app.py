from __future__ import annotations

from functools import cached_property
from pathlib import Path

from textual import containers, getters
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.screen import Screen

from ansiview.ansi import ANSIParser
from ansiview.paths import get_settings_path
from ansiview.settings import Schema, Settings, load_settings
from ansiview.settings_schema import SCHEMA
from ansiview.widgets.ansi_block import ANSIBlock


class MainScreen(Screen):
    BINDING_GROUP_TITLE = "Screen"

    ansi_block = getters.query_one(ANSIBlock)

    def __init__(self, ansi: str, parser: ANSIParser, title: str | None = None) -> None:
        self._ansi = ansi
        self._parser = parser
        super().__init__()
        if title is not None:
            self.sub_title = title

    def compose(self) -> ComposeResult:
        with containers.VerticalScroll():
            yield ANSIBlock(self._ansi, self._parser)

    def on_mount(self) -> None:
        self.ansi_block.focus()


class ANSIViewApp(App):
    """View a file containing ANSI escape sequences."""

    BINDING_GROUP_TITLE = "System"
    BINDINGS = [Binding("q", "quit", "Quit")]

    def __init__(
        self,
        ansi: str,
        *,
        title: str | None = None,
        parser: ANSIParser | None = None,
        settings_path: Path | None = None,
    ) -> None:
        self._ansi = ansi
        self._source_title = title
        self._parser = parser
        self._settings_path = settings_path
        super().__init__()

    @property
    def settings_path(self) -> Path:
        return self._settings_path or get_settings_path()

    @cached_property
    def settings_schema(self) -> Schema:
        return Schema(SCHEMA)

    @cached_property
    def settings(self) -> Settings:
        return load_settings(self.settings_schema, self.settings_path)

    @cached_property
    def parser(self) -> ANSIParser:
        if self._parser is not None:
            return self._parser
        return ANSIParser.from_settings(self.settings)

    def on_mount(self) -> None:
        self.theme = "dracula"

    def get_default_screen(self) -> Screen:
        return MainScreen(self._ansi, self.parser, self._source_title)
