from __future__ import annotations

from textual.binding import Binding
from textual.content import Content
from textual.reactive import var
from textual.widgets import Static

from ansiview.ansi import ESCAPE, ANSIParser, strip
from ansiview.render import render_content

ESCAPE_SYMBOL = "␛"


class ANSIBlock(Static, can_focus=True):
    """Displays a block of text containing ANSI escape sequences."""

    DEFAULT_CSS = """
    ANSIBlock {
        width: 1fr;
        height: auto;
        padding: 0 1;
        &.-raw {
            color: $text-muted;
        }
    }
    """

    BINDING_GROUP_TITLE = "ANSI"
    BINDINGS = [
        Binding("r", "toggle_raw", "Raw / rendered"),
        Binding("c", "copy", "Copy text"),
    ]

    raw: var[bool] = var(False, toggle_class="-raw")

    def __init__(
        self,
        ansi: str = "",
        parser: ANSIParser | None = None,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        self._ansi = ansi
        self._parser = parser
        super().__init__(name=name, id=id, classes=classes)

    @property
    def ansi(self) -> str:
        """The source text."""
        return self._ansi

    @property
    def plain(self) -> str:
        """The text with escape sequences removed."""
        return strip(self._ansi)

    def on_mount(self) -> None:
        self._refresh_content()

    def set_ansi(self, ansi: str) -> None:
        self._ansi = ansi
        self._refresh_content()

    def get_content(self) -> Content:
        if self.raw:
            return Content(self._ansi.replace(ESCAPE, ESCAPE_SYMBOL))
        return render_content(self._ansi, self._parser)

    def _refresh_content(self) -> None:
        self.update(self.get_content())

    def watch_raw(self, raw: bool) -> None:
        self._refresh_content()

    def action_toggle_raw(self) -> None:
        self.raw = not self.raw

    def action_copy(self) -> None:
        self.app.copy_to_clipboard(self.plain)
        self.notify("Copied text to clipboard")
