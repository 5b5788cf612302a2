from __future__ import annotations

import re
from dataclasses import replace
from typing import Iterable, NamedTuple, TYPE_CHECKING

import rich.repr

from ansiview.color import (
    DEFAULT_BACKGROUND,
    DEFAULT_FOREGROUND,
    MINIMUM_CONTRAST,
    correct_contrast,
)
from ansiview.style import NULL_STYLE, ANSIStyle, apply_parameters

if TYPE_CHECKING:
    from ansiview.settings import Settings

ESCAPE = "\x1b"

RE_ESCAPE = re.compile(r"(\x1b\[[0-9;]*[mK])")


@rich.repr.auto
class ANSIToken(NamedTuple):
    """A run of literal text, or a single escape sequence."""

    text: str
    """Literal text, or the escape sequence."""
    style: ANSIStyle
    """Style after an escape, or the (contrast corrected) style of literal text."""
    is_escape: bool
    """Is this token an escape sequence?"""
    raw: str
    """Source text of the token."""

    def __rich_repr__(self) -> rich.repr.Result:
        yield self.text
        yield "style", self.style
        yield "is_escape", self.is_escape, False
        yield "raw", self.raw, self.text


class ANSIParser:
    """Splits text containing SGR sequences in to styled tokens.

    Args:
        default_foreground: Foreground for text with no foreground set.
        default_background: Background for text with no background set.
        minimum_contrast: Minimum contrast ratio of literal text.
    """

    def __init__(
        self,
        default_foreground: str = DEFAULT_FOREGROUND,
        default_background: str = DEFAULT_BACKGROUND,
        minimum_contrast: float = MINIMUM_CONTRAST,
    ) -> None:
        self.default_foreground = default_foreground
        self.default_background = default_background
        self.minimum_contrast = minimum_contrast

    def __repr__(self) -> str:
        return (
            f"ANSIParser({self.default_foreground!r}, "
            f"{self.default_background!r}, {self.minimum_contrast!r})"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> ANSIParser:
        """Build a parser from the `ansi` settings."""
        if settings.get("ansi.contrast_correction", bool):
            minimum_contrast = float(
                settings.get("ansi.minimum_contrast", (int, float))
            )
        else:
            minimum_contrast = 1.0
        return cls(
            settings.get("ansi.foreground", str),
            settings.get("ansi.background", str),
            minimum_contrast,
        )

    def _text_style(self, style: ANSIStyle) -> ANSIStyle:
        """Get the style used to render literal text."""
        color = correct_contrast(
            style.color or self.default_foreground,
            style.background_color or self.default_background,
            self.minimum_contrast,
        )
        return replace(style, color=color)

    def feed(self, text: str) -> Iterable[ANSIToken]:
        """Parse text in to tokens.

        Args:
            text: Text which may contain escape sequences.

        Yields:
            Tokens in source order.
        """
        style = NULL_STYLE
        # Odd parts of the split are escape sequences
        for index, part in enumerate(RE_ESCAPE.split(text)):
            if not part:
                continue
            if index % 2:
                if part.endswith("m"):
                    style = apply_parameters(style, part[2:-1])
                yield ANSIToken(part, style, True, part)
            else:
                yield ANSIToken(part, self._text_style(style), False, part)

    def tokenize(self, text: str) -> list[ANSIToken]:
        """Parse text in to a list of tokens."""
        return list(self.feed(text))


DEFAULT_PARSER = ANSIParser()


def tokenize(text: str) -> list[ANSIToken]:
    """Parse text in to ANSI tokens with the default colors.

    Args:
        text: Text which may contain escape sequences.

    Returns:
        A list of tokens. Joining the `raw` attribute of every token reproduces `text`.
    """
    return DEFAULT_PARSER.tokenize(text)


def strip(text: str) -> str:
    """Get the plain text, without SGR and erase-in-line sequences.

    Args:
        text: Text which may contain escape sequences.

    Returns:
        Text with escape sequences removed.
    """
    return RE_ESCAPE.sub("", text)


strip_ansi = strip
