"""The SGR (Select Graphic Rendition) state machine.

Each SGR parameter is a transition from one `ANSIStyle` to the next. Styles are
immutable, so a token may keep a reference to the style in effect without
copying it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from functools import lru_cache
from types import MappingProxyType
from typing import Callable, Mapping, Sequence, TypeAlias

import rich.repr

log = logging.getLogger(__name__)


@rich.repr.auto
@dataclass(frozen=True, slots=True)
class ANSIStyle:
    """The accumulated style at a point in an ANSI stream."""

    color: str | None = None
    """Foreground color, or `None` for unset."""
    background_color: str | None = None
    """Background color, or `None` for unset."""
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False

    def __rich_repr__(self) -> rich.repr.Result:
        yield "color", self.color, None
        yield "background_color", self.background_color, None
        yield "bold", self.bold, False
        yield "italic", self.italic, False
        yield "underline", self.underline, False
        yield "strikethrough", self.strikethrough, False


NULL_STYLE = ANSIStyle()

_PALETTE = {
    0: "#000000",
    1: "#cd3131",
    2: "#0dbc79",
    3: "#e5e510",
    4: "#2472c8",
    5: "#bc3fbc",
    6: "#11a8cd",
    7: "#e5e5e5",
    60: "#666666",
    61: "#f14c4c",
    62: "#23d18b",
    63: "#f5f543",
    64: "#3b8eea",
    65: "#d670d6",
    66: "#29b8db",
    67: "#e5e5e5",
}

FOREGROUND_PALETTE: Mapping[int, str] = MappingProxyType(
    {30 + offset: color for offset, color in _PALETTE.items()}
)
BACKGROUND_PALETTE: Mapping[int, str] = MappingProxyType(
    {40 + offset: color for offset, color in _PALETTE.items()}
)

Transition: TypeAlias = Callable[[ANSIStyle, int, Sequence[int]], tuple[ANSIStyle, int]]


@lru_cache(maxsize=1024)
def parse_parameters(body: str) -> tuple[int, ...]:
    """Split the body of an SGR sequence in to integer parameters.

    Empty or non-numeric fields are read as 0.

    Args:
        body: Text between `ESC[` and the final `m`.

    Returns:
        A tuple of integers.
    """

    def parse(field: str) -> int:
        try:
            return int(field)
        except ValueError:
            return 0

    return tuple(parse(field) for field in body.split(";"))


def _rgb(parameters: Sequence[int]) -> str | None:
    if len(parameters) < 4:
        return None
    red, green, blue = (min(channel, 255) for channel in parameters[1:4])
    return f"rgb({red},{green},{blue})"


def _reset(style: ANSIStyle, code: int, parameters: Sequence[int]):
    return NULL_STYLE, 0


def _attribute(**attributes: bool) -> Transition:
    def transition(style: ANSIStyle, code: int, parameters: Sequence[int]):
        return replace(style, **attributes), 0

    return transition


def _foreground(style: ANSIStyle, code: int, parameters: Sequence[int]):
    if style.bold and code + 60 in FOREGROUND_PALETTE:
        code += 60
    return replace(style, color=FOREGROUND_PALETTE[code]), 0


def _bright_foreground(style: ANSIStyle, code: int, parameters: Sequence[int]):
    return replace(style, color=FOREGROUND_PALETTE[code]), 0


def _background(style: ANSIStyle, code: int, parameters: Sequence[int]):
    return replace(style, background_color=BACKGROUND_PALETTE[code]), 0


def _extended(field: str) -> Transition:
    """Build a transition for 38 / 48 (extended foreground / background)."""

    def transition(style: ANSIStyle, code: int, parameters: Sequence[int]):
        match parameters[:1]:
            case [2]:
                if (color := _rgb(parameters)) is not None:
                    style = replace(style, **{field: color})
                return style, 4
            case [5]:
                # 256 color index, recognized but not resolved
                return style, 2
            case _:
                return style, 0

    return transition


def _default(field: str) -> Transition:
    def transition(style: ANSIStyle, code: int, parameters: Sequence[int]):
        return replace(style, **{field: None}), 0

    return transition


SGR_TRANSITIONS: Mapping[int, Transition] = MappingProxyType(
    {
        0: _reset,
        1: _attribute(bold=True),
        3: _attribute(italic=True),
        4: _attribute(underline=True),
        9: _attribute(strikethrough=True),
        22: _attribute(bold=False),
        23: _attribute(italic=False),
        24: _attribute(underline=False),
        29: _attribute(strikethrough=False),
        **{code: _foreground for code in range(30, 38)},
        38: _extended("color"),
        39: _default("color"),
        **{code: _background for code in range(40, 48)},
        48: _extended("background_color"),
        49: _default("background_color"),
        **{code: _bright_foreground for code in range(90, 98)},
        **{code: _background for code in range(100, 108)},
    }
)


def apply_sgr(
    style: ANSIStyle, code: int, parameters: Sequence[int] = ()
) -> tuple[ANSIStyle, int]:
    """Apply a single SGR code to a style.

    Args:
        style: The current style.
        code: The SGR code.
        parameters: Parameters following `code` in the same sequence.

    Returns:
        The new style, and the number of parameters from `parameters` that were
            consumed by the code.
    """
    if (transition := SGR_TRANSITIONS.get(code)) is None:
        log.debug("ignoring SGR code %d", code)
        return style, 0
    return transition(style, code, parameters)


def apply_parameters(style: ANSIStyle, body: str) -> ANSIStyle:
    """Apply every parameter in an SGR sequence body.

    Args:
        style: The current style.
        body: Text between `ESC[` and `m`, e.g. `"1;38;2;10;20;30"`.

    Returns:
        The new style.
    """
    codes = parse_parameters(body)
    index = 0
    while index < len(codes):
        style, consumed = apply_sgr(style, codes[index], codes[index + 1 :])
        index += 1 + consumed
    return style
