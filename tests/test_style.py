from dataclasses import FrozenInstanceError

import logging

import pytest

from ansiview.style import (
    BACKGROUND_PALETTE,
    FOREGROUND_PALETTE,
    NULL_STYLE,
    ANSIStyle,
    apply_parameters,
    apply_sgr,
    parse_parameters,
)

STYLED = ANSIStyle(
    color="#cd3131",
    background_color="rgb(1,2,3)",
    bold=True,
    italic=True,
    underline=True,
    strikethrough=True,
)


def test_default_style() -> None:
    assert NULL_STYLE == ANSIStyle(None, None, False, False, False, False)


def test_style_is_immutable() -> None:
    with pytest.raises(FrozenInstanceError):
        NULL_STYLE.bold = True  # type: ignore[misc]


def test_palettes_are_read_only() -> None:
    with pytest.raises(TypeError):
        FOREGROUND_PALETTE[30] = "#ffffff"  # type: ignore[index]
    with pytest.raises(TypeError):
        BACKGROUND_PALETTE[40] = "#ffffff"  # type: ignore[index]


def test_reset() -> None:
    assert apply_sgr(STYLED, 0) == (NULL_STYLE, 0)


@pytest.mark.parametrize(
    "code, field, value",
    [
        (1, "bold", True),
        (3, "italic", True),
        (4, "underline", True),
        (9, "strikethrough", True),
    ],
)
def test_attributes_on(code: int, field: str, value: bool) -> None:
    style, consumed = apply_sgr(NULL_STYLE, code)
    assert getattr(style, field) is value
    assert consumed == 0
    # Only the one field changes
    assert style == ANSIStyle(**{field: value})


@pytest.mark.parametrize(
    "code, field",
    [(22, "bold"), (23, "italic"), (24, "underline"), (29, "strikethrough")],
)
def test_attributes_off(code: int, field: str) -> None:
    style, consumed = apply_sgr(STYLED, code)
    assert getattr(style, field) is False
    assert consumed == 0
    assert style.color == STYLED.color
    assert style.background_color == STYLED.background_color


def test_foreground() -> None:
    assert apply_sgr(NULL_STYLE, 31) == (ANSIStyle(color="#cd3131"), 0)
    assert apply_sgr(NULL_STYLE, 37) == (ANSIStyle(color="#e5e5e5"), 0)


def test_bold_foreground_is_bright() -> None:
    bold = ANSIStyle(bold=True)
    assert apply_sgr(bold, 32)[0].color == "#23d18b"
    assert apply_sgr(NULL_STYLE, 32)[0].color == "#0dbc79"
    assert apply_sgr(bold, 30)[0].color == "#666666"


def test_bright_foreground() -> None:
    assert apply_sgr(NULL_STYLE, 91)[0].color == "#f14c4c"
    assert apply_sgr(ANSIStyle(bold=True), 96)[0].color == "#29b8db"


def test_background() -> None:
    assert apply_sgr(NULL_STYLE, 41) == (ANSIStyle(background_color="#cd3131"), 0)
    assert apply_sgr(NULL_STYLE, 104) == (ANSIStyle(background_color="#3b8eea"), 0)
    # Bold doesn't brighten backgrounds
    assert apply_sgr(ANSIStyle(bold=True), 42)[0].background_color == "#0dbc79"


def test_default_colors() -> None:
    style, consumed = apply_sgr(STYLED, 39)
    assert style.color is None
    assert style.background_color == STYLED.background_color
    style, consumed = apply_sgr(STYLED, 49)
    assert style.background_color is None
    assert style.color == STYLED.color


def test_rgb_foreground() -> None:
    assert apply_sgr(NULL_STYLE, 38, (2, 10, 20, 30)) == (
        ANSIStyle(color="rgb(10,20,30)"),
        4,
    )


def test_rgb_background() -> None:
    assert apply_sgr(NULL_STYLE, 48, (2, 10, 20, 30, 1)) == (
        ANSIStyle(background_color="rgb(10,20,30)"),
        4,
    )


def test_rgb_clamped() -> None:
    style, _ = apply_sgr(NULL_STYLE, 48, (2, 300, 0, 0))
    assert style.background_color == "rgb(255,0,0)"


def test_rgb_missing_channels() -> None:
    assert apply_sgr(STYLED, 38, (2, 10)) == (STYLED, 4)


@pytest.mark.parametrize("code", [38, 48])
def test_indexed_color_skipped(code: int) -> None:
    assert apply_sgr(NULL_STYLE, code, (5, 196)) == (NULL_STYLE, 2)


@pytest.mark.parametrize("code", [38, 48])
def test_extended_without_selector(code: int) -> None:
    assert apply_sgr(NULL_STYLE, code) == (NULL_STYLE, 0)
    assert apply_sgr(NULL_STYLE, code, (7,)) == (NULL_STYLE, 0)


@pytest.mark.parametrize("code", [2, 5, 7, 21, 38 + 100, 53, 255, 9999])
def test_unknown_codes(code: int) -> None:
    assert apply_sgr(STYLED, code) == (STYLED, 0)


@pytest.mark.parametrize(
    "body, expected",
    [
        ("", (0,)),
        ("1", (1,)),
        ("1;31", (1, 31)),
        ("1;;31", (1, 0, 31)),
        (";", (0, 0)),
        ("x;4", (0, 4)),
    ],
)
def test_parse_parameters(body: str, expected: tuple[int, ...]) -> None:
    assert parse_parameters(body) == expected


def test_apply_parameters_consumes_rgb() -> None:
    # 10;20;30 are channels, not codes (30 would be black)
    assert apply_parameters(NULL_STYLE, "38;2;10;20;30") == ANSIStyle(
        color="rgb(10,20,30)"
    )
    assert apply_parameters(NULL_STYLE, "38;2;10;20;30;4") == ANSIStyle(
        color="rgb(10,20,30)", underline=True
    )


def test_apply_parameters_indexed_then_code() -> None:
    assert apply_parameters(NULL_STYLE, "38;5;1;3") == ANSIStyle(italic=True)


def test_apply_parameters_order() -> None:
    assert apply_parameters(NULL_STYLE, "1;31").color == "#f14c4c"
    assert apply_parameters(NULL_STYLE, "31;1").color == "#cd3131"


def test_apply_parameters_empty_is_reset() -> None:
    assert apply_parameters(STYLED, "") == NULL_STYLE
    assert apply_parameters(STYLED, "4;") == NULL_STYLE


def test_apply_parameters_reset_mid_sequence() -> None:
    assert apply_parameters(STYLED, "0;3") == ANSIStyle(italic=True)


def test_unknown_code_logged_every_time(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="ansiview.style"):
        apply_parameters(NULL_STYLE, "5")
        apply_parameters(NULL_STYLE, "5")
    messages = [record.getMessage() for record in caplog.records]
    assert messages.count("ignoring SGR code 5") == 2
