from __future__ import annotations

import logging
import math
import re
from typing import NamedTuple

from textual.color import Color

log = logging.getLogger(__name__)

DEFAULT_FOREGROUND = "rgb(204,204,204)"
DEFAULT_BACKGROUND = "rgb(31,31,31)"
MINIMUM_CONTRAST = 4.5

LIGHTNESS_STEP = 0.05

_DEFAULT_BACKGROUND_COLOR = Color(31, 31, 31)

RE_HEX_COLOR = re.compile(r"#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})")
RE_RGB_COLOR = re.compile(r"rgb\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)")


class HSL(NamedTuple):
    """A color in HSL space."""

    h: float
    """Hue in degrees (0-360)."""
    s: float
    """Saturation (0-1)."""
    l: float
    """Lightness (0-1)."""


def parse_color(color: str | None) -> Color | None:
    """Parse a color string in to a Color.

    Accepts `#rrggbb`, `#rgb`, and `rgb(r,g,b)`.

    Args:
        color: Color string.

    Returns:
        A Color, or `None` if the string could not be parsed.
    """
    if not color:
        return None
    color = color.strip()
    if match := RE_HEX_COLOR.fullmatch(color):
        hex_color = match.group(1)
        if len(hex_color) == 3:
            hex_color = "".join(character * 2 for character in hex_color)
        return Color(
            int(hex_color[0:2], 16),
            int(hex_color[2:4], 16),
            int(hex_color[4:6], 16),
        )
    if match := RE_RGB_COLOR.fullmatch(color):
        red, green, blue = (min(255, int(channel)) for channel in match.groups())
        return Color(red, green, blue)
    return None


def format_rgb(red: float, green: float, blue: float) -> str:
    """Format channels as `rgb(r,g,b)`, rounded half up and clamped to 0-255."""

    def channel(value: float) -> int:
        return min(255, max(0, math.floor(value + 0.5)))

    return f"rgb({channel(red)},{channel(green)},{channel(blue)})"


def _linear(value: int) -> float:
    normalized = value / 255
    if normalized <= 0.03928:
        return normalized / 12.92
    return ((normalized + 0.055) / 1.055) ** 2.4


def relative_luminance(color: Color) -> float:
    """Get the relative luminance of a color.

    Args:
        color: A color.

    Returns:
        Luminance in the range 0 (black) to 1 (white).
    """
    red, green, blue = color.rgb
    return 0.2126 * _linear(red) + 0.7152 * _linear(green) + 0.0722 * _linear(blue)


def contrast_ratio(luminance1: float, luminance2: float) -> float:
    """Contrast ratio between two luminance values (1 to 21)."""
    lighter = max(luminance1, luminance2)
    darker = min(luminance1, luminance2)
    return (lighter + 0.05) / (darker + 0.05)


def rgb_to_hsl(red: int, green: int, blue: int) -> HSL:
    """Convert 8-bit RGB channels to HSL.

    Args:
        red: Red channel (0-255).
        green: Green channel (0-255).
        blue: Blue channel (0-255).

    Returns:
        HSL with hue in degrees.
    """
    hue, saturation, lightness = Color(red, green, blue).hsl
    return HSL(hue * 360, saturation, lightness)


def hsl_to_rgb(hsl: HSL) -> tuple[int, int, int]:
    """Convert HSL (hue in degrees) to 8-bit RGB channels."""
    hue, saturation, lightness = hsl
    if saturation == 0:
        channel = math.floor(lightness * 255 + 0.5)
        return (channel, channel, channel)
    color = Color.from_hsl((hue / 360) % 1.0, saturation, lightness)
    return color.rgb


def _search_lightness(
    foreground: Color, background_luminance: float, minimum_ratio: float
) -> tuple[tuple[int, int, int], float]:
    """Walk lightness away from the background until the ratio is met.

    Lightness moves in steps of `LIGHTNESS_STEP` while it stays within 0-1.
    A step that would overshoot the range ends the search.

    Returns:
        The first RGB meeting `minimum_ratio`, otherwise the highest contrast
            candidate, and its ratio.
    """
    hue, saturation, lightness = rgb_to_hsl(*foreground.rgb)
    step = LIGHTNESS_STEP if background_luminance < 0.5 else -LIGHTNESS_STEP

    best_rgb = foreground.rgb
    best_ratio = contrast_ratio(relative_luminance(foreground), background_luminance)

    new_lightness = lightness + step
    while 0.0 <= new_lightness <= 1.0:
        candidate = hsl_to_rgb(HSL(hue, saturation, new_lightness))
        ratio = contrast_ratio(
            relative_luminance(Color(*candidate)), background_luminance
        )
        if ratio >= minimum_ratio:
            return candidate, ratio
        if ratio > best_ratio:
            best_rgb = candidate
            best_ratio = ratio
        new_lightness += step

    return best_rgb, best_ratio


def correct_contrast(
    foreground: str, background: str, minimum_ratio: float = MINIMUM_CONTRAST
) -> str:
    """Adjust a foreground color so that it is readable against a background.

    The foreground lightness is moved away from the background in steps
    (lighter on dark backgrounds, darker on light backgrounds) until the
    contrast ratio reaches `minimum_ratio`. If the ratio can't be reached,
    the candidate with the highest contrast is returned.

    Args:
        foreground: Foreground color string.
        background: Background color string.
        minimum_ratio: Required contrast ratio.

    Returns:
        The foreground unchanged if it already has enough contrast (or could
            not be parsed), otherwise an `rgb(r,g,b)` string.
    """
    foreground_color = parse_color(foreground)
    if foreground_color is None:
        return foreground
    background_color = parse_color(background) or _DEFAULT_BACKGROUND_COLOR

    background_luminance = relative_luminance(background_color)
    ratio = contrast_ratio(relative_luminance(foreground_color), background_luminance)
    if ratio >= minimum_ratio:
        return foreground

    rgb, new_ratio = _search_lightness(
        foreground_color, background_luminance, minimum_ratio
    )
    if new_ratio < minimum_ratio:
        log.debug(
            "contrast %.2f for %s on %s is below %s",
            new_ratio,
            foreground,
            background,
            minimum_ratio,
        )
    return format_rgb(*rgb)
