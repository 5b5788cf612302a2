"""Render ANSI text for display.

Escape tokens are dropped, and every run of literal text becomes a span with
the token's (contrast corrected) style.
"""

from __future__ import annotations

from html import escape
from typing import Iterable

from rich.color import Color as RichColor
from rich.style import Style as RichStyle
from rich.text import Text
from textual.content import Content, Span
from textual.style import Style

from ansiview.ansi import DEFAULT_PARSER, ANSIParser, ANSIToken
from ansiview.color import parse_color
from ansiview.style import ANSIStyle


def _text_tokens(text: str, parser: ANSIParser | None) -> Iterable[ANSIToken]:
    parser = parser or DEFAULT_PARSER
    return (token for token in parser.feed(text) if not token.is_escape)


def to_visual_style(style: ANSIStyle) -> Style:
    """Convert an ANSIStyle in to a Textual Style."""
    return Style(
        foreground=parse_color(style.color),
        background=parse_color(style.background_color),
        bold=style.bold or None,
        italic=style.italic or None,
        underline=style.underline or None,
        strike=style.strikethrough or None,
    )


def _rich_color(color: str | None) -> RichColor | None:
    if (parsed := parse_color(color)) is None:
        return None
    return RichColor.from_rgb(*parsed.rgb)


def to_rich_style(style: ANSIStyle) -> RichStyle:
    """Convert an ANSIStyle in to a Rich Style.

    Colors which don't parse are dropped.
    """
    return RichStyle(
        color=_rich_color(style.color),
        bgcolor=_rich_color(style.background_color),
        bold=style.bold or None,
        italic=style.italic or None,
        underline=style.underline or None,
        strike=style.strikethrough or None,
    )


def css_declarations(style: ANSIStyle) -> list[tuple[str, str]]:
    """Get CSS declarations for a style.

    Args:
        style: Style of a text token.

    Returns:
        A list of (PROPERTY, VALUE) tuples.
    """
    declarations: list[tuple[str, str]] = []
    if style.color:
        declarations.append(("color", style.color))
    if style.background_color:
        declarations.append(("background-color", style.background_color))
    if style.bold:
        declarations.append(("font-weight", "bold"))
    if style.italic:
        declarations.append(("font-style", "italic"))
    decoration = []
    if style.underline:
        decoration.append("underline")
    if style.strikethrough:
        decoration.append("line-through")
    if decoration:
        declarations.append(("text-decoration", " ".join(decoration)))
    return declarations


def render_content(text: str, parser: ANSIParser | None = None) -> Content:
    """Render ANSI text as Textual Content.

    Args:
        text: Text which may contain escape sequences.
        parser: Parser to use, or `None` for default colors.

    Returns:
        Content with escape sequences removed.
    """
    plain: list[str] = []
    spans: list[Span] = []
    position = 0
    for token in _text_tokens(text, parser):
        end = position + len(token.text)
        spans.append(Span(position, end, to_visual_style(token.style)))
        plain.append(token.text)
        position = end
    return Content("".join(plain), spans)


def render_text(text: str, parser: ANSIParser | None = None) -> Text:
    """Render ANSI text as Rich Text.

    Args:
        text: Text which may contain escape sequences.
        parser: Parser to use, or `None` for default colors.

    Returns:
        Rich Text with escape sequences removed.
    """
    rich_text = Text()
    for token in _text_tokens(text, parser):
        rich_text.append(token.text, to_rich_style(token.style))
    return rich_text


def render_html(text: str, parser: ANSIParser | None = None) -> str:
    """Render ANSI text as an HTML fragment.

    Args:
        text: Text which may contain escape sequences.
        parser: Parser to use, or `None` for default colors.

    Returns:
        A `<span>` containing one styled `<span>` per run of text.
    """
    html: list[str] = ['<span class="ansi-block">']
    for token in _text_tokens(text, parser):
        if declarations := css_declarations(token.style):
            style = "; ".join(f"{name}: {value}" for name, value in declarations)
            html.append(f'<span style="{escape(style)}">{escape(token.text)}</span>')
        else:
            html.append(f"<span>{escape(token.text)}</span>")
    html.append("</span>")
    return "".join(html)
