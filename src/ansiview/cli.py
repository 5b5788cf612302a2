from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from ansiview.ansi import ANSIParser, strip
from ansiview.color import (
    DEFAULT_BACKGROUND,
    contrast_ratio,
    correct_contrast,
    parse_color,
    relative_luminance,
)
from ansiview.paths import get_settings_path
from ansiview.render import render_text
from ansiview.settings import Settings, SettingsError, Schema, load_settings
from ansiview.settings_schema import SCHEMA
from ansiview.style import ANSIStyle

log = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
SOURCE = click.File("r", encoding="utf-8", errors="replace")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


class CLIContext:
    """State shared by the sub-commands."""

    def __init__(
        self,
        settings_path: Path,
        foreground: str | None,
        background: str | None,
        minimum_contrast: float | None,
    ) -> None:
        self.settings_path = settings_path
        self.foreground = foreground
        self.background = background
        self.minimum_contrast = minimum_contrast

    def load_settings(self) -> Settings:
        try:
            return load_settings(Schema(SCHEMA), self.settings_path)
        except SettingsError as error:
            raise click.ClickException(str(error))

    def get_parser(self) -> ANSIParser:
        """Get a parser from settings, with command line overrides."""
        try:
            parser = ANSIParser.from_settings(self.load_settings())
        except (SettingsError, KeyError) as error:
            raise click.ClickException(f"Invalid settings; {error}")
        if self.foreground is not None:
            parser.default_foreground = self.foreground
        if self.background is not None:
            parser.default_background = self.background
        if self.minimum_contrast is not None:
            parser.minimum_contrast = self.minimum_contrast
        log.debug("using %r", parser)
        return parser


pass_context = click.make_pass_decorator(CLIContext)


def describe_style(style: ANSIStyle) -> str:
    attributes = [
        name
        for name in ("bold", "italic", "underline", "strikethrough")
        if getattr(style, name)
    ]
    if style.color:
        attributes.append(style.color)
    if style.background_color:
        attributes.append(f"on {style.background_color}")
    return " ".join(attributes)


@click.group()
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="ANSIVIEW_SETTINGS",
    help="Path to settings JSON.",
)
@click.option("--foreground", help="Default foreground color.")
@click.option("--background", help="Default background color.")
@click.option(
    "--minimum-contrast", type=click.FloatRange(min=1.0), help="Minimum contrast ratio."
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@click.pass_context
def cli(
    ctx: click.Context,
    settings_path: Path | None,
    foreground: str | None,
    background: str | None,
    minimum_contrast: float | None,
    log_level: str,
) -> None:
    """Render text containing ANSI escape sequences."""
    setup_logging(log_level.upper())
    ctx.obj = CLIContext(
        settings_path or get_settings_path(), foreground, background, minimum_contrast
    )


@cli.command()
@click.argument("source", type=SOURCE, default="-")
@pass_context
def render(context: CLIContext, source: TextIO) -> None:
    """Print SOURCE with escape sequences rendered."""
    console = Console(highlight=False)
    console.print(render_text(source.read(), context.get_parser()), end="")


@cli.command("strip")
@click.argument("source", type=SOURCE, default="-")
def strip_command(source: TextIO) -> None:
    """Print SOURCE with escape sequences removed."""
    click.echo(strip(source.read()), nl=False)


@cli.command()
@click.argument("source", type=SOURCE, default="-")
@pass_context
def tokens(context: CLIContext, source: TextIO) -> None:
    """List the tokens in SOURCE."""
    table = Table("#", "Kind", "Raw", "Style")
    for index, token in enumerate(context.get_parser().feed(source.read())):
        table.add_row(
            str(index),
            "escape" if token.is_escape else "text",
            Text(repr(token.raw)),
            describe_style(token.style),
        )
    Console().print(table)


@cli.command()
@click.argument("foreground")
@click.argument("background", default=DEFAULT_BACKGROUND)
@click.option(
    "--minimum", type=click.FloatRange(min=1.0), default=4.5, show_default=True
)
def contrast(foreground: str, background: str, minimum: float) -> None:
    """Check the contrast of FOREGROUND against BACKGROUND."""
    foreground_color = parse_color(foreground)
    background_color = parse_color(background)
    if foreground_color is None:
        raise click.BadParameter(f"{foreground!r} is not a color", param_hint="FOREGROUND")
    if background_color is None:
        raise click.BadParameter(f"{background!r} is not a color", param_hint="BACKGROUND")
    ratio = contrast_ratio(
        relative_luminance(foreground_color), relative_luminance(background_color)
    )
    corrected = correct_contrast(foreground, background, minimum)
    corrected_ratio = contrast_ratio(
        relative_luminance(parse_color(corrected) or foreground_color),
        relative_luminance(background_color),
    )
    click.echo(f"ratio: {ratio:.2f}")
    click.echo(f"corrected: {corrected} ({corrected_ratio:.2f})")


@cli.command()
@click.argument("source", type=SOURCE, default="-")
@pass_context
def view(context: CLIContext, source: TextIO) -> None:
    """View SOURCE in a terminal UI."""
    from ansiview.app import ANSIViewApp

    app = ANSIViewApp(
        source.read(),
        title=source.name,
        parser=context.get_parser(),
        settings_path=context.settings_path,
    )
    app.run()


def main() -> None:
    cli()
