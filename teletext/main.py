#!/usr/bin/env python3

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import pyfiglet
from rich.console import Console

from . import __version__
from .config import DEFAULT_CONFIG_FILE, RenderSettings, load_config, merge_config
from .errors import GeoDataError, ImageDecodeFailure, TeletextError
from .log_utils import setup_logging
from .renderer import TeletextRenderer, raster_lines, to_payload, to_rich_text

logger = logging.getLogger("teletext.main")

MODES = ('auto', 'raster', 'vector')


def parse_dimension(value: Optional[str], terminal_size: int) -> Optional[int]:
    """Parse a dimension value that can be a number or percentage.

    Args:
        value: String value like "40", "80%", or None
        terminal_size: The terminal dimension to use for percentage calculation

    Returns:
        Parsed integer value or None
    """
    if not value:
        return None

    value = value.strip()

    if value.endswith('%'):
        try:
            percentage = float(value[:-1])
        except ValueError:
            raise click.BadParameter(f"Invalid percentage value: {value}")
        if not 0 < percentage <= 100:
            raise click.BadParameter(f"Percentage must be between 0 and 100, got {percentage}%")
        return max(1, int(terminal_size * percentage / 100))

    try:
        number = int(value)
    except ValueError:
        raise click.BadParameter(f"Invalid dimension value: {value}")
    if number <= 0:
        raise click.BadParameter(f"Dimension must be positive, got {number}")
    return number


def terminal_size():
    try:
        size = os.get_terminal_size()
        return size.columns, size.lines
    except OSError:
        return 80, 24


def read_source(source: str) -> bytes:
    """Read the raw bytes of a tile or vector file; ``-`` reads stdin."""
    if source == '-':
        return click.get_binary_stream('stdin').read()
    try:
        return Path(source).read_bytes()
    except OSError as e:
        raise click.FileError(source, hint=e.strerror)


def detect_mode(source: str, data: bytes) -> str:
    """Vector for JSON input (by extension or content), raster otherwise."""
    if source.lower().endswith('.json'):
        return 'vector'
    if data.lstrip()[:1] in (b'{', b'['):
        return 'vector'
    return 'raster'


def load_vector_json(data: bytes) -> Dict[str, Any]:
    try:
        return json.loads(data.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise GeoDataError(f"Invalid vector JSON: {e}") from e


def render_banner(title: str, font: str = "standard") -> str:
    """Render a title as figlet text."""
    try:
        fig = pyfiglet.Figlet(font=font, width=1000)
    except pyfiglet.FontNotFound:
        raise click.BadParameter(f"Unknown figlet font: {font}", param_hint="--font")
    return fig.renderText(title.strip()).rstrip('\n')


def build_settings(config_data: Dict[str, Any], width: Optional[str], height: Optional[str],
                   size: Optional[int], ramp: Optional[str], output_format: Optional[str],
                   no_color: bool) -> RenderSettings:
    """Apply command line overrides on top of the loaded config."""
    term_width, term_height = terminal_size()
    overrides: Dict[str, Any] = {"raster": {}, "vector": {}, "output": {}}

    parsed_width = parse_dimension(width, term_width)
    parsed_height = parse_dimension(height, term_height)
    if parsed_width:
        overrides["raster"]["width"] = parsed_width
    if parsed_height:
        overrides["raster"]["height"] = parsed_height
    if size:
        overrides["vector"]["size"] = size
    if ramp:
        overrides["raster"]["ramp"] = ramp
    if output_format:
        overrides["output"]["format"] = output_format
    if no_color:
        overrides["output"]["color"] = False

    return RenderSettings.from_config(merge_config(config_data, overrides))


def print_version(ctx, param, value):
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"teletext, version {__version__}")
    ctx.exit()


@click.command()
@click.argument('source')
@click.argument('mode', default='auto', type=click.Choice(MODES))
@click.option('--config', '-c', default=DEFAULT_CONFIG_FILE, help='Config file path')
@click.option('--width', help='Raster grid width in characters (e.g., 40) or percentage of terminal (e.g., "80%")')
@click.option('--height', help='Raster grid height in lines (e.g., 25) or percentage of terminal (e.g., "50%")')
@click.option('--size', type=click.IntRange(min=1), help='Vector grid size (square)')
@click.option('--ramp', help='Glyph ramp from darkest to brightest (e.g., " .:=+*#%@")')
@click.option('--title', help='Title shown above the map as figlet text')
@click.option('--font', default='standard', help='Figlet font for the title')
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']), help='Output format')
@click.option('--no-color', is_flag=True, help='Disable terrain colors')
@click.option('--verbose', '-v', count=True, help='Increase log verbosity (-v info, -vv debug)')
@click.option('--log-file', type=click.Path(dir_okay=False), help='Also write logs to this file')
@click.option('--version', is_flag=True, is_eager=True, expose_value=False, callback=print_version,
              help='Show the version and exit.')
def main(source: str, mode: str, config: str, width: Optional[str], height: Optional[str],
         size: Optional[int], ramp: Optional[str], title: Optional[str], font: str,
         output_format: Optional[str], no_color: bool, verbose: int, log_file: Optional[str]):
    """Render map tiles and vector data as teletext character grids.

    SOURCE: Image tile (PNG, JPEG, ...) or Overpass JSON file, or - for stdin
    MODE: raster, vector, or auto (JSON input is drawn as vector)

    Examples:
      teletext tile.png --width 40 --height 25
      teletext streets.json vector --size 20
      curl -s "$TILE_URL" | teletext - raster --format json
    """
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG

    try:
        config_data = load_config(config)
        settings = build_settings(config_data, width, height, size, ramp, output_format, no_color)
        setup_logging(level, log_file, color_logs=settings.color)

        data = read_source(source)
        if mode == 'auto':
            mode = detect_mode(source, data)
        logger.info("Rendering %s as %s", source, mode)

        renderer = TeletextRenderer(settings)
        cells = None
        dangling: List[Any] = []
        if mode == 'vector':
            result = renderer.render_overpass(load_vector_json(data))
            lines = renderer.vector_lines(result.grid)
            dangling = result.dangling
        else:
            cells = renderer.render_image_bytes(data)
            lines = raster_lines(cells)
    except ImageDecodeFailure as e:
        click.echo("Map unavailable", err=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except TeletextError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if settings.output_format == 'json':
        click.echo(json.dumps(to_payload(lines, cells, dangling), indent=2, default=str))
        return

    console = Console(no_color=not settings.color, highlight=False)
    if title:
        console.print(render_banner(title, font), style="bold", markup=False, soft_wrap=True)
    if cells is not None and settings.color:
        console.print(to_rich_text(cells), soft_wrap=True)
    else:
        for line in lines:
            click.echo(line)


if __name__ == '__main__':
    main()
