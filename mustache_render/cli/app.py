"""Main CLI application."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .. import __version__
from ..core.config import load_config
from ..core.errors import ConfigError
from ..core.models import FileMapping, RenderOptions
from ..core.settings import get_settings
from ..rendering import batch
from .parsers import parse_data, parse_extension

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="mustache-render",
    help="Render mustache templates with JSON, YAML or Python data from files, URLs or inline values.",
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else get_settings().log_level.upper(),
        format="[%(levelname)s] %(message)s",
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"mustache-render {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show the version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Render mustache templates with JSON, YAML or Python data."""


@app.command()
def run(
    config_path: Annotated[
        Path,
        typer.Argument(
            help="Task configuration file (YAML or JSON).",
            metavar="CONFIG",
        ),
    ],
    targets: Annotated[
        Optional[list[str]],
        typer.Argument(
            help="Targets to run (default: all, in file order).",
            metavar="TARGET...",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Render every file of the configured targets."""
    _configure_logging(verbose)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e

    names = targets or list(config.targets)
    unknown = [name for name in names if name not in config.targets]
    if unknown:
        raise typer.BadParameter(
            f"Unknown target(s): {', '.join(unknown)}", param_hint="TARGET"
        )

    failed: list[str] = []
    for name in names:
        try:
            result = asyncio.run(batch.run_target(config, name))
        except ConfigError as e:
            logger.error(f"{name}: {e}")
            failed.append(name)
            continue
        if not result.ok:
            failed.append(name)

    if failed:
        logger.error(f"Failed target(s): {', '.join(failed)}")
        raise typer.Exit(code=1)

    logger.debug(f"Completed: {len(names)} target(s)")


@app.command()
def render(
    data: Annotated[
        str,
        typer.Option(
            "--data",
            help="Data file, URL or inline JSON object.",
            metavar="REF",
        ),
    ],
    template: Annotated[
        str,
        typer.Option(
            "--template",
            help="Template file or URL.",
            metavar="REF",
        ),
    ],
    dest: Annotated[
        str,
        typer.Option(
            "--dest",
            help="Output file path.",
            metavar="PATH",
        ),
    ],
    directory: Annotated[
        Optional[str],
        typer.Option(
            "--directory",
            help="Base directory for partials (default: settings, '.').",
            metavar="DIR",
        ),
    ] = None,
    extension: Annotated[
        Optional[str],
        typer.Option(
            "--extension",
            help="Partial file extension (default: settings, '.mustache').",
            metavar="EXT",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Render a single template to DEST."""
    _configure_logging(verbose)

    settings = get_settings()
    options = RenderOptions(
        directory=directory or settings.directory,
        extension=parse_extension(extension or settings.extension),
    )
    mapping = FileMapping(data=parse_data(data), template=template, dest=dest)

    try:
        entries = batch.expand_tasks([mapping], options)
    except ConfigError as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e

    result = asyncio.run(batch.run_batch(entries, options))
    if not result.ok:
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
