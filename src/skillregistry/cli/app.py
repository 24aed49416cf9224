"""
Main Typer application for the skillregistry CLI.

This module defines the root CLI application and registers all command groups.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from skillregistry import __version__
from skillregistry.cli.commands import config, skill
from skillregistry.cli.output import print_info
from skillregistry.cli.state import get_state

# Create the main Typer app
app = typer.Typer(
    name="skillregistry",
    help="Index, search, and read agent skill bundles.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"skillregistry version [green]{__version__}[/green]")
        raise typer.Exit()


# noinspection PyUnusedLocal
@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Enable debug logging and registry debug info.",
        ),
    ] = False,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file to use instead of ~/.skillregistry/config.yaml.",
        ),
    ] = None,
    paths: Annotated[
        list[Path] | None,
        typer.Option(
            "--path",
            "-p",
            help="Skill base path (repeatable). Overrides configured base paths.",
        ),
    ] = None,
) -> None:
    """
    [bold blue]skillregistry[/bold blue] - Skill registry for LLM agents

    Discovers skill bundles (directories with a SKILL.md), searches them,
    and reads their resources for prompt injection.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    state = get_state(ctx)
    state.debug = debug
    state.config_file = config_file
    state.base_paths = list(paths or [])


# Register command groups
app.add_typer(skill.app, name="skill")
app.add_typer(config.app, name="config")
