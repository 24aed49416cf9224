"""Shared CLI state: global options and registry construction."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

import typer

from skillregistry.cli.output import print_error
from skillregistry.config import ConfigurationError, RegistryConfig, load_config
from skillregistry.skills import InitializationError, SkillRegistry


@dataclass
class CliState:
    """Options given to the root command."""

    debug: bool = False
    config_file: Path | None = None
    base_paths: list[Path] = field(default_factory=list)


def get_state(ctx: typer.Context) -> CliState:
    """Get the CLI state stored on the root context."""
    root = ctx.find_root()
    if not isinstance(root.obj, CliState):
        root.obj = CliState()
    return root.obj


def build_config(ctx: typer.Context) -> RegistryConfig:
    """Load configuration and apply command-line overrides.

    Exits with code 1 on configuration errors.
    """
    state = get_state(ctx)
    try:
        config = load_config(state.config_file)
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)

    update: dict = {}
    if state.base_paths:
        update["base_paths"] = [p.expanduser() for p in state.base_paths]
    if state.debug:
        update["debug"] = True
    return config.model_copy(update=update) if update else config


def open_registry(ctx: typer.Context) -> SkillRegistry:
    """Create and initialise a registry for a command.

    Exits with code 1 if initialisation fails.
    """
    registry = SkillRegistry(build_config(ctx))
    try:
        asyncio.run(registry.initialise())
    except InitializationError as e:
        print_error(str(e))
        raise typer.Exit(1)
    return registry
