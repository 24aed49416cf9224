"""CLI command groups."""

from skillregistry.cli.commands import config, skill

__all__ = ["config", "skill"]
