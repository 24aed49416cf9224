"""
skillregistry config - Configuration commands.

Usage:
    skillregistry config show
    skillregistry config show --json
    skillregistry config validate --file ./config.yaml
"""

import json
from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.syntax import Syntax

from skillregistry.cli.state import build_config
from skillregistry.config import ConfigurationError, RegistryConfig, load_yaml_file

app = typer.Typer(
    name="config",
    help="Configuration inspection.",
)

console = Console()


@app.command()
def show(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show the effective configuration."""
    config = build_config(ctx)
    config_dict = config.model_dump(mode="json")

    if json_output:
        typer.echo(json.dumps(config_dict, indent=2))
        return

    output = yaml.dump(config_dict, default_flow_style=False, sort_keys=False, allow_unicode=True)
    console.print(Syntax(output, "yaml", theme="monokai"))


@app.command()
def validate(
    file: Annotated[
        Path,
        typer.Option(
            "--file",
            "-f",
            help="Config file to validate.",
        ),
    ],
) -> None:
    """Validate a configuration file."""
    try:
        console.print(f"Validating: {file}")
        RegistryConfig.model_validate(load_yaml_file(file))
        console.print(f"[green]Valid: {file}[/green]")
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print("[red]Validation failed:[/red]")
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            console.print(f"  [red]{loc}:[/red] {error['msg']}")
        raise typer.Exit(1)
