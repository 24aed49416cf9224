"""
skillregistry skill - Skill inspection commands.

Usage:
    skillregistry skill list
    skillregistry skill search "auth -oauth"
    skillregistry skill show my_skill
    skillregistry skill read my_skill references/guide.md
"""

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from skillregistry.cli.output import print_error, print_feedback, print_registration_summary
from skillregistry.cli.state import open_registry
from skillregistry.renderers import create_renderer, get_renderer
from skillregistry.skills import (
    SkillError,
    SkillNotFoundError,
    SkillResourceReader,
    find_skills,
)

app = typer.Typer(
    name="skill",
    help="Skill inspection.",
)

console = Console()

FormatOption = Annotated[
    str | None,
    typer.Option(
        "--format",
        "-f",
        help="Print the prompt injection in this format (json, xml, md).",
    ),
]


def _renderer(format: str | None, registry):
    if format is None:
        return None
    try:
        return create_renderer(format) if format else get_renderer(registry.config)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)


def _truncate(text: str, width: int) -> str:
    return text[:width] + "..." if len(text) > width else text


@app.command("list")
def list_skills(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show detailed information.",
        ),
    ] = False,
) -> None:
    """List registered skills."""
    registry = open_registry(ctx)
    skills = registry.controller.skills

    if registry.debug is not None:
        print_registration_summary(registry.debug)

    if not skills:
        console.print("[yellow]No skills found.[/yellow]")
        console.print("[dim]Add a bundle with a SKILL.md to one of the base paths.[/dim]")
        return

    table = Table(title="Registered Skills")
    table.add_column("Tool name", style="cyan")
    table.add_column("Name", style="dim")
    table.add_column("Description")
    table.add_column("Resources", style="dim", justify="right")

    if verbose:
        table.add_column("Path", style="dim")

    for skill in skills:
        row = [
            skill.tool_name,
            skill.name,
            _truncate(skill.description, 50),
            str(len(skill.resources or {})),
        ]
        if verbose:
            row.append(str(skill.full_path))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n[dim]Total: {len(skills)} skill(s)[/dim]")


@app.command()
def search(
    ctx: typer.Context,
    query: Annotated[
        list[str],
        typer.Argument(
            help="Search terms. Prefix a term with '-' to exclude it (use -- before it).",
        ),
    ],
    format: FormatOption = None,
) -> None:
    """Search skills by name and description."""
    registry = open_registry(ctx)
    renderer = _renderer(format, registry)

    if renderer is not None:
        injection = asyncio.run(find_skills(registry, query))
        typer.echo(renderer.render(injection, "SkillSearchResults"))
        return

    result = registry.search(query)

    if not result.matches:
        print_feedback(result)
        return

    table = Table(title=f"Search Results for '{' '.join(query)}'")
    table.add_column("Tool name", style="cyan")
    table.add_column("Description")

    for skill in result.matches:
        table.add_row(skill.tool_name, _truncate(skill.description, 60))

    console.print(table)
    print_feedback(result)


@app.command()
def show(
    ctx: typer.Context,
    name: Annotated[
        str,
        typer.Argument(
            help="Skill name, tool name, or alias.",
        ),
    ],
    format: FormatOption = None,
) -> None:
    """Show skill details."""
    registry = open_registry(ctx)

    try:
        skill = registry.get_skill(name)
    except SkillNotFoundError:
        print_error(f"Skill not found: {name}")
        raise typer.Exit(1)

    renderer = _renderer(format, registry)
    if renderer is not None:
        typer.echo(renderer.render(skill, "Skill"))
        return

    lines = [
        f"[bold]Name:[/bold] {skill.name}",
        f"[bold]Tool name:[/bold] {skill.tool_name}",
        f"[bold]Description:[/bold] {skill.description}",
    ]
    if skill.license:
        lines.append(f"[bold]License:[/bold] {skill.license}")
    if skill.allowed_tools:
        lines.append(f"[bold]Allowed tools:[/bold] {', '.join(skill.allowed_tools)}")
    for key, value in (skill.metadata or {}).items():
        lines.append(f"[bold]{key}:[/bold] {value}")

    lines.append("")
    lines.append(f"[bold]Scripts:[/bold] {', '.join(skill.scripts) or '(none)'}")
    lines.append(f"[bold]References:[/bold] {', '.join(skill.references) or '(none)'}")
    lines.append(f"[bold]Assets:[/bold] {', '.join(skill.assets) or '(none)'}")
    lines.append(f"[bold]Resources:[/bold] {len(skill.resources or {})} file(s)")
    lines.append("")
    lines.append(f"[bold]Path:[/bold] {skill.path}")

    console.print(Panel("\n".join(lines), title=f"Skill: {skill.name}"))

    console.print("\n[bold]Instructions Preview:[/bold]")
    console.print(_truncate(skill.content, 500), markup=False, style="dim")


@app.command()
def read(
    ctx: typer.Context,
    name: Annotated[
        str,
        typer.Argument(
            help="Skill name, tool name, or alias.",
        ),
    ],
    path: Annotated[
        str,
        typer.Argument(
            help="Resource path inside the skill (e.g. references/guide.md).",
        ),
    ] = "",
    resource_type: Annotated[
        str,
        typer.Option(
            "--type",
            "-t",
            help="Resource type (script, reference, asset, workflow, tool, resource).",
        ),
    ] = "",
    format: FormatOption = None,
) -> None:
    """Print a skill resource."""
    registry = open_registry(ctx)
    reader = SkillResourceReader(registry)

    try:
        injection = asyncio.run(reader(name, path, resource_type))
    except SkillError as e:
        print_error(str(e))
        raise typer.Exit(1)

    renderer = _renderer(format, registry)
    if renderer is not None:
        typer.echo(renderer.render(injection, "SkillResource"))
        return

    typer.echo(injection.content)
