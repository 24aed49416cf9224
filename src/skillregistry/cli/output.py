"""
Output helpers for the CLI.

Human-readable output goes through the shared rich console. Rendered
prompt payloads and raw resource content are written with plain
``typer.echo`` so they can be piped.
"""

from rich.console import Console
from rich.markup import escape

from skillregistry.skills.models import SkillRegistryDebugInfo, SkillSearchResult

# Global console instance
console = Console()


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗[/red] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")


def print_feedback(result: SkillSearchResult) -> None:
    """Print the one-line search summary, highlighted when nothing matched."""
    style = "dim" if result.matches else "yellow"
    console.print(result.feedback, style=style, markup=False)


def print_registration_summary(info: SkillRegistryDebugInfo) -> None:
    """Print discovery counts and the reason each rejected bundle was skipped."""
    console.print(
        f"[dim]Discovered {info.discovered}, parsed {info.parsed}, "
        f"rejected {info.rejected}[/dim]"
    )
    for error in info.errors:
        console.print(f"[yellow]![/yellow] {escape(error)}", highlight=False)
