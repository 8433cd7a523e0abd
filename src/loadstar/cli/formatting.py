"""Rich formatting utilities for CLI output.

Panels and tables shared by the loadstar commands: error, warning and
success panels, the catalog listing and the end-of-run summary.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from loadstar.catalog.models import CatalogEntry

console = Console()


def create_options_table(options: Sequence[tuple[str, str, str, bool]]) -> Table:
    """Create table showing command options.

    Args:
        options: Sequence of (option_name, short_flag, description, required) tuples

    Returns:
        Table with formatted options
    """
    table = Table(
        title="Options",
        border_style="magenta",
        width=78,
        show_header=True,
    )

    table.add_column("Option", style="cyan", width=20)
    table.add_column("Short", style="cyan", width=10)
    table.add_column("Description", width=35)
    table.add_column("Required", width=10)

    for option_name, short_flag, description, required in options:
        required_text = Text("Yes" if required else "No", style="red" if required else "dim")
        table.add_row(option_name, short_flag or "-", description, required_text)

    return table


def create_catalog_table(entries: Sequence[CatalogEntry], title: str = "Catalog") -> Table:
    """Create table listing catalog entries.

    Args:
        entries: Entries to list, in display order
        title: Table title

    Returns:
        Table with one row per entry
    """
    table = Table(title=title, border_style="magenta", show_header=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Category")
    table.add_column("Install", style="dim")
    table.add_column("Description")

    for entry in entries:
        table.add_row(
            entry.id,
            entry.name,
            f"{entry.category.icon} {entry.category.display_name}",
            entry.install.command(),
            entry.description,
        )

    return table


def create_summary_panel(
    succeeded: int,
    failed: int,
    skipped: int,
    aborted: bool = False,
    error: str | None = None,
) -> Panel:
    """Create panel summarising an install run.

    Args:
        succeeded: Items installed
        failed: Items that failed
        skipped: Items already installed
        aborted: The user interrupted the run
        error: Fatal error message, if the run could not start

    Returns:
        Panel colored by outcome
    """
    counts = (
        f"[green]{succeeded} succeeded[/green], "
        f"[red]{failed} failed[/red], "
        f"[yellow]{skipped} skipped[/yellow]"
    )

    if error:
        return format_error(error, context=counts)
    if aborted:
        return format_warning("Installation interrupted", context=counts)
    if failed:
        return format_warning(f"Installation finished with {failed} failure(s)", context=counts)
    return format_success("Installation complete", details=counts)


def format_error(message: str, context: str | None = None) -> Panel:
    """Create formatted error panel.

    Args:
        message: Error message
        context: Optional context hint for resolution

    Returns:
        Panel with error formatting
    """
    content = f"[bold red]{message}[/bold red]"
    if context:
        content += f"\n\n[dim]{context}[/dim]"

    return Panel(
        content,
        title="[bold red]Error[/bold red]",
        border_style="red",
        width=78,
        expand=False,
    )


def format_warning(message: str, context: str | None = None) -> Panel:
    """Create formatted warning panel."""
    content = f"[bold yellow]{message}[/bold yellow]"
    if context:
        content += f"\n\n[dim]{context}[/dim]"

    return Panel(
        content,
        title="[bold yellow]Warning[/bold yellow]",
        border_style="yellow",
        width=78,
        expand=False,
    )


def format_success(message: str, details: str | None = None) -> Panel:
    """Create formatted success panel."""
    content = f"[bold green]✓ {message}[/bold green]"
    if details:
        content += f"\n\n[dim]{details}[/dim]"

    return Panel(
        content,
        title="[bold green]Success[/bold green]",
        border_style="green",
        width=78,
        expand=False,
    )
