"""Command-line interface for loadstar."""

from __future__ import annotations

import logging
from pathlib import Path

import click
import yaml
from rich.console import Console

from loadstar import __version__, catalog
from loadstar.catalog.models import Category
from loadstar.cli.formatting import (
    create_catalog_table,
    create_summary_panel,
    format_error,
    format_success,
    format_warning,
)
from loadstar.cli.help_formatter import RichCommand
from loadstar.config import (
    clear_last_run,
    get_config_path,
    get_last_run_path,
    get_log_path,
    load_config,
    load_last_run,
    save_last_run,
)
from loadstar.errors import UnsupportedPlatformError
from loadstar.logging import setup_logging
from loadstar.system import SystemInfo

console = Console()
logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="loadstar")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors")
def cli(quiet: bool) -> None:
    """Set up a developer machine from a terminal wizard.

    loadstar walks you through identity, shell and tool choices, then
    installs everything through Homebrew and friends while you watch.

    Quick Start:

      1. Run the wizard:
         $ loadstar wizard

      2. Browse what can be installed:
         $ loadstar catalog --category search

      3. Forget the answers saved from the last run:
         $ loadstar config clear

    For more information on a specific command:
      $ loadstar COMMAND --help
    """
    setup_logging("quiet" if quiet else "normal")


@cli.command(cls=RichCommand)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to the log file")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write logs (default: ~/.loadstar/loadstar.log)",
)
@click.option("--no-save", is_flag=True, help="Do not remember answers for next time")
def wizard(verbose: bool, log_file: Path | None, no_save: bool) -> None:
    """Launch the interactive setup wizard.

    Answers from the last completed run are pre-filled. Press Ctrl+C during
    installation to stop following it.
    """
    from loadstar.install.worker import InstallWorker
    from loadstar.wizard import launch_wizard
    from loadstar.wizard.controller import WizardController
    from loadstar.wizard.session import Session

    try:
        system = SystemInfo.detect()
    except UnsupportedPlatformError as e:
        console.print(format_error(str(e), context="loadstar supports macOS and Linux"))
        raise click.ClickException(str(e))

    setup_logging("verbose" if verbose else "normal", log_file or get_log_path())

    config = load_config()
    session = Session.create(config.extra_essentials, last_run=load_last_run())
    session.generate_ssh_key = config.generate_ssh_key
    session.setup_git_signing = config.setup_git_signing
    session.write_dotfiles = config.write_dotfiles

    controller = WizardController(
        session,
        config,
        worker_factory=lambda snapshot, channel: InstallWorker(
            snapshot, channel, system=system
        ),
        on_complete=None if no_save else save_last_run,
        system=system,
    )
    launch_wizard(controller)

    if controller.worker is None:
        console.print("[yellow]Wizard cancelled[/yellow]")
        return

    console.print(
        create_summary_panel(
            controller.succeeded,
            controller.failed,
            controller.skipped,
            aborted=controller.aborted,
            error=controller.error_message,
        )
    )
    console.print(f"[dim]Log: {log_file or get_log_path()}[/dim]")


@cli.command(name="catalog", cls=RichCommand)
@click.option(
    "--category",
    "-c",
    type=click.Choice([c.value for c in Category], case_sensitive=False),
    default=None,
    help="Only list one category",
)
@click.option("--tag", "-t", default=None, help="Only list entries with this tag")
def catalog_command(category: str | None, tag: str | None) -> None:
    """List the tools loadstar can install.

    Examples:
      loadstar catalog
      loadstar catalog --category language
      loadstar catalog --tag essential
    """
    entries = list(catalog.entries())
    title = "Catalog"
    if category:
        selected = Category(category.lower())
        entries = [e for e in entries if e.category is selected]
        title = selected.display_name
    if tag:
        entries = [e for e in entries if e.has_tag(tag)]
        title = f"{title} [{tag}]"

    logger.debug("Listing %d catalog entries", len(entries))

    if not entries:
        console.print(format_warning("No catalog entries match", context="Try without filters"))
        return

    console.print(create_catalog_table(entries, title=title))
    console.print(f"[dim]{len(entries)} entries[/dim]")


@cli.group()
def config() -> None:
    """Inspect or reset loadstar settings."""
    pass


@config.command(name="show")
def config_show() -> None:
    """Print the effective configuration."""
    settings = load_config()
    console.print(f"[bold]Config file:[/bold] {get_config_path()}")
    console.print(yaml.safe_dump(settings.model_dump(), sort_keys=False).rstrip(), markup=False)

    last_run = load_last_run()
    if last_run is None:
        console.print("[dim]No saved run[/dim]")
    else:
        console.print(
            f"[bold]Last run:[/bold] {get_last_run_path()} "
            f"({len(last_run.get('selected', []))} tools, {last_run.get('timestamp', 'unknown')})"
        )


@config.command(name="clear")
def config_clear() -> None:
    """Forget the answers saved by the last run."""
    logger.debug("Clearing %s", get_last_run_path())
    if clear_last_run():
        console.print(format_success("Cleared saved run", details=str(get_last_run_path())))
    else:
        console.print("[dim]No saved run to clear[/dim]")


if __name__ == "__main__":
    cli()
