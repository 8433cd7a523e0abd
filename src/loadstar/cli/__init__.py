"""CLI utilities for loadstar.

Rich-based panels, tables and help formatting for the command-line
interface.
"""

from loadstar.cli.formatting import (
    create_catalog_table,
    create_options_table,
    create_summary_panel,
    format_error,
    format_success,
    format_warning,
)
from loadstar.cli.help_formatter import RichCommand, RichHelpFormatter

__all__ = [
    "RichCommand",
    "RichHelpFormatter",
    "create_catalog_table",
    "create_options_table",
    "create_summary_panel",
    "format_error",
    "format_success",
    "format_warning",
]
