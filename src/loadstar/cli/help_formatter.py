"""Click help formatter with a Rich options table."""

from __future__ import annotations

from io import StringIO
from typing import Any

import click
from rich.console import Console

from loadstar.cli.formatting import create_options_table

OptionRow = tuple[str, str, str, bool]


def option_rows(params: list[click.Parameter]) -> list[OptionRow]:
    """Table rows for the options of a command.

    The long form goes in the first column and the short flag, if any,
    in the second.
    """
    rows: list[OptionRow] = []
    for param in params:
        if not isinstance(param, click.Option):
            continue
        long_names = [o for o in param.opts if o.startswith("--")]
        short_names = [o for o in param.opts if not o.startswith("--")]
        name = long_names[0] if long_names else param.opts[0]
        short = short_names[0] if short_names and short_names[0] != name else ""
        rows.append((name, short, param.help or "", param.required))
    return rows


class RichHelpFormatter(click.HelpFormatter):
    """Help formatter that appends a Rich options table."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.rows: list[OptionRow] = []

    def getvalue(self) -> str:
        buffer = StringIO()
        console = Console(file=buffer, width=self.width or 80, force_terminal=True, highlight=False)
        console.print(super().getvalue(), soft_wrap=True, markup=False)
        if self.rows:
            console.print()
            console.print(create_options_table(self.rows))
        return buffer.getvalue()


class RichCommand(click.Command):
    """Click command whose ``--help`` ends with an options table."""

    def get_help(self, ctx: click.Context) -> str:
        formatter = RichHelpFormatter(width=80)
        self.format_help(ctx, formatter)
        return formatter.getvalue()

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_help(ctx, formatter)
        if isinstance(formatter, RichHelpFormatter):
            formatter.rows = option_rows(self.get_params(ctx))
