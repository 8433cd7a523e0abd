"""Rich renderables for each wizard phase.

Everything here is a pure function of the controller state; the Textual
app re-renders the whole screen on every refresh.
"""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from loadstar.catalog.models import CatalogEntry
from loadstar.system import SystemInfo
from loadstar.wizard.controller import SETUP_TYPE_FIELD, WizardController
from loadstar.wizard.phases import Phase

ACCENT = "bright_magenta"
HIGHLIGHT = "bold cyan"

LOG_STYLES: tuple[tuple[str, str], ...] = (
    ("[OK]", "green"),
    ("[SKIP]", "yellow"),
    ("[FAIL]", "bold red"),
    ("[FATAL]", "bold red"),
    ("[ERROR]", "red"),
    ("[WARN]", "yellow"),
    ("[PHASE]", ACCENT),
    ("[ABORT]", "bold red"),
    ("[COMPLETE]", "bold green"),
    ("[DONE]", "bold green"),
)

FOOTERS: dict[Phase, str] = {
    Phase.BOOT: "Press any key to skip",
    Phase.IDENTITY: "Tab/↑↓ field  ←→ setup type  Enter next  Esc back",
    Phase.SHELL: "↑↓ row  ←→ change  Enter next  Esc back",
    Phase.DEV_TOOLS: "Tab category  ↑↓ move  Space toggle  a all  n none  Enter next  Esc back",
    Phase.APPS: "Tab category  ↑↓ move  Space toggle  d details  Enter next  Esc back",
    Phase.REVIEW: "Enter/y install  Esc/n back  ↑↓ scroll",
    Phase.INSTALL: "Ctrl+C abort",
    Phase.COMPLETE: "Enter/q quit",
}


def render(controller: WizardController) -> RenderableType:
    """Render the full screen for the current phase."""
    phase = controller.phase
    body = _BODIES[phase](controller)
    return Group(
        _header(controller),
        body,
        Text(FOOTERS[phase], style="dim"),
    )


def _header(controller: WizardController) -> RenderableType:
    phase = controller.phase
    steps = Text()
    for p in Phase.all():
        style = f"bold {ACCENT}" if p is phase else "dim"
        steps.append(f" {p.label} ", style=style)
    rows: list[RenderableType] = [steps, Text(phase.description, style="italic")]
    if controller.system is not None:
        rows.append(_system_line(controller.system))
    return Panel(
        Group(*rows),
        title="[bold]LOADSTAR[/bold]",
        border_style=ACCENT,
    )


def _system_line(system: SystemInfo) -> Text:
    line = Text(system.describe(), style="dim")
    line.append("  ")
    if system.has_homebrew():
        line.append(" brew ", style="bold green")
    else:
        line.append(" brew missing ", style="bold yellow")
    return line


def _boot(controller: WizardController) -> RenderableType:
    lines = Text()
    for line in controller.boot.visible_lines():
        lines.append(f"> {line}\n", style="green")
    if not controller.boot.complete:
        lines.append(str(controller.spinner), style=ACCENT)
    return Panel(lines, border_style="green")


def _identity(controller: WizardController) -> RenderableType:
    identity = controller.session.identity
    focused = controller.session.input_field
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right")
    table.add_column()

    fields = (
        ("Name", identity.name),
        ("Email", identity.email),
        ("GitHub", identity.github_username),
    )
    for i, (label, value) in enumerate(fields):
        cursor = "█" if i == focused else ""
        style = HIGHLIGHT if i == focused else ""
        table.add_row(Text(label, style=style), Text(f"{value}{cursor}", style=style))

    setup = identity.setup_type
    style = HIGHLIGHT if focused == SETUP_TYPE_FIELD else ""
    table.add_row(
        Text("Setup", style=style),
        Text(f"◀ {setup.icon} {setup.label} ▶  {setup.description}", style=style),
    )
    return Panel(table, title="Identity", border_style=ACCENT)


def _shell(controller: WizardController) -> RenderableType:
    sc = controller.session.shell_config
    mux = sc.multiplexer
    rows = (
        ("Shell", sc.shell.label, sc.shell.description),
        ("Prompt", sc.prompt.label, sc.prompt.description),
        ("Terminal", sc.terminal.label, sc.terminal.description),
        ("Multiplexer", mux.label if mux else "None", mux.description if mux else "No multiplexer"),
    )
    table = Table.grid(padding=(0, 2))
    for i, (label, value, description) in enumerate(rows):
        focused = i == controller.session.cursor
        marker = "▸" if focused else " "
        table.add_row(
            Text(f"{marker} {label}", style=HIGHLIGHT if focused else ""),
            Text(f"◀ {value} ▶", style="bold" if focused else ""),
            Text(description, style="dim"),
        )
    return Panel(table, title="Shell", border_style=ACCENT)


def _selection(controller: WizardController) -> RenderableType:
    session = controller.session
    current = controller.current_category()

    tabs = Text()
    for category in controller.current_categories():
        style = f"reverse {ACCENT}" if category is current else "dim"
        tabs.append(f" {category.icon} {category.display_name} ", style=style)

    items = controller.category_items(current)
    highlighted = controller.highlighted_entry()
    table = Table.grid(padding=(0, 1))
    for entry in items:
        mark = "[x]" if session.is_selected(entry.id) else "[ ]"
        style = HIGHLIGHT if entry is highlighted else ""
        table.add_row(Text(mark, style="green"), Text(entry.name, style=style), Text(entry.description, style="dim"))

    parts: list[RenderableType] = [tabs, table]
    if session.phase is Phase.APPS and session.show_details and highlighted is not None:
        parts.append(_details(highlighted))
    parts.append(
        Text(f"{session.selected_count()} of {session.total_count()} selected", style="dim")
    )
    return Panel(Group(*parts), title=session.phase.label.title(), border_style=ACCENT)


def _details(entry: CatalogEntry) -> RenderableType:
    lines = [
        Text(entry.name, style="bold"),
        Text(entry.description),
        Text(f"Install: {entry.install.command()}", style="dim"),
    ]
    if entry.dependencies:
        lines.append(Text(f"Requires: {', '.join(entry.dependencies)}", style="dim"))
    if entry.url:
        lines.append(Text(entry.url, style="underline blue"))
    return Panel(Group(*lines), title="Details", border_style="dim")


def _review(controller: WizardController) -> RenderableType:
    visible = controller.review_lines()[controller.session.scroll:]
    return Panel(Text("\n".join(visible)), title="Review", border_style=ACCENT)


def _install(controller: WizardController) -> RenderableType:
    bar = ProgressBar(total=1.0, completed=controller.progress, complete_style=ACCENT)
    current = controller.current_item or "Preparing..."
    status = Text()
    status.append(f"{controller.spinner} ", style=ACCENT)
    status.append(current, style="bold")
    status.append(
        f"   {controller.completed}/{controller.total}"
        f"  ✓ {controller.succeeded}  ↷ {controller.skipped}  ✗ {controller.failed}",
        style="dim",
    )
    return Panel(Group(bar, status, _log(controller)), title="Install", border_style=ACCENT)


def _complete(controller: WizardController) -> RenderableType:
    if controller.aborted:
        headline = Text("Installation aborted", style="bold red")
    elif controller.error_message:
        headline = Text(f"Installation failed: {controller.error_message}", style="bold red")
    else:
        headline = Text("Transformation complete", style="bold green")

    counts = Text(
        f"{controller.succeeded} succeeded, {controller.failed} failed, "
        f"{controller.skipped} skipped"
    )
    return Panel(Group(headline, counts, _log(controller)), title="Complete", border_style="green")


def _log(controller: WizardController, lines: int = 12) -> RenderableType:
    text = Text()
    for line in list(controller.log_lines)[-lines:]:
        text.append(line + "\n", style=log_style(line))
    return Panel(text, title="Log", border_style="dim")


def log_style(line: str) -> str:
    stripped = line.lstrip()
    for prefix, style in LOG_STYLES:
        if stripped.startswith(prefix):
            return style
    return ""


_BODIES = {
    Phase.BOOT: _boot,
    Phase.IDENTITY: _identity,
    Phase.SHELL: _shell,
    Phase.DEV_TOOLS: _selection,
    Phase.APPS: _selection,
    Phase.REVIEW: _review,
    Phase.INSTALL: _install,
    Phase.COMPLETE: _complete,
}
