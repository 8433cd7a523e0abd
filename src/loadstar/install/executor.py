"""Install executor.

Runs the selected catalog entries as external commands, one at a time, and
reports every observation through an ``EventChannel``. Individual failures
are recorded and the run continues; only a failed Homebrew bootstrap stops
it.

Batching follows a fixed order: Homebrew formulae, then Homebrew casks, then
every other mechanism. Within a batch entries keep their input order.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from typing_extensions import assert_never

from loadstar.catalog.models import (
    CaskDirective,
    CatalogEntry,
    FormulaDirective,
    InstallDirective,
    PackageDirective,
    ScriptDirective,
    ShellDirective,
)
from loadstar.errors import BootstrapError, CommandNotFoundError
from loadstar.install.events import (
    Done,
    EventChannel,
    FatalError,
    InstallSummary,
    ItemFailed,
    ItemSkipped,
    ItemStarted,
    ItemSucceeded,
    PhaseStarted,
    Progress,
)
from loadstar.install.process import CommandResult, CommandRunner, Runner

logger = logging.getLogger(__name__)

PHASE_BOOTSTRAP = "Homebrew Bootstrap"
PHASE_FORMULAE = "Homebrew Formulae"
PHASE_CASKS = "Homebrew Casks"
PHASE_OTHER = "Additional Tools"

ALREADY_INSTALLED = "Already installed"

BOOTSTRAP_COMMAND = (
    "NONINTERACTIVE=1 /bin/bash -c "
    '"$(curl -fsSL https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
)


def dedupe(entries: Sequence[CatalogEntry]) -> list[CatalogEntry]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[CatalogEntry] = []
    for entry in entries:
        if entry.id not in seen:
            seen.add(entry.id)
            unique.append(entry)
    return unique


def plan_batches(
    entries: Sequence[CatalogEntry],
) -> list[tuple[str, list[CatalogEntry]]]:
    """Partition entries into (phase name, entries) batches in run order.

    Empty batches are left out.
    """
    formulae = [e for e in entries if isinstance(e.install, FormulaDirective)]
    casks = [e for e in entries if isinstance(e.install, CaskDirective)]
    others = [
        e
        for e in entries
        if not isinstance(e.install, (FormulaDirective, CaskDirective))
    ]

    batches = [
        (PHASE_FORMULAE, formulae),
        (PHASE_CASKS, casks),
        (PHASE_OTHER, others),
    ]
    return [(phase, batch) for phase, batch in batches if batch]


class InstallExecutor:
    """Executes install directives and streams events.

    Args:
        channel: Where events are sent. Sends after the consumer has
            closed it are dropped, and the run carries on regardless.
        runner: Process runner; defaults to a real ``CommandRunner``.
    """

    def __init__(self, channel: EventChannel, runner: Runner | None = None) -> None:
        self.channel = channel
        self.runner: Runner = runner or CommandRunner()
        self.fatal = False

    def run(self, entries: Sequence[CatalogEntry]) -> InstallSummary:
        """Install ``entries`` and return the summary.

        The returned summary is empty if the Homebrew bootstrap failed.
        """
        summary = InstallSummary()
        self.fatal = False
        items = dedupe(entries)
        total = len(items)

        try:
            self._ensure_homebrew()
        except BootstrapError as e:
            logger.error("Bootstrap failed: %s", e)
            self.fatal = True
            self.channel.send(FatalError(f"Failed to install Homebrew: {e}"))
            return summary

        completed = 0
        for phase, batch in plan_batches(items):
            self.channel.send(PhaseStarted(phase))
            for entry in batch:
                self._install_entry(entry, summary)
                completed += 1
                self.channel.send(Progress(completed=completed, total=total))

        self.channel.send(
            Done(
                succeeded=len(summary.succeeded),
                failed=len(summary.failed),
                skipped=len(summary.skipped),
            )
        )
        logger.info(
            "Install finished: %d succeeded, %d failed, %d skipped",
            len(summary.succeeded),
            len(summary.failed),
            len(summary.skipped),
        )
        return summary

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    def _ensure_homebrew(self) -> None:
        """Install Homebrew if missing, otherwise refresh it.

        Raises:
            BootstrapError: If Homebrew is missing and cannot be installed.
        """
        self.channel.send(PhaseStarted(PHASE_BOOTSTRAP))

        if self.runner.which("brew") is None:
            self.channel.log("[BREW] Homebrew not found, installing...")
            self.channel.log("[BREW] Downloading Homebrew installer...")
            try:
                result = self.runner.run_shell(BOOTSTRAP_COMMAND)
            except CommandNotFoundError as e:
                raise BootstrapError(str(e)) from e
            self._forward_output(result)
            if not result.ok:
                raise BootstrapError(
                    f"Homebrew install failed: {result.stderr.strip() or result.error_text()}"
                )
            self.channel.log("[BREW] Homebrew installed successfully")
            return

        self.channel.log("[BREW] Homebrew found, updating...")
        try:
            result = self._run_logged(["brew", "update"])
        except CommandNotFoundError as e:
            self.channel.log(f"  [WARN] brew update: {e}")
            return
        if not result.ok:
            self.channel.log(f"  [WARN] brew update failed: {result.error_text()}")

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def _install_entry(self, entry: CatalogEntry, summary: InstallSummary) -> None:
        directive = entry.install
        self.channel.send(ItemStarted(name=entry.name, method=directive.command()))

        if self.is_installed(directive):
            self.channel.send(ItemSkipped(name=entry.name, reason=ALREADY_INSTALLED))
            summary.skipped.append((entry.name, ALREADY_INSTALLED))
            logger.info("Skipped %s (already installed)", entry.name)
            return

        start = time.monotonic()
        try:
            result = self._invoke(directive)
        except CommandNotFoundError as e:
            error = str(e)
        else:
            error = None if result.ok else result.error_text()

        if error is None:
            duration_ms = int((time.monotonic() - start) * 1000)
            self.channel.send(ItemSucceeded(name=entry.name, duration_ms=duration_ms))
            summary.succeeded.append(entry.name)
            logger.info("Installed %s in %dms", entry.name, duration_ms)
        else:
            self.channel.send(ItemFailed(name=entry.name, error=error))
            summary.failed.append((entry.name, error))
            logger.warning("Failed to install %s: %s", entry.name, error)

    def is_installed(self, directive: InstallDirective) -> bool:
        """Mechanism-specific "already installed" check.

        Only Homebrew keeps a registry we can query; every other mechanism
        always runs its installer.
        """
        if isinstance(directive, FormulaDirective):
            argv = ["brew", "list", "--formula", directive.package]
        elif isinstance(directive, CaskDirective):
            argv = ["brew", "list", "--cask", directive.package]
        else:
            return False

        try:
            return self.runner.run(argv).ok
        except CommandNotFoundError:
            return False

    def _invoke(self, directive: InstallDirective) -> CommandResult:
        if isinstance(directive, (FormulaDirective, CaskDirective, PackageDirective)):
            return self._run_logged(directive.argv())
        elif isinstance(directive, ScriptDirective):
            self.channel.log(f"[SCRIPT] Downloading {directive.url}")
            return self._run_shell_logged(directive.command())
        elif isinstance(directive, ShellDirective):
            self.channel.log(f"[CMD] {directive.command()}")
            return self._run_shell_logged(directive.command())
        else:
            assert_never(directive)

    def _run_logged(self, argv: list[str]) -> CommandResult:
        self.channel.log(f"[RUN] {' '.join(argv)}")
        result = self.runner.run(argv)
        self._forward_output(result)
        return result

    def _run_shell_logged(self, command: str) -> CommandResult:
        result = self.runner.run_shell(command)
        self._forward_output(result)
        return result

    def _forward_output(self, result: CommandResult) -> None:
        for line in result.output_lines():
            self.channel.log(f"  {line}")
