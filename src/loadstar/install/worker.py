"""Background install worker.

The worker owns a private snapshot of the session and talks to the UI only
through the event channel. Its summary is read after ``join``.
"""

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path

from loadstar.install.dotfiles import DotfileWriter
from loadstar.install.events import EventChannel, FatalError, InstallSummary
from loadstar.install.executor import InstallExecutor
from loadstar.install.git_setup import GitSetup
from loadstar.install.process import CommandRunner, Runner
from loadstar.system import OS, SystemInfo
from loadstar.wizard.session import Session

logger = logging.getLogger(__name__)


class InstallWorker:
    """Runs the install, git setup and dotfile steps on a thread.

    Args:
        session: Snapshot of the wizard session. The caller must not pass
            the live session.
        channel: Channel the UI drains.
        runner: Process runner shared by every step.
        system: Host info; detected lazily when omitted.
    """

    def __init__(
        self,
        session: Session,
        channel: EventChannel,
        runner: Runner | None = None,
        system: SystemInfo | None = None,
    ) -> None:
        self.session = session
        self.channel = channel
        self.runner: Runner = runner or CommandRunner()
        self.system = system
        self.summary = InstallSummary()
        self._thread = threading.Thread(
            target=self._run, name="loadstar-install", daemon=True
        )

    def start(self) -> None:
        self._thread.start()

    def is_finished(self) -> bool:
        return self._thread.ident is not None and not self._thread.is_alive()

    def join(self, timeout: float | None = None) -> InstallSummary:
        self._thread.join(timeout)
        return self.summary

    def _run(self) -> None:
        try:
            self.summary = self.run_steps()
        except Exception as e:
            # Nothing may escape the thread; the UI only sees events.
            logger.exception("Install worker crashed")
            self.channel.send(FatalError(f"Unexpected error: {e}"))

    def run_steps(self) -> InstallSummary:
        """Run every step synchronously on the calling thread."""
        executor = InstallExecutor(self.channel, self.runner)
        summary = executor.run(self.session.get_selected())
        if executor.fatal:
            return summary

        home_dir, config_dir, hostname, macos = self._host()
        GitSetup(
            self.channel, self.runner, home_dir, hostname=hostname, macos=macos
        ).run(self.session)

        if self.session.write_dotfiles:
            DotfileWriter(self.channel, home_dir, config_dir).run(self.session)

        return summary

    def _host(self) -> tuple[Path, Path, str, bool]:
        if self.system is not None:
            s = self.system
            return s.home_dir, s.config_dir, s.hostname, s.os is OS.MACOS
        home = Path.home()
        return home, home / ".config", "localhost", sys.platform == "darwin"
