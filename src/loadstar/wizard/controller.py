"""Wizard controller.

Owns the live ``Session`` and everything the interactive loop needs between
frames: the boot animation, install counters, the log buffer and the
channel to the install worker. It has no terminal code of its own, so the
Textual app (and tests) drive it by calling ``handle_key`` and ``step``.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from typing_extensions import assert_never

from loadstar import catalog
from loadstar.catalog.models import CatalogEntry, Category
from loadstar.config import LoadstarConfig
from loadstar.install.events import (
    Done,
    EventChannel,
    FatalError,
    InstallEvent,
    ItemFailed,
    ItemSkipped,
    ItemStarted,
    ItemSucceeded,
    LogLine,
    PhaseStarted,
    Progress,
)
from loadstar.install.worker import InstallWorker
from loadstar.system import SystemInfo
from loadstar.wizard.boot import BootSequence, Spinner
from loadstar.wizard.phases import (
    MultiplexerChoice,
    Phase,
    PromptChoice,
    SetupType,
    ShellChoice,
    TerminalChoice,
    cycle,
    cycle_optional,
)
from loadstar.wizard.session import Session

logger = logging.getLogger(__name__)

IDENTITY_FIELDS = 4
SETUP_TYPE_FIELD = 3
SHELL_ROWS = 4

DEV_TOOL_CATEGORIES: tuple[Category, ...] = (
    Category.LANGUAGE,
    Category.EDITOR,
    Category.GIT,
    Category.CONTAINER,
    Category.CLOUD,
)

WorkerFactory = Callable[[Session, EventChannel], InstallWorker]


@dataclass(frozen=True)
class Key:
    """A key press.

    ``name`` uses Textual key names (``enter``, ``shift+tab``, ``ctrl+c``,
    ``a``); ``character`` is the printable character, if any.
    """

    name: str
    character: str | None = None

    @classmethod
    def char(cls, c: str) -> Key:
        return cls("space" if c == " " else c, c)

    @property
    def printable(self) -> str | None:
        c = self.character
        if c is not None and len(c) == 1 and c.isprintable():
            return c
        return None


class WizardController:
    """State and input handling for one wizard run.

    Args:
        session: Live session; only this controller mutates it.
        config: User settings (tick rate and log buffer size are read here).
        worker_factory: Builds the install worker from a session snapshot.
        on_complete: Called with the session when an install run finishes
            normally. Not called on abort or after a fatal error.
        system: Detected host, shown in the header when known.
    """

    def __init__(
        self,
        session: Session | None = None,
        config: LoadstarConfig | None = None,
        worker_factory: WorkerFactory | None = None,
        on_complete: Callable[[Session], None] | None = None,
        system: SystemInfo | None = None,
    ) -> None:
        self.config = config or LoadstarConfig()
        self.session = session or Session.create(self.config.extra_essentials)
        self.worker_factory: WorkerFactory = worker_factory or InstallWorker
        self.on_complete = on_complete
        self.system = system

        self.boot = BootSequence()
        self.spinner = Spinner()
        self.log_lines: deque[str] = deque(maxlen=self.config.log_buffer_lines)

        self.installing = False
        self.should_quit = False
        self.aborted = False
        self.error_message: str | None = None
        self.current_item: str | None = None
        self.total = 0
        self.completed = 0
        self.succeeded = 0
        self.failed = 0
        self.skipped = 0
        self.progress = 0.0

        self.channel: EventChannel | None = None
        self.worker: InstallWorker | None = None
        self._last_tick = time.monotonic()

    @property
    def phase(self) -> Phase:
        return self.session.phase

    def log(self, text: str) -> None:
        self.log_lines.append(text)

    # ------------------------------------------------------------------
    # Loop hooks
    # ------------------------------------------------------------------

    def step(self, now: float | None = None) -> None:
        """One loop iteration after input dispatch."""
        now = time.monotonic() if now is None else now
        if now - self._last_tick >= self.config.tick_rate:
            self.tick()
            self._last_tick = now

        if self.installing:
            self.drain_events()
            self.check_completion()

    def tick(self) -> None:
        self.spinner.tick()
        if self.phase is Phase.BOOT:
            self.boot.tick()
            if self.boot.complete:
                self.session.advance()

    def drain_events(self) -> None:
        if self.channel is None:
            return
        for event in self.channel.drain():
            self.apply_event(event)

    def apply_event(self, event: InstallEvent) -> None:
        """Fold one install event into counters and the log."""
        if isinstance(event, PhaseStarted):
            self.log(f"[PHASE] ═══ {event.phase} ═══")
        elif isinstance(event, ItemStarted):
            self.current_item = event.name
            self.log(f"[INSTALL] {event.name} ({event.method})")
        elif isinstance(event, ItemSucceeded):
            self.succeeded += 1
            self.log(f"[OK] {event.name} ({event.duration_ms / 1000:.1f}s)")
        elif isinstance(event, ItemSkipped):
            self.skipped += 1
            self.log(f"[SKIP] {event.name}: {event.reason}")
        elif isinstance(event, ItemFailed):
            self.failed += 1
            self.log(f"[FAIL] {event.name}: {event.error}")
        elif isinstance(event, LogLine):
            self.log(event.text)
        elif isinstance(event, Progress):
            self.completed = event.completed
            self.total = event.total
            self.progress = event.completed / event.total if event.total else 0.0
        elif isinstance(event, Done):
            self.current_item = None
            self.log(
                f"[DONE] {event.succeeded} succeeded, {event.failed} failed, "
                f"{event.skipped} skipped"
            )
        elif isinstance(event, FatalError):
            self.error_message = event.message
            self.log(f"[FATAL] {event.message}")
        else:
            assert_never(event)

    def check_completion(self) -> None:
        """Finish the run if the worker has exited.

        Does nothing once the run was aborted or already finished.
        """
        if not self.installing or self.worker is None or not self.worker.is_finished():
            return

        self.worker.join()
        self.drain_events()
        if self.channel is not None:
            self.channel.close()

        self.installing = False
        self.progress = 1.0
        self.current_item = None
        self.log("[COMPLETE] Installation finished!")
        if self.phase is Phase.INSTALL:
            self.session.advance()
        logger.info(
            "Run complete: %d succeeded, %d failed, %d skipped",
            self.succeeded,
            self.failed,
            self.skipped,
        )
        if self.on_complete is not None and self.error_message is None:
            self.on_complete(self.session)

    def start_installation(self) -> None:
        if self.installing:
            return

        self.total = self.session.selected_count()
        self.completed = self.succeeded = self.failed = self.skipped = 0
        self.progress = 0.0
        self.error_message = None
        self.aborted = False

        self.channel = EventChannel()
        self.worker = self.worker_factory(self.session.snapshot(), self.channel)
        self.installing = True
        self.session.phase = Phase.REVIEW
        self.session.advance()
        self.log(f"[START] Installing {self.total} item(s)")
        logger.info("Starting install of %d item(s)", self.total)
        self.worker.start()

    def abort(self) -> None:
        """Stop listening to the worker and jump to Complete.

        The worker thread is left to finish on its own; its events are
        discarded.
        """
        if self.channel is not None:
            self.channel.close()
        self.installing = False
        self.aborted = True
        self.current_item = None
        self.log("[ABORT] Installation interrupted by user")
        self.session.phase = Phase.COMPLETE
        logger.warning("Installation aborted by user")

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_key(self, key: Key) -> None:
        if key.name == "ctrl+c":
            if self.installing and self.phase is Phase.INSTALL:
                self.abort()
            else:
                self.should_quit = True
            return

        phase = self.phase
        if phase is Phase.BOOT:
            self.boot.skip()
            self.session.advance()
        elif phase is Phase.IDENTITY:
            self._identity_key(key)
        elif phase is Phase.SHELL:
            self._shell_key(key)
        elif phase is Phase.DEV_TOOLS:
            self._selection_key(key, list(DEV_TOOL_CATEGORIES))
        elif phase is Phase.APPS:
            self._selection_key(key, Category.all())
        elif phase is Phase.REVIEW:
            self._review_key(key)
        elif phase is Phase.INSTALL:
            pass
        elif phase is Phase.COMPLETE:
            if key.name in ("enter", "q"):
                self.should_quit = True

    def _identity_key(self, key: Key) -> None:
        s = self.session
        name = key.name

        if name in ("tab", "down"):
            s.input_field = (s.input_field + 1) % IDENTITY_FIELDS
        elif name in ("shift+tab", "up"):
            s.input_field = (s.input_field - 1) % IDENTITY_FIELDS
        elif name == "enter":
            if s.input_field == SETUP_TYPE_FIELD:
                s.advance()
            else:
                s.input_field += 1
        elif name == "escape":
            s.go_back()
        elif s.input_field == SETUP_TYPE_FIELD:
            if name in ("left", "right"):
                s.identity.setup_type = cycle(
                    SetupType.all(), s.identity.setup_type, forward=name == "right"
                )
        elif name == "backspace":
            attr = self._identity_attr()
            setattr(s.identity, attr, getattr(s.identity, attr)[:-1])
        elif key.printable is not None:
            attr = self._identity_attr()
            setattr(s.identity, attr, getattr(s.identity, attr) + key.printable)

    def _identity_attr(self) -> str:
        return ("name", "email", "github_username")[self.session.input_field]

    def _shell_key(self, key: Key) -> None:
        s = self.session
        name = key.name

        if name in ("up", "k"):
            s.cursor = (s.cursor - 1) % SHELL_ROWS
        elif name in ("down", "j"):
            s.cursor = (s.cursor + 1) % SHELL_ROWS
        elif name in ("left", "h", "right", "l"):
            self._cycle_shell_row(forward=name in ("right", "l"))
        elif name == "enter":
            s.advance()
        elif name == "escape":
            s.go_back()

    def _cycle_shell_row(self, forward: bool) -> None:
        sc = self.session.shell_config
        row = self.session.cursor
        if row == 0:
            sc.shell = cycle(ShellChoice.all(), sc.shell, forward)
        elif row == 1:
            sc.prompt = cycle(PromptChoice.all(), sc.prompt, forward)
        elif row == 2:
            sc.terminal = cycle(TerminalChoice.all(), sc.terminal, forward)
        else:
            sc.multiplexer = cycle_optional(MultiplexerChoice.all(), sc.multiplexer, forward)

    def _selection_key(self, key: Key, categories: list[Category]) -> None:
        s = self.session
        name = key.name
        s.scroll %= len(categories)
        items = self.category_items(categories[s.scroll])

        if name == "tab":
            s.scroll = (s.scroll + 1) % len(categories)
            s.cursor = 0
        elif name == "shift+tab":
            s.scroll = (s.scroll - 1) % len(categories)
            s.cursor = 0
        elif name in ("up", "k"):
            if items:
                s.cursor = (s.cursor - 1) % len(items)
        elif name in ("down", "j"):
            if items:
                s.cursor = (s.cursor + 1) % len(items)
        elif name == "space":
            if items:
                s.toggle_item(items[s.cursor % len(items)].id)
        elif name == "a":
            s.select_all(items)
        elif name == "n":
            s.deselect_all(items)
        elif name == "d" and s.phase is Phase.APPS:
            s.show_details = not s.show_details
        elif name == "enter":
            s.advance()
        elif name == "escape":
            s.go_back()

    def _review_key(self, key: Key) -> None:
        s = self.session
        name = key.name

        if name in ("enter", "y"):
            self.start_installation()
        elif name in ("escape", "n"):
            s.go_back()
        elif name in ("up", "k"):
            s.scroll = max(0, s.scroll - 1)
        elif name in ("down", "j"):
            s.scroll = min(s.scroll + 1, len(self.review_lines()) - 1)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @staticmethod
    def category_items(category: Category) -> list[CatalogEntry]:
        return catalog.by_category(category)

    def current_categories(self) -> list[Category]:
        if self.phase is Phase.DEV_TOOLS:
            return list(DEV_TOOL_CATEGORIES)
        return Category.all()

    def current_category(self) -> Category:
        categories = self.current_categories()
        return categories[self.session.scroll % len(categories)]

    def highlighted_entry(self) -> CatalogEntry | None:
        items = self.category_items(self.current_category())
        if not items:
            return None
        return items[self.session.cursor % len(items)]

    def review_lines(self) -> list[str]:
        """Summary shown on the Review screen, one entry per line."""
        s = self.session
        identity = s.identity
        sc = s.shell_config
        lines = [
            f"Name:     {identity.name}",
            f"Email:    {identity.email}",
            f"GitHub:   {identity.github_username}",
            f"Setup:    {identity.setup_type.label}",
            f"Shell:    {sc.shell.label} + {sc.prompt.label}",
            f"Terminal: {sc.terminal.label}",
            f"Mux:      {sc.multiplexer.label if sc.multiplexer else 'None'}",
            "",
            f"Selected tools ({s.selected_count()}):",
        ]
        lines.extend(f"  • {entry.name}" for entry in s.get_selected())
        lines.append("")
        lines.append(f"Estimated time: ~{s.estimated_install_minutes()} minutes")
        return lines
