"""Wizard session state.

The session is owned by the interactive loop. The install worker receives a
deep copy (``snapshot``) and never sees the live object.
"""

from __future__ import annotations

import copy
import getpass
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from loadstar import catalog
from loadstar.catalog.models import CatalogEntry
from loadstar.wizard.phases import (
    MultiplexerChoice,
    Phase,
    PromptChoice,
    SetupType,
    ShellChoice,
    TerminalChoice,
)


def default_real_name() -> str:
    """Best-effort real name of the current OS user."""
    try:
        import pwd

        gecos = pwd.getpwuid(os.getuid()).pw_gecos.split(",")[0].strip()
        if gecos:
            return gecos
    except (ImportError, KeyError):
        pass
    try:
        return getpass.getuser()
    except OSError:
        return ""


@dataclass
class Identity:
    name: str = ""
    email: str = ""
    github_username: str = ""
    setup_type: SetupType = SetupType.PERSONAL


@dataclass
class ShellConfig:
    shell: ShellChoice = ShellChoice.ZSH
    prompt: PromptChoice = PromptChoice.STARSHIP
    terminal: TerminalChoice = TerminalChoice.DEFAULT
    multiplexer: MultiplexerChoice | None = MultiplexerChoice.TMUX


@dataclass
class Session:
    """All state collected by the wizard.

    Attributes:
        phase: Current wizard phase.
        identity: Who the machine is being set up for.
        shell_config: Shell, prompt, terminal and multiplexer choices.
        selected: Ids of selected catalog entries.
        generate_ssh_key: Create an SSH key after installing.
        setup_git_signing: Configure GPG commit signing after installing.
        write_dotfiles: Write starter config files after installing.
        show_details: Show the details panel on the apps screen.
        cursor: Highlighted row on list screens.
        scroll: Category tab (selection screens) or scroll offset (review).
        input_field: Focused field on the identity screen.
    """

    phase: Phase = Phase.BOOT
    identity: Identity = field(default_factory=Identity)
    shell_config: ShellConfig = field(default_factory=ShellConfig)
    selected: set[str] = field(default_factory=set)
    generate_ssh_key: bool = True
    setup_git_signing: bool = False
    write_dotfiles: bool = True
    show_details: bool = True
    cursor: int = 0
    scroll: int = 0
    input_field: int = 0

    @classmethod
    def create(
        cls,
        extra_selected: Iterable[str] = (),
        last_run: dict[str, Any] | None = None,
    ) -> Session:
        """Build a fresh session with essentials pre-selected.

        Args:
            extra_selected: Additional catalog ids to pre-select.
            last_run: Saved values from a previous run; these replace the
                defaults where present. The extra ids stay selected either way.
        """
        session = cls(
            identity=Identity(name=default_real_name()),
            selected={entry.id for entry in catalog.essential()} | set(extra_selected),
        )
        if last_run:
            session.apply_saved(last_run)
            session.selected |= set(extra_selected)
        return session

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------

    def advance(self) -> bool:
        """Move to the next phase. Returns False at the last phase."""
        nxt = self.phase.next()
        if nxt is None:
            return False
        self._enter(nxt)
        return True

    def go_back(self) -> bool:
        """Move to the previous phase.

        Boot is only reachable again from Identity; from later phases the
        walk back stops at Identity.
        """
        prev = self.phase.prev()
        if prev is None:
            return False
        if prev is Phase.BOOT and self.phase is not Phase.IDENTITY:
            return False
        self._enter(prev)
        return True

    def _enter(self, phase: Phase) -> None:
        self.phase = phase
        self.cursor = 0
        self.scroll = 0

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def toggle_item(self, item_id: str) -> None:
        if item_id in self.selected:
            self.selected.discard(item_id)
        else:
            self.selected.add(item_id)

    def is_selected(self, item_id: str) -> bool:
        return item_id in self.selected

    def select_all(self, entries: Iterable[CatalogEntry]) -> None:
        self.selected.update(entry.id for entry in entries)

    def deselect_all(self, entries: Iterable[CatalogEntry]) -> None:
        self.selected.difference_update(entry.id for entry in entries)

    def get_selected(self) -> list[CatalogEntry]:
        """Selected entries in catalog order."""
        return [entry for entry in catalog.entries() if entry.id in self.selected]

    def selected_count(self) -> int:
        return len(self.selected)

    def total_count(self) -> int:
        return len(catalog.entries())

    def estimated_install_minutes(self) -> int:
        """Rough install time: five minutes of setup plus one per tool."""
        return 5 + len(self.selected)

    def snapshot(self) -> Session:
        """Independent deep copy for the install worker."""
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_saved(self) -> dict[str, Any]:
        """Values worth remembering for the next run."""
        multiplexer = self.shell_config.multiplexer
        return {
            "name": self.identity.name,
            "email": self.identity.email,
            "github_username": self.identity.github_username,
            "setup_type": self.identity.setup_type.name,
            "shell": self.shell_config.shell.name,
            "prompt": self.shell_config.prompt.name,
            "terminal": self.shell_config.terminal.name,
            "multiplexer": multiplexer.name if multiplexer else None,
            "selected": sorted(self.selected),
        }

    def apply_saved(self, saved: dict[str, Any]) -> None:
        """Restore values from ``to_saved`` output.

        Unknown enum names and catalog ids are ignored.
        """
        for attr in ("name", "email", "github_username"):
            value = saved.get(attr)
            if isinstance(value, str):
                setattr(self.identity, attr, value)

        self.identity.setup_type = _member(
            SetupType, saved.get("setup_type"), self.identity.setup_type
        )
        shell = self.shell_config
        shell.shell = _member(ShellChoice, saved.get("shell"), shell.shell)
        shell.prompt = _member(PromptChoice, saved.get("prompt"), shell.prompt)
        shell.terminal = _member(TerminalChoice, saved.get("terminal"), shell.terminal)
        if "multiplexer" in saved:
            mux = saved["multiplexer"]
            shell.multiplexer = (
                None if mux is None else _member(MultiplexerChoice, mux, shell.multiplexer)
            )

        ids = saved.get("selected")
        if isinstance(ids, list):
            known = {entry.id for entry in catalog.entries()}
            self.selected = {i for i in ids if i in known}


def _member(enum_cls: Any, name: Any, default: Any) -> Any:
    if isinstance(name, str) and name in enum_cls.__members__:
        return enum_cls[name]
    return default
