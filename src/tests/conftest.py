"""Shared fixtures for loadstar tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from loadstar.errors import CommandNotFoundError
from loadstar.install.process import SHELL, CommandResult
from loadstar.system import OS, Arch, SystemInfo


class FakeRunner:
    """Scripted process runner.

    Every command succeeds with no output unless a rule says otherwise.
    ``brew list`` fails by default so nothing counts as installed. Rules
    are matched on an argv prefix; the most recently added rule wins.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.missing: set[str] = set()
        self._rules: list[tuple[list[str], CommandResult | Exception]] = []
        self._effects: list[tuple[list[str], Callable[[list[str]], None]]] = []
        self.on(["brew", "list"], returncode=1)

    def on(
        self,
        prefix: Sequence[str],
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
    ) -> FakeRunner:
        self._rules.append(
            (list(prefix), CommandResult(list(prefix), returncode, stdout, stderr))
        )
        return self

    def on_shell(self, command: str, **kwargs: object) -> FakeRunner:
        return self.on([SHELL, "-c", command], **kwargs)  # type: ignore[arg-type]

    def fail_spawn(self, prefix: Sequence[str]) -> FakeRunner:
        self._rules.append(
            (list(prefix), CommandNotFoundError(f"Failed to run '{prefix[0]}'", list(prefix)))
        )
        return self

    def side_effect(self, prefix: Sequence[str], effect: Callable[[list[str]], None]) -> FakeRunner:
        """Call ``effect`` with the argv of every matching command before it returns."""
        self._effects.append((list(prefix), effect))
        return self

    def run(self, argv: Sequence[str]) -> CommandResult:
        argv = list(argv)
        self.calls.append(argv)
        for prefix, effect in self._effects:
            if argv[: len(prefix)] == prefix:
                effect(argv)
        for prefix, outcome in reversed(self._rules):
            if argv[: len(prefix)] == prefix:
                if isinstance(outcome, Exception):
                    raise outcome
                return CommandResult(argv, outcome.returncode, outcome.stdout, outcome.stderr)
        return CommandResult(argv, 0, "", "")

    def run_shell(self, command: str) -> CommandResult:
        return self.run([SHELL, "-c", command])

    def which(self, program: str) -> str | None:
        return None if program in self.missing else f"/usr/bin/{program}"

    def ran(self, *prefix: str) -> bool:
        """True if any recorded call starts with ``prefix``."""
        return any(call[: len(prefix)] == list(prefix) for call in self.calls)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def loadstar_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``LOADSTAR_HOME`` at a temporary directory."""
    home = tmp_path / "loadstar-home"
    monkeypatch.setenv("LOADSTAR_HOME", str(home))
    return home


@pytest.fixture
def fake_system(tmp_path: Path) -> SystemInfo:
    home = tmp_path / "home"
    home.mkdir()
    return SystemInfo(
        os=OS.LINUX,
        arch=Arch.X86_64,
        hostname="testbox",
        shell="/bin/zsh",
        home_dir=home,
        config_dir=home / ".config",
    )
