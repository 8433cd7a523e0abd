"""External process invocation."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

from loadstar.errors import CommandNotFoundError

logger = logging.getLogger(__name__)

SHELL = "/bin/bash"


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def output_lines(self) -> list[str]:
        """Non-empty stdout lines followed by non-empty stderr lines."""
        lines = self.stdout.splitlines() + self.stderr.splitlines()
        return [line for line in lines if line.strip()]

    def error_text(self) -> str:
        """Last non-empty stderr line, or a generic exit-code message."""
        for line in reversed(self.stderr.splitlines()):
            if line.strip():
                return line.strip()
        return f"exited with code {self.returncode}"


class Runner(Protocol):
    """What the executor and setup steps need from a process runner."""

    def run(self, argv: Sequence[str]) -> CommandResult: ...

    def run_shell(self, command: str) -> CommandResult: ...

    def which(self, program: str) -> str | None: ...


class CommandRunner:
    """Runs commands to completion, capturing output as text.

    Blocks until the process exits; there is no timeout.
    """

    def __init__(self, env: dict[str, str] | None = None) -> None:
        self.env = env

    def run(self, argv: Sequence[str]) -> CommandResult:
        """Run ``argv`` and capture its output.

        Raises:
            CommandNotFoundError: If the program cannot be spawned.
        """
        argv_list = list(argv)
        logger.debug("CMD %s", shlex.join(argv_list))

        try:
            p = subprocess.run(
                argv_list,
                text=True,
                errors="replace",
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self.env,
            )
        except OSError as e:
            raise CommandNotFoundError(
                f"Failed to run '{shlex.join(argv_list)}': {e}", argv=argv_list
            ) from e

        if p.returncode != 0:
            logger.debug("EXIT %d %s", p.returncode, p.stderr.strip())

        return CommandResult(
            argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr
        )

    def run_shell(self, command: str) -> CommandResult:
        return self.run([SHELL, "-c", command])

    def which(self, program: str) -> str | None:
        return shutil.which(program)
