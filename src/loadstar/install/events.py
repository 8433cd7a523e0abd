"""Install events and the channel that carries them to the UI.

Events form a closed set: every consumer dispatches over ``InstallEvent``
with ``isinstance`` and ends in ``assert_never`` so a new event kind fails
type checking everywhere it is not handled.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class PhaseStarted:
    """A batch of installs (or a setup stage) is starting."""

    phase: str


@dataclass(frozen=True)
class ItemStarted:
    name: str
    method: str


@dataclass(frozen=True)
class ItemSucceeded:
    name: str
    duration_ms: int


@dataclass(frozen=True)
class ItemSkipped:
    name: str
    reason: str


@dataclass(frozen=True)
class ItemFailed:
    name: str
    error: str


@dataclass(frozen=True)
class LogLine:
    """Informational output line; never affects counters."""

    text: str


@dataclass(frozen=True)
class Progress:
    completed: int
    total: int


@dataclass(frozen=True)
class Done:
    succeeded: int
    failed: int
    skipped: int


@dataclass(frozen=True)
class FatalError:
    """The run cannot continue; no further item events follow."""

    message: str


InstallEvent = Union[
    PhaseStarted,
    ItemStarted,
    ItemSucceeded,
    ItemSkipped,
    ItemFailed,
    LogLine,
    Progress,
    Done,
    FatalError,
]


@dataclass
class InstallSummary:
    """Outcome of an install run.

    Attributes:
        succeeded: Names of items that installed successfully.
        failed: (name, error) pairs for items that failed.
        skipped: (name, reason) pairs for items that were skipped.
    """

    succeeded: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed) + len(self.skipped)

    def is_empty(self) -> bool:
        return self.total == 0


class EventChannel:
    """Unbounded FIFO queue from one producer thread to one consumer.

    ``send`` never blocks. Once the consumer calls ``close`` further sends
    are dropped silently, so a detached producer can keep running to
    completion without anyone listening.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[InstallEvent] = queue.SimpleQueue()
        self._closed = threading.Event()

    def send(self, event: InstallEvent) -> bool:
        """Enqueue an event. Returns False if the channel was closed."""
        if self._closed.is_set():
            return False
        self._queue.put(event)
        return True

    def log(self, text: str) -> bool:
        return self.send(LogLine(text))

    def drain(self) -> list[InstallEvent]:
        """Return every event currently queued without blocking."""
        events: list[InstallEvent] = []
        if self._closed.is_set():
            return events
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events

    def close(self) -> None:
        """Detach the consumer and discard anything still queued."""
        self._closed.set()
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return

    @property
    def closed(self) -> bool:
        return self._closed.is_set()
