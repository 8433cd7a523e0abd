"""Unit tests for the install event channel."""

import threading

import pytest

from loadstar.install.events import (
    Done,
    EventChannel,
    InstallSummary,
    LogLine,
    PhaseStarted,
    Progress,
)


@pytest.mark.unit
class TestEventChannel:
    """Test channel ordering and close semantics."""

    def test_fifo(self) -> None:
        """Test events drain in send order."""
        channel = EventChannel()
        events = [PhaseStarted("x"), LogLine("a"), Progress(1, 2), Done(1, 0, 0)]
        for event in events:
            assert channel.send(event) is True
        assert channel.drain() == events
        assert channel.drain() == []

    def test_send_after_close_is_dropped(self) -> None:
        """Test sends after close return False and are never delivered."""
        channel = EventChannel()
        channel.log("before")
        channel.close()
        assert channel.closed
        assert channel.log("after") is False
        assert channel.drain() == []

    def test_producer_thread(self) -> None:
        """Test events sent from another thread arrive in order."""
        channel = EventChannel()

        def produce() -> None:
            for i in range(100):
                channel.send(Progress(i, 100))

        thread = threading.Thread(target=produce)
        thread.start()
        thread.join()
        assert [e.completed for e in channel.drain()] == list(range(100))


@pytest.mark.unit
class TestInstallSummary:
    """Test summary bookkeeping."""

    def test_total(self) -> None:
        """Test total counts every outcome."""
        summary = InstallSummary(
            succeeded=["A"], failed=[("B", "boom")], skipped=[("C", "Already installed")]
        )
        assert summary.total == 3
        assert not summary.is_empty()
        assert InstallSummary().is_empty()
