"""Tests for the poll loop: single-shot and loop modes, retry and cancellation."""

from __future__ import annotations

import errno
import io
import json
import threading

import pytest

from vstat.decoders import get_decoder
from vstat.errors import NoDataError
from vstat.formatter import format_json, format_text
from vstat.mocks import MockClock, MockMemoryAccess, MockProcedureAccess
from vstat.poller import Poller, PollerState
from vstat.sink import Sink, StdoutSink


def _flaky_memory() -> MockMemoryAccess:
    memory = MockMemoryAccess()
    memory.set_memory(0xF660, bytes([0x80, 0x07, 0x38, 0x04]))
    memory.set_memory(0xF6E9, b"\x00")
    memory.set_memory(0x1C3A, b"\x00")
    memory.set_memory(0x1C41, b"\x02")
    return memory


def _poller(region: str, memory, *, interval_ms=0, clock=None, cancel=None, out=None, **kwargs):
    return Poller(
        get_decoder(region),
        memory,
        MockProcedureAccess(),
        StdoutSink(out if out is not None else io.StringIO()),
        formatter=kwargs.pop("formatter", format_json),
        interval_ms=interval_ms,
        clock=clock or MockClock(),
        cancel=cancel,
        **kwargs,
    )


class _FailingSink(Sink):
    """Raises ENOSPC for the first ``failures`` writes."""

    def __init__(self, failures: int):
        self._failures = failures
        self.attempts = 0
        self.written = []

    def write(self, text: str) -> None:
        self.attempts += 1
        if self._failures:
            self._failures -= 1
            raise OSError(errno.ENOSPC, "No space left on device")
        self.written.append(text)


# =========================================================================
# Single-shot mode
# =========================================================================


class TestSingleShot:
    def test_success_emits_once_and_finishes(self):
        out = io.StringIO()
        clock = MockClock(start_ms=1_700_000_000_123)
        poller = _poller("flaky", _flaky_memory(), clock=clock, out=out)

        assert poller.run() == 1
        assert poller.state is PollerState.DONE
        assert clock.get_sleep_calls() == []

        data = json.loads(out.getvalue())
        assert data == {
            "width": 1920, "height": 1080, "signal": "yes", "time": 1_700_000_000_123,
            "fid": 0, "colorspace": "RGB", "format": "HDMI",
        }

    def test_unknown_region_empty_read_raises_and_emits_nothing(self):
        out = io.StringIO()
        memory = MockMemoryAccess()
        memory.set_memory(0xF6E9, b"\x00")
        poller = _poller("unknown", memory, out=out)

        with pytest.raises(NoDataError, match="Read nothing"):
            poller.run()
        assert out.getvalue() == ""
        assert poller.state is PollerState.DONE

    def test_fazant_never_fails(self):
        out = io.StringIO()
        _poller("fazant", MockMemoryAccess(), out=out, formatter=format_text).run()
        assert "width: 42\n" in out.getvalue()
        assert "signal: fazantfazantfazant\n" in out.getvalue()

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            _poller("fazant", MockMemoryAccess(), interval_ms=-1)


# =========================================================================
# Loop mode
# =========================================================================


class TestLoop:
    def test_retries_after_failed_cycle(self):
        out = io.StringIO()
        memory = _flaky_memory()
        memory.fail_next()
        clock = MockClock(cancel_after=2)
        poller = _poller("flaky", memory, interval_ms=50, clock=clock, out=out)

        emitted = poller.run()

        assert emitted == 1
        # First cycle failed and slept, the second succeeded and slept too
        assert clock.get_sleep_calls() == [0.05, 0.05]
        lines = out.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["width"] == 1920

    def test_keeps_running_after_success(self):
        memory = _flaky_memory()
        memory.fail_next()
        seen = []

        def should_continue(snapshot):
            seen.append(snapshot)
            return len(seen) < 3

        poller = _poller("flaky", memory, interval_ms=50, should_continue=should_continue)
        assert poller.run() == 2
        assert seen[0] is None
        assert seen[1] is not None and seen[2] is not None

    def test_timestamp_stamped_per_cycle(self):
        out = io.StringIO()
        clock = MockClock(start_ms=1000, cancel_after=3)
        _poller("fazant", MockMemoryAccess(), interval_ms=250, clock=clock, out=out).run()
        times = [json.loads(line)["time"] for line in out.getvalue().splitlines()]
        assert times == [1000, 1250, 1500]

    def test_failures_are_silent(self):
        out = io.StringIO()
        memory = MockMemoryAccess()
        clock = MockClock(cancel_after=5)
        assert _poller("murderous", memory, interval_ms=10, clock=clock, out=out).run() == 0
        assert out.getvalue() == ""
        assert len(memory.get_reads()) == 5

    def test_cancel_before_sleep_stops_loop(self):
        cancel = threading.Event()

        def should_continue(snapshot):
            cancel.set()
            return True

        clock = MockClock()
        poller = _poller(
            "fazant", MockMemoryAccess(), interval_ms=50, clock=clock, cancel=cancel,
            should_continue=should_continue,
        )
        assert poller.run() == 1
        assert clock.get_sleep_calls() == []
        assert poller.state is PollerState.DONE

    def test_stop_sets_cancel_event(self):
        poller = _poller("fazant", MockMemoryAccess(), interval_ms=50)
        poller.stop()
        assert poller.cancel_event.is_set()
        assert poller.run() == 1

    def test_cancel_interrupts_real_sleep(self):
        # RealClock waits on the event, so a stop from another thread ends the loop early
        poller = Poller(
            get_decoder("fazant"),
            MockMemoryAccess(),
            MockProcedureAccess(),
            StdoutSink(io.StringIO()),
            interval_ms=60_000,
        )
        timer = threading.Timer(0.05, poller.stop)
        timer.start()
        try:
            assert poller.run() == 1
        finally:
            timer.cancel()
        assert poller.state is PollerState.DONE

    def test_write_failure_retried_in_loop(self):
        sink = _FailingSink(failures=1)
        poller = Poller(
            get_decoder("fazant"),
            MockMemoryAccess(),
            MockProcedureAccess(),
            sink,
            interval_ms=50,
            clock=MockClock(cancel_after=3),
        )
        assert poller.run() == 2
        assert sink.attempts == 3
        assert len(sink.written) == 2
        assert poller.state is PollerState.DONE

    def test_write_failure_raises_in_single_shot(self):
        poller = Poller(
            get_decoder("fazant"),
            MockMemoryAccess(),
            MockProcedureAccess(),
            _FailingSink(failures=1),
            clock=MockClock(),
        )
        with pytest.raises(OSError):
            poller.run()


# =========================================================================
# poll_once
# =========================================================================


class TestPollOnce:
    def test_returns_stamped_snapshot(self):
        clock = MockClock(start_ms=42)
        snap = _poller("fazant", MockMemoryAccess(), clock=clock).poll_once()
        assert snap.timestamp == 42

    def test_returns_none_on_failure(self):
        out = io.StringIO()
        assert _poller("flaky", MockMemoryAccess(), out=out).poll_once() is None
        assert out.getvalue() == ""
