"""Poll loop: run one decoder once or at a fixed interval.

Each cycle stamps the time, runs the decoder and, when it produced a
snapshot, renders it to the sink. In loop mode failed reads and failed
output writes are retried after the normal interval; a single-shot read
that fails raises NoDataError.

Usage:
    poller = Poller(decoder, memory, procedure, sink, interval_ms=500)
    poller.run()        # until poller.stop() or the cancel event is set
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from .decoders import Decoder
from .errors import NoDataError
from .formatter import Formatter, format_text
from .implementations import RealClock
from .interfaces import ClockInterface, MemoryAccessInterface, ProcedureAccessInterface
from .sink import Sink
from .snapshot import StatusSnapshot

logger = logging.getLogger(__name__)

ContinuePredicate = Callable[[Optional[StatusSnapshot]], bool]


class PollerState(Enum):
    READING = "reading"
    DONE = "done"


def _always(snapshot: Optional[StatusSnapshot]) -> bool:
    return True


class Poller:
    """Drives a decoder and hands its snapshots to a sink.

    Args:
        decoder: Strategy used on every cycle.
        memory: Raw memory access to the chip.
        procedure: Patched firmware call access to the chip.
        sink: Destination for rendered snapshots.
        formatter: Snapshot renderer.
        interval_ms: Delay after every cycle. 0 reads once.
        clock: Time source (RealClock if None).
        cancel: Set to stop a loop; interrupts the current sleep.
        should_continue: Called with the cycle's snapshot (None on
            failure) after each loop cycle; returning False ends the loop.
    """

    def __init__(
        self,
        decoder: Decoder,
        memory: MemoryAccessInterface,
        procedure: ProcedureAccessInterface,
        sink: Sink,
        formatter: Formatter = format_text,
        interval_ms: int = 0,
        clock: Optional[ClockInterface] = None,
        cancel: Optional[threading.Event] = None,
        should_continue: ContinuePredicate = _always,
    ):
        if interval_ms < 0:
            raise ValueError(f"interval_ms must be >= 0, got {interval_ms}")
        self._decoder = decoder
        self._memory = memory
        self._procedure = procedure
        self._sink = sink
        self._formatter = formatter
        self._interval_s = interval_ms / 1000.0
        self._clock = clock or RealClock()
        self._cancel = cancel or threading.Event()
        self._should_continue = should_continue
        self._state = PollerState.READING

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def looping(self) -> bool:
        return self._interval_s > 0

    @property
    def cancel_event(self) -> threading.Event:
        return self._cancel

    def stop(self) -> None:
        """Ask a running loop to finish; safe to call from a signal handler."""
        self._cancel.set()

    def poll_once(self) -> Optional[StatusSnapshot]:
        """Run one cycle. Returns the emitted snapshot, or None if the read failed.

        In loop mode a failed output write is logged and also returns None.
        """
        stamp = self._clock.now_ms()
        snapshot = self._decoder.decode(self._memory, self._procedure)
        if snapshot is None:
            logger.debug("%s: no data at %d", self._decoder.name, stamp)
            return None

        snapshot = snapshot.stamped(stamp)
        try:
            self._sink.write(self._formatter(snapshot))
        except OSError as e:
            if not self.looping:
                raise
            logger.warning("%s: output write failed, retrying next cycle: %s", self._decoder.name, e)
            return None
        return snapshot

    def run(self) -> int:
        """Poll until done.

        Returns:
            Number of snapshots emitted.

        Raises:
            NoDataError: In single-shot mode, when the read failed.
            OSError: In single-shot mode, when the output write failed.
        """
        emitted = 0
        self._state = PollerState.READING

        while self._state is PollerState.READING:
            snapshot = self.poll_once()
            if snapshot is not None:
                emitted += 1

            if not self.looping:
                self._state = PollerState.DONE
                if snapshot is None:
                    raise NoDataError("Read nothing from RAM, exiting")
                break

            if not self._should_continue(snapshot) or self._cancel.is_set():
                self._state = PollerState.DONE
                break

            if self._clock.sleep(self._interval_s, self._cancel):
                self._state = PollerState.DONE

        logger.debug("%s: stopped after %d snapshot(s)", self._decoder.name, emitted)
        return emitted
