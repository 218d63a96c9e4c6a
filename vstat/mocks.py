"""
Mock implementations for testing.

These classes implement the abstract interfaces with in-memory behavior
suitable for unit testing without hardware.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from .interfaces import (
    ClockInterface,
    MemoryAccessInterface,
    MemoryRegion,
    ProcedureAccessInterface,
    RegisterResponse,
)


class MockMemoryAccess(MemoryAccessInterface):
    """
    Mock chip memory for testing.

    Test code sets the bytes at an address with set_memory(). Reads of a
    region return the stored bytes, or b'' for addresses never set.
    fail_next() queues unavailable responses ahead of the stored data.
    """

    def __init__(self):
        self._memory: Dict[Tuple[str, int], bytes] = {}
        self._failures = 0
        self._reads: List[MemoryRegion] = []

    def read(self, region: MemoryRegion) -> bytes:
        self._reads.append(region)
        if self._failures:
            self._failures -= 1
            return b""
        return self._memory.get((region.region, region.address), b"")[:region.length]

    # Test helper methods

    def set_memory(self, address: int, data: bytes, region: str = "RAM") -> None:
        """Store the bytes returned for reads starting at address."""
        self._memory[(region, address)] = bytes(data)

    def fail_next(self, count: int = 1) -> None:
        """Make the next ``count`` reads return b''."""
        self._failures += count

    def get_reads(self) -> List[MemoryRegion]:
        """All regions read so far, in order."""
        return self._reads.copy()


class MockProcedureAccess(ProcedureAccessInterface):
    """
    Mock firmware call for testing.

    Returns queued responses first, then the default response.
    None entries in the queue simulate failed calls.
    """

    def __init__(self, response: Optional[RegisterResponse] = None):
        self._response = response
        self._queue: Deque[Optional[RegisterResponse]] = deque()
        self._calls: List[int] = []

    def call(self, entry: int) -> Optional[RegisterResponse]:
        self._calls.append(entry)
        if self._queue:
            return self._queue.popleft()
        return self._response

    # Test helper methods

    def queue_response(self, response: Optional[RegisterResponse]) -> None:
        self._queue.append(response)

    def get_calls(self) -> List[int]:
        return self._calls.copy()


class MockClock(ClockInterface):
    """
    Controllable clock for testing.

    sleep() records the call and advances time instead of blocking.
    With ``cancel_after`` set, the cancel event passed to sleep() is set
    once that many sleeps have happened.
    """

    def __init__(self, start_ms: int = 1_735_689_600_000, cancel_after: Optional[int] = None):
        self._now_ms = start_ms
        self._cancel_after = cancel_after
        self._sleep_calls: List[float] = []

    def now_ms(self) -> int:
        return self._now_ms

    def sleep(self, seconds: float, cancel: Optional[threading.Event] = None) -> bool:
        if cancel is not None and cancel.is_set():
            return True
        self._sleep_calls.append(seconds)
        self._now_ms += int(seconds * 1000)
        if cancel is not None and self._cancel_after is not None:
            if len(self._sleep_calls) >= self._cancel_after:
                cancel.set()
                return True
        return False

    # Test helper methods

    def advance(self, seconds: float) -> None:
        """Advance time by specified seconds."""
        self._now_ms += int(seconds * 1000)

    def get_sleep_calls(self) -> List[float]:
        """Get list of sleep durations called."""
        return self._sleep_calls.copy()
