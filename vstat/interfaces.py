"""
Interfaces for the vstat video-status reader.

Abstract base classes that define contracts for the pluggable device
collaborators. This enables dependency injection and mock-based testing
without a capture chip attached.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MemoryRegion:
    """A fixed window in the chip's address space.

    Attributes:
        region: Logical memory region name understood by the access layer (e.g. "RAM").
        address: Start address inside the region.
        length: Number of bytes to read.
    """

    region: str
    address: int
    length: int

    def __str__(self) -> str:
        return f"{self.region}:0x{self.address:04x}+{self.length}"


@dataclass(frozen=True)
class RegisterResponse:
    """Register file returned by one patched firmware call."""

    a: int = 0
    r2: int = 0
    r3: int = 0
    r4: int = 0
    r5: int = 0
    r6: int = 0
    r7: int = 0


class MemoryAccessInterface(ABC):
    """
    Abstract interface for raw memory reads against the chip.

    Implementations:
    - UsbHidMemoryAccess: HID feature reports over pyusb
    - MockMemoryAccess: For unit testing without hardware
    """

    @abstractmethod
    def read(self, region: MemoryRegion) -> bytes:
        """Read ``region.length`` bytes. Returns b'' when the chip is unavailable."""
        pass


class ProcedureAccessInterface(ABC):
    """
    Abstract interface for invoking a patched execution path in the firmware.

    Implementations:
    - CommandProcedureAccess: Delegates to an external helper command
    - MockProcedureAccess: For unit testing without hardware
    """

    @abstractmethod
    def call(self, entry: int) -> Optional[RegisterResponse]:
        """Run the function at ``entry``. Returns None if the call failed."""
        pass


class ClockInterface(ABC):
    """
    Abstract interface for time operations.

    Enables deterministic testing of the poll cadence.
    """

    @abstractmethod
    def now_ms(self) -> int:
        """Milliseconds since the epoch."""
        pass

    @abstractmethod
    def sleep(self, seconds: float, cancel: Optional[threading.Event] = None) -> bool:
        """Sleep for ``seconds``. Returns True if ``cancel`` was set before it elapsed."""
        pass
