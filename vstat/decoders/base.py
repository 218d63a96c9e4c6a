"""Base Decoder ABC and shared byte helpers.

New strategies implement Decoder to provide:
- The memory regions (or procedure entry) they depend on
- A safety tier describing the risk of reading them
- Decoding of the raw response into a StatusSnapshot
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from ..interfaces import MemoryAccessInterface, MemoryRegion, ProcedureAccessInterface
from ..snapshot import SIGNAL_NO, SIGNAL_YES, StatusSnapshot

# Chip XDATA memory as named by the access layer
RAM = "RAM"


class SafetyTier(Enum):
    """How risky it is to use a decoder against a live chip."""

    UNSAFE = "unsafe"  # may crash the chip, accurate when it answers
    SAFE = "safe"  # always safe to read, not always accurate
    UNVERIFIED = "unverified"  # safe, accuracy unknown
    PROCEDURE = "procedure"  # depends on the patched firmware call
    DIAGNOSTIC = "diagnostic"  # no device access


def le16(buf: bytes, offset: int) -> int:
    """Little-endian 16-bit value at ``buf[offset:offset + 2]``."""
    return buf[offset + 1] * 256 + buf[offset]


def signal_from_flag(flag: int) -> str:
    """The no-signal flag byte reads 0 while a signal is locked."""
    return SIGNAL_YES if flag == 0 else SIGNAL_NO


def read_exact(memory: MemoryAccessInterface, region: MemoryRegion) -> Optional[bytes]:
    """Read a region, returning None unless the full window came back."""
    buf = memory.read(region)
    if not buf or len(buf) < region.length:
        return None
    return bytes(buf[:region.length])


class Decoder(ABC):
    """Base class for video-status decoding strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name, e.g. 'flaky'."""

    @property
    @abstractmethod
    def safety(self) -> SafetyTier:
        """Risk tier of this strategy."""

    @property
    def regions(self) -> tuple[MemoryRegion, ...]:
        """Memory windows read on every decode, in read order."""
        return ()

    @property
    def procedure_entry(self) -> Optional[int]:
        """Firmware entry address invoked on every decode, if any."""
        return None

    @property
    def description(self) -> str:
        return ""

    @abstractmethod
    def decode(
        self,
        memory: MemoryAccessInterface,
        procedure: ProcedureAccessInterface,
    ) -> Optional[StatusSnapshot]:
        """Read the chip and decode a snapshot. Returns None if any read failed."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
