"""Decoder for the block at RAM 0xF606.

Looks similar to the flaky region with slight differences, and is not known
to be more correct. Only width, height and signal are decoded.
"""

from __future__ import annotations

from typing import Optional

from ..interfaces import MemoryAccessInterface, MemoryRegion, ProcedureAccessInterface
from ..snapshot import StatusSnapshot
from .base import RAM, Decoder, SafetyTier, le16, read_exact, signal_from_flag
from .flaky import NO_SIGNAL_REGION

TIMING_REGION = MemoryRegion(RAM, 0xF606, 8)


def decode_unknown(timing: bytes, no_signal: int) -> StatusSnapshot:
    return StatusSnapshot(
        width=le16(timing, 0),
        height=le16(timing, 6),
        signal=signal_from_flag(no_signal),
    )


class UnknownDecoder(Decoder):
    """Timing block plus the flaky no-signal flag."""

    @property
    def name(self) -> str:
        return "unknown"

    @property
    def safety(self) -> SafetyTier:
        return SafetyTier.UNVERIFIED

    @property
    def regions(self) -> tuple[MemoryRegion, ...]:
        return (TIMING_REGION, NO_SIGNAL_REGION)

    @property
    def description(self) -> str:
        return "safe to read, accuracy unverified"

    def decode(
        self,
        memory: MemoryAccessInterface,
        procedure: ProcedureAccessInterface,
    ) -> Optional[StatusSnapshot]:
        timing = read_exact(memory, TIMING_REGION)
        if timing is None:
            return None

        no_signal = read_exact(memory, NO_SIGNAL_REGION)
        if no_signal is None:
            return None

        return decode_unknown(timing, no_signal[0])
