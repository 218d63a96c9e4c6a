"""Decoder for the 16-byte video mode block at RAM 0xE180.

Always correct when it answers, but every so often the read kills the chip.
"""

from __future__ import annotations

from typing import Optional

from ..interfaces import MemoryAccessInterface, MemoryRegion, ProcedureAccessInterface
from ..snapshot import SIGNAL_NO, SIGNAL_YES, StatusSnapshot
from .base import RAM, Decoder, SafetyTier, le16, read_exact

MODE_REGION = MemoryRegion(RAM, 0xE180, 16)

# Observed values of the mode byte
MODE_NO_SIGNAL = 0x00
MODE_PROGRESSIVE = 0x07
MODE_NO_SIGNAL_AFTER_PROGRESSIVE = 0x08
MODE_INTERLACED = 0x0F


def decode_murderous(buf: bytes) -> StatusSnapshot:
    """Decode the mode block.

    Interlaced modes report the height of one field, so it is doubled.
    """
    mode = buf[0]
    height = le16(buf, 12)
    if mode == MODE_INTERLACED:
        height *= 2

    if mode != MODE_NO_SIGNAL and mode != MODE_NO_SIGNAL_AFTER_PROGRESSIVE:
        signal = SIGNAL_YES
    else:
        signal = SIGNAL_NO

    return StatusSnapshot(width=le16(buf, 4), height=height, signal=signal)


class MurderousDecoder(Decoder):
    """Reads the mode block in one transfer."""

    @property
    def name(self) -> str:
        return "murderous"

    @property
    def safety(self) -> SafetyTier:
        return SafetyTier.UNSAFE

    @property
    def regions(self) -> tuple[MemoryRegion, ...]:
        return (MODE_REGION,)

    @property
    def description(self) -> str:
        return "accurate, but reading it may crash the chip"

    def decode(
        self,
        memory: MemoryAccessInterface,
        procedure: ProcedureAccessInterface,
    ) -> Optional[StatusSnapshot]:
        buf = read_exact(memory, MODE_REGION)
        if buf is None:
            return None
        return decode_murderous(buf)
