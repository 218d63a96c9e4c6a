"""Decoder for the scattered input-status bytes.

Always safe to read, but not always correct. This is the default decoder.
"""

from __future__ import annotations

from typing import Optional

from ..interfaces import MemoryAccessInterface, MemoryRegion, ProcedureAccessInterface
from ..snapshot import (
    COLORSPACE_RGB,
    COLORSPACE_Y422,
    COLORSPACE_Y444,
    FORMAT_DVI,
    FORMAT_HDMI,
    StatusSnapshot,
)
from .base import RAM, Decoder, SafetyTier, le16, read_exact, signal_from_flag

RESOLUTION_REGION = MemoryRegion(RAM, 0xF660, 4)
NO_SIGNAL_REGION = MemoryRegion(RAM, 0xF6E9, 1)
COLORSPACE_REGION = MemoryRegion(RAM, 0x1C3A, 1)
FORMAT_REGION = MemoryRegion(RAM, 0x1C41, 1)

_COLORSPACES = {
    0: COLORSPACE_RGB,
    1: COLORSPACE_Y422,
}

# Any other code leaves the format unset
_FORMATS = {
    0: FORMAT_DVI,
    2: FORMAT_HDMI,
}


def decode_colorspace(code: int) -> str:
    return _COLORSPACES.get(code, COLORSPACE_Y444)


def decode_format(code: int) -> str:
    return _FORMATS.get(code, "")


def decode_flaky(resolution: bytes, no_signal: int, colorspace: int, fmt: int) -> StatusSnapshot:
    """Decode the four reads of the flaky strategy.

    Args:
        resolution: 4 bytes, width and height as little-endian 16-bit values.
        no_signal: Flag byte, 0 while a signal is present.
        colorspace: Colorspace code byte.
        fmt: Input format code byte.
    """
    return StatusSnapshot(
        width=le16(resolution, 0),
        height=le16(resolution, 2),
        signal=signal_from_flag(no_signal),
        colorspace=decode_colorspace(colorspace),
        format=decode_format(fmt),
    )


class FlakyDecoder(Decoder):
    """Four small reads; the first unavailable one aborts the decode."""

    @property
    def name(self) -> str:
        return "flaky"

    @property
    def safety(self) -> SafetyTier:
        return SafetyTier.SAFE

    @property
    def regions(self) -> tuple[MemoryRegion, ...]:
        return (RESOLUTION_REGION, NO_SIGNAL_REGION, COLORSPACE_REGION, FORMAT_REGION)

    @property
    def description(self) -> str:
        return "safe to read, not always accurate"

    def decode(
        self,
        memory: MemoryAccessInterface,
        procedure: ProcedureAccessInterface,
    ) -> Optional[StatusSnapshot]:
        bufs = []
        for region in self.regions:
            buf = read_exact(memory, region)
            if buf is None:
                return None
            bufs.append(buf)

        resolution, no_signal, colorspace, fmt = bufs
        return decode_flaky(resolution, no_signal[0], colorspace[0], fmt[0])
