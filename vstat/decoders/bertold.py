"""Decoder that asks the firmware itself, through a patched function call.

The firmware keeps the detected timing in registers on return from one of
two internal routines: one reports the input before the scaler, the other
after it.
"""

from __future__ import annotations

from typing import Optional

from ..interfaces import MemoryAccessInterface, ProcedureAccessInterface, RegisterResponse
from ..snapshot import StatusSnapshot
from .base import Decoder, SafetyTier, signal_from_flag

ENTRY_BEFORE_SCALER = 0xF41E
ENTRY_AFTER_SCALER = 0xF406


def decode_registers(resp: RegisterResponse) -> StatusSnapshot:
    """R3:R2 hold the width, R5:R4 the height, R6 the no-signal flag, A the frame counter."""
    return StatusSnapshot(
        width=resp.r3 * 256 + resp.r2,
        height=resp.r5 * 256 + resp.r4,
        signal=signal_from_flag(resp.r6),
        frame_id=resp.a,
    )


class BertoldDecoder(Decoder):
    """Procedure-call decoder.

    Args:
        before_scaler: Call the routine reporting the raw input timing
            instead of the scaled output timing.
    """

    def __init__(self, before_scaler: bool = True):
        self._before_scaler = before_scaler

    @property
    def name(self) -> str:
        return "bertold" if self._before_scaler else "bertold_scaler"

    @property
    def safety(self) -> SafetyTier:
        return SafetyTier.PROCEDURE

    @property
    def before_scaler(self) -> bool:
        return self._before_scaler

    @property
    def procedure_entry(self) -> int:
        return ENTRY_BEFORE_SCALER if self._before_scaler else ENTRY_AFTER_SCALER

    @property
    def description(self) -> str:
        if self._before_scaler:
            return "patched firmware call, input timing before the scaler"
        return "patched firmware call, output timing after the scaler"

    def decode(
        self,
        memory: MemoryAccessInterface,
        procedure: ProcedureAccessInterface,
    ) -> Optional[StatusSnapshot]:
        resp = procedure.call(self.procedure_entry)
        if resp is None:
            return None
        return decode_registers(resp)
