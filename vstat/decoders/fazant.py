"""Diagnostic decoder: fixed values, no device access.

Used to exercise the output pipeline without a chip attached.
"""

from __future__ import annotations

from typing import Optional

from ..interfaces import MemoryAccessInterface, ProcedureAccessInterface
from ..snapshot import StatusSnapshot
from .base import Decoder, SafetyTier

FAZANT_SNAPSHOT = StatusSnapshot(width=42, height=42, signal="fazantfazantfazant")


class FazantDecoder(Decoder):
    """Returns the same fixed snapshot on every decode."""

    @property
    def name(self) -> str:
        return "fazant"

    @property
    def safety(self) -> SafetyTier:
        return SafetyTier.DIAGNOSTIC

    @property
    def description(self) -> str:
        return "fixed test values, never touches the chip"

    def decode(
        self,
        memory: MemoryAccessInterface,
        procedure: ProcedureAccessInterface,
    ) -> Optional[StatusSnapshot]:
        return FAZANT_SNAPSHOT
