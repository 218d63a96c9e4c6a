"""
vstat - Video signal status reader

Reads resolution, signal lock, colorspace and input format from
MacroSilicon USB capture chips by decoding their internal memory.
"""

__version__ = "0.1.0"

from .interfaces import (
    MemoryRegion,
    RegisterResponse,
    MemoryAccessInterface,
    ProcedureAccessInterface,
    ClockInterface,
)
from .snapshot import StatusSnapshot
from .errors import VstatError, NoDataError, ConfigError
from .decoders import Decoder, SafetyTier, get_decoder, resolve_decoder_name
from .poller import Poller, PollerState

__all__ = [
    "__version__",
    "MemoryRegion",
    "RegisterResponse",
    "MemoryAccessInterface",
    "ProcedureAccessInterface",
    "ClockInterface",
    "StatusSnapshot",
    "VstatError",
    "NoDataError",
    "ConfigError",
    "Decoder",
    "SafetyTier",
    "get_decoder",
    "resolve_decoder_name",
    "Poller",
    "PollerState",
]
