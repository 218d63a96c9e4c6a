"""Pluggable video-status decoder registry.

An ABC + registry dict + factory. Add a new strategy by dropping in one file
and registering it here; existing decoders are never touched.

Usage:
    from vstat.decoders import get_decoder, resolve_decoder_name

    decoder = get_decoder(resolve_decoder_name(config.region))
"""

from __future__ import annotations

import logging
from typing import Optional

from .base import Decoder, SafetyTier
from .bertold import BertoldDecoder
from .fazant import FazantDecoder
from .flaky import FlakyDecoder
from .murderous import MurderousDecoder
from .unknown import UnknownDecoder

__all__ = [
    "Decoder",
    "SafetyTier",
    "BertoldDecoder",
    "FazantDecoder",
    "FlakyDecoder",
    "MurderousDecoder",
    "UnknownDecoder",
    "DEFAULT_DECODER",
    "available_decoders",
    "get_decoder",
    "resolve_decoder_name",
]

logger = logging.getLogger(__name__)

DEFAULT_DECODER = "flaky"

# Registry: region name -> decoder instance
_DECODERS: dict[str, Decoder] = {
    d.name: d
    for d in (
        FlakyDecoder(),
        MurderousDecoder(),
        UnknownDecoder(),
        BertoldDecoder(before_scaler=True),
        BertoldDecoder(before_scaler=False),
        FazantDecoder(),
    )
}


def available_decoders() -> list[Decoder]:
    """All registered decoders, in registration order."""
    return list(_DECODERS.values())


def resolve_decoder_name(name: Optional[str]) -> str:
    """Map a configured region name to a registered decoder name.

    Empty names select the default. Unknown names also select the default,
    with a warning.
    """
    if not name:
        return DEFAULT_DECODER
    key = name.lower()
    if key not in _DECODERS:
        supported = ", ".join(sorted(_DECODERS))
        logger.warning("Unknown region %r, using %s (supported: %s)", name, DEFAULT_DECODER, supported)
        return DEFAULT_DECODER
    return key


def get_decoder(name: str) -> Decoder:
    """Get a decoder by registry name.

    Raises:
        ValueError: If the name is not registered.
    """
    decoder = _DECODERS.get(name.lower())
    if decoder is None:
        supported = ", ".join(sorted(_DECODERS))
        raise ValueError(f"Unknown decoder: {name!r}. Supported: {supported}")
    return decoder
