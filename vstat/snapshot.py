"""Status snapshot data model.

One :class:`StatusSnapshot` is produced per poll cycle by exactly one
decoder, stamped by the poller, rendered once and then discarded.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

SIGNAL_YES = "yes"
SIGNAL_NO = "no"

COLORSPACE_RGB = "RGB"
COLORSPACE_Y422 = "Y422"
COLORSPACE_Y444 = "Y444"

FORMAT_DVI = "DVI"
FORMAT_HDMI = "HDMI"

# Structured output keys, in serialization order
FIELD_KEYS = ("width", "height", "signal", "time", "fid", "colorspace", "format")


@dataclass(frozen=True)
class StatusSnapshot:
    """Normalized video-signal status.

    Fields a decoder does not populate keep their zero value
    (0 or the empty string).
    """

    width: int = 0
    height: int = 0
    signal: str = ""
    timestamp: int = 0
    frame_id: int = 0
    colorspace: str = ""
    format: str = ""

    @property
    def has_signal(self) -> bool:
        return self.signal == SIGNAL_YES

    def stamped(self, timestamp_ms: int) -> StatusSnapshot:
        """Return a copy carrying the poll timestamp."""
        return replace(self, timestamp=timestamp_ms)

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "signal": self.signal,
            "time": self.timestamp,
            "fid": self.frame_id,
            "colorspace": self.colorspace,
            "format": self.format,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusSnapshot:
        """Inverse of :meth:`to_dict`. Missing keys become zero values."""
        return cls(
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
            signal=str(data.get("signal", "")),
            timestamp=int(data.get("time", 0)),
            frame_id=int(data.get("fid", 0)),
            colorspace=str(data.get("colorspace", "")),
            format=str(data.get("format", "")),
        )
