"""Render status snapshots as JSON or as a plain text block."""

from __future__ import annotations

import json
from typing import Callable

from .snapshot import StatusSnapshot

Formatter = Callable[[StatusSnapshot], str]

_TEXT_TEMPLATE = (
    "time: {time}\n"
    "width: {width}\n"
    "height: {height}\n"
    "signal: {signal}\n"
    "frameid: {fid}\n"
    "colorspace: {colorspace}\n"
    "format: {format}\n"
)


def format_json(snapshot: StatusSnapshot) -> str:
    """One compact JSON object per line."""
    return json.dumps(snapshot.to_dict(), separators=(",", ":")) + "\n"


def format_text(snapshot: StatusSnapshot) -> str:
    """``key: value`` lines; unset fields print as empty or zero."""
    return _TEXT_TEMPLATE.format(**snapshot.to_dict())


def parse_json(text: str) -> StatusSnapshot:
    """Parse output of :func:`format_json` back into a snapshot."""
    return StatusSnapshot.from_dict(json.loads(text))


def get_formatter(json_mode: bool) -> Formatter:
    return format_json if json_mode else format_text
