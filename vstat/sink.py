"""Output sinks for rendered snapshots.

A sink receives the full rendering of one snapshot per call. The file sink
replaces the whole file each time, so a reader always sees exactly one
complete snapshot.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO, Union

from .file_utils import write_text_atomic


class Sink(ABC):

    @abstractmethod
    def write(self, text: str) -> None:
        """Emit one rendered snapshot."""


class StdoutSink(Sink):
    """Writes to a text stream (stdout by default) and flushes."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def write(self, text: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(text)
        stream.flush()


class FileSink(Sink):
    """Atomically replaces a file with each snapshot."""

    def __init__(self, path: Union[str, Path], mode: int = 0o644):
        self.path = Path(path)
        self._mode = mode

    def write(self, text: str) -> None:
        write_text_atomic(self.path, text, mode=self._mode)


def open_sink(filename: Optional[str]) -> Sink:
    """File sink when a path is configured, stdout otherwise."""
    if filename:
        return FileSink(filename)
    return StdoutSink()
