"""Shared file I/O utilities for vstat."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Union

import yaml


def write_text_atomic(path: Union[str, Path], content: str, mode: int = 0o644) -> None:
    """Atomically replace *path* with *content*.

    Writes to a temporary file in the same directory and renames, so
    readers never see a half-written file.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(p.parent), prefix=f".{p.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp, mode)
        os.replace(tmp, str(p))
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def read_yaml_file(path: Union[str, Path]) -> dict:
    """Read a YAML mapping from *path*.

    An empty file yields an empty dict.

    Raises:
        FileNotFoundError: If the file is missing.
        ValueError: If the document is not a mapping.
        yaml.YAMLError: If the YAML is malformed.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level YAML must be a mapping")
    return data
