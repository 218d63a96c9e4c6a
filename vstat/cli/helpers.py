"""Shared utilities for vstatctl CLI commands."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any


def _print(obj: Any, *, json_mode: bool) -> None:
    if json_mode:
        print(json.dumps(obj, indent=2, sort_keys=True))
    else:
        if isinstance(obj, str):
            print(obj)
        else:
            print(json.dumps(obj, indent=2, sort_keys=True))


def _print_error(msg: str, *, json_mode: bool) -> None:
    """Errors go to stderr so they never mix with snapshot output."""
    if json_mode:
        print(json.dumps({"error": msg}), file=sys.stderr)
    else:
        print(msg, file=sys.stderr)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
