"""
Real implementations of interfaces for production use.

These classes wrap actual system resources (clock, helper processes)
and implement the abstract interfaces. USB memory access lives in
usb_hal.py.
"""

from __future__ import annotations

import json
import logging
import subprocess
import threading
import time
from typing import Optional, Sequence

from .interfaces import ClockInterface, ProcedureAccessInterface, RegisterResponse

logger = logging.getLogger(__name__)

_REGISTER_NAMES = ("a", "r2", "r3", "r4", "r5", "r6", "r7")


class RealClock(ClockInterface):
    """
    Real clock implementation using system time.
    """

    def now_ms(self) -> int:
        return int(time.time() * 1000)

    def sleep(self, seconds: float, cancel: Optional[threading.Event] = None) -> bool:
        if cancel is None:
            time.sleep(seconds)
            return False
        return cancel.wait(seconds)


def parse_register_json(text: str) -> RegisterResponse:
    """Parse a helper's JSON register dump.

    Keys are matched case-insensitively; values may be ints or
    numeric strings ("0x1e"). Missing registers read as 0.

    Raises:
        ValueError: If the text is not a JSON object of numbers.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("register dump must be a JSON object")

    values = {}
    for key, raw in data.items():
        name = str(key).lower()
        if name not in _REGISTER_NAMES:
            continue
        values[name] = int(raw, 0) if isinstance(raw, str) else int(raw)
    return RegisterResponse(**values)


class CommandProcedureAccess(ProcedureAccessInterface):
    """
    Invokes patched firmware functions through an external helper command.

    The helper is called as ``<command...> 0x<entry>`` and must print a JSON
    object with the returned registers (A, R2..R7) on stdout.

    Args:
        command: Helper argv prefix. None disables procedure calls.
        timeout: Seconds before the helper is abandoned.
    """

    def __init__(self, command: Optional[Sequence[str]] = None, timeout: float = 10.0):
        self._command = list(command) if command else []
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._command)

    def call(self, entry: int) -> Optional[RegisterResponse]:
        if not self._command:
            logger.debug("No procedure helper configured, cannot call 0x%04x", entry)
            return None

        args = self._command + [f"0x{entry:04x}"]
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error("Procedure helper failed: %s", e)
            return None

        if result.returncode != 0:
            logger.error(
                "Procedure helper exited %d: %s",
                result.returncode, result.stderr.strip() or result.stdout.strip(),
            )
            return None

        try:
            return parse_register_json(result.stdout)
        except (ValueError, TypeError) as e:
            logger.error("Unparseable register dump from helper: %s", e)
            return None
