"""Status commands for vstatctl.

Commands:
    status    - Read the video signal status once or in a loop
    decoders  - List available regions and their safety tier
    read-mem  - Read raw bytes from chip memory
"""

from __future__ import annotations

import logging
import signal
import threading
from typing import Optional

from vstat.cli.helpers import _print, _print_error
from vstat.config import StatusConfig
from vstat.decoders import DEFAULT_DECODER, available_decoders, get_decoder
from vstat.errors import NoDataError
from vstat.formatter import get_formatter
from vstat.implementations import CommandProcedureAccess
from vstat.interfaces import (
    ClockInterface,
    MemoryAccessInterface,
    MemoryRegion,
    ProcedureAccessInterface,
)
from vstat.poller import Poller
from vstat.sink import Sink, open_sink
from vstat.usb_hal import DEFAULT_PID, DEFAULT_VID, UsbHidMemoryAccess

logger = logging.getLogger(__name__)


def _install_stop_handlers(cancel: threading.Event) -> dict:
    """Route SIGINT/SIGTERM to the cancel event. Returns the previous handlers."""

    def handle_stop(signum: int, frame: object) -> None:
        logger.debug("Signal %d, stopping", signum)
        cancel.set()

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, handle_stop)
    return previous


def _restore_handlers(previous: dict) -> None:
    for sig, handler in previous.items():
        signal.signal(sig, handler)


def cmd_status(
    *,
    config: StatusConfig,
    memory: Optional[MemoryAccessInterface] = None,
    procedure: Optional[ProcedureAccessInterface] = None,
    clock: Optional[ClockInterface] = None,
    sink: Optional[Sink] = None,
    cancel: Optional[threading.Event] = None,
    install_signals: bool = True,
) -> int:
    """Read the video signal status and write it to stdout or a file.

    In loop mode the command runs until SIGINT/SIGTERM (or ``cancel``),
    retrying failed reads and failed output writes.

    Args:
        config: Resolved settings.
        memory: Memory access override (USB HID if None).
        procedure: Procedure access override (helper command if None).
        clock: Clock override.
        sink: Output override (stdout or config.filename if None).
        cancel: Stop event for loop mode.
        install_signals: Hook SIGINT/SIGTERM to the stop event in loop mode.

    Returns:
        Exit code: 0 on success, 1 when a single read returned no data
        or its output could not be written.
    """
    decoder = get_decoder(config.region)
    owned = memory is None
    if memory is None:
        memory = UsbHidMemoryAccess(vid=config.vid, pid=config.pid)
    if procedure is None:
        procedure = CommandProcedureAccess(config.exec_helper)

    poller = Poller(
        decoder,
        memory,
        procedure,
        sink or open_sink(config.filename),
        formatter=get_formatter(config.json_mode),
        interval_ms=config.loop_ms,
        clock=clock,
        cancel=cancel,
    )

    previous = {}
    if poller.looping and install_signals:
        previous = _install_stop_handlers(poller.cancel_event)

    try:
        poller.run()
    except NoDataError as e:
        _print_error(str(e), json_mode=config.json_mode)
        return 1
    except OSError as e:
        _print_error(f"Cannot write output: {e}", json_mode=config.json_mode)
        return 1
    finally:
        _restore_handlers(previous)
        if owned:
            memory.close()

    return 0


def cmd_decoders(*, json_mode: bool) -> int:
    """List registered regions with their safety tier and what they read."""
    rows = []
    for decoder in available_decoders():
        rows.append({
            "name": decoder.name,
            "safety": decoder.safety.value,
            "default": decoder.name == DEFAULT_DECODER,
            "regions": [str(r) for r in decoder.regions],
            "procedure_entry": (
                f"0x{decoder.procedure_entry:04x}" if decoder.procedure_entry is not None else None
            ),
            "description": decoder.description,
        })

    if json_mode:
        _print({"decoders": rows}, json_mode=True)
        return 0

    lines = []
    for row in rows:
        reads = ", ".join(row["regions"]) or (
            f"call {row['procedure_entry']}" if row["procedure_entry"] else "-"
        )
        marker = "*" if row["default"] else " "
        lines.append(f"{marker} {row['name']:15s} {row['safety']:11s} {reads}")
        if row["description"]:
            lines.append(f"  {'':15s} {row['description']}")
    _print("\n".join(lines), json_mode=False)
    return 0


def _hexdump(address: int, data: bytes) -> str:
    lines = []
    for offset in range(0, len(data), 16):
        chunk = data[offset:offset + 16]
        lines.append(f"0x{address + offset:04x}: {chunk.hex(' ')}")
    return "\n".join(lines)


def cmd_read_mem(
    *,
    region: str,
    address: int,
    length: int,
    vid: int = DEFAULT_VID,
    pid: int = DEFAULT_PID,
    json_mode: bool,
    memory: Optional[MemoryAccessInterface] = None,
) -> int:
    """Read raw bytes from a chip memory region.

    Returns:
        Exit code: 0 on success, 1 if nothing was read, 2 on bad arguments.
    """
    if length <= 0:
        _print_error(f"length must be > 0, got {length}", json_mode=json_mode)
        return 2

    window = MemoryRegion(region, address, length)
    if memory is None:
        with UsbHidMemoryAccess(vid=vid, pid=pid) as usb_memory:
            data = usb_memory.read(window)
    else:
        data = memory.read(window)

    if not data:
        _print_error(f"Read nothing from {window}", json_mode=json_mode)
        return 1

    if json_mode:
        _print(
            {"region": region, "address": f"0x{address:04x}", "length": len(data), "data": data.hex()},
            json_mode=True,
        )
    else:
        _print(_hexdump(address, data), json_mode=False)
    return 0
