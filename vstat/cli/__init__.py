"""
vstatctl: command-line interface for the vstat video status reader.

Main commands:
- status: Read resolution/signal/colorspace/format once or in a loop
- decoders: List the available memory regions and how safe they are
- read-mem: Raw memory read for exploring the chip

Entry points:
- vstatctl: Main CLI entry point (installed via pip)
- Can also be imported and called programmatically via main(argv)
"""

from __future__ import annotations

import sys
from typing import Optional

from vstat.cli.helpers import _print_error, _setup_logging
from vstat.cli.parser import _build_parser, _preprocess_argv
from vstat.cli.status_cmds import cmd_decoders, cmd_read_mem, cmd_status
from vstat.config import load_config, parse_usb_id
from vstat.errors import ConfigError

__all__ = [
    "main",
    "cmd_status",
    "cmd_decoders",
    "cmd_read_mem",
]


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the ``vstatctl`` CLI.

    Parses arguments, resolves configuration, and dispatches to the
    appropriate command handler.

    Args:
        argv: Argument list to parse.  Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: 0 on success, 1 when no data was read, 2 on
        configuration errors.
    """
    if argv is None:
        argv = sys.argv[1:]

    argv = _preprocess_argv(argv)

    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    if args.cmd == "decoders":
        return cmd_decoders(json_mode=args.json)

    try:
        if args.cmd == "read-mem":
            config = load_config(args.config)
            vid = parse_usb_id("vid", args.vid) if args.vid else config.vid
            pid = parse_usb_id("pid", args.pid) if args.pid else config.pid
            return cmd_read_mem(
                region=args.region,
                address=args.addr,
                length=args.length,
                vid=vid,
                pid=pid,
                json_mode=args.json,
            )

        if args.cmd == "status":
            config = load_config(
                args.config,
                overrides={
                    "region": args.region,
                    # --json is a plain switch; only an explicit flag overrides the file
                    "json_mode": True if args.json else None,
                    "loop_ms": args.loop,
                    "filename": args.filename,
                    "vid": args.vid,
                    "pid": args.pid,
                    "exec_helper": args.exec_helper,
                },
            )
            return cmd_status(config=config)
    except ConfigError as e:
        _print_error(str(e), json_mode=args.json)
        return 2

    parser.error(f"Unknown command: {args.cmd}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
