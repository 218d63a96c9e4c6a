"""Argument parser for vstatctl CLI."""

from __future__ import annotations

import argparse

from vstat import __version__

_GLOBAL_FLAGS = ("--json", "--verbose", "-v")


def _preprocess_argv(argv: list[str]) -> list[str]:
    """Reorder global flags (--json, --verbose, --config) before the subcommand.

    argparse doesn't support global flags after a subcommand reliably, so
    ``vstatctl status --json`` is rewritten to ``vstatctl --json status``.

    Args:
        argv: Raw argument list (without ``sys.argv[0]``).

    Returns:
        Reordered argument list with global flags moved to the front.
    """
    global_args: list[str] = []
    rest: list[str] = []
    i = 0
    while i < len(argv):
        token = argv[i]
        if token in _GLOBAL_FLAGS or token.startswith("--config="):
            global_args.append(token)
            i += 1
            continue
        if token == "--config":
            # Needs a value.
            if i + 1 >= len(argv):
                rest.append(token)
                i += 1
                continue
            global_args.extend([token, argv[i + 1]])
            i += 2
            continue
        rest.append(token)
        i += 1

    return global_args + rest


def _build_parser() -> argparse.ArgumentParser:
    """Build the full argparse parser with all subcommands."""
    parser = argparse.ArgumentParser(prog="vstatctl", description="Video signal status reader")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("--json", action="store_true", help="Output JSON instead of the default list")
    parser.add_argument(
        "--config",
        default=None,
        help="YAML config file (default: $VSTAT_CONFIG)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_status = sub.add_parser("status", help="Read the current video signal status")
    p_status.add_argument(
        "--region",
        default=None,
        help="Region to read (murderous, flaky [default], unknown, bertold, bertold_scaler, fazant)",
    )
    p_status.add_argument(
        "--loop",
        type=int,
        default=None,
        metavar="MS",
        help="Run in a loop and sleep MS milliseconds after every read (0 = once)",
    )
    p_status.add_argument("--filename", default=None, help="Output to a file instead of stdout")
    p_status.add_argument("--vid", default=None, help="USB vendor id, hex (default: 534d)")
    p_status.add_argument("--pid", default=None, help="USB product id, hex (default: 2109)")
    p_status.add_argument(
        "--exec-helper",
        default=None,
        help="Command that runs a patched firmware function (used by the bertold regions)",
    )

    sub.add_parser("decoders", help="List available regions and their safety")

    p_read = sub.add_parser("read-mem", help="Read raw bytes from chip memory")
    p_read.add_argument("region", help="Memory region name (e.g. RAM)")
    p_read.add_argument("addr", type=lambda s: int(s, 0), help="Start address (e.g. 0xf660)")
    p_read.add_argument("--length", type=int, default=1, help="Number of bytes (default: 1)")
    p_read.add_argument("--vid", default=None, help="USB vendor id, hex (default: 534d)")
    p_read.add_argument("--pid", default=None, help="USB product id, hex (default: 2109)")

    return parser
