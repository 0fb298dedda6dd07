#!/usr/bin/env python3
"""TCP ping-pong tool.

Runs either a server that answers every connection with the bytes it
received followed by "pong!", or a client that sends "ping\\n" once and
reports the reply with its round-trip time.
"""

import argparse
import logging
import math
import sys
from typing import NoReturn

from client.runner import ExitCode, run_client
from common.protocol import (
    DEFAULT_CONNECT_TIMEOUT_S,
    DEFAULT_MAX_HANDLERS,
    DEFAULT_RECEIVE_TIMEOUT_S,
    MAX_PORT,
)
from server.runner import run_server

USAGE = """Usage:
  pingpong server <port>
  pingpong client <host> <port>
"""


class _UsageParser(argparse.ArgumentParser):
    """ArgumentParser that prints the usage and exits 1 on any argument error."""

    def error(self, message: str) -> NoReturn:
        sys.stderr.write(f"Error: {message}\n{USAGE}")
        sys.exit(ExitCode.FAILED)


def _port(value: str) -> int:
    """Parse a decimal port that fits in 16 bits unsigned."""
    if not value.isdigit() or int(value) > MAX_PORT:
        raise argparse.ArgumentTypeError(f"invalid port {value!r} (0-{MAX_PORT})")
    return int(value)


def _count(value: str) -> int:
    """Parse a non-negative integer; 0 means unbounded."""
    if not value.isdigit():
        raise argparse.ArgumentTypeError(f"invalid count {value!r}")
    return int(value)


def _seconds(value: str) -> float:
    """Parse a non-negative timeout in seconds; 0 disables the timeout."""
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout {value!r}") from None
    if not math.isfinite(seconds) or seconds < 0:
        raise argparse.ArgumentTypeError(f"timeout must be a finite number >= 0, got {value!r}")
    return seconds


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add receive timeout and verbosity arguments to a parser."""
    parser.add_argument(
        "--receive-timeout",
        type=_seconds,
        default=DEFAULT_RECEIVE_TIMEOUT_S,
        help=f"Seconds to wait for data, 0 = forever (default: {DEFAULT_RECEIVE_TIMEOUT_S})",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = _UsageParser(
        prog="pingpong",
        description="TCP ping-pong server and client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s server 9000                 Listen on port 9000, all interfaces
  %(prog)s client 127.0.0.1 9000       Send one ping and print reply + RTT
""",
    )
    subparsers = parser.add_subparsers(dest="mode", parser_class=_UsageParser)

    server_parser = subparsers.add_parser("server", help="Run the pong server")
    server_parser.add_argument("port", type=_port, help="Port to listen on")
    server_parser.add_argument(
        "--max-handlers",
        type=_count,
        default=DEFAULT_MAX_HANDLERS,
        help=f"Concurrent handler cap, 0 = unbounded (default: {DEFAULT_MAX_HANDLERS})",
    )
    _add_common_args(server_parser)

    client_parser = subparsers.add_parser("client", help="Send one ping")
    client_parser.add_argument("host", help="Server host name or address")
    client_parser.add_argument("port", type=_port, help="Server port")
    client_parser.add_argument(
        "--connect-timeout",
        type=_seconds,
        default=DEFAULT_CONNECT_TIMEOUT_S,
        help=f"Seconds to wait for the connection, 0 = forever (default: {DEFAULT_CONNECT_TIMEOUT_S})",
    )
    _add_common_args(client_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.mode is None:
        parser.error("missing mode")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.mode == "server":
        return run_server(
            args.port,
            max_handlers=args.max_handlers or None,
            receive_timeout_s=args.receive_timeout or None,
        )

    return run_client(
        args.host,
        args.port,
        connect_timeout_s=args.connect_timeout or None,
        receive_timeout_s=args.receive_timeout or None,
    )


if __name__ == "__main__":
    sys.exit(main())
