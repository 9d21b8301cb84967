"""Command line entry point.

    diskprobe resolve 3          # probe once
    diskprobe wait 3 --timeout 30
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from diskprobe import __version__
from diskprobe.config import settings
from diskprobe.domain.errors import DiskProbeError
from diskprobe.resolver.resolver import LunResolver
from diskprobe.runtime.context import WaitContext
from diskprobe.runtime.waiter import AttachmentWaiter


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NOT_FOUND = 2
EXIT_CANCELLED = 3


def _lun(value: str) -> int:
    try:
        lun = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid LUN: {value!r}") from None
    if lun < 0:
        raise argparse.ArgumentTypeError(f"LUN must be >= 0: {lun}")
    return lun


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diskprobe",
        description="Find the block device of a disk attached at a LUN.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Log level (default: settings)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")

    sub = parser.add_subparsers(dest="command", required=True)

    resolve = sub.add_parser("resolve", help="Probe once and print the device path")
    resolve.add_argument("lun", type=_lun)

    wait = sub.add_parser("wait", help="Wait until the device shows up")
    wait.add_argument("lun", type=_lun)
    wait.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait before giving up (default: settings, 0 = forever)",
    )
    wait.add_argument(
        "--interval-ms",
        type=int,
        default=None,
        help="Milliseconds between probes (default: settings)",
    )
    return parser


def _run_resolve(lun: int) -> int:
    result = LunResolver(settings=settings).resolve(lun)
    if result.failed:
        print(f"error: {result.error}", file=sys.stderr)
        return EXIT_FAILED
    if not result.found:
        print(f"no device found for lun {lun}", file=sys.stderr)
        return EXIT_NOT_FOUND
    print(result.device_path)
    return EXIT_OK


def _run_wait(lun: int, timeout: Optional[float], interval_ms: Optional[int]) -> int:
    if interval_ms is not None and interval_ms <= 0:
        print("error: --interval-ms must be > 0", file=sys.stderr)
        return EXIT_FAILED
    poll_interval = interval_ms / 1000.0 if interval_ms is not None else None
    if timeout is None:
        timeout = settings.default_timeout
    elif timeout <= 0:
        timeout = None

    async def _wait():
        waiter = AttachmentWaiter(poll_interval=poll_interval, settings=settings)
        return await waiter.wait(lun, WaitContext(timeout=timeout))

    outcome = asyncio.run(_wait())
    if outcome.resolved:
        print(outcome.device_path)
        return EXIT_OK
    print(f"error: {outcome.cause}", file=sys.stderr)
    if outcome.cancelled:
        return EXIT_CANCELLED
    return EXIT_FAILED


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.log_level:
        settings.log_level = args.log_level
    if args.json_logs:
        settings.log_json = True
    settings.setup_logging()

    try:
        if args.command == "resolve":
            return _run_resolve(args.lun)
        return _run_wait(args.lun, args.timeout, args.interval_ms)
    except DiskProbeError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILED
    except KeyboardInterrupt:
        return EXIT_CANCELLED


if __name__ == "__main__":
    sys.exit(main())
