"""Central logging bootstrap for diskprobe processes."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog


_LOG_CONFIGURED = False


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    *,
    stream: TextIO | None = None,
) -> None:
    """Configure stdlib logging and structlog once per process.

    Log records go to stderr by default so stdout stays reserved for the
    resolved device path printed by the command line.
    """
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    normalized = str(level or "INFO").upper()
    log_level = getattr(logging, normalized, logging.INFO)
    target = stream or sys.stderr

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        stream=target,
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=target),
        cache_logger_on_first_use=True,
    )

    _LOG_CONFIGURED = True
