"""Structured logging setup using structlog.

Log lines go to stderr; stdout is reserved for the run summary so it can
be piped or captured on its own.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

_QUIET_LIBRARIES = ("httpx", "httpcore")


def setup_logging(
    *,
    json: bool = False,
    level: str = "INFO",
    stream: IO[str] | None = None,
) -> None:
    """Route structlog and stdlib logging through one formatter.

    Parameters
    ----------
    json:
        Emit JSON lines (for scheduled runs whose output is collected)
        instead of the console renderer used interactively.
    level:
        Root log level name, case-insensitive.
    stream:
        Destination, stderr by default.
    """
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    # Per-request lines from the HTTP stack only at DEBUG
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))


def bind_run_context(**values: Any) -> None:
    """Attach run parameters (lookback, category, ...) to every log line."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)
