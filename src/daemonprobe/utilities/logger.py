"""Structured logging using structlog.

The supervisor reads exactly one line from stdout, so every log event is
routed to stderr through a handler on the ``daemonprobe`` logger namespace.
The root logger is left alone.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

LOGGER_NAMESPACE = "daemonprobe"

_HANDLER_NAME = "daemonprobe-stderr"


def _install_handler(level: int, stream: TextIO) -> None:
    namespace = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(namespace.handlers):
        if handler.get_name() == _HANDLER_NAME:
            namespace.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    namespace.addHandler(handler)
    namespace.setLevel(level)
    namespace.propagate = False


def setup_logging(
    *,
    debug: bool = False,
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for one probe run.

    Args:
        debug: Emit DEBUG events (default is WARNING, so a healthy run is silent).
        json_output: Render events as JSON lines instead of key=value text.
        stream: Destination; defaults to the current ``sys.stderr``.
    """
    level = logging.DEBUG if debug else logging.WARNING
    _install_handler(level, stream or sys.stderr)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = LOGGER_NAMESPACE, **kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name, **kwargs)
