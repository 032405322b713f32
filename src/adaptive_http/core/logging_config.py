"""Central logging configuration utilities.

A single composition-root driven `configure_logging` wires separate
stdout/stderr sinks and injects the invocation correlation id into all log
records. Adapters and managers never mutate global logging; they only emit
via `LoggingPort` or standard module loggers.

Every invocation of an HTTP function runs in its own asyncio task, and the
invocation adapter binds a fresh id to `correlation_id_var` inside that task.
Because tasks copy the context at creation, concurrent invocations never see
each other's ids, which keeps interleaved retry logs attributable.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional
import contextvars

# Correlation id context variable (populated per invocation)
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default="-"
)

DEFAULT_FORMAT = (
    "[%(asctime)s] %(levelname)s %(name)s %(correlation_id)s: %(message)s"
)


def coerce_level(level: int | str | None) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    key = str(level).upper().strip()
    mapping = logging.getLevelNamesMapping()
    return mapping.get(key, logging.INFO)


def _with_correlation_id(record: logging.LogRecord) -> bool:
    record.correlation_id = correlation_id_var.get()
    return True


def _below_warning(record: logging.LogRecord) -> bool:
    return record.levelno < logging.WARNING


def _stream_handler(stream, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(stream=stream)
    handler.setLevel(level)
    handler.addFilter(_with_correlation_id)
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    level: int | str | None = None,
    fmt: Optional[str] = None,
    quiet_transport: bool = True,
) -> None:
    """Route engine logs to stdout (below WARNING) and stderr (WARNING+).

    Replaces any existing root handlers, so calling it again reconfigures
    rather than duplicates output. With `quiet_transport` the `aiohttp`
    loggers are raised to WARNING.
    """
    numeric_level = coerce_level(level)
    formatter = logging.Formatter(fmt or DEFAULT_FORMAT)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    for existing in list(root.handlers):
        root.removeHandler(existing)

    stdout_handler = _stream_handler(sys.stdout, logging.DEBUG, formatter)
    stdout_handler.addFilter(_below_warning)
    root.addHandler(stdout_handler)
    root.addHandler(_stream_handler(sys.stderr, logging.WARNING, formatter))

    if quiet_transport:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)

    logging.getLogger("adaptive_http").debug(
        "Logging configured level=%s quiet_transport=%s", numeric_level, quiet_transport
    )
