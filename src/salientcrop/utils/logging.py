"""Structured logging configuration using structlog.

Correlation fields (run, image, stage) are carried in context variables so
that every event emitted while analysing an image can be traced back to
it, even when several analyses run side by side. Output is either JSON
(for log shipping) or a coloured console rendering.
"""

import logging
import sys
import time
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.types import Processor

from salientcrop.config import settings

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)
_image_id: ContextVar[str | None] = ContextVar("image_id", default=None)
_stage: ContextVar[str | None] = ContextVar("stage", default=None)


def set_correlation_context(
    run_id: str | None = None,
    image_id: str | None = None,
    stage: str | None = None,
) -> None:
    """Set correlation IDs for the current context.

    Args:
        run_id: Identifier of the invocation (e.g. one CLI call).
        image_id: Identifier of the image under analysis (usually its path).
        stage: Pipeline stage currently executing.
    """
    if run_id is not None:
        _run_id.set(run_id)
    if image_id is not None:
        _image_id.set(image_id)
    if stage is not None:
        _stage.set(stage)


def clear_correlation_context() -> None:
    """Clear all correlation context variables."""
    _run_id.set(None)
    _image_id.set(None)
    _stage.set(None)


def _add_correlation_ids(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor to add correlation IDs to log events."""
    _ = logger, method_name  # Required by structlog processor signature
    for key, var in (("run_id", _run_id), ("image_id", _image_id), ("stage", _stage)):
        value = var.get()
        if value is not None:
            event_dict.setdefault(key, value)
    return event_dict


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
) -> None:
    """Configure structlog with the specified settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to settings.LOG_LEVEL.
        log_format: Output format ("console" or "json").
                    Defaults to settings.LOG_FORMAT.
    """
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_correlation_ids,
    ]

    if log_format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdout carries command output; force=True rebinds on repeated calls
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
        force=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    The logger always writes through the stdlib ``logging`` tree, so until
    ``configure_logging`` installs a handler, debug and info events are
    discarded instead of printed.

    Args:
        name: Logger name. If None, the root logger is wrapped.

    Returns:
        A bound structlog logger instance.
    """
    return cast(
        structlog.stdlib.BoundLogger,
        structlog.wrap_logger(
            logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
        ),
    )


@contextmanager
def log_timing(logger: Any, stage: str, **fields: Any) -> Iterator[None]:
    """Emit a structured timing entry for the wrapped block.

    The entry is logged at DEBUG level as ``"stage timing"`` with the
    ``stage`` name and ``elapsed_ms``. Extra keyword fields are attached
    unchanged.
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug("stage timing", stage=stage, elapsed_ms=elapsed_ms, **fields)
