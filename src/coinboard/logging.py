"""Structured logging for the screener, built on structlog over stdlib logging."""

import logging
import os
from collections.abc import Iterable
from contextlib import AbstractContextManager

import structlog

# Per-request INFO chatter from the HTTP client and server
QUIET_LOGGERS = ("httpx", "uvicorn.access")


def setup_logging(
    log_level: str = "INFO", quiet_loggers: Iterable[str] = QUIET_LOGGERS
) -> None:
    """Configure structlog with console or JSON rendering.

    Context variables bound via refresh_context are merged into every event.
    The renderer is chosen by the LOG_FORMAT environment variable:
    - "json" for machine-readable output
    - "console" for local development (default)

    Loggers named in quiet_loggers are raised to WARNING.
    """
    log_format = os.environ.get("LOG_FORMAT", "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)


def refresh_context(trigger: str) -> AbstractContextManager[None]:
    """Bind the refresh trigger to every event logged during one ingestion.

    trigger is "startup", "interval" or "dashboard". Events from the ticker
    client, record derivation and snapshot publishing all carry it.
    """
    return structlog.contextvars.bound_contextvars(refresh_trigger=trigger)
