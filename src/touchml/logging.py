"""Structured logging configuration for TouchML.

Usage:
    from touchml.logging import get_logger, configure_logging

    configure_logging()          # once, at application startup
    log = get_logger(__name__)
    log.debug("predicate_failed", expression="a >", kind="syntax")

Environment:
    TOUCHML_LOG_FORMAT=json   JSON lines instead of console output
    TOUCHML_LOG_LEVEL=DEBUG   log level (default WARNING)

Loggers always go through the stdlib ``logging`` module. A host that never calls
configure_logging() gets stdlib defaults: debug events are dropped, and nothing
is written to stdout.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog
from structlog.types import Processor

__all__ = ["get_logger", "configure_logging"]

LOG_FORMAT_ENV_VAR = "TOUCHML_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "TOUCHML_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def _get_log_level() -> int:
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.WARNING)


def _is_json_output() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _get_shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _get_logger_processors() -> list[Processor]:
    return [
        structlog.stdlib.filter_by_level,
        *_get_shared_processors(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def configure_logging(*, force_json: bool = False, level: int | None = None) -> None:
    """Route structlog through stdlib logging with console or JSON output.

    Args:
        force_json: Force JSON output regardless of TOUCHML_LOG_FORMAT.
        level: Override log level. If None, reads TOUCHML_LOG_LEVEL.
    """
    use_json = force_json or _is_json_output()
    log_level = level if level is not None else _get_log_level()

    structlog.configure(
        processors=_get_logger_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Processor
    if use_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=_get_shared_processors(),
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger over the stdlib logger ``name``."""
    log: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        processors=_get_logger_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )
    return log
