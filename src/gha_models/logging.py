"""Structured logging configuration for gha-models.

This module provides structlog-based logging with:
- JSON output for production (when env var GHA_MODELS_LOG_FORMAT=json)
- Pretty console output for development (default)
- Context binding for the document being parsed

The library never configures logging on import; applications call
``configure_logging()`` once at startup.

Usage:
    from gha_models.logging import get_logger, configure_logging

    configure_logging()

    log = get_logger(__name__)
    log = log.bind(document="ci.yml")
    log.info("workflow_parse_completed", jobs=3)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from gha_models.types import SourcePosition

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_context",
    "clear_context",
    "expand_position",
]

# Environment variable for log format
LOG_FORMAT_ENV_VAR = "GHA_MODELS_LOG_FORMAT"

# Environment variable for log level
LOG_LEVEL_ENV_VAR = "GHA_MODELS_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"


def _get_log_level() -> int:
    """Get the log level from environment or default.

    Returns:
        Logging level constant (e.g., logging.WARNING).
    """
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.WARNING)


def _is_json_output() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def expand_position(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """Replace a ``position`` entry with flat ``line`` and ``column`` keys.

    Parse warnings and errors log the SourcePosition of the offending node;
    flat keys keep the JSON output queryable.
    """
    position = event_dict.pop("position", None)
    if isinstance(position, SourcePosition):
        event_dict["line"] = position.line
        event_dict["column"] = position.column
    elif position is not None:
        event_dict["position"] = position
    return event_dict


def _get_shared_processors() -> list[Processor]:
    """Get processors shared between stdlib and structlog."""
    return [
        structlog.contextvars.merge_contextvars,
        expand_position,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _get_development_processors() -> list[Processor]:
    return [
        *_get_shared_processors(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        ),
    ]


def _get_production_processors() -> list[Processor]:
    return [
        *_get_shared_processors(),
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog for the application.

    This should be called once at application startup. Subsequent calls
    will reconfigure logging.

    Args:
        force_json: Force JSON output regardless of environment variable.
        level: Override log level. If None, reads from GHA_MODELS_LOG_LEVEL.

    Example:
        configure_logging()
        configure_logging(force_json=True)
        configure_logging(level=logging.DEBUG)
    """
    use_json = force_json or _is_json_output()
    log_level = level if level is not None else _get_log_level()

    if use_json:
        processors = _get_production_processors()
    else:
        processors = _get_development_processors()

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=_get_shared_processors(),
        )
    )

    root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name. If None, uses the caller's module name.

    Returns:
        A bound structlog logger.
    """
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


def bind_context(**context: Any) -> None:
    """Bind context variables that will be included in all log messages.

    Args:
        **context: Key-value pairs to bind to log context.

    Example:
        bind_context(document=".github/workflows/ci.yml")
        log.warning("unknown_key_ignored", key="foo")  # Includes document
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
