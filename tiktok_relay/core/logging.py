"""Structured logging configuration using structlog.

This module sets up structured logging for the entire application.
Logs are rendered for the console in development and as JSON in production.
"""

import logging
import sys
import uuid
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from tiktok_relay.core.config import get_config


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application context to log events.

    Args:
        logger: Logger instance
        method_name: Name of the logging method
        event_dict: Event dictionary

    Returns:
        Updated event dictionary with app context
    """
    config = get_config()
    event_dict["app"] = config.app_name
    event_dict["env"] = config.app_env
    return event_dict


def setup_logging() -> None:
    """Configure structured logging for the application.

    This function sets up structlog with:
    - JSON output for production
    - Console output for development
    - Appropriate log levels based on environment
    - Standard library integration

    Example:
        >>> setup_logging()
        >>> logger = structlog.get_logger()
        >>> logger.info("Server started", port=3000)
    """
    config = get_config()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.log_level),
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]

    if config.is_production:
        processors.extend(
            [
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.dev.ConsoleRenderer(colors=config.is_development),
            ]
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name (defaults to calling module)

    Returns:
        Configured structlog logger

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Upload started", channel="news")
        >>> logger.error("Upload failed", step="transferring", error="timeout")
    """
    return structlog.get_logger(name)


def bind_request_context(**kwargs: Any) -> str:
    """Bind per-request values to every log line of the current task.

    A fresh request_id is generated and returned.

    Args:
        **kwargs: Extra values to bind (e.g. channel)

    Returns:
        The generated request_id
    """
    request_id = uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **kwargs)
    return request_id


def clear_request_context() -> None:
    """Drop all per-request log values."""
    structlog.contextvars.clear_contextvars()
