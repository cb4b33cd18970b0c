# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Domain modules (the analytics store and services) log event-style messages
with keyword context, for example ``store_query_failed`` with the store
operation that failed. The API layer logs through the standard library.
Both end up on the same stdlib handlers: structlog renders the event and
hands the line to a stdlib logger named after the calling module, so the
``logger`` field and level filtering agree for both kinds of logger.

Every event carries the service name and environment; request handling
adds ``request_id``, ``user_id`` and ``path`` through bind_context().

Example:
    >>> from src.utils.logging import setup_logging, get_logger
    >>> from src.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> logger = get_logger(__name__)
    >>> logger.info("dashboard_stats_computed", user_id="123", quizzes=4)
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from src.core.config.settings import Settings

SERVICE_NAME = "studypulse-analytics"

# Drivers and servers that are noisy at DEBUG level
_QUIET_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "sqlalchemy",
    "sqlalchemy.engine",
    "asyncpg",
    "asyncio",
)


def _service_context(environment: str) -> Processor:
    """Build a processor stamping service and environment on every event."""

    def add_service_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_service_context


def _build_processors(settings: "Settings") -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _service_context(settings.environment),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.is_development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )
    return processors


def setup_logging(settings: "Settings") -> None:
    """Configure structured logging for the application.

    Development renders colored console lines; staging and production
    render one JSON object per line for log aggregation.

    Args:
        settings: Application settings (environment and log_level).
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=_build_processors(settings),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.getLogger("src").setLevel(log_level)


def get_logger(name: str) -> Any:
    """Get a structured logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        A lazily configured structlog logger.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Bind values to every log line emitted in the current context.

    Args:
        **kwargs: Key-value pairs, e.g. request_id and user_id.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
