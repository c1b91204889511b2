"""
Structured logging configuration for botagent.

botagent is a library, so nothing here runs on import. Applications that
want botagent's events rendered call ``setup_logging()`` once at startup;
otherwise structlog's defaults apply and the host application stays in
charge of its own logging.

- JSON output for machine consumption, pretty console output otherwise
- User-agent strings are truncated so a hostile header cannot flood logs
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Optional

import structlog
from structlog.types import EventDict, Processor

from botagent.config import LoggingSettings, get_settings

# Longest user-agent string kept verbatim in an event
MAX_LOGGED_USER_AGENT = 256


def add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO format timestamp to event dict."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def truncate_user_agent(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Clip oversized user-agent values."""
    value = event_dict.get("user_agent")
    if isinstance(value, str) and len(value) > MAX_LOGGED_USER_AGENT:
        event_dict["user_agent"] = value[:MAX_LOGGED_USER_AGENT] + "..."
    return event_dict


def configure_structlog(log_format: str = "console") -> None:
    """
    Configure structlog with processors for the chosen output format.

    json: one JSON object per line
    console: pretty console formatting with colors
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        truncate_user_agent,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(log_level: str = "INFO") -> None:
    """Route the ``botagent`` stdlib logger to stdout at *log_level*."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger("botagent").setLevel(level)


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Initialize logging for botagent.

    Args:
        settings: Logging settings; defaults to the process-wide settings
            read from ``BOTAGENT_LOG_LEVEL`` / ``BOTAGENT_LOG_FORMAT``.
    """
    if settings is None:
        settings = get_settings().logging

    configure_stdlib_logging(settings.log_level)
    configure_structlog(settings.log_format)

    structlog.get_logger(__name__).info(
        "logging_initialized",
        log_level=settings.log_level,
        log_format=settings.log_format,
    )
