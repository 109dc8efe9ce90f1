"""
Logging configuration for the Redline Comparator.

Comparison events carry contract text (changed paragraphs, headings), so
string values are clipped before rendering. JSON output is meant for
services that ship logs; console output for local work. Nothing is
configured on import: host applications call ``configure_logging`` once.
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.typing import EventDict, Processor

from redline.core.config import Settings, get_settings

APP_NAME = "redline_comparator"

# Longest string value rendered in a log event.
MAX_LOGGED_TEXT = 200


def app_context_processor(settings: Settings) -> Processor:
    """Build a processor that stamps events with the app name and environment."""
    environment = "development" if settings.debug else "production"

    def add_app_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["app"] = APP_NAME
        event_dict["environment"] = environment
        return event_dict

    return add_app_context


def truncate_long_values(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Clip long string values in an event.

    The event name itself is left alone. Clipped values keep their first
    ``MAX_LOGGED_TEXT`` characters and note the full length.
    """
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_LOGGED_TEXT:
            event_dict[key] = f"{value[:MAX_LOGGED_TEXT]}... ({len(value)} chars)"
    return event_dict


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        settings: Settings to read debug, log_level and log_format from
            (defaults to get_settings())
    """
    settings = settings or get_settings()

    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        app_context_processor(settings),
        truncate_long_values,
        structlog.processors.format_exc_info,
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for a module.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("redline_comparison_started", previous_length=1200)
    """
    return structlog.get_logger(name)


class LoggerMixin:
    """Gives a class a ``logger`` named after it."""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        return get_logger(self.__class__.__name__)
