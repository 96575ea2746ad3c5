"""Structured logging with structlog."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Optional

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from twitter_api.settings import Settings

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "silent": logging.CRITICAL,
}


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structlog from client settings.

    The client never calls this itself; applications opt in.

    Args:
        settings: Settings to read; defaults to get_settings(). Production
            mode renders JSON, development a colorized console. The "silent"
            level suppresses everything below CRITICAL.
    """
    if settings is None:
        from twitter_api.settings import get_settings

        settings = get_settings()

    min_level = _LEVELS.get(settings.log_level, logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.is_production:
        structlog.configure(
            processors=[
                *shared_processors,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(min_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
            cache_logger_on_first_use=True,
        )
    else:
        structlog.configure(
            processors=[
                *shared_processors,
                structlog.dev.ConsoleRenderer(colors=True),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(min_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=True,
        )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for a module of the client.

    The logger follows the process-wide structlog configuration, whichever
    code installed it.

    Args:
        name: Logger name (typically module name like "twitter_api.client").

    Returns:
        structlog logger with service context.

    Example:
        >>> log = get_logger("twitter_api.client")
        >>> log.info("request_sending", method="GET", path="search/tweets.json")
    """
    return structlog.get_logger(service=name)
