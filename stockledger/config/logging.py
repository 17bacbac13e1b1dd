"""
Structured logging for the stock ledger.

Events are snake_case names with key/value context (``sku``, ``movement_id``,
``request_id``). Development renders them for the console; every other
environment emits one JSON object per line.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from stockledger.config.settings import Settings, get_settings

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("aiosqlite", "redis", "uvicorn.access")


def add_service_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Stamp every event with the service name, version and environment."""
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def _processors(settings: Settings, json_output: bool) -> list[Processor]:
    chain: list[Processor] = [
        # request_id and other bound values from the middleware
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_context,
    ]
    if json_output:
        chain += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(default=str),
        ]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return chain


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: overrides ``LOG_LEVEL``
        json_output: overrides the environment-based renderer choice
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    if json_output is None:
        json_output = settings.environment != "development"

    structlog.configure(
        processors=_processors(settings, json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level_name)
    logging.getLogger().setLevel(level_name)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None, **initial: Any) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, optionally pre-bound with context."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial) if initial else logger
