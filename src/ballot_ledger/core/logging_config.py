"""
Structured logging setup.

Every module logs through ``structlog.get_logger(__name__)``; this module only
decides how those events are rendered.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.typing import Processor

from ballot_ledger.core.config import Settings, settings


def resolve_log_level(name: str) -> int:
    """Map a level name such as ``"debug"`` to its numeric value."""
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def add_app_name(app_name: str) -> Processor:
    """Build a processor that stamps every event with the application name."""

    def processor(logger: object, method_name: str, event_dict: dict) -> dict:
        event_dict.setdefault("app", app_name)
        return event_dict

    return processor


def configure_logging(config: Optional[Settings] = None) -> None:
    """
    Configure structlog for the ledger.

    Args:
        config: Settings to read APP_NAME, LOG_LEVEL and LOG_JSON from. Defaults to the
            process settings.
    """
    config = config or settings
    level = resolve_log_level(config.LOG_LEVEL)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        add_app_name(config.APP_NAME),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if config.LOG_JSON:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer formats exceptions itself
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )
