"""
structlog setup for the analytics core.

Module loggers come from ``get_logger(__name__)`` and carry a ``component``
field (``request_queue``, ``analytics_client``) so queue pacing and backend
failures can be filtered apart. ``configure_logging`` is called once by the
embedding application; until then structlog's defaults apply.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor

from seller_analytics.config import Settings, get_settings

# Third-party loggers that log every request at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore")


def add_severity(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mirror the level as ``severity`` for log collectors that expect it."""
    event_dict["severity"] = method_name.upper()
    return event_dict


def _renderer(settings: Settings) -> Processor:
    if settings.log_format == "json" and not settings.dev_mode:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=settings.dev_mode)


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Route structlog through stdlib logging at the configured level.

    Args:
        settings: Settings to read level, format and dev mode from
            (default: the cached application settings)
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            add_severity,
            _renderer(settings),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=not settings.dev_mode,
    )


def get_logger(name: str) -> Any:
    """
    Lazy structlog logger named ``name`` with a ``component`` field.

    The logger resolves its configuration on first use, so module-level
    loggers pick up a later ``configure_logging`` call.
    """
    return structlog.get_logger(name, component=name.rsplit(".", 1)[-1])
