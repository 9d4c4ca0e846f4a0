"""Structured logging for the idle RPG engine.

Engine modules log state transitions with key-value context through
``get_logger``. ``configure_logging`` applies the ``log_level`` and
``debug`` settings; ``GameLoop.run`` calls it when a session starts. The
player-facing narration lives in the game's action log and is a separate
concern.

Example:
    >>> from idle_rpg.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Action completed", action_id="beg", completion_count=3)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog

from idle_rpg.core.config import get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, Processor, WrappedLogger

    from idle_rpg.core.config import Settings


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every entry with the package name."""
    event_dict["app"] = "idle_rpg"
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog from the application settings.

    Entries below ``settings.log_level`` are dropped. Debug mode renders
    console lines; otherwise each entry is one JSON object per line.

    Args:
        settings: Application settings; the configured ones when omitted.

    Example:
        >>> configure_logging(Settings(debug=True, log_level="DEBUG"))
    """
    settings = settings if settings is not None else get_settings()
    level = getattr(logging, settings.log_level)

    processors: list[Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
    ]
    if settings.is_production:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        # Module-level loggers pick up a later reconfiguration
        cache_logger_on_first_use=False,
    )
    get_logger(__name__).debug(
        "Logging configured",
        level=settings.log_level,
        json_format=settings.is_production,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "get_logger",
]
