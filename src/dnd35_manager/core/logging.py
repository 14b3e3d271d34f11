"""structlog setup for the character manager.

Every module gets its logger from ``get_logger(__name__)`` and logs events
as a short message plus keyword fields (``character_id``, ``label``, ...).
``configure_logging`` is optional: without it structlog's defaults print
to the console. Application entry points call it once, normally with the
values from settings.

Example:
    >>> configure_logging()  # level and format from settings
    >>> logger = get_logger(__name__)
    >>> with character_context("abc"):
    ...     logger.info("Character saved", name="Tordek")
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog

from dnd35_manager.core.config import get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, Processor, WrappedLogger


APP_NAME = "dnd35_manager"


def _add_app_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def configure_logging(level: str | None = None, *, json_output: bool | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Minimum level name. Defaults to the configured log level.
        json_output: Render JSON lines instead of console output. Defaults
            to JSON outside debug mode.
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    if json_output is None:
        json_output = not settings.debug
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_app_name,
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(level=numeric_level, stream=sys.stderr, force=True)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger, usually for ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**fields: Any) -> None:
    """Attach fields to every following log event in this context."""
    structlog.contextvars.bind_contextvars(**fields)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def character_context(character_id: str) -> Iterator[None]:
    """Tag log events inside the block with a character ID."""
    with structlog.contextvars.bound_contextvars(character_id=character_id):
        yield


__all__ = [
    "APP_NAME",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "character_context",
]
