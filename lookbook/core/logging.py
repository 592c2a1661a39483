"""Logging setup for lookbook.

Everything logs through structlog on top of the standard library, so the
records from uvicorn and aiohttp end up on the same stream. Development
runs get the colored console renderer; production emits one JSON object
per line.

Usage:
    from lookbook.core.logging import configure_logging, get_logger

    configure_logging()  # ENVIRONMENT and LOG_LEVEL come from the env
    logger = get_logger(__name__)
    logger.info("settle_started", target=-288.0, profile="spring")
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from os import getenv
from typing import Any, cast

import structlog
from structlog.types import Processor

# Libraries that are only worth hearing from at WARNING and above
QUIET_LOGGERS = ("aiohttp", "uvicorn.access", "PIL")


def is_development() -> bool:
    """True unless ENVIRONMENT is "production"."""
    return getenv("ENVIRONMENT", "development").lower() != "production"


def resolve_level(log_level: str | None = None) -> int:
    """Numeric level for a level name, falling back to LOG_LEVEL, then INFO."""
    name = (log_level or getenv("LOG_LEVEL", "INFO")).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _processors(development: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    return processors


def configure_logging(
    development: bool | None = None,
    log_level: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        development: Console output if True, JSON if False. Defaults to
            is_development().
        log_level: Level name such as "DEBUG". Defaults to resolve_level().
    """
    if development is None:
        development = is_development()
    level = resolve_level(log_level)

    structlog.configure(
        processors=_processors(development),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # force=True replaces handlers installed by uvicorn or earlier calls
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def bind_contextvars(**kwargs: Any) -> None:
    """Bind values that every later log call in this context will carry."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_contextvars(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_contextvars() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind values for the duration of a block, restoring the previous ones after.

    Example:
        with log_context(request_id="abc-123"):
            logger.info("suggestion_requested")  # carries request_id
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
