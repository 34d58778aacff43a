"""Structured logging utilities for Discovery Tree."""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

from discovery_tree.core.config import LoggingConfig

_LOGGER_NAME = "discovery_tree"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def get_logger(component: Optional[str] = None) -> "structlog.stdlib.BoundLogger":
    """Return a structlog logger bound to the Discovery Tree namespace.

    The logger stays lazy, so module-level loggers pick up whatever
    ``configure_logging`` installs later.
    """
    if component:
        return structlog.get_logger(_LOGGER_NAME, component=component)
    return structlog.get_logger(_LOGGER_NAME)


def resolve_level(level: str) -> int:
    """Map a configured level name to a stdlib logging level."""
    return _LEVELS.get(level.lower(), logging.INFO)


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Setup stdlib and structlog logging based on configuration."""
    config = config or LoggingConfig()
    level = resolve_level(config.level)

    root_logger = logging.getLogger(_LOGGER_NAME)
    if not any(isinstance(h, logging.StreamHandler) for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
    ]

    if config.include_timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if config.format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    get_logger("logging").info(
        "Logging configured",
        level=config.level,
        format=config.format,
    )



def install_default_logging() -> None:
    """Route events through stdlib logging and stay silent until configured.

    Events go to the ``discovery_tree`` stdlib logger, which carries only a
    NullHandler, so nothing is printed unless the host application or
    ``configure_logging`` adds a handler. A structlog setup made by the host
    application is left untouched.
    """
    library_logger = logging.getLogger(_LOGGER_NAME)
    if not any(isinstance(h, logging.NullHandler) for h in library_logger.handlers):
        library_logger.addHandler(logging.NullHandler())

    if structlog.is_configured():
        return

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


install_default_logging()

__all__ = ["configure_logging", "get_logger", "install_default_logging", "resolve_level"]
