"""Structured logging configuration using structlog."""

import logging
from typing import Any, Dict

import structlog
from rich.logging import RichHandler

from crewmatch.config import settings


def configure_logging() -> None:
    """Configure structured logging with rich output."""

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[RichHandler(rich_tracebacks=True, markup=False)],
    )

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_transition(application_id: str, from_status: str, to_status: str, **kwargs: Any) -> Dict[str, Any]:
    """Create a log context for an application status change."""
    return {
        "application_id": application_id,
        "from_status": from_status,
        "to_status": to_status,
        **{k: v for k, v in kwargs.items() if not k.startswith("_")},
    }
