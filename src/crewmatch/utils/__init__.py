"""Shared utilities."""

from .logging import configure_logging, get_logger
from .timeutil import Instant, to_instant

__all__ = ["configure_logging", "get_logger", "Instant", "to_instant"]
