"""Utilities package."""

from .config import ensure_data_dirs, resolve_card_data_path, settings
from .log import LoggerMixin, configure_logging, get_logger

__all__ = [
    "settings",
    "ensure_data_dirs",
    "resolve_card_data_path",
    "get_logger",
    "LoggerMixin",
    "configure_logging",
]
