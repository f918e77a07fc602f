"""Utilities package."""

from .config import Settings, ensure_output_dir, ensure_tesseract, settings
from .log import LoggerMixin, configure_logging, get_logger

__all__ = [
    "Settings",
    "settings",
    "ensure_output_dir",
    "ensure_tesseract",
    "get_logger",
    "LoggerMixin",
    "configure_logging",
]
