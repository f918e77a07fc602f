"""Structured logging for the scanner, built on structlog over stdlib logging."""

import logging
import sys
import time
import uuid
from typing import Any, ContextManager, Dict, Optional

import structlog

from . import config


def configure_logging(level: Optional[str] = None):
    """Configure JSON structured logging; the level defaults to settings.LOG_LEVEL."""
    level_name = (level or config.settings.LOG_LEVEL).upper()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
    )

    structlog.configure(
        processors=[
            # scan_id and other per-scan fields bound with scan_context()
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name)


def new_scan_id() -> str:
    return uuid.uuid4().hex[:12]


def scan_context(scan_id: Optional[str] = None, **fields: Any) -> ContextManager:
    """
    Bind a scan id (and any extra fields) to every log line emitted inside.

    The binding lives in a context variable, so collaborator coroutines
    awaited within the block inherit it.
    """
    return structlog.contextvars.bound_contextvars(scan_id=scan_id or new_scan_id(), **fields)


class LoggerMixin:
    """Per-class logger plus start/success/error timing helpers for collaborators."""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger

    def log_start(self, event: str, **kwargs: Any) -> Dict[str, Any]:
        """Log "<event> started" and return the timing context for the matching end call."""
        context = {"event": event, "start_time": time.time(), **kwargs}
        self.logger.info(f"{event} started", **self._fields(context))
        return context

    def log_success(self, context: Dict[str, Any], **kwargs: Any):
        kwargs.update(self._elapsed(context))
        self.logger.info(
            f"{context.get('event', 'operation')} completed", **self._fields(context), **kwargs
        )

    def log_error(self, context: Dict[str, Any], error: BaseException, **kwargs: Any):
        kwargs.update(self._elapsed(context))
        self.logger.error(
            f"{context.get('event', 'operation')} failed",
            **self._fields(context),
            error=str(error),
            error_type=type(error).__name__,
            **kwargs,
        )

    @staticmethod
    def _fields(context: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in context.items() if k != "event"}

    @staticmethod
    def _elapsed(context: Dict[str, Any]) -> Dict[str, int]:
        if "start_time" not in context:
            return {}
        return {"duration_ms": int((time.time() - context["start_time"]) * 1000)}
