"""
Structured logging for ReplyBox.

Every record carries timestamp, level, logger and a snake_case event_type.
Secure tokens and query strings are never passed to the logger.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), event_key="event_type")


def configure_structlog(level: str | None = None, log_format: str | None = None) -> None:
    """Set up structlog; LOG_LEVEL and LOG_FORMAT (json|console) fill in missing arguments."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_format = (log_format or os.getenv("LOG_FORMAT", "json")).strip().lower()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.EventRenamer("event_type"),
            _renderer(log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name, logging.INFO)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Logger bound to a module name.

        get_logger(__name__).info("comment_created", comment_id=12, post_id=5)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_request(path: str, method: str) -> structlog.BoundLogger:
    return get_logger("replybox.api_server").bind(path=path, method=method)
