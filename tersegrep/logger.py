"""Structured logging utility for tersegrep.

Provides stderr logging (plain or JSON) with context fields and the
exception hierarchy shared by the search engine, tracking store and CLI.
stdout is reserved for command payloads, so nothing here writes to it.
"""
import logging
import json
import os
import sys
import traceback
from typing import Any, Dict, Optional
from datetime import datetime, timezone

_log_level_str = os.environ.get("LOG_LEVEL", "WARNING").upper()
_log_level = getattr(logging, _log_level_str, logging.WARNING)
_json_default = os.environ.get("LOG_FORMAT", "").strip().lower() == "json"

# Cache loggers to avoid repeated lookups
_logger_cache: Dict[str, logging.Logger] = {}


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    __slots__ = ()

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        extra = getattr(record, "extra_fields", None)
        if extra:
            log_data.update(extra)

        return json.dumps(log_data, default=str)


def get_logger(name: str, json_format: Optional[bool] = None) -> logging.Logger:
    """Get a logger writing to stderr.

    Args:
        name: Logger name (typically __name__)
        json_format: Force JSON output; defaults to LOG_FORMAT=json

    Returns:
        Configured logger instance
    """
    if json_format is None:
        json_format = _json_default
    cache_key = f"{name}:{json_format}"
    if cache_key in _logger_cache:
        return _logger_cache[cache_key]

    logger = logging.getLogger(name)
    logger.setLevel(_log_level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        if json_format:
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)

    _logger_cache[cache_key] = logger
    return logger


def set_verbosity(verbose: int) -> None:
    """Lower the level of every cached logger according to -v count."""
    if verbose <= 0:
        return
    level = logging.INFO if verbose == 1 else logging.DEBUG
    for logger in _logger_cache.values():
        if logger.level > level:
            logger.setLevel(level)


class ContextLogger:
    """Logger wrapper that adds context fields to all log messages."""

    __slots__ = ("logger", "context")

    def __init__(self, logger: logging.Logger, **context):
        self.logger = logger
        self.context = context

    def _log(self, level: int, msg: str, exc_info: Any = None, **extra):
        if not self.logger.isEnabledFor(level):
            return
        merged = {**self.context, **extra} if extra else self.context
        record = self.logger.makeRecord(
            self.logger.name,
            level,
            "(unknown file)",
            0,
            msg,
            (),
            exc_info,
        )
        record.extra_fields = merged
        self.logger.handle(record)

    def debug(self, msg: str, **extra):
        self._log(logging.DEBUG, msg, **extra)

    def info(self, msg: str, **extra):
        self._log(logging.INFO, msg, **extra)

    def warning(self, msg: str, **extra):
        self._log(logging.WARNING, msg, **extra)

    def error(self, msg: str, exc_info: Any = None, **extra):
        self._log(logging.ERROR, msg, exc_info=exc_info, **extra)

    def isEnabledFor(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)


class TersegrepError(Exception):
    """Base exception for all tersegrep errors."""
    pass


class InvalidInputError(TersegrepError):
    """Bad command input detected before any scanning starts."""
    pass


class EmptyQueryError(InvalidInputError):
    """The query trimmed to nothing."""
    pass


class RootNotFoundError(InvalidInputError):
    """The search root does not exist."""
    pass


class SerializationError(TersegrepError):
    """A result could not be encoded as JSON."""
    pass


class TrackingError(TersegrepError):
    """The usage history store could not be opened or written."""
    pass
