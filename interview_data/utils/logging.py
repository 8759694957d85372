"""Logging utilities for the Interview Data client."""

import json
import logging
import logging.handlers
import sys
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import Optional

# Correlation ID of the current command, attached to every record
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

QUIET_LOGGERS = ("asyncio", "httpx", "httpcore", "hpack")

_RESERVED_RECORD_KEYS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName", "taskName",
    "processName", "process", "getMessage", "exc_info",
    "exc_text", "stack_info", "correlation_id", "message", "asctime",
}


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the current correlation ID."""

    def filter(self, record):
        record.correlation_id = _correlation_id.get()
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, including any ``extra=`` fields."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Fields passed through ``extra=``
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Single-line console format prefixed with the correlation ID when one is set."""

    def format(self, record):
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)
        logger_name = record.name.ljust(25)
        correlation_value = getattr(record, "correlation_id", "")
        correlation_str = f"[{correlation_value}] " if correlation_value else ""

        message = record.getMessage()

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return f"{timestamp} | {level} | {logger_name} | {correlation_str}{message}"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = False,
    structured: bool = False,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> None:
    """Setup logging configuration for the Interview Data client.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        enable_console: Enable console logging
        enable_file: Enable file logging
        structured: Use structured JSON logging
        max_file_size: Maximum log file size in bytes
        backup_count: Number of backup log files to keep
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(getattr(logging, level.upper()))

    formatter = StructuredFormatter() if structured else HumanReadableFormatter()
    correlation_filter = CorrelationIdFilter()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(correlation_filter)
        root_logger.addHandler(console_handler)

    if enable_file and log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(correlation_filter)
        root_logger.addHandler(file_handler)

    # The Supabase client stack logs every request at INFO
    for noisy in QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    startup_logger = logging.getLogger("startup")
    startup_logger.debug("Logging system initialized", extra={
        "configured_level": level,
        "console_enabled": enable_console,
        "file_enabled": enable_file,
        "structured": structured
    })


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Records pick up the current correlation ID from the handler filter
    installed by :func:`setup_logging`.
    """
    return logging.getLogger(name)


def set_correlation_id(correlation_id_value: str) -> None:
    """Set correlation ID for current context."""
    _correlation_id.set(correlation_id_value)


def get_correlation_id() -> str:
    """Get current correlation ID, or an empty string if not set."""
    return _correlation_id.get()


def log_performance(operation: str, duration: float, details: dict = None):
    """Log the duration of a backend round trip at DEBUG level.

    Args:
        operation: Name of the operation
        duration: Duration in seconds
        details: Extra fields, e.g. the table queried
    """
    extra = {
        "operation": operation,
        "duration_seconds": duration,
    }
    if details:
        extra.update(details)

    get_logger("performance").debug(f"Performance: {operation} took {duration:.3f}s", extra=extra)


def log_error(error: Exception, context: dict = None):
    """Log a failed command with its traceback and context fields."""
    extra = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }
    if context:
        extra.update(context)

    get_logger("error").error(f"Error occurred: {error}", extra=extra, exc_info=error)
