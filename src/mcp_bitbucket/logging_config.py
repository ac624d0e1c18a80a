"""Logging configuration for MCP Bitbucket.

Records go to stderr: stdout carries the MCP stdio transport. Every record
is tagged with the context of the operation it belongs to (tool name,
trace id), which is tracked per asyncio task.
"""

import contextvars
import logging
import os
import sys
import time
import types
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOGGER_NAME = "mcp-bitbucket"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] [%(context)s] %(message)s"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_DIRECTORY = "logs"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5

_log_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar(
    "mcp_bitbucket_log_context", default={}
)


def _context_str() -> str:
    context_data = _log_context.get()
    if not context_data:
        return "no-context"
    # operation=X,trace_id=Y,...
    return ",".join(f"{k}={v}" for k, v in context_data.items())


class ContextFilter(logging.Filter):
    """Adds the current operation context to every record as `record.context`."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = _context_str()
        return True


class LoggingContextManager:
    """Context manager scoping log records to one operation.

    Logs the start and the end (with duration) of the operation and restores
    the previous context on exit.
    """

    def __init__(self, logger: logging.Logger, operation: str, **context: Any) -> None:
        """
        Initializes the logging context manager.

        Args:
            logger: Logger used for the start/end records
            operation: Name of the operation being executed
            **context: Additional context data
        """
        self.logger = logger
        self.operation = operation
        self.context = context.copy()
        self.trace_id = self.context.pop("trace_id", None) or str(uuid.uuid4())[:8]
        self.start_time = 0.0
        self._token: contextvars.Token | None = None

    def __enter__(self) -> "LoggingContextManager":
        self.start_time = time.monotonic()
        new_context = {
            **_log_context.get(),
            **self.context,
            "operation": self.operation,
            "trace_id": self.trace_id,
        }
        self._token = _log_context.set(new_context)
        self.logger.info(f"Operation started: {self.operation}")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        duration = time.monotonic() - self.start_time
        if exc_type:
            self.logger.error(
                f"Operation failed: {self.operation} after {duration:.3f}s - {exc_val}"
            )
        else:
            self.logger.debug(
                f"Operation completed: {self.operation} in {duration:.3f}s"
            )
        if self._token is not None:
            _log_context.reset(self._token)


def setup_logger(
    name: str = LOGGER_NAME,
    level: str | None = None,
    log_to_file: bool = False,
    log_dir: str | None = None,
    log_format: str | None = None,
) -> logging.Logger:
    """
    Configures and returns the logger for `name`.

    Calling it again replaces the previously installed handlers.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, etc.), defaults to LOG_LEVEL or INFO
        log_to_file: If True, also logs to a rotating file
        log_dir: Directory to store log files (defaults to LOG_DIR or ./logs)
        log_format: Log record format

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    log_level = (level or os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format or os.getenv("LOG_FORMAT", DEFAULT_FORMAT))
    context_filter = ContextFilter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(context_filter)
    logger.addHandler(console_handler)

    if log_to_file:
        log_directory = Path(log_dir or os.getenv("LOG_DIR", DEFAULT_LOG_DIRECTORY))
        log_directory.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_directory / f"{name}.log",
            maxBytes=MAX_LOG_SIZE,
            backupCount=LOG_BACKUP_COUNT,
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(context_filter)
        logger.addHandler(file_handler)

    # Keep records off the root logger, which may write to stdout.
    logger.propagate = False

    return logger


def log_operation(
    logger: logging.Logger, operation: str, **context: Any
) -> LoggingContextManager:
    """
    Creates a context manager for operation logging.

    Args:
        logger: Logger for the start/end records
        operation: Name of the operation
        **context: Additional context data

    Returns:
        Context manager configured for operation logging
    """
    return LoggingContextManager(logger, operation, **context)
