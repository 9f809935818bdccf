"""
Structured Logging Framework

This module provides the logging infrastructure using structlog on top of the
standard library, with console output and an optional rotating JSON log file.
"""

import json
import logging
import logging.handlers
import sys
import traceback
from pathlib import Path
from typing import Optional

import structlog

from ..config.schema import LoggingConfig

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
SIMPLE_FORMAT = "[%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class DetailedConsoleFormatter(logging.Formatter):
    """Custom formatter for console output with detailed error tracebacks."""

    def format(self, record):
        # formatException output is cached on the record; render it ourselves
        exc_info = record.exc_info
        record.exc_info = None
        record.exc_text = None
        try:
            formatted = super().format(record)
        finally:
            record.exc_info = exc_info

        if exc_info:
            tb_lines = traceback.format_exception(*exc_info)
            formatted += "\n" + "".join(tb_lines).rstrip("\n")

        return formatted


class JSONFileFormatter(logging.Formatter):
    """One JSON object per line for the log file."""

    def format(self, record):
        log_dict = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "structured_data"):
            log_dict.update(record.structured_data)

        if record.exc_info:
            log_dict["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_dict)


class StructuredLogger:
    """Structured logger using structlog over stdlib handlers."""

    def __init__(self, config: LoggingConfig):
        """Initialize structured logger.

        Args:
            config: Logging configuration
        """
        self.config = config
        self._configured = False
        self.logger = None

    def _get_processors(self) -> list:
        """structlog processor chain for the configured format"""
        processors = [
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
        ]
        if self.config.format == "structured":
            processors.extend(
                [
                    structlog.processors.TimeStamper(fmt="iso"),
                    structlog.processors.StackInfoRenderer(),
                    structlog.processors.format_exc_info,
                    structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
                ]
            )
        else:
            processors.extend(
                [
                    structlog.processors.format_exc_info,
                    structlog.processors.KeyValueRenderer(
                        key_order=["event"], drop_missing=True
                    ),
                ]
            )
        return processors

    def configure(self) -> None:
        """Configure root handlers and structlog."""
        if self._configured:
            return

        root_logger = logging.getLogger()
        root_logger.handlers.clear()

        log_level = getattr(logging, self.config.level.upper())
        root_logger.setLevel(log_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        if self.config.format == "simple":
            console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
        else:
            console_handler.setFormatter(
                DetailedConsoleFormatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT)
            )
        root_logger.addHandler(console_handler)

        structlog.configure(
            processors=self._get_processors(),
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        if self.config.file:
            self._setup_file_logging(root_logger, log_level)

        self._configured = True
        self.logger = structlog.get_logger("dns_redirect")

    def _setup_file_logging(self, root_logger: logging.Logger, log_level: int) -> None:
        """Add a rotating JSON file handler."""
        log_path = Path(self.config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=self.config.file,
            maxBytes=self.config.max_size_mb * 1024 * 1024,
            backupCount=self.config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(JSONFileFormatter())
        root_logger.addHandler(file_handler)

    def get_logger(self, name: str = "dns_redirect") -> structlog.stdlib.BoundLogger:
        """Get a structured logger instance.

        Args:
            name: Logger name

        Returns:
            Structured logger instance
        """
        if not self._configured:
            self.configure()

        return structlog.get_logger(name)


# Global logger instance
_logger_instance: Optional[StructuredLogger] = None


def setup_logging(config: LoggingConfig) -> None:
    """Setup global logging configuration.

    Args:
        config: Logging configuration
    """
    global _logger_instance
    _logger_instance = StructuredLogger(config)
    _logger_instance.configure()


def get_logger(name: str = "dns_redirect") -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Raises:
        RuntimeError: If logging hasn't been configured
    """
    if _logger_instance is None:
        raise RuntimeError("Logging not configured. Call setup_logging() first.")

    return _logger_instance.get_logger(name)


def log_exception(
    logger: structlog.stdlib.BoundLogger,
    message: str,
    exc: Optional[BaseException] = None,
) -> None:
    """Log an exception with its type, message and traceback.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance (defaults to the exception being handled)
    """
    if exc is None:
        exc = sys.exc_info()[1]

    if exc is None:
        logger.error(message)
        return

    logger.error(
        message,
        exception_type=type(exc).__name__,
        exception_message=str(exc),
        exc_info=(type(exc), exc, exc.__traceback__),
    )
