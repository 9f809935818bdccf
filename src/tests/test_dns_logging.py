"""
Tests for the logging setup

Covers structlog configuration, the JSON file handler and exception logging.
"""

import json
import logging
import tempfile
from pathlib import Path

import pytest
import structlog

from dns_redirect.config.schema import LoggingConfig
from dns_redirect.dns_logging import logger as logger_module
from dns_redirect.dns_logging import (
    StructuredLogger,
    get_logger,
    log_exception,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore root handlers and the global logger after each test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    logger_module._logger_instance = None
    structlog.reset_defaults()


class TestStructuredLogger:
    """Test structured logging framework."""

    def test_structured_logger_creation(self):
        """Test creating a structured logger."""
        config = LoggingConfig(level="INFO", max_size_mb=10, backup_count=3)

        logger = StructuredLogger(config)

        assert logger.config == config
        assert not logger._configured

    def test_structured_logger_configuration(self):
        """Test logger configuration."""
        logger = StructuredLogger(LoggingConfig(level="DEBUG"))
        logger.configure()

        assert logger._configured
        assert logger.logger is not None
        assert logging.getLogger().level == logging.DEBUG

    def test_structured_format_uses_console_renderer(self):
        """Structured format renders through structlog's console renderer."""
        processors = StructuredLogger(LoggingConfig(format="structured"))._get_processors()

        assert any(isinstance(proc, structlog.dev.ConsoleRenderer) for proc in processors)

    def test_simple_format_uses_key_value_renderer(self):
        """Simple format renders key=value pairs."""
        processors = StructuredLogger(LoggingConfig(format="simple"))._get_processors()

        assert any(
            isinstance(proc, structlog.processors.KeyValueRenderer) for proc in processors
        )

    def test_json_file_logging(self):
        """Core module messages reach the JSON log file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "logs" / "redirect.log"
            setup_logging(LoggingConfig(level="INFO", file=str(log_file)))

            logging.getLogger("dns_redirect.core.resolver").info("Loaded 2 redirections")
            for handler in logging.getLogger().handlers:
                handler.flush()

            lines = log_file.read_text().splitlines()
            record = json.loads(lines[-1])

            for handler in list(logging.getLogger().handlers):
                if isinstance(handler, logging.FileHandler):
                    handler.close()
                    logging.getLogger().removeHandler(handler)

        assert record["level"] == "INFO"
        assert record["logger"] == "dns_redirect.core.resolver"
        assert record["message"] == "Loaded 2 redirections"


class TestGlobalLogger:
    """Test the module-level helpers."""

    def test_get_logger_requires_setup(self):
        """get_logger fails before setup_logging."""
        with pytest.raises(RuntimeError, match="Logging not configured"):
            get_logger("test")

    def test_get_logger_after_setup(self):
        """get_logger returns a usable logger after setup."""
        setup_logging(LoggingConfig())

        logger = get_logger("test")
        logger.info("hello", key="value")

    def test_log_exception(self, capsys):
        """Exceptions are logged with type and message."""
        setup_logging(LoggingConfig(format="simple"))
        logger = get_logger("test")

        try:
            raise ValueError("bad hosts file")
        except ValueError as e:
            log_exception(logger, "Failed to load", e)

        output = capsys.readouterr().out
        assert "Failed to load" in output
        assert "ValueError" in output
        assert "bad hosts file" in output

    def test_log_exception_without_exception(self, capsys):
        """Without an exception only the message is logged."""
        setup_logging(LoggingConfig(format="simple"))

        log_exception(get_logger("test"), "Nothing went wrong")

        assert "Nothing went wrong" in capsys.readouterr().out
