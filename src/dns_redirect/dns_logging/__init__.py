"""
DNS Redirect Logging Module

structlog-based logging setup shared by the command-line entry point.
"""

from .logger import StructuredLogger, get_logger, log_exception, setup_logging

__all__ = [
    "StructuredLogger",
    "setup_logging",
    "get_logger",
    "log_exception",
]
