"""
Configuration Validators

This module provides validation functions for DNS redirect configuration parameters.
"""

from pathlib import Path


def validate_boolean(value) -> bool:
    """Validate boolean value."""
    return isinstance(value, bool)


def validate_file_path(path: str) -> bool:
    """Validate file path format."""
    if not path or not isinstance(path, str):
        return False

    try:
        Path(path)
        return True
    except (TypeError, ValueError):
        return False


def validate_storage_path(path: str) -> bool:
    """Validate a path inside storage ("/name" or "/dir/name")."""
    return (
        isinstance(path, str)
        and path.startswith("/")
        and len(path) > 1
        and not path.endswith("/")
        and ".." not in path.split("/")
    )


def validate_log_level(level: str) -> bool:
    """Validate log level."""
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    return isinstance(level, str) and level.upper() in valid_levels


def validate_positive_float(value: float) -> bool:
    """Validate positive float."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and value > 0
    )


def validate_positive_int(value: int) -> bool:
    """Validate positive integer."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_uint32(value: int) -> bool:
    """Validate unsigned 32-bit integer."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= 0xFFFFFFFF
    )
