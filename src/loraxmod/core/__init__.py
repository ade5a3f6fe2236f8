"""Core module exports."""

from loraxmod.core.errors import (
    ConfigError,
    ErrorCode,
    LoraxError,
    SchemaError,
    TreeError,
)
from loraxmod.core.logging import configure_logging, get_log_file_path

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "LoraxError",
    "SchemaError",
    "TreeError",
    # Logging
    "configure_logging",
    "get_log_file_path",
]
