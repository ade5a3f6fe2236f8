"""Config module exports."""

from loraxmod.config.loader import load_config
from loraxmod.config.models import (
    DiffConfig,
    ExtractionConfig,
    LoggingConfig,
    LoraxConfig,
    SchemaConfig,
)

__all__ = [
    "load_config",
    "DiffConfig",
    "ExtractionConfig",
    "LoggingConfig",
    "LoraxConfig",
    "SchemaConfig",
]
