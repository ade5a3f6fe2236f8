"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (LORAXMOD__SECTION__KEY)
3. Project YAML (.loraxmod/config.yaml)
4. Global YAML (~/.config/loraxmod/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    LORAXMOD__<SECTION>__<KEY>=<VALUE>

Examples:
    LORAXMOD__LOGGING__LEVEL=DEBUG
    LORAXMOD__DIFF__SIMILARITY_THRESHOLD=0.75
    LORAXMOD__DIFF__INCLUDE_FULL_TEXT=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from loraxmod.config.constants import SIMILARITY_THRESHOLD, TRUNCATE_LENGTH

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LORAXMOD__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG logs every unknown node type and is verbose.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DiffConfig(BaseModel):
    """Semantic diff configuration.

    Env vars:
        LORAXMOD__DIFF__SIMILARITY_THRESHOLD: Rename pairing threshold (0.0-1.0)
        LORAXMOD__DIFF__TRUNCATE_LENGTH: Characters kept in old/new values
        LORAXMOD__DIFF__INCLUDE_FULL_TEXT: Disable value truncation
    """

    similarity_threshold: float = Field(
        default=SIMILARITY_THRESHOLD,
        description="Minimum body similarity for pairing a rename. "
        "Changing it moves the RENAME vs REMOVE+ADD boundary.",
    )
    truncate_length: int = Field(
        default=TRUNCATE_LENGTH,
        description="Characters of node text kept in old_value/new_value.",
    )
    include_full_text: bool = Field(
        default=False,
        description="Store full node text in change values instead of truncating.",
    )

    @field_validator("similarity_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not (0.0 <= v <= 1.0):
            raise ValueError(f"Similarity threshold must be 0.0-1.0, got {v}")
        return v

    @field_validator("truncate_length")
    @classmethod
    def validate_truncate_length(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Truncate length must be positive, got {v}")
        return v


class ExtractionConfig(BaseModel):
    """Extraction configuration.

    Env vars:
        LORAXMOD__EXTRACTION__MAX_TEXT_LENGTH: Cap ExtractedNode.text (unset = full text)
    """

    max_text_length: int | None = Field(
        default=None,
        description="Truncate ExtractedNode.text to this many characters. "
        "Intent values are never truncated.",
    )


class SchemaConfig(BaseModel):
    """Schema lookup configuration.

    Env vars:
        LORAXMOD__SCHEMAS__SCHEMA_DIRS: JSON list of directories holding <language>.json
        LORAXMOD__SCHEMAS__GRAMMAR_DIRS: JSON list of directories holding tree-sitter-<language>/
    """

    schema_dirs: list[Path] = Field(
        default_factory=list,
        description="Directories searched for <language>.json node-type schemas.",
    )
    grammar_dirs: list[Path] = Field(
        default_factory=list,
        description="Directories searched for tree-sitter-<language>/src/node-types.json.",
    )


class LoraxConfig(BaseModel):
    """Root configuration for loraxmod.

    All settings can be configured via:
    1. Environment variables: LORAXMOD__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    schemas: SchemaConfig = Field(default_factory=SchemaConfig)
