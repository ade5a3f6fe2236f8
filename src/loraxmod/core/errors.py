"""loraxmod error types with typed error codes.

Error code ranges:
- 1xxx: Schema
- 2xxx: Tree
- 3xxx: Config

Unknown node types and unknown fields are never errors: they extract as
"no data" so that schema coverage gaps do not abort a traversal.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Schema (1xxx)
    SCHEMA_MALFORMED = 1001
    SCHEMA_NOT_FOUND = 1002

    # Tree (2xxx)
    TREE_NO_ROOT = 2001
    TREE_UNSUPPORTED_LANGUAGE = 2002

    # Config (3xxx)
    CONFIG_PARSE_ERROR = 3001
    CONFIG_INVALID_VALUE = 3002


@dataclass(frozen=True, slots=True)
class LoraxError(Exception):
    """Base error with structured context for callers and CLI output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'SCHEMA_MALFORMED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class SchemaError(LoraxError):
    """Node-type schema errors (MalformedSchema, SchemaNotFound)."""

    @classmethod
    def malformed(
        cls,
        reason: str,
        *,
        node_type: str | None = None,
        source: str | None = None,
    ) -> "SchemaError":
        where = f" in '{node_type}'" if node_type else ""
        return cls(
            code=ErrorCode.SCHEMA_MALFORMED,
            message=f"Malformed schema{where}: {reason}",
            details={"reason": reason, "node_type": node_type, "source": source},
        )

    @classmethod
    def not_found(cls, language: str, tried: list[str]) -> "SchemaError":
        return cls(
            code=ErrorCode.SCHEMA_NOT_FOUND,
            message=f"Schema not found for '{language}' (tried {len(tried)} locations)",
            details={"language": language, "tried": tried},
        )


class TreeError(LoraxError):
    """Syntax tree errors (NoRootNode, unsupported grammar)."""

    @classmethod
    def no_root(cls, operation: str, tree: str) -> "TreeError":
        return cls(
            code=ErrorCode.TREE_NO_ROOT,
            message=f"{operation}: {tree} tree has no root node",
            details={"operation": operation, "tree": tree},
        )

    @classmethod
    def unsupported_language(cls, language: str, reason: str) -> "TreeError":
        return cls(
            code=ErrorCode.TREE_UNSUPPORTED_LANGUAGE,
            message=f"Language '{language}' is not available: {reason}",
            details={"language": language, "reason": reason},
        )


class ConfigError(LoraxError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

