"""Configuration constants.

Values here are the documented defaults of the extraction and diff contract.
They are shared by every binding of the output format, so the core engines
default to them; ``DiffConfig`` may override the tunable ones per run.
"""

# =============================================================================
# Diff
# =============================================================================

SIMILARITY_THRESHOLD = 0.6
"""Minimum normalized text similarity for pairing a RENAME candidate.

Raising it turns borderline renames into REMOVE + ADD; lowering it pairs
more aggressively.
"""

TRUNCATE_LENGTH = 100
"""Characters of node text kept in ``old_value`` / ``new_value``."""

TRUNCATION_MARKER = "..."
"""Suffix appended to values cut at ``TRUNCATE_LENGTH``."""

PATH_SEPARATOR = " > "
"""Separator between breadcrumb segments in ``SemanticChange.path``."""

# =============================================================================
# Schema lookup
# =============================================================================

SCHEMA_FILENAME = "node-types.json"
"""File name tree-sitter generates for a grammar's node-type schema."""

CONFIG_DIR_NAME = ".loraxmod"
"""Per-project directory holding ``config.yaml``."""
