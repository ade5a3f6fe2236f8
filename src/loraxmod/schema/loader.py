"""Schema file lookup.

Resolves a language id to a ``node-types.json`` on disk. Lookup order:

1. Explicit path (if provided)
2. ``<schema_dir>/<language>.json`` for each configured schema directory
3. ``<grammar_dir>/tree-sitter-<language>/src/node-types.json`` for each
   configured grammar directory

Steps 2 and 3 are retried with the grammar id alias (``csharp`` ->
``c-sharp`` / ``c_sharp``). Nothing is fetched over the network; a miss
raises ``SchemaError.not_found`` listing every path tried.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from loraxmod.config.constants import SCHEMA_FILENAME
from loraxmod.core.errors import SchemaError
from loraxmod.languages import grammar_aliases
from loraxmod.schema.reader import SchemaReader

log = structlog.get_logger(__name__)


def candidate_paths(
    language: str,
    schema_dirs: Iterable[Path] = (),
    grammar_dirs: Iterable[Path] = (),
) -> list[Path]:
    """All locations searched for ``language``, in lookup order."""
    names = [language, *(a for a in grammar_aliases(language) if a != language)]
    schema_dirs = list(schema_dirs)
    grammar_dirs = list(grammar_dirs)

    paths: list[Path] = []
    for name in names:
        paths.extend(Path(d).expanduser() / f"{name}.json" for d in schema_dirs)
        paths.extend(
            Path(d).expanduser() / f"tree-sitter-{name}" / "src" / SCHEMA_FILENAME
            for d in grammar_dirs
        )
    return paths


def find_schema(
    language: str,
    *,
    schema_path: Path | None = None,
    schema_dirs: Iterable[Path] = (),
    grammar_dirs: Iterable[Path] = (),
) -> Path:
    """Locate the schema file for ``language``.

    Raises:
        SchemaError: SCHEMA_NOT_FOUND when no candidate exists.
    """
    if schema_path is not None:
        if schema_path.is_file():
            return schema_path
        raise SchemaError.not_found(language, [str(schema_path)])

    tried = candidate_paths(language, schema_dirs, grammar_dirs)
    for path in tried:
        if path.is_file():
            return path

    log.warning("schema_not_found", language=language, tried=len(tried))
    raise SchemaError.not_found(language, [str(p) for p in tried])


def load_schema(
    language: str,
    *,
    schema_path: Path | None = None,
    schema_dirs: Iterable[Path] = (),
    grammar_dirs: Iterable[Path] = (),
) -> SchemaReader:
    """Find and read the schema for ``language``."""
    path = find_schema(
        language,
        schema_path=schema_path,
        schema_dirs=schema_dirs,
        grammar_dirs=grammar_dirs,
    )
    schema = SchemaReader.from_file(path)
    log.info("schema_loaded", language=language, path=str(path), node_types=len(schema))
    return schema
