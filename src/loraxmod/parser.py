"""Parser facade.

Ties a tree-sitter grammar to its node-type schema, extractor and differ so
callers can go straight from source text to extractions and diffs.

Usage::

    parser = LanguageParser.create("python", schema_path=Path("python.json"))
    parser.extract_all(source, recurse=True)
    parser.diff(old_source, new_source).to_dict()

    parsers = MultiParser(config)
    parsers.diff_files(Path("a.py"), Path("b.py"))
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Literal, overload

import structlog
import tree_sitter

from loraxmod.config.models import LoraxConfig
from loraxmod.core.errors import TreeError
from loraxmod.diff.engine import TreeDiffer
from loraxmod.diff.models import DiffResult
from loraxmod.extraction.engine import SchemaExtractor
from loraxmod.extraction.models import ExtractedNode
from loraxmod.languages import detect_language, get_language
from loraxmod.schema.loader import load_schema
from loraxmod.schema.reader import SchemaReader
from loraxmod.tree.treesitter import TreeSitterNode, make_parser

log = structlog.get_logger(__name__)

Source = str | bytes


def _as_bytes(source: Source) -> bytes:
    return source.encode("utf-8") if isinstance(source, str) else source


class LanguageParser:
    """Parser, schema, extractor and differ for one language."""

    def __init__(
        self,
        language: str,
        parser: tree_sitter.Parser,
        schema: SchemaReader,
        config: LoraxConfig | None = None,
    ) -> None:
        self.language = language
        self.config = config or LoraxConfig()
        self.schema = schema
        self._parser = parser
        self.extractor = SchemaExtractor(
            schema, max_text_length=self.config.extraction.max_text_length
        )
        self.differ = TreeDiffer(
            schema,
            extractor=self.extractor,
            similarity_threshold=self.config.diff.similarity_threshold,
            truncate_length=self.config.diff.truncate_length,
        )

    @classmethod
    def create(
        cls,
        language: str,
        schema_path: Path | None = None,
        config: LoraxConfig | None = None,
    ) -> LanguageParser:
        """Build a parser for ``language``.

        Raises:
            TreeError: TREE_UNSUPPORTED_LANGUAGE when the grammar is unavailable.
            SchemaError: SCHEMA_NOT_FOUND / SCHEMA_MALFORMED for the schema file.
        """
        config = config or LoraxConfig()
        lang = get_language(language)
        if lang is None:
            raise TreeError.unsupported_language(language, "no grammar registered for this id")

        schema = load_schema(
            lang.name,
            schema_path=schema_path,
            schema_dirs=config.schemas.schema_dirs,
            grammar_dirs=config.schemas.grammar_dirs,
        )
        parser = make_parser(lang.name)
        log.debug("language_parser_created", language=lang.name, node_types=len(schema))
        return cls(lang.name, parser, schema, config)

    def parse(self, source: Source) -> TreeSitterNode | None:
        """Parse source text; ``None`` when the parser yields no root."""
        return TreeSitterNode.from_tree(self._parser.parse(_as_bytes(source)))

    def parse_file(self, path: Path) -> TreeSitterNode | None:
        return self.parse(path.read_bytes())

    def _parse_root(self, source: Source, operation: str, tree: str) -> TreeSitterNode:
        root = self.parse(source)
        if root is None:
            log.error("parse_no_root", language=self.language, operation=operation, tree=tree)
            raise TreeError.no_root(operation, tree)
        return root

    @overload
    def extract_all(self, source: Source, recurse: Literal[False] = False) -> ExtractedNode: ...

    @overload
    def extract_all(self, source: Source, recurse: Literal[True]) -> list[ExtractedNode]: ...

    def extract_all(
        self, source: Source, recurse: bool = False
    ) -> ExtractedNode | list[ExtractedNode]:
        root = self._parse_root(source, "extract_all", "input")
        if recurse:
            return self.extractor.extract_all(root, recurse=True)
        return self.extractor.extract_all(root)

    def extract_by_type(self, source: Source, node_types: Iterable[str]) -> list[ExtractedNode]:
        root = self._parse_root(source, "extract_by_type", "input")
        return self.extractor.extract_by_type(root, node_types)

    def diff(
        self,
        old_source: Source,
        new_source: Source,
        include_full_text: bool | None = None,
    ) -> DiffResult:
        """Diff two versions of a source text.

        ``include_full_text`` defaults to ``config.diff.include_full_text``.
        """
        if include_full_text is None:
            include_full_text = self.config.diff.include_full_text
        old_root = self._parse_root(old_source, "diff", "old")
        new_root = self._parse_root(new_source, "diff", "new")
        return self.differ.diff(old_root, new_root, include_full_text)

    def diff_files(
        self,
        old_path: Path,
        new_path: Path,
        include_full_text: bool | None = None,
    ) -> DiffResult:
        return self.diff(old_path.read_bytes(), new_path.read_bytes(), include_full_text)

    def __repr__(self) -> str:
        return f"LanguageParser({self.language!r}, schema={self.schema.source!r})"


class MultiParser:
    """Lazily built ``LanguageParser`` per language, picked by file extension."""

    def __init__(
        self,
        config: LoraxConfig | None = None,
        schema_paths: Mapping[str, Path] | None = None,
    ) -> None:
        self.config = config or LoraxConfig()
        self.schema_paths = dict(schema_paths or {})
        self._parsers: dict[str, LanguageParser] = {}

    def get(self, language: str) -> LanguageParser:
        lang = get_language(language)
        name = lang.name if lang is not None else language
        if name not in self._parsers:
            self._parsers[name] = LanguageParser.create(
                name, schema_path=self.schema_paths.get(name), config=self.config
            )
        return self._parsers[name]

    def for_file(self, path: Path) -> LanguageParser:
        """Parser for ``path`` based on its extension.

        Raises:
            TreeError: TREE_UNSUPPORTED_LANGUAGE for unknown extensions.
        """
        language = detect_language(path)
        if language is None:
            raise TreeError.unsupported_language(
                str(path), f"no language registered for extension '{path.suffix}'"
            )
        return self.get(language)

    def extract_file(
        self, path: Path, recurse: bool = False
    ) -> ExtractedNode | list[ExtractedNode]:
        parser = self.for_file(path)
        if recurse:
            return parser.extract_all(path.read_bytes(), recurse=True)
        return parser.extract_all(path.read_bytes())

    def diff_files(
        self,
        old_path: Path,
        new_path: Path,
        include_full_text: bool | None = None,
    ) -> DiffResult:
        """Diff two files; the language is detected from ``old_path``."""
        return self.for_file(old_path).diff_files(old_path, new_path, include_full_text)

    @property
    def loaded_languages(self) -> list[str]:
        return sorted(self._parsers)
