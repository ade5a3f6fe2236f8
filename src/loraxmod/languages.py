"""Language definitions.

Maps file extensions to language ids and language ids to the tree-sitter
grammar package that parses them. This is glue for the parser facade and
the CLI; the extraction and diff engines never consult it.

Design decisions:
1. Language ids are lowercase without punctuation ("csharp", not "c-sharp")
2. ``aliases`` lists the spellings grammar repos and schema files use for the
   same grammar, tried in order when locating a schema
3. ``language_func`` is set only for grammar packages that do not expose a
   plain ``language()`` entry point
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Language:
    """Canonical definition for a language id.

    Attributes:
        name: Unique identifier (lowercase, e.g., "python", "csharp")
        extensions: File extensions including dot (e.g., ".py")
        grammar_module: Importable tree-sitter grammar package
        language_func: Entry point name inside grammar_module (default "language")
        aliases: Alternate grammar ids used by schema files and grammar repos
    """

    name: str
    extensions: frozenset[str]
    grammar_module: str
    language_func: str = "language"
    aliases: tuple[str, ...] = field(default_factory=tuple)


ALL_LANGUAGES: tuple[Language, ...] = (
    Language("javascript", frozenset({".js", ".mjs", ".cjs", ".jsx"}), "tree_sitter_javascript"),
    Language(
        "typescript",
        frozenset({".ts", ".mts", ".cts"}),
        "tree_sitter_typescript",
        language_func="language_typescript",
    ),
    Language(
        "tsx",
        frozenset({".tsx"}),
        "tree_sitter_typescript",
        language_func="language_tsx",
    ),
    Language("python", frozenset({".py", ".pyi"}), "tree_sitter_python"),
    Language("rust", frozenset({".rs"}), "tree_sitter_rust"),
    Language("go", frozenset({".go"}), "tree_sitter_go"),
    Language("c", frozenset({".c", ".h"}), "tree_sitter_c"),
    Language("cpp", frozenset({".cpp", ".cc", ".cxx", ".hpp", ".hh"}), "tree_sitter_cpp"),
    Language(
        "csharp",
        frozenset({".cs", ".csx"}),
        "tree_sitter_c_sharp",
        aliases=("c-sharp", "c_sharp"),
    ),
    Language("css", frozenset({".css"}), "tree_sitter_css"),
    Language("html", frozenset({".html", ".htm"}), "tree_sitter_html"),
    Language("bash", frozenset({".sh", ".bash"}), "tree_sitter_bash"),
    Language("java", frozenset({".java"}), "tree_sitter_java"),
    Language("ruby", frozenset({".rb"}), "tree_sitter_ruby"),
    Language("php", frozenset({".php"}), "tree_sitter_php", language_func="language_php"),
    Language("swift", frozenset({".swift"}), "tree_sitter_swift"),
    Language("json", frozenset({".json"}), "tree_sitter_json"),
    Language("powershell", frozenset({".ps1", ".psm1", ".psd1"}), "tree_sitter_powershell"),
    Language("r", frozenset({".r"}), "tree_sitter_r"),
)

LANGUAGES: dict[str, Language] = {lang.name: lang for lang in ALL_LANGUAGES}

EXTENSION_TO_LANGUAGE: dict[str, str] = {
    ext: lang.name for lang in ALL_LANGUAGES for ext in sorted(lang.extensions)
}

_ALIAS_TO_LANGUAGE: dict[str, str] = {
    alias: lang.name for lang in ALL_LANGUAGES for alias in lang.aliases
}


def get_language(name: str) -> Language | None:
    """Look up a language by id or alias."""
    key = name.lower()
    return LANGUAGES.get(key) or LANGUAGES.get(_ALIAS_TO_LANGUAGE.get(key, ""))


def detect_language(path: str | Path) -> str | None:
    """Detect a language id from a file extension (case-insensitive)."""
    return EXTENSION_TO_LANGUAGE.get(Path(path).suffix.lower())


def grammar_aliases(name: str) -> tuple[str, ...]:
    """All ids a grammar may be published under, canonical id first."""
    lang = get_language(name)
    if lang is None:
        return (name,)
    return (lang.name, *lang.aliases)


def supported_languages() -> list[str]:
    return sorted(LANGUAGES)
