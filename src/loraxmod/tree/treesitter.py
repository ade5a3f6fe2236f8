"""Tree-sitter adapter.

Wraps ``tree_sitter.Node`` in the node protocol and loads grammar packages
(``tree_sitter_python``, ``tree_sitter_c_sharp``, ...) by language id.
"""

from __future__ import annotations

import importlib
from typing import Any

import structlog
import tree_sitter

from loraxmod.core.errors import TreeError
from loraxmod.languages import get_language
from loraxmod.tree.node import Point

log = structlog.get_logger(__name__)


class TreeSitterNode:
    """Node-protocol view of a ``tree_sitter.Node``."""

    __slots__ = ("_node",)

    def __init__(self, node: tree_sitter.Node) -> None:
        self._node = node

    @classmethod
    def from_tree(cls, tree: tree_sitter.Tree | None) -> TreeSitterNode | None:
        """Wrap a tree's root; ``None`` when there is no tree or no root."""
        if tree is None or tree.root_node is None:
            return None
        return cls(tree.root_node)

    @property
    def raw(self) -> tree_sitter.Node:
        return self._node

    @property
    def type(self) -> str:
        return self._node.type

    @property
    def text(self) -> str:
        raw = self._node.text
        return raw.decode("utf-8", errors="replace") if raw else ""

    @property
    def start(self) -> Point:
        row, column = self._node.start_point
        return Point(row, column)

    @property
    def end(self) -> Point:
        row, column = self._node.end_point
        return Point(row, column)

    @property
    def is_named(self) -> bool:
        return self._node.is_named

    @property
    def children(self) -> list[TreeSitterNode]:
        return [TreeSitterNode(child) for child in self._node.children]

    def child_for_field(self, name: str) -> TreeSitterNode | None:
        child = self._node.child_by_field_name(name)
        return TreeSitterNode(child) if child is not None else None

    def __repr__(self) -> str:
        return f"TreeSitterNode({self.type!r}, start={tuple(self.start)})"


_LANGUAGE_CACHE: dict[str, tree_sitter.Language] = {}


def load_language(name: str) -> tree_sitter.Language:
    """Load the tree-sitter grammar for a language id.

    Raises:
        TreeError: TREE_UNSUPPORTED_LANGUAGE when the id is unknown or its
            grammar package is not installed.
    """
    lang = get_language(name)
    if lang is None:
        raise TreeError.unsupported_language(name, "no grammar registered for this id")
    if lang.name in _LANGUAGE_CACHE:
        return _LANGUAGE_CACHE[lang.name]

    try:
        module: Any = importlib.import_module(lang.grammar_module)
        language_fn = getattr(module, lang.language_func)
    except (ImportError, AttributeError) as err:
        raise TreeError.unsupported_language(
            name, f"grammar package '{lang.grammar_module}' is not installed"
        ) from err

    ts_language = tree_sitter.Language(language_fn())
    _LANGUAGE_CACHE[lang.name] = ts_language
    log.debug("grammar_loaded", language=lang.name, module=lang.grammar_module)
    return ts_language


def make_parser(name: str) -> tree_sitter.Parser:
    parser = tree_sitter.Parser()
    parser.language = load_language(name)
    return parser
