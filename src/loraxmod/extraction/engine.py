"""Schema-driven extraction engine.

Turns syntax-tree nodes into ``ExtractedNode`` values using only the
grammar's node-type schema: intents are bound to fields by
``IntentResolver`` and each bound child's text is read verbatim. There is no
per-grammar code here.

Walks are iterative pre-order traversals in document order. Node types the
schema does not know produce empty extractions and the walk continues.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal, overload

import structlog

from loraxmod.config.constants import TRUNCATION_MARKER
from loraxmod.core.errors import TreeError
from loraxmod.extraction.models import ExtractedNode
from loraxmod.schema.intents import IntentBinding, IntentResolver
from loraxmod.schema.reader import SchemaReader
from loraxmod.tree.node import SyntaxNode, iter_preorder

log = structlog.get_logger(__name__)


def truncate_text(text: str, limit: int | None) -> str:
    """Cut ``text`` to ``limit`` characters plus the truncation marker."""
    if limit is None or len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def _bound_child(node: SyntaxNode, binding: IntentBinding) -> SyntaxNode | None:
    if not binding.positional:
        return node.child_for_field(binding.name)
    for child in node.children:
        if child.is_named and child.type == binding.name:
            return child
    return None


class SchemaExtractor:
    """Extracts canonical intents from nodes of one grammar.

    Usage::

        extractor = SchemaExtractor(schema)
        extractor.extract_all(root)                  # -> ExtractedNode
        extractor.extract_all(root, recurse=True)    # -> [ExtractedNode, ...]
        extractor.extract_by_type(root, {"function_declaration"})
    """

    def __init__(
        self,
        schema: SchemaReader,
        *,
        resolver: IntentResolver | None = None,
        max_text_length: int | None = None,
    ) -> None:
        self.schema = schema
        self.resolver = resolver or IntentResolver(schema)
        self.max_text_length = max_text_length

    def extract_intents(self, node: SyntaxNode) -> dict[str, str]:
        """Intent name -> text for every intent ``node`` resolves and fills."""
        node_type = node.type
        bindings = self.resolver.bindings(node_type)
        if not bindings:
            if node_type not in self.schema:
                log.debug("unknown_node_type", node_type=node_type, source=self.schema.source)
            return {}

        extractions: dict[str, str] = {}
        for intent, binding in bindings.items():
            child = _bound_child(node, binding)
            if child is not None:
                extractions[intent.value] = child.text
        return extractions

    def extract_node(self, node: SyntaxNode) -> ExtractedNode:
        return ExtractedNode(
            node_type=node.type,
            start=node.start,
            end=node.end,
            text=truncate_text(node.text, self.max_text_length),
            extractions=self.extract_intents(node),
        )

    @overload
    def extract_all(
        self, root: SyntaxNode | None, recurse: Literal[False] = False
    ) -> ExtractedNode: ...

    @overload
    def extract_all(
        self, root: SyntaxNode | None, recurse: Literal[True]
    ) -> list[ExtractedNode]: ...

    def extract_all(
        self, root: SyntaxNode | None, recurse: bool = False
    ) -> ExtractedNode | list[ExtractedNode]:
        """Extract ``root`` alone, or every named node under it in pre-order.

        Raises:
            TreeError: TREE_NO_ROOT when ``root`` is None.
        """
        if root is None:
            log.error("extract_no_root", operation="extract_all", source=self.schema.source)
            raise TreeError.no_root("extract_all", "input")
        if not recurse:
            return self.extract_node(root)
        return [self.extract_node(node) for node in iter_preorder(root) if node.is_named]

    def extract_by_type(
        self, root: SyntaxNode | None, node_types: Iterable[str]
    ) -> list[ExtractedNode]:
        """Extract every node whose type is in ``node_types``, in pre-order.

        An empty or entirely unmatched type set yields ``[]``.

        Raises:
            TreeError: TREE_NO_ROOT when ``root`` is None.
        """
        if root is None:
            log.error("extract_no_root", operation="extract_by_type", source=self.schema.source)
            raise TreeError.no_root("extract_by_type", "input")
        wanted = frozenset(node_types)
        if not wanted:
            return []
        return [self.extract_node(node) for node in iter_preorder(root) if node.type in wanted]
