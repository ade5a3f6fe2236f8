"""Generic syntax-tree node protocol.

The extraction and diff engines only ever touch nodes through this protocol,
so any parser can feed them once wrapped in an adapter (see
``loraxmod.tree.treesitter`` and ``loraxmod.tree.static``).
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import NamedTuple, Protocol, runtime_checkable


class Point(NamedTuple):
    """Zero-based (row, column) position."""

    row: int
    column: int


@runtime_checkable
class SyntaxNode(Protocol):
    """Capabilities required from a parser's tree nodes."""

    @property
    def type(self) -> str: ...

    @property
    def text(self) -> str: ...

    @property
    def start(self) -> Point: ...

    @property
    def end(self) -> Point: ...

    @property
    def is_named(self) -> bool: ...

    @property
    def children(self) -> Sequence[SyntaxNode]: ...

    def child_for_field(self, name: str) -> SyntaxNode | None: ...


def iter_preorder(root: SyntaxNode) -> Iterator[SyntaxNode]:
    """Depth-first pre-order walk over every node, in document order.

    Iterative so that deeply nested trees do not hit the recursion limit.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def named_children(node: SyntaxNode) -> list[SyntaxNode]:
    """Named children of ``node``, looking through anonymous wrappers."""
    result: list[SyntaxNode] = []
    pending = list(reversed(node.children))
    while pending:
        child = pending.pop()
        if child.is_named:
            result.append(child)
        else:
            pending.extend(reversed(child.children))
    return result
