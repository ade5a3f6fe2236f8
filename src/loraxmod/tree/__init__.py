"""Syntax-tree adapters.

Public API re-exports for the tree subpackage. The tree-sitter adapter is
imported from ``loraxmod.tree.treesitter`` directly so that using static
trees does not require the tree-sitter runtime.
"""

from loraxmod.tree.node import Point, SyntaxNode, iter_preorder, named_children
from loraxmod.tree.static import StaticNode

__all__ = [
    "Point",
    "StaticNode",
    "SyntaxNode",
    "iter_preorder",
    "named_children",
]
