"""Semantic tree diff package.

Public API re-exports for the diff subpackage.
"""

from loraxmod.diff.engine import TreeDiffer, diff_trees, text_similarity
from loraxmod.diff.models import CHANGE_ORDER, ChangeType, DiffResult, SemanticChange

__all__ = [
    "CHANGE_ORDER",
    "ChangeType",
    "DiffResult",
    "SemanticChange",
    "TreeDiffer",
    "diff_trees",
    "text_similarity",
]
