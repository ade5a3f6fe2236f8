"""Data models for schema-driven extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from loraxmod.tree.node import Point


@dataclass(frozen=True, slots=True)
class ExtractedNode:
    """Canonical view of one syntax-tree node.

    ``extractions`` maps intent name -> verbatim text of the bound child. An
    intent is absent when the node type does not resolve it or the node has
    no child in that slot; absence is never an error.
    """

    node_type: str
    start: Point
    end: Point
    text: str
    extractions: dict[str, str] = field(default_factory=dict)

    @property
    def start_line(self) -> int:
        """1-based first line."""
        return self.start.row + 1

    @property
    def end_line(self) -> int:
        """1-based last line."""
        return self.end.row + 1

    @property
    def identifier(self) -> str | None:
        return self.extractions.get("identifier")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the cross-binding output shape."""
        return {
            "node_type": self.node_type,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "text": self.text,
            "extractions": dict(self.extractions),
        }
