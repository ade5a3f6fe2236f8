"""In-memory syntax trees.

``StaticNode`` implements the node protocol over plain data. It backs the
golden conformance fixtures and lets callers that already hold a parsed tree
in another form (JSON from a different host language, a cache) run the
engines without a parser.

Dict form::

    {
        "type": "function_declaration",
        "text": "function foo() {}",
        "named": true,                 # default true
        "start": [0, 0], "end": [0, 17],
        "field": "declaration",        # field name under the parent, optional
        "children": [...]
    }
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loraxmod.tree.node import Point


@dataclass(eq=False)
class StaticNode:
    """A syntax-tree node held entirely in memory."""

    type: str
    text: str = ""
    is_named: bool = True
    start: Point = Point(0, 0)
    end: Point = Point(0, 0)
    children: Sequence[StaticNode] = field(default_factory=list)
    field_name: str | None = None

    def child_for_field(self, name: str) -> StaticNode | None:
        for child in self.children:
            if child.field_name == name:
                return child
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StaticNode:
        start = data.get("start", (0, 0))
        end = data.get("end", start)
        return cls(
            type=data["type"],
            text=data.get("text", ""),
            is_named=data.get("named", True),
            start=Point(*start),
            end=Point(*end),
            children=[cls.from_dict(child) for child in data.get("children", ())],
            field_name=data.get("field"),
        )

    @classmethod
    def from_file(cls, path: Path | str) -> StaticNode:
        return cls.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "text": self.text,
            "named": self.is_named,
            "start": list(self.start),
            "end": list(self.end),
        }
        if self.field_name is not None:
            data["field"] = self.field_name
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data
