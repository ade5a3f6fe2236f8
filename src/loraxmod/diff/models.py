"""Data models for semantic diff.

All models are plain dataclasses / frozen dataclasses. ``to_dict`` emits the
cross-binding output shape; its field names are part of the contract.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from loraxmod.tree.node import Point


class ChangeType(str, Enum):
    """Classification of one semantic change."""

    ADD = "ADD"
    REMOVE = "REMOVE"
    RENAME = "RENAME"
    MODIFY = "MODIFY"
    MOVE = "MOVE"

    @property
    def priority(self) -> int:
        """Sort rank within one path: REMOVE < RENAME < MOVE < MODIFY < ADD."""
        return CHANGE_ORDER.index(self)


CHANGE_ORDER: tuple[ChangeType, ...] = (
    ChangeType.REMOVE,
    ChangeType.RENAME,
    ChangeType.MOVE,
    ChangeType.MODIFY,
    ChangeType.ADD,
)


@dataclass(frozen=True, slots=True)
class SemanticChange:
    """One classified change between two tree versions.

    ``path`` is the ancestor breadcrumb in the tree that anchors the change
    (old tree, or new tree for ADD). ``old_path`` / ``new_path`` record both
    sides for matched pairs, so a RENAME that also moved keeps the move.
    """

    change_type: ChangeType
    node_type: str
    path: str
    old_identity: str | None = None
    new_identity: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    old_path: str | None = None
    new_path: str | None = None
    start: Point = Point(0, 0)  # anchor node position
    end: Point = Point(0, 0)

    @property
    def is_moved(self) -> bool:
        if self.old_path is None or self.new_path is None:
            return False
        return self.old_path != self.new_path

    def to_dict(self, *, with_metadata: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.change_type.value,
            "node_type": self.node_type,
            "path": self.path,
            "old_identity": self.old_identity,
            "new_identity": self.new_identity,
            "old_value": self.old_value,
            "new_value": self.new_value,
        }
        if with_metadata:
            data["old_path"] = self.old_path
            data["new_path"] = self.new_path
            data["start_line"] = self.start.row + 1
            data["end_line"] = self.end.row + 1
        return data


@dataclass
class DiffResult:
    """Ordered semantic changes plus a per-type summary."""

    changes: list[SemanticChange] = field(default_factory=list)

    @property
    def summary(self) -> dict[str, int]:
        """Count per change type; every type is present, zero or not."""
        counts = {change_type.value: 0 for change_type in CHANGE_ORDER}
        for change in self.changes:
            counts[change.change_type.value] += 1
        return counts

    def by_type(self, change_type: ChangeType) -> list[SemanticChange]:
        return [c for c in self.changes if c.change_type is change_type]

    def __len__(self) -> int:
        return len(self.changes)

    def __iter__(self) -> Iterator[SemanticChange]:
        return iter(self.changes)

    def to_dict(self, *, with_metadata: bool = False) -> dict[str, Any]:
        return {
            "changes": [c.to_dict(with_metadata=with_metadata) for c in self.changes],
            "summary": self.summary,
        }
