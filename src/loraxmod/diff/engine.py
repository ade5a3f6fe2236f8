"""Semantic tree diff engine.

Compares two syntax trees of the same grammar and classifies changes at the
level of named nodes. Identity comes from the extracted ``identifier``
intent; nodes without one are identified by node type plus ordinal among
same-type siblings.

Matching runs in two passes:

1. Top-down from the root pair. Children of a matched pair are paired by
   identity key, then residual identified children are paired by text
   similarity (in-place renames). Matched pairs recurse.
2. A global pass over what is still unmatched, shallowest first. Same
   identifier under a different parent is a move; similar text with a
   different identifier is a rename. Each accepted pair is matched top-down
   again so its descendants are not reported on their own.

Change types:
- ADD: unmatched node in new whose parent is matched
- REMOVE: unmatched node in old whose parent is matched
- RENAME: pair matched by similarity, identifiers differ
- MOVE: same identifier, different ancestor path
- MODIFY: matched in place, extractions differ

Every tie-break is symmetric in (old, new), so ``diff(B, A)`` is the mirror
of ``diff(A, B)``.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from difflib import SequenceMatcher
from enum import Enum

import structlog

from loraxmod.config.constants import PATH_SEPARATOR, SIMILARITY_THRESHOLD, TRUNCATE_LENGTH
from loraxmod.core.errors import TreeError
from loraxmod.diff.models import ChangeType, DiffResult, SemanticChange
from loraxmod.extraction.engine import SchemaExtractor, truncate_text
from loraxmod.schema.intents import Intent
from loraxmod.schema.reader import SchemaReader
from loraxmod.tree.node import SyntaxNode, named_children

log = structlog.get_logger(__name__)

_IDENTIFIER = Intent.IDENTIFIER.value
_BODY = Intent.BODY.value


def text_similarity(a: str, b: str, threshold: float = 0.0) -> float:
    """Similarity ratio of two texts in [0, 1].

    Returns 0.0 early when the cheap upper bounds already fall below
    ``threshold``. Operands are put in a canonical order first, since
    ``SequenceMatcher`` is not symmetric on its own.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    if b < a:
        a, b = b, a
    matcher = SequenceMatcher(None, a, b, autojunk=False)
    if matcher.real_quick_ratio() < threshold or matcher.quick_ratio() < threshold:
        return 0.0
    return matcher.ratio()


class _MatchKind(Enum):
    EXACT = "exact"  # same identity key under matched parents
    SIMILAR = "similar"  # in-place, by similarity
    MOVED = "moved"  # global, same identifier
    SIMILAR_MOVED = "similar_moved"  # global, by similarity


@dataclass(eq=False, slots=True)
class _Entry:
    """One named node of a tree being diffed."""

    node: SyntaxNode
    node_type: str
    extractions: dict[str, str]
    parent: _Entry | None
    ordinal: int
    depth: int
    path: str
    seq: int
    children: list[_Entry] = field(default_factory=list)
    match: _Entry | None = None
    kind: _MatchKind | None = None
    _text: str | None = None

    @property
    def identifier(self) -> str | None:
        return self.extractions.get(_IDENTIFIER)

    @property
    def label(self) -> str:
        """Breadcrumb segment contributed by this node."""
        identifier = self.identifier
        return identifier if identifier is not None else self.node_type

    @property
    def text(self) -> str:
        if self._text is None:
            self._text = self.node.text
        return self._text

    @property
    def similarity_text(self) -> str:
        body = self.extractions.get(_BODY)
        return body if body is not None else self.text

    @property
    def key(self) -> tuple[str, str | int]:
        identifier = self.identifier
        if identifier is not None:
            return ("id", identifier)
        return ("ordinal", self.ordinal)


def _pair(old: _Entry, new: _Entry, kind: _MatchKind) -> None:
    old.match, new.match = new, old
    old.kind = new.kind = kind


class _Tree:
    """Entry index over the named nodes of one tree, in document order."""

    def __init__(self, root: SyntaxNode, extractor: SchemaExtractor) -> None:
        self.root = _Entry(
            node=root,
            node_type=root.type,
            extractions=extractor.extract_intents(root),
            parent=None,
            ordinal=0,
            depth=0,
            path="",
            seq=0,
        )
        self.entries: list[_Entry] = []

        # Children are built when their parent is popped, so pop order is pre-order.
        stack = [self.root]
        while stack:
            parent = stack.pop()
            parent.seq = len(self.entries)
            self.entries.append(parent)
            if parent.parent is None:
                child_path = ""
            elif parent.path:
                child_path = parent.path + PATH_SEPARATOR + parent.label
            else:
                child_path = parent.label

            ordinals: dict[str, int] = defaultdict(int)
            for node in named_children(parent.node):
                node_type = node.type
                entry = _Entry(
                    node=node,
                    node_type=node_type,
                    extractions=extractor.extract_intents(node),
                    parent=parent,
                    ordinal=ordinals[node_type],
                    depth=parent.depth + 1,
                    path=child_path,
                    seq=0,
                )
                ordinals[node_type] += 1
                parent.children.append(entry)
            stack.extend(reversed(parent.children))


def _group_by_type(entries: Iterable[_Entry]) -> dict[str, list[_Entry]]:
    grouped: dict[str, list[_Entry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.node_type].append(entry)
    return grouped


class TreeDiffer:
    """Semantic diff between two trees of one grammar.

    Usage::

        differ = TreeDiffer(schema)
        result = differ.diff(old_root, new_root)
        result.summary  # {"REMOVE": 0, "RENAME": 1, ...}
    """

    def __init__(
        self,
        schema: SchemaReader,
        *,
        extractor: SchemaExtractor | None = None,
        similarity_threshold: float = SIMILARITY_THRESHOLD,
        truncate_length: int = TRUNCATE_LENGTH,
    ) -> None:
        self.schema = schema
        self.extractor = extractor or SchemaExtractor(schema)
        self.similarity_threshold = similarity_threshold
        self.truncate_length = truncate_length

    def diff(
        self,
        old_root: SyntaxNode | None,
        new_root: SyntaxNode | None,
        include_full_text: bool = False,
    ) -> DiffResult:
        """Classify every semantic change from ``old_root`` to ``new_root``.

        Raises:
            TreeError: TREE_NO_ROOT when either root is None.
        """
        if old_root is None:
            log.error("diff_no_root", tree="old", source=self.schema.source)
            raise TreeError.no_root("diff", "old")
        if new_root is None:
            log.error("diff_no_root", tree="new", source=self.schema.source)
            raise TreeError.no_root("diff", "new")

        old_tree = _Tree(old_root, self.extractor)
        new_tree = _Tree(new_root, self.extractor)

        _pair(old_tree.root, new_tree.root, _MatchKind.EXACT)
        self._match_subtree(old_tree.root, new_tree.root)
        self._match_globally(old_tree, new_tree)

        changes = self._classify(old_tree, new_tree, include_full_text)
        changes.sort(
            key=lambda c: (c.path, c.change_type.priority, c.start.row, c.start.column)
        )
        result = DiffResult(changes=changes)

        log.info(
            "diff_complete",
            old_nodes=len(old_tree.entries),
            new_nodes=len(new_tree.entries),
            **{k.lower(): v for k, v in result.summary.items()},
        )
        return result

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def _match_subtree(self, old: _Entry, new: _Entry) -> None:
        """Match descendants of an already matched pair, top-down."""
        pending = [(old, new)]
        while pending:
            old_parent, new_parent = pending.pop()
            pending.extend(self._match_children(old_parent, new_parent))

    def _match_children(self, old: _Entry, new: _Entry) -> list[tuple[_Entry, _Entry]]:
        old_by_type = _group_by_type(c for c in old.children if c.match is None)
        new_by_type = _group_by_type(c for c in new.children if c.match is None)

        matched: list[tuple[_Entry, _Entry]] = []
        for node_type, old_kids in old_by_type.items():
            new_kids = new_by_type.get(node_type)
            if not new_kids:
                continue

            new_by_key: dict[tuple[str, str | int], list[_Entry]] = defaultdict(list)
            for entry in new_kids:
                new_by_key[entry.key].append(entry)
            for entry in old_kids:
                candidates = new_by_key.get(entry.key)
                if candidates:
                    partner = candidates.pop(0)
                    _pair(entry, partner, _MatchKind.EXACT)
                    matched.append((entry, partner))

            old_rest = [e for e in old_kids if e.match is None and e.identifier is not None]
            new_rest = [e for e in new_kids if e.match is None and e.identifier is not None]
            if old_rest and new_rest:
                matched.extend(self._match_similar(old_rest, new_rest))
        return matched

    def _match_similar(
        self, old_entries: list[_Entry], new_entries: list[_Entry]
    ) -> list[tuple[_Entry, _Entry]]:
        """Greedy best-first pairing of renamed siblings."""
        scored: list[tuple[float, _Entry, _Entry]] = []
        for old in old_entries:
            for new in new_entries:
                score = self._similarity(old, new)
                if score >= self.similarity_threshold:
                    scored.append((score, old, new))
        scored.sort(
            key=lambda s: (
                -s[0],
                abs(s[1].ordinal - s[2].ordinal),
                min(s[1].seq, s[2].seq),
                max(s[1].seq, s[2].seq),
            )
        )

        matched: list[tuple[_Entry, _Entry]] = []
        for _, old, new in scored:
            if old.match is None and new.match is None:
                _pair(old, new, _MatchKind.SIMILAR)
                matched.append((old, new))
        return matched

    def _match_globally(self, old_tree: _Tree, new_tree: _Tree) -> None:
        """Pair leftover identified nodes across the whole tree."""
        old_by_type = _group_by_type(
            e for e in old_tree.entries if e.match is None and e.identifier is not None
        )
        new_by_type = _group_by_type(
            e for e in new_tree.entries if e.match is None and e.identifier is not None
        )

        # (rank, score, old, new); rank 0 = same identifier, 1 = similar
        scored: list[tuple[int, float, _Entry, _Entry]] = []
        for node_type, old_entries in old_by_type.items():
            new_entries = new_by_type.get(node_type)
            if not new_entries:
                continue
            for old in old_entries:
                for new in new_entries:
                    if old.identifier == new.identifier:
                        scored.append((0, 1.0, old, new))
                        continue
                    score = self._similarity(old, new)
                    if score >= self.similarity_threshold:
                        scored.append((1, score, old, new))
        if not scored:
            return

        scored.sort(
            key=lambda s: (
                min(s[2].depth, s[3].depth),
                s[0],
                -s[1],
                abs(s[2].depth - s[3].depth),
                abs(s[2].ordinal - s[3].ordinal),
                min(s[2].seq, s[3].seq),
                max(s[2].seq, s[3].seq),
            )
        )
        for rank, _, old, new in scored:
            if old.match is not None or new.match is not None:
                continue
            _pair(old, new, _MatchKind.MOVED if rank == 0 else _MatchKind.SIMILAR_MOVED)
            self._match_subtree(old, new)

    def _similarity(self, old: _Entry, new: _Entry) -> float:
        return text_similarity(
            old.similarity_text, new.similarity_text, self.similarity_threshold
        )

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def _classify(
        self, old_tree: _Tree, new_tree: _Tree, include_full_text: bool
    ) -> list[SemanticChange]:
        limit = None if include_full_text else self.truncate_length
        changes: list[SemanticChange] = []

        for old in old_tree.entries[1:]:
            new = old.match
            if new is None:
                if old.parent is not None and old.parent.match is not None:
                    changes.append(self._removed(old, limit))
                continue

            change_type = self._pair_change(old, new)
            if change_type is None:
                continue
            changes.append(
                SemanticChange(
                    change_type=change_type,
                    node_type=old.node_type,
                    path=old.path,
                    old_identity=old.identifier,
                    new_identity=new.identifier,
                    old_value=truncate_text(old.text, limit),
                    new_value=truncate_text(new.text, limit),
                    old_path=old.path,
                    new_path=new.path,
                    start=old.node.start,
                    end=old.node.end,
                )
            )

        for new in new_tree.entries[1:]:
            if new.match is None and new.parent is not None and new.parent.match is not None:
                changes.append(self._added(new, limit))
        return changes

    @staticmethod
    def _pair_change(old: _Entry, new: _Entry) -> ChangeType | None:
        if old.kind in (_MatchKind.SIMILAR, _MatchKind.SIMILAR_MOVED):
            if old.identifier != new.identifier:
                return ChangeType.RENAME
        if old.kind in (_MatchKind.MOVED, _MatchKind.SIMILAR_MOVED) and old.path != new.path:
            return ChangeType.MOVE
        if old.extractions != new.extractions:
            return ChangeType.MODIFY
        return None

    @staticmethod
    def _removed(old: _Entry, limit: int | None) -> SemanticChange:
        return SemanticChange(
            change_type=ChangeType.REMOVE,
            node_type=old.node_type,
            path=old.path,
            old_identity=old.identifier,
            old_value=truncate_text(old.text, limit),
            old_path=old.path,
            start=old.node.start,
            end=old.node.end,
        )

    @staticmethod
    def _added(new: _Entry, limit: int | None) -> SemanticChange:
        return SemanticChange(
            change_type=ChangeType.ADD,
            node_type=new.node_type,
            path=new.path,
            new_identity=new.identifier,
            new_value=truncate_text(new.text, limit),
            new_path=new.path,
            start=new.node.start,
            end=new.node.end,
        )


def diff_trees(
    schema: SchemaReader,
    old_root: SyntaxNode | None,
    new_root: SyntaxNode | None,
    include_full_text: bool = False,
) -> DiffResult:
    """One-shot diff with default settings."""
    return TreeDiffer(schema).diff(old_root, new_root, include_full_text)

