"""Canonical intent resolution.

Grammars name the same semantic slot differently: a function's name is
``name`` in JavaScript, ``declarator`` in C and a bare ``identifier`` child
in some DSLs. Each canonical intent carries a fixed, ordered list of
candidate keys; resolution scans it against the fields the schema declares
for a node type and binds the first hit.

If no candidate is a declared field, the node's positional ``children``
spec is consulted: when exactly one of its types is a candidate name, the
intent binds to the first named child of that type.

The candidate table is process-wide constant data and is never derived from
a schema.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

import structlog

from loraxmod.schema.reader import SchemaReader

log = structlog.get_logger(__name__)


class Intent(str, Enum):
    """Canonical semantic roles a field may play."""

    IDENTIFIER = "identifier"
    CALLABLE = "callable"
    VALUE = "value"
    CONDITION = "condition"
    BODY = "body"
    PARAMETERS = "parameters"
    OPERATOR = "operator"
    TYPE = "type"


INTENT_CANDIDATES: Mapping[Intent, tuple[str, ...]] = MappingProxyType(
    {
        Intent.IDENTIFIER: ("name", "identifier", "declarator", "word"),
        Intent.CALLABLE: ("function", "callee", "method", "object"),
        Intent.VALUE: ("value", "initializer", "source", "path"),
        Intent.CONDITION: ("condition", "test", "predicate"),
        Intent.BODY: ("body", "consequence", "alternative", "block"),
        Intent.PARAMETERS: ("parameters", "arguments", "params", "args"),
        Intent.OPERATOR: ("operator", "op"),
        Intent.TYPE: ("type", "return_type", "type_annotation"),
    }
)


@dataclass(frozen=True, slots=True)
class IntentBinding:
    """Where an intent's value lives on a node.

    ``name`` is a field name, or a child type name when ``positional``.
    """

    intent: Intent
    name: str
    positional: bool = False


_NO_BINDINGS: Mapping[Intent, IntentBinding] = MappingProxyType({})


def _resolve_bindings(node_type: str, schema: SchemaReader) -> Mapping[Intent, IntentBinding]:
    fields = schema.get_fields(node_type)
    children = schema.get_children(node_type)
    child_types = children.type_names if children is not None else frozenset()
    if not fields and not child_types:
        return _NO_BINDINGS

    bindings: dict[Intent, IntentBinding] = {}
    for intent, candidates in INTENT_CANDIDATES.items():
        field_name = next((c for c in candidates if c in fields), None)
        if field_name is not None:
            bindings[intent] = IntentBinding(intent, field_name)
            continue
        matches = [c for c in candidates if c in child_types]
        if len(matches) == 1:
            bindings[intent] = IntentBinding(intent, matches[0], positional=True)
    return MappingProxyType(bindings) if bindings else _NO_BINDINGS


def resolve(node_type: str, schema: SchemaReader) -> dict[str, str]:
    """Map each resolvable intent of ``node_type`` to its field name.

    Pure: the same schema and node type always give the same mapping.
    Unresolved intents are omitted; unknown node types give ``{}``.
    """
    return {
        intent.value: binding.name
        for intent, binding in _resolve_bindings(node_type, schema).items()
    }


class IntentResolver:
    """Intent bindings for every node type of one schema.

    Bindings are computed once at construction; lookups never mutate state,
    so one resolver can serve any number of threads.
    """

    def __init__(self, schema: SchemaReader) -> None:
        self.schema = schema
        self._bindings: Mapping[str, Mapping[Intent, IntentBinding]] = MappingProxyType(
            {node_type: _resolve_bindings(node_type, schema) for node_type in schema.node_types}
        )
        log.debug(
            "intents_resolved",
            source=schema.source,
            node_types=len(self._bindings),
            with_intents=sum(1 for b in self._bindings.values() if b),
        )

    def bindings(self, node_type: str) -> Mapping[Intent, IntentBinding]:
        """Bindings for ``node_type``; empty for types the schema does not define."""
        return self._bindings.get(node_type, _NO_BINDINGS)

    def resolve(self, node_type: str) -> dict[str, str]:
        return {intent.value: b.name for intent, b in self.bindings(node_type).items()}

    def field_for(self, node_type: str, intent: Intent) -> str | None:
        binding = self.bindings(node_type).get(intent)
        return binding.name if binding is not None else None
