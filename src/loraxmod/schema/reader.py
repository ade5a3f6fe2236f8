"""Node-type schema reader.

Loads a grammar's ``node-types.json`` (the list of node-type descriptors
tree-sitter generates) and indexes it by type name.

Supertypes (descriptors with ``subtypes``) never appear in parse trees, but
callers may still ask for their fields: ``get_fields`` answers with the union
of the subtypes' fields, expanded recursively.

Shape violations fail construction with ``SchemaError.malformed``. References
to types the schema does not define are accepted, since grammars in the long
tail routinely ship partial or newer schemas.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import Any

import structlog

from loraxmod.core.errors import SchemaError
from loraxmod.schema.models import EMPTY_FIELDS, FieldSpec, NodeTypeDef, TypeRef

log = structlog.get_logger(__name__)


def _parse_type_ref(raw: Any, node_type: str, where: str) -> TypeRef:
    if not isinstance(raw, Mapping):
        raise SchemaError.malformed(
            f"{where}: type reference must be an object", node_type=node_type
        )
    type_name = raw.get("type")
    if not isinstance(type_name, str):
        raise SchemaError.malformed(
            f"{where}: type reference lacks 'type'", node_type=node_type
        )
    named = raw.get("named", False)
    if not isinstance(named, bool):
        raise SchemaError.malformed(f"{where}: 'named' must be a boolean", node_type=node_type)
    return TypeRef(type=type_name, named=named)


def _parse_field_spec(raw: Any, node_type: str, where: str) -> FieldSpec:
    if not isinstance(raw, Mapping):
        raise SchemaError.malformed(f"{where}: expected an object", node_type=node_type)
    types = raw.get("types")
    if not isinstance(types, list):
        raise SchemaError.malformed(f"{where}: missing 'types' list", node_type=node_type)
    for flag in ("multiple", "required"):
        if not isinstance(raw.get(flag, False), bool):
            raise SchemaError.malformed(
                f"{where}: '{flag}' must be a boolean", node_type=node_type
            )
    return FieldSpec(
        types=frozenset(_parse_type_ref(t, node_type, where) for t in types),
        multiple=raw.get("multiple", False),
        required=raw.get("required", False),
    )


def _parse_descriptor(raw: Any, index: int) -> NodeTypeDef:
    if not isinstance(raw, Mapping):
        raise SchemaError.malformed(f"descriptor #{index} must be an object")
    node_type = raw.get("type")
    if not isinstance(node_type, str) or not node_type:
        raise SchemaError.malformed(f"descriptor #{index} lacks a 'type' string")
    named = raw.get("named")
    if not isinstance(named, bool):
        raise SchemaError.malformed("'named' must be a boolean", node_type=node_type)

    raw_fields = raw.get("fields")
    if raw_fields is None:
        raw_fields = {}
    if not isinstance(raw_fields, Mapping):
        raise SchemaError.malformed("'fields' must be an object", node_type=node_type)
    fields = {
        name: _parse_field_spec(spec, node_type, f"field '{name}'")
        for name, spec in raw_fields.items()
    }

    children = None
    if raw.get("children") is not None:
        children = _parse_field_spec(raw["children"], node_type, "children")

    raw_subtypes = raw.get("subtypes")
    if raw_subtypes is None:
        raw_subtypes = []
    if not isinstance(raw_subtypes, list):
        raise SchemaError.malformed("'subtypes' must be a list", node_type=node_type)
    subtypes = tuple(_parse_type_ref(s, node_type, "subtypes") for s in raw_subtypes)

    return NodeTypeDef(
        type=node_type,
        named=named,
        fields=MappingProxyType(fields) if fields else EMPTY_FIELDS,
        children=children,
        subtypes=subtypes,
    )


class SchemaReader:
    """Read-only index over one grammar's node-type schema.

    Usage::

        schema = SchemaReader.from_file(Path("node-types.json"))
        schema.get_fields("function_declaration")   # {"name": FieldSpec, ...}
        schema.get_subtypes("_expression")          # ["binary_expression", ...]
    """

    def __init__(self, descriptors: Sequence[Any], *, source: str | None = None) -> None:
        if not isinstance(descriptors, list | tuple):
            raise SchemaError.malformed(
                "schema root must be a list of node-type descriptors", source=source
            )

        self.source = source
        types: dict[str, NodeTypeDef] = {}
        for index, raw in enumerate(descriptors):
            try:
                definition = _parse_descriptor(raw, index)
            except SchemaError as e:
                log.warning("schema_malformed", source=source, reason=e.message)
                raise SchemaError.malformed(
                    e.details["reason"], node_type=e.details["node_type"], source=source
                ) from e
            existing = types.get(definition.type)
            # Grammars may list a keyword token and a named rule under one name; the rule wins.
            if existing is None or (definition.named and not existing.named):
                types[definition.type] = definition

        self._types: Mapping[str, NodeTypeDef] = MappingProxyType(types)
        self._fields: Mapping[str, Mapping[str, FieldSpec]] = MappingProxyType(
            {name: self._expand_fields(name, frozenset()) for name in types}
        )
        self._children: Mapping[str, FieldSpec | None] = MappingProxyType(
            {name: self._expand_children(name, frozenset()) for name in types}
        )
        log.debug("schema_loaded", source=source, node_types=len(types))

    @classmethod
    def from_json(cls, text: str | bytes, *, source: str | None = None) -> SchemaReader:
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SchemaError.malformed(f"invalid JSON: {e}", source=source) from e
        return cls(data, source=source)

    @classmethod
    def from_file(cls, path: Path | str) -> SchemaReader:
        path = Path(path)
        try:
            text = path.read_bytes()
        except FileNotFoundError as e:
            raise SchemaError.not_found(path.stem, [str(path)]) from e
        except OSError as e:
            raise SchemaError.malformed(f"unreadable schema file: {e}", source=str(path)) from e
        return cls.from_json(text, source=str(path))

    # ------------------------------------------------------------------
    # Expansion (construction only)
    # ------------------------------------------------------------------

    def _expand_fields(self, node_type: str, seen: frozenset[str]) -> Mapping[str, FieldSpec]:
        definition = self._types.get(node_type)
        if definition is None or node_type in seen:
            return EMPTY_FIELDS
        if not definition.is_supertype:
            return definition.fields

        merged: dict[str, FieldSpec] = {}
        for ref in definition.subtypes:
            for name, spec in self._expand_fields(ref.type, seen | {node_type}).items():
                merged[name] = merged[name].merge(spec) if name in merged else spec
        return MappingProxyType(merged) if merged else EMPTY_FIELDS

    def _expand_children(self, node_type: str, seen: frozenset[str]) -> FieldSpec | None:
        definition = self._types.get(node_type)
        if definition is None or node_type in seen:
            return None
        if not definition.is_supertype:
            return definition.children

        merged: FieldSpec | None = None
        for ref in definition.subtypes:
            spec = self._expand_children(ref.type, seen | {node_type})
            if spec is not None:
                merged = spec if merged is None else merged.merge(spec)
        return merged

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def node_types(self) -> list[str]:
        """All type names, in schema order."""
        return list(self._types)

    def __contains__(self, node_type: object) -> bool:
        return node_type in self._types

    def __len__(self) -> int:
        return len(self._types)

    def get_node_type(self, node_type: str) -> NodeTypeDef | None:
        return self._types.get(node_type)

    def get_fields(self, node_type: str) -> Mapping[str, FieldSpec]:
        """Field specs for ``node_type``; empty for unknown types."""
        return self._fields.get(node_type, EMPTY_FIELDS)

    def get_children(self, node_type: str) -> FieldSpec | None:
        """Positional children spec for ``node_type``, if it declares one."""
        return self._children.get(node_type)

    def get_subtypes(self, node_type: str) -> list[str]:
        """Direct subtype names of a supertype; empty if not a supertype."""
        definition = self._types.get(node_type)
        if definition is None:
            return []
        return [ref.type for ref in definition.subtypes]

    def is_supertype(self, node_type: str) -> bool:
        definition = self._types.get(node_type)
        return definition is not None and definition.is_supertype

    def __repr__(self) -> str:
        return f"SchemaReader(source={self.source!r}, node_types={len(self._types)})"
