"""Data models for node-type schemas.

All models are frozen dataclasses so a loaded schema can be shared across
threads without copying.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class TypeRef:
    """Reference to a node type from a field, children or subtypes list."""

    type: str
    named: bool


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A schema-declared child slot.

    Used both for named fields and for the anonymous positional ``children``
    entry of a node type.
    """

    types: frozenset[TypeRef]
    multiple: bool = False
    required: bool = False

    @property
    def type_names(self) -> frozenset[str]:
        return frozenset(ref.type for ref in self.types)

    def merge(self, other: FieldSpec) -> FieldSpec:
        """Union of two specs for the same field name (supertype expansion)."""
        return FieldSpec(
            types=self.types | other.types,
            multiple=self.multiple or other.multiple,
            required=self.required and other.required,
        )


EMPTY_FIELDS: Mapping[str, FieldSpec] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class NodeTypeDef:
    """One entry of a grammar's ``node-types.json``."""

    type: str
    named: bool
    fields: Mapping[str, FieldSpec] = field(default_factory=lambda: EMPTY_FIELDS)
    children: FieldSpec | None = None
    subtypes: tuple[TypeRef, ...] = ()

    @property
    def is_supertype(self) -> bool:
        return bool(self.subtypes)
