"""Node-type schema package: reader, intent resolution and file lookup.

Public API re-exports for the schema subpackage.
"""

from loraxmod.schema.intents import (
    INTENT_CANDIDATES,
    Intent,
    IntentBinding,
    IntentResolver,
    resolve,
)
from loraxmod.schema.loader import find_schema, load_schema
from loraxmod.schema.models import FieldSpec, NodeTypeDef, TypeRef
from loraxmod.schema.reader import SchemaReader

__all__ = [
    "INTENT_CANDIDATES",
    "FieldSpec",
    "Intent",
    "IntentBinding",
    "IntentResolver",
    "NodeTypeDef",
    "SchemaReader",
    "TypeRef",
    "find_schema",
    "load_schema",
    "resolve",
]
