"""Schema-driven extraction package.

Public API re-exports for the extraction subpackage.
"""

from loraxmod.extraction.engine import SchemaExtractor, truncate_text
from loraxmod.extraction.models import ExtractedNode

__all__ = [
    "ExtractedNode",
    "SchemaExtractor",
    "truncate_text",
]
