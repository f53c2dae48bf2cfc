"""
Schema model module.

Loads JSON Schema documents into URI-addressable, read-only schema nodes.
"""

from __future__ import annotations

from .nodes import CANONICAL_TYPES, Schema
from .store import SchemaStore, append_to_uri, parse_pointer

__all__ = [
    "CANONICAL_TYPES",
    "Schema",
    "SchemaStore",
    "append_to_uri",
    "parse_pointer",
]
