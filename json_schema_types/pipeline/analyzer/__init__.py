"""
Analyzer module.

Contains the accessor generator core (Orchestrator and Builder) and the
type model it records declarations into.
"""

from __future__ import annotations

from .builder import Builder
from .ir_nodes import (
    ConstructorDecl,
    DefinedType,
    FieldDecl,
    FieldRef,
    ItemLookup,
    KeyPresence,
    Length,
    Literal,
    MethodDecl,
    Namespace,
    NewInstance,
    Parameter,
    PropertyLookup,
    TypeModel,
    TypeRef,
    Visibility,
)
from .orchestrator import Orchestrator
from .raw_types import RawType, resolve_raw_type

__all__ = [
    "Builder",
    "ConstructorDecl",
    "DefinedType",
    "FieldDecl",
    "FieldRef",
    "ItemLookup",
    "KeyPresence",
    "Length",
    "Literal",
    "MethodDecl",
    "Namespace",
    "NewInstance",
    "Orchestrator",
    "Parameter",
    "PropertyLookup",
    "RawType",
    "TypeModel",
    "TypeRef",
    "Visibility",
    "resolve_raw_type",
]
