"""
Exceptions raised by the generation pipeline.

Any exception derived from JsonSchemaTypesError aborts the whole pass;
no subset of the generated types is considered usable.
"""

from __future__ import annotations


class JsonSchemaTypesError(Exception):
    """Base class for all pipeline errors."""


class SchemaError(JsonSchemaTypesError):
    """Raised when a schema document cannot be turned into schema nodes.

    This can happen when:
    - A "type" keyword names something other than the seven JSON primitives
    - A $ref cannot be resolved, or only resolves to other $refs
    - A referenced document cannot be loaded
    """


class GeneratorError(JsonSchemaTypesError):
    """Raised when the accessor generator hits an unrecoverable condition."""


class TypeAlreadyExistsError(JsonSchemaTypesError):
    """Raised by the type model when a sibling type already holds a name."""

    def __init__(self, name: str):
        super().__init__(f"A type named {name!r} already exists in this container")
        self.name = name


class MemberAlreadyExistsError(JsonSchemaTypesError):
    """Raised by the type model when a type already has a member with a name."""

    def __init__(self, type_name: str, member_name: str):
        super().__init__(f"Type {type_name!r} already has a member named {member_name!r}")
        self.type_name = type_name
        self.member_name = member_name


class EmitterError(JsonSchemaTypesError):
    """Raised when declarations cannot be rendered to source code."""


class OutputError(JsonSchemaTypesError):
    """Raised when generated sources cannot be written."""
