"""
Raw value kinds.

A raw value is the dynamically-typed decoded JSON value a schema node
validates against. RawType is the closed set of representations the
generator maps schema types onto.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from ..errors import GeneratorError


class RawType(Enum):
    """Representation of a schema node's raw value."""

    JSON_ARRAY = "JsonArray"
    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    NULL = "Null"
    NUMBER = "Number"
    JSON_OBJECT = "JsonObject"
    STRING = "String"
    ANY = "Object"  # zero or several declared types

    @property
    def type_name(self) -> str:
        """Name used for the wrapper field and raw getter ("JsonObject", ...)."""
        return self.value


_RAW_TYPE_BY_SCHEMA_TYPE = {
    "array": RawType.JSON_ARRAY,
    "boolean": RawType.BOOLEAN,
    "integer": RawType.INTEGER,
    "null": RawType.NULL,
    "number": RawType.NUMBER,
    "object": RawType.JSON_OBJECT,
    "string": RawType.STRING,
}


def resolve_raw_type(types: Iterable[str]) -> RawType:
    """
    Map a node's declared type names onto its raw representation.

    Args:
        types: Explicitly declared type names

    Returns:
        The mapped RawType; ANY unless exactly one type is declared

    Raises:
        GeneratorError: If the single declared type is not a JSON primitive
    """
    types = list(types)
    if len(types) != 1:
        return RawType.ANY
    try:
        return _RAW_TYPE_BY_SCHEMA_TYPE[types[0]]
    except KeyError:
        raise GeneratorError(f"Invalid schema type {types[0]!r}") from None
