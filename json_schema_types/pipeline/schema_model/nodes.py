"""
Schema node definitions.

A Schema is one URI-addressable unit of a JSON Schema document. Nodes are
created by the SchemaStore and are read-only to the generator; references
to child schemas go back through the store so that $ref is resolved
transparently.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .store import SchemaStore

# The seven primitive type names a "type" keyword may use
CANONICAL_TYPES = frozenset({"array", "boolean", "integer", "null", "number", "object", "string"})

# Keywords that only constrain values of one type
_KEYWORDS_BY_TYPE = {
    "array": ("items", "additionalItems", "prefixItems", "contains", "minItems", "maxItems", "uniqueItems"),
    "number": ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf"),
    "object": (
        "properties",
        "required",
        "additionalProperties",
        "patternProperties",
        "propertyNames",
        "minProperties",
        "maxProperties",
        "dependencies",
        "dependentRequired",
        "dependentSchemas",
    ),
    "string": ("minLength", "maxLength", "pattern", "format"),
}


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


class Schema:
    """A JSON Schema node backed by an object in a loaded document."""

    def __init__(
        self,
        store: SchemaStore,
        uri: str,
        schema_json: dict[str, Any],
        parent: Schema | None,
        base_uri: str,
    ):
        self._store = store
        self.uri = uri
        self.schema_json = schema_json
        self.parent = parent
        # Base URI that relative $ref values are resolved against
        self.base_uri = base_uri

        # Filled by the store while walking the document. Values are Schema
        # nodes, booleans (boolean schemas) or whatever malformed value the
        # document held.
        self._properties: dict[str, Any] = {}
        self._items: list[Any] = []

    def __repr__(self) -> str:
        return f"Schema({self.uri!r})"

    @property
    def ref(self) -> str | None:
        ref = self.schema_json.get("$ref")
        return ref if isinstance(ref, str) else None

    @property
    def types(self) -> frozenset[str]:
        """Explicitly declared type names."""
        type_value = self.schema_json.get("type")
        if type_value is None:
            return frozenset()
        if isinstance(type_value, str):
            return frozenset({type_value})
        return frozenset(type_value)

    @property
    def explicit_types(self) -> list[str]:
        return sorted(self.types)

    @property
    def inferred_types(self) -> list[str]:
        """Types a value may have: the declared ones, else those implied by the keywords used."""
        if self.types:
            return sorted(self.types)

        for keyword in ("const", "enum"):
            if keyword in self.schema_json:
                values = [self.schema_json[keyword]] if keyword == "const" else self.schema_json[keyword]
                if isinstance(values, list):
                    return sorted({_json_type_name(value) for value in values})

        inferred = {
            type_name
            for type_name, keywords in _KEYWORDS_BY_TYPE.items()
            if any(keyword in self.schema_json for keyword in keywords)
        }
        if "number" in inferred:
            inferred.add("integer")
        return sorted(inferred or CANONICAL_TYPES)

    @property
    def properties(self) -> dict[str, Any]:
        """Property name -> child node, with $ref resolved."""
        return {name: self._store.deref(value) for name, value in self._properties.items()}

    @property
    def required(self) -> frozenset[str]:
        required = self.schema_json.get("required")
        if not isinstance(required, list):
            return frozenset()
        return frozenset(name for name in required if isinstance(name, str))

    @property
    def items(self) -> list[Any]:
        """Item schemas: empty, one uniform schema, or one schema per position."""
        return [self._store.deref(value) for value in self._items]

    @property
    def has_default(self) -> bool:
        return "default" in self.schema_json

    @property
    def default(self) -> Any:
        return self.schema_json.get("default")
