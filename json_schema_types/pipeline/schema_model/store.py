"""
Schema store: loads JSON Schema documents into Schema nodes.

Every subschema location of a document gets a node with a URI. Child URIs
follow JSON Pointer rules (the parent URI plus one escaped segment per
keyword/key), unless the child declares an $id. References ($ref) are
resolved on access, so callers never see a node that only holds a $ref.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote, urldefrag, urljoin, urlparse
from urllib.request import url2pathname

from ..errors import SchemaError
from .nodes import CANONICAL_TYPES, Schema

logger = logging.getLogger(__name__)

# Default URI for documents loaded from memory
DEFAULT_DOCUMENT_URI = "schema.json"

# Stands for an empty key in a URI path
ESCAPED_EMPTY = "~2"

# Keywords whose value is a single subschema
SUBSCHEMA_KEYWORDS = (
    "additionalItems",
    "additionalProperties",
    "contains",
    "else",
    "if",
    "not",
    "propertyNames",
    "then",
    "unevaluatedItems",
    "unevaluatedProperties",
)

# Keywords whose value maps names to subschemas
SUBSCHEMA_MAP_KEYWORDS = (
    "$defs",
    "definitions",
    "dependencies",
    "dependentSchemas",
    "patternProperties",
)

# Keywords whose value is a list of subschemas
SUBSCHEMA_LIST_KEYWORDS = ("allOf", "anyOf", "oneOf", "prefixItems")

# (base URI, JSON pointer segments)
Scope = tuple[str, tuple[str, ...]]


def append_to_uri(uri: str, value: str) -> str:
    """Append one JSON Pointer segment to the fragment of ``uri``."""
    if "#" not in uri:
        uri += "#"
    if not uri.endswith("/"):
        uri += "/"
    value = value.replace("~", "~0").replace("/", "~1")
    value = quote(value, safe="!*'()~")
    if not value:
        value = ESCAPED_EMPTY
    return uri + value


def parse_pointer(fragment: str) -> tuple[str, ...]:
    """Split a JSON Pointer fragment ("/definitions/a~1b") into unescaped segments."""
    if not fragment:
        return ()
    segments = []
    for segment in fragment.split("/")[1:]:
        segment = unquote(segment)
        if segment == ESCAPED_EMPTY:
            segment = ""
        segments.append(segment.replace("~1", "/").replace("~0", "~"))
    return tuple(segments)


def load_document_uri(uri: str) -> Any:
    """Default document loader: reads ``file:`` URIs from disk."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        raise SchemaError(f"Cannot load schema document {uri!r}: only file: URIs can be fetched")
    path = Path(url2pathname(parsed.path))
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SchemaError(f"Cannot load schema document {uri!r}: {e}") from e


class SchemaStore:
    """Loads schema documents and resolves URIs to Schema nodes."""

    def __init__(self, loader: Callable[[str], Any] | None = None):
        """
        Initialize the store.

        Args:
            loader: Callable returning the decoded JSON document for a URI,
                used for $ref values pointing outside loaded documents
        """
        self._loader = loader or load_document_uri
        self._by_uri: dict[str, Schema] = {}
        self._by_pointer: dict[Scope, Any] = {}
        self._documents: dict[str, Any] = {}

    def load(self, document: Any, uri: str = DEFAULT_DOCUMENT_URI) -> Schema:
        """
        Load a decoded JSON Schema document.

        Args:
            document: The decoded schema (must be a JSON object)
            uri: URI identifying the document

        Returns:
            The root Schema node
        """
        uri = urldefrag(uri).url
        if uri in self._documents:
            return self._by_pointer[(uri, ())]
        if not isinstance(document, dict):
            raise SchemaError(f"Schema document {uri!r} must be a JSON object, got {type(document).__name__}")

        logger.debug("Loading schema document %s", uri)
        self._documents[uri] = document
        return self._walk(document, uri, None, uri, [(uri, ())])

    def load_file(self, path: str | Path) -> Schema:
        """Load a schema document from disk, identified by its file: URI."""
        path = Path(path).resolve()
        uri = path.as_uri()
        return self.load(load_document_uri(uri), uri)

    def resolve(self, uri: str) -> Any:
        """
        Resolve an absolute URI to a Schema node (or boolean schema).

        Args:
            uri: Node URI, JSON Pointer URI or anchor URI

        Returns:
            The node at that location

        Raises:
            SchemaError: If nothing lives at the URI
        """
        if uri in self._by_uri:
            return self._by_uri[uri]

        document_uri, fragment = urldefrag(uri)
        if (document_uri, ()) not in self._by_pointer:
            self.load(self._loader(document_uri), document_uri)

        if not fragment or fragment.startswith("/"):
            scope = (document_uri, parse_pointer(fragment))
            if scope in self._by_pointer:
                return self._by_pointer[scope]
        elif uri in self._by_uri:
            return self._by_uri[uri]

        raise SchemaError(f"Cannot resolve $ref {uri!r}")

    def deref(self, value: Any) -> Any:
        """Follow $ref chains until reaching a schema that is not a bare reference."""
        seen: set[str] = set()
        while isinstance(value, Schema) and value.ref is not None:
            if value.uri in seen:
                raise SchemaError(f"$ref cycle never reaches a schema: {value.uri!r}")
            seen.add(value.uri)
            value = self.resolve(urljoin(value.base_uri, value.ref))
        return value

    def _walk(
        self,
        value: Any,
        uri: str,
        parent: Schema | None,
        base_uri: str,
        scopes: list[Scope],
    ) -> Any:
        """Create the node for ``value`` and, recursively, for all its subschemas."""
        if not isinstance(value, dict):
            # Boolean schemas and malformed entries are kept as-is
            for scope in scopes:
                self._by_pointer[scope] = value
            return value

        self._check_types(value, uri)

        schema_id = value.get("$id")
        if isinstance(schema_id, str):
            uri = urljoin(base_uri, schema_id)
            new_base = urldefrag(uri).url
            if new_base and new_base != base_uri:
                base_uri = new_base
                scopes = scopes + [(new_base, ())]

        node = Schema(self, uri, value, parent, base_uri)
        self._by_uri.setdefault(uri, node)
        for scope in scopes:
            self._by_pointer[scope] = node

        anchor = value.get("$anchor")
        if isinstance(anchor, str):
            self._by_uri.setdefault(f"{base_uri}#{anchor}", node)

        for keyword in SUBSCHEMA_KEYWORDS:
            if keyword in value:
                self._walk_child(node, value[keyword], (keyword,), scopes)

        for keyword in SUBSCHEMA_MAP_KEYWORDS:
            mapping = value.get(keyword)
            if isinstance(mapping, dict):
                for name, child in mapping.items():
                    if isinstance(child, (dict, bool)):
                        self._walk_child(node, child, (keyword, name), scopes)

        for keyword in SUBSCHEMA_LIST_KEYWORDS:
            children = value.get(keyword)
            if isinstance(children, list):
                for i, child in enumerate(children):
                    self._walk_child(node, child, (keyword, str(i)), scopes)

        properties = value.get("properties")
        if isinstance(properties, dict):
            for name, child in properties.items():
                node._properties[name] = self._walk_child(node, child, ("properties", name), scopes)

        if "items" in value:
            items = value["items"]
            if isinstance(items, list):
                for i, child in enumerate(items):
                    node._items.append(self._walk_child(node, child, ("items", str(i)), scopes))
            else:
                node._items.append(self._walk_child(node, items, ("items",), scopes))

        return node

    def _walk_child(self, node: Schema, value: Any, segments: tuple[str, ...], scopes: list[Scope]) -> Any:
        uri = node.uri
        for segment in segments:
            uri = append_to_uri(uri, segment)
        child_scopes = [(base, pointer + segments) for base, pointer in scopes]
        return self._walk(value, uri, node, node.base_uri, child_scopes)

    @staticmethod
    def _check_types(value: dict[str, Any], uri: str) -> None:
        """Reject "type" keywords naming anything but the seven primitives."""
        type_value = value.get("type")
        if type_value is None:
            return
        names = [type_value] if isinstance(type_value, str) else type_value
        if not isinstance(names, list):
            raise SchemaError(f"Invalid \"type\" at {uri!r}: {type_value!r}")
        for name in names:
            if not isinstance(name, str) or name not in CANONICAL_TYPES:
                raise SchemaError(f"Unknown type {name!r} at {uri!r}")
