"""
Naming helpers for the JSON Schema accessor generator.
"""

import re
from urllib.parse import unquote

# Anything that is not a letter or a digit separates words
_SEPARATOR_PATTERN = re.compile(r"[^0-9A-Za-z]+")

_TRAILING_DIGITS_PATTERN = re.compile(r"[0-9]+$")

_CAMEL_BOUNDARY_PATTERN = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Used when a URI leaf has no usable characters
DEFAULT_TYPE_NAME = "Schema"

# Prefix for names that would otherwise start with a digit (tuple positions)
DIGIT_PREFIX = "Item"


def _split_into_words(text: str) -> list[str]:
    """Split text on separators (underscores, hyphens, spaces, punctuation)."""
    return [word for word in _SEPARATOR_PATTERN.split(text) if word]


def snake_to_camel(text: str) -> str:
    """Convert snake_case or kebab-case text to (upper) CamelCase.

    Only the first letter of every word is changed, so existing camelCase
    boundaries survive.

    Examples:
        "first_name" -> "FirstName"
        "line-item" -> "LineItem"
        "actionTemplate" -> "ActionTemplate"
        "first 3 rows" -> "First3Rows"

    Args:
        text: The text to convert

    Returns:
        CamelCase string, empty if the text holds no letters or digits
    """
    if not text:
        return ""
    return "".join(word[0].upper() + word[1:] for word in _split_into_words(text))


def lower_case_first(text: str) -> str:
    """Lower-case the first character: "JsonObject" -> "jsonObject"."""
    if not text:
        return ""
    return text[0].lower() + text[1:]


def camel_to_snake(text: str) -> str:
    """Convert camelCase to snake_case: "jsonObject" -> "json_object"."""
    return _CAMEL_BOUNDARY_PATTERN.sub("_", text).lower()


def _unescape_pointer_segment(segment: str) -> str:
    """Undo percent-encoding and JSON Pointer escaping of one URI segment."""
    segment = unquote(segment)
    if segment == "~2":
        return ""
    return segment.replace("~1", "/").replace("~0", "~")


def uri_leaf(uri: str) -> str:
    """Return the final path segment of a URI with any file extension stripped.

    Examples:
        "schema.json#/definitions/widget" -> "widget"
        "file:///schemas/person.schema.json" -> "person"
        "schema.json#/properties/tags/items/0" -> "0"
    """
    last_part = uri.split("/")[-1]
    last_part = _unescape_pointer_segment(last_part.lstrip("#"))
    return last_part.split(".", 1)[0]


def identifier_from_text(text: str) -> str:
    """CamelCase identifier for arbitrary text, never empty and never starting with a digit."""
    name = snake_to_camel(text)
    if not name:
        return DEFAULT_TYPE_NAME
    if name[0].isdigit():
        return DIGIT_PREFIX + name
    return name


def name_for_uri(uri: str) -> str:
    """Base type name for the schema at ``uri``."""
    return identifier_from_text(uri_leaf(uri))


def vary_name(name: str) -> str:
    """Mutate a clashing name: increment its trailing number, or append "2".

    Examples:
        "Item" -> "Item2"
        "Item2" -> "Item3"
        "Item0" -> "Item1"
    """
    match = _TRAILING_DIGITS_PATTERN.search(name)
    if match is None:
        return name + "2"
    return name[: match.start()] + str(int(match.group()) + 1)
