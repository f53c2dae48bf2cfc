"""
Python rendering backend.

Renders every namespace as one module. Wrapper types become classes
(nested types become nested classes) holding the decoded JSON value
(dict, list, str, ...). Strict lookups raise KeyError / IndexError;
lookups with a default fall back to the literal.
"""

from __future__ import annotations

import json
import math

from ...utils import camel_to_snake
from ..analyzer.ir_nodes import (
    DefinedType,
    Expression,
    FieldRef,
    ItemLookup,
    KeyPresence,
    Length,
    Literal,
    MethodDecl,
    NewInstance,
    Parameter,
    PropertyLookup,
    TypeModel,
)
from ..analyzer.raw_types import RawType
from ..errors import EmitterError
from .base import AstBackend

# Module name used when the namespace has none
DEFAULT_MODULE_NAME = "generated"


class PythonAstBackend(AstBackend):
    """Renders wrapper types as Python classes."""

    FILE_EXTENSION = "py"

    TYPE_MAP = {
        RawType.JSON_ARRAY: "list[Any]",
        RawType.BOOLEAN: "bool",
        RawType.INTEGER: "int",
        RawType.NULL: "None",
        RawType.NUMBER: "float",
        RawType.JSON_OBJECT: "dict[str, Any]",
        RawType.STRING: "str",
        RawType.ANY: "Any",
    }

    # Capitalized keywords, plus the names the module imports
    RESERVED_TYPE_NAMES = frozenset({"Any", "False", "None", "True"})

    def generate(self, model: TypeModel, generation_comment: str = "") -> dict[str, str]:
        files: dict[str, str] = {}
        for namespace in model.namespaces:
            module_name = namespace.name or DEFAULT_MODULE_NAME
            prefix = self._render_template("python/prefix.py.jinja2", generation_comment=generation_comment)
            class_blocks = ["\n".join(self._serialize_type(t)) for t in namespace.types]
            source = prefix
            if class_blocks:
                source += "\n\n" + "\n\n\n".join(class_blocks) + "\n"
            files[f"{module_name}.{self.FILE_EXTENSION}"] = source
        return files

    def _serialize_type(self, defined_type: DefinedType) -> list[str]:
        """Serialize a class and, recursively, the classes nested in it."""
        body: list[str] = []

        if defined_type.doc:
            body.extend(self._serialize_docstring(defined_type.doc))
            body.append("")

        for constructor in defined_type.constructors:
            params = "".join(f", {self._param(p)}" for p in constructor.parameters)
            body.append(f"def __init__(self{params}) -> None:")
            assignments = [
                f"self._{camel_to_snake(field_decl.name)} = {camel_to_snake(parameter.name)}"
                for field_decl, parameter in constructor.assignments
            ]
            body.extend(self._indent_lines(assignments or ["pass"]))
            body.append("")

        for method in defined_type.methods:
            body.extend(self._serialize_method(method))
            body.append("")

        for nested in defined_type.types:
            body.extend(self._serialize_type(nested))
            body.append("")

        # Drop the separator after the last member
        while body and not body[-1]:
            body.pop()

        return [f"class {defined_type.name}:"] + self._indent_lines(body or ["pass"])

    def _serialize_method(self, method: MethodDecl) -> list[str]:
        if method.body is None:
            raise EmitterError(f"Method {method.name!r} has no body")
        params = "".join(f", {self._param(p)}" for p in method.parameters)
        return_type = self.translate_type(method.return_type)
        return [
            f"def {method.name}(self{params}) -> {return_type}:",
            f"{self.INDENT}return {self.render_expression(method.body)}",
        ]

    def _serialize_docstring(self, doc: str) -> list[str]:
        doc = doc.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
        return ['"""'] + doc.splitlines() + ['"""']

    def _param(self, parameter: Parameter) -> str:
        return f"{camel_to_snake(parameter.name)}: {self.translate_type(parameter.type_ref)}"

    def format_default_value(self, literal: Literal) -> str:
        value = literal.value
        if isinstance(value, str):
            return json.dumps(value)
        if isinstance(value, float) and not math.isfinite(value):
            return f'float("{value}")'
        return repr(value)

    def render_expression(self, expression: Expression) -> str:
        if isinstance(expression, FieldRef):
            return f"self._{camel_to_snake(expression.field.name)}"

        if isinstance(expression, Literal):
            return self.format_default_value(expression)

        if isinstance(expression, PropertyLookup):
            target = self.render_expression(expression.target)
            key = json.dumps(expression.key)
            if expression.default is None:
                return f"{target}[{key}]"
            return f"{target}.get({key}, {self.format_default_value(expression.default)})"

        if isinstance(expression, ItemLookup):
            target = self.render_expression(expression.target)
            index = camel_to_snake(expression.index.name)
            if expression.default is None:
                return f"{target}[{index}]"
            default = self.format_default_value(expression.default)
            return f"{target}[{index}] if 0 <= {index} < len({target}) else {default}"

        if isinstance(expression, KeyPresence):
            return f"{json.dumps(expression.key)} in {self.render_expression(expression.target)}"

        if isinstance(expression, Length):
            return f"len({self.render_expression(expression.target)})"

        if isinstance(expression, NewInstance):
            return f"{self.type_name(expression.defined_type)}({self.render_expression(expression.argument)})"

        raise EmitterError(f"Cannot render expression {expression!r}")
