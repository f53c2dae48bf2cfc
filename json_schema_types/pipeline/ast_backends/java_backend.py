"""
Java rendering backend.

Renders one source file per top-level type, with nested types as public
static member classes. Raw values use org.json: JSONObject / JSONArray
lookups via get<Kind> (strict) and opt<Kind> (with default).
"""

from __future__ import annotations

import html
import json
import math

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
    PropertyLookup,
    TypeModel,
    Visibility,
)
from ..analyzer.raw_types import RawType
from ..errors import EmitterError
from .base import AstBackend

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
LONG_MIN = -(2**63)
LONG_MAX = 2**63 - 1


class JavaAstBackend(AstBackend):
    """Renders wrapper types as Java classes over org.json values."""

    FILE_EXTENSION = "java"

    TYPE_MAP = {
        RawType.JSON_ARRAY: "JSONArray",
        RawType.BOOLEAN: "boolean",
        RawType.INTEGER: "int",
        RawType.NULL: "Object",
        RawType.NUMBER: "Number",
        RawType.JSON_OBJECT: "JSONObject",
        RawType.STRING: "String",
        RawType.ANY: "Object",
    }

    # Suffix of the JSONObject / JSONArray accessor for each value type
    ACCESSOR_KINDS = {
        RawType.JSON_ARRAY: "JSONArray",
        RawType.BOOLEAN: "Boolean",
        RawType.INTEGER: "Int",
        RawType.NUMBER: "Number",
        RawType.JSON_OBJECT: "JSONObject",
        RawType.STRING: "String",
    }

    # Types the generated code refers to by simple name
    RESERVED_TYPE_NAMES = frozenset({"Boolean", "Integer", "JSONArray", "JSONObject", "Number", "Object", "String"})

    # Final methods of java.lang.Object
    RESERVED_MEMBER_NAMES = frozenset({"getClass"})

    def generate(self, model: TypeModel, generation_comment: str = "") -> dict[str, str]:
        files: dict[str, str] = {}
        for namespace in model.namespaces:
            prefix = self._render_template(
                "java/prefix.java.jinja2",
                generation_comment=generation_comment,
                package=namespace.name,
            )
            directory = namespace.name.replace(".", "/")
            for defined_type in namespace.types:
                source = prefix + "\n" + "\n".join(self._serialize_type(defined_type)) + "\n"
                path = f"{directory}/{defined_type.name}.java" if directory else f"{defined_type.name}.java"
                files[path] = source
        return files

    def _serialize_type(self, defined_type: DefinedType) -> list[str]:
        lines: list[str] = []
        if defined_type.doc:
            lines.extend(self._serialize_javadoc(defined_type.doc))

        modifiers = [defined_type.visibility.value]
        if defined_type.is_static:
            modifiers.append("static")
        lines.append(f"{' '.join(modifiers)} class {defined_type.name} {{")

        body: list[str] = []
        for field_decl in defined_type.fields:
            final = " final" if field_decl.is_final else ""
            body.append(f"{field_decl.visibility.value}{final} {self.translate_type(field_decl.type_ref)} {field_decl.name};")
        if defined_type.fields:
            body.append("")

        for constructor in defined_type.constructors:
            params = ", ".join(f"{self.translate_type(p.type_ref)} {p.name}" for p in constructor.parameters)
            body.append(f"{constructor.visibility.value} {defined_type.name}({params}) {{")
            assignments = [f"this.{field_decl.name} = {parameter.name};" for field_decl, parameter in constructor.assignments]
            body.extend(self._indent_lines(assignments))
            body.append("}")
            body.append("")

        for method in defined_type.methods:
            body.extend(self._serialize_method(method))
            body.append("")

        for nested in defined_type.types:
            body.extend(self._serialize_type(nested))
            body.append("")

        while body and not body[-1]:
            body.pop()

        lines.extend(self._indent_lines(body))
        lines.append("}")
        return lines

    def _serialize_method(self, method: MethodDecl) -> list[str]:
        if method.body is None:
            raise EmitterError(f"Method {method.name!r} has no body")
        params = ", ".join(f"{self.translate_type(p.type_ref)} {p.name}" for p in method.parameters)
        return_type = self.translate_type(method.return_type)
        visibility = method.visibility.value if method.visibility is Visibility.PUBLIC else "private"
        return [
            f"{visibility} {return_type} {method.name}({params}) {{",
            f"{self.INDENT}return {self.render_expression(method.body)};",
            "}",
        ]

    def _serialize_javadoc(self, doc: str) -> list[str]:
        # The schema JSON, when present, starts on the first line opening with "{"
        text, _, schema_json = doc.partition("\n{")
        lines = ["/**"]
        lines.extend(self._javadoc_line(line) for line in text.splitlines())
        if schema_json:
            lines.append(" * <pre>")
            lines.extend(self._javadoc_line(line) for line in ("{" + schema_json).splitlines())
            lines.append(" * </pre>")
        lines.append(" */")
        return lines

    @staticmethod
    def _javadoc_line(line: str) -> str:
        return f" * {html.escape(line, quote=False).replace('*/', '*&#47;')}".rstrip()

    def type_name(self, defined_type: DefinedType) -> str:
        """Top-level types are named through their package, when they have one."""
        if defined_type.is_top_level and defined_type.container.name:
            return f"{defined_type.container.name}.{defined_type.name}"
        return defined_type.qualified_name

    def _target(self, target: FieldRef, wanted: RawType) -> str:
        """Reference the raw value field, cast when it is not already of the wanted type."""
        name = target.field.name
        if target.field.type_ref.raw_type is wanted:
            return name
        return f"(({self.TYPE_MAP[wanted]}) {name})"

    def format_default_value(self, literal: Literal) -> str:
        value = literal.value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            if INT_MIN <= value <= INT_MAX:
                return str(value)
            if LONG_MIN <= value <= LONG_MAX:
                return f"{value}L"
            value = float(value)
        if isinstance(value, float):
            if math.isnan(value):
                return "Double.NaN"
            if math.isinf(value):
                return "Double.POSITIVE_INFINITY" if value > 0 else "Double.NEGATIVE_INFINITY"
            return repr(value)
        return json.dumps(value)

    def _typed_default(self, literal: Literal, value_type: RawType) -> str:
        """Default value as an argument of an accessor returning ``value_type``."""
        value = literal.value
        if value_type is RawType.INTEGER and not isinstance(value, bool) and isinstance(value, (int, float)):
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            if isinstance(value, int) and INT_MIN <= value <= INT_MAX:
                return str(value)
            return f"(int) {self.format_default_value(Literal(float(value)))}"
        return self.format_default_value(literal)

    def render_expression(self, expression: Expression) -> str:
        if isinstance(expression, FieldRef):
            return expression.field.name

        if isinstance(expression, Literal):
            return self.format_default_value(expression)

        if isinstance(expression, PropertyLookup):
            target = self._target(expression.target, RawType.JSON_OBJECT)
            return self._lookup(target, json.dumps(expression.key), expression.value_type, expression.default)

        if isinstance(expression, ItemLookup):
            target = self._target(expression.target, RawType.JSON_ARRAY)
            return self._lookup(target, expression.index.name, expression.value_type, expression.default)

        if isinstance(expression, KeyPresence):
            return f"{self._target(expression.target, RawType.JSON_OBJECT)}.has({json.dumps(expression.key)})"

        if isinstance(expression, Length):
            return f"{self._target(expression.target, RawType.JSON_ARRAY)}.length()"

        if isinstance(expression, NewInstance):
            return f"new {self.type_name(expression.defined_type)}({self.render_expression(expression.argument)})"

        raise EmitterError(f"Cannot render expression {expression!r}")

    def _lookup(self, target: str, key: str, value_type: RawType, default: Literal | None) -> str:
        kind = self.ACCESSOR_KINDS.get(value_type)
        if default is None:
            return f"{target}.get{kind or ''}({key})"
        default_value = self._typed_default(default, value_type)
        if kind is None:
            return f"{target}.opt({key}) != null ? {target}.get({key}) : {default_value}"
        return f"{target}.opt{kind}({key}, {default_value})"
