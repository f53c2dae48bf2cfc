"""
Builder: turns one schema node into (at most) one generated wrapper type.

A Builder is created in two phases. Construction registers the Builder,
resolves the node's raw type, decides whether a wrapper type is warranted
and declares it under its container. Population emits the wrapper's
scaffold (field, constructor, raw getter) and then its property getters,
item getters and size accessor, recursing into child nodes through the
Orchestrator. A child's type is therefore always declared before a parent
getter names it.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from ...utils import identifier_from_text, lower_case_first, name_for_uri, vary_name
from ..errors import GeneratorError, TypeAlreadyExistsError
from ..schema_model import Schema
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
    TypeRef,
    Visibility,
)
from .raw_types import RawType, resolve_raw_type

if TYPE_CHECKING:
    from .orchestrator import Orchestrator

logger = logging.getLogger(__name__)


def literal_default(schema: Schema) -> Literal | None:
    """The node's default as a literal, or None when absent or not representable."""
    if not schema.has_default:
        return None
    value = schema.default
    if isinstance(value, (bool, int, float, str)):
        return Literal(value)
    return None


class Builder:
    """Generates the wrapper type for a single schema node."""

    def __init__(self, orchestrator: Orchestrator, schema: Schema):
        self.orchestrator = orchestrator
        self.schema = schema
        self.population_started = False

        # Register first so that cyclic references find this builder
        orchestrator.register(schema.uri, self)

        self.raw_type = resolve_raw_type(schema.types)
        self.defined_type: DefinedType | None = None
        self.data_field: FieldDecl | None = None

        if self._needs_type():
            self.defined_type = self._declare_type()
            logger.debug("Declared %s for %s", self.defined_type.qualified_name, schema.uri)
        else:
            logger.debug("No type for %s, using raw %s", schema.uri, self.raw_type.type_name)

    def __repr__(self) -> str:
        return f"Builder({self.schema.uri!r})"

    @property
    def name(self) -> str | None:
        return self.defined_type.name if self.defined_type else None

    @property
    def type_ref(self) -> TypeRef:
        """Type callers use for this node: the wrapper if any, else the raw type."""
        return TypeRef(raw_type=self.raw_type, defined_type=self.defined_type)

    def _needs_type(self) -> bool:
        if self.raw_type is RawType.JSON_OBJECT:
            return bool(self.schema.properties)
        return self.raw_type in (RawType.ANY, RawType.JSON_ARRAY)

    def _container(self) -> Namespace | DefinedType:
        """The parent node's type if it has one, else the top-level namespace."""
        parent = self.schema.parent
        if parent is None:
            return self.orchestrator.namespace
        parent_builder = self.orchestrator.declare_builder(parent)
        return parent_builder.defined_type or self.orchestrator.namespace

    def _declare_type(self) -> DefinedType:
        container = self._container()
        name = name_for_uri(self.schema.uri)
        for _ in range(self.orchestrator.config.max_name_attempts):
            name = self._avoid_enclosing_names(name, container)
            try:
                return self.orchestrator.type_model.declare_type(container, name, doc=self._documentation())
            except TypeAlreadyExistsError:
                logger.debug("Sibling type %s already exists, varying name", name)
                name = vary_name(name)
        raise GeneratorError(f"Could not find a free type name for {self.schema.uri!r}")

    def _avoid_enclosing_names(self, name: str, container: Namespace | DefinedType) -> str:
        """Vary ``name`` until no enclosing type (or reserved name) shares it.

        Nested types also avoid the names of top-level types and top-level
        types avoid the names of nested ones, so a simple name never refers
        to two types of the namespace. The scan restarts after every change:
        a varied name can newly clash with a different enclosing level.
        """
        enclosing: list[DefinedType] = []
        while isinstance(container, DefinedType):
            enclosing.append(container)
            container = container.container

        namespace_types = self.orchestrator.type_model.all_types()
        if enclosing:
            taken = {t.name for t in namespace_types if t.is_top_level}
        else:
            taken = {t.name for t in namespace_types if not t.is_top_level}
        taken |= self.orchestrator.type_model.reserved_type_names

        for _ in range(self.orchestrator.config.max_name_attempts):
            if name not in taken and all(t.name != name for t in enclosing):
                return name
            name = vary_name(name)
        raise GeneratorError(f"Could not find a name for {self.schema.uri!r} that no enclosing type uses")

    def _documentation(self) -> str:
        lines = [
            f"Created from {self.schema.uri}",
            f"Explicit types {self.schema.explicit_types}",
            f"Inferred types {self.schema.inferred_types}",
        ]
        if self.orchestrator.config.include_schema_json_in_docs:
            lines.append(json.dumps(self.schema.schema_json, indent=2))
        return "\n".join(lines)

    def populate(self) -> None:
        """Emit the scaffold and all getters. Runs at most once."""
        if self.population_started:
            return
        self.population_started = True
        if self.defined_type is None:
            return

        self._write_scaffold()
        self._write_property_getters()
        self._write_item_getters()
        if "array" in self.schema.types:
            self._write_size()

    def _write_scaffold(self) -> None:
        data_type = TypeRef(raw_type=self.raw_type)
        data_name = lower_case_first(self.raw_type.type_name)

        self.data_field = self.defined_type.add_field(
            FieldDecl(name=data_name, type_ref=data_type, visibility=Visibility.PRIVATE, is_final=True)
        )

        parameter = Parameter(name=data_name, type_ref=data_type)
        self.defined_type.add_constructor(ConstructorDecl(parameters=[parameter], assignments=[(self.data_field, parameter)]))

        prefix = "is" if self.raw_type is RawType.BOOLEAN else "get"
        self.defined_type.add_method(
            MethodDecl(name=prefix + self.raw_type.type_name, return_type=data_type, body=FieldRef(self.data_field))
        )

    def _write_property_getters(self) -> None:
        required = self.schema.required
        for property_name, property_schema in self.schema.properties.items():
            if not isinstance(property_schema, Schema):
                self._skip_malformed(f"property {property_name!r}", property_schema)
                continue
            builder = self.orchestrator.get_builder(property_schema)
            builder.write_property_getters(
                holder=self,
                property_name=property_name,
                required=property_name in required,
                default=literal_default(property_schema),
            )

    def _write_item_getters(self) -> None:
        for position, item_schema in enumerate(self.schema.items):
            if not isinstance(item_schema, Schema):
                self._skip_malformed(f"item {position}", item_schema)
                continue
            builder = self.orchestrator.get_builder(item_schema)
            builder.write_item_getters(holder=self, default=literal_default(item_schema))

    def _write_size(self) -> None:
        self.defined_type.add_method(
            MethodDecl(name="size", return_type=TypeRef(raw_type=RawType.INTEGER), body=Length(FieldRef(self.data_field)))
        )

    def _skip_malformed(self, entry: str, value: Any) -> None:
        message = f"Skipping {entry} of {self.schema.uri}: {value!r} is not an object schema"
        if self.orchestrator.config.strict_schema_shapes:
            raise GeneratorError(message)
        logger.warning(message)

    def _free_member_suffix(self, prefixes: list[str], suffix: str) -> str:
        """Vary ``suffix`` until ``prefix + suffix`` is free on this type for every prefix."""
        for _ in range(self.orchestrator.config.max_name_attempts):
            if not any(self.defined_type.has_member(prefix + suffix) for prefix in prefixes):
                return suffix
            logger.debug("Member %s%s already exists on %s, varying name", prefixes[0], suffix, self.defined_type.name)
            suffix = vary_name(suffix)
        raise GeneratorError(f"Could not find a free member name for {suffix!r} on {self.defined_type.name!r}")

    def _wrap(self, lookup: PropertyLookup | ItemLookup) -> PropertyLookup | ItemLookup | NewInstance:
        if self.defined_type is None:
            return lookup
        return NewInstance(defined_type=self.defined_type, argument=lookup)

    def write_property_getters(
        self,
        holder: Builder,
        property_name: str,
        required: bool,
        default: Literal | None,
    ) -> None:
        """
        Emit the getter (and presence-checker) for this node as a property of ``holder``.

        Args:
            holder: Builder of the object declaring the property
            property_name: JSON key of the property
            required: Whether the key is in the holder's required set
            default: Literal fallback, or None for a strict lookup
        """
        return_type = self.type_ref
        getter_prefix = "is" if return_type.is_boolean else "get"
        needs_presence_check = not required and default is None
        prefixes = [getter_prefix, "has"] if needs_presence_check else [getter_prefix]
        suffix = holder._free_member_suffix(prefixes, identifier_from_text(property_name))

        target = FieldRef(holder.data_field)
        lookup = PropertyLookup(target=target, key=property_name, value_type=self.raw_type, default=default)
        holder.defined_type.add_method(MethodDecl(name=getter_prefix + suffix, return_type=return_type, body=self._wrap(lookup)))

        if needs_presence_check:
            holder.defined_type.add_method(
                MethodDecl(
                    name="has" + suffix,
                    return_type=TypeRef(raw_type=RawType.BOOLEAN),
                    body=KeyPresence(target=target, key=property_name),
                )
            )

    def write_item_getters(self, holder: Builder, default: Literal | None) -> None:
        """
        Emit an index-parameterised getter for this node as an item of ``holder``.

        Index presence is the caller's responsibility, so no presence-checker
        is emitted.
        """
        return_type = self.type_ref
        getter_prefix = "is" if return_type.is_boolean else "get"
        suffix = self.name or name_for_uri(self.schema.uri)
        suffix = holder._free_member_suffix([getter_prefix], suffix)

        index = Parameter(name="index", type_ref=TypeRef(raw_type=RawType.INTEGER))
        lookup = ItemLookup(target=FieldRef(holder.data_field), index=index, value_type=self.raw_type, default=default)
        holder.defined_type.add_method(
            MethodDecl(name=getter_prefix + suffix, return_type=return_type, parameters=[index], body=self._wrap(lookup))
        )
