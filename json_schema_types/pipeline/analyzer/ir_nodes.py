"""
Type model (intermediate representation) of the generated wrapper types.

The builders record declarations here in composition order: namespace,
types (top-level or nested), fields, constructors and methods. Method bodies
are small expression trees that each backend renders in its own language.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from ..errors import MemberAlreadyExistsError, TypeAlreadyExistsError
from .raw_types import RawType


class Visibility(str, Enum):
    """Declaration visibility."""

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass
class TypeRef:
    """A reference to either a raw value type or a generated type."""

    raw_type: RawType = RawType.ANY
    defined_type: DefinedType | None = None

    @property
    def is_boolean(self) -> bool:
        return self.defined_type is None and self.raw_type is RawType.BOOLEAN


@dataclass
class FieldDecl:
    """A field of a generated type."""

    name: str = ""
    type_ref: TypeRef = field(default_factory=TypeRef)
    visibility: Visibility = Visibility.PRIVATE
    is_final: bool = True


@dataclass
class Parameter:
    """A constructor or method parameter."""

    name: str = ""
    type_ref: TypeRef = field(default_factory=TypeRef)


@dataclass
class FieldRef:
    """Reads a field of the current instance."""

    field: FieldDecl


@dataclass
class Literal:
    """A literal default value (int, float, bool or str)."""

    value: Any = None


@dataclass
class PropertyLookup:
    """Looks up ``key`` in a raw object; falls back to ``default`` when given."""

    target: FieldRef
    key: str = ""
    value_type: RawType = RawType.ANY
    default: Literal | None = None


@dataclass
class ItemLookup:
    """Looks up the element at ``index`` in a raw array; falls back to ``default`` when given."""

    target: FieldRef
    index: Parameter
    value_type: RawType = RawType.ANY
    default: Literal | None = None


@dataclass
class KeyPresence:
    """Whether a raw object holds ``key``."""

    target: FieldRef
    key: str = ""


@dataclass
class Length:
    """Element count of a raw array."""

    target: FieldRef


@dataclass
class NewInstance:
    """Constructs ``defined_type`` around the value of ``argument``."""

    defined_type: DefinedType
    argument: Expression


Expression = Union[FieldRef, Literal, PropertyLookup, ItemLookup, KeyPresence, Length, NewInstance]


@dataclass
class ConstructorDecl:
    """A constructor assigning each parameter to a field, unchanged."""

    parameters: list[Parameter] = field(default_factory=list)
    assignments: list[tuple[FieldDecl, Parameter]] = field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC


@dataclass
class MethodDecl:
    """A method returning the value of ``body``."""

    name: str = ""
    return_type: TypeRef = field(default_factory=TypeRef)
    parameters: list[Parameter] = field(default_factory=list)
    body: Expression | None = None
    visibility: Visibility = Visibility.PUBLIC


@dataclass(eq=False)
class Namespace:
    """The document's top-level namespace (Java package, Python module)."""

    name: str = ""
    types: list[DefinedType] = field(default_factory=list)

    def find_type(self, name: str) -> DefinedType | None:
        return next((t for t in self.types if t.name == name), None)


@dataclass(eq=False)
class DefinedType:
    """A generated wrapper type. Identity is (name, container)."""

    name: str = ""
    container: Namespace | DefinedType | None = None
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    doc: str = ""
    fields: list[FieldDecl] = field(default_factory=list)
    constructors: list[ConstructorDecl] = field(default_factory=list)
    methods: list[MethodDecl] = field(default_factory=list)
    types: list[DefinedType] = field(default_factory=list)
    reserved_member_names: frozenset[str] = frozenset()

    def __repr__(self) -> str:
        return f"DefinedType({self.qualified_name!r})"

    @property
    def is_top_level(self) -> bool:
        return isinstance(self.container, Namespace)

    @property
    def enclosing_types(self) -> list[DefinedType]:
        """Enclosing generated types, innermost first."""
        result = []
        container = self.container
        while isinstance(container, DefinedType):
            result.append(container)
            container = container.container
        return result

    @property
    def qualified_name(self) -> str:
        """Dotted name from the outermost enclosing type ("Root.Person.Address")."""
        names = [t.name for t in reversed(self.enclosing_types)]
        names.append(self.name)
        return ".".join(names)

    def find_type(self, name: str) -> DefinedType | None:
        return next((t for t in self.types if t.name == name), None)

    def find_method(self, name: str) -> MethodDecl | None:
        return next((m for m in self.methods if m.name == name), None)

    def has_member(self, name: str) -> bool:
        """Whether ``name`` is taken by a method, a field or a backend-reserved member."""
        if name in self.reserved_member_names:
            return True
        return self.find_method(name) is not None or any(f.name == name for f in self.fields)

    def add_field(self, field_decl: FieldDecl) -> FieldDecl:
        if self.has_member(field_decl.name):
            raise MemberAlreadyExistsError(self.name, field_decl.name)
        self.fields.append(field_decl)
        return field_decl

    def add_constructor(self, constructor: ConstructorDecl) -> ConstructorDecl:
        self.constructors.append(constructor)
        return constructor

    def add_method(self, method: MethodDecl) -> MethodDecl:
        if self.has_member(method.name):
            raise MemberAlreadyExistsError(self.name, method.name)
        self.methods.append(method)
        return method


class TypeModel:
    """Records namespace and type declarations for one generation pass."""

    def __init__(
        self,
        reserved_type_names: frozenset[str] = frozenset(),
        reserved_member_names: frozenset[str] = frozenset(),
    ):
        """
        Initialize the model.

        Args:
            reserved_type_names: Names a generated type may never take
                (language keywords, names the rendered code relies on)
            reserved_member_names: Method names a generated type may never declare
        """
        self.reserved_type_names = reserved_type_names
        self.reserved_member_names = reserved_member_names
        self.namespaces: list[Namespace] = []

    def namespace(self, name: str) -> Namespace:
        """Return the namespace called ``name``, declaring it on first use."""
        for namespace in self.namespaces:
            if namespace.name == name:
                return namespace
        namespace = Namespace(name=name)
        self.namespaces.append(namespace)
        return namespace

    def declare_type(
        self,
        container: Namespace | DefinedType,
        name: str,
        doc: str = "",
    ) -> DefinedType:
        """
        Declare a type inside a namespace or nested inside another type.

        Top-level types are public; nested types are public and static.

        Raises:
            TypeAlreadyExistsError: If a sibling type already holds ``name``
        """
        if container.find_type(name) is not None:
            raise TypeAlreadyExistsError(name)
        defined_type = DefinedType(
            name=name,
            container=container,
            visibility=Visibility.PUBLIC,
            is_static=isinstance(container, DefinedType),
            doc=doc,
            reserved_member_names=self.reserved_member_names,
        )
        container.types.append(defined_type)
        return defined_type

    def all_types(self) -> list[DefinedType]:
        """Every declared type, outer types before the types nested in them."""
        result: list[DefinedType] = []
        pending = [t for namespace in self.namespaces for t in namespace.types]
        while pending:
            defined_type = pending.pop(0)
            result.append(defined_type)
            pending.extend(defined_type.types)
        return result
