"""Immutable references to Swift types.

Type names compare structurally, so they can be used as dictionary keys and
compared against the names the writer resolves from the open scopes.
``DeclaredTypeName`` identity is its module plus simple-name path;
``always_qualify`` is a rendering hint and does not take part in equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Union

from .util import escape_keywords

if TYPE_CHECKING:
    from .attribute_spec import AttributeSpec
    from .code_writer import CodeWriter


class TypeName:
    """Base of every type reference; subclasses implement ``emit``."""

    def emit(self, out: CodeWriter) -> CodeWriter:
        raise NotImplementedError

    def __str__(self) -> str:
        from .code_writer import render  # code_writer depends on this module

        return render(self.emit)

    @property
    def name(self) -> str:
        return str(self)

    # ---------- optional / implicit wrapping ----------

    @property
    def optional(self) -> bool:
        return isinstance(self, ParameterizedTypeName) and self.raw_type == OPTIONAL

    @property
    def implicit(self) -> bool:
        return isinstance(self, ParameterizedTypeName) and self.raw_type == IMPLICIT

    def make_optional(self) -> TypeName:
        return self if self.optional else self.wrap_optional()

    def wrap_optional(self) -> TypeName:
        return OPTIONAL.parameterized_by(self)

    def unwrap_optional(self) -> TypeName:
        if isinstance(self, ParameterizedTypeName) and self.optional:
            return self.type_arguments[0]
        return self

    def make_non_optional(self) -> TypeName:
        current = self
        while current.optional:
            current = current.unwrap_optional()
        return current

    def make_implicit(self) -> TypeName:
        return self if self.implicit else IMPLICIT.parameterized_by(self)

    def make_non_implicit(self) -> TypeName:
        current: TypeName = self
        while isinstance(current, ParameterizedTypeName) and current.implicit:
            current = current.type_arguments[0]
        return current


# ---------- declared names ----------

@dataclass(frozen=True, repr=False)
class DeclaredTypeName(TypeName):
    names: tuple[str, ...]
    always_qualify: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(self.names))
        if len(self.names) < 2:
            raise ValueError(f"type names require a module and at least one simple name: {self.names!r}")
        for simple in self.names[1:]:
            if not simple:
                raise ValueError(f"simple names must not be empty: {self.names!r}")

    def __repr__(self) -> str:
        return f"DeclaredTypeName({'.'.join(self.names)!r})"

    @classmethod
    def of(cls, module_name: str, simple_name: str, *simple_names: str) -> DeclaredTypeName:
        return cls((module_name, simple_name, *simple_names))

    @classmethod
    def type_name(cls, qualified_name: str, always_qualify: bool = False) -> DeclaredTypeName:
        """Parse ``Module.Type.Nested``; a leading dot (``.Type``) means the current module."""
        parts = qualified_name.split(".")
        if len(parts) < 2:
            raise ValueError(f"type names must be qualified: {qualified_name!r}")
        return cls(tuple(parts), always_qualify=always_qualify)

    @classmethod
    def qualified_type_name(cls, qualified_name: str) -> DeclaredTypeName:
        return cls.type_name(qualified_name, always_qualify=True)

    @property
    def module_name(self) -> str:
        return self.names[0]

    @property
    def simple_names(self) -> tuple[str, ...]:
        return self.names[1:]

    @property
    def simple_name(self) -> str:
        return self.names[-1]

    @property
    def canonical_name(self) -> str:
        if not self.module_name:
            return ".".join(self.simple_names)
        return ".".join(self.names)

    def top_level_type_name(self) -> DeclaredTypeName:
        return DeclaredTypeName(self.names[:2], self.always_qualify)

    def enclosing_type_name(self) -> DeclaredTypeName | None:
        if len(self.names) == 2:
            return None
        return DeclaredTypeName(self.names[:-1], self.always_qualify)

    def nested_type(self, *names: str) -> DeclaredTypeName:
        return DeclaredTypeName(self.names + names, self.always_qualify)

    def peer_type(self, name: str) -> DeclaredTypeName:
        return DeclaredTypeName(self.names[:-1] + (name,), self.always_qualify)

    def with_module(self, module_name: str) -> DeclaredTypeName:
        return DeclaredTypeName((module_name,) + self.names[1:], self.always_qualify)

    def parameterized_by(self, *type_arguments: TypeName) -> ParameterizedTypeName:
        return ParameterizedTypeName(self, type_arguments)

    def emit(self, out: CodeWriter) -> CodeWriter:
        return out.emit(escape_keywords(out.lookup_name(self)))


# ---------- generic application ----------

def _needs_parentheses(type_name: TypeName) -> bool:
    return isinstance(type_name, (ComposedTypeName, GenericQualifiedTypeName, FunctionTypeName))


@dataclass(frozen=True)
class ParameterizedTypeName(TypeName):
    raw_type: DeclaredTypeName
    type_arguments: tuple[TypeName, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "type_arguments", tuple(self.type_arguments))
        if not self.type_arguments:
            raise ValueError(f"no type arguments: {self.raw_type.canonical_name}")

    def plus_parameter(self, type_argument: TypeName) -> ParameterizedTypeName:
        return ParameterizedTypeName(self.raw_type, self.type_arguments + (type_argument,))

    def emit(self, out: CodeWriter) -> CodeWriter:
        arity = len(self.type_arguments)
        if self.raw_type in (OPTIONAL, IMPLICIT) and arity == 1:
            wrapped = self.type_arguments[0]
            suffix = "?" if self.raw_type == OPTIONAL else "!"
            if _needs_parentheses(wrapped):
                return out.emit_code("(%T)" + suffix, wrapped)
            return out.emit_code("%T" + suffix, wrapped)
        if self.raw_type == ARRAY and arity == 1:
            return out.emit_code("[%T]", self.type_arguments[0])
        if self.raw_type == DICTIONARY and arity == 2:
            return out.emit_code("[%T : %T]", *self.type_arguments)

        out.emit_code("%T", self.raw_type)
        out.emit("<")
        for index, argument in enumerate(self.type_arguments):
            if index > 0:
                out.emit(", ")
            out.emit_code("%T", argument)
        return out.emit(">")


# ---------- structural types ----------

@dataclass(frozen=True)
class TupleTypeName(TypeName):
    """``(label: Type, Type)``; an empty label emits the bare type."""

    elements: tuple[tuple[str, TypeName], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple((label, type_) for label, type_ in self.elements))

    @classmethod
    def of(cls, *elements: tuple[str, TypeName]) -> TupleTypeName:
        return cls(elements)

    def emit(self, out: CodeWriter) -> CodeWriter:
        out.emit("(")
        for index, (label, type_) in enumerate(self.elements):
            if index > 0:
                out.emit(", ")
            if label:
                out.emit_code("%L: %T", label, type_)
            else:
                out.emit_code("%T", type_)
        return out.emit(")")


@dataclass(frozen=True)
class FunctionTypeName(TypeName):
    parameters: tuple[TypeName, ...] = ()
    return_type: TypeName | None = None
    is_async: bool = False
    throws: bool = False
    attributes: tuple[AttributeSpec, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))
        object.__setattr__(self, "attributes", tuple(self.attributes))

    @classmethod
    def get(
        cls,
        *parameters: TypeName,
        returns: TypeName | None = None,
        is_async: bool = False,
        throws: bool = False,
        attributes: tuple[AttributeSpec, ...] = (),
    ) -> FunctionTypeName:
        return cls(parameters, returns if returns is not None else VOID, is_async, throws, attributes)

    def emit(self, out: CodeWriter) -> CodeWriter:
        out.emit_attributes(self.attributes, separator=" ", suffix=" ")
        out.emit("(")
        for index, parameter in enumerate(self.parameters):
            if index > 0:
                out.emit(", ")
            out.emit_code("%T", parameter)
        out.emit(")")
        if self.is_async:
            out.emit(" async")
        if self.throws:
            out.emit(" throws")
        return out.emit_code(" -> %T", self.return_type if self.return_type is not None else VOID)


@dataclass(frozen=True)
class ComposedTypeName(TypeName):
    """Protocol composition ``A & B & C``."""

    types: tuple[DeclaredTypeName, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", tuple(self.types))

    @classmethod
    def composed(cls, *types: DeclaredTypeName | str) -> ComposedTypeName:
        return cls(tuple(DeclaredTypeName.type_name(t) if isinstance(t, str) else t for t in types))

    def emit(self, out: CodeWriter) -> CodeWriter:
        for index, type_ in enumerate(self.types):
            if index > 0:
                out.emit(" & ")
            out.emit_code("%T", type_)
        return out


class GenericQualifier(Enum):
    ANY = "any"
    SOME = "some"


@dataclass(frozen=True)
class GenericQualifiedTypeName(TypeName):
    """An existential (``any P``) or opaque (``some P``) type."""

    type: TypeName
    qualifier: GenericQualifier

    @classmethod
    def any(cls, type_: TypeName) -> GenericQualifiedTypeName:
        return cls(type_, GenericQualifier.ANY)

    @classmethod
    def some(cls, type_: TypeName) -> GenericQualifiedTypeName:
        return cls(type_, GenericQualifier.SOME)

    def emit(self, out: CodeWriter) -> CodeWriter:
        out.emit(f"{self.qualifier.value} ")
        if isinstance(self.type, (ComposedTypeName, GenericQualifiedTypeName)):
            return out.emit_code("(%T)", self.type)
        return out.emit_code("%T", self.type)


class SelfTypeName(TypeName):
    def emit(self, out: CodeWriter) -> CodeWriter:
        return out.emit("Self")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SelfTypeName)

    def __hash__(self) -> int:
        return hash("Self")

    def __repr__(self) -> str:
        return "SelfTypeName()"


# ---------- type variables ----------

class Constraint(Enum):
    CONFORMS_TO = " : "
    SAME_TYPE = " == "


@dataclass(frozen=True)
class Bound:
    type_name: TypeName
    constraint: Constraint = Constraint.CONFORMS_TO

    def emit(self, out: CodeWriter) -> CodeWriter:
        return out.emit_code(self.constraint.value + "%T", self.type_name)


BoundLike = Union[Bound, TypeName, str]


def _to_bound(bound: BoundLike) -> Bound:
    if isinstance(bound, Bound):
        return bound
    if isinstance(bound, str):
        return Bound(DeclaredTypeName.type_name(bound))
    return Bound(bound)


@dataclass(frozen=True)
class TypeVariableName(TypeName):
    """A generic parameter; a dotted name (``Element.Key``) only appears in where clauses."""

    variable: str
    bounds: tuple[Bound, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "bounds", tuple(self.bounds))

    @classmethod
    def type_variable(cls, name: str, *bounds: BoundLike) -> TypeVariableName:
        return cls(name, tuple(_to_bound(b) for b in bounds))

    @staticmethod
    def bound(type_name: TypeName | str, constraint: Constraint = Constraint.CONFORMS_TO) -> Bound:
        if isinstance(type_name, str):
            type_name = DeclaredTypeName.type_name(type_name)
        return Bound(type_name, constraint)

    @property
    def name(self) -> str:
        return self.variable

    def with_bounds(self, *bounds: BoundLike) -> TypeVariableName:
        return TypeVariableName(self.variable, self.bounds + tuple(_to_bound(b) for b in bounds))

    def emit(self, out: CodeWriter) -> CodeWriter:
        return out.emit(self.variable)


# ---------- well-known names ----------

SELF = SelfTypeName()

OPTIONAL = DeclaredTypeName.type_name("Swift.Optional")
IMPLICIT = DeclaredTypeName.type_name("Swift.ImplicitlyUnwrappedOptional")
ARRAY = DeclaredTypeName.type_name("Swift.Array")
DICTIONARY = DeclaredTypeName.type_name("Swift.Dictionary")
SET = DeclaredTypeName.type_name("Swift.Set")

VOID = DeclaredTypeName.type_name("Swift.Void")
ANY = DeclaredTypeName.type_name("Swift.Any")
ANY_OBJECT = DeclaredTypeName.type_name("Swift.AnyObject")
NEVER = DeclaredTypeName.type_name("Swift.Never")
ERROR = DeclaredTypeName.type_name("Swift.Error")

BOOL = DeclaredTypeName.type_name("Swift.Bool")
STRING = DeclaredTypeName.type_name("Swift.String")
CHARACTER = DeclaredTypeName.type_name("Swift.Character")
INT = DeclaredTypeName.type_name("Swift.Int")
INT8 = DeclaredTypeName.type_name("Swift.Int8")
INT16 = DeclaredTypeName.type_name("Swift.Int16")
INT32 = DeclaredTypeName.type_name("Swift.Int32")
INT64 = DeclaredTypeName.type_name("Swift.Int64")
UINT = DeclaredTypeName.type_name("Swift.UInt")
UINT8 = DeclaredTypeName.type_name("Swift.UInt8")
UINT16 = DeclaredTypeName.type_name("Swift.UInt16")
UINT32 = DeclaredTypeName.type_name("Swift.UInt32")
UINT64 = DeclaredTypeName.type_name("Swift.UInt64")
FLOAT = DeclaredTypeName.type_name("Swift.Float")
DOUBLE = DeclaredTypeName.type_name("Swift.Double")

CASE_ITERABLE = DeclaredTypeName.type_name("Swift.CaseIterable")
CODABLE = DeclaredTypeName.type_name("Swift.Codable")
ENCODABLE = DeclaredTypeName.type_name("Swift.Encodable")
DECODABLE = DeclaredTypeName.type_name("Swift.Decodable")
EQUATABLE = DeclaredTypeName.type_name("Swift.Equatable")
HASHABLE = DeclaredTypeName.type_name("Swift.Hashable")
COMPARABLE = DeclaredTypeName.type_name("Swift.Comparable")

DATA = DeclaredTypeName.type_name("Foundation.Data")
DATE = DeclaredTypeName.type_name("Foundation.Date")
URL = DeclaredTypeName.type_name("Foundation.URL")
UUID = DeclaredTypeName.type_name("Foundation.UUID")
