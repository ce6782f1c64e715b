"""Build a ``FileSpec`` from a plain JSON/YAML description.

A document looks like::

    module: Models
    file: User
    imports: [Foundation]
    members:
      - kind: struct
        name: User
        modifiers: [public]
        super_types: [Swift.Codable]
        properties:
          - {name: id, type: Foundation.UUID}
          - {name: nickname, type: "Swift.String?", mutable: true}

Type strings are qualified (``Module.Type``, ``.Local`` for the module being
generated, bare ``T`` for type variables) and accept ``?``/``!`` suffixes,
``[Element]``, ``[Key: Value]`` and ``Generic<A, B>``.
"""

from __future__ import annotations

import json
import re
from os import PathLike
from pathlib import Path
from typing import Any, NotRequired, TypedDict

import yaml

from .attribute_spec import AttributeSpec
from .code_block import CodeBlock
from .enumeration_case_spec import EnumerationCaseSpec
from .extension_spec import ExtensionSpec
from .file_member_spec import FileMemberSpec, Member
from .file_spec import FileSpec
from .function_signature_spec import FunctionSignatureSpec
from .function_spec import FunctionSpec
from .import_spec import ImportSpec
from .modifier import Modifier, parse_modifier
from .parameter_spec import ParameterSpec
from .property_spec import PropertySpec
from .type_alias_spec import TypeAliasSpec
from .type_name import ARRAY, DICTIONARY, Constraint, DeclaredTypeName, TupleTypeName, TypeName, TypeVariableName
from .type_spec import TypeKind, TypeSpec


class AttributeDoc(TypedDict):
    name: str
    arguments: NotRequired[list[str]]


class ImportDoc(TypedDict):
    name: str
    attributes: NotRequired[list[str | AttributeDoc]]
    guard: NotRequired[str]
    doc: NotRequired[str]


class TypeVariableDoc(TypedDict):
    name: str
    bounds: NotRequired[list[str]]
    same_type: NotRequired[list[str]]


class ParameterDoc(TypedDict):
    name: str
    type: str
    label: NotRequired[str]
    default: NotRequired[str]
    variadic: NotRequired[bool]
    modifiers: NotRequired[list[str]]
    attributes: NotRequired[list[str | AttributeDoc]]


class FunctionDoc(TypedDict):
    name: str
    parameters: NotRequired[list[ParameterDoc]]
    returns: NotRequired[str]
    type_variables: NotRequired[list[TypeVariableDoc]]
    throws: NotRequired[bool]
    is_async: NotRequired[bool]
    failable: NotRequired[bool]
    abstract: NotRequired[bool]
    body: NotRequired[str]
    doc: NotRequired[str]
    modifiers: NotRequired[list[str]]
    attributes: NotRequired[list[str | AttributeDoc]]


class PropertyDoc(TypedDict):
    name: str
    type: str
    mutable: NotRequired[bool]
    initializer: NotRequired[str]
    getter: NotRequired[str]
    setter: NotRequired[str]
    will_set: NotRequired[str]
    did_set: NotRequired[str]
    abstract: NotRequired[list[str]]
    mutable_visibility: NotRequired[str]
    doc: NotRequired[str]
    modifiers: NotRequired[list[str]]
    attributes: NotRequired[list[str | AttributeDoc]]


class SubscriptDoc(TypedDict):
    parameters: list[ParameterDoc]
    returns: str
    getter: NotRequired[str]
    setter: NotRequired[str]
    modifiers: NotRequired[list[str]]


class AssociatedValueDoc(TypedDict):
    type: str
    label: NotRequired[str]


class EnumCaseDoc(TypedDict):
    name: str
    value: NotRequired[str | int]
    associated: NotRequired[list[AssociatedValueDoc]]
    doc: NotRequired[str]


class MemberDoc(TypedDict):
    """A file member or nested type; ``kind`` selects which keys apply."""

    kind: str
    name: NotRequired[str]
    type: NotRequired[str]
    doc: NotRequired[str]
    guard: NotRequired[str]
    modifiers: NotRequired[list[str]]
    attributes: NotRequired[list[str | AttributeDoc]]
    type_variables: NotRequired[list[TypeVariableDoc]]
    super_types: NotRequired[list[str]]
    where: NotRequired[list[TypeVariableDoc]]
    associated_types: NotRequired[list[TypeVariableDoc]]
    class_only: NotRequired[bool]
    cases: NotRequired[list[EnumCaseDoc]]
    properties: NotRequired[list[PropertyDoc]]
    subscripts: NotRequired[list[SubscriptDoc]]
    functions: NotRequired[list[FunctionDoc]]
    types: NotRequired[list[MemberDoc]]
    # Top-level function and property members reuse the keys above.
    parameters: NotRequired[list[ParameterDoc]]
    returns: NotRequired[str]
    body: NotRequired[str]
    mutable: NotRequired[bool]
    initializer: NotRequired[str]


class FileDoc(TypedDict):
    module: str
    file: str
    comment: NotRequired[str]
    indent: NotRequired[str]
    imports: NotRequired[list[str | ImportDoc]]
    members: NotRequired[list[MemberDoc]]


# ---------- type strings ----------

_TOKEN = re.compile(r"\s*(?:([\w.]+)|(\S))")


class _TypeParser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = [m.group(1) or m.group(2) for m in _TOKEN.finditer(text) if m.group(1) or m.group(2)]
        self.pos = 0

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self) -> str:
        token = self.peek()
        if token is None:
            raise ValueError(f"unexpected end of type {self.text!r}")
        self.pos += 1
        return token

    def expect(self, token: str) -> None:
        if self.take() != token:
            raise ValueError(f"expected {token!r} in type {self.text!r}")

    def parse(self) -> TypeName:
        token = self.take()
        if token == "[":
            element = self.parse()
            if self.peek() == ":":
                self.take()
                type_name: TypeName = DICTIONARY.parameterized_by(element, self.parse())
            else:
                type_name = ARRAY.parameterized_by(element)
            self.expect("]")
        elif token == "(":
            elements = [("", self.parse())]
            while self.peek() == ",":
                self.take()
                elements.append(("", self.parse()))
            self.expect(")")
            type_name = elements[0][1] if len(elements) == 1 else TupleTypeName.of(*elements)
        elif token[0].isalpha() or token[0] in "._":
            type_name = _declared(token)
            if self.peek() == "<":
                self.take()
                arguments = [self.parse()]
                while self.peek() == ",":
                    self.take()
                    arguments.append(self.parse())
                self.expect(">")
                type_name = _declared(token).parameterized_by(*arguments)
        else:
            raise ValueError(f"unexpected {token!r} in type {self.text!r}")

        while self.peek() in ("?", "!"):
            type_name = type_name.wrap_optional() if self.take() == "?" else type_name.make_implicit()
        return type_name


def _declared(name: str) -> DeclaredTypeName:
    if "." not in name:
        return DeclaredTypeName.of("", name)
    return DeclaredTypeName.type_name(name)


def parse_type(text: str) -> TypeName:
    """Parse a type string such as ``[Swift.String : Foundation.Data]?``."""
    parser = _TypeParser(text)
    type_name = parser.parse()
    if parser.peek() is not None:
        raise ValueError(f"trailing {parser.peek()!r} in type {text!r}")
    return type_name


# ---------- converters ----------

def _text(text: str) -> CodeBlock:
    """Literal Swift text as a block; ``%`` in the text is not a placeholder."""
    return CodeBlock.of("%L", text if text.endswith("\n") else text + "\n")


def _inline(text: str) -> CodeBlock:
    return CodeBlock.of("%L", text)


def _modifiers(names: list[str] | None) -> list[Modifier]:
    return [parse_modifier(name) for name in names or []]


def mk_attribute(ad: str | AttributeDoc) -> AttributeSpec:
    if isinstance(ad, str):
        return AttributeSpec.builder(ad).build()
    return AttributeSpec.builder(ad["name"]).add_arguments(*ad.get("arguments", [])).build()


def mk_type_variable(td: TypeVariableDoc) -> TypeVariableName:
    bounds = [TypeVariableName.bound(parse_type(b)) for b in td.get("bounds", [])]
    bounds += [TypeVariableName.bound(parse_type(b), Constraint.SAME_TYPE) for b in td.get("same_type", [])]
    return TypeVariableName.type_variable(td["name"], *bounds)


def mk_import(imp: str | ImportDoc) -> ImportSpec:
    if isinstance(imp, str):
        return ImportSpec.builder(imp).build()
    builder = ImportSpec.builder(imp["name"])
    builder.add_attributes(mk_attribute(a) for a in imp.get("attributes", []))
    if "guard" in imp:
        builder.add_guard("%L", imp["guard"])
    if "doc" in imp:
        builder.add_doc(_text(imp["doc"]))
    return builder.build()


def mk_parameter(pd: ParameterDoc) -> ParameterSpec:
    builder = ParameterSpec.builder(pd["name"], parse_type(pd["type"]), *_modifiers(pd.get("modifiers")), label=pd.get("label"))
    builder.add_attributes(mk_attribute(a) for a in pd.get("attributes", []))
    if "default" in pd:
        builder.default_value(_inline(pd["default"]))
    return builder.variadic(bool(pd.get("variadic", False))).build()


def mk_function(fd: FunctionDoc) -> FunctionSpec:
    name = fd["name"]
    builder = FunctionSpec.builder(name)
    builder.add_modifiers(*_modifiers(fd.get("modifiers")))
    builder.add_attributes(mk_attribute(a) for a in fd.get("attributes", []))
    builder.add_type_variables(mk_type_variable(t) for t in fd.get("type_variables", []))
    builder.add_parameters(mk_parameter(p) for p in fd.get("parameters", []))
    if "returns" in fd:
        builder.returns(parse_type(fd["returns"]))
    if "doc" in fd:
        builder.add_doc(_text(fd["doc"]))
    builder.throws(bool(fd.get("throws", False)))
    builder.async_(bool(fd.get("is_async", False)))
    builder.failable(bool(fd.get("failable", False)))
    if fd.get("abstract", False):
        builder.abstract()
    elif "body" in fd:
        builder.add_code(_text(fd["body"]))
    return builder.build()


def mk_property(pd: PropertyDoc) -> PropertySpec:
    builder = PropertySpec.builder(pd["name"], parse_type(pd["type"]), *_modifiers(pd.get("modifiers")))
    builder.add_attributes(mk_attribute(a) for a in pd.get("attributes", []))
    builder.mutable(bool(pd.get("mutable", False)))
    if "mutable_visibility" in pd:
        builder.mutable_visibility(parse_modifier(pd["mutable_visibility"]))
    if "doc" in pd:
        builder.add_doc(_text(pd["doc"]))
    if "initializer" in pd:
        builder.initializer(_inline(pd["initializer"]))
    if "getter" in pd:
        builder.getter(_text(pd["getter"]))
    if "setter" in pd:
        builder.setter(_text(pd["setter"]))
    if "will_set" in pd:
        builder.will_set(_text(pd["will_set"]))
    if "did_set" in pd:
        builder.did_set(_text(pd["did_set"]))
    for accessor in pd.get("abstract", []):
        if accessor == "get":
            builder.abstract_getter()
        elif accessor == "set":
            builder.abstract_setter()
        else:
            raise ValueError(f"unknown abstract accessor {accessor!r}")
    return builder.build()


def mk_subscript(sd: SubscriptDoc) -> PropertySpec:
    signature = (
        FunctionSignatureSpec.builder()
        .add_parameters(mk_parameter(p) for p in sd["parameters"])
        .returns(parse_type(sd["returns"]))
        .build()
    )
    builder = PropertySpec.subscript_builder(signature, *_modifiers(sd.get("modifiers")))
    if "getter" in sd:
        builder.getter(_text(sd["getter"]))
    if "setter" in sd:
        builder.setter(_text(sd["setter"]))
    return builder.build()


def mk_enum_case(cd: EnumCaseDoc) -> EnumerationCaseSpec:
    if "associated" in cd:
        payload: Any = TupleTypeName.of(*((a.get("label", ""), parse_type(a["type"])) for a in cd["associated"]))
    else:
        payload = cd.get("value")
    builder = EnumerationCaseSpec.builder(cd["name"], payload)
    if "doc" in cd:
        builder.add_doc(_text(cd["doc"]))
    return builder.build()


_TYPE_KINDS = {kind.keyword: kind for kind in TypeKind}


def mk_type(md: MemberDoc) -> TypeSpec:
    builder = TypeSpec.Builder(_TYPE_KINDS[md["kind"]], md["name"])
    builder.add_modifiers(*_modifiers(md.get("modifiers")))
    builder.add_attributes(mk_attribute(a) for a in md.get("attributes", []))
    builder.add_type_variables(mk_type_variable(t) for t in md.get("type_variables", []))
    builder.add_super_types(parse_type(t) for t in md.get("super_types", []))
    if "doc" in md:
        builder.add_doc(_text(md["doc"]))
    if md.get("class_only", False):
        builder.constrain_to_class()
    for associated in md.get("associated_types", []):
        builder.add_associated_type(mk_type_variable(associated))
    for case in md.get("cases", []):
        builder.add_enum_case(mk_enum_case(case))
    builder.add_properties(mk_property(p) for p in md.get("properties", []))
    builder.add_properties(mk_subscript(s) for s in md.get("subscripts", []))
    for function in md.get("functions", []):
        if builder.kind is TypeKind.PROTOCOL and "body" not in function:
            function = {**function, "abstract": True}
        builder.add_function(mk_function(function))
    builder.add_types(mk_nested(t) for t in md.get("types", []))
    return builder.build()


def mk_type_alias(md: MemberDoc) -> TypeAliasSpec:
    builder = TypeAliasSpec.builder(md["name"], parse_type(md["type"]))
    builder.add_modifiers(*_modifiers(md.get("modifiers")))
    builder.add_type_variables(mk_type_variable(t) for t in md.get("type_variables", []))
    if "doc" in md:
        builder.add_doc(_text(md["doc"]))
    return builder.build()


def mk_extension(md: MemberDoc) -> ExtensionSpec:
    extended = parse_type(md["type"])
    if not isinstance(extended, DeclaredTypeName):
        raise ValueError(f"cannot extend {md['type']!r}")
    builder = ExtensionSpec.builder(extended)
    builder.add_modifiers(*_modifiers(md.get("modifiers")))
    builder.add_super_types(parse_type(t) for t in md.get("super_types", []))
    builder.add_conditional_constraints(mk_type_variable(t) for t in md.get("where", []))
    if "doc" in md:
        builder.add_doc(_text(md["doc"]))
    builder.add_properties(mk_property(p) for p in md.get("properties", []))
    builder.add_functions(mk_function(f) for f in md.get("functions", []))
    builder.add_types(mk_nested(t) for t in md.get("types", []))
    return builder.build()


def mk_nested(md: MemberDoc) -> TypeSpec | TypeAliasSpec:
    if md["kind"] == "typealias":
        return mk_type_alias(md)
    if md["kind"] in _TYPE_KINDS:
        return mk_type(md)
    raise ValueError(f"{md['kind']!r} cannot be nested in a type")


def mk_member(md: MemberDoc) -> FileMemberSpec:
    kind = md.get("kind")
    member: Member
    if kind in _TYPE_KINDS:
        member = mk_type(md)
    elif kind == "typealias":
        member = mk_type_alias(md)
    elif kind == "extension":
        member = mk_extension(md)
    elif kind == "function":
        member = mk_function(md)  # type: ignore[arg-type]
    elif kind == "property":
        member = mk_property(md)  # type: ignore[arg-type]
    else:
        raise ValueError(f"unknown member kind {kind!r}")
    builder = FileMemberSpec.builder(member)
    if "guard" in md:
        builder.add_guard("%L", md["guard"])
    return builder.build()


def mk_file(fd: FileDoc) -> FileSpec:
    builder = FileSpec.builder(fd["module"], fd["file"])
    if "comment" in fd:
        builder.add_comment("%L", fd["comment"])
    if "indent" in fd:
        builder.indent(fd["indent"])
    builder.add_imports(mk_import(i) for i in fd.get("imports", []))
    for member in fd.get("members", []):
        builder.add_member(mk_member(member))
    return builder.build()


# ---------- documents ----------

def load_document(path: str | PathLike[str]) -> FileDoc:
    """Read a JSON (``.json``) or YAML (anything else) document."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    for key in ("module", "file"):
        if key not in data:
            raise ValueError(f"{path}: missing required key {key!r}")
    return data  # type: ignore[return-value]


def load_file(path: str | PathLike[str]) -> FileSpec:
    return mk_file(load_document(path))
