import pytest

from swiftpoet.function_spec import FunctionSpec
from swiftpoet.modifier import Modifier
from swiftpoet.property_spec import PropertySpec
from swiftpoet.type_name import DOUBLE, EQUATABLE, ERROR, STRING, DeclaredTypeName, TupleTypeName, TypeVariableName
from swiftpoet.type_spec import TypeKind, TypeSpec

LOCAL_INT = DeclaredTypeName.type_name(".Int")
SHAPE = DeclaredTypeName.type_name(".Shape")


def test_struct() -> None:
    point = (
        TypeSpec.struct_builder("Point")
        .add_modifiers(Modifier.PUBLIC)
        .add_super_type(EQUATABLE)
        .add_property("x", LOCAL_INT)
        .add_mutable_property("y", LOCAL_INT)
        .add_function(FunctionSpec.builder("length").returns(LOCAL_INT).add_statement("return x + y").build())
        .add_function(
            FunctionSpec.constructor_builder()
            .add_parameter("x", LOCAL_INT)
            .add_parameter("y", LOCAL_INT)
            .add_statement("self.x = x")
            .add_statement("self.y = y")
            .build()
        )
        .build()
    )
    assert point.kind is TypeKind.STRUCT
    assert str(point) == (
        "public struct Point : Swift.Equatable {\n"
        "\n"
        "  let x: Int\n"
        "  var y: Int\n"
        "\n"
        "  init(x: Int, y: Int) {\n"
        "    self.x = x\n"
        "    self.y = y\n"
        "  }\n"
        "\n"
        "  func length() -> Int {\n"
        "    return x + y\n"
        "  }\n"
        "\n"
        "}\n"
    )


def test_empty_types() -> None:
    assert str(TypeSpec.class_builder("Empty").build()) == "class Empty {\n}\n"
    assert str(TypeSpec.actor_builder("Counter").build()) == "actor Counter {\n}\n"


def test_doc_and_attributes() -> None:
    spec = TypeSpec.struct_builder("P").add_doc("A point.\n").add_attribute("available", "iOS 13", "*").build()
    assert str(spec) == "/**\n * A point.\n */\n@available(iOS 13, *)\nstruct P {\n}\n"


def test_enum_with_raw_values() -> None:
    spec = (
        TypeSpec.enum_builder("Direction")
        .add_super_type(STRING)
        .add_enum_case("north", "N")
        .add_enum_case("south")
        .add_enum_case("default", 3)
        .build()
    )
    assert str(spec) == (
        "enum Direction : Swift.String {\n"
        "\n"
        '  case north = "N"\n'
        "  case south\n"
        "  case `default` = 3\n"
        "\n"
        "}\n"
    )


def test_enum_with_associated_values() -> None:
    spec = (
        TypeSpec.enum_builder("Outcome")
        .add_enum_case("success", TupleTypeName.of(("value", LOCAL_INT)))
        .add_enum_case("failure", ERROR)
        .build()
    )
    assert str(spec) == (
        "enum Outcome {\n"
        "\n"
        "  case success(value: Int)\n"
        "  case failure(Swift.Error)\n"
        "\n"
        "}\n"
    )


def test_enum_case_rules() -> None:
    with pytest.raises(ValueError, match="case already exists: north"):
        TypeSpec.enum_builder("Direction").add_enum_case("north").add_enum_case("north")
    with pytest.raises(ValueError, match="Point is not an enum"):
        TypeSpec.struct_builder("Point").add_enum_case("north")
    with pytest.raises(TypeError, match="invalid enum case constant"):
        TypeSpec.enum_builder("Flag").add_enum_case("on", True)


def test_protocol() -> None:
    spec = (
        TypeSpec.protocol_builder("Drawable")
        .constrain_to_class()
        .add_super_type(SHAPE)
        .add_associated_type(TypeVariableName.type_variable("Unit", EQUATABLE))
        .add_property(PropertySpec.abstract_builder("area", DOUBLE).abstract_getter().build())
        .add_function(FunctionSpec.builder("draw").abstract().build())
        .add_function(FunctionSpec.builder("scale").add_parameter("factor", DOUBLE).abstract().build())
        .build()
    )
    assert str(spec) == (
        "protocol Drawable : class, Shape {\n"
        "\n"
        "  associatedtype Unit : Swift.Equatable\n"
        "\n"
        "  var area: Swift.Double { get }\n"
        "\n"
        "  func draw()\n"
        "  func scale(factor: Swift.Double)\n"
        "\n"
        "}\n"
    )


def test_protocol_rules() -> None:
    with pytest.raises(ValueError, match="requires abstract functions, draw has a body"):
        TypeSpec.protocol_builder("Drawable").add_function(FunctionSpec.builder("draw").build())
    with pytest.raises(ValueError, match="it cannot contain nested types"):
        TypeSpec.protocol_builder("Drawable").add_type(TypeSpec.struct_builder("Inner").build())
    with pytest.raises(ValueError, match="Point is not a protocol"):
        TypeSpec.struct_builder("Point").constrain_to_class()
    with pytest.raises(ValueError, match="only protocols can have associated types"):
        TypeSpec.class_builder("Box").add_associated_type(TypeVariableName.type_variable("T"))


def test_nested_types_resolve_through_enclosing_scopes() -> None:
    inner = (
        TypeSpec.class_builder("Inner")
        .add_property("parent", DeclaredTypeName.type_name(".Outer"))
        .add_property("sibling", DeclaredTypeName.type_name(".Outer.Other"))
        .build()
    )
    outer = TypeSpec.class_builder("Outer").add_type(inner).add_type(TypeSpec.struct_builder("Other").build()).build()
    assert str(outer) == (
        "class Outer {\n"
        "\n"
        "  class Inner {\n"
        "\n"
        "    let parent: Outer\n"
        "    let sibling: Other\n"
        "\n"
        "  }\n"
        "\n"
        "  struct Other {\n"
        "  }\n"
        "\n"
        "}\n"
    )


def test_three_type_variables_always_use_where() -> None:
    spec = (
        TypeSpec.struct_builder("Triple")
        .add_type_variables(TypeVariableName.type_variable(name, SHAPE) for name in ("A", "B", "C"))
        .build()
    )
    assert str(spec) == "struct Triple<A, B, C> where A : Shape, B : Shape, C : Shape {\n}\n"


def test_generic_class_with_inline_bound() -> None:
    spec = TypeSpec.class_builder("Box").add_type_variable(TypeVariableName.type_variable("T", SHAPE)).build()
    assert str(spec) == "class Box<T : Shape> {\n}\n"


def test_super_types_are_deduplicated() -> None:
    spec = TypeSpec.struct_builder("P").add_super_types([EQUATABLE, EQUATABLE]).build()
    assert spec.super_types == (EQUATABLE,)


def test_conflicting_access_modifiers() -> None:
    with pytest.raises(ValueError, match="must contain none or only one of"):
        TypeSpec.class_builder("C").add_modifiers(Modifier.PUBLIC, Modifier.OPEN).build()


def test_to_builder_round_trip() -> None:
    spec = (
        TypeSpec.struct_builder("Point")
        .add_doc("A point.\n")
        .add_property("x", LOCAL_INT)
        .add_type(TypeSpec.enum_builder("Axis").add_enum_case("x").build())
        .build()
    )
    assert spec.to_builder().build() == spec
