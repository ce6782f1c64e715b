import pytest

from swiftpoet.attribute_spec import DISCARDABLE_RESULT, ESCAPING
from swiftpoet.function_spec import FunctionSpec
from swiftpoet.modifier import Modifier
from swiftpoet.parameter_spec import ParameterSpec
from swiftpoet.type_name import INT, STRING, VOID, DeclaredTypeName, FunctionTypeName, TypeVariableName
from swiftpoet.type_spec import TypeSpec

LOCAL_INT = DeclaredTypeName.type_name(".Int")


def test_simple_function() -> None:
    function = (
        FunctionSpec.builder("add")
        .add_parameter("a", INT)
        .add_parameter("b", INT, label="to")
        .returns(INT)
        .add_statement("return a + b")
        .build()
    )
    assert str(function) == (
        "func add(a: Swift.Int, to b: Swift.Int) -> Swift.Int {\n"
        "  return a + b\n"
        "}\n"
    )


def test_void_return_is_omitted() -> None:
    function = FunctionSpec.builder("run").returns(VOID).build()
    assert str(function) == "func run() {\n}\n"


def test_effects() -> None:
    function = FunctionSpec.builder("load").async_().throws().returns(STRING).add_statement("fatalError()").build()
    assert str(function) == "func load() async throws -> Swift.String {\n  fatalError()\n}\n"


def test_modifiers_and_attributes() -> None:
    function = (
        FunctionSpec.builder("reset")
        .add_modifiers(Modifier.STATIC, Modifier.PUBLIC)
        .add_attribute(DISCARDABLE_RESULT)
        .returns(LOCAL_INT)
        .add_statement("return 0")
        .build()
    )
    assert str(function) == "@discardableResult\npublic static func reset() -> Int {\n  return 0\n}\n"


def test_internal_is_implicit() -> None:
    function = FunctionSpec.builder("f").add_modifiers(Modifier.INTERNAL).build()
    assert str(function) == "func f() {\n}\n"


def test_conflicting_access_modifiers() -> None:
    with pytest.raises(ValueError, match="must contain none or only one of"):
        FunctionSpec.builder("reset").add_modifiers(Modifier.PUBLIC, Modifier.PRIVATE).build()


def test_modifier_targets() -> None:
    with pytest.raises(ValueError, match="unexpected modifier lazy for function"):
        FunctionSpec.builder("f").add_modifiers(Modifier.LAZY)


def test_parameters() -> None:
    closure = ParameterSpec.builder("done", FunctionTypeName.get()).add_attribute(ESCAPING).build()
    values = ParameterSpec.builder("values", LOCAL_INT, label="_").variadic().build()
    counter = ParameterSpec.builder("counter", LOCAL_INT, Modifier.INOUT).build()
    limit = ParameterSpec.builder("limit", LOCAL_INT).default_value("%L", 10).build()
    function = FunctionSpec.builder("f").add_parameters([closure, values, counter, limit]).build()
    assert str(function) == (
        "func f(done: @escaping () -> Swift.Void, _ values: Int..., counter: inout Int, limit: Int = 10) {\n"
        "}\n"
    )


def test_keyword_names_are_escaped() -> None:
    function = FunctionSpec.builder("default").add_parameter("in", LOCAL_INT, label="for").build()
    assert str(function) == "func `default`(`for` `in`: Int) {\n}\n"


def test_long_parameter_lists_wrap() -> None:
    builder = FunctionSpec.builder("configure")
    for index in range(8):
        builder.add_parameter(f"parameterNumber{index}", LOCAL_INT)
    output = str(builder.build())
    first_line, second_line = output.split("\n")[:2]
    assert len(first_line) <= 100
    assert second_line.startswith("    parameterNumber")
    assert all(not line.endswith(" ") for line in output.split("\n"))


def test_generic_function() -> None:
    element = TypeVariableName.type_variable("Element", DeclaredTypeName.type_name(".Sortable"))
    function = (
        FunctionSpec.builder("sorted")
        .add_type_variable(element)
        .add_parameter("items", element, label="_")
        .returns(element)
        .add_statement("return items")
        .build()
    )
    assert str(function) == (
        "func sorted<Element : Sortable>(_ items: Element) -> Element {\n"
        "  return items\n"
        "}\n"
    )


def test_generic_function_with_where_clause() -> None:
    sortable = DeclaredTypeName.type_name(".Sortable")
    printable = DeclaredTypeName.type_name(".Printable")
    element = TypeVariableName.type_variable("Element", sortable, printable)
    function = FunctionSpec.builder("sort").add_type_variable(element).build()
    assert str(function) == "func sort<Element>() where Element : Sortable, Element : Printable {\n}\n"


def test_constructors() -> None:
    init = FunctionSpec.constructor_builder().add_parameter("value", LOCAL_INT).add_statement("self.value = value").build()
    assert str(init) == "init(value: Int) {\n  self.value = value\n}\n"
    failable = FunctionSpec.constructor_builder().failable().add_statement("return nil").build()
    assert str(failable) == "init?() {\n  return nil\n}\n"
    assert init.is_constructor


def test_only_constructors_are_failable() -> None:
    with pytest.raises(ValueError, match="only constructors can be failable"):
        FunctionSpec.builder("f").failable().build()


def test_deinitializer() -> None:
    deinit = FunctionSpec.deinitializer_builder().add_statement("close()").build()
    assert str(deinit) == "deinit {\n  close()\n}\n"
    with pytest.raises(ValueError, match="deinit cannot have parameters"):
        FunctionSpec.deinitializer_builder().add_parameter("x", INT).build()


def test_accessors() -> None:
    getter = FunctionSpec.getter_builder().add_statement("return 1").build()
    assert str(getter) == "get {\n  return 1\n}\n"
    setter = FunctionSpec.setter_builder().add_parameter("newCount", INT).add_statement("count = newCount").build()
    assert str(setter) == "set(newCount) {\n  count = newCount\n}\n"
    with pytest.raises(ValueError, match="set must have zero or one parameter"):
        FunctionSpec.setter_builder().add_parameter("a", INT).add_parameter("b", INT).build()
    with pytest.raises(ValueError, match="get cannot have parameters"):
        FunctionSpec.getter_builder().add_parameter("a", INT).build()


def test_operators() -> None:
    vector = DeclaredTypeName.type_name(".Vector")
    function = (
        FunctionSpec.operator_builder("+")
        .add_modifiers(Modifier.STATIC)
        .add_parameter("lhs", vector)
        .add_parameter("rhs", vector)
        .returns(vector)
        .add_statement("return Vector(lhs.x + rhs.x)")
        .build()
    )
    assert function.is_operator
    assert str(function) == (
        "static func +(lhs: Vector, rhs: Vector) -> Vector {\n"
        "  return Vector(lhs.x + rhs.x)\n"
        "}\n"
    )


def test_abstract_function() -> None:
    function = FunctionSpec.builder("draw").abstract().build()
    assert function.is_abstract
    assert str(function) == "func draw()"
    with pytest.raises(ValueError, match="abstract function draw cannot have code"):
        FunctionSpec.builder("draw").abstract().add_statement("x()").build()


def test_doc_and_control_flow() -> None:
    function = (
        FunctionSpec.builder("check")
        .add_doc("Checks the value.\n")
        .add_parameter("value", LOCAL_INT)
        .begin_control_flow("if", "value > %L", 0)
        .add_comment("positive")
        .add_statement("return")
        .end_control_flow()
        .build()
    )
    assert str(function) == (
        "/**\n"
        " * Checks the value.\n"
        " */\n"
        "func check(value: Int) {\n"
        "  if value > 0 {\n"
        "    // positive\n"
        "    return\n"
        "  }\n"
        "}\n"
    )


def test_named_code() -> None:
    function = FunctionSpec.builder("f").add_named_code("%name:L()\n", {"name": "go"}).build()
    assert str(function) == "func f() {\n  go()\n}\n"


def test_local_types() -> None:
    helper = TypeSpec.struct_builder("Helper").build()
    function = FunctionSpec.builder("f").add_local_type(helper).add_statement("_ = Helper()").build()
    assert str(function) == "func f() {\n\n  struct Helper {\n  }\n\n  _ = Helper()\n}\n"


def test_to_builder_round_trip() -> None:
    function = (
        FunctionSpec.builder("f")
        .add_doc("Doc.\n")
        .add_modifiers(Modifier.PUBLIC)
        .add_parameter("x", INT)
        .returns(INT)
        .throws()
        .add_statement("return x")
        .build()
    )
    assert function.to_builder().build() == function
    abstract = FunctionSpec.builder("g").abstract().build()
    assert abstract.to_builder().build().is_abstract


def test_tags() -> None:
    function = FunctionSpec.builder("f").tag("origin", key="source").tag(3).build()
    assert function.tag("source") == "origin"
    assert function.tag(int) == 3
    assert function.tag("missing") is None
