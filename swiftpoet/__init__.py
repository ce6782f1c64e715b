from .util import escape_if_necessary, string_literal_with_quotes, character_literal_without_single_quotes
from .name_allocator import NameAllocator
from .line_wrapper import COLUMN_LIMIT, LineWrapper
from .code_block import ABSTRACT, CodeBlock, join_to_code
from .code_writer import DEFAULT_INDENT, CodeWriter
from .modifier import Modifier
from .type_name import (
    TypeName, DeclaredTypeName, ParameterizedTypeName, TupleTypeName, FunctionTypeName,
    ComposedTypeName, GenericQualifiedTypeName, SelfTypeName, TypeVariableName, Bound, Constraint,
    SELF, OPTIONAL, IMPLICIT, ARRAY, DICTIONARY, SET, VOID, ANY, ANY_OBJECT, NEVER, ERROR,
    BOOL, STRING, CHARACTER, INT, UINT, FLOAT, DOUBLE, DATA, DATE, URL, UUID,
)
from .any_type_spec import AnyTypeSpec, ExternalTypeSpec
from .attribute_spec import AttributeSpec
from .parameter_spec import ParameterSpec
from .function_signature_spec import FunctionSignatureSpec
from .function_spec import FunctionSpec
from .property_spec import PropertySpec
from .enumeration_case_spec import EnumerationCaseSpec
from .type_spec import TypeKind, TypeSpec
from .type_alias_spec import TypeAliasSpec
from .extension_spec import ExtensionSpec
from .import_spec import ImportSpec
from .file_member_spec import FileMemberSpec
from .file_spec import FileSpec
from .loader import load_file, parse_type

__all__ = [
    # literals & names
    "escape_if_necessary", "string_literal_with_quotes", "character_literal_without_single_quotes",
    "NameAllocator",
    # emission
    "COLUMN_LIMIT", "LineWrapper", "ABSTRACT", "CodeBlock", "join_to_code", "DEFAULT_INDENT", "CodeWriter",
    # type names
    "TypeName", "DeclaredTypeName", "ParameterizedTypeName", "TupleTypeName", "FunctionTypeName",
    "ComposedTypeName", "GenericQualifiedTypeName", "SelfTypeName", "TypeVariableName", "Bound", "Constraint",
    "SELF", "OPTIONAL", "IMPLICIT", "ARRAY", "DICTIONARY", "SET", "VOID", "ANY", "ANY_OBJECT", "NEVER", "ERROR",
    "BOOL", "STRING", "CHARACTER", "INT", "UINT", "FLOAT", "DOUBLE", "DATA", "DATE", "URL", "UUID",
    # specs
    "Modifier", "AnyTypeSpec", "ExternalTypeSpec", "AttributeSpec", "ParameterSpec", "FunctionSignatureSpec",
    "FunctionSpec", "PropertySpec", "EnumerationCaseSpec", "TypeKind", "TypeSpec", "TypeAliasSpec",
    "ExtensionSpec", "ImportSpec", "FileMemberSpec", "FileSpec",
    # declarative input
    "load_file", "parse_type",
]
