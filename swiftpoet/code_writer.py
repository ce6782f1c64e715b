"""The emission engine: indentation, comments, statements and type-name resolution.

A ``CodeWriter`` renders exactly one spec tree. Files are rendered twice: once
into a ``NullSink`` to learn which types get referenced (``collect_imports``),
then for real with the collected import table. Each pass gets a fresh writer so
no scope or import state leaks between them.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Collection, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .any_type_spec import AnyTypeSpec, ExternalTypeSpec
from .code_block import CodeBlock
from .line_wrapper import COLUMN_LIMIT, LineWrapper, NullSink, Sink
from .modifier import Modifier
from .type_name import Constraint, DeclaredTypeName, TypeVariableName
from .util import string_literal_with_quotes

if TYPE_CHECKING:
    from .attribute_spec import AttributeSpec

logger = logging.getLogger(__name__)

DEFAULT_INDENT = "  "
NO_MODULE = ""


@dataclass(frozen=True)
class CollectedImports:
    """What the collection pass learned: simple name -> chosen type, and every module touched."""

    imported_types: Mapping[str, DeclaredTypeName] = field(default_factory=dict)
    referenced_modules: frozenset[str] = frozenset()


def requires_where(type_variables: Sequence[TypeVariableName]) -> bool:
    return (
        len(type_variables) > 2
        or any("." in tv.name for tv in type_variables)
        or any(len(tv.bounds) > 1 for tv in type_variables)
        or any(b.constraint is Constraint.SAME_TYPE for tv in type_variables for b in tv.bounds)
    )


class CodeWriter:
    def __init__(
        self,
        out: Sink,
        indent: str = DEFAULT_INDENT,
        imported_types: Mapping[str, DeclaredTypeName] | None = None,
        imported_modules: Collection[str] = frozenset(),
        column_limit: int = COLUMN_LIMIT,
    ) -> None:
        self._out = LineWrapper(out, indent, column_limit)
        self._indent = indent
        self.imported_types: dict[str, DeclaredTypeName] = dict(imported_types or {})
        self.imported_modules: frozenset[str] = frozenset(imported_modules)
        self._indent_level = 0

        self._doc = False
        self._comment = False
        self._module_stack: list[str] = [NO_MODULE]
        self._type_spec_stack: list[AnyTypeSpec] = []
        self._importable_types: dict[str, DeclaredTypeName] = {}
        self._local_types: dict[str, DeclaredTypeName] = {}
        self._referenced_types: dict[str, DeclaredTypeName] = {}
        self._trailing_newline = False

        # -1 outside a statement; otherwise the number of lines the statement has spanned.
        self._statement_line = -1

    def __enter__(self) -> CodeWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._out.close()

    # ---------- import collection ----------

    @classmethod
    def collect_imports(
        cls,
        emit_step: Callable[[CodeWriter], object],
        indent: str = DEFAULT_INDENT,
        imported_modules: Collection[str] = frozenset(),
    ) -> CollectedImports:
        with cls(NullSink(), indent, imported_modules=imported_modules) as collector:
            emit_step(collector)
        collected = collector.collected_imports()
        logger.debug(
            "collected %d importable types from %d referenced modules",
            len(collected.imported_types), len(collected.referenced_modules),
        )
        return collected

    def collected_imports(self) -> CollectedImports:
        # Locally declared names always win so foreign types sharing them stay qualified.
        imported = {**self._importable_types, **self._local_types}
        modules = frozenset(t.module_name for t in self._referenced_types.values())
        return CollectedImports(imported, modules)

    # ---------- indentation and scopes ----------

    @property
    def indent_level(self) -> int:
        return self._indent_level

    @property
    def current_module(self) -> str:
        return self._module_stack[-1]

    def indent(self, levels: int = 1) -> CodeWriter:
        self._indent_level += levels
        return self

    def unindent(self, levels: int = 1) -> CodeWriter:
        if self._indent_level - levels < 0:
            raise ValueError(f"cannot unindent {levels} from {self._indent_level}")
        self._indent_level -= levels
        return self

    def push_module(self, name: str) -> CodeWriter:
        self._module_stack.append(name)
        return self

    def pop_module(self) -> CodeWriter:
        if len(self._module_stack) == 1:
            raise ValueError("module stack imbalance")
        self._module_stack.pop()
        return self

    def push_type(self, type_spec: AnyTypeSpec) -> CodeWriter:
        if not self._type_spec_stack and not isinstance(type_spec, ExternalTypeSpec):
            self._claim_local(DeclaredTypeName.of(self.current_module, type_spec.name))
        self._type_spec_stack.append(type_spec)
        return self

    def pop_type(self) -> CodeWriter:
        if not self._type_spec_stack:
            raise ValueError("type stack imbalance")
        self._type_spec_stack.pop()
        return self

    @contextmanager
    def declaration(self) -> Iterator[CodeWriter]:
        """Suspend any open statement while a nested declaration is emitted."""
        previous = self._statement_line
        self._statement_line = -1
        try:
            yield self
        finally:
            self._statement_line = previous

    # ---------- declarations ----------

    def emit_comment(self, code_block: CodeBlock) -> None:
        self._trailing_newline = True  # Force the '//' prefix for the first line.
        self._comment = True
        try:
            self.emit_code(code_block)
            self.emit("\n")
        finally:
            self._comment = False

    def emit_doc(self, doc: CodeBlock) -> None:
        if doc.is_empty():
            return
        self.emit("/**\n")
        self._doc = True
        try:
            self.emit_code(doc)
        finally:
            self._doc = False
        self.emit(" */\n")

    def emit_attributes(
        self,
        attributes: Iterable[AttributeSpec],
        separator: str = "\n",
        suffix: str = "\n",
    ) -> None:
        attributes = list(attributes)
        if not attributes:
            return
        for index, attribute in enumerate(attributes):
            if index > 0:
                self.emit(separator)
            attribute.emit(self)
        self.emit(suffix)

    def emit_modifiers(self, modifiers: Collection[Modifier], implicit_modifiers: Collection[Modifier] = frozenset()) -> None:
        """Emit ``modifiers`` in canonical order, leaving out the ones implied by context."""
        for modifier in Modifier:
            if modifier in modifiers and modifier not in implicit_modifiers:
                self.emit(modifier.keyword)
                self.emit(" ")

    def emit_type_variables(self, type_variables: Sequence[TypeVariableName]) -> bool:
        """Emit ``<T : Bound, U>``; returns True when the bounds must go to a where clause."""
        if not type_variables:
            return False
        needs_where = requires_where(type_variables)
        declared = [tv for tv in type_variables if "." not in tv.name]
        if not declared:
            return needs_where
        self.emit("<")
        for index, type_variable in enumerate(declared):
            if index > 0:
                self.emit(", ")
            self.emit_code("%L", type_variable.name)
            if not needs_where and len(type_variable.bounds) == 1:
                type_variable.bounds[0].emit(self)
        self.emit(">")
        return needs_where

    def emit_where_block(self, type_variables: Sequence[TypeVariableName], force_output: bool = False) -> None:
        if not type_variables:
            return
        if not force_output and not requires_where(type_variables):
            return
        first = True
        for type_variable in type_variables:
            for bound in type_variable.bounds:
                self.emit_code("%Wwhere " if first else ",%W")
                self.emit_code("%T", type_variable)
                bound.emit(self)
                first = False

    # ---------- code ----------

    def emit_code(self, code: CodeBlock | str, *args: Any, is_constant_context: bool = False) -> CodeWriter:
        if isinstance(code, str):
            code = CodeBlock.of(code, *args)
        arguments = iter(code.args)
        for part in code.format_parts:
            if part == "%L":
                self._emit_literal(next(arguments), is_constant_context)
            elif part == "%N":
                self.emit(next(arguments))
            elif part == "%S":
                string = next(arguments)
                if string is None:
                    self.emit("nil")
                else:
                    self.emit(string_literal_with_quotes(string, is_constant_context=is_constant_context))
            elif part == "%T":
                next(arguments).emit(self)
            elif part == "%%":
                self.emit("%")
            elif part == "%>":
                self.indent()
            elif part == "%<":
                self.unindent()
            elif part == "%[":
                if self._statement_line != -1:
                    raise ValueError("statement enter %[ followed by statement enter %[")
                self._statement_line = 0
            elif part == "%]":
                if self._statement_line == -1:
                    raise ValueError("statement exit %] has no matching statement enter %[")
                if self._statement_line > 0:
                    self.unindent(2)  # End a multi-line statement. Decrease the indentation level.
                self._statement_line = -1
            elif part == "%W":
                self._out.wrapping_space(self._indent_level + 2)
            else:
                self.emit(part)
        return self

    def _emit_literal(self, o: Any, is_constant_context: bool) -> None:
        from .property_spec import PropertySpec  # property_spec builds on this module

        if isinstance(o, AnyTypeSpec):
            o.emit(self)
        elif isinstance(o, PropertySpec):
            o.emit(self, frozenset())
        elif isinstance(o, CodeBlock):
            self.emit_code(o, is_constant_context=is_constant_context)
        elif isinstance(o, bool):
            self.emit("true" if o else "false")
        elif o is None:
            self.emit("nil")
        else:
            self.emit(str(o))

    def emit(self, s: str) -> CodeWriter:
        """Emit ``s``, indenting new lines and prefixing them inside docs and comments."""
        first = True
        for line in s.split("\n"):
            # Emit a newline character. Make sure blank lines in doc & comments look good.
            if not first:
                if (self._doc or self._comment) and self._trailing_newline:
                    self._emit_indentation()
                    self._out.append(" *" if self._doc else "//")
                self._out.append("\n")
                self._trailing_newline = True
                if self._statement_line != -1:
                    if self._statement_line == 0:
                        self.indent(2)  # Begin multiple-line statement. Increase the indentation level.
                    self._statement_line += 1
            first = False
            if not line:
                continue  # Don't indent empty lines.

            if self._trailing_newline:
                self._emit_indentation()
                if self._doc:
                    self._out.append(" * ")
                elif self._comment:
                    self._out.append("// ")

            self._out.append(line)
            self._trailing_newline = False
        return self

    def _emit_indentation(self) -> None:
        self._out.append(self._indent * self._indent_level)

    # ---------- name resolution ----------

    def lookup_name(self, type_name: DeclaredTypeName) -> str:
        """Return the shortest spelling of ``type_name`` valid at the current position.

        Tried in order: a name visible through the open type scopes (``Element``
        inside ``extension Observable``), the module being emitted, an explicitly
        imported module whose simple name is free or already ours, and finally the
        import table. Both of the last two fall back to the fully qualified name when
        another type already claimed the simple name.
        """
        # Every referenced type needs its module imported.
        self._referenced_types[type_name.canonical_name] = type_name

        if type_name.always_qualify:
            return type_name.canonical_name

        target = type_name.with_module(self.current_module) if not type_name.module_name else type_name

        # Find the shortest suffix of the name that resolves, through the open scopes, to the target.
        current: DeclaredTypeName | None = target
        nested: list[str] = []
        while current is not None:
            resolved = self._resolve(current.simple_name)
            if resolved is not None and resolved[0] == current:
                _, inside_scope = resolved
                # Inside a scope its members are visible directly.
                path = nested if inside_scope and nested else [current.simple_name, *nested]
                if current.module_name == self.current_module:
                    self._claim_local(DeclaredTypeName.of(self.current_module, path[0]))
                return ".".join(path)
            nested.insert(0, current.simple_name)
            current = current.enclosing_type_name()

        if target.module_name == self.current_module:
            self._claim_local(target.top_level_type_name())
            return ".".join(target.simple_names)

        # Will be imported, or qualified on a clash. Docs are not compiled, so they claim nothing.
        if not self._doc:
            self._importable_type(target)

        top_level = target.top_level_type_name()
        if target.module_name in self.imported_modules:
            claimed = self.imported_types.get(top_level.simple_name)
            if claimed is None or claimed == top_level:
                return ".".join(target.simple_names)

        return self._resolve_import(target)

    def _importable_type(self, type_name: DeclaredTypeName) -> None:
        if not type_name.module_name:
            return
        top_level = type_name.top_level_type_name()
        self._importable_types.setdefault(top_level.simple_name, top_level)

    def _claim_local(self, type_name: DeclaredTypeName) -> None:
        self._local_types.setdefault(type_name.simple_name, type_name)

    def _resolve_import(self, type_name: DeclaredTypeName) -> str:
        top_level = type_name.top_level_type_name()
        if self.imported_types.get(top_level.simple_name) == top_level:
            return ".".join(type_name.simple_names)
        return type_name.canonical_name

    def _resolve(self, simple_name: str) -> tuple[DeclaredTypeName, bool] | None:
        """Resolve ``simple_name`` against the open scopes, innermost first.

        Returns the resolved name and whether it names an open scope itself
        (as opposed to a type nested in one).
        """
        for depth in reversed(range(len(self._type_spec_stack))):
            type_spec = self._type_spec_stack[depth]
            if type_spec.name == simple_name:
                return self._stack_type_name(depth), True
            for visible_child in type_spec.type_specs:
                if visible_child.name == simple_name:
                    return self._stack_type_name(depth).nested_type(simple_name), False
        return None

    def _stack_type_name(self, depth: int) -> DeclaredTypeName:
        base = 0
        type_name: DeclaredTypeName | None = None
        for index in reversed(range(depth + 1)):
            type_spec = self._type_spec_stack[index]
            if isinstance(type_spec, ExternalTypeSpec):
                type_name = type_spec.type_name
                base = index + 1
                break
        if type_name is None:
            type_name = DeclaredTypeName.of(self.current_module, self._type_spec_stack[0].name)
            base = 1
        for type_spec in self._type_spec_stack[base:depth + 1]:
            type_name = type_name.nested_type(type_spec.name)
        return type_name


def render(emit_step: Callable[[CodeWriter], object], indent: str = DEFAULT_INDENT) -> str:
    """Render a single spec without import collection; foreign types stay fully qualified."""
    buffer = io.StringIO()
    with CodeWriter(buffer, indent) as writer:
        emit_step(writer)
    return buffer.getvalue()
