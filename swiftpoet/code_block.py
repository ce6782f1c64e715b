"""Format blocks: text fragments interleaved with typed placeholders.

Placeholders that take an argument:

- ``%L`` literal: emitted as-is; specs and nested blocks emit themselves.
- ``%N`` name: a string, or the name of a parameter/property/function/type spec.
- ``%S`` string: quoted and escaped as a Swift string literal (``None`` is ``nil``).
- ``%T`` type: a ``TypeName`` (or a type spec), shortened against scope and imports.

Placeholders without an argument:

- ``%%`` a literal percent sign.
- ``%>`` / ``%<`` increase / decrease the indentation level.
- ``%[`` / ``%]`` open / close a statement; continuation lines get two extra levels.
- ``%W`` a space that becomes a line break when the line would overflow.

Arguments are consumed left to right, by position (``%2L``) or by name
(``%count:L`` with ``add_named``); the counts must match exactly.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .any_type_spec import AnyTypeSpec
from .type_name import DeclaredTypeName, TypeName

_NO_ARG_PLACEHOLDERS = "%<>[]W"
_NAMED_ARGUMENT = re.compile(r"%([\w_]+):(\w)")
_LOWERCASE = re.compile(r"[a-z]+[\w_]*")


def _arg_to_name(o: Any) -> str:
    if isinstance(o, str):
        return o
    if isinstance(o, TypeName):
        raise TypeError(f"expected name but was type {o!r}")
    name = getattr(o, "parameter_name", None) or getattr(o, "name", None)
    if isinstance(name, str):
        return name
    raise TypeError(f"expected name but was {o!r}")


def _arg_to_string(o: Any) -> str | None:
    return None if o is None else str(o)


def _arg_to_type(o: Any) -> TypeName:
    if isinstance(o, TypeName):
        return o
    if isinstance(o, AnyTypeSpec):
        return DeclaredTypeName(("", o.name))
    raise TypeError(f"expected type but was {o!r}")


def _escape_percent(text: str) -> str:
    return text.replace("%", "%%")


@dataclass(frozen=True)
class CodeBlock:
    format_parts: tuple[str, ...] = ()
    args: tuple[Any, ...] = ()

    @classmethod
    def of(cls, format: str, *args: Any) -> CodeBlock:
        return CodeBlock.Builder().add(format, *args).build()

    @staticmethod
    def builder() -> CodeBlock.Builder:
        return CodeBlock.Builder()

    def is_empty(self) -> bool:
        return not self.format_parts

    def to_builder(self) -> CodeBlock.Builder:
        builder = CodeBlock.Builder()
        builder.format_parts.extend(self.format_parts)
        builder.args.extend(self.args)
        return builder

    def __str__(self) -> str:
        from .code_writer import render  # code_writer depends on this module

        return render(lambda out: out.emit_code(self))

    class Builder:
        def __init__(self) -> None:
            self.format_parts: list[str] = []
            self.args: list[Any] = []

        def is_empty(self) -> bool:
            return not self.format_parts

        def add_named(self, format: str, arguments: Mapping[str, Any]) -> CodeBlock.Builder:
            for argument in arguments:
                if not _LOWERCASE.fullmatch(argument):
                    raise ValueError(f"argument {argument!r} must start with a lowercase character")

            p = 0
            while p < len(format):
                next_p = format.find("%", p)
                if next_p == -1:
                    self.format_parts.append(format[p:])
                    break
                if next_p != p:
                    self.format_parts.append(format[p:next_p])
                    p = next_p

                match = _NAMED_ARGUMENT.match(format, p)
                if match is not None:
                    argument_name, format_char = match.group(1), match.group(2)
                    if argument_name not in arguments:
                        raise ValueError(f"missing named argument for %{argument_name}")
                    self._add_argument(format, format_char, arguments[argument_name])
                    self.format_parts.append("%" + format_char)
                    p = match.end()
                else:
                    if p + 1 >= len(format):
                        raise ValueError(f"dangling % at end of {format!r}")
                    if format[p + 1] not in _NO_ARG_PLACEHOLDERS:
                        raise ValueError(f"unknown format %{format[p + 1]} at {p + 1} in {format!r}")
                    self.format_parts.append(format[p:p + 2])
                    p += 2
            return self

        def add(self, format: str | CodeBlock, *args: Any) -> CodeBlock.Builder:
            if isinstance(format, CodeBlock):
                if args:
                    raise ValueError("a code block cannot take arguments")
                self.format_parts.extend(format.format_parts)
                self.args.extend(format.args)
                return self

            has_relative = False
            has_indexed = False
            relative_count = 0
            indexed_counts = [0] * len(args)

            p = 0
            while p < len(format):
                if format[p] != "%":
                    next_p = format.find("%", p + 1)
                    if next_p == -1:
                        next_p = len(format)
                    self.format_parts.append(format[p:next_p])
                    p = next_p
                    continue

                p += 1  # '%'
                index_start = p
                while True:
                    if p >= len(format):
                        raise ValueError(f"dangling format characters in {format!r}")
                    c = format[p]
                    p += 1
                    if c not in "0123456789":
                        break
                index_end = p - 1

                if c in _NO_ARG_PLACEHOLDERS:
                    if index_start != index_end:
                        raise ValueError("%%, %>, %<, %[, %], and %W may not have an index")
                    self.format_parts.append("%" + c)
                    continue

                if index_start < index_end:
                    index = int(format[index_start:index_end]) - 1
                    has_indexed = True
                    if args:
                        indexed_counts[index % len(args)] += 1
                else:
                    index = relative_count
                    has_relative = True
                    relative_count += 1

                if not 0 <= index < len(args):
                    raise ValueError(
                        f"index {index + 1} for {format[index_start - 1:index_end + 1]!r} "
                        f"not in range (received {len(args)} arguments)"
                    )
                if has_indexed and has_relative:
                    raise ValueError("cannot mix indexed and positional parameters")

                self._add_argument(format, c, args[index])
                self.format_parts.append("%" + c)

            if has_relative and relative_count < len(args):
                raise ValueError(f"unused arguments: expected {relative_count}, received {len(args)}")
            if has_indexed:
                unused = [f"%{i + 1}" for i, count in enumerate(indexed_counts) if count == 0]
                if unused:
                    raise ValueError(f"unused argument{'s' if len(unused) > 1 else ''}: {', '.join(unused)}")
            if not has_relative and not has_indexed and args:
                raise ValueError(f"unused arguments: expected 0, received {len(args)}")
            return self

        def _add_argument(self, format: str, c: str, arg: Any) -> None:
            if c == "N":
                self.args.append(_arg_to_name(arg))
            elif c == "L":
                self.args.append(arg)
            elif c == "S":
                self.args.append(_arg_to_string(arg))
            elif c == "T":
                self.args.append(_arg_to_type(arg))
            else:
                raise ValueError(f"invalid format string: {format!r}")

        def add_statement(self, format: str, *args: Any) -> CodeBlock.Builder:
            self.add("%[")
            self.add(format, *args)
            self.add("\n%]")
            return self

        def add_comment(self, format: str, *args: Any) -> CodeBlock.Builder:
            return self.add("// " + format + "\n", *args)

        def begin_control_flow(self, control_flow_name: str, control_flow: str = "", *args: Any) -> CodeBlock.Builder:
            """Open ``name code {`` and indent; ``switch`` keeps its cases at the same level."""
            self._add_control_flow(control_flow_name, control_flow, args)
            if control_flow_name != "switch":
                self.indent()
            return self

        def next_control_flow(self, control_flow_name: str, control_flow: str = "", *args: Any) -> CodeBlock.Builder:
            self.unindent()
            self.add("} ")
            self._add_control_flow(control_flow_name, control_flow, args)
            self.indent()
            return self

        def _add_control_flow(self, control_flow_name: str, control_flow: str, args: tuple[Any, ...]) -> None:
            self.add(_escape_percent(control_flow_name))
            self.add(" " + control_flow if control_flow else "", *args)
            self.add(" {\n")

        def end_control_flow(self, control_flow_name: str = "") -> CodeBlock.Builder:
            if control_flow_name != "switch":
                self.unindent()
            self.add("}\n")
            return self

        def indent(self) -> CodeBlock.Builder:
            self.format_parts.append("%>")
            return self

        def unindent(self) -> CodeBlock.Builder:
            self.format_parts.append("%<")
            return self

        def clear(self) -> CodeBlock.Builder:
            self.format_parts.clear()
            self.args.clear()
            return self

        def build(self) -> CodeBlock:
            return CodeBlock(tuple(self.format_parts), tuple(self.args))


def join_to_code(
    blocks: Iterable[CodeBlock],
    separator: str = ", ",
    prefix: str = "",
    suffix: str = "",
) -> CodeBlock:
    """Join ``blocks``; the separator, prefix and suffix are format text, so ``",%W"`` wraps."""
    blocks = list(blocks)
    placeholders = separator.join(["%L"] * len(blocks))
    return CodeBlock.of(prefix + placeholders + suffix, *blocks)


# Body marker for declarations without an implementation; compare by identity.
ABSTRACT = CodeBlock()
