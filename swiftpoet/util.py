"""Literal quoting and identifier escaping for Swift source text.

Everything here is a pure function over strings; the tables are process-wide
read-only constants.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Collection, Iterable
from typing import Any

# Reserved words that must be back-ticked when used as identifiers.
KEYWORDS: frozenset[str] = frozenset({
    # declarations
    "associatedtype", "class", "deinit", "enum", "extension", "fileprivate",
    "func", "import", "init", "inout", "internal", "let", "open", "operator",
    "private", "protocol", "public", "static", "struct", "subscript",
    "typealias", "var",
    # statements
    "break", "case", "continue", "default", "defer", "do", "else",
    "fallthrough", "for", "guard", "if", "in", "repeat", "return", "switch",
    "where", "while",
    # expressions and types
    "as", "catch", "false", "is", "nil", "rethrows", "super", "self", "Self",
    "throw", "throws", "true", "try",
    # member names that clash with metatype syntax
    "Type",
})

_START_CATEGORIES = frozenset({"Lu", "Ll", "Lt", "Lm", "Lo", "Nl"})
_PART_CATEGORIES = _START_CATEGORIES | {"Mn", "Mc", "Nd", "Pc"}

_ESCAPES: dict[str, str] = {
    "\b": "\\u{8}",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    '"': '\\"',
    "'": "\\'",
    "\\": "\\\\",
}


def is_identifier_start(ch: str) -> bool:
    return ch == "_" or unicodedata.category(ch) in _START_CATEGORIES


def is_identifier_part(ch: str) -> bool:
    return ch == "_" or unicodedata.category(ch) in _PART_CATEGORIES


def is_identifier(value: str) -> bool:
    if len(value) > 2 and value.startswith("`") and value.endswith("`"):
        return True
    return bool(value) and is_identifier_start(value[0]) and all(is_identifier_part(c) for c in value[1:])


def is_keyword(value: str) -> bool:
    return value in KEYWORDS


def is_iso_control(ch: str) -> bool:
    code = ord(ch)
    return code <= 0x1F or 0x7F <= code <= 0x9F


def escape_if_keyword(value: str) -> str:
    return f"`{value}`" if is_keyword(value) else value


def escape_if_not_identifier(value: str) -> str:
    if not value or is_identifier(value):
        return value
    return f"`{value}`"


def escape_if_necessary(value: str) -> str:
    return escape_if_keyword(escape_if_not_identifier(value))


def escape_keywords(canonical_name: str) -> str:
    """Back-tick every dotted component of ``canonical_name`` that is a keyword."""
    return ".".join(escape_if_keyword(part) for part in canonical_name.split("."))


def character_literal_without_single_quotes(ch: str) -> str:
    escaped = _ESCAPES.get(ch)
    if escaped is not None:
        return escaped
    if is_iso_control(ch):
        return f"\\u{{{ord(ch):x}}}"
    return ch


def _max_hashes_following(value: str, pattern: str) -> int:
    longest = 0
    found = value.find(pattern)
    while found != -1:
        end = found + len(pattern)
        run = len(value[end:]) - len(value[end:].lstrip("#"))
        longest = max(longest, run)
        found = value.find(pattern, found + 1)
    return longest


def _raw_delimiter(value: str, quote: str) -> str:
    # A backslash followed by as many hashes as the delimiter starts an escape
    # (`\#n`, `\#(`), so every backslash counts, not only interpolations.
    hashes = max(_max_hashes_following(value, quote), _max_hashes_following(value, "\\"))
    return "#" * (hashes + 1)


def _standard_multiline(value: str) -> str:
    parts: list[str] = []
    for i, ch in enumerate(value):
        if ch == '"' and value.startswith('"""', i):
            parts.append('\\"')
        elif ch == "\\":
            parts.append("\\\\")
        elif ch in "\n\t":
            parts.append(ch)
        else:
            parts.append(character_literal_without_single_quotes(ch) if is_iso_control(ch) else ch)
    return '"""\n' + "".join(parts) + '\n"""'


def string_literal_with_quotes(
    value: str,
    is_inside_raw_string: bool = False,
    is_constant_context: bool = False,
) -> str:
    """Quote ``value`` as a Swift string literal using the least noisy safe form.

    Multi-line values (outside constant contexts such as attribute arguments)
    become triple-quoted literals, raw (``#\"\"\"``) when they contain a
    backslash or a triple quote. Single-line values containing a quote or a
    backslash become raw ``#"..."#`` literals unless they hold control
    characters, which always force the standard escaped form.
    """
    if not is_constant_context and "\n" in value:
        needs_escapes = any(is_iso_control(c) and c not in "\n\t" for c in value)
        if needs_escapes or ('"""' not in value and "\\" not in value):
            return _standard_multiline(value)
        hashes = _raw_delimiter(value, '"""')
        return f'{hashes}"""\n{value}\n"""{hashes}'

    if is_inside_raw_string:
        return f'"""\n{value}\n"""'

    # `#"` followed by two more quotes would open a multi-line literal.
    opens_multiline = value == '"' or value.startswith('""')
    if value and ('"' in value or "\\" in value) and not opens_multiline and not any(is_iso_control(c) for c in value):
        hashes = _raw_delimiter(value, '"')
        return f'{hashes}"{value}"{hashes}'

    return '"' + "".join(character_literal_without_single_quotes(c) for c in value) + '"'


def require_none_or_one_of(modifiers: Collection[Any], *mutually_exclusive: Any) -> None:
    count = sum(1 for m in mutually_exclusive if m in modifiers)
    if count > 1:
        names = ", ".join(str(m) for m in mutually_exclusive)
        raise ValueError(f"modifiers {_describe(modifiers)} must contain none or only one of {names}")


def _describe(items: Iterable[Any]) -> str:
    return "[" + ", ".join(sorted(str(i) for i in items)) + "]"
