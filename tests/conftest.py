from __future__ import annotations

from typing import Callable

import pytest

_SIMPLE_ESCAPES = {
    "0": "\0",
    "\\": "\\",
    "t": "\t",
    "n": "\n",
    "r": "\r",
    '"': '"',
    "'": "'",
}


def decode_swift_literal(literal: str) -> str:
    """Decode a Swift string literal the way the Swift lexer reads it.

    Handles standard, raw (``#"..."#``) and multi-line (``\"\"\"``) literals,
    the simple escapes and ``\\u{...}``. Anything the lexer would reject, such as
    an early closing delimiter or an interpolation, raises ``ValueError``.
    """
    hashes = len(literal) - len(literal.lstrip("#"))
    body = literal[hashes:]
    pounds = "#" * hashes
    escape = "\\" + pounds

    if body.startswith('"""'):
        if not body.startswith('"""\n'):
            raise ValueError(f"multi-line literal must start with a newline: {literal!r}")
        closing = '"""' + pounds
        multiline = True
        i = 4
    elif body.startswith('"'):
        closing = '"' + pounds
        multiline = False
        i = 1
    else:
        raise ValueError(f"not a string literal: {literal!r}")

    chars: list[str] = []
    while True:
        if i >= len(body):
            raise ValueError(f"unterminated literal: {literal!r}")
        if body.startswith(closing, i):
            if i + len(closing) != len(body):
                raise ValueError(f"literal closed early: {literal!r}")
            break
        if body.startswith(escape, i):
            i += len(escape)
            c = body[i]
            if c == "(":
                raise ValueError(f"unexpected interpolation: {literal!r}")
            if c == "u":
                end = body.index("}", i)
                chars.append(chr(int(body[i + 2:end], 16)))
                i = end + 1
            else:
                chars.append(_SIMPLE_ESCAPES[c])
                i += 1
            continue
        c = body[i]
        if c in "\r\n" and not multiline:
            raise ValueError(f"line break in a single-line literal: {literal!r}")
        chars.append(c)
        i += 1

    text = "".join(chars)
    if multiline:
        if not text.endswith("\n"):
            raise ValueError(f"closing delimiter must start a line: {literal!r}")
        text = text[:-1]
    return text


@pytest.fixture(scope="session")
def decode_literal() -> Callable[[str], str]:
    return decode_swift_literal
