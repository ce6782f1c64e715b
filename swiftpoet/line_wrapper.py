from __future__ import annotations

from typing import Protocol

COLUMN_LIMIT = 100


class Sink(Protocol):
    def write(self, s: str, /) -> object: ...


class NullSink:
    """Discards everything; used by the import-collection pass."""

    def write(self, s: str, /) -> int:
        return len(s)


class LineWrapper:
    """Writes text to ``out``, turning wrapping spaces into newlines when a line overflows.

    A wrapping space is held back until the text following it is known: if that
    text fits before ``column_limit`` the space is written, otherwise a newline
    plus ``indent_level`` indents is written instead. A wrapping space directly
    followed by a newline (or by the end of output) is dropped, so no line ever
    ends in whitespace produced here.
    """

    def __init__(self, out: Sink, indent: str, column_limit: int = COLUMN_LIMIT) -> None:
        self._out = out
        self._indent = indent
        self._column_limit = column_limit
        self._closed = False
        self._buffer: list[str] = []
        self._column = 0
        # Indent level for the pending wrapping space, or -1 when nothing is pending.
        self._indent_level = -1

    def __enter__(self) -> LineWrapper:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def append(self, s: str) -> None:
        self._check_open()
        if self._indent_level != -1:
            newline = s.find("\n")
            if newline == -1 and self._column + len(s) <= self._column_limit:
                self._buffer.append(s)
                self._column += len(s)
                return
            if newline == 0 and not self._buffer:
                self._flush(False, drop_space=True)
            else:
                self._flush(newline == -1 or self._column + newline > self._column_limit)

        self._out.write(s)
        last_newline = s.rfind("\n")
        if last_newline != -1:
            self._column = len(s) - last_newline - 1
        else:
            self._column += len(s)

    def wrapping_space(self, indent_level: int) -> None:
        self._check_open()
        if self._indent_level != -1:
            if not self._buffer:
                # Adjacent wrapping spaces collapse into one.
                self._indent_level = indent_level
                return
            self._flush(False)
        self._column += 1
        self._indent_level = indent_level

    def close(self) -> None:
        if self._closed:
            return
        if self._indent_level != -1:
            self._flush(False, drop_space=not self._buffer)
        self._closed = True

    def _flush(self, wrap: bool, drop_space: bool = False) -> None:
        pending = "".join(self._buffer)
        if wrap:
            self._out.write("\n" + self._indent * self._indent_level)
            self._column = self._indent_level * len(self._indent) + len(pending)
        elif not drop_space:
            self._out.write(" ")
        self._out.write(pending)
        self._buffer.clear()
        self._indent_level = -1

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("line wrapper is closed")
