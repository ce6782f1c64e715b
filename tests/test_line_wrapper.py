import io

import pytest
from hypothesis import given, strategies as st

from swiftpoet.line_wrapper import LineWrapper

WRAP = None


def wrapped(parts: list[str | None], column_limit: int = 10) -> str:
    out = io.StringIO()
    with LineWrapper(out, "  ", column_limit) as wrapper:
        for part in parts:
            if part is WRAP:
                wrapper.wrapping_space(2)
            else:
                wrapper.append(part)
    return out.getvalue()


def test_wrap() -> None:
    assert wrapped(["abcde", WRAP, "fghij"]) == "abcde\n    fghij"


def test_no_wrap() -> None:
    assert wrapped(["abc", WRAP, "def"]) == "abc def"


def test_wrap_after_exact_fit() -> None:
    assert wrapped(["abcd", WRAP, "efghi"]) == "abcd efghi"
    assert wrapped(["abcde", WRAP, "efghi"]) == "abcde\n    efghi"


def test_space_before_newline_is_dropped() -> None:
    assert wrapped(["abc", WRAP, "\n", "def"]) == "abc\ndef"


def test_space_at_end_is_dropped() -> None:
    assert wrapped(["abc", WRAP]) == "abc"


def test_buffered_text_before_newline() -> None:
    assert wrapped(["abc", WRAP, "de", "\nxyz"]) == "abc de\nxyz"


def test_overlong_text_before_newline_wraps() -> None:
    assert wrapped(["abcdef", WRAP, "ghijk\nxy"]) == "abcdef\n    ghijk\nxy"


def test_consecutive_wrapping_spaces() -> None:
    assert wrapped(["a", WRAP, "b", WRAP, "c"]) == "a b c"
    assert wrapped(["a", WRAP, WRAP, "b"]) == "a b"
    assert wrapped(["a", WRAP, WRAP, "\n"]) == "a\n"


def test_append_after_close() -> None:
    wrapper = LineWrapper(io.StringIO(), "  ")
    wrapper.close()
    with pytest.raises(ValueError, match="closed"):
        wrapper.append("x")


words = st.text(alphabet="abcdefghij", min_size=1, max_size=12)


@given(st.lists(st.one_of(words, st.just(WRAP), st.just("\n")), max_size=40))
def test_no_trailing_whitespace_and_nothing_lost(parts: list[str | None]) -> None:
    output = wrapped(parts, column_limit=20)
    for line in output.split("\n"):
        assert not line.endswith(" ")
    text = [part for part in parts if part is not WRAP]
    assert "".join(output.split()) == "".join("".join(text).split())
