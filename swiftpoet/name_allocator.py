from __future__ import annotations

from collections.abc import Hashable

from .util import is_identifier_part, is_identifier_start, is_keyword


def to_swift_identifier(suggestion: str) -> str:
    chars: list[str] = []
    for i, ch in enumerate(suggestion):
        if i == 0 and not is_identifier_start(ch) and is_identifier_part(ch):
            chars.append("_")
        chars.append(ch if is_identifier_part(ch) else "_")
    return "".join(chars) or "_"


class NameAllocator:
    """Assigns names to tagged values, avoiding keywords and previously used names.

    Suggestions are sanitized into valid identifiers first, then suffixed with
    ``_`` until unique::

        names = NameAllocator()
        names.new_name("class", tag="c")   # "class_"
        names.new_name("a-b")              # "a_b"
        names["c"]                         # "class_"

    ``copy()`` forks the allocator so nested scopes can allocate freely without
    leaking names back into the parent.
    """

    def __init__(self) -> None:
        self._allocated: set[str] = set()
        self._tag_to_name: dict[Hashable, str] = {}

    def new_name(self, suggestion: str, tag: Hashable | None = None) -> str:
        if tag is None:
            tag = object()
        name = to_swift_identifier(suggestion)
        while is_keyword(name) or name in self._allocated:
            name += "_"
        existing = self._tag_to_name.get(tag)
        if existing is not None:
            raise ValueError(f"tag {tag!r} cannot be used for both {existing!r} and {name!r}")
        self._allocated.add(name)
        self._tag_to_name[tag] = name
        return name

    def __getitem__(self, tag: Hashable) -> str:
        try:
            return self._tag_to_name[tag]
        except KeyError:
            raise KeyError(f"unknown tag: {tag!r}") from None

    def __contains__(self, tag: Hashable) -> bool:
        return tag in self._tag_to_name

    def copy(self) -> NameAllocator:
        clone = NameAllocator()
        clone._allocated = set(self._allocated)
        clone._tag_to_name = dict(self._tag_to_name)
        return clone
