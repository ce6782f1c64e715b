from __future__ import annotations

from enum import Enum


class Target(Enum):
    TYPE = "type"
    FUNCTION = "function"
    PROPERTY = "property"
    PARAMETER = "parameter"


_DECLS = (Target.TYPE, Target.FUNCTION, Target.PROPERTY)
_MEMBERS = (Target.FUNCTION, Target.PROPERTY)


class Modifier(Enum):
    """Declaration modifiers. Declaration order is the canonical emission order."""

    OPEN = ("open", _DECLS)
    PUBLIC = ("public", _DECLS)
    INTERNAL = ("internal", _DECLS)
    FILEPRIVATE = ("fileprivate", _DECLS)
    PRIVATE = ("private", _DECLS)

    PUBLIC_SET = ("public(set)", (Target.PROPERTY,))
    INTERNAL_SET = ("internal(set)", (Target.PROPERTY,))
    FILEPRIVATE_SET = ("fileprivate(set)", (Target.PROPERTY,))
    PRIVATE_SET = ("private(set)", (Target.PROPERTY,))

    NONISOLATED = ("nonisolated", _MEMBERS)
    CLASS = ("class", _MEMBERS)
    STATIC = ("static", _MEMBERS)
    FINAL = ("final", _DECLS)
    INDIRECT = ("indirect", (Target.TYPE,))
    OVERRIDE = ("override", _MEMBERS)
    REQUIRED = ("required", (Target.FUNCTION,))
    CONVENIENCE = ("convenience", (Target.FUNCTION,))
    MUTATING = ("mutating", (Target.FUNCTION,))
    NONMUTATING = ("nonmutating", (Target.FUNCTION,))
    LAZY = ("lazy", (Target.PROPERTY,))
    WEAK = ("weak", (Target.PROPERTY,))
    UNOWNED = ("unowned", (Target.PROPERTY,))

    INOUT = ("inout", (Target.PARAMETER,))

    def __init__(self, keyword: str, targets: tuple[Target, ...]) -> None:
        self.keyword = keyword
        self.targets = targets

    def __str__(self) -> str:
        return self.keyword

    def check_target(self, target: Target) -> None:
        if target not in self.targets:
            raise ValueError(f"unexpected modifier {self.keyword} for {target.value}")

    def is_one_of(self, *modifiers: Modifier) -> bool:
        return self in modifiers


ACCESS_MODIFIERS: tuple[Modifier, ...] = (
    Modifier.OPEN, Modifier.PUBLIC, Modifier.INTERNAL, Modifier.FILEPRIVATE, Modifier.PRIVATE,
)


def parse_modifier(keyword: str) -> Modifier:
    for modifier in Modifier:
        if modifier.keyword == keyword:
            return modifier
    raise ValueError(f"unknown modifier: {keyword!r}")
