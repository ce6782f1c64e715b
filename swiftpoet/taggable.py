from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from .attribute_spec import AttributeSpec

B = TypeVar("B", bound="TaggableBuilder")


@dataclass(frozen=True, kw_only=True)
class Taggable:
    """Carries caller-supplied metadata that never affects rendering."""

    tags: Mapping[Hashable, Any] = field(default_factory=dict, compare=False, repr=False)

    def tag(self, key: Hashable) -> Any:
        return self.tags.get(key)


class TaggableBuilder:
    def __init__(self) -> None:
        self.tags: dict[Hashable, Any] = {}

    def tag(self: B, value: Any, key: Hashable | None = None) -> B:
        """Attach ``value`` under ``key``, which defaults to ``type(value)``."""
        self.tags[key if key is not None else type(value)] = value
        return self


@dataclass(frozen=True, kw_only=True)
class AttributedSpec(Taggable):
    attributes: tuple[AttributeSpec, ...] = ()


class AttributedBuilder(TaggableBuilder):
    def __init__(self) -> None:
        super().__init__()
        self.attributes: list[AttributeSpec] = []

    def add_attribute(self: B, attribute: AttributeSpec | str, *arguments: str) -> B:
        if isinstance(attribute, str):
            from .attribute_spec import AttributeSpec  # attribute_spec builds on this module

            attribute = AttributeSpec.builder(attribute).add_arguments(*arguments).build()
        self.attributes.append(attribute)  # type: ignore[attr-defined]
        return self

    def add_attributes(self: B, attributes: Iterable[AttributeSpec]) -> B:
        self.attributes.extend(attributes)  # type: ignore[attr-defined]
        return self
