"""Field and record descriptors for the tagged_query library."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, TypeVar

from tagged_query.errors import InvalidArgumentError, TagDeclarationError
from tagged_query.tags import Ignore, Tag, TagKind

T = TypeVar("T", bound=Tag)


@dataclass(frozen=True)
class FieldDescriptor:
    """A declared field and the tags attached to it.

    Tags are kept in attachment order. A field carries at most one tag of
    each kind.
    """

    name: str
    tags: tuple[Tag, ...] = ()

    def __post_init__(self) -> None:
        seen: set[TagKind] = set()
        for tag in self.tags:
            if not isinstance(tag, Tag):
                raise TagDeclarationError(
                    f"Field '{self.name}': {tag!r} is not a tag"
                )
            if not isinstance(getattr(tag, "kind", None), TagKind):
                raise TagDeclarationError(
                    f"Field '{self.name}': {type(tag).__name__} has no tag kind"
                )
            if tag.kind in seen:
                raise TagDeclarationError(
                    f"Field '{self.name}' repeats tag @{tag.kind.value}"
                )
            seen.add(tag.kind)

    @property
    def kinds(self) -> tuple[TagKind, ...]:
        """Return the kinds of the attached tags in attachment order."""
        return tuple(tag.kind for tag in self.tags)

    @property
    def is_ignored(self) -> bool:
        return self.has(Ignore)

    def get(self, tag_type: type[T]) -> T | None:
        """Return the attached tag of the given class, if any."""
        for tag in self.tags:
            if type(tag) is tag_type:
                return tag  # type: ignore[return-value]
        return None

    def has(self, tag_type: type[Tag]) -> bool:
        return self.get(tag_type) is not None


@dataclass(frozen=True)
class RecordDescriptor:
    """A record type: its names and its fields in declared order.

    ``name`` is the simple entity name used by select and count headers;
    ``qualified_name`` is the full dotted name used by projection headers.
    """

    name: str
    qualified_name: str
    fields: tuple[FieldDescriptor, ...] = ()

    @property
    def accepted_fields(self) -> tuple[FieldDescriptor, ...]:
        """Return the fields not tagged ``Ignore``."""
        return tuple(f for f in self.fields if not f.is_ignored)

    def get_field(self, name: str) -> FieldDescriptor | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass
class Record:
    """An instance of a record type declared without a Python class.

    Values are looked up by field name; a missing key means no value.
    """

    descriptor: RecordDescriptor
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        unknown = [k for k in self.values if self.descriptor.get_field(k) is None]
        if unknown:
            raise InvalidArgumentError(
                f"Record '{self.descriptor.name}' has no field(s): {', '.join(unknown)}"
            )

    def __repr__(self) -> str:
        return f"Record({self.descriptor.name!r}, {dict(self.values)!r})"
