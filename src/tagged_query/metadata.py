"""Metadata provider: reads field tags from annotated Python classes."""

from __future__ import annotations

import logging
import types
from typing import (
    Annotated,
    Any,
    ClassVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from tagged_query.errors import InvalidArgumentError, TagDeclarationError
from tagged_query.tags import Tag
from tagged_query.types import FieldDescriptor, Record, RecordDescriptor

logger = logging.getLogger(__name__)

_UNION_ORIGINS = (Union, types.UnionType)


def _is_class_var(hint: Any) -> bool:
    if hint is ClassVar or get_origin(hint) is ClassVar:
        return True
    if get_origin(hint) is Annotated:
        return _is_class_var(get_args(hint)[0])
    if get_origin(hint) in _UNION_ORIGINS:
        return any(_is_class_var(arg) for arg in get_args(hint))
    return False


def _tags_from_hint(name: str, hint: Any) -> tuple[Tag, ...]:
    """Collect the tags of a field hint.

    Tags sit in ``Annotated`` metadata, either on the hint itself or on one
    member of a union such as ``Annotated[int, Like()] | None``.
    """
    origin = get_origin(hint)
    if origin is Annotated:
        return tuple(m for m in hint.__metadata__ if isinstance(m, Tag))
    if origin in _UNION_ORIGINS:
        tagged = [tags for tags in (_tags_from_hint(name, arg) for arg in get_args(hint)) if tags]
        if len(tagged) > 1:
            raise TagDeclarationError(
                f"Field '{name}' carries tags on more than one union member"
            )
        return tagged[0] if tagged else ()
    return ()


class MetadataProvider:
    """Builds and caches a RecordDescriptor per record class.

    Tags are declared with ``typing.Annotated``::

        class CustomerFilter:
            age: Annotated[int | None, GreaterOrEqual()] = None
            name: Annotated[str | None, TableAlias("c"), Like()] = None

    Fields come in declared order, inherited fields first. ``ClassVar``
    annotations are not fields. Annotated metadata that is not a Tag is
    ignored.
    """

    def __init__(self) -> None:
        self._cache: dict[type, RecordDescriptor] = {}

    def describe(self, record_type: type | RecordDescriptor) -> RecordDescriptor:
        """Return the descriptor for a record class.

        Args:
            record_type: A class with annotated fields, or an already built
                descriptor (returned unchanged).

        Raises:
            InvalidArgumentError: If record_type is absent or not a class.
            TagDeclarationError: If annotations can't be resolved or a field
                repeats a tag kind.
        """
        if isinstance(record_type, RecordDescriptor):
            return record_type
        if record_type is None:
            raise InvalidArgumentError("Record type is required")
        if not isinstance(record_type, type):
            raise InvalidArgumentError(
                f"Expected a record type, got {type(record_type).__name__} instance"
            )

        descriptor = self._cache.get(record_type)
        if descriptor is None:
            # Concurrent first calls build equal descriptors; either one may win.
            descriptor = self._introspect(record_type)
            self._cache[record_type] = descriptor
        return descriptor

    def describe_instance(self, instance: Any) -> RecordDescriptor:
        """Return the descriptor of a record instance."""
        if isinstance(instance, Record):
            return instance.descriptor
        return self.describe(type(instance))

    def fields_of(self, record_type: type | RecordDescriptor) -> tuple[FieldDescriptor, ...]:
        return self.describe(record_type).fields

    def tags_of(self, field: FieldDescriptor) -> tuple[Tag, ...]:
        return field.tags

    def clear(self) -> None:
        """Drop all cached descriptors."""
        self._cache.clear()

    def _introspect(self, record_type: type) -> RecordDescriptor:
        try:
            hints = get_type_hints(record_type, include_extras=True)
        except (NameError, TypeError) as e:
            raise TagDeclarationError(
                f"Cannot resolve annotations of {record_type.__qualname__}: {e}"
            ) from e

        fields = tuple(
            FieldDescriptor(name=name, tags=_tags_from_hint(name, hint))
            for name, hint in hints.items()
            if not _is_class_var(hint)
        )
        descriptor = RecordDescriptor(
            name=record_type.__name__,
            qualified_name=f"{record_type.__module__}.{record_type.__qualname__}",
            fields=fields,
        )
        logger.debug(
            "Described %s: %d field(s), %d tagged",
            descriptor.qualified_name,
            len(fields),
            sum(1 for f in fields if f.tags),
        )
        return descriptor
