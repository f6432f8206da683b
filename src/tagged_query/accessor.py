"""Accessor: reads current field values from record instances."""

from __future__ import annotations

from typing import Any

from tagged_query.errors import AccessError
from tagged_query.types import FieldDescriptor, Record


class Accessor:
    """Reads field values from plain objects and from Record instances."""

    def read(self, field: FieldDescriptor, instance: Any) -> Any:
        """Return the current value of a field.

        Raises:
            AccessError: If the instance has no readable attribute for the
                field, or reading it fails.
        """
        if isinstance(instance, Record):
            return instance.values.get(field.name)
        try:
            return getattr(instance, field.name)
        except Exception as e:
            raise AccessError(field.name, type(instance).__name__, str(e)) from e

    def value_present(self, field: FieldDescriptor, instance: Any) -> bool:
        """Return True if the field currently holds a non-None value."""
        return self.read(field, instance) is not None
