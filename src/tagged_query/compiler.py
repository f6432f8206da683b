"""Query compiler: filter clauses and select/count/projection headers."""

from __future__ import annotations

import logging
from typing import Any

from tagged_query.accessor import Accessor
from tagged_query.errors import InvalidArgumentError
from tagged_query.metadata import MetadataProvider
from tagged_query.naming import build_name, wrap_name
from tagged_query.predicates import build_predicate
from tagged_query.types import FieldDescriptor, RecordDescriptor
from tagged_query.validator import ExclusivityValidator

logger = logging.getLogger(__name__)

SPACED_AND = " AND "
WHERE_ALWAYS = " where 1 = 1"


def _is_blank(text: str | None) -> bool:
    return text is None or not text.strip()


class QueryCompiler:
    """Compiles tagged records into query fragments.

    A compiler holds no per-call state, so one instance can be shared
    between threads.
    """

    def __init__(
        self,
        metadata: MetadataProvider | None = None,
        accessor: Accessor | None = None,
        validator: ExclusivityValidator | None = None,
    ) -> None:
        """Initialize a compiler.

        Args:
            metadata: Source of record descriptors. Defaults to class
                introspection with a per-type cache.
            accessor: Reads field values from instances.
            validator: Checks tag combinations, built on the default
                forbidden-combination table unless given.
        """
        self.metadata = metadata or MetadataProvider()
        self.accessor = accessor or Accessor()
        self.validator = validator or ExclusivityValidator()

    def compile(self, instance: Any, preset_prefix: str | None = None) -> str:
        """Compile the present-valued fields of a record into a filter clause.

        Every field that is not ignored and currently holds a value becomes
        `` AND (<name> <predicate>)``, in declared field order.

        Args:
            instance: The record instance (an object of a tagged class or a
                Record).
            preset_prefix: Text placed before the first field, typically a
                select header. Blank prefixes are dropped.

        Returns:
            The clause text.

        Raises:
            InvalidArgumentError: If instance is None, a class or a RecordDescriptor.
            InvalidCombinationError: If a field carries contradictory tags.
            AccessError: If a field value can't be read.
        """
        if instance is None:
            raise InvalidArgumentError("Cannot compile an absent record")
        if isinstance(instance, type):
            raise InvalidArgumentError(
                f"Expected a record instance, got the class {instance.__qualname__}"
            )
        if isinstance(instance, RecordDescriptor):
            raise InvalidArgumentError(
                f"Expected a record instance, got the descriptor of {instance.name}; "
                "wrap values in a Record"
            )

        record = self.metadata.describe_instance(instance)
        parts: list[str] = []
        if not _is_blank(preset_prefix):
            parts.append(preset_prefix)  # type: ignore[arg-type]

        emitted = 0
        for field in record.accepted_fields:
            if not self.accessor.value_present(field, instance):
                continue
            parts.append(self._compile_field(record, field))
            emitted += 1

        logger.debug("Compiled %s: %d field(s) in clause", record.name, emitted)
        return "".join(parts)

    def compile_field(self, record: RecordDescriptor, field: FieldDescriptor) -> str:
        """Return the ``<name> <predicate>`` text of one field, without the AND wrapper."""
        self.validator.validate(field, record.name)
        name_expr = build_name(field)
        return wrap_name(field, name_expr) + build_predicate(field, name_expr)

    def _compile_field(self, record: RecordDescriptor, field: FieldDescriptor) -> str:
        return f"{SPACED_AND}({self.compile_field(record, field)})"

    def select_header(
        self, entity_type: type | RecordDescriptor, alias: str | None = None
    ) -> str:
        """Return ``select <alias> from <Entity> <alias> where 1 = 1``.

        The alias defaults to the lowercase first letter of the entity's
        simple name.
        """
        return self._header(entity_type, alias, count=False)

    def count_header(
        self, entity_type: type | RecordDescriptor, alias: str | None = None
    ) -> str:
        """Return ``select count(<alias>) from <Entity> <alias> where 1 = 1``."""
        return self._header(entity_type, alias, count=True)

    def projection_header(
        self, projection_type: type | RecordDescriptor, follow_up: str | None = None
    ) -> str:
        """Return ``select new <QualifiedName>(<names>)`` for a projection type.

        Each accepted field contributes its name expression (alias prefix,
        custom name, ``as`` suffix), comma separated in declared order. A
        type without accepted fields yields an empty argument list.

        Args:
            projection_type: The projection class or descriptor.
            follow_up: Text appended after a space, e.g. ``from Order o``.
        """
        record = self.metadata.describe(projection_type)
        names = ", ".join(build_name(f) for f in record.accepted_fields)
        query = f"select new {record.qualified_name}({names})"
        if not _is_blank(follow_up):
            query = f"{query} {follow_up}"
        return query

    def _header(
        self, entity_type: type | RecordDescriptor, alias: str | None, count: bool
    ) -> str:
        record = self.metadata.describe(entity_type)
        actual_alias = record.name[0].lower() if _is_blank(alias) else alias
        selected = f"count({actual_alias})" if count else actual_alias
        return f"select {selected} from {record.name} {actual_alias}{WHERE_ALWAYS}"
