"""Exclusivity validation of the tags attached to one field."""

from __future__ import annotations

from itertools import combinations
from typing import Iterable, Sequence

from tagged_query.errors import InvalidCombinationError
from tagged_query.tags import ALIAS_KINDS, COMPARISON_KINDS, TagKind
from tagged_query.types import FieldDescriptor


class ForbiddenCombinationTable:
    """Symmetric set of tag kind pairs that may not share a field."""

    def __init__(self, pairs: Iterable[frozenset[TagKind]] = ()) -> None:
        self._pairs: frozenset[frozenset[TagKind]] = frozenset(pairs)

    def is_forbidden(self, kind_a: TagKind, kind_b: TagKind) -> bool:
        return frozenset((kind_a, kind_b)) in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, pair: object) -> bool:
        if isinstance(pair, tuple) and len(pair) == 2:
            return self.is_forbidden(*pair)
        return False


def build_forbidden_table(*groups: Sequence[TagKind]) -> ForbiddenCombinationTable:
    """Build a table forbidding every pair of distinct kinds inside each group."""
    pairs = [
        frozenset((kind_a, kind_b))
        for group in groups
        for kind_a, kind_b in combinations(group, 2)
        if kind_a != kind_b
    ]
    return ForbiddenCombinationTable(pairs)


FORBIDDEN_COMBINATIONS = build_forbidden_table(COMPARISON_KINDS, ALIAS_KINDS)


class ExclusivityValidator:
    """Rejects fields whose tags form a forbidden combination."""

    def __init__(self, table: ForbiddenCombinationTable = FORBIDDEN_COMBINATIONS) -> None:
        self.table = table

    def find_conflict(
        self, kinds: Sequence[TagKind]
    ) -> tuple[TagKind, TagKind] | None:
        """Return the first forbidden pair in attachment order, if any."""
        for i, kind_a in enumerate(kinds):
            for kind_b in kinds[i + 1:]:
                if self.table.is_forbidden(kind_a, kind_b):
                    return kind_a, kind_b
        return None

    def validate(self, field: FieldDescriptor, type_name: str | None = None) -> None:
        """Raise InvalidCombinationError if the field's tags conflict."""
        conflict = self.find_conflict(field.kinds)
        if conflict is not None:
            raise InvalidCombinationError(field.name, *conflict, type_name=type_name)
