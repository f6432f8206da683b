"""A closed or open interval between two ordered bound values."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable


@dataclass(frozen=True)
class Range:
    """Two bound values with an inclusivity flag.

    Bounds given in descending order are swapped so that ``from_value`` is
    always the lower one. When ``key`` is given, bounds and tested values are
    compared through it, as with ``sorted(key=...)``.

    Range values pair naturally with range tags: a caller can keep the bounds
    a ``Between``/``InRange``/``OutRange`` field will be bound to, and check
    candidate values in memory with the same semantics.
    """

    from_value: Any
    to_value: Any
    inclusive: bool = False
    key: Callable[[Any], Any] | None = None

    def __post_init__(self) -> None:
        if self.from_value is None:
            raise ValueError("from_value cannot be None")
        if self.to_value is None:
            raise ValueError("to_value cannot be None")

        try:
            descending = self._sort_key(self.from_value) > self._sort_key(self.to_value)
        except TypeError as e:
            raise ValueError(
                f"Range bounds {self.from_value!r} and {self.to_value!r} cannot be ordered"
            ) from e

        if descending:
            lower, upper = self.to_value, self.from_value
            object.__setattr__(self, "from_value", lower)
            object.__setattr__(self, "to_value", upper)

    @classmethod
    def of(
        cls,
        from_value: Any,
        to_value: Any,
        inclusive: bool = False,
        key: Callable[[Any], Any] | None = None,
    ) -> Range:
        return cls(from_value, to_value, inclusive, key)

    def _sort_key(self, value: Any) -> Any:
        return self.key(value) if self.key is not None else value

    def is_between(self, value: Any) -> bool:
        """Return True if value lies between the bounds."""
        v = self._sort_key(value)
        lower = self._sort_key(self.from_value)
        upper = self._sort_key(self.to_value)
        if self.inclusive:
            return lower <= v <= upper
        return lower < v < upper

    def is_outside(self, value: Any) -> bool:
        return not self.is_between(value)

    def __contains__(self, value: Any) -> bool:
        return self.is_between(value)

    def with_from_value(self, from_value: Any) -> Range:
        return replace(self, from_value=from_value)

    def with_to_value(self, to_value: Any) -> Range:
        return replace(self, to_value=to_value)

    def with_bound_values(self, from_value: Any, to_value: Any) -> Range:
        return replace(self, from_value=from_value, to_value=to_value)

    def with_key(self, key: Callable[[Any], Any] | None) -> Range:
        return replace(self, key=key)

    def with_inclusivity(self, inclusive: bool) -> Range:
        return replace(self, inclusive=inclusive)
