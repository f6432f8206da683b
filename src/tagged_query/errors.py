"""Exceptions raised while compiling tagged records."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tagged_query.tags import TagKind


class CompilationError(ValueError):
    """Base class for every failure of a compile or header call."""


class TagDeclarationError(CompilationError):
    """A tag or a record declaration is malformed."""


class InvalidArgumentError(CompilationError):
    """A caller passed an absent or unusable record or type."""


class InvalidCombinationError(CompilationError):
    """Two mutually exclusive tags are attached to the same field."""

    def __init__(
        self,
        field_name: str,
        kind_a: TagKind,
        kind_b: TagKind,
        type_name: str | None = None,
    ) -> None:
        self.field_name = field_name
        self.kind_a = kind_a
        self.kind_b = kind_b
        self.type_name = type_name
        owner = f"{type_name}.{field_name}" if type_name else field_name
        super().__init__(
            f"Field '{owner}' has an invalid tag combination: "
            f"@{kind_a.value} and @{kind_b.value}"
        )


class AccessError(CompilationError):
    """The value of a field cannot be read from a record instance."""

    def __init__(self, field_name: str, type_name: str, reason: str = "") -> None:
        self.field_name = field_name
        self.type_name = type_name
        message = f"Cannot read field '{field_name}' from {type_name} instance"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
