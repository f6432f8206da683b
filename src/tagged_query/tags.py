"""Tag model: the declarative markers attached to record fields."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar

from tagged_query.errors import TagDeclarationError

# Default placeholder names for the two bounds of a range tag
FROM_PARAM = "from_value"
TO_PARAM = "to_value"

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_DOTTED_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*")


class TagRole(Enum):
    """What part of a clause a tag influences."""

    EXCLUSION = "exclusion"
    NAMING = "naming"
    WRAPPING = "wrapping"
    NULL_TEST = "null_test"
    RANGE_TEST = "range_test"
    BINARY = "binary"


class TagKind(Enum):
    """Every recognized tag kind. Values are the names used in the schema DSL."""

    IGNORE = "Ignore"
    TABLE_ALIAS = "TableAlias"
    CUSTOM_NAME = "CustomName"
    ALIAS_AS = "AliasAs"
    ALIAS_AS_SELF = "AliasAsSelf"
    WRAP_NAME = "WrapName"
    WRAP_VALUE = "WrapValue"
    IS_NULL = "IsNull"
    IS_NOT_NULL = "IsNotNull"
    BETWEEN = "Between"
    IN_RANGE = "InRange"
    OUT_RANGE = "OutRange"
    GREATER_THAN = "GreaterThan"
    GREATER_OR_EQUAL = "GreaterOrEqual"
    LESS_THAN = "LessThan"
    LESS_OR_EQUAL = "LessOrEqual"
    NOT_EQUAL = "NotEqual"
    LIKE = "Like"
    NOT_LIKE = "NotLike"

    @property
    def role(self) -> TagRole:
        """Return the role this kind plays in clause construction."""
        return _ROLES[self]


_ROLES: dict[TagKind, TagRole] = {
    TagKind.IGNORE: TagRole.EXCLUSION,
    TagKind.TABLE_ALIAS: TagRole.NAMING,
    TagKind.CUSTOM_NAME: TagRole.NAMING,
    TagKind.ALIAS_AS: TagRole.NAMING,
    TagKind.ALIAS_AS_SELF: TagRole.NAMING,
    TagKind.WRAP_NAME: TagRole.WRAPPING,
    TagKind.WRAP_VALUE: TagRole.WRAPPING,
    TagKind.IS_NULL: TagRole.NULL_TEST,
    TagKind.IS_NOT_NULL: TagRole.NULL_TEST,
    TagKind.BETWEEN: TagRole.RANGE_TEST,
    TagKind.IN_RANGE: TagRole.RANGE_TEST,
    TagKind.OUT_RANGE: TagRole.RANGE_TEST,
    TagKind.GREATER_THAN: TagRole.BINARY,
    TagKind.GREATER_OR_EQUAL: TagRole.BINARY,
    TagKind.LESS_THAN: TagRole.BINARY,
    TagKind.LESS_OR_EQUAL: TagRole.BINARY,
    TagKind.NOT_EQUAL: TagRole.BINARY,
    TagKind.LIKE: TagRole.BINARY,
    TagKind.NOT_LIKE: TagRole.BINARY,
}


def _require_identifier(tag: Tag, attr: str, dotted: bool = False) -> None:
    value = getattr(tag, attr)
    pattern = _DOTTED_IDENTIFIER if dotted else _IDENTIFIER
    if not isinstance(value, str) or not pattern.fullmatch(value):
        raise TagDeclarationError(
            f"@{tag.kind.value}: '{attr}' must be an identifier, got {value!r}"
        )


def _require_text(tag: Tag, attr: str) -> None:
    value = getattr(tag, attr)
    if not isinstance(value, str):
        raise TagDeclarationError(
            f"@{tag.kind.value}: '{attr}' must be a string, got {value!r}"
        )


def _require_bool(tag: Tag, attr: str) -> None:
    value = getattr(tag, attr)
    if not isinstance(value, bool):
        raise TagDeclarationError(
            f"@{tag.kind.value}: '{attr}' must be true or false, got {value!r}"
        )


@dataclass(frozen=True)
class Tag:
    """Base class for all tags."""

    kind: ClassVar[TagKind]

    def __post_init__(self) -> None:
        if not isinstance(getattr(type(self), "kind", None), TagKind):
            raise TagDeclarationError(
                f"{type(self).__name__} has no tag kind and cannot be attached"
            )

    @property
    def role(self) -> TagRole:
        return self.kind.role


# ---- Exclusion ----


@dataclass(frozen=True)
class Ignore(Tag):
    """The field never takes part in any clause or header."""

    kind: ClassVar[TagKind] = TagKind.IGNORE


# ---- Naming ----


@dataclass(frozen=True)
class TableAlias(Tag):
    """Prefix the field name with a table alias: ``prefix.field``."""

    kind: ClassVar[TagKind] = TagKind.TABLE_ALIAS
    prefix: str

    def __post_init__(self) -> None:
        _require_identifier(self, "prefix", dotted=True)


@dataclass(frozen=True)
class CustomName(Tag):
    """Use ``name`` as the column name instead of the field's own name."""

    kind: ClassVar[TagKind] = TagKind.CUSTOM_NAME
    name: str

    def __post_init__(self) -> None:
        _require_identifier(self, "name", dotted=True)


@dataclass(frozen=True)
class AliasAs(Tag):
    """Append ``as name`` to the name expression."""

    kind: ClassVar[TagKind] = TagKind.ALIAS_AS
    name: str

    def __post_init__(self) -> None:
        _require_identifier(self, "name", dotted=True)


@dataclass(frozen=True)
class AliasAsSelf(Tag):
    """Append ``as <field name>`` to the name expression."""

    kind: ClassVar[TagKind] = TagKind.ALIAS_AS_SELF


# ---- Wrapping ----


@dataclass(frozen=True)
class WrapName(Tag):
    """Wrap the name expression in a function call, e.g. ``lower(name)``.

    ``after`` is appended inside the call, separated by a space, which allows
    forms such as ``cast(price as string)``.
    """

    kind: ClassVar[TagKind] = TagKind.WRAP_NAME
    function: str
    after: str = ""

    def __post_init__(self) -> None:
        _require_identifier(self, "function")
        _require_text(self, "after")


@dataclass(frozen=True)
class WrapValue(Tag):
    """Wrap every bound placeholder of the field in a function call."""

    kind: ClassVar[TagKind] = TagKind.WRAP_VALUE
    function: str
    after: str = ""

    def __post_init__(self) -> None:
        _require_identifier(self, "function")
        _require_text(self, "after")


# ---- Null tests ----


@dataclass(frozen=True)
class IsNull(Tag):
    kind: ClassVar[TagKind] = TagKind.IS_NULL


@dataclass(frozen=True)
class IsNotNull(Tag):
    kind: ClassVar[TagKind] = TagKind.IS_NOT_NULL


# ---- Range tests ----


@dataclass(frozen=True)
class RangeTag(Tag):
    """Common shape of the range tags: two named bound parameters."""

    from_param: str = FROM_PARAM
    to_param: str = TO_PARAM

    def __post_init__(self) -> None:
        super().__post_init__()
        _require_identifier(self, "from_param")
        _require_identifier(self, "to_param")


@dataclass(frozen=True)
class Between(RangeTag):
    """``field between :from_param and :to_param``."""

    kind: ClassVar[TagKind] = TagKind.BETWEEN


@dataclass(frozen=True)
class InRange(RangeTag):
    """Field lies inside the bounds; ``inclusive`` admits the bounds themselves."""

    kind: ClassVar[TagKind] = TagKind.IN_RANGE
    inclusive: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        _require_bool(self, "inclusive")


@dataclass(frozen=True)
class OutRange(RangeTag):
    """Field lies outside the bounds; ``inclusive`` also matches the bounds themselves."""

    kind: ClassVar[TagKind] = TagKind.OUT_RANGE
    inclusive: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        _require_bool(self, "inclusive")


# ---- Binary comparisons ----


@dataclass(frozen=True)
class GreaterThan(Tag):
    kind: ClassVar[TagKind] = TagKind.GREATER_THAN


@dataclass(frozen=True)
class GreaterOrEqual(Tag):
    kind: ClassVar[TagKind] = TagKind.GREATER_OR_EQUAL


@dataclass(frozen=True)
class LessThan(Tag):
    kind: ClassVar[TagKind] = TagKind.LESS_THAN


@dataclass(frozen=True)
class LessOrEqual(Tag):
    kind: ClassVar[TagKind] = TagKind.LESS_OR_EQUAL


@dataclass(frozen=True)
class NotEqual(Tag):
    kind: ClassVar[TagKind] = TagKind.NOT_EQUAL


@dataclass(frozen=True)
class Like(Tag):
    kind: ClassVar[TagKind] = TagKind.LIKE


@dataclass(frozen=True)
class NotLike(Tag):
    kind: ClassVar[TagKind] = TagKind.NOT_LIKE


# Kinds that pick the predicate shape; any two on one field are contradictory
COMPARISON_KINDS: tuple[TagKind, ...] = (
    TagKind.BETWEEN,
    TagKind.GREATER_THAN,
    TagKind.GREATER_OR_EQUAL,
    TagKind.LESS_THAN,
    TagKind.LESS_OR_EQUAL,
    TagKind.IS_NULL,
    TagKind.IS_NOT_NULL,
    TagKind.NOT_EQUAL,
    TagKind.LIKE,
    TagKind.IN_RANGE,
    TagKind.OUT_RANGE,
)

# A field has at most one alias
ALIAS_KINDS: tuple[TagKind, ...] = (
    TagKind.ALIAS_AS,
    TagKind.ALIAS_AS_SELF,
)

TAG_CLASSES: dict[str, type[Tag]] = {
    cls.kind.value: cls
    for cls in (
        Ignore,
        TableAlias,
        CustomName,
        AliasAs,
        AliasAsSelf,
        WrapName,
        WrapValue,
        IsNull,
        IsNotNull,
        Between,
        InRange,
        OutRange,
        GreaterThan,
        GreaterOrEqual,
        LessThan,
        LessOrEqual,
        NotEqual,
        Like,
        NotLike,
    )
}


def make_tag(
    name: str,
    args: tuple[Any, ...] | list[Any] = (),
    kwargs: dict[str, Any] | None = None,
) -> Tag:
    """Build a tag from its DSL name and arguments.

    Args:
        name: Tag name, e.g. ``"InRange"``.
        args: Positional arguments in field declaration order.
        kwargs: Keyword arguments keyed by parameter name.

    Returns:
        The constructed tag.

    Raises:
        TagDeclarationError: If the name is unknown or the arguments don't fit.
    """
    cls = TAG_CLASSES.get(name)
    if cls is None:
        raise TagDeclarationError(f"Unknown tag '@{name}'")

    params = [f.name for f in fields(cls)]
    kwargs = kwargs or {}
    if len(args) > len(params):
        raise TagDeclarationError(
            f"@{name} takes at most {len(params)} argument(s), got {len(args)}"
        )
    for key in kwargs:
        if key not in params:
            raise TagDeclarationError(f"@{name} has no parameter '{key}'")

    try:
        return cls(*args, **kwargs)
    except TypeError as e:
        raise TagDeclarationError(f"@{name}: {e}") from e
