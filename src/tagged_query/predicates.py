"""Predicate expressions: the right-hand side of a filter clause item."""

from __future__ import annotations

from enum import Enum

from tagged_query.tags import (
    Between,
    GreaterOrEqual,
    GreaterThan,
    InRange,
    IsNotNull,
    IsNull,
    LessOrEqual,
    LessThan,
    Like,
    NotEqual,
    NotLike,
    OutRange,
    RangeTag,
    Tag,
    WrapValue,
)
from tagged_query.types import FieldDescriptor

SPACED_AND = " and "
SPACED_OR = " or "


class ComparisonSign(Enum):
    """Operators emitted into predicates."""

    EQUAL = "="
    NOT_EQUAL = "!="
    GREATER_THAN = ">"
    GREATER_OR_EQUAL = ">="
    LESS_THAN = "<"
    LESS_OR_EQUAL = "<="
    LIKE = "like"
    NOT_LIKE = "not like"
    IS_NULL = "is null"
    IS_NOT_NULL = "is not null"
    BETWEEN = "between"


# Checked in this order; the first tag present picks the operator
BINARY_SIGNS: tuple[tuple[type[Tag], ComparisonSign], ...] = (
    (GreaterThan, ComparisonSign.GREATER_THAN),
    (GreaterOrEqual, ComparisonSign.GREATER_OR_EQUAL),
    (LessThan, ComparisonSign.LESS_THAN),
    (LessOrEqual, ComparisonSign.LESS_OR_EQUAL),
    (NotEqual, ComparisonSign.NOT_EQUAL),
    (Like, ComparisonSign.LIKE),
    (NotLike, ComparisonSign.NOT_LIKE),
)


def wrap_value(placeholder: str, wrap: WrapValue | None) -> str:
    """Render a bound placeholder, optionally wrapped in a function call.

    >>> wrap_value("birth", WrapValue("date"))
    'date(:birth)'
    """
    if wrap is None:
        return f":{placeholder}"
    if wrap.after.strip():
        return f"{wrap.function}(:{placeholder} {wrap.after})"
    return f"{wrap.function}(:{placeholder})"


def build_predicate(field: FieldDescriptor, name_expr: str) -> str:
    """Build the predicate text that follows the field's name expression.

    Null tests take precedence over range tests, which take precedence over
    binary comparisons. Without any comparison tag the predicate is equality.

    Args:
        field: The field, already checked by the exclusivity validator.
        name_expr: The field's unwrapped name expression; repeated as the
            left operand of the second bound test of InRange and OutRange.
    """
    predicate = _null_predicate(field)
    if predicate is not None:
        return predicate

    predicate = _range_predicate(field, name_expr)
    if predicate is not None:
        return predicate

    return _binary_predicate(field)


def _null_predicate(field: FieldDescriptor) -> str | None:
    if field.has(IsNull):
        return f" {ComparisonSign.IS_NULL.value}"
    if field.has(IsNotNull):
        return f" {ComparisonSign.IS_NOT_NULL.value}"
    return None


def _bounds(tag: RangeTag, wrap: WrapValue | None) -> tuple[str, str]:
    return wrap_value(tag.from_param, wrap), wrap_value(tag.to_param, wrap)


def _range_predicate(field: FieldDescriptor, name_expr: str) -> str | None:
    wrap = field.get(WrapValue)

    between = field.get(Between)
    if between is not None:
        lower, upper = _bounds(between, wrap)
        return f" {ComparisonSign.BETWEEN.value} {lower}{SPACED_AND}{upper}"

    in_range = field.get(InRange)
    if in_range is not None:
        lower, upper = _bounds(in_range, wrap)
        if in_range.inclusive:
            low_sign, high_sign = ComparisonSign.GREATER_OR_EQUAL, ComparisonSign.LESS_OR_EQUAL
        else:
            low_sign, high_sign = ComparisonSign.GREATER_THAN, ComparisonSign.LESS_THAN
        return (
            f" {low_sign.value} {lower}{SPACED_AND}"
            f"{name_expr} {high_sign.value} {upper}"
        )

    out_range = field.get(OutRange)
    if out_range is not None:
        lower, upper = _bounds(out_range, wrap)
        # Outside means below the lower bound or above the upper one
        if out_range.inclusive:
            low_sign, high_sign = ComparisonSign.LESS_OR_EQUAL, ComparisonSign.GREATER_OR_EQUAL
        else:
            low_sign, high_sign = ComparisonSign.LESS_THAN, ComparisonSign.GREATER_THAN
        return (
            f" {low_sign.value} {lower}{SPACED_OR}"
            f"{name_expr} {high_sign.value} {upper}"
        )

    return None


def _binary_predicate(field: FieldDescriptor) -> str:
    sign = ComparisonSign.EQUAL
    for tag_type, candidate in BINARY_SIGNS:
        if field.has(tag_type):
            sign = candidate
            break
    return f" {sign.value} {wrap_value(field.name, field.get(WrapValue))}"
