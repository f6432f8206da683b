"""Name expressions: the left-hand side of a predicate or a projection item."""

from __future__ import annotations

from tagged_query.tags import AliasAs, AliasAsSelf, CustomName, TableAlias, WrapName
from tagged_query.types import FieldDescriptor

SPACED_AS = " as "


def build_name(field: FieldDescriptor) -> str:
    """Build ``[alias.]name[ as alias]`` for a field.

    A table alias prefix comes first, then the custom name or the field's own
    name, then the ``as`` suffix. ``AliasAsSelf`` wins over ``AliasAs`` when a
    caller bypasses validation.
    """
    parts: list[str] = []

    table_alias = field.get(TableAlias)
    if table_alias is not None:
        parts.append(f"{table_alias.prefix}.")

    custom_name = field.get(CustomName)
    parts.append(custom_name.name if custom_name is not None else field.name)

    alias_as = field.get(AliasAs)
    if field.has(AliasAsSelf):
        parts.append(SPACED_AS + field.name)
    elif alias_as is not None:
        parts.append(SPACED_AS + alias_as.name)

    return "".join(parts)


def wrap_name(field: FieldDescriptor, name_expr: str) -> str:
    """Wrap a name expression in the field's WrapName function, if any."""
    wrap = field.get(WrapName)
    if wrap is None:
        return name_expr
    if wrap.after.strip():
        return f"{wrap.function}({name_expr} {wrap.after})"
    return f"{wrap.function}({name_expr})"
