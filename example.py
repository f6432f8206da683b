"""Example usage of the tagged_query library."""

from dataclasses import dataclass
from typing import Annotated, Optional

from tagged_query import (
    AliasAsSelf,
    Between,
    CustomName,
    GreaterOrEqual,
    Ignore,
    Like,
    QueryCompiler,
    Record,
    RecordParser,
    TableAlias,
    WrapName,
    WrapValue,
)


# Declare a search form with tagged fields
@dataclass
class CustomerSearch:
    name: Annotated[Optional[str], TableAlias("c"), CustomName("full_name"), WrapName("lower"), Like()] = None
    min_age: Annotated[Optional[int], TableAlias("c"), CustomName("age"), GreaterOrEqual()] = None
    joined: Annotated[Optional[str], TableAlias("c"), Between("joined_from", "joined_to"), WrapValue("date")] = None
    page: Annotated[Optional[int], Ignore()] = None


# A projection type: one constructor argument per field
@dataclass
class CustomerRow:
    name: Annotated[Optional[str], TableAlias("c"), CustomName("full_name"), AliasAsSelf()] = None
    city: Annotated[Optional[str], TableAlias("a")] = None


compiler = QueryCompiler()

search = CustomerSearch(name="%ann%", min_age=18, joined="2024", page=2)

header = compiler.select_header(CustomerSearch, "c")
print("Filter query:")
print("  " + compiler.compile(search, header))

print("\nCount query:")
print("  " + compiler.compile(search, compiler.count_header(CustomerSearch, "c")))

print("\nProjection header:")
print("  " + compiler.projection_header(CustomerRow, "from Customer c join c.address a"))

# The same records can be declared without Python classes
schema = """
com.example.Order {
    @TableAlias("o") @GreaterOrEqual total,
    @TableAlias("o") @InRange("placed_from", "placed_to", true) placed,
    @IsNull cancelled_at,
}
"""

registry = RecordParser().parse(schema)
order = registry.get_or_raise("Order")

print("\nSchema-declared record:")
print("  " + compiler.compile(
    Record(order, {"total": 100, "placed": "2024-01", "cancelled_at": "-"}),
    compiler.select_header(order),
))

print("\n" + "=" * 60)
print("The same can be done from the command line:")
print("  tagq orders.tq Order --values '{\"total\": 100}'")
print("  tagq orders.tq Order --mode count")
