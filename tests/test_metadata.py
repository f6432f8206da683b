"""Tests for descriptors, the metadata provider and the accessor."""

from dataclasses import dataclass
from typing import Annotated, ClassVar, Optional, Union

import pytest

from tagged_query.accessor import Accessor
from tagged_query.errors import (
    AccessError,
    CompilationError,
    InvalidArgumentError,
    TagDeclarationError,
)
from tagged_query.metadata import MetadataProvider
from tagged_query.tags import (
    AliasAsSelf,
    CustomName,
    GreaterThan,
    Ignore,
    Like,
    TableAlias,
    Tag,
    TagKind,
)
from tagged_query.types import FieldDescriptor, Record, RecordDescriptor


@dataclass
class Person:
    MAX_AGE: ClassVar[int] = 150

    name: Annotated[Optional[str], TableAlias("p"), Like(), "not a tag"] = None
    age: Annotated[Optional[int], GreaterThan()] = None
    secret: Annotated[Optional[str], Ignore()] = None
    nickname: Optional[str] = None


@dataclass
class Employee(Person):
    salary: Annotated[Optional[int], CustomName("base_salary"), AliasAsSelf()] = None


class Plain:
    """A non-dataclass record with class-level defaults."""

    code: Annotated[Optional[str], Like()] = None
    level: Optional[int] = None


class Repeated:
    value: Annotated[int, GreaterThan(), GreaterThan()] = 0


class Unresolved:
    value: "Missing"  # noqa: F821


@dataclass
class OptionalTagged:
    age: Annotated[int, GreaterThan()] | None = None
    code: Optional[Annotated[str, TableAlias("o"), Like()]] = None
    note: int | None = None


class TaggedTwice:
    value: Union[Annotated[int, GreaterThan()], Annotated[str, Like()]]


@dataclass(frozen=True)
class Kindless(Tag):
    def __post_init__(self):
        pass


@pytest.fixture
def provider():
    return MetadataProvider()


class TestFieldDescriptor:
    """Tests for FieldDescriptor."""

    def test_get_and_has(self):
        field = FieldDescriptor("name", (TableAlias("p"), Like()))
        assert field.get(TableAlias) == TableAlias("p")
        assert field.get(CustomName) is None
        assert field.has(Like)
        assert not field.has(GreaterThan)

    def test_kinds_in_attachment_order(self):
        field = FieldDescriptor("name", (Like(), TableAlias("p")))
        assert field.kinds == (TagKind.LIKE, TagKind.TABLE_ALIAS)

    def test_is_ignored(self):
        assert FieldDescriptor("x", (Ignore(),)).is_ignored
        assert not FieldDescriptor("x").is_ignored

    def test_repeated_kind_rejected(self):
        with pytest.raises(TagDeclarationError, match="repeats"):
            FieldDescriptor("x", (TableAlias("a"), TableAlias("b")))

    def test_non_tag_rejected(self):
        with pytest.raises(TagDeclarationError):
            FieldDescriptor("x", ("Like",))  # type: ignore[arg-type]

    def test_kindless_tag_rejected(self):
        with pytest.raises(TagDeclarationError, match="no tag kind"):
            FieldDescriptor("x", (Kindless(),))


class TestRecordDescriptor:
    def test_accepted_fields(self):
        record = RecordDescriptor(
            "Person", "app.Person",
            (FieldDescriptor("a"), FieldDescriptor("b", (Ignore(),)), FieldDescriptor("c")),
        )
        assert [f.name for f in record.accepted_fields] == ["a", "c"]
        assert record.get_field("b").is_ignored
        assert record.get_field("zzz") is None


class TestRecord:
    def test_unknown_values_rejected(self):
        record = RecordDescriptor("Person", "Person", (FieldDescriptor("age"),))
        with pytest.raises(InvalidArgumentError, match="agee"):
            Record(record, {"agee": 3})


class TestMetadataProvider:
    """Tests for class introspection."""

    def test_fields_in_declared_order(self, provider):
        names = [f.name for f in provider.fields_of(Person)]
        assert names == ["name", "age", "secret", "nickname"]

    def test_class_vars_skipped(self, provider):
        assert provider.describe(Person).get_field("MAX_AGE") is None

    def test_tags_read_from_annotated(self, provider):
        record = provider.describe(Person)
        assert provider.tags_of(record.get_field("name")) == (TableAlias("p"), Like())
        assert record.get_field("age").tags == (GreaterThan(),)
        assert record.get_field("nickname").tags == ()

    def test_names(self, provider):
        record = provider.describe(Person)
        assert record.name == "Person"
        assert record.qualified_name == f"{Person.__module__}.Person"

    def test_inherited_fields_first(self, provider):
        names = [f.name for f in provider.fields_of(Employee)]
        assert names == ["name", "age", "secret", "nickname", "salary"]

    def test_plain_class(self, provider):
        record = provider.describe(Plain)
        assert [f.name for f in record.fields] == ["code", "level"]

    def test_cached(self, provider):
        assert provider.describe(Person) is provider.describe(Person)

    def test_clear(self, provider):
        first = provider.describe(Person)
        provider.clear()
        second = provider.describe(Person)
        assert first is not second
        assert first == second

    def test_descriptor_passthrough(self, provider):
        record = RecordDescriptor("X", "X")
        assert provider.describe(record) is record

    def test_describe_instance(self, provider):
        assert provider.describe_instance(Person()).name == "Person"
        record = RecordDescriptor("X", "X")
        assert provider.describe_instance(Record(record)) is record

    def test_repeated_tag_kind(self, provider):
        with pytest.raises(TagDeclarationError):
            provider.describe(Repeated)

    def test_tags_inside_optional(self, provider):
        record = provider.describe(OptionalTagged)
        assert record.get_field("age").tags == (GreaterThan(),)
        assert record.get_field("code").tags == (TableAlias("o"), Like())
        assert record.get_field("note").tags == ()

    def test_tags_on_several_union_members(self, provider):
        with pytest.raises(TagDeclarationError, match="more than one union member"):
            provider.describe(TaggedTwice)

    def test_unresolved_annotation(self, provider):
        with pytest.raises(TagDeclarationError, match="Unresolved"):
            provider.describe(Unresolved)

    def test_absent_type(self, provider):
        with pytest.raises(InvalidArgumentError):
            provider.describe(None)

    def test_instance_is_not_a_type(self, provider):
        with pytest.raises(InvalidArgumentError):
            provider.describe(Person())


class TestAccessor:
    """Tests for reading field values."""

    def test_read_object(self):
        accessor = Accessor()
        field = FieldDescriptor("age")
        assert accessor.read(field, Person(age=30)) == 30
        assert accessor.value_present(field, Person(age=30))
        assert not accessor.value_present(field, Person())

    def test_falsy_values_are_present(self):
        accessor = Accessor()
        assert accessor.value_present(FieldDescriptor("age"), Person(age=0))
        assert accessor.value_present(FieldDescriptor("name"), Person(name=""))

    def test_read_record(self):
        accessor = Accessor()
        record = RecordDescriptor("P", "P", (FieldDescriptor("age"), FieldDescriptor("name")))
        instance = Record(record, {"age": 4})
        assert accessor.read(FieldDescriptor("age"), instance) == 4
        assert not accessor.value_present(FieldDescriptor("name"), instance)

    def test_missing_attribute(self):
        accessor = Accessor()
        with pytest.raises(AccessError) as exc_info:
            accessor.read(FieldDescriptor("age"), object())
        err = exc_info.value
        assert isinstance(err, CompilationError)
        assert isinstance(err.__cause__, AttributeError)
        assert err.field_name == "age"
        assert err.type_name == "object"
