"""Tests for the tag model."""

import pytest

from tagged_query.errors import TagDeclarationError
from tagged_query.tags import (
    ALIAS_KINDS,
    COMPARISON_KINDS,
    FROM_PARAM,
    TAG_CLASSES,
    TO_PARAM,
    AliasAs,
    Between,
    CustomName,
    GreaterThan,
    Ignore,
    InRange,
    IsNull,
    NotLike,
    OutRange,
    RangeTag,
    TableAlias,
    Tag,
    TagKind,
    TagRole,
    WrapName,
    WrapValue,
    make_tag,
)


class TestTagKind:
    """Tests for TagKind and its roles."""

    def test_every_kind_has_a_role(self):
        for kind in TagKind:
            assert isinstance(kind.role, TagRole)

    def test_roles(self):
        assert TagKind.IGNORE.role is TagRole.EXCLUSION
        assert TagKind.ALIAS_AS_SELF.role is TagRole.NAMING
        assert TagKind.WRAP_VALUE.role is TagRole.WRAPPING
        assert TagKind.IS_NOT_NULL.role is TagRole.NULL_TEST
        assert TagKind.OUT_RANGE.role is TagRole.RANGE_TEST
        assert TagKind.NOT_LIKE.role is TagRole.BINARY

    def test_every_kind_has_a_class(self):
        assert set(TAG_CLASSES) == {kind.value for kind in TagKind}
        for name, cls in TAG_CLASSES.items():
            assert cls.kind.value == name

    def test_groups(self):
        assert len(COMPARISON_KINDS) == 11
        assert TagKind.NOT_LIKE not in COMPARISON_KINDS
        assert ALIAS_KINDS == (TagKind.ALIAS_AS, TagKind.ALIAS_AS_SELF)


class TestTags:
    """Tests for tag construction."""

    def test_tags_are_immutable(self):
        tag = TableAlias("u")
        with pytest.raises(AttributeError):
            tag.prefix = "v"  # type: ignore[misc]

    def test_tags_compare_by_value(self):
        assert TableAlias("u") == TableAlias("u")
        assert TableAlias("u") != TableAlias("v")
        assert IsNull() == IsNull()
        assert hash(CustomName("x")) == hash(CustomName("x"))

    def test_distinct_classes_are_not_equal(self):
        assert Ignore() != IsNull()

    def test_range_defaults(self):
        tag = InRange()
        assert tag.from_param == FROM_PARAM
        assert tag.to_param == TO_PARAM
        assert tag.inclusive is False
        assert Between("lo", "hi").from_param == "lo"

    def test_wrap_defaults(self):
        assert WrapName("lower").after == ""
        assert WrapValue("cast", "as string").after == "as string"

    def test_dotted_names_allowed(self):
        assert CustomName("address.city").name == "address.city"
        assert AliasAs("dto.name").name == "dto.name"

    @pytest.mark.parametrize(
        "build",
        [
            lambda: TableAlias(""),
            lambda: CustomName("full name"),
            lambda: AliasAs("x;drop"),
            lambda: WrapName("lower()"),
            lambda: WrapValue("date", after=3),
            lambda: Between("from.value", "to"),
            lambda: InRange("a", "b", inclusive="yes"),
            lambda: OutRange(None, "b"),
        ],
    )
    def test_invalid_parameters(self, build):
        with pytest.raises(TagDeclarationError):
            build()

    @pytest.mark.parametrize("base", [Tag, RangeTag])
    def test_base_classes_not_attachable(self, base):
        with pytest.raises(TagDeclarationError, match="no tag kind"):
            base()


class TestMakeTag:
    """Tests for building tags from DSL names."""

    def test_bare_tag(self):
        assert make_tag("GreaterThan") == GreaterThan()

    def test_positional_args(self):
        assert make_tag("InRange", ["lo", "hi", True]) == InRange("lo", "hi", True)

    def test_keyword_args(self):
        tag = make_tag("OutRange", kwargs={"to_param": "hi", "inclusive": True})
        assert tag == OutRange(FROM_PARAM, "hi", True)

    def test_unknown_tag(self):
        with pytest.raises(TagDeclarationError, match="Unknown tag"):
            make_tag("Greater")

    def test_too_many_args(self):
        with pytest.raises(TagDeclarationError, match="at most"):
            make_tag("NotLike", ["x"])

    def test_unknown_keyword(self):
        with pytest.raises(TagDeclarationError, match="no parameter"):
            make_tag("TableAlias", kwargs={"alias": "u"})

    def test_missing_required_arg(self):
        with pytest.raises(TagDeclarationError):
            make_tag("CustomName")

    def test_make_not_like(self):
        assert make_tag("NotLike") == NotLike()
