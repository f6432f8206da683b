"""Parser for the record schema DSL."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc

from tagged_query.errors import TagDeclarationError
from tagged_query.parsing.record_lexer import RecordLexer
from tagged_query.tags import Tag, make_tag
from tagged_query.types import FieldDescriptor, RecordDescriptor

logger = logging.getLogger(__name__)


@dataclass
class TagSpec:
    """A tag as written in the schema, before construction.

    Each argument is a (keyword, value) pair; keyword is None for
    positional arguments.
    """

    name: str
    arguments: list[tuple[str | None, Any]] = field(default_factory=list)
    lineno: int = 0

    def split_arguments(self) -> tuple[list[Any], dict[str, Any]]:
        """Split arguments into positional and keyword ones.

        Raises:
            SyntaxError: If a positional argument follows a keyword one, or a
                keyword repeats.
        """
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for key, value in self.arguments:
            if key is None:
                if kwargs:
                    raise SyntaxError(
                        f"Positional argument after keyword argument in @{self.name} "
                        f"(line {self.lineno})"
                    )
                args.append(value)
            elif key in kwargs:
                raise SyntaxError(
                    f"Repeated argument '{key}' in @{self.name} (line {self.lineno})"
                )
            else:
                kwargs[key] = value
        return args, kwargs


@dataclass
class FieldSpec:
    """A field with its tag specifications."""

    name: str
    tags: list[TagSpec] = field(default_factory=list)


@dataclass
class RecordSpec:
    """A record declaration before resolution."""

    qualified_name: str
    fields: list[FieldSpec]


class RecordRegistry:
    """Registry of record descriptors declared in a schema."""

    def __init__(self) -> None:
        self._records: dict[str, RecordDescriptor] = {}
        self._by_simple_name: dict[str, RecordDescriptor] = {}

    def register(self, descriptor: RecordDescriptor) -> None:
        """Register a record descriptor."""
        if descriptor.qualified_name in self._records:
            raise ValueError(f"Record '{descriptor.qualified_name}' is already defined")
        if descriptor.name in self._by_simple_name:
            raise ValueError(f"Record name '{descriptor.name}' is already defined")
        self._records[descriptor.qualified_name] = descriptor
        self._by_simple_name[descriptor.name] = descriptor

    def get(self, name: str) -> RecordDescriptor | None:
        """Get a record by qualified or simple name."""
        return self._records.get(name) or self._by_simple_name.get(name)

    def get_or_raise(self, name: str) -> RecordDescriptor:
        """Get a record by name, raising if not found."""
        descriptor = self.get(name)
        if descriptor is None:
            raise KeyError(f"Record '{name}' not found")
        return descriptor

    def list_records(self) -> list[str]:
        """List qualified names of all records in declaration order."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)


class RecordParser:
    """Parser for the record schema DSL.

    Example::

        com.example.Customer {
            @TableAlias("c") @CustomName("full_name") @AliasAsSelf name,
            @InRange(from_param="lo", to_param="hi", inclusive=true) age,
            @Ignore internal_note,
        }
    """

    tokens = RecordLexer.tokens

    def __init__(self) -> None:
        self.lexer = RecordLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self.registry: RecordRegistry = RecordRegistry()

    def p_schema(self, p: yacc.YaccProduction) -> None:
        """schema : record_list"""
        p[0] = p[1]

    def p_record_list_empty(self, p: yacc.YaccProduction) -> None:
        """record_list : """
        p[0] = []

    def p_record_list_multiple(self, p: yacc.YaccProduction) -> None:
        """record_list : record_list record"""
        p[0] = p[1]
        p[0].append(p[2])

    def p_record(self, p: yacc.YaccProduction) -> None:
        """record : qualified_name LBRACE field_list RBRACE
                  | qualified_name LBRACE field_list COMMA RBRACE"""
        p[0] = RecordSpec(qualified_name=p[1], fields=p[3])

    def p_record_empty(self, p: yacc.YaccProduction) -> None:
        """record : qualified_name LBRACE RBRACE"""
        p[0] = RecordSpec(qualified_name=p[1], fields=[])

    def p_qualified_name_single(self, p: yacc.YaccProduction) -> None:
        """qualified_name : IDENTIFIER"""
        p[0] = p[1]

    def p_qualified_name_dotted(self, p: yacc.YaccProduction) -> None:
        """qualified_name : qualified_name DOT IDENTIFIER"""
        p[0] = f"{p[1]}.{p[3]}"

    def p_field_list_single(self, p: yacc.YaccProduction) -> None:
        """field_list : field"""
        p[0] = [p[1]]

    def p_field_list_multiple(self, p: yacc.YaccProduction) -> None:
        """field_list : field_list COMMA field"""
        p[0] = p[1] + [p[3]]

    def p_field(self, p: yacc.YaccProduction) -> None:
        """field : tag_list IDENTIFIER"""
        p[0] = FieldSpec(name=p[2], tags=p[1])

    def p_tag_list_empty(self, p: yacc.YaccProduction) -> None:
        """tag_list : """
        p[0] = []

    def p_tag_list_multiple(self, p: yacc.YaccProduction) -> None:
        """tag_list : tag_list tag"""
        p[0] = p[1] + [p[2]]

    def p_tag_bare(self, p: yacc.YaccProduction) -> None:
        """tag : AT IDENTIFIER
               | AT IDENTIFIER LPAREN RPAREN"""
        p[0] = TagSpec(name=p[2], lineno=p.lineno(2))

    def p_tag_args(self, p: yacc.YaccProduction) -> None:
        """tag : AT IDENTIFIER LPAREN arg_list RPAREN"""
        p[0] = TagSpec(name=p[2], arguments=p[4], lineno=p.lineno(2))

    def p_arg_list_single(self, p: yacc.YaccProduction) -> None:
        """arg_list : arg"""
        p[0] = [p[1]]

    def p_arg_list_multiple(self, p: yacc.YaccProduction) -> None:
        """arg_list : arg_list COMMA arg"""
        p[0] = p[1] + [p[3]]

    def p_arg_positional(self, p: yacc.YaccProduction) -> None:
        """arg : value"""
        p[0] = (None, p[1])

    def p_arg_keyword(self, p: yacc.YaccProduction) -> None:
        """arg : IDENTIFIER EQUALS value"""
        p[0] = (p[1], p[3])

    def p_value_string(self, p: yacc.YaccProduction) -> None:
        """value : STRING"""
        p[0] = p[1]

    def p_value_true(self, p: yacc.YaccProduction) -> None:
        """value : TRUE"""
        p[0] = True

    def p_value_false(self, p: yacc.YaccProduction) -> None:
        """value : FALSE"""
        p[0] = False

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        kwargs.setdefault("errorlog", yacc.NullLogger())
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> RecordRegistry:
        """Parse record declarations and return a populated RecordRegistry."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self.registry = RecordRegistry()
        self.lexer.lexer.lineno = 1

        specs = self.parser.parse(data, lexer=self.lexer.lexer)
        if specs is None:
            specs = []

        for spec in specs:
            self.registry.register(self._resolve_record(spec))

        logger.debug("Parsed schema: %d record(s)", len(self.registry))
        return self.registry

    def _resolve_record(self, spec: RecordSpec) -> RecordDescriptor:
        """Construct the tags of a record spec and build its descriptor."""
        seen: set[str] = set()
        fields: list[FieldDescriptor] = []
        for field_spec in spec.fields:
            if field_spec.name in seen:
                raise ValueError(
                    f"Record '{spec.qualified_name}' declares field "
                    f"'{field_spec.name}' more than once"
                )
            seen.add(field_spec.name)
            tags = tuple(self._resolve_tag(t) for t in field_spec.tags)
            fields.append(FieldDescriptor(name=field_spec.name, tags=tags))

        return RecordDescriptor(
            name=spec.qualified_name.rsplit(".", 1)[-1],
            qualified_name=spec.qualified_name,
            fields=tuple(fields),
        )

    def _resolve_tag(self, spec: TagSpec) -> Tag:
        args, kwargs = spec.split_arguments()
        try:
            return make_tag(spec.name, args, kwargs)
        except TagDeclarationError as e:
            raise TagDeclarationError(f"{e} (line {spec.lineno})") from e
