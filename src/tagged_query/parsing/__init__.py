"""Parsing module for the record schema DSL."""

from tagged_query.parsing.record_lexer import RecordLexer
from tagged_query.parsing.record_parser import RecordParser, RecordRegistry

__all__ = [
    "RecordLexer",
    "RecordParser",
    "RecordRegistry",
]
