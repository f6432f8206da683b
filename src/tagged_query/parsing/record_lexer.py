"""Lexer for the record schema DSL."""

import codecs

import ply.lex as lex


def unescape(text: str) -> str:
    """Resolve backslash escapes, keeping non-ASCII characters intact."""
    return codecs.decode(text.encode("latin-1", "backslashreplace"), "unicode_escape")


class RecordLexer:
    """Lexer for tokenizing record schema declarations.

    After ``build()``, ``lexer`` is a ply lexer; feed it with ``input()`` and
    iterate it for tokens.
    """

    # Reserved keywords
    reserved = {
        "true": "TRUE",
        "false": "FALSE",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "STRING",
        "AT",
        "LBRACE",
        "RBRACE",
        "LPAREN",
        "RPAREN",
        "COMMA",
        "DOT",
        "EQUALS",
    ] + list(reserved.values())

    # Simple tokens
    t_AT = r"@"
    t_LBRACE = r"\{"
    t_RBRACE = r"\}"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_COMMA = r","
    t_DOT = r"\."
    t_EQUALS = r"="

    # Spaces, tabs and carriage returns
    t_ignore = " \t\r"

    # Comments run to end of line
    t_ignore_COMMENT = r"\#[^\n]*"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"([^"\\\n]|\\.)*"'
        t.value = unescape(t.value[1:-1])
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        return t

    def t_newline(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += t.value.count("\n")

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(
            f"Illegal character {t.value[0]!r} in schema (line {t.lexer.lineno})"
        )

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the ply lexer from this class's rules."""
        self.lexer = lex.lex(module=self, **kwargs)
