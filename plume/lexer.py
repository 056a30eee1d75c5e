"""Tokenizer for the Plume language.

Terminal matching is handled by a Lark basic lexer built from the
``PLUME_TERMINALS`` grammar below. Lark only gives us raw terminals; this
module turns them into Plume `Token` objects, maps identifiers onto
keywords, decodes number and string payloads and translates Lark's
`UnexpectedCharacters` into `LexError`.

`tokenize` is a generator: tokens are produced lazily and the stream
always finishes with a single ``EOF`` token.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .errors import LexError


@dataclass(frozen=True)
class Token:
    type: str
    value: Any
    line: int
    column: int

    def __repr__(self) -> str:
        if self.type in ('NAME', 'NUMBER', 'STRING'):
            return f"{self.type}({self.value!r})"
        return self.type


KEYWORDS = {
    'if': 'IF',
    'else': 'ELSE',
    'print': 'PRINT',
    'nil': 'NIL',
    'true': 'TRUE',
    'false': 'FALSE',
}


# Every terminal has to appear in a rule, otherwise Lark drops it from the lexer.
PLUME_TERMINALS = r"""
    start: _token*
    _token: NUMBER | STRING | NAME
          | EQEQ | BANGEQ | LTEQ | GTEQ
          | PLUS | MINUS | STAR | SLASH | EQ | LT | GT | BANG
          | LBRACE | RBRACE | LPAR | RPAR | SEMI

    NUMBER: /[0-9]+(?:\.[0-9]*)?/
    STRING: /"[^"]*"/
    NAME: /[A-Za-z_][A-Za-z0-9_]*/

    EQEQ: "=="
    BANGEQ: "!="
    LTEQ: "<="
    GTEQ: ">="
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    EQ: "="
    LT: "<"
    GT: ">"
    BANG: "!"
    LBRACE: "{"
    RBRACE: "}"
    LPAR: "("
    RPAR: ")"
    SEMI: ";"

    COMMENT: /\/\/[^\n]*/
    %ignore COMMENT

    %import common.WS
    %ignore WS
"""


PLUME_LEXER = Lark(
    PLUME_TERMINALS,
    parser='lalr',
    lexer='basic',
)


def _convert(raw) -> Token:
    kind = raw.type
    text = str(raw)
    if kind == 'NAME':
        keyword = KEYWORDS.get(text)
        if keyword is not None:
            return Token(keyword, text, raw.line, raw.column)
        return Token('NAME', text, raw.line, raw.column)
    if kind == 'NUMBER':
        return Token('NUMBER', float(text), raw.line, raw.column)
    if kind == 'STRING':
        # no escape processing: the payload is exactly what sits between the quotes
        return Token('STRING', text[1:-1], raw.line, raw.column)
    return Token(kind, text, raw.line, raw.column)


def tokenize(source: str) -> Iterator[Token]:
    """Lazily convert source code into tokens, ending with an ``EOF`` token.

    Raises `LexError` on an unknown character or an unterminated string.
    Each call starts a fresh scan of `source`.
    """
    try:
        for raw in PLUME_LEXER.lex(source):
            yield _convert(raw)
    except UnexpectedCharacters as e:
        if e.char == '"':
            raise LexError('unterminated string', e.line) from None
        raise LexError(f"unexpected character {e.char!r}", e.line) from None
    # trailing whitespace/comments may sit after the last token
    line = source.count('\n') + 1
    column = len(source) - source.rfind('\n')
    yield Token('EOF', None, line, column)
