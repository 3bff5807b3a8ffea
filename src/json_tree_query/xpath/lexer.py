"""Tokenizer for XPath 1.0 expressions.

XPath's grammar is ambiguous at the token level: ``*`` is either a name test
or multiplication, and ``and``/``or``/``div``/``mod`` are either operators or
element names.  The rule from XPath 1.0 section 3.7 is applied here: when a
preceding token exists and it is not ``@``, ``::``, ``(``, ``[``, ``,`` or an
operator, ``*`` is multiplication and those names are operators.
"""

from __future__ import annotations

import re
from enum import StrEnum, auto
from typing import NamedTuple

from json_tree_query.errors import QuerySyntaxError

__all__ = ["Token", "TokenKind", "tokenize"]


class TokenKind(StrEnum):
    NUMBER = auto()
    LITERAL = auto()
    NAME = auto()
    OPERATOR = auto()
    STAR = auto()
    SLASH = auto()
    DOUBLE_SLASH = auto()
    DOT = auto()
    DOUBLE_DOT = auto()
    AT = auto()
    DOUBLE_COLON = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    DOLLAR = auto()
    EOF = auto()


class Token(NamedTuple):
    kind: TokenKind
    value: str
    position: int


OPERATOR_NAMES = frozenset({"and", "or", "div", "mod"})

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<number>\d+(?:\.\d*)?|\.\d+)
  | (?P<literal>"[^"]*"|'[^']*')
  | (?P<double_slash>//)
  | (?P<double_colon>::)
  | (?P<double_dot>\.\.)
  | (?P<operator><=|>=|!=|[=<>+\-|])
  | (?P<slash>/)
  | (?P<dot>\.)
  | (?P<star>\*)
  | (?P<lparen>\()
  | (?P<rparen>\))
  | (?P<lbracket>\[)
  | (?P<rbracket>\])
  | (?P<comma>,)
  | (?P<at>@)
  | (?P<dollar>\$)
  | (?P<name>[^\W\d][\w.\-]*)
    """,
    re.VERBOSE,
)

# Tokens after which "*" is a name test and operator names are element names.
_OPERAND_FOLLOWS = frozenset(
    {
        TokenKind.AT,
        TokenKind.DOUBLE_COLON,
        TokenKind.LPAREN,
        TokenKind.LBRACKET,
        TokenKind.COMMA,
        TokenKind.OPERATOR,
        TokenKind.SLASH,
        TokenKind.DOUBLE_SLASH,
    }
)


def tokenize(expression: str) -> list[Token]:
    """Split ``expression`` into tokens, ending with an EOF token.

    Raises:
        QuerySyntaxError: On an unterminated literal or an unexpected character.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(expression)
    while pos < length:
        match = _TOKEN_RE.match(expression, pos)
        if match is None:
            char = expression[pos]
            if char in "\"'":
                raise QuerySyntaxError("unterminated string literal", expression, pos)
            raise QuerySyntaxError(f"unexpected character {char!r}", expression, pos)
        group = match.lastgroup
        text = match.group()
        if group != "ws":
            kind = TokenKind(group)
            if kind is TokenKind.LITERAL:
                text = text[1:-1]
            tokens.append(_disambiguate(Token(kind, text, pos), tokens))
        pos = match.end()
    tokens.append(Token(TokenKind.EOF, "", length))
    return tokens


def _disambiguate(token: Token, previous: list[Token]) -> Token:
    if not previous or previous[-1].kind in _OPERAND_FOLLOWS:
        return token
    if token.kind is TokenKind.STAR:
        return Token(TokenKind.OPERATOR, "*", token.position)
    if token.kind is TokenKind.NAME and token.value in OPERATOR_NAMES:
        return Token(TokenKind.OPERATOR, token.value, token.position)
    return token
