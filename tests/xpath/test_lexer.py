"""Tests for the XPath tokenizer."""

from __future__ import annotations

import pytest

from json_tree_query.errors import QuerySyntaxError
from json_tree_query.xpath.lexer import Token, TokenKind, tokenize


def _kinds(expression: str) -> list[TokenKind]:
    return [token.kind for token in tokenize(expression)]


def _values(expression: str) -> list[str]:
    return [token.value for token in tokenize(expression)[:-1]]


class TestBasicTokens:
    def test_always_ends_with_eof(self) -> None:
        tokens = tokenize("a")
        assert tokens[-1] == Token(TokenKind.EOF, "", 1)

    def test_empty_expression_is_only_eof(self) -> None:
        assert _kinds("") == [TokenKind.EOF]

    def test_path(self) -> None:
        assert _kinds("/cars//name") == [
            TokenKind.SLASH,
            TokenKind.NAME,
            TokenKind.DOUBLE_SLASH,
            TokenKind.NAME,
            TokenKind.EOF,
        ]

    def test_positions(self) -> None:
        tokens = tokenize("a / b")
        assert [t.position for t in tokens] == [0, 2, 4, 5]

    def test_whitespace_skipped(self) -> None:
        assert _values("  a  =  'x'  ") == ["a", "=", "x"]

    def test_dots(self) -> None:
        assert _kinds("../.")[:-1] == [
            TokenKind.DOUBLE_DOT,
            TokenKind.SLASH,
            TokenKind.DOT,
        ]

    def test_axis(self) -> None:
        assert _kinds("child::a")[:-1] == [
            TokenKind.NAME,
            TokenKind.DOUBLE_COLON,
            TokenKind.NAME,
        ]

    def test_hyphenated_names(self) -> None:
        assert _values("following-sibling::local-name") == [
            "following-sibling",
            "::",
            "local-name",
        ]


class TestLiteralsAndNumbers:
    @pytest.mark.parametrize("expression", ["'BMW'", '"BMW"'])
    def test_literal_quotes_stripped(self, expression: str) -> None:
        (token, _eof) = tokenize(expression)
        assert token == Token(TokenKind.LITERAL, "BMW", 0)

    def test_literal_may_hold_other_quote(self) -> None:
        (token, _eof) = tokenize("\"it's\"")
        assert token.value == "it's"

    @pytest.mark.parametrize("expression", ["1", "1.5", ".5", "10."])
    def test_numbers(self, expression: str) -> None:
        (token, _eof) = tokenize(expression)
        assert token.kind is TokenKind.NUMBER
        assert token.value == expression

    def test_unterminated_literal(self) -> None:
        with pytest.raises(QuerySyntaxError, match="unterminated") as excinfo:
            tokenize("a = 'abc")
        assert excinfo.value.position == 4

    def test_unexpected_character(self) -> None:
        with pytest.raises(QuerySyntaxError, match="unexpected character") as excinfo:
            tokenize("a # b")
        assert excinfo.value.position == 2
        assert excinfo.value.expression == "a # b"


class TestDisambiguation:
    """``*`` and operator names depend on the preceding token."""

    def test_leading_star_is_name_test(self) -> None:
        assert _kinds("*")[0] is TokenKind.STAR

    def test_star_after_slash_is_name_test(self) -> None:
        assert _kinds("a/*")[2] is TokenKind.STAR

    def test_star_after_operand_is_multiply(self) -> None:
        token = tokenize("2 * 3")[1]
        assert token == Token(TokenKind.OPERATOR, "*", 2)

    def test_div_after_operand_is_operator(self) -> None:
        assert tokenize("6 div 2")[1].kind is TokenKind.OPERATOR

    def test_div_after_slash_is_name(self) -> None:
        assert tokenize("/div")[1] == Token(TokenKind.NAME, "div", 1)

    def test_leading_operator_name_is_name(self) -> None:
        assert tokenize("and")[0].kind is TokenKind.NAME

    def test_and_between_predicates(self) -> None:
        kinds = _kinds("a[b and c]")
        assert kinds[3] is TokenKind.OPERATOR

    def test_star_after_open_bracket(self) -> None:
        assert _kinds("a[*]")[2] is TokenKind.STAR
