"""Recursive-descent parser producing the XPath AST.

Grammar (XPath 1.0, precedence from loosest to tightest)::

    Expr           := OrExpr
    OrExpr         := AndExpr ('or' AndExpr)*
    AndExpr        := EqualityExpr ('and' EqualityExpr)*
    EqualityExpr   := RelationalExpr (('=' | '!=') RelationalExpr)*
    RelationalExpr := AdditiveExpr (('<' | '<=' | '>' | '>=') AdditiveExpr)*
    AdditiveExpr   := MultExpr (('+' | '-') MultExpr)*
    MultExpr       := UnaryExpr (('*' | 'div' | 'mod') UnaryExpr)*
    UnaryExpr      := '-'* UnionExpr
    UnionExpr      := PathExpr ('|' PathExpr)*
    PathExpr       := LocationPath
                    | FilterExpr (('/' | '//') RelativePath)?
    FilterExpr     := PrimaryExpr Predicate*
    PrimaryExpr    := '(' Expr ')' | Literal | Number | FunctionCall
    LocationPath   := '/' RelativePath? | '//' RelativePath | RelativePath
    RelativePath   := Step (('/' | '//') Step)*
    Step           := AxisSpecifier NodeTest Predicate* | '.' | '..'

``//`` is expanded to ``/descendant-or-self::node()/`` while parsing.
"""

from __future__ import annotations

from json_tree_query.errors import QuerySyntaxError
from json_tree_query.xpath.ast import (
    Axis,
    BinaryOp,
    Expr,
    FilterPath,
    FunctionCall,
    Literal,
    LocationPath,
    NameTest,
    Negate,
    NodeTest,
    Number,
    Step,
    TypeTest,
)
from json_tree_query.xpath.functions import FUNCTIONS
from json_tree_query.xpath.lexer import Token, TokenKind, tokenize

__all__ = ["parse"]

NODE_TYPES = frozenset({"node", "text", "comment", "processing-instruction"})

_DESCENDANT_OR_SELF = Step(Axis.DESCENDANT_OR_SELF, TypeTest("node"))

_STEP_START = frozenset(
    {
        TokenKind.NAME,
        TokenKind.STAR,
        TokenKind.AT,
        TokenKind.DOT,
        TokenKind.DOUBLE_DOT,
    }
)


def parse(expression: str) -> Expr:
    """Parse ``expression`` into an AST.

    Raises:
        QuerySyntaxError: If the expression is empty or malformed, or calls an
            unknown function or a function with the wrong number of arguments.
    """
    return _Parser(expression).parse()


class _Parser:
    def __init__(self, expression: str) -> None:
        self._expression = expression
        self._tokens = tokenize(expression)
        self._pos = 0

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    @property
    def _token(self) -> Token:
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.kind is not TokenKind.EOF:
            self._pos += 1
        return token

    def _at_operator(self, *values: str) -> bool:
        token = self._token
        return token.kind is TokenKind.OPERATOR and token.value in values

    def _expect(self, kind: TokenKind, what: str) -> Token:
        if self._token.kind is not kind:
            raise self._error(f"expected {what}")
        return self._advance()

    def _error(self, message: str, token: Token | None = None) -> QuerySyntaxError:
        token = token or self._token
        if token.kind is TokenKind.EOF:
            message = f"{message}, reached end of expression"
        else:
            message = f"{message}, found {token.value!r}"
        return QuerySyntaxError(message, self._expression, token.position)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse(self) -> Expr:
        if self._token.kind is TokenKind.EOF:
            raise QuerySyntaxError("empty expression", self._expression, 0)
        expr = self._or_expr()
        if self._token.kind is not TokenKind.EOF:
            raise self._error("unexpected token")
        return expr

    def _binary(self, operand: str, *ops: str) -> Expr:
        parse_operand = getattr(self, operand)
        left: Expr = parse_operand()
        while self._at_operator(*ops):
            op = self._advance().value
            left = BinaryOp(op, left, parse_operand())
        return left

    def _or_expr(self) -> Expr:
        return self._binary("_and_expr", "or")

    def _and_expr(self) -> Expr:
        return self._binary("_equality_expr", "and")

    def _equality_expr(self) -> Expr:
        return self._binary("_relational_expr", "=", "!=")

    def _relational_expr(self) -> Expr:
        return self._binary("_additive_expr", "<", "<=", ">", ">=")

    def _additive_expr(self) -> Expr:
        return self._binary("_multiplicative_expr", "+", "-")

    def _multiplicative_expr(self) -> Expr:
        return self._binary("_unary_expr", "*", "div", "mod")

    def _unary_expr(self) -> Expr:
        if self._at_operator("-"):
            self._advance()
            return Negate(self._unary_expr())
        return self._union_expr()

    def _union_expr(self) -> Expr:
        return self._binary("_path_expr", "|")

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _starts_filter_expr(self) -> bool:
        token = self._token
        if token.kind in (TokenKind.LPAREN, TokenKind.LITERAL, TokenKind.NUMBER):
            return True
        if token.kind is TokenKind.DOLLAR:
            raise self._error("variable references are not supported")
        return (
            token.kind is TokenKind.NAME
            and self._peek().kind is TokenKind.LPAREN
            and token.value not in NODE_TYPES
        )

    def _path_expr(self) -> Expr:
        if not self._starts_filter_expr():
            return self._location_path()
        primary = self._primary_expr()
        predicates = self._predicates()
        steps: list[Step] = []
        if self._token.kind in (TokenKind.SLASH, TokenKind.DOUBLE_SLASH):
            if self._advance().kind is TokenKind.DOUBLE_SLASH:
                steps.append(_DESCENDANT_OR_SELF)
            steps.extend(self._relative_path())
        if not predicates and not steps:
            return primary
        return FilterPath(primary, tuple(predicates), tuple(steps))

    def _location_path(self) -> LocationPath:
        token = self._token
        if token.kind is TokenKind.SLASH:
            self._advance()
            if self._token.kind in _STEP_START:
                return LocationPath(True, tuple(self._relative_path()))
            return LocationPath(True, ())
        if token.kind is TokenKind.DOUBLE_SLASH:
            self._advance()
            steps = [_DESCENDANT_OR_SELF, *self._relative_path()]
            return LocationPath(True, tuple(steps))
        return LocationPath(False, tuple(self._relative_path()))

    def _relative_path(self) -> list[Step]:
        steps = [self._step()]
        while self._token.kind in (TokenKind.SLASH, TokenKind.DOUBLE_SLASH):
            if self._advance().kind is TokenKind.DOUBLE_SLASH:
                steps.append(_DESCENDANT_OR_SELF)
            steps.append(self._step())
        return steps

    def _step(self) -> Step:
        token = self._token
        if token.kind is TokenKind.DOT:
            self._advance()
            return Step(Axis.SELF, TypeTest("node"))
        if token.kind is TokenKind.DOUBLE_DOT:
            self._advance()
            return Step(Axis.PARENT, TypeTest("node"))

        axis = Axis.CHILD
        if token.kind is TokenKind.AT:
            self._advance()
            axis = Axis.ATTRIBUTE
        elif (
            token.kind is TokenKind.NAME
            and self._peek().kind is TokenKind.DOUBLE_COLON
        ):
            try:
                axis = Axis(token.value)
            except ValueError:
                raise self._error("unknown axis") from None
            self._advance()
            self._advance()

        test = self._node_test()
        return Step(axis, test, tuple(self._predicates()))

    def _node_test(self) -> NodeTest:
        token = self._token
        if token.kind is TokenKind.STAR:
            self._advance()
            return NameTest("*")
        if token.kind is not TokenKind.NAME:
            raise self._error("expected a node test")
        self._advance()
        if token.value in NODE_TYPES and self._token.kind is TokenKind.LPAREN:
            self._advance()
            self._expect(TokenKind.RPAREN, "')'")
            return TypeTest(token.value)
        return NameTest(token.value)

    def _predicates(self) -> list[Expr]:
        predicates: list[Expr] = []
        while self._token.kind is TokenKind.LBRACKET:
            self._advance()
            predicates.append(self._or_expr())
            self._expect(TokenKind.RBRACKET, "']'")
        return predicates

    # ------------------------------------------------------------------
    # Primaries
    # ------------------------------------------------------------------

    def _primary_expr(self) -> Expr:
        token = self._advance()
        if token.kind is TokenKind.LPAREN:
            expr = self._or_expr()
            self._expect(TokenKind.RPAREN, "')'")
            return expr
        if token.kind is TokenKind.LITERAL:
            return Literal(token.value)
        if token.kind is TokenKind.NUMBER:
            return Number(float(token.value))
        return self._function_call(token)

    def _function_call(self, name: Token) -> FunctionCall:
        spec = FUNCTIONS.get(name.value)
        if spec is None:
            raise self._error("unknown function", name)
        self._expect(TokenKind.LPAREN, "'('")
        args: list[Expr] = []
        if self._token.kind is not TokenKind.RPAREN:
            args.append(self._or_expr())
            while self._token.kind is TokenKind.COMMA:
                self._advance()
                args.append(self._or_expr())
        self._expect(TokenKind.RPAREN, "')'")
        if len(args) < spec.min_args or (
            spec.max_args is not None and len(args) > spec.max_args
        ):
            raise QuerySyntaxError(
                f"wrong number of arguments to {name.value}(): {len(args)}",
                self._expression,
                name.position,
            )
        return FunctionCall(name.value, tuple(args))
