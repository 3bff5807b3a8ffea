"""XPathExpr: a compiled, reusable path expression."""

from __future__ import annotations

from json_tree_query.errors import QueryEvaluationError
from json_tree_query.protocols import NodeNavigator
from json_tree_query.xpath.ast import Expr
from json_tree_query.xpath.evaluator import Context, evaluate
from json_tree_query.xpath.functions import XPathValue
from json_tree_query.xpath.parser import parse

__all__ = ["XPathExpr", "compile"]


class XPathExpr:
    """A compiled XPath expression.

    Instances are immutable and hold no evaluation state, so one compiled
    expression may be shared and evaluated concurrently against any number of
    navigators.

    Example::

        expr = compile("//cars/*[name = 'BMW']/models/*")
        for nav in expr.select(navigator):
            print(nav.value)
    """

    __slots__ = ("_ast", "_expression")

    def __init__(self, expression: str, ast: Expr) -> None:
        self._expression = expression
        self._ast = ast

    def __repr__(self) -> str:
        return f"XPathExpr({self._expression!r})"

    def __str__(self) -> str:
        return self._expression

    @property
    def expression(self) -> str:
        """The source text this expression was compiled from."""
        return self._expression

    @property
    def ast(self) -> Expr:
        return self._ast

    def evaluate(self, navigator: NodeNavigator) -> XPathValue:
        """Evaluate with ``navigator``'s current node as the context node.

        Returns:
            A node-set (``list`` of navigators in document order), ``str``,
            ``float`` or ``bool``.  ``navigator`` itself is not moved.
        """
        return evaluate(self._ast, Context(navigator.copy()))

    def select(self, navigator: NodeNavigator) -> list[NodeNavigator]:
        """Return the matched nodes, in document order.

        Raises:
            QueryEvaluationError: If the expression does not produce a node-set
                (for example ``count(//a)``).
        """
        result = self.evaluate(navigator)
        if not isinstance(result, list):
            msg = (
                f"expression {self._expression!r} evaluates to "
                f"{type(result).__name__}, not a node-set"
            )
            raise QueryEvaluationError(msg)
        return result


def compile(expression: str) -> XPathExpr:  # noqa: A001
    """Compile ``expression``.

    Raises:
        QuerySyntaxError: If the expression is malformed.
    """
    return XPathExpr(expression, parse(expression))
