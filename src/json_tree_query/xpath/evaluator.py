"""Evaluator for the XPath AST over any ``NodeNavigator``.

Node-sets are lists of navigator copies.  After every step and union the set
is de-duplicated by ``current()`` identity and sorted by ``order_key()``, so
results always come back in document order.  Inside a step, predicates see
candidates in axis order: reverse axes (ancestor, preceding, ...) number their
nodes nearest first, as XPath requires.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass

from json_tree_query.errors import QueryEvaluationError
from json_tree_query.protocols import NodeKind, NodeNavigator
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
    Number,
    Step,
)
from json_tree_query.xpath.functions import (
    FUNCTIONS,
    XPathValue,
    to_boolean,
    to_number,
    to_string,
)

__all__ = ["Context", "evaluate"]


@dataclass(slots=True)
class Context:
    """Evaluation context: the context node plus its position and size."""

    node: NodeNavigator
    position: int = 1
    size: int = 1


_RELATIONAL: dict[str, Callable[[float, float], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

_ARITHMETIC = frozenset({"+", "-", "*", "div", "mod"})


def evaluate(expr: Expr, ctx: Context) -> XPathValue:
    """Evaluate ``expr`` against ``ctx`` and return an XPath value."""
    if isinstance(expr, LocationPath):
        if expr.absolute:
            root = ctx.node.copy()
            root.move_to_root()
            start = [root]
        else:
            start = [ctx.node.copy()]
        return _apply_steps(start, expr.steps)

    if isinstance(expr, Literal):
        return expr.value

    if isinstance(expr, Number):
        return expr.value

    if isinstance(expr, FunctionCall):
        args = [evaluate(arg, ctx) for arg in expr.args]
        return FUNCTIONS[expr.name].impl(ctx, args)

    if isinstance(expr, Negate):
        return -to_number(evaluate(expr.operand, ctx))

    if isinstance(expr, BinaryOp):
        return _binary(expr, ctx)

    if isinstance(expr, FilterPath):
        value = evaluate(expr.primary, ctx)
        if not isinstance(value, list):
            msg = f"predicates and steps need a node-set, got {type(value).__name__}"
            raise QueryEvaluationError(msg)
        nodes = value
        for predicate in expr.predicates:
            nodes = _filter(nodes, predicate)
        return _apply_steps(nodes, expr.steps)

    raise QueryEvaluationError(f"cannot evaluate {expr!r}")


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


def _binary(expr: BinaryOp, ctx: Context) -> XPathValue:
    op = expr.op
    if op == "or":
        return to_boolean(evaluate(expr.left, ctx)) or to_boolean(
            evaluate(expr.right, ctx)
        )
    if op == "and":
        return to_boolean(evaluate(expr.left, ctx)) and to_boolean(
            evaluate(expr.right, ctx)
        )

    left = evaluate(expr.left, ctx)
    right = evaluate(expr.right, ctx)

    if op == "|":
        if not isinstance(left, list) or not isinstance(right, list):
            raise QueryEvaluationError("'|' needs node-set operands")
        return _document_order([*left, *right])
    if op in _ARITHMETIC:
        return _arithmetic(op, to_number(left), to_number(right))
    return _compare(op, left, right)


def _arithmetic(op: str, a: float, b: float) -> float:
    if op == "+":
        return a + b
    if op == "-":
        return a - b
    if op == "*":
        return a * b
    if op == "div":
        if b == 0:
            if a == 0 or math.isnan(a):
                return math.nan
            return math.copysign(math.inf, a) * math.copysign(1.0, b)
        return a / b
    # mod truncates towards zero like C's fmod
    if b == 0 or math.isnan(a) or math.isnan(b) or math.isinf(a):
        return math.nan
    if math.isinf(b):
        return a
    return math.fmod(a, b)


def _compare(op: str, left: XPathValue, right: XPathValue) -> bool:
    left_is_set = isinstance(left, list)
    right_is_set = isinstance(right, list)
    if left_is_set and right_is_set:
        right_values = [node.value for node in right]
        return any(
            _compare_atomic(op, node.value, value)
            for node in left
            for value in right_values
        )
    if left_is_set or right_is_set:
        nodes, other = (left, right) if left_is_set else (right, left)
        if isinstance(other, bool):
            nodes_bool = to_boolean(nodes)
            pair = (nodes_bool, other) if left_is_set else (other, nodes_bool)
            return _compare_atomic(op, *pair)
        if left_is_set:
            return any(_compare_atomic(op, node.value, other) for node in nodes)
        return any(_compare_atomic(op, other, node.value) for node in nodes)
    return _compare_atomic(op, left, right)


def _compare_atomic(op: str, a: XPathValue, b: XPathValue) -> bool:
    if op in ("=", "!="):
        if isinstance(a, bool) or isinstance(b, bool):
            equal = to_boolean(a) == to_boolean(b)
        elif isinstance(a, float) or isinstance(b, float):
            equal = to_number(a) == to_number(b)
        else:
            equal = to_string(a) == to_string(b)
        return equal if op == "=" else not equal
    return _RELATIONAL[op](to_number(a), to_number(b))


# ---------------------------------------------------------------------------
# Location steps
# ---------------------------------------------------------------------------


def _apply_steps(
    nodes: list[NodeNavigator], steps: Iterable[Step]
) -> list[NodeNavigator]:
    for step in steps:
        selected: list[NodeNavigator] = []
        for node in nodes:
            candidates = [n for n in _iter_axis(node, step.axis) if _matches(n, step)]
            for predicate in step.predicates:
                candidates = _filter(candidates, predicate)
            selected.extend(candidates)
        nodes = _document_order(selected)
    return nodes


def _filter(nodes: list[NodeNavigator], predicate: Expr) -> list[NodeNavigator]:
    size = len(nodes)
    kept: list[NodeNavigator] = []
    for position, node in enumerate(nodes, start=1):
        value = evaluate(predicate, Context(node, position, size))
        if isinstance(value, float):
            if value == position:
                kept.append(node)
        elif to_boolean(value):
            kept.append(node)
    return kept


def _document_order(nodes: list[NodeNavigator]) -> list[NodeNavigator]:
    unique: dict[Hashable, NodeNavigator] = {}
    for node in nodes:
        unique.setdefault(node.current(), node)
    return sorted(unique.values(), key=lambda node: node.order_key())


def _matches(node: NodeNavigator, step: Step) -> bool:
    test = step.test
    if isinstance(test, NameTest):
        if node.node_kind is not NodeKind.ELEMENT:
            return False
        return test.name == "*" or node.local_name == test.name
    if test.node_type == "node":
        return True
    if test.node_type == "text":
        return node.node_kind is NodeKind.TEXT
    # comment() and processing-instruction() never match
    return False


def _iter_axis(node: NodeNavigator, axis: Axis) -> Iterator[NodeNavigator]:
    if axis is Axis.CHILD:
        yield from _children(node)
    elif axis is Axis.DESCENDANT:
        yield from _descendants(node)
    elif axis is Axis.DESCENDANT_OR_SELF:
        yield node.copy()
        yield from _descendants(node)
    elif axis is Axis.SELF:
        yield node.copy()
    elif axis is Axis.PARENT:
        parent = node.copy()
        if parent.move_to_parent():
            yield parent
    elif axis in (Axis.ANCESTOR, Axis.ANCESTOR_OR_SELF):
        if axis is Axis.ANCESTOR_OR_SELF:
            yield node.copy()
        cursor = node.copy()
        while cursor.move_to_parent():
            yield cursor.copy()
    elif axis is Axis.FOLLOWING_SIBLING:
        cursor = node.copy()
        while cursor.move_to_next():
            yield cursor.copy()
    elif axis is Axis.PRECEDING_SIBLING:
        cursor = node.copy()
        while cursor.move_to_previous():
            yield cursor.copy()
    elif axis is Axis.FOLLOWING:
        yield from _following(node)
    elif axis is Axis.PRECEDING:
        yield from _preceding(node)
    # attribute: JSON trees carry no attributes


def _children(node: NodeNavigator) -> Iterator[NodeNavigator]:
    cursor = node.copy()
    if not cursor.move_to_child():
        return
    yield cursor.copy()
    while cursor.move_to_next():
        yield cursor.copy()


def _descendants(node: NodeNavigator) -> Iterator[NodeNavigator]:
    """Pre-order walk below ``node``, ``node`` itself excluded."""
    cursor = node.copy()
    if not cursor.move_to_child():
        return
    depth = 1
    while True:
        yield cursor.copy()
        if cursor.move_to_child():
            depth += 1
            continue
        while not cursor.move_to_next():
            cursor.move_to_parent()
            depth -= 1
            if depth == 0:
                return


def _following(node: NodeNavigator) -> Iterator[NodeNavigator]:
    cursor = node.copy()
    while True:
        sibling = cursor.copy()
        while sibling.move_to_next():
            yield sibling.copy()
            yield from _descendants(sibling)
        if not cursor.move_to_parent():
            return


def _preceding(node: NodeNavigator) -> Iterator[NodeNavigator]:
    # Reverse document order, ancestors excluded.
    cursor = node.copy()
    while True:
        sibling = cursor.copy()
        while sibling.move_to_previous():
            yield from reversed(list(_descendants(sibling)))
            yield sibling.copy()
        if not cursor.move_to_parent():
            return
