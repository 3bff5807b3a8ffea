"""XPath value conversions and the core function library.

Values flowing through the evaluator are one of four Python types:

- ``list[NodeNavigator]`` : a node-set, in document order, without duplicates
- ``str``                  : a string
- ``float``                : a number (IEEE double, NaN and infinities allowed)
- ``bool``                 : a boolean

The conversion helpers follow XPath 1.0 section 4 (``string()``,
``number()``, ``boolean()``).  ``FUNCTIONS`` maps each supported function name
to its arity range and implementation; the parser rejects unknown names and
wrong argument counts at compile time.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from json_tree_query.errors import QueryEvaluationError
from json_tree_query.protocols import NodeNavigator

if TYPE_CHECKING:
    from json_tree_query.xpath.evaluator import Context

__all__ = [
    "FUNCTIONS",
    "FunctionSpec",
    "XPathValue",
    "number_to_string",
    "to_boolean",
    "to_number",
    "to_string",
]

XPathValue = list[NodeNavigator] | str | float | bool

_NUMBER_RE = re.compile(r"\s*-?(?:\d+(?:\.\d*)?|\.\d+)\s*")


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def number_to_string(value: float) -> str:
    """Format a number the way XPath's string() does: no exponent, no ".0"."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    return np.format_float_positional(value, unique=True, trim="-")


def to_string(value: XPathValue) -> str:
    if isinstance(value, list):
        return value[0].value if value else ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return number_to_string(value)
    return value


def to_number(value: XPathValue) -> float:
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, float):
        return value
    text = to_string(value)
    if _NUMBER_RE.fullmatch(text) is None:
        return math.nan
    return float(text)


def to_boolean(value: XPathValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return not (value == 0 or math.isnan(value))
    return len(value) > 0


def xpath_round(value: float) -> float:
    """round() per XPath: halves go towards positive infinity."""
    if math.isnan(value) or math.isinf(value):
        return value
    return float(math.floor(value + 0.5))


def _node_set(value: XPathValue, function: str) -> list[NodeNavigator]:
    if not isinstance(value, list):
        msg = f"{function}() expects a node-set argument, got {type(value).__name__}"
        raise QueryEvaluationError(msg)
    return value


# ---------------------------------------------------------------------------
# Function implementations
# ---------------------------------------------------------------------------

Impl = Callable[["Context", list[XPathValue]], XPathValue]


@dataclass(frozen=True, slots=True)
class FunctionSpec:
    min_args: int
    max_args: int | None
    impl: Impl


def _last(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return float(ctx.size)


def _position(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return float(ctx.position)


def _count(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return float(len(_node_set(args[0], "count")))


def _local_name(ctx: Context, args: list[XPathValue]) -> XPathValue:
    if not args:
        return ctx.node.local_name
    nodes = _node_set(args[0], "name")
    return nodes[0].local_name if nodes else ""


def _string(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return to_string(args[0]) if args else ctx.node.value


def _concat(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return "".join(to_string(arg) for arg in args)


def _starts_with(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return to_string(args[0]).startswith(to_string(args[1]))


def _ends_with(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return to_string(args[0]).endswith(to_string(args[1]))


def _contains(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return to_string(args[1]) in to_string(args[0])


def _substring_before(ctx: Context, args: list[XPathValue]) -> XPathValue:
    text, sep = to_string(args[0]), to_string(args[1])
    index = text.find(sep)
    return text[:index] if index >= 0 else ""


def _substring_after(ctx: Context, args: list[XPathValue]) -> XPathValue:
    text, sep = to_string(args[0]), to_string(args[1])
    index = text.find(sep)
    return text[index + len(sep) :] if index >= 0 else ""


def _substring(ctx: Context, args: list[XPathValue]) -> XPathValue:
    text = to_string(args[0])
    start = xpath_round(to_number(args[1]))
    end = start + xpath_round(to_number(args[2])) if len(args) == 3 else math.inf
    if math.isnan(start) or math.isnan(end):
        return ""
    # Character positions p (1-based) with start <= p < end are kept.
    lo = max(start, 1.0)
    hi = min(end, len(text) + 1.0)
    if hi <= lo:
        return ""
    return text[int(lo) - 1 : int(hi) - 1]


def _string_length(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return float(len(to_string(args[0]) if args else ctx.node.value))


def _normalize_space(ctx: Context, args: list[XPathValue]) -> XPathValue:
    text = to_string(args[0]) if args else ctx.node.value
    return " ".join(text.split())


def _translate(ctx: Context, args: list[XPathValue]) -> XPathValue:
    text, source, target = (to_string(arg) for arg in args)
    table: dict[int, str | None] = {}
    for i, char in enumerate(source):
        table.setdefault(ord(char), target[i] if i < len(target) else None)
    return text.translate(table)


def _lower_case(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return to_string(args[0]).lower()


def _upper_case(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return to_string(args[0]).upper()


def _boolean(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return to_boolean(args[0])


def _not(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return not to_boolean(args[0])


def _true(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return True


def _false(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return False


def _number(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return to_number(args[0]) if args else to_number(ctx.node.value)


def _sum(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return sum((to_number(node.value) for node in _node_set(args[0], "sum")), 0.0)


def _floor(ctx: Context, args: list[XPathValue]) -> XPathValue:
    value = to_number(args[0])
    return value if math.isnan(value) or math.isinf(value) else float(math.floor(value))


def _ceiling(ctx: Context, args: list[XPathValue]) -> XPathValue:
    value = to_number(args[0])
    return value if math.isnan(value) or math.isinf(value) else float(math.ceil(value))


def _round(ctx: Context, args: list[XPathValue]) -> XPathValue:
    return xpath_round(to_number(args[0]))


FUNCTIONS: dict[str, FunctionSpec] = {
    "last": FunctionSpec(0, 0, _last),
    "position": FunctionSpec(0, 0, _position),
    "count": FunctionSpec(1, 1, _count),
    "name": FunctionSpec(0, 1, _local_name),
    "local-name": FunctionSpec(0, 1, _local_name),
    "string": FunctionSpec(0, 1, _string),
    "concat": FunctionSpec(2, None, _concat),
    "starts-with": FunctionSpec(2, 2, _starts_with),
    "ends-with": FunctionSpec(2, 2, _ends_with),
    "contains": FunctionSpec(2, 2, _contains),
    "substring-before": FunctionSpec(2, 2, _substring_before),
    "substring-after": FunctionSpec(2, 2, _substring_after),
    "substring": FunctionSpec(2, 3, _substring),
    "string-length": FunctionSpec(0, 1, _string_length),
    "normalize-space": FunctionSpec(0, 1, _normalize_space),
    "translate": FunctionSpec(3, 3, _translate),
    "lower-case": FunctionSpec(1, 1, _lower_case),
    "upper-case": FunctionSpec(1, 1, _upper_case),
    "boolean": FunctionSpec(1, 1, _boolean),
    "not": FunctionSpec(1, 1, _not),
    "true": FunctionSpec(0, 0, _true),
    "false": FunctionSpec(0, 0, _false),
    "number": FunctionSpec(0, 1, _number),
    "sum": FunctionSpec(1, 1, _sum),
    "floor": FunctionSpec(1, 1, _floor),
    "ceiling": FunctionSpec(1, 1, _ceiling),
    "round": FunctionSpec(1, 1, _round),
}
