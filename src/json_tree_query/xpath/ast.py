"""AST node types for compiled XPath expressions.

All nodes are frozen dataclasses; a compiled expression can be shared between
threads and evaluated any number of times.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

__all__ = [
    "Axis",
    "BinaryOp",
    "Expr",
    "FilterPath",
    "FunctionCall",
    "Literal",
    "LocationPath",
    "NameTest",
    "Negate",
    "NodeTest",
    "Number",
    "Step",
    "TypeTest",
]


class Axis(StrEnum):
    """XPath axes.  Values are the axis names as written in expressions."""

    ANCESTOR = "ancestor"
    ANCESTOR_OR_SELF = "ancestor-or-self"
    ATTRIBUTE = "attribute"
    CHILD = "child"
    DESCENDANT = "descendant"
    DESCENDANT_OR_SELF = "descendant-or-self"
    FOLLOWING = "following"
    FOLLOWING_SIBLING = "following-sibling"
    PARENT = "parent"
    PRECEDING = "preceding"
    PRECEDING_SIBLING = "preceding-sibling"
    SELF = "self"

    @property
    def is_reverse(self) -> bool:
        """Reverse axes number their nodes from nearest to farthest."""
        return self in _REVERSE_AXES


_REVERSE_AXES = frozenset(
    {
        Axis.ANCESTOR,
        Axis.ANCESTOR_OR_SELF,
        Axis.PRECEDING,
        Axis.PRECEDING_SIBLING,
    }
)


@dataclass(frozen=True, slots=True)
class NameTest:
    """Matches elements by local name; ``"*"`` matches any element."""

    name: str


@dataclass(frozen=True, slots=True)
class TypeTest:
    """``node()``, ``text()``, ``comment()`` or ``processing-instruction()``."""

    node_type: str


NodeTest = NameTest | TypeTest


@dataclass(frozen=True, slots=True)
class Literal:
    value: str


@dataclass(frozen=True, slots=True)
class Number:
    value: float


@dataclass(frozen=True, slots=True)
class FunctionCall:
    name: str
    args: tuple[Expr, ...]


@dataclass(frozen=True, slots=True)
class BinaryOp:
    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class Negate:
    operand: Expr


@dataclass(frozen=True, slots=True)
class Step:
    axis: Axis
    test: NodeTest
    predicates: tuple[Expr, ...] = ()


@dataclass(frozen=True, slots=True)
class LocationPath:
    """A path; absolute paths start from the navigator's root."""

    absolute: bool
    steps: tuple[Step, ...]


@dataclass(frozen=True, slots=True)
class FilterPath:
    """A primary expression with predicates, optionally followed by steps."""

    primary: Expr
    predicates: tuple[Expr, ...] = ()
    steps: tuple[Step, ...] = ()


Expr = Literal | Number | FunctionCall | BinaryOp | Negate | LocationPath | FilterPath
