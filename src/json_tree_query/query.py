"""Query entry points: run XPath expressions over a built JSON tree.

Two tiers exist and are kept separate on purpose:

- ``query``, ``query_all``, ``query_selector``, ``query_selector_all`` raise
  ``QuerySyntaxError`` (a recoverable ``JsonTreeQueryError``) when a raw
  expression does not compile.
- ``find`` and ``find_one`` are for callers that already know the expression
  is valid.  A compile failure there is a programming error and surfaces as
  ``InvalidQueryUsage``, which ``except JsonTreeQueryError`` does not catch.

Raw expressions are compiled through a module-level ``SelectorCache``
(LRU, 50 entries by default); see ``configure_selector_cache``.
"""

from __future__ import annotations

import threading

from json_tree_query.cache import SelectorCache
from json_tree_query.config import QueryConfig
from json_tree_query.errors import InvalidQueryUsage, QuerySyntaxError
from json_tree_query.navigator import JsonNodeNavigator, create_xpath_navigator
from json_tree_query.protocols import NodeNavigator
from json_tree_query.tree.nodes import Node
from json_tree_query.xpath import XPathExpr

__all__ = [
    "configure_selector_cache",
    "find",
    "find_one",
    "get_query",
    "query",
    "query_all",
    "query_selector",
    "query_selector_all",
    "selector_cache",
]

_cache_lock = threading.Lock()
_selector_cache = SelectorCache.from_config(QueryConfig())


def configure_selector_cache(config: QueryConfig) -> SelectorCache:
    """Replace the shared selector cache with one built from ``config``.

    Returns:
        The new cache.  Entries of the previous cache are discarded.
    """
    global _selector_cache
    cache = SelectorCache.from_config(config)
    with _cache_lock:
        _selector_cache = cache
    return cache


def selector_cache() -> SelectorCache:
    """Return the shared selector cache currently in use."""
    with _cache_lock:
        return _selector_cache


def get_query(expression: str) -> XPathExpr:
    """Compile ``expression`` through the shared cache.

    Raises:
        QuerySyntaxError: If ``expression`` does not compile.
    """
    return selector_cache().get_or_compile(expression)


# ---------------------------------------------------------------------------
# Compiled selectors
# ---------------------------------------------------------------------------


def query_selector_all(top: Node, selector: XPathExpr) -> list[Node]:
    """Return every node under ``top`` matched by ``selector``, in document order."""
    navigator = create_xpath_navigator(top)
    return [_to_node(match) for match in selector.select(navigator)]


def query_selector(top: Node, selector: XPathExpr) -> Node | None:
    """Return the first node matched by ``selector``, or None."""
    matches = selector.select(create_xpath_navigator(top))
    return _to_node(matches[0]) if matches else None


# ---------------------------------------------------------------------------
# Raw expressions: error-raising tier
# ---------------------------------------------------------------------------


def query_all(top: Node, expression: str) -> list[Node]:
    """Return every node matching ``expression``.

    Raises:
        QuerySyntaxError: If ``expression`` does not compile.
    """
    return query_selector_all(top, get_query(expression))


def query(top: Node, expression: str) -> Node | None:
    """Return the first node matching ``expression``, or None.

    Raises:
        QuerySyntaxError: If ``expression`` does not compile.
    """
    return query_selector(top, get_query(expression))


# ---------------------------------------------------------------------------
# Raw expressions: convenience tier
# ---------------------------------------------------------------------------


def find(top: Node, expression: str) -> list[Node]:
    """Like ``query_all`` for expressions known to be valid.

    Raises:
        InvalidQueryUsage: If ``expression`` does not compile.
    """
    return query_selector_all(top, _must_compile(expression))


def find_one(top: Node, expression: str) -> Node | None:
    """Like ``query`` for expressions known to be valid.

    Raises:
        InvalidQueryUsage: If ``expression`` does not compile.
    """
    return query_selector(top, _must_compile(expression))


def _must_compile(expression: str) -> XPathExpr:
    try:
        return get_query(expression)
    except QuerySyntaxError as exc:
        raise InvalidQueryUsage(f"invalid query expression: {exc}") from exc


def _to_node(navigator: NodeNavigator) -> Node:
    if not isinstance(navigator, JsonNodeNavigator):
        msg = f"expected a JsonNodeNavigator result, got {type(navigator).__name__}"
        raise TypeError(msg)
    return navigator.node
