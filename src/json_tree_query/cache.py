"""SelectorCache: LRU-backed cache of compiled path expressions.

Raw expression strings passed to the query helpers are compiled once and the
resulting ``XPathExpr`` is reused on later calls.  LRU eviction occurs
silently when ``max_size`` is exceeded; no error is raised.  Expressions that
fail to compile are never stored.

The module-level cache used by ``json_tree_query.query`` is shared between
threads, so every access goes through a lock.

Example::

    from json_tree_query.cache import SelectorCache

    cache = SelectorCache(max_size=50)

    # First call compiles
    expr = cache.get_or_compile("//name")

    # Second call is served from memory
    assert cache.get_or_compile("//name") is expr
"""

from __future__ import annotations

import logging
import threading

from cachetools import LRUCache

from json_tree_query.config import DEFAULT_CACHE_MAX_ENTRIES, QueryConfig
from json_tree_query.xpath import XPathExpr, compile

__all__ = ["SelectorCache"]

logger = logging.getLogger(__name__)


class SelectorCache:
    """Thread-safe LRU map from expression text to compiled ``XPathExpr``.

    Args:
        max_size: Maximum number of compiled expressions held.  Defaults to
            50.  When exceeded, the least-recently-used entry is evicted.
        enabled:  When False, ``get_or_compile`` compiles on every call and
            stores nothing.
    """

    def __init__(
        self, max_size: int = DEFAULT_CACHE_MAX_ENTRIES, enabled: bool = True
    ) -> None:
        self._enabled = enabled
        self._cache: LRUCache[str, XPathExpr] = LRUCache(maxsize=max_size)
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: QueryConfig) -> SelectorCache:
        return cls(max_size=config.cache_max_entries, enabled=config.cache_enabled)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of entries stored in the cache."""
        with self._lock:
            return int(self._cache.currsize)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_or_compile(self, expression: str) -> XPathExpr:
        """Return the compiled form of ``expression``, compiling on a miss.

        Raises:
            QuerySyntaxError: If ``expression`` does not compile.
        """
        if not self._enabled:
            return compile(expression)

        with self._lock:
            cached = self._cache.get(expression)
        if cached is not None:
            return cached

        logger.debug("selector cache miss for %r", expression)
        compiled = compile(expression)
        with self._lock:
            self._cache[expression] = compiled
        return compiled

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __contains__(self, expression: object) -> bool:
        with self._lock:
            return expression in self._cache
