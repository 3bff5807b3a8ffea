"""QueryConfig: settings for the compiled-selector cache.

QueryConfig is a frozen (immutable) dataclass.  It only governs how compiled
path expressions are cached; it has no influence on tree construction or on
query results.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["DEFAULT_CACHE_MAX_ENTRIES", "QueryConfig"]

DEFAULT_CACHE_MAX_ENTRIES = 50


@dataclass(frozen=True, slots=True)
class QueryConfig:
    """Immutable configuration for the selector cache.

    Attributes:
        cache_enabled: When False every raw expression is compiled on each
            call and nothing is stored.
        cache_max_entries: Maximum number of compiled expressions kept.  The
            least-recently-used entry is evicted beyond this size.
    """

    cache_enabled: bool = True
    cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES

    def __post_init__(self) -> None:
        if self.cache_max_entries < 1:
            msg = f"cache_max_entries must be >= 1, got {self.cache_max_entries}"
            raise ValueError(msg)
