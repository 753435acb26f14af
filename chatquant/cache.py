"""
Memo cache for ChatQuant
Explicit memoization table owned by one analysis invocation (or injected by the caller)
"""

import hashlib
import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional

from . import config

logger = logging.getLogger(__name__)

_MISSING = object()


class AnalysisCache:
    """
    In-memory memoization table keyed by (namespace, key).

    The caller controls lifetime: `analyze()` creates a fresh cache per
    invocation unless one is passed in, in which case lookups (token
    polarity, message scores) are reused across invocations until `clear()`.
    """

    def __init__(self, max_entries: Optional[int] = None):
        """
        Initialize cache.

        Args:
            max_entries: Upper bound on stored entries (default from config,
                0 = unbounded). Oldest entries are evicted first.
        """
        self.max_entries = config.CACHE_MAX_ENTRIES if max_entries is None else max_entries
        self._store: "OrderedDict[str, Any]" = OrderedDict()
        self._namespaces: Dict[str, str] = {}
        self._hits: Dict[str, int] = {}
        self._misses: Dict[str, int] = {}

    def _make_key(self, namespace: str, key: str) -> str:
        """Generate cache key from namespace and key."""
        combined = f"{namespace}:{key}"
        return hashlib.sha256(combined.encode("utf-8")).hexdigest()

    def get(self, namespace: str, key: str, default: Any = None) -> Any:
        """Return the cached value, or `default` when absent."""
        value = self._lookup(namespace, key)
        return default if value is _MISSING else value

    def _lookup(self, namespace: str, key: str) -> Any:
        digest = self._make_key(namespace, key)
        if digest in self._store:
            self._hits[namespace] = self._hits.get(namespace, 0) + 1
            return self._store[digest]
        self._misses[namespace] = self._misses.get(namespace, 0) + 1
        return _MISSING

    def set(self, namespace: str, key: str, value: Any):
        """Store a value, evicting the oldest entry when the bound is reached."""
        digest = self._make_key(namespace, key)
        if digest not in self._store and self.max_entries and len(self._store) >= self.max_entries:
            oldest, _ = self._store.popitem(last=False)
            self._namespaces.pop(oldest, None)
        self._store[digest] = value
        self._namespaces[digest] = namespace

    def get_or_compute(self, namespace: str, key: str, compute: Callable[[], Any]) -> Any:
        """Return the cached value or compute, store and return it."""
        value = self._lookup(namespace, key)
        if value is _MISSING:
            value = compute()
            self.set(namespace, key, value)
        return value

    def clear(self, namespace: Optional[str] = None) -> int:
        """
        Clear entries.

        Args:
            namespace: Only clear this namespace (default: everything)

        Returns:
            Number of entries deleted
        """
        if namespace is None:
            deleted = len(self._store)
            self._store.clear()
            self._namespaces.clear()
            self._hits.clear()
            self._misses.clear()
        else:
            doomed = [d for d, ns in self._namespaces.items() if ns == namespace]
            for digest in doomed:
                del self._store[digest]
                del self._namespaces[digest]
            deleted = len(doomed)
            self._hits.pop(namespace, None)
            self._misses.pop(namespace, None)

        logger.debug(f"Cleared {deleted} cache entries")
        return deleted

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        per_namespace: Dict[str, Dict[str, int]] = {}
        for ns in self._namespaces.values():
            per_namespace.setdefault(ns, {"entries": 0, "hits": 0, "misses": 0})
            per_namespace[ns]["entries"] += 1
        for ns, count in self._hits.items():
            per_namespace.setdefault(ns, {"entries": 0, "hits": 0, "misses": 0})["hits"] = count
        for ns, count in self._misses.items():
            per_namespace.setdefault(ns, {"entries": 0, "hits": 0, "misses": 0})["misses"] = count

        return {
            "total_entries": len(self._store),
            "max_entries": self.max_entries,
            "hits": sum(self._hits.values()),
            "misses": sum(self._misses.values()),
            "namespaces": per_namespace,
        }

    def __len__(self) -> int:
        return len(self._store)
