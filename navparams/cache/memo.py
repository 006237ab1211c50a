"""
Memoization layer for extraction and validation.

Provides:
- Thread-safe key -> result caches with hit/miss accounting
- Optional LRU size bound (unbounded until cleared by default)
- A ``MemoizationLayer`` value owned by the host application
"""

import functools
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from ..patterns.extraction import extract
from ..validation.validator import validate
from .key_builder import extraction_key, validation_key

logger = logging.getLogger("navparams.cache")

_MISSING = object()


@dataclass
class CacheStats:
    """Cache statistics for monitoring."""
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": self.hit_rate,
        }


class MemoCache:
    """Thread-safe key -> value map with stats and an optional LRU bound."""

    def __init__(self, name: str, max_size: Optional[int] = None, enable_stats: bool = True):
        """
        Args:
            name: Cache name reported in metrics
            max_size: Maximum number of entries (None = unbounded)
            enable_stats: Enable hit/miss counting
        """
        self.name = name
        self.max_size = max_size
        self.enable_stats = enable_stats

        self._entries: "OrderedDict[Hashable, Any]" = OrderedDict()
        self._lock = threading.RLock()
        self._stats = CacheStats()

    def lookup(self, key: Hashable) -> Tuple[bool, Any]:
        """Return ``(found, value)``, counting a hit or a miss."""
        with self._lock:
            value = self._entries.get(key, _MISSING)
            if value is _MISSING:
                if self.enable_stats:
                    self._stats.misses += 1
                return False, None

            if self.max_size is not None:
                self._entries.move_to_end(key)
            if self.enable_stats:
                self._stats.hits += 1
            return True, value

    def store(self, key: Hashable, value: Any):
        with self._lock:
            if (
                self.max_size is not None
                and len(self._entries) >= self.max_size
                and key not in self._entries
            ):
                if self.max_size == 0:
                    return
                evicted, _ = self._entries.popitem(last=False)
                if self.enable_stats:
                    self._stats.evictions += 1
                logger.debug("Cache %s evicted %s", self.name, evicted)

            self._entries[key] = value
            self._entries.move_to_end(key)

    def clear(self):
        """Drop every entry and reset counters."""
        with self._lock:
            self._entries.clear()
            self._stats = CacheStats()

    def get_stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
            )

    def metrics(self) -> Dict[str, int]:
        with self._lock:
            return {
                "hits": self._stats.hits,
                "misses": self._stats.misses,
                "size": len(self._entries),
                "evictions": self._stats.evictions,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries


class Memoized:
    """
    Callable wrapper that serves repeated calls from a ``MemoCache``.

    The key function receives exactly the wrapped function's arguments.
    """

    def __init__(self, func: Callable[..., Any], key_func: Callable[..., Hashable], cache: MemoCache):
        functools.update_wrapper(self, func)
        self.func = func
        self.key_func = key_func
        self.cache = cache

    def __call__(self, *args, **kwargs):
        key = self.key_func(*args, **kwargs)

        found, value = self.cache.lookup(key)
        if found:
            logger.debug("Cache %s hit %s", self.cache.name, key)
            return value

        logger.debug("Cache %s miss %s", self.cache.name, key)
        value = self.func(*args, **kwargs)
        self.cache.store(key, value)
        return value


class MemoizationLayer:
    """
    Extraction and validation behind key -> result caches.

    Usage::

        memo = MemoizationLayer()
        result = memo.extract("/users/:id", "/users/42")   # miss
        result = memo.extract("/users/:id", "/users/42")   # hit
        memo.get_metrics()["extraction"]                   # {"hits": 1, "misses": 1, ...}
        memo.clear_caches()
    """

    def __init__(
        self,
        max_size: Optional[int] = None,
        enable_stats: bool = True,
        extract_func: Callable[..., Any] = extract,
        validate_func: Callable[..., Any] = validate,
    ):
        self.max_size = max_size
        self.enable_stats = enable_stats
        self._caches: Dict[str, MemoCache] = {}

        self.extract = self.memoize(extract_func, extraction_key, "extraction")
        self.validate = self.memoize(validate_func, validation_key, "validation")

    def memoize(
        self,
        func: Callable[..., Any],
        key_func: Callable[..., Hashable],
        name: Optional[str] = None,
    ) -> Memoized:
        """Wrap ``func`` behind a new named cache owned by this layer."""
        name = name or func.__name__
        if name in self._caches:
            raise ValueError(f"Cache {name!r} is already registered")
        cache = MemoCache(name, max_size=self.max_size, enable_stats=self.enable_stats)
        self._caches[name] = cache
        return Memoized(func, key_func, cache)

    def get_cache(self, name: str) -> MemoCache:
        return self._caches[name]

    def get_metrics(self) -> Dict[str, Dict[str, int]]:
        """Per-cache ``{hits, misses, size, evictions}``."""
        return {name: cache.metrics() for name, cache in self._caches.items()}

    def clear_caches(self):
        """Empty every cache and reset all counters to zero."""
        for cache in self._caches.values():
            cache.clear()
        logger.debug("Cleared %d memoization caches", len(self._caches))
