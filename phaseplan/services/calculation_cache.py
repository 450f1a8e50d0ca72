"""
Calculation cache.

Memoizes pure calculations (working days, segment allocations) keyed by
fingerprints of their inputs. Entries expire after a TTL and the least
recently used entry is evicted at capacity. The cache is soft state:
clearing it never changes any result.
"""

from __future__ import annotations

import copy
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional

from phaseplan.core.config import get_settings
from phaseplan.core.logger import setup_logger

logger = setup_logger(__name__)

_MISSING = object()


class CalculationCache:
    """TTL + LRU cache with an injectable clock."""

    def __init__(
        self,
        max_size: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        name: str = "calculations",
    ):
        settings = get_settings()
        self.max_size = max_size if max_size is not None else settings.CACHE_MAX_SIZE
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None else settings.CACHE_TTL_SECONDS
        )
        self.clock = clock
        self.name = name
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return a copy of the cached value, or default when absent or expired."""
        entry = self._entries.get(key, _MISSING)
        if entry is _MISSING:
            self._misses += 1
            return default

        stored_at, value = entry
        if self.ttl_seconds and self.clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            self._misses += 1
            logger.debug(f"[{self.name}] expired {key!r}")
            return default

        self._entries.move_to_end(key)
        self._hits += 1
        return copy.deepcopy(value)

    def set(self, key: Hashable, value: Any) -> None:
        if self.max_size <= 0:
            return
        if key in self._entries:
            self._entries.move_to_end(key)
        self._entries[key] = (self.clock(), copy.deepcopy(value))
        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"[{self.name}] evicted {evicted!r}")

    def memoize(
        self, fn: Callable[..., Any], key_fn: Callable[..., Hashable]
    ) -> Callable[..., Any]:
        """
        Wrap fn so that results are cached under key_fn(*args, **kwargs).

        Example:
            >>> cached_days = cache.memoize(compute_days, lambda r: r.start)
        """

        def _wrapper(*args, **kwargs):
            key = key_fn(*args, **kwargs)
            cached = self.get(key, _MISSING)
            if cached is not _MISSING:
                return cached
            result = fn(*args, **kwargs)
            self.set(key, result)
            return result

        _wrapper.__name__ = getattr(fn, "__name__", "memoized")
        _wrapper.__doc__ = fn.__doc__
        return _wrapper

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def stats(self) -> dict:
        lookups = self._hits + self._misses
        return {
            "name": self.name,
            "size": len(self._entries),
            "max_size": self.max_size,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": (self._hits / lookups * 100) if lookups else 0.0,
        }
