"""Caching utilities for API responses."""

import time
from typing import Any
from collections import OrderedDict
import hashlib
import json

from api.config import get_settings


class TTLCache:
    """Simple TTL cache with max size limit."""

    def __init__(self, maxsize: int = 128, ttl: int = 3600):
        """Initialize cache.

        Args:
            maxsize: Maximum number of items to cache
            ttl: Time-to-live in seconds
        """
        self.maxsize = maxsize
        self.ttl = ttl
        self._cache: OrderedDict[str, tuple[float, Any]] = OrderedDict()

    def get(self, key: str) -> Any | None:
        """Get item from cache if not expired."""
        if key not in self._cache:
            return None

        timestamp, value = self._cache[key]
        if time.time() - timestamp > self.ttl:
            del self._cache[key]
            return None

        self._cache.move_to_end(key)
        return value

    def set(self, key: str, value: Any) -> None:
        """Set item in cache."""
        while len(self._cache) >= self.maxsize:
            self._cache.popitem(last=False)

        self._cache[key] = (time.time(), value)

    def clear(self) -> None:
        """Clear all cached items."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


# Reference listings change only when data is reloaded
reference_cache = TTLCache(maxsize=100, ttl=get_settings().cache_ttl_seconds)


def make_cache_key(prefix: str, *args: Any, **kwargs: Any) -> str:
    """Create a cache key from a prefix and call arguments."""
    key_data = json.dumps({"args": args, "kwargs": kwargs}, sort_keys=True, default=str)
    return f"{prefix}:{hashlib.md5(key_data.encode()).hexdigest()}"


def clear_all_caches() -> None:
    """Clear all cache instances."""
    reference_cache.clear()
