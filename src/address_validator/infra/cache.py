from __future__ import annotations

import threading
from typing import Any, Protocol

from cachetools import TTLCache


class Cache(Protocol):
    """
    Key/value store with a single global TTL.

    get() returns (None, False) on absence, expiry or any backend failure;
    set() never raises. Values are JSON-compatible payloads.
    """

    async def get(self, key: str) -> tuple[Any, bool]: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def flush(self) -> None: ...

    async def item_count(self) -> int: ...

    async def close(self) -> None: ...


class MemoryCache:
    """In-process binding. All access goes through one lock."""

    def __init__(self, *, maxsize: int, ttl_seconds: float) -> None:
        self._cache: TTLCache[str, Any] = TTLCache(maxsize=maxsize, ttl=ttl_seconds)
        self._lock = threading.Lock()

    async def get(self, key: str) -> tuple[Any, bool]:
        with self._lock:
            try:
                return self._cache[key], True
            except KeyError:
                return None, False

    async def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._cache[key] = value

    async def delete(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)

    async def flush(self) -> None:
        with self._lock:
            self._cache.clear()

    async def item_count(self) -> int:
        with self._lock:
            # drop expired entries so the count reflects live items
            self._cache.expire()
            return len(self._cache)

    async def close(self) -> None:
        return None
