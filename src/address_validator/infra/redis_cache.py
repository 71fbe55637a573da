from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

log = logging.getLogger(__name__)


class RedisCache:
    """
    Remote binding. Values are stored as JSON with a per-key expiry.

    Backend errors are logged and swallowed: reads become misses and writes
    become no-ops. Writes give up after write_timeout_seconds.
    """

    def __init__(
        self,
        *,
        client: Any,
        ttl_seconds: float,
        write_timeout_seconds: float = 2.0,
    ) -> None:
        self._client = client
        self._ttl = max(1, int(ttl_seconds))
        self._write_timeout = write_timeout_seconds

    @classmethod
    def from_settings(
        cls,
        *,
        host: str,
        port: int,
        password: str | None,
        db: int,
        ttl_seconds: float,
        write_timeout_seconds: float = 2.0,
    ) -> RedisCache:
        client = Redis(host=host, port=port, password=password or None, db=db)
        return cls(client=client, ttl_seconds=ttl_seconds, write_timeout_seconds=write_timeout_seconds)

    async def ping(self) -> None:
        """Raises if the server is unreachable. Only used at startup."""
        await self._client.ping()

    async def get(self, key: str) -> tuple[Any, bool]:
        try:
            raw = await self._client.get(key)
        except (RedisError, OSError) as e:
            log.warning("Cache get failed for %s: %s", key, e)
            return None, False

        if raw is None:
            return None, False

        try:
            return json.loads(raw), True
        except (TypeError, ValueError) as e:
            log.warning("Cache entry %s is not valid JSON: %s", key, e)
            return None, False

    async def set(self, key: str, value: Any) -> None:
        try:
            data = json.dumps(value)
        except (TypeError, ValueError) as e:
            log.warning("Cache value for %s is not serializable: %s", key, e)
            return

        try:
            await asyncio.wait_for(self._client.set(key, data, ex=self._ttl), timeout=self._write_timeout)
        except asyncio.TimeoutError:
            log.warning("Cache set timed out for %s", key)
        except (RedisError, OSError) as e:
            log.warning("Cache set failed for %s: %s", key, e)

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except (RedisError, OSError) as e:
            log.warning("Cache delete failed for %s: %s", key, e)

    async def flush(self) -> None:
        try:
            await self._client.flushdb()
        except (RedisError, OSError) as e:
            log.warning("Cache flush failed: %s", e)

    async def item_count(self) -> int:
        try:
            return int(await self._client.dbsize())
        except (RedisError, OSError) as e:
            log.warning("Cache dbsize failed: %s", e)
            return 0

    async def close(self) -> None:
        await self._client.aclose()
