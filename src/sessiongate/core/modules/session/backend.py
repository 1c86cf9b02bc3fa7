import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from datetime import timedelta
from typing import TypeVar

import redis.asyncio as redis
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from sessiongate.core.core import Service
from sessiongate.errors import StoreTimeoutError, StoreUnavailableError

T = TypeVar("T")


class KeyValueBackend(Service, ABC):
    """Key-value store with per-key expiry."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl: timedelta) -> None:
        """Store value under key, expiring after ttl."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value under key, or None if missing."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Removing a missing key is not an error."""

    @abstractmethod
    async def ping(self) -> None:
        """Check connectivity, raising StoreUnavailableError if the store is down."""


class RedisBackend(KeyValueBackend):
    """Redis/KeyDB backend.

    The client must be created with `decode_responses=True`. Every call is one
    round trip bounded by `timeout` seconds and is never retried.
    """

    def __init__(self, client: redis.Redis, timeout: float = 2.0) -> None:
        self._client = client
        self._timeout = timeout

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            async with asyncio.timeout(self._timeout):
                return await awaitable
        except (TimeoutError, RedisTimeoutError) as e:
            raise StoreTimeoutError(f"Redis {operation} timed out") from e
        except RedisError as e:
            raise StoreUnavailableError(f"Redis {operation} failed: {e}") from e

    async def set(self, key: str, value: str, ttl: timedelta) -> None:
        acknowledged = await self._call("SET", self._client.set(key, value, ex=ttl))
        if not acknowledged:
            raise StoreUnavailableError("Redis SET was not acknowledged")

    async def get(self, key: str) -> str | None:
        return await self._call("GET", self._client.get(key))

    async def delete(self, key: str) -> None:
        await self._call("DEL", self._client.delete(key))

    async def ping(self) -> None:
        await self._call("PING", self._client.ping())
