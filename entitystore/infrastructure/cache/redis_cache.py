"""Redis-based cache service.

Async Redis cache holding raw text values with per-key TTL. Every operation is
best-effort: connection errors trigger one reconnect attempt, other Redis
errors are logged, and the caller gets a miss / False / 0 instead of an
exception. Serialization is the caller's concern (see cache_aside).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import redis.asyncio as redis

from entitystore.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNLINK_CHUNK_SIZE = 500


class CacheService:
    """Async Redis cache service with TTL support.

    Owns one connection pool shared by all requests. Call connect() at
    startup and disconnect() at shutdown. When Redis is unreachable the
    service reports itself unavailable and every call degrades to a miss.
    """

    def __init__(
        self,
        settings: Settings,
        redis_client: redis.Redis | None = None,
    ) -> None:
        """Initialize cache service.

        Args:
            settings: Connection settings (host, port, db, password, pool size).
            redis_client: Optional pre-built client for testing or DI. When
                given, the service is considered connected.
        """
        self.settings = settings
        self.redis = redis_client
        self._connected = redis_client is not None
        self._reconnect_lock = asyncio.Lock()

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is not None:
            return
        password = (
            self.settings.redis_password.get_secret_value()
            if self.settings.redis_password
            else None
        )
        client = redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password,
            decode_responses=True,
            max_connections=self.settings.redis_max_connections,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            await client.aclose()
            self._connected = False
            return
        self.redis = client
        self._connected = True
        logger.info(
            "Redis cache connected: %s:%s",
            self.settings.redis_host,
            self.settings.redis_port,
        )

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self, stale: redis.Redis) -> bool:
        """Replace ``stale`` with a fresh client. Returns True if a client is usable.

        Concurrent callers that saw the same failure reconnect once: whoever
        gets the lock second finds ``stale`` already replaced and reuses the result.
        """
        async with self._reconnect_lock:
            if self.redis is not stale:
                return self.is_available()
            try:
                await stale.aclose()
            except redis.RedisError:
                logger.debug("Ignoring error while closing stale Redis client")
            self.redis = None
            self._connected = False
            await self.connect()
            return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _execute(
        self,
        op: str,
        target: str,
        call: Callable[[redis.Redis], Awaitable[T]],
        fallback: T,
    ) -> T:
        """Run one Redis call with a single reconnect retry; never raises RedisError."""
        client = self.redis
        if not self._connected or client is None:
            return fallback
        try:
            return await call(client)
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect(client) and self.redis is not None:
                try:
                    return await call(self.redis)
                except redis.RedisError:
                    logger.exception("Cache %s error for %s after reconnect", op, target)
                    return fallback
            logger.warning("Cache %s unavailable for %s (Redis disconnected)", op, target)
            return fallback
        except redis.RedisError:
            logger.exception("Cache %s error for %s", op, target)
            return fallback

    async def get(self, key: str) -> str | None:
        """Return cached text or None if missing/unavailable/undecodable."""

        async def _get(r: redis.Redis) -> str | None:
            try:
                return await r.get(key)
            except UnicodeDecodeError:
                logger.warning("Cache entry %s is not valid UTF-8; treating as miss", key)
                return None

        value = await self._execute("get", key, _get, None)
        logger.debug("Cache %s: %s", "HIT" if value is not None else "MISS", key)
        return value

    async def set(self, key: str, value: str, ttl: int) -> bool:
        """Store value with TTL (seconds). Returns True on success."""

        async def _setex(r: redis.Redis) -> bool:
            await r.setex(key, ttl, value)
            return True

        stored = await self._execute("set", key, _setex, False)
        if stored:
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return stored

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Returns True if the command succeeded."""

        async def _delete(r: redis.Redis) -> bool:
            await r.delete(key)
            return True

        deleted = await self._execute("delete", key, _delete, False)
        if deleted:
            logger.debug("Cache DELETE: %s", key)
        return deleted

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern using SCAN + batched UNLINK.

        SCAN avoids blocking the server the way KEYS would. The enumeration
        and the deletes are separate commands, so a key written for this
        pattern after it was scanned survives.
        """

        async def _scan_and_unlink(r: redis.Redis) -> int:
            deleted = 0
            chunk: list[str] = []
            async for key in r.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= _UNLINK_CHUNK_SIZE:
                    deleted += int(await r.unlink(*chunk) or 0)
                    chunk = []
            if chunk:
                deleted += int(await r.unlink(*chunk) or 0)
            return deleted

        deleted = await self._execute("delete_pattern", pattern, _scan_and_unlink, 0)
        if deleted > 0:
            logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
        return deleted

    async def ping(self) -> bool:
        """Return True if Redis answers PING."""
        return await self._execute("ping", "server", lambda r: r.ping(), False)
