"""
Session storage for tokens and the booking confirmation cache.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Protocol

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from .config import get_settings
from .utils.exceptions import CacheServiceError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal async key-value interface the client depends on."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class StorageKeys:
    """Helper class for building consistent storage keys."""

    AUTH_TOKEN = "authToken"
    CURRENT_USER = "currentUser"
    QUEUE_TOKEN = "queueToken"

    @staticmethod
    def booking_seat_codes(booking_number: str) -> str:
        """Build key for the seat codes of a confirmed booking."""
        return f"bookingSeatCodes:{booking_number}"


class MemoryStore:
    """In-process store, the default for a single client session."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)


class RedisStore:
    """Redis-backed store so several client processes can share one session."""

    def __init__(self, client: Optional[Redis] = None, prefix: Optional[str] = None):
        settings = get_settings()
        # The connection pool connects on first use
        self.client = client if client is not None else redis.from_url(settings.redis_url, decode_responses=True)
        self.prefix = prefix if prefix is not None else settings.session_key_prefix

    async def initialize(self) -> None:
        """Verify the Redis connection."""
        try:
            await self.client.ping()
        except RedisError as e:
            logger.error("Failed to connect to Redis: %s", e)
            raise CacheServiceError(f"Redis unavailable: {e}") from e
        logger.info("Redis session store initialized")

    async def close(self) -> None:
        await self.client.aclose()
        logger.info("Redis session store closed")

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.client.get(self._key(key))
        except RedisError as e:
            logger.warning("Failed to read session key %s: %s", key, e)
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        try:
            await self.client.set(self._key(key), value)
        except RedisError as e:
            logger.warning("Failed to write session key %s: %s", key, e)

    async def remove(self, key: str) -> None:
        try:
            await self.client.delete(self._key(key))
        except RedisError as e:
            logger.warning("Failed to delete session key %s: %s", key, e)


def create_store() -> KeyValueStore:
    """Store selected by the ``session_store`` setting."""
    settings = get_settings()
    if settings.session_store == "redis":
        return RedisStore()
    return MemoryStore()


class BookingSeatCodeCache:
    """
    Best-effort record of which seat codes each booking was made for.

    Used only to redisplay a confirmation; a miss or a corrupt entry is
    logged and treated as "unknown", never raised.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def remember(self, booking_number: str, seat_codes: List[str]) -> None:
        await self.store.set(StorageKeys.booking_seat_codes(booking_number), json.dumps(list(seat_codes)))

    async def recall(self, booking_number: str) -> List[str]:
        raw = await self.store.get(StorageKeys.booking_seat_codes(booking_number))
        if not raw:
            return []
        try:
            codes: Any = json.loads(raw)
        except ValueError as e:
            logger.warning("Discarding corrupt seat code cache for booking %s: %s", booking_number, e)
            await self.forget(booking_number)
            return []
        if not isinstance(codes, list):
            logger.warning("Discarding unexpected seat code cache for booking %s", booking_number)
            await self.forget(booking_number)
            return []
        return [str(code) for code in codes]

    async def forget(self, booking_number: str) -> None:
        await self.store.remove(StorageKeys.booking_seat_codes(booking_number))
