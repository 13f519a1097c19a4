"""
Tests for session stores and the booking seat-code cache.
"""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from ticketing_client.cache import (
    BookingSeatCodeCache, MemoryStore, RedisStore, StorageKeys, create_store,
)
from ticketing_client.config import Settings
from ticketing_client.utils.exceptions import CacheServiceError


class TestMemoryStore:

    async def test_get_set_remove(self):
        store = MemoryStore({"a": "1"})

        assert await store.get("a") == "1"
        await store.set("b", "2")
        await store.remove("a")
        await store.remove("missing")

        assert await store.get("a") is None
        assert await store.get("b") == "2"


class TestRedisStore:

    @pytest.fixture
    def redis_client(self):
        client = AsyncMock()
        client.get = AsyncMock(return_value=b"token")
        return client

    async def test_keys_are_prefixed(self, redis_client):
        store = RedisStore(client=redis_client, prefix="t:")

        assert await store.get(StorageKeys.AUTH_TOKEN) == "token"
        await store.set("k", "v")
        await store.remove("k")

        redis_client.get.assert_awaited_once_with("t:authToken")
        redis_client.set.assert_awaited_once_with("t:k", "v")
        redis_client.delete.assert_awaited_once_with("t:k")

    async def test_read_errors_degrade_to_missing(self, redis_client):
        redis_client.get = AsyncMock(side_effect=RedisConnectionError("down"))
        store = RedisStore(client=redis_client, prefix="t:")

        assert await store.get("k") is None

    async def test_initialize_fails_loudly(self, redis_client):
        redis_client.ping = AsyncMock(side_effect=RedisConnectionError("down"))
        store = RedisStore(client=redis_client)

        with pytest.raises(CacheServiceError):
            await store.initialize()

    async def test_close(self, redis_client):
        await RedisStore(client=redis_client).close()

        redis_client.aclose.assert_awaited_once()


class TestCreateStore:

    def test_memory_by_default(self, monkeypatch):
        monkeypatch.setattr("ticketing_client.cache.get_settings", lambda: Settings(_env_file=None))

        assert isinstance(create_store(), MemoryStore)

    def test_redis_when_configured(self, monkeypatch):
        settings = Settings(_env_file=None, session_store="redis", session_key_prefix="s:")
        monkeypatch.setattr("ticketing_client.cache.get_settings", lambda: settings)

        store = create_store()

        assert isinstance(store, RedisStore)
        assert store.prefix == "s:"


class TestBookingSeatCodeCache:

    async def test_remember_and_recall(self):
        cache = BookingSeatCodeCache(MemoryStore())

        await cache.remember("BK1", ["A::A-1", "A::A-2"])

        assert await cache.recall("BK1") == ["A::A-1", "A::A-2"]
        assert await cache.recall("BK2") == []

    async def test_corrupt_entry_is_discarded(self):
        store = MemoryStore({StorageKeys.booking_seat_codes("BK1"): "{broken"})
        cache = BookingSeatCodeCache(store)

        assert await cache.recall("BK1") == []
        assert await store.get(StorageKeys.booking_seat_codes("BK1")) is None

    async def test_unexpected_shape_is_discarded(self):
        store = MemoryStore({StorageKeys.booking_seat_codes("BK1"): '{"a": 1}'})

        assert await BookingSeatCodeCache(store).recall("BK1") == []
