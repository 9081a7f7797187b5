"""
Tests for the action/session key-value stores.
"""

from unittest.mock import AsyncMock

import pytest

from mcp_aura.core import store as store_module
from mcp_aura.core.store import InMemoryStore, RedisStore


class Clock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock(monkeypatch):
    fake = Clock()
    monkeypatch.setattr(store_module.time, "time", fake)
    return fake


@pytest.mark.asyncio
async def test_put_and_get(clock):
    store = InMemoryStore(default_ttl=60)
    await store.put("action:1", {"status": "prepared"})

    assert await store.get("action:1") == {"status": "prepared"}
    assert await store.get("action:missing") is None


@pytest.mark.asyncio
async def test_entries_expire(clock):
    store = InMemoryStore(default_ttl=60)
    await store.put("short", 1, ttl=5)
    await store.put("long", 2)

    clock.now += 10
    assert await store.get("short") is None
    assert await store.get("long") == 2

    clock.now += 60
    assert await store.get("long") is None


@pytest.mark.asyncio
async def test_expire_extends_live_keys_only(clock):
    store = InMemoryStore(default_ttl=10)
    await store.put("key", "value")

    assert await store.expire("key", 100)
    clock.now += 50
    assert await store.get("key") == "value"
    assert not await store.expire("other", 100)


@pytest.mark.asyncio
async def test_delete(clock):
    store = InMemoryStore()
    await store.put("key", "value")

    assert await store.delete("key")
    assert not await store.delete("key")
    assert store.size() == 0


@pytest.mark.asyncio
async def test_evicts_oldest_when_full(clock):
    store = InMemoryStore(default_ttl=60, max_size=2)
    await store.put("a", 1)
    await store.put("b", 2)
    await store.put("c", 3)

    assert await store.get("a") is None
    assert await store.get("b") == 2
    assert await store.get("c") == 3


@pytest.mark.asyncio
async def test_redis_store_prefixes_keys_and_sets_expiry():
    client = AsyncMock()
    client.get.return_value = '{"status": "pending"}'
    store = RedisStore(client, default_ttl=30)

    await store.put("action:1", {"status": "pending"})
    client.set.assert_awaited_once_with("mcp-aura:action:1", '{"status": "pending"}', ex=30)

    assert await store.get("action:1") == {"status": "pending"}
    client.get.assert_awaited_once_with("mcp-aura:action:1")


@pytest.mark.asyncio
async def test_redis_store_missing_key():
    client = AsyncMock()
    client.get.return_value = None

    assert await RedisStore(client).get("nope") is None
