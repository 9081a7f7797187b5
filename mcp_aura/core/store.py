"""Key-value store for prepared actions and signing sessions.

In-memory with TTL eviction by default, Redis when ``REDIS_URL`` is set.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import redis.asyncio as redis

from ..config import settings

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Async key-value contract shared by all backends."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if missing or expired."""

    @abstractmethod
    async def put(self, key: str, value: Any, *, ttl: Optional[int] = None) -> None:
        """Store ``value`` for ``ttl`` seconds (the default TTL when omitted)."""

    @abstractmethod
    async def expire(self, key: str, ttl: int) -> bool:
        """Reset the lifetime of an existing key. False when the key is gone."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a key. False when it did not exist."""


@dataclass
class _Entry:
    value: Any
    expires_at: float


class InMemoryStore(KeyValueStore):
    """Process-local TTL store"""

    def __init__(self, default_ttl: Optional[int] = None, max_size: Optional[int] = None):
        self.default_ttl = default_ttl or settings.action_ttl_seconds
        self.max_size = max_size or settings.max_store_size
        self._entries: Dict[str, _Entry] = {}
        self._order: List[str] = []
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if time.time() >= entry.expires_at:
                self._drop(key)
                return None
            return entry.value

    async def put(self, key: str, value: Any, *, ttl: Optional[int] = None) -> None:
        async with self._lock:
            self._purge_expired()
            self._entries[key] = _Entry(value=value, expires_at=time.time() + (ttl or self.default_ttl))
            if key in self._order:
                self._order.remove(key)
            self._order.append(key)

            # Evict oldest if over max size
            while len(self._entries) > self.max_size:
                self._drop(self._order[0])

    async def expire(self, key: str, ttl: int) -> bool:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None or time.time() >= entry.expires_at:
                self._drop(key)
                return False
            entry.expires_at = time.time() + ttl
            return True

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._drop(key)

    def size(self) -> int:
        return len(self._entries)

    def _drop(self, key: str) -> bool:
        if key in self._order:
            self._order.remove(key)
        return self._entries.pop(key, None) is not None

    def _purge_expired(self) -> None:
        now = time.time()
        for key in [k for k, e in self._entries.items() if now >= e.expires_at]:
            self._drop(key)


def _serialize(value: Any) -> str:
    def _encode(obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return str(obj)
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    return json.dumps(value, default=_encode)


class RedisStore(KeyValueStore):
    """Redis-backed store; values are JSON documents with native key expiry."""

    def __init__(self, client: "redis.Redis", default_ttl: Optional[int] = None, prefix: str = "mcp-aura:"):
        self._client = client
        self.default_ttl = default_ttl or settings.action_ttl_seconds
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str) -> "RedisStore":
        return cls(redis.from_url(url, encoding="utf-8", decode_responses=True))

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[Any]:
        payload = await self._client.get(self._key(key))
        if not payload:
            return None
        return json.loads(payload)

    async def put(self, key: str, value: Any, *, ttl: Optional[int] = None) -> None:
        await self._client.set(self._key(key), _serialize(value), ex=ttl or self.default_ttl)

    async def expire(self, key: str, ttl: int) -> bool:
        return bool(await self._client.expire(self._key(key), ttl))

    async def delete(self, key: str) -> bool:
        return bool(await self._client.delete(self._key(key)))


_store: Optional[KeyValueStore] = None


def get_store() -> KeyValueStore:
    """FastAPI dependency returning the process-wide store."""

    global _store
    if _store is None:
        if settings.redis_url:
            logger.info("Using Redis action store")
            _store = RedisStore.from_url(settings.redis_url)
        else:
            _store = InMemoryStore()
    return _store


__all__ = ["KeyValueStore", "InMemoryStore", "RedisStore", "get_store"]
