"""
Key-value store backends for the weather cache.

Both backends expose the same two async calls, get(key) and
put(key, value, expiration_ttl), with values stored as text and an
expiry measured in seconds from the put call.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

from weather_edge.database.models import KVEntry


class KVStore(ABC):
    """Async key-value store with per-key expiration."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent or expired."""

    @abstractmethod
    async def put(self, key: str, value: str, expiration_ttl: Optional[int] = None) -> None:
        """Store value under key, replacing any previous value."""


def _expiry(expiration_ttl: Optional[int]) -> Optional[datetime]:
    if expiration_ttl is None:
        return None
    return datetime.now(timezone.utc) + timedelta(seconds=expiration_ttl)


class MemoryKVStore(KVStore):
    """
    In-process store for development and single-instance deployments.
    """

    def __init__(self):
        self._entries: Dict[str, Tuple[str, Optional[datetime]]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and expires_at <= datetime.now(timezone.utc):
            # Expired entries read as absent
            del self._entries[key]
            return None

        return value

    async def put(self, key: str, value: str, expiration_ttl: Optional[int] = None) -> None:
        self._entries[key] = (value, _expiry(expiration_ttl))

    def expires_at(self, key: str) -> Optional[datetime]:
        entry = self._entries.get(key)
        return entry[1] if entry else None


class DatabaseKVStore(KVStore):
    """
    Durable store backed by the kv_entries table via Tortoise ORM.
    """

    async def get(self, key: str) -> Optional[str]:
        entry = await KVEntry.filter(key=key).first()
        if entry is None:
            return None

        expires_at = entry.expires_at
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        now = datetime.now(timezone.utc)
        if expires_at is not None and expires_at <= now:
            await KVEntry.filter(key=key, expires_at__lte=now).delete()
            return None

        return entry.value

    async def put(self, key: str, value: str, expiration_ttl: Optional[int] = None) -> None:
        await KVEntry.update_or_create(
            key=key,
            defaults={
                "value": value,
                "expires_at": _expiry(expiration_ttl),
            }
        )


def create_kv_store(backend: str) -> KVStore:
    """
    Build the store for a configured backend name.

    Args:
        backend: 'memory' or 'database'

    Returns:
        KVStore instance

    Raises:
        ValueError: If the backend is unknown
    """
    if backend == "memory":
        return MemoryKVStore()
    if backend == "database":
        return DatabaseKVStore()
    raise ValueError(f"Unknown KV backend: {backend}")
