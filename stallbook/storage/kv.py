"""
Key-Value Storage Backends

The record store only needs string blobs stored under a handful of fixed
keys. Backends:
- InMemoryKeyValueStore: process-local dict, used by tests
- JsonFileKeyValueStore: one file per key in a data directory
- RedisKeyValueStore: namespaced keys in a Redis database
"""

from pathlib import Path
from typing import Dict, Optional, Protocol

import structlog
from redis import Redis

from stallbook.config import Settings, get_settings

logger = structlog.get_logger(__name__)


class KeyValueStore(Protocol):
    """Opaque blob storage addressed by key"""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> bool:
        ...

    def ping(self) -> bool:
        ...


class InMemoryKeyValueStore:
    """Dict-backed store; contents vanish with the process"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def ping(self) -> bool:
        return True


class JsonFileKeyValueStore:
    """
    Stores each key as ``<data_dir>/<key>.json``.

    Writes go to a temporary sibling file first and are moved into place,
    so a crash mid-write leaves the previous blob intact.
    """

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)
        logger.debug("Blob written", key=key, path=str(path), size=len(value))

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def ping(self) -> bool:
        return self.data_dir.is_dir()


class RedisKeyValueStore:
    """
    Redis-backed store with namespace support.

    Example:
        store = RedisKeyValueStore(Redis.from_url("redis://localhost:6379/0"), "stallbook")
        store.set("bhoomish_daily_entries", "[]")
    """

    def __init__(self, client: Redis, namespace: str):
        self.client = client
        self.namespace = namespace

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisKeyValueStore":
        client = Redis.from_url(
            settings.redis.get_url(),
            socket_timeout=settings.redis.socket_timeout,
            decode_responses=True,
        )
        return cls(client, settings.redis.namespace)

    def _key(self, key: str) -> str:
        """Generate namespaced key"""
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[str]:
        value = self.client.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        self.client.set(self._key(key), value)

    def delete(self, key: str) -> bool:
        return self.client.delete(self._key(key)) > 0

    def ping(self) -> bool:
        return bool(self.client.ping())


def create_kv_store(settings: Optional[Settings] = None) -> KeyValueStore:
    """
    Build the backend selected by ``STORAGE_BACKEND``.

    Args:
        settings: Application settings (defaults to the cached settings)

    Returns:
        A key-value store instance
    """
    settings = settings or get_settings()
    backend = settings.storage.backend

    if backend == "memory":
        store = InMemoryKeyValueStore()
    elif backend == "redis":
        store = RedisKeyValueStore.from_settings(settings)
    else:
        store = JsonFileKeyValueStore(settings.storage.data_dir)

    logger.info("Storage backend ready", backend=backend)
    return store
