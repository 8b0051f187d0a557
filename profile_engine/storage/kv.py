# profile_engine/storage/kv.py
# Key-value backends for persisted history and sessions.

import logging
from typing import Dict, List, Optional, Protocol

import redis

from ..core.config import RedisSettings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for key-value store failures."""
    pass


class StorageQuotaExceededError(StorageError):
    """The store refused a write because it is full."""
    pass


class StorageUnavailableError(StorageError):
    """The store could not be reached or refused the operation."""
    pass


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def keys(self) -> List[str]:
        ...


class InMemoryStore:
    """
    Dict-backed store. `quota_bytes` caps the total size of stored values
    (UTF-8 encoded) to mimic a browser-style storage quota.
    """
    def __init__(self, quota_bytes: Optional[int] = None):
        self._data: Dict[str, str] = {}
        self.quota_bytes = quota_bytes

    def _size_with(self, key: str, value: str) -> int:
        size = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
        return size + len(value.encode("utf-8"))

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota_bytes is not None and self._size_with(key, value) > self.quota_bytes:
            raise StorageQuotaExceededError(f"Writing '{key}' would exceed the {self.quota_bytes} byte quota")
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())


class RedisStore:
    """Store backed by a synchronous redis-py client."""
    def __init__(self, client: redis.Redis, namespace: str = ""):
        self.client = client
        self.namespace = namespace

    @classmethod
    def from_settings(cls, settings: Optional[RedisSettings] = None, namespace: str = "") -> "RedisStore":
        settings = settings or RedisSettings()
        logger.info(
            f"Connecting to Redis at {settings.host}:{settings.port}/{settings.db}",
            extra={"category": "storage"},
        )
        # decode_responses=True so values come back as str, not bytes.
        client = redis.Redis(host=settings.host, port=settings.port, db=settings.db, decode_responses=True)
        return cls(client, namespace=namespace)

    def _key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(self._key(key))
        except redis.exceptions.RedisError as e:
            raise StorageUnavailableError(f"Error getting key '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(self._key(key), value)
        except redis.exceptions.ResponseError as e:
            # maxmemory reached
            if "OOM" in str(e):
                raise StorageQuotaExceededError(f"Redis is out of memory writing '{key}': {e}") from e
            raise StorageUnavailableError(f"Error setting key '{key}': {e}") from e
        except redis.exceptions.RedisError as e:
            raise StorageUnavailableError(f"Error setting key '{key}': {e}") from e

    def remove(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except redis.exceptions.RedisError as e:
            raise StorageUnavailableError(f"Error deleting key '{key}': {e}") from e

    def keys(self) -> List[str]:
        try:
            found = self.client.scan_iter(match=f"{self.namespace}*")
            return [k[len(self.namespace):] for k in found]
        except redis.exceptions.RedisError as e:
            raise StorageUnavailableError(f"Error listing keys: {e}") from e
