from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError, ResponseError

from profile_engine.core.config import RedisSettings
from profile_engine.storage.kv import (
    InMemoryStore,
    RedisStore,
    StorageQuotaExceededError,
    StorageUnavailableError,
)


# --- InMemoryStore ---

def test_in_memory_round_trip():
    store = InMemoryStore()
    store.set("a", "1")
    assert store.get("a") == "1"
    assert store.keys() == ["a"]
    store.remove("a")
    store.remove("a")
    assert store.get("a") is None


def test_in_memory_quota():
    store = InMemoryStore(quota_bytes=10)
    store.set("a", "12345")
    store.set("a", "1234567890")  # replacing counts only the new value
    with pytest.raises(StorageQuotaExceededError):
        store.set("b", "x")
    assert store.get("b") is None


# --- RedisStore ---

@pytest.fixture
def mock_client():
    return MagicMock()


def test_redis_store_namespaces_keys(mock_client):
    mock_client.get.return_value = "value"
    store = RedisStore(mock_client, namespace="pe:")

    assert store.get("history") == "value"
    mock_client.get.assert_called_once_with("pe:history")

    store.set("history", "[]")
    mock_client.set.assert_called_once_with("pe:history", "[]")

    store.remove("history")
    mock_client.delete.assert_called_once_with("pe:history")


def test_redis_store_keys_strip_namespace(mock_client):
    mock_client.scan_iter.return_value = iter(["pe:history", "pe:session"])
    store = RedisStore(mock_client, namespace="pe:")
    assert store.keys() == ["history", "session"]
    mock_client.scan_iter.assert_called_once_with(match="pe:*")


def test_redis_store_unavailable(mock_client):
    mock_client.get.side_effect = RedisConnectionError("connection refused")
    mock_client.set.side_effect = RedisConnectionError("connection refused")
    store = RedisStore(mock_client)
    with pytest.raises(StorageUnavailableError):
        store.get("history")
    with pytest.raises(StorageUnavailableError):
        store.set("history", "[]")


def test_redis_store_out_of_memory_is_quota(mock_client):
    mock_client.set.side_effect = ResponseError("OOM command not allowed when used memory > 'maxmemory'.")
    store = RedisStore(mock_client)
    with pytest.raises(StorageQuotaExceededError):
        store.set("history", "[]")


def test_redis_store_other_response_error(mock_client):
    mock_client.set.side_effect = ResponseError("WRONGTYPE Operation against a key")
    store = RedisStore(mock_client)
    with pytest.raises(StorageUnavailableError):
        store.set("history", "[]")


@patch("profile_engine.storage.kv.redis.Redis")
def test_redis_store_from_settings(mock_redis):
    store = RedisStore.from_settings(RedisSettings(host="cache", port=6380, db=2), namespace="pe:")
    mock_redis.assert_called_once_with(host="cache", port=6380, db=2, decode_responses=True)
    assert store.client is mock_redis.return_value
    assert store.namespace == "pe:"
