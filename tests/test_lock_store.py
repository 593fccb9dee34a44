from unittest.mock import MagicMock

import pytest
import redis

from solo.exceptions import LockStoreError, TransactionAborted
from solo.locks import decode_lock_value, encode_lock_value
from solo.store.client import LockStore


def test_set_get_delete(store):
    assert store.get("k") is None
    store.set("k", "1")
    assert store.get("k") == "1"
    assert store.exists("k")
    assert store.delete("k") == 1
    assert not store.exists("k")
    assert store.delete() == 0


def test_set_with_ttl(store):
    store.set("k", "v", ttl=120)
    assert 118 <= store.ttl("k") <= 120


def test_negative_ttl_means_no_expiry(store):
    store.set("k", "v", ttl=-1)
    assert store.ttl("k") == -1
    assert store.ttl("missing") == -2


def test_expire(store):
    store.set("k", "v")
    assert store.expire("k", 30)
    assert 28 <= store.ttl("k") <= 30


def test_scan_keys(store):
    for i in range(5):
        store.set(f"solo:queue:q:{i}", "1")
    store.set("other:key", "1")
    assert sorted(store.scan_keys("solo:queue:q:*")) == [f"solo:queue:q:{i}" for i in range(5)]


def test_get_and_delete(store):
    store.set("k", '{"a":1}')
    assert store.get_and_delete("k") == '{"a":1}'
    assert store.get("k") is None
    assert store.get_and_delete("k") is None


def test_watch_commits(store):
    with store.watch("k") as pipe:
        assert pipe.get("k") is None
        pipe.multi()
        pipe.set("k", "1")
        pipe.execute()
    assert store.get("k") == "1"


def test_watch_aborts_on_concurrent_write(store, server):
    import fakeredis

    rival = fakeredis.FakeRedis(server=server, decode_responses=True)
    with pytest.raises(TransactionAborted):
        with store.watch("k") as pipe:
            pipe.get("k")
            rival.set("k", "other")
            pipe.multi()
            pipe.set("k", "1")
            pipe.execute()
    assert store.get("k") == "other"


def test_redis_errors_are_wrapped():
    client = MagicMock()
    client.get.side_effect = redis.ConnectionError("connection refused")
    store = LockStore(client=client)
    with pytest.raises(LockStoreError) as exc_info:
        store.get("k")
    assert isinstance(exc_info.value.__cause__, redis.ConnectionError)


def test_errors_inside_transaction_are_wrapped():
    pipe = MagicMock()
    pipe.get.side_effect = redis.TimeoutError("timed out")
    client = MagicMock()
    client.pipeline.return_value = pipe
    store = LockStore(client=client)
    with pytest.raises(LockStoreError):
        with store.watch("k") as p:
            p.get("k")
    pipe.reset.assert_called_once()


def test_builds_client_from_env(monkeypatch):
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6390/3")
    store = LockStore()
    kwargs = store.client.connection_pool.connection_kwargs
    assert kwargs["port"] == 6390
    assert kwargs["db"] == 3


def test_lock_value_without_metadata():
    assert encode_lock_value() == "1"
    assert decode_lock_value("1") == (False, None)
    assert decode_lock_value(b"1") == (False, None)
    assert decode_lock_value(None) == (False, None)


def test_lock_value_metadata_equal_to_sentinel():
    for metadata in (1, "1", None, {"a": [1, 2]}):
        raw = encode_lock_value(metadata)
        assert raw.startswith("m:")
        assert decode_lock_value(raw) == (True, metadata)
        assert decode_lock_value(raw.encode("utf-8")) == (True, metadata)


def test_unprefixed_lock_value_is_rejected():
    with pytest.raises(ValueError):
        decode_lock_value('{"a": 1}')
