import fakeredis
import pytest  # noqa

from solo.policy.registry import PolicyRegistry
from solo.queue.adapters.redis_list_broker import RedisListBroker
from solo.queue.in_memory import InMemoryBroker
from solo.store.client import LockStore
from solo.unique_queue import UniqueQueue

from fake_jobs import (
    FailingUniqueJob,
    FakeJob,
    FakeUniqueJob,
    UniqueJobWithLock,
    UniqueJobWithTtl,
)


@pytest.fixture(autouse=True)
def _reset_performed():
    FakeJob.performed = []
    FakeUniqueJob.performed = []
    yield


@pytest.fixture
def registry():
    reg = PolicyRegistry(held_lock_ttl=86400)
    reg.register(FakeJob, unique=False)
    reg.register(FakeUniqueJob)
    reg.register(FailingUniqueJob)
    reg.register(UniqueJobWithTtl, ttl=300)
    reg.register(UniqueJobWithLock, release_after_completion=True)
    return reg


# --- redis -------------------------------------------------------------------

@pytest.fixture
def server():
    return fakeredis.FakeServer()


@pytest.fixture
def redis_client(server):
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def store(redis_client):
    return LockStore(client=redis_client)


@pytest.fixture(params=["redis", "memory"])
def broker(request, redis_client):
    if request.param == "redis":
        return RedisListBroker(redis_client)
    return InMemoryBroker()


@pytest.fixture
def uq(broker, store, registry):
    return UniqueQueue(broker, store, registry, inline=False, lock_prefix="solo:queue", watch_retries=3)


@pytest.fixture
def redis_uq(redis_client, store, registry):
    return UniqueQueue(RedisListBroker(redis_client), store, registry, inline=False, lock_prefix="solo:queue")
