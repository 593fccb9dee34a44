from typing import Any, Optional

from solo import config
from solo.queue.adapters.redis_list_broker import RedisListBroker
from solo.queue.in_memory import InMemoryBroker
from solo.queue.interface import BrokerInterface


def build_broker(backend: Optional[str] = None, client: Optional[Any] = None) -> BrokerInterface:
    """Build a broker from QUEUE_BACKEND ('memory' or 'redis').

    The redis backend needs the client shared with the lock store so pushes
    join the reservation transaction.
    """
    backend = (backend or config.QUEUE_BACKEND or 'memory').lower()
    if backend == 'redis':
        if client is None:
            raise ValueError("redis backend requires a redis client (share the LockStore's client)")
        return RedisListBroker(client)
    if backend == 'memory':
        return InMemoryBroker()
    raise ValueError(f"unknown queue backend: {backend}")


__all__ = ["build_broker"]
