from __future__ import annotations

from typing import Any, Callable, List, Optional

import redis

from solo import config
from solo.codec import JobItem, decode_item, encode_item
from solo.exceptions import BrokerError
from solo.queue.interface import BrokerInterface


class RedisListBroker(BrokerInterface):
    """Redis list implementation of the broker contract.

    - One list per queue: `<ns>:queue:<name>`
    - Items stored as compact JSON `{"class": ..., "args": [...]}`
    - RPUSH to enqueue, LPOP/BLPOP to dequeue (FIFO)

    Pushes accept the lock store's pipeline so item and lock commit in the
    same MULTI/EXEC. That only holds when both use the same redis server.
    """

    transactional = True

    def __init__(self, client: "redis.Redis", namespace: Optional[str] = None):
        self.client = client
        self.ns = config.NAMESPACE if namespace is None else namespace

    # Key helpers
    def _queue(self, queue: str) -> str:
        return config.queue_key(queue, self.ns)

    def _invoke(self, op: str, func: Callable[[], Any]) -> Any:
        try:
            return func()
        except redis.RedisError as e:
            raise BrokerError(f"broker error during {op}: {e}") from e

    def push(self, queue: str, item: JobItem, pipeline: Optional[Any] = None) -> None:
        payload = encode_item(item)
        if pipeline is not None:
            # queued on the caller's MULTI; errors surface from its execute()
            pipeline.rpush(self._queue(queue), payload)
            return
        self._invoke("push", lambda: self.client.rpush(self._queue(queue), payload))

    def pop(self, queue: str, timeout: float = 0) -> Optional[JobItem]:
        key = self._queue(queue)
        if timeout and timeout > 0:
            res = self._invoke("pop", lambda: self.client.blpop([key], timeout=timeout))
            if not res:
                return None
            _, raw = res
        else:
            raw = self._invoke("pop", lambda: self.client.lpop(key))
            if raw is None:
                return None
        return decode_item(raw)

    def list_pending(self, queue: str) -> List[JobItem]:
        raws = self._invoke("list_pending", lambda: self.client.lrange(self._queue(queue), 0, -1))
        return [decode_item(raw) for raw in raws]

    def remove(self, queue: str, item: JobItem) -> int:
        return int(self._invoke("remove", lambda: self.client.lrem(self._queue(queue), 0, encode_item(item))))

    def size(self, queue: str) -> int:
        return int(self._invoke("size", lambda: self.client.llen(self._queue(queue))))

    def drop(self, queue: str) -> None:
        self._invoke("drop", lambda: self.client.delete(self._queue(queue)))


__all__ = ["RedisListBroker"]
