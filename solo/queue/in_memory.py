from collections import deque
import threading
import time
from typing import Any, Deque, Dict, List, Optional

from solo.codec import JobItem, decode_item, encode_item
from solo.queue.interface import BrokerInterface


class InMemoryBroker(BrokerInterface):
    """Thread-safe in-memory broker for local development and tests.

    Items are kept encoded, mirroring what a redis list would hold. This
    broker cannot join a redis transaction, so the unique queue pushes to
    it only after the lock has been committed.
    """

    transactional = False

    def __init__(self):
        self._queues: Dict[str, Deque[str]] = {}
        self._cond = threading.Condition()

    def _ensure_queue(self, queue: str) -> Deque[str]:
        if queue not in self._queues:
            self._queues[queue] = deque()
        return self._queues[queue]

    def push(self, queue: str, item: JobItem, pipeline: Optional[Any] = None) -> None:
        raw = encode_item(item)
        with self._cond:
            self._ensure_queue(queue).append(raw)
            self._cond.notify_all()

    def pop(self, queue: str, timeout: float = 0) -> Optional[JobItem]:
        end = time.time() + max(timeout or 0, 0)
        with self._cond:
            while True:
                items = self._ensure_queue(queue)
                if items:
                    return decode_item(items.popleft())
                remaining = end - time.time()
                if remaining <= 0:
                    return None
                self._cond.wait(timeout=remaining)

    def list_pending(self, queue: str) -> List[JobItem]:
        with self._cond:
            return [decode_item(raw) for raw in self._ensure_queue(queue)]

    def remove(self, queue: str, item: JobItem) -> int:
        raw = encode_item(item)
        with self._cond:
            items = self._ensure_queue(queue)
            kept = [r for r in items if r != raw]
            removed = len(items) - len(kept)
            self._queues[queue] = deque(kept)
            return removed

    def size(self, queue: str) -> int:
        with self._cond:
            return len(self._ensure_queue(queue))

    def drop(self, queue: str) -> None:
        with self._cond:
            self._queues.pop(queue, None)


__all__ = ["InMemoryBroker"]
