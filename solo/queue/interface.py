from typing import Any, List, Optional, Protocol

from solo.codec import JobItem


class BrokerInterface(Protocol):
    """Contract for the queue storage that UniqueQueue wraps.

    Items are stored in their encoded wire form (see ``solo.codec``) so
    ``list_pending``/``pop`` always return freshly decoded ``JobItem``s.

    ``transactional`` is True when ``push`` can take part in the lock
    store's MULTI (the broker lives on the same redis server).
    """

    transactional: bool

    def push(self, queue: str, item: JobItem, pipeline: Optional[Any] = None) -> None:
        """Append an item to queue. With a pipeline, buffer the write on it."""

    def pop(self, queue: str, timeout: float = 0) -> Optional[JobItem]:
        """Pop the oldest item. timeout=0 returns immediately, >0 blocks up to timeout seconds."""

    def list_pending(self, queue: str) -> List[JobItem]:
        """Return pending items, oldest first, without removing them."""

    def remove(self, queue: str, item: JobItem) -> int:
        """Remove every pending copy of item. Returns the number removed."""

    def size(self, queue: str) -> int:
        """Number of pending items."""

    def drop(self, queue: str) -> None:
        """Delete the queue's storage."""
