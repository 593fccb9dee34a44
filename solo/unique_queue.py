"""Unique-job overlay for a queue broker.

``UniqueQueue`` wraps a broker and a lock store:

- enqueue: watch the lock key, bail out if it exists, otherwise push the
  item and write the lock in one MULTI/EXEC (retried on abort)
- dequeue: pop from the broker, release or hold the lock according to the
  job type's policy, reattach metadata carried in the lock
- release: explicit completion release for held locks
- destroy / cleanup / remove_queue: maintenance when items or queues are
  removed out of band

Usage:
    store = LockStore(client)
    uq = UniqueQueue(RedisListBroker(client), store, registry)
    uq.enqueue("default", "RebuildIndex", "products")
"""
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

import platform_monitoring

from . import config
from .codec import JobItem, normalize
from .exceptions import ReservationConflictError, TransactionAborted
from .fingerprint import fingerprint, split_metadata
from .locks import attach_metadata, decode_lock_value, encode_lock_value, lock_key, lock_pattern
from .policy.registry import PolicyRegistry, UniquenessPolicy, job_type_name
from .queue.interface import BrokerInterface
from .store.client import LockStore


class EnqueueResult(str, Enum):
    RESERVED = "reserved"
    ALREADY_QUEUED = "already_queued"
    DISABLED = "disabled"


class UniqueQueue:
    """Deduplicating front for a broker.

    The broker is used through its interface only; nothing is patched. The
    store client is injected and may be shared across threads.
    """

    def __init__(
        self,
        broker: BrokerInterface,
        store: LockStore,
        registry: PolicyRegistry,
        *,
        inline: Optional[bool] = None,
        lock_prefix: Optional[str] = None,
        watch_retries: Optional[int] = None,
    ):
        self.broker = broker
        self.store = store
        self.registry = registry
        self.inline = config.INLINE if inline is None else inline
        self.lock_prefix = config.LOCK_PREFIX if lock_prefix is None else lock_prefix
        self.watch_retries = config.WATCH_RETRIES if watch_retries is None else watch_retries

    # -------- keys --------
    def unique_key(self, queue: str, job_type: Any, *args: Any) -> str:
        name = job_type_name(job_type) or str(job_type)
        return lock_key(queue, fingerprint(name, args), self.lock_prefix)

    def _policy(self, job_type: Any) -> UniquenessPolicy:
        return self.registry.resolve(job_type)

    # -------- enqueue guard --------
    def enqueue(self, queue: str, job_type: Any, *args: Any) -> EnqueueResult:
        name = job_type_name(job_type) or str(job_type)
        policy = self._policy(name)
        if self.inline or not policy.unique:
            self.broker.push(queue, JobItem(name, list(args)))
            platform_monitoring.log_event("solo.enqueue.disabled", {"queue": queue, "job_type": name})
            return EnqueueResult.DISABLED

        data_args, metadata = split_metadata(args)
        item = JobItem(name, data_args)
        key = lock_key(queue, fingerprint(name, data_args), self.lock_prefix)
        value = encode_lock_value(metadata)

        attempts = 0
        while True:
            try:
                result = self._reserve(queue, item, key, value, policy)
            except TransactionAborted:
                attempts += 1
                platform_monitoring.log_event(
                    "solo.enqueue.aborted", {"queue": queue, "job_type": name, "key": key, "attempt": attempts}
                )
                if attempts > self.watch_retries:
                    platform_monitoring.prometheus_metric(
                        "solo_enqueue", labels={"queue": queue, "outcome": "conflict"}
                    )
                    raise ReservationConflictError(
                        f"reservation of {key} aborted {attempts} times by concurrent writers"
                    )
                continue
            platform_monitoring.prometheus_metric(
                "solo_enqueue", labels={"queue": queue, "outcome": result.value}
            )
            platform_monitoring.log_event(
                f"solo.enqueue.{result.value}", {"queue": queue, "job_type": name, "key": key}
            )
            return result

    def _reserve(
        self, queue: str, item: JobItem, key: str, value: str, policy: UniquenessPolicy
    ) -> EnqueueResult:
        with self.store.watch(key) as pipe:
            if pipe.get(key) is not None:
                pipe.unwatch()
                return EnqueueResult.ALREADY_QUEUED
            pipe.multi()
            if self.broker.transactional:
                self.broker.push(queue, item, pipeline=pipe)
            if policy.ttl >= 0:
                pipe.set(key, value, ex=policy.ttl)
            else:
                pipe.set(key, value)
            pipe.execute()
        if not self.broker.transactional:
            self.broker.push(queue, item)
        return EnqueueResult.RESERVED

    def is_queued(self, queue: str, job_type: Any, *args: Any) -> bool:
        if not self._policy(job_type).unique:
            return False
        return self.store.exists(self.unique_key(queue, job_type, *args))

    # -------- dequeue / release hook --------
    def dequeue(self, queue: str, timeout: float = 0) -> Optional[JobItem]:
        item = self.broker.pop(queue, timeout=timeout)
        if item is None or self.inline:
            return item
        return self.on_dequeue(queue, item)

    def on_dequeue(self, queue: str, item: JobItem) -> JobItem:
        policy = self._policy(item.job_type)
        if not policy.unique:
            return item
        key = lock_key(queue, fingerprint(item.job_type, item.args), self.lock_prefix)
        if policy.release_after_completion:
            raw = self.store.get(key)
            platform_monitoring.log_event("solo.dequeue.held", {"queue": queue, "job_type": item.job_type, "key": key})
        else:
            raw = self.store.get_and_delete(key)
            platform_monitoring.log_event("solo.dequeue.released", {"queue": queue, "job_type": item.job_type, "key": key})
        try:
            has_metadata, metadata = decode_lock_value(raw)
        except ValueError:
            platform_monitoring.log_event(
                "solo.metadata.malformed", {"queue": queue, "job_type": item.job_type, "key": key}
            )
            return item
        if has_metadata:
            item = JobItem(item.job_type, attach_metadata(item.args, metadata))
        return item

    def release(self, queue: str, job_type: Any, *args: Any) -> bool:
        """Delete the lock for (job_type, args) regardless of policy."""
        key = self.unique_key(queue, job_type, *args)
        removed = self.store.delete(key) > 0
        platform_monitoring.log_event("solo.release", {"queue": queue, "key": key, "removed": removed})
        return removed

    # -------- maintenance --------
    def destroy(self, queue: str, job_type: Any, *args: Any) -> int:
        """Remove pending items of job_type (matching args if given) and free their locks."""
        name = job_type_name(job_type) or str(job_type)
        wanted: Optional[List[Any]] = normalize(split_metadata(args)[0]) if args else None
        unique = not self.inline and self._policy(name).unique
        removed = 0
        seen = set()
        for item in self.broker.list_pending(queue):
            if item.job_type != name:
                continue
            if wanted is not None and item.args != wanted:
                continue
            if unique:
                self.store.delete(lock_key(queue, fingerprint(name, item.args), self.lock_prefix))
            marker = repr(item.args)
            if marker in seen:
                continue
            seen.add(marker)
            removed += self.broker.remove(queue, item)
        platform_monitoring.log_event("solo.destroy", {"queue": queue, "job_type": name, "removed": removed})
        return removed

    def cleanup(self, queue: str) -> int:
        """Delete every lock entry of queue, whether or not items remain."""
        keys = self.store.scan_keys(lock_pattern(queue, self.lock_prefix))
        deleted = self.store.delete(*keys) if keys else 0
        platform_monitoring.log_event("solo.cleanup", {"queue": queue, "deleted": deleted})
        return deleted

    def remove_queue(self, queue: str) -> None:
        self.broker.drop(queue)
        self.cleanup(queue)

    def size(self, queue: str) -> int:
        return self.broker.size(queue)


__all__ = ["EnqueueResult", "UniqueQueue"]
