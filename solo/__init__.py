"""solo: at most one pending instance per unique job identity.

Modules
-------
- fingerprint: canonical job identity
- policy: per job type uniqueness settings
- store: redis lock store (watch / multi)
- queue: broker contract plus in-memory and redis list brokers
- unique_queue: enqueue guard, dequeue hook, release and maintenance
- worker: dequeue loop running registered handlers
"""

from .codec import JobItem
from .exceptions import (
    BrokerError,
    EncodingError,
    LockStoreError,
    PolicyError,
    ReservationConflictError,
    SoloError,
    TransactionAborted,
)
from .fingerprint import fingerprint, split_metadata
from .policy import PolicyRegistry, UniquenessPolicy, unique_job
from .store import LockStore
from .unique_queue import EnqueueResult, UniqueQueue

__all__ = [
    "JobItem",
    "EnqueueResult",
    "UniqueQueue",
    "LockStore",
    "PolicyRegistry",
    "UniquenessPolicy",
    "unique_job",
    "fingerprint",
    "split_metadata",
    "SoloError",
    "PolicyError",
    "EncodingError",
    "LockStoreError",
    "BrokerError",
    "TransactionAborted",
    "ReservationConflictError",
]
