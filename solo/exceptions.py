"""Exception hierarchy for the unique-job layer.

Callers can tell apart a store outage (``LockStoreError``), a reservation
that kept losing races (``ReservationConflictError``) and bad input
(``PolicyError`` / ``EncodingError``). "Already queued" is not an error and
is reported through ``EnqueueResult``.
"""

from __future__ import annotations


class SoloError(Exception):
    """Base class for all errors raised by solo."""


class PolicyError(SoloError):
    """Raised when a job type is registered with an invalid policy."""


class EncodingError(SoloError):
    """Raised when job arguments cannot be encoded to the wire format."""


class LockStoreError(SoloError):
    """Raised when the shared store fails (connection, timeout, protocol)."""


class BrokerError(LockStoreError):
    """Raised when the redis broker fails while pushing, popping or listing items."""


class TransactionAborted(SoloError):
    """Raised when a watched key changed before the transaction committed."""


class ReservationConflictError(SoloError):
    """Raised when a reservation was aborted more times than allowed."""


__all__ = [
    "SoloError",
    "PolicyError",
    "EncodingError",
    "LockStoreError",
    "BrokerError",
    "TransactionAborted",
    "ReservationConflictError",
]
