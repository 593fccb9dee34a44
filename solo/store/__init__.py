"""Shared-store tooling: the redis lock store used by the unique queue."""

from .client import LockStore  # noqa: F401
