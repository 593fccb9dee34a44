"""Central configuration for lock keys, broker keys and guard behaviour.

All values can be overridden by environment variables. Entry points call
``load_dotenv()`` before importing this module so values from ``.env`` are
visible at import time.

Connection settings (REDIS_URL / REDIS_HOST ...) are read by
``solo.store.client`` when a store builds its own client.
"""
from __future__ import annotations

import os

# Broker key namespace: lists live at <ns>:queue:<name>
NAMESPACE = os.getenv("REDIS_NAMESPACE", "solo")

# Lock keys: <prefix>:<queue>:<fingerprint>
LOCK_PREFIX = os.getenv("SOLO_LOCK_PREFIX", "solo:queue")

# Lock value meaning "reserved, no metadata"
LOCK_SENTINEL = "1"

# Prefix of lock values carrying metadata (m:<json>)
METADATA_VALUE_PREFIX = "m:"

# Reserved trailing-map key carrying metadata
METADATA_KEY = "metadata"

# Default ttl for locks held until completion, so a crashed job cannot
# keep its identity locked forever
HELD_LOCK_TTL = int(os.getenv("SOLO_HELD_LOCK_TTL", "86400"))

# How many times a commit aborted by a concurrent writer is re-run
WATCH_RETRIES = int(os.getenv("SOLO_WATCH_RETRIES", "3"))

# Inline mode: no deduplication, items go straight to the broker
INLINE = os.getenv("SOLO_INLINE", "0").lower() in ("1", "true", "yes")

# Broker factory default
QUEUE_BACKEND = os.getenv("QUEUE_BACKEND", "memory").lower()


def queue_key(name: str, namespace: str | None = None) -> str:
    """Build the broker list key for a queue."""
    ns = NAMESPACE if namespace is None else namespace
    return f"{ns}:queue:{name}" if ns else f"queue:{name}"


__all__ = [
    "NAMESPACE",
    "LOCK_PREFIX",
    "LOCK_SENTINEL",
    "METADATA_VALUE_PREFIX",
    "METADATA_KEY",
    "HELD_LOCK_TTL",
    "WATCH_RETRIES",
    "INLINE",
    "QUEUE_BACKEND",
    "queue_key",
]
