"""Lock entry keys and values.

Lock keys look like ``<prefix>:<queue>:<fingerprint>``. The value is the
sentinel ``"1"`` when no metadata was supplied, otherwise ``"m:"`` followed
by the metadata as JSON, so metadata equal to ``1`` or ``None`` survives.
"""
from __future__ import annotations

import json
import re
from typing import Any, List, Optional, Tuple

from . import config
from .codec import encode, normalize
from .fingerprint import NO_METADATA

_GLOB_SPECIAL_RE = re.compile(r"([*?\[\]\\])")

# fingerprints are 32 lowercase hex chars
_FINGERPRINT_GLOB = "[0-9a-f]" * 32


def lock_key(queue: str, fingerprint: str, prefix: Optional[str] = None) -> str:
    prefix = config.LOCK_PREFIX if prefix is None else prefix
    return f"{prefix}:{queue}:{fingerprint}"


def lock_pattern(queue: str, prefix: Optional[str] = None) -> str:
    """SCAN pattern matching exactly the lock keys of one queue.

    Queue names are glob-escaped, and the fingerprint part is pinned to 32
    hex chars so queue ``a`` does not match keys of queue ``a:b``.
    """
    prefix = config.LOCK_PREFIX if prefix is None else prefix
    escaped = _GLOB_SPECIAL_RE.sub(r"\\\1", f"{prefix}:{queue}:")
    return escaped + _FINGERPRINT_GLOB


def encode_lock_value(metadata: Any = NO_METADATA) -> str:
    if metadata is NO_METADATA:
        return config.LOCK_SENTINEL
    return config.METADATA_VALUE_PREFIX + encode(metadata)


def decode_lock_value(raw: Optional[str | bytes]) -> Tuple[bool, Any]:
    """Return ``(has_metadata, metadata)`` for a stored lock value.

    Accepts str or bytes, depending on how the redis client decodes
    responses. Missing keys and the sentinel mean "no metadata". Raises
    ValueError for any other value that is not prefixed JSON.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if raw is None or raw == config.LOCK_SENTINEL:
        return False, None
    if not raw.startswith(config.METADATA_VALUE_PREFIX):
        raise ValueError(f"unrecognised lock value: {raw[:40]!r}")
    return True, json.loads(raw[len(config.METADATA_VALUE_PREFIX):])


def attach_metadata(args: List[Any], metadata: Any) -> List[Any]:
    """Reattach metadata as a trailing ``{"metadata": ...}`` entry.

    Merges into an existing trailing map instead of appending a second one.
    """
    out = list(args)
    metadata = normalize(metadata)
    if out and isinstance(out[-1], dict):
        out[-1] = {**out[-1], config.METADATA_KEY: metadata}
    else:
        out.append({config.METADATA_KEY: metadata})
    return out


__all__ = [
    "lock_key",
    "lock_pattern",
    "encode_lock_value",
    "decode_lock_value",
    "attach_metadata",
]
