"""Canonical job identity.

``fingerprint(job_type, args)`` is an MD5 hex digest over the codec's
encoding of ``{"class": job_type, "args": args}`` after:

- the trailing ``metadata`` entry is stripped,
- arguments are round-tripped through the codec (keys become strings),
- the top-level pairs of every map argument are sorted by key.

Sorting is shallow: nested maps keep their insertion order.
"""
from __future__ import annotations

import hashlib
from typing import Any, List, Sequence, Tuple

from . import codec
from .config import METADATA_KEY


class _NoMetadata:
    """Marker for "no metadata entry", distinct from metadata that is None."""

    def __repr__(self) -> str:
        return "NO_METADATA"


NO_METADATA = _NoMetadata()


def split_metadata(args: Sequence[Any]) -> Tuple[List[Any], Any]:
    """Separate trailing metadata from the data arguments.

    Returns ``(data_args, metadata)``, with ``NO_METADATA`` when the
    trailing map carries no metadata entry. The caller's arguments are never
    mutated. When the trailing map holds nothing but metadata it is dropped
    from ``data_args`` entirely, so ``f(x)`` and ``f(x, {"metadata": m})``
    share an identity.
    """
    data_args = list(args)
    if not data_args or not isinstance(data_args[-1], dict):
        return data_args, NO_METADATA
    last = data_args[-1]
    meta_key = next((k for k in last if codec.normalize_key(k) == METADATA_KEY), None)
    if meta_key is None:
        return data_args, NO_METADATA
    rest = {k: v for k, v in last.items() if k is not meta_key}
    metadata = last[meta_key]
    if rest:
        data_args[-1] = rest
    else:
        data_args.pop()
    return data_args, metadata


def canonical_args(args: Sequence[Any]) -> List[Any]:
    normalized = codec.decode(codec.encode(list(args)))
    return [dict(sorted(arg.items())) if isinstance(arg, dict) else arg for arg in normalized]


def fingerprint(job_type: str, args: Sequence[Any]) -> str:
    data_args, _ = split_metadata(args)
    payload = {"class": job_type, "args": canonical_args(data_args)}
    return hashlib.md5(codec.encode(payload).encode("utf-8"), usedforsecurity=False).hexdigest()


__all__ = ["NO_METADATA", "split_metadata", "canonical_args", "fingerprint"]
