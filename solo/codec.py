"""Job item schema and its wire encoding.

Brokers store items as compact JSON of ``{"class": ..., "args": [...]}``.
The fingerprint engine runs arguments through the same encode/decode pass,
so whatever the wire format collapses (tuple vs list, int vs str keys,
enum members vs their values) is also collapsed for identity purposes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import json
from typing import Any, Dict, List

from .exceptions import EncodingError


@dataclass
class JobItem:
	"""A queued unit of work: job type name plus positional arguments."""
	job_type: str
	args: List[Any] = field(default_factory=list)

	def to_payload(self) -> Dict[str, Any]:
		return {"class": self.job_type, "args": list(self.args)}

	@classmethod
	def from_payload(cls, payload: Dict[str, Any]) -> "JobItem":
		return cls(job_type=payload.get("class"), args=list(payload.get("args") or []))


def normalize_key(key: Any) -> str:
	if isinstance(key, Enum):
		key = key.value
	if isinstance(key, bytes):
		return key.decode("utf-8")
	if isinstance(key, str):
		# str-valued Enum members reach here as plain str subclasses
		return str.__str__(key)
	if isinstance(key, bool) or key is None:
		return json.dumps(key)
	return str(key)


def normalize(value: Any) -> Any:
	"""Coerce a value into plain JSON types with string map keys."""
	if isinstance(value, Enum):
		return normalize(value.value)
	if isinstance(value, dict):
		return {normalize_key(k): normalize(v) for k, v in value.items()}
	if isinstance(value, (list, tuple)):
		return [normalize(v) for v in value]
	if isinstance(value, bytes):
		return value.decode("utf-8")
	return value


def encode(payload: Any) -> str:
	"""Encode a payload to its compact JSON wire form."""
	try:
		return json.dumps(normalize(payload), separators=(",", ":"), ensure_ascii=False)
	except (TypeError, ValueError, UnicodeDecodeError) as e:
		raise EncodingError(f"payload is not JSON encodable: {e}") from e


def decode(raw: str | bytes) -> Any:
	if isinstance(raw, bytes):
		raw = raw.decode("utf-8")
	return json.loads(raw)


def encode_item(item: JobItem) -> str:
	return encode(item.to_payload())


def decode_item(raw: str | bytes) -> JobItem:
	return JobItem.from_payload(decode(raw))


__all__ = ["JobItem", "normalize_key", "normalize", "encode", "decode", "encode_item", "decode_item"]
