"""Redis-backed lock store.

Environment variables supported when no client is injected:
- REDIS_URL: full connection URL (preferred, rediss:// for TLS)
- REDIS_HOST (default: localhost)
- REDIS_PORT (default: 6379)
- REDIS_DB (default: 0)
- REDIS_PASSWORD (optional)
- REDIS_SSL_VERIFY (default: true) relaxes cert checks for rediss:// when false
"""
from __future__ import annotations

from contextlib import contextmanager
import os
from typing import Any, Callable, Iterator, List, Optional

import redis

from solo.exceptions import LockStoreError, TransactionAborted


class LockStore:
	"""Thin wrapper over a redis client for lock entries.

	All redis failures surface as ``LockStoreError``; a commit aborted by a
	concurrent writer surfaces as ``TransactionAborted``.
	"""

	def __init__(
		self,
		client: Optional["redis.Redis"] = None,
		url: Optional[str] = None,
		host: Optional[str] = None,
		port: Optional[int] = None,
		db: Optional[int] = None,
		password: Optional[str] = None,
	):
		if client is not None:
			self.client = client
			return
		url = url or os.getenv("REDIS_URL")
		if url:
			ssl_kwargs = {}
			if url.startswith("rediss://"):
				verify_env = os.getenv("REDIS_SSL_VERIFY", "true").lower()
				if verify_env in ("0", "false", "no"):
					ssl_kwargs["ssl_cert_reqs"] = None
			self.client = redis.Redis.from_url(url, decode_responses=True, **ssl_kwargs)
		else:
			self.client = redis.Redis(
				host=host or os.getenv("REDIS_HOST", "localhost"),
				port=int(port or os.getenv("REDIS_PORT", "6379")),
				db=int(db or os.getenv("REDIS_DB", "0")),
				password=password or os.getenv("REDIS_PASSWORD"),
				decode_responses=True,
			)

	def _invoke(self, op: str, func: Callable[[], Any]) -> Any:
		try:
			return func()
		except redis.WatchError as e:
			raise TransactionAborted(f"transaction aborted during {op}") from e
		except redis.RedisError as e:
			raise LockStoreError(f"lock store error during {op}: {e}") from e

	def get(self, key: str) -> Optional[str]:
		return self._invoke("get", lambda: self.client.get(key))

	def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
		"""Write a value; a ttl >= 0 sets an expiry in seconds."""
		if ttl is not None and ttl >= 0:
			return bool(self._invoke("set", lambda: self.client.set(key, value, ex=ttl)))
		return bool(self._invoke("set", lambda: self.client.set(key, value)))

	def delete(self, *keys: str) -> int:
		if not keys:
			return 0
		return int(self._invoke("delete", lambda: self.client.delete(*keys)))

	def expire(self, key: str, ttl: int) -> bool:
		return bool(self._invoke("expire", lambda: self.client.expire(key, ttl)))

	def ttl(self, key: str) -> int:
		"""Remaining ttl in seconds (-1 no expiry, -2 missing key)."""
		return int(self._invoke("ttl", lambda: self.client.ttl(key)))

	def exists(self, key: str) -> bool:
		return bool(self._invoke("exists", lambda: self.client.exists(key)))

	def scan_keys(self, pattern: str, count: int = 500) -> List[str]:
		return self._invoke(
			"scan", lambda: list(self.client.scan_iter(match=pattern, count=count))
		)

	def get_and_delete(self, key: str) -> Optional[str]:
		"""Read and delete a key in one MULTI/EXEC."""

		def _run():
			pipe = self.client.pipeline(transaction=True)
			pipe.get(key)
			pipe.delete(key)
			value, _ = pipe.execute()
			return value

		return self._invoke("get_and_delete", _run)

	@contextmanager
	def watch(self, *keys: str) -> Iterator["redis.client.Pipeline"]:
		"""Watch keys and yield the pipeline in immediate mode.

		Reads issued on the pipeline run right away. After ``pipe.multi()``
		commands are buffered and ``pipe.execute()`` commits them, raising
		``TransactionAborted`` if a watched key changed meanwhile.
		"""
		pipe = self.client.pipeline(transaction=True)
		try:
			self._invoke("watch", lambda: pipe.watch(*keys))
			try:
				yield pipe
			except redis.WatchError as e:
				raise TransactionAborted(f"watched keys changed: {', '.join(keys)}") from e
			except redis.RedisError as e:
				raise LockStoreError(f"lock store error during transaction: {e}") from e
		finally:
			pipe.reset()

	def close(self) -> None:
		self.client.close()


__all__ = ["LockStore"]
