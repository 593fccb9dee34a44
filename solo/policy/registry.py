from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from solo import config
from solo.exceptions import PolicyError


@dataclass(frozen=True)
class UniquenessPolicy:
    """Deduplication settings for one job type.

    ``ttl`` is the effective lock ttl in seconds (-1 = never expires).
    """
    job_type: str
    unique: bool = False
    ttl: int = -1
    release_after_completion: bool = False


def job_type_name(job_type: Any) -> Optional[str]:
    """Return the registry name for a job type reference, or None if malformed."""
    if isinstance(job_type, str):
        return job_type or None
    if isinstance(job_type, type):
        return job_type.__name__
    return None


class PolicyRegistry:
    """Registry of job types, their handlers and uniqueness policies.

    - register(job_type, handler, unique=..., ttl=..., release_after_completion=...)
    - get(job_type) -> Optional[UniquenessPolicy]
    - resolve(job_type) -> UniquenessPolicy (never raises)
    - handler(job_type) -> Optional[handler]
    """

    def __init__(self, held_lock_ttl: Optional[int] = None):
        self._policies: Dict[str, UniquenessPolicy] = {}
        self._handlers: Dict[str, Any] = {}
        self.held_lock_ttl = config.HELD_LOCK_TTL if held_lock_ttl is None else held_lock_ttl

    def register(
        self,
        job_type: Any,
        handler: Any = None,
        *,
        unique: bool = True,
        ttl: Optional[int] = None,
        release_after_completion: bool = False,
    ) -> UniquenessPolicy:
        name = job_type_name(job_type)
        if name is None:
            raise PolicyError(f"invalid job type reference: {job_type!r}")
        if ttl is not None and (isinstance(ttl, bool) or not isinstance(ttl, int) or (ttl != -1 and ttl <= 0)):
            raise PolicyError(f"ttl for {name} must be -1 or a positive integer, got {ttl!r}")
        if ttl is None:
            ttl = self.held_lock_ttl if release_after_completion else -1
        policy = UniquenessPolicy(
            job_type=name,
            unique=bool(unique),
            ttl=ttl,
            release_after_completion=bool(release_after_completion),
        )
        self._policies[name] = policy
        if handler is None and isinstance(job_type, type):
            handler = job_type
        self._handlers[name] = handler
        return policy

    def get(self, job_type: Any) -> Optional[UniquenessPolicy]:
        name = job_type_name(job_type)
        if name is None:
            return None
        return self._policies.get(name)

    def resolve(self, job_type: Any) -> UniquenessPolicy:
        policy = self.get(job_type)
        if policy is None:
            return UniquenessPolicy(job_type=job_type_name(job_type) or "")
        return policy

    def is_unique(self, job_type: Any) -> bool:
        return self.resolve(job_type).unique

    def handler(self, job_type: Any) -> Optional[Any]:
        name = job_type_name(job_type)
        return self._handlers.get(name) if name else None

    def list(self) -> List[str]:
        return list(self._policies.keys())


def unique_job(
    registry: PolicyRegistry,
    *,
    ttl: Optional[int] = None,
    release_after_completion: bool = False,
) -> Callable[[type], type]:
    """Class decorator registering a job class as unique.

    @unique_job(registry, ttl=300)
    class RebuildIndex:
        @staticmethod
        def perform(index_name): ...
    """

    def decorate(cls: type) -> type:
        registry.register(cls, unique=True, ttl=ttl, release_after_completion=release_after_completion)
        return cls

    return decorate
