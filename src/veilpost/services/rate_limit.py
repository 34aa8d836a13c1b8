"""Rate limiting keyed by bucket and caller identifier.

Buckets (``message``, ``post``, ``ai``) each carry their own limit and window
and are counted with the ``limits`` sliding-window-counter strategy.
The limiter runs under an explicit :class:`RateLimitPolicy`:

- ``ENFORCED`` counts hits in Redis when ``REDIS_URL`` is set and in process
  memory otherwise. Expired counters are dropped by the storage.
- ``DISABLED`` always allows and logs a warning once per process.

An enforced limiter whose storage errors also fails open for that call
and logs a warning.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

import redis
from fastapi import Request
from limits import RateLimitItem, RateLimitItemPerSecond
from limits.errors import StorageError
from limits.storage import MemoryStorage, RedisStorage, Storage
from limits.strategies import SlidingWindowCounterRateLimiter
from slowapi.util import get_remote_address

from veilpost.core.errors import RateLimited
from veilpost.core.settings import settings

logger = logging.getLogger(__name__)

NAMESPACE = "veilpost"


class RateLimitPolicy(str, Enum):
    """Whether requests are counted at all."""

    ENFORCED = "enforced"
    DISABLED = "disabled"


@dataclass(frozen=True)
class Bucket:
    """A named counter scope: at most ``limit`` hits per ``window`` seconds."""

    name: str
    limit: int
    window: int

    def as_item(self) -> RateLimitItem:
        return RateLimitItemPerSecond(self.limit, self.window, namespace=NAMESPACE)


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single limit check."""

    allowed: bool
    remaining: int


class RateLimiter:
    """Checks hits against named buckets under a fixed policy."""

    def __init__(
        self,
        policy: RateLimitPolicy,
        buckets: Mapping[str, Bucket],
        storage: Storage | None = None,
    ) -> None:
        if policy is RateLimitPolicy.ENFORCED and storage is None:
            raise ValueError("An enforced rate limiter needs a storage backend")
        self.policy = policy
        self.buckets = dict(buckets)
        self.storage = storage
        self._items = {name: bucket.as_item() for name, bucket in self.buckets.items()}
        self._strategy = (
            SlidingWindowCounterRateLimiter(storage) if storage is not None else None
        )
        self._warned_disabled = False

    def check(self, bucket_name: str, identifier: str) -> RateLimitDecision:
        """Record a hit for ``identifier`` in ``bucket_name`` and report the outcome."""
        bucket = self.buckets[bucket_name]
        if self.policy is RateLimitPolicy.DISABLED or self._strategy is None:
            if not self._warned_disabled:
                logger.warning("Rate limiting is disabled; all requests are allowed.")
                self._warned_disabled = True
            return RateLimitDecision(allowed=True, remaining=bucket.limit)

        item = self._items[bucket_name]
        try:
            allowed = self._strategy.hit(item, bucket.name, identifier)
            remaining = self._strategy.get_window_stats(item, bucket.name, identifier).remaining
        except (StorageError, redis.RedisError) as exc:
            logger.warning("Rate limit storage unavailable, allowing request: %s", exc)
            return RateLimitDecision(allowed=True, remaining=bucket.limit)
        return RateLimitDecision(allowed=allowed, remaining=remaining if allowed else 0)

    def enforce(self, bucket_name: str, identifier: str) -> None:
        """Raise :class:`RateLimited` if the hit is not allowed."""
        if not self.check(bucket_name, identifier).allowed:
            logger.info("Rate limit exceeded in bucket %s", bucket_name)
            raise RateLimited()

    def reset(self) -> None:
        """Forget every recorded hit."""
        if self.storage is not None:
            self.storage.reset()


def load_buckets() -> dict[str, Bucket]:
    """Build bucket definitions from global settings."""
    return {
        name: Bucket(name=name, limit=limit, window=window)
        for name, (limit, window) in settings.rate_limit_buckets.items()
    }


def build_storage() -> Storage:
    """Redis when ``REDIS_URL`` is configured, process memory otherwise."""
    if settings.redis_url:
        return RedisStorage(settings.redis_url, wrap_exceptions=True)
    return MemoryStorage(wrap_exceptions=True)


def build_rate_limiter() -> RateLimiter:
    """Construct a limiter from global settings."""
    policy = RateLimitPolicy(settings.rate_limit_mode.lower())
    storage = build_storage() if policy is RateLimitPolicy.ENFORCED else None
    return RateLimiter(policy, load_buckets(), storage)


@lru_cache(maxsize=1)
def get_rate_limiter() -> RateLimiter:
    """Return the process-wide rate limiter."""
    return build_rate_limiter()


def client_identifier(request: Request) -> str:
    """Return the caller's network identifier for rate-limit keys.

    Only the socket peer is used unless ``TRUST_FORWARDED_FOR`` is set. Behind
    a trusted proxy the right-most ``X-Forwarded-For`` hop is taken, since
    that is the one the proxy appended; earlier hops are client-supplied.
    """
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
        if hops:
            return hops[-1]
    return get_remote_address(request)
