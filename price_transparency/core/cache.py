"""
In-memory TTL cache owned by the healthcare data aggregator.

Expiry Model:
    Each entry records its own deadline at write time:
    ``expires_at = stored_at + (ttl if ttl is given else default_ttl)``.
    A read after the deadline evicts the entry and reports a miss. There are no
    background timers, so an entry's lifetime is fully described by the ttl it was
    written with.

Scope:
    The cache is per-process and unbounded. It is only touched from the event-loop
    thread, so it needs no locking. Concurrent misses for the same key both compute
    the value; the later write wins.

Usage:
    cache = InMemoryCache(default_ttl=300)
    cache.set("providers:{...}", result)            # lives 300 s
    cache.set("er:34.05:-118.24:25", rooms, ttl=120)  # lives 120 s
    cached = cache.get("providers:{...}")
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel


logger = logging.getLogger(__name__)

# Sentinel distinguishing "absent" from a cached None
MISSING: Any = object()


@dataclass
class CacheEntry:
    """A cached value and the monotonic time after which it is expired."""
    value: Any
    stored_at: float
    expires_at: float


class InMemoryCache:
    """
    Keyed store with per-entry time-to-live.

    Args:
        default_ttl: Lifetime in seconds used when ``set`` receives no ttl.
        clock: Zero-argument callable returning seconds; injectable for tests.
    """

    def __init__(
        self,
        default_ttl: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Return the cached value for key, or default when absent or expired.

        Expired entries are evicted as a side effect of the read.
        """
        entry = self._entries.get(key)
        if entry is None:
            return default

        if self._clock() > entry.expires_at:
            del self._entries[key]
            logger.debug(f"Cache entry expired: {key}")
            return default

        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store value under key for ttl seconds (default_ttl when omitted)."""
        now = self._clock()
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(
            value=value,
            stored_at=now,
            expires_at=now + lifetime,
        )

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __contains__(self, key: str) -> bool:
        return self.get(key, MISSING) is not MISSING

    def __len__(self) -> int:
        return len(self._entries)


def make_cache_key(operation: str, *parts: Any) -> str:
    """
    Build a deterministic cache key from an operation name and its inputs.

    Pydantic models are dumped in JSON mode without unset optionals, and every
    part is serialized with sorted keys, so logically equal filters always map to
    the same key regardless of field order.

    Example:
        >>> make_cache_key("prices", "27447", {"page": 1, "limit": 20})
        'prices:"27447":{"limit": 20, "page": 1}'
    """
    serialized = []
    for part in parts:
        if isinstance(part, BaseModel):
            part = part.model_dump(mode="json", exclude_none=True)
        serialized.append(json.dumps(part, sort_keys=True, default=str))
    return ":".join([operation, *serialized])
