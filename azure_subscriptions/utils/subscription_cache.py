"""
Subscription Cache - TTL-based in-memory cache for resolved subscriptions.

One entry per management group id. Entries are overwritten on every
successful refresh and never evicted: an expired entry is still handed out
by ``get`` so callers can fall back to it when Azure is unreachable.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .config import DEFAULT_CACHE_TTL_SECONDS
from .logger import get_logger
from .models import SubscriptionRecord

logger = get_logger(__name__)

CACHE_KEY_PREFIX = "azure-subscriptions-"


def make_cache_key(group_id: str) -> str:
    return f"{CACHE_KEY_PREFIX}{group_id}"


@dataclass(frozen=True)
class CacheEntry:
    timestamp: float
    data: Tuple[SubscriptionRecord, ...]


class SubscriptionCache:
    """TTL-based in-memory cache keyed by management group."""

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._hits = 0
        self._misses = 0

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def now(self) -> float:
        return self._clock()

    def is_fresh(self, entry: CacheEntry, now: Optional[float] = None) -> bool:
        """True while the entry is younger than the TTL."""
        if now is None:
            now = self.now()
        return now - entry.timestamp < self._ttl_seconds

    def get(self, key: str) -> Optional[CacheEntry]:
        """
        Return the entry for *key* whatever its age, or None.

        Hit/miss counters only count fresh entries as hits.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self.is_fresh(entry):
                self._hits += 1
                logger.debug(
                    "Subscription cache HIT for %s (age=%.0fs)",
                    key, self.now() - entry.timestamp,
                )
            else:
                self._misses += 1
            return entry

    def set(
        self,
        key: str,
        data: Iterable[SubscriptionRecord],
        timestamp: Optional[float] = None,
    ) -> CacheEntry:
        entry = CacheEntry(
            timestamp=self.now() if timestamp is None else timestamp,
            data=tuple(data),
        )
        with self._lock:
            self._entries[key] = entry
        return entry

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(hit_rate, 1),
                "ttl_seconds": self._ttl_seconds,
            }
