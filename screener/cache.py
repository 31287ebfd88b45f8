"""
SNAPSHOT CACHE

Read-through cache for upstream JSON, keyed by fetch URL.
Each entry carries its own expiry so one cache can serve endpoints with
different TTLs (12s token pairs, 30s boosted seed, 6h token list, ...).

RATE-LIMIT SHIELD: a burst of list requests re-uses the same upstream
responses instead of hammering DexScreener.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class SnapshotCache:
    """
    In-memory TTL cache guarded by a lock.

    Every entry expires on its own schedule. When full, the entry read
    least recently is evicted. The clock (seconds) is injectable.
    """

    def __init__(self, config: Dict = None, clock: Callable[[], float] = time.time):
        """
        Args:
            config: Cache configuration dict ('max_size', 'default_ttl_seconds')
            clock: Time source returning seconds
        """
        self.config = config or {}
        self.default_ttl = self.config.get('default_ttl_seconds', 15)
        self.max_size = self.config.get('max_size', 2000)
        self._clock = clock

        self._cache: Dict[str, Dict] = {}
        self._lock = threading.Lock()

        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: str) -> Optional[Any]:
        """Fresh value for key, or None (missing and expired look the same)."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self.misses += 1
                return None

            now = self._clock()
            if now > entry['expires_at']:
                del self._cache[key]
                self.misses += 1
                return None

            entry['last_accessed'] = now
            self.hits += 1
            return entry['value']

    def set(self, key: str, value: Any, ttl_seconds: float = None) -> Any:
        """
        Store value under key and return it (so callers can `return cache.set(...)`).

        Args:
            key: Cache key (the fetch URL)
            value: Decoded JSON document
            ttl_seconds: Lifetime; falls back to the configured default
        """
        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        with self._lock:
            if key not in self._cache and len(self._cache) >= self.max_size:
                self._evict_lru()

            now = self._clock()
            self._cache[key] = {
                'value': value,
                'last_accessed': now,
                'expires_at': now + ttl,
            }
        return value

    def _evict_lru(self):
        oldest = min(self._cache, key=lambda k: self._cache[k]['last_accessed'], default=None)
        if oldest is not None:
            self._cache.pop(oldest)
            self.evictions += 1

    def purge_expired(self) -> int:
        """Drop every expired entry; returns the count."""
        with self._lock:
            now = self._clock()
            stale = [k for k, e in self._cache.items() if now > e['expires_at']]
            for key in stale:
                self._cache.pop(key)

        if stale:
            logger.debug(f"[CACHE] Purged {len(stale)} stale snapshots")
        return len(stale)

    def get_stats(self) -> Dict:
        with self._lock:
            lookups = self.hits + self.misses
            return {
                'entries': len(self._cache),
                'capacity': self.max_size,
                'hits': self.hits,
                'misses': self.misses,
                'hit_ratio': round(self.hits / lookups, 3) if lookups else 0.0,
                'evictions': self.evictions,
            }
