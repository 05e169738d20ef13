# Read-through cache for (pickup, delivery) -> zone

from __future__ import annotations
import logging
import threading
import time
from functools import lru_cache
from typing import Dict, Optional, Protocol, Tuple

import redis

from shipquote.core.config import Settings, settings


logger = logging.getLogger(__name__)


def cache_key(pickup: str, delivery: str) -> str:
    return f"{pickup}:{delivery}"


class ZoneCache(Protocol):
    def get(self, pickup: str, delivery: str) -> Optional[str]: ...
    def set(self, pickup: str, delivery: str, zone: str, ttl_sec: int) -> None: ...
    def invalidate(self, pickup: Optional[str] = None, delivery: Optional[str] = None) -> int: ...


class NullZoneCache:
    """Caching disabled; every lookup recomputes."""

    def get(self, pickup: str, delivery: str) -> Optional[str]:
        return None

    def set(self, pickup: str, delivery: str, zone: str, ttl_sec: int) -> None:
        return None

    def invalidate(self, pickup: Optional[str] = None, delivery: Optional[str] = None) -> int:
        return 0


class InMemoryZoneCache:
    """
    Process-local TTL cache. Reads and writes take one lock; staleness up to ttl is accepted.
    Writes sweep expired entries (at most once per sweep interval, and not before
    the earliest expiry); past max_entries the oldest insertions are evicted.
    """

    def __init__(self, clock=time.monotonic, max_entries: int = 50_000, sweep_interval_sec: float = 60.0):
        self._clock = clock
        self._lock = threading.Lock()
        self._data: Dict[str, Tuple[str, float]] = {}
        self.max_entries = max(1, int(max_entries))
        self.sweep_interval_sec = sweep_interval_sec
        self._next_sweep: Optional[float] = None

    def __len__(self) -> int:
        return len(self._data)

    def get(self, pickup: str, delivery: str) -> Optional[str]:
        key = cache_key(pickup, delivery)
        with self._lock:
            hit = self._data.get(key)
            if hit is None:
                return None
            zone, expires_at = hit
            if expires_at <= self._clock():
                self._data.pop(key, None)
                return None
            return zone

    def set(self, pickup: str, delivery: str, zone: str, ttl_sec: int) -> None:
        if ttl_sec <= 0:
            return
        key = cache_key(pickup, delivery)
        with self._lock:
            now = self._clock()
            if self._next_sweep is not None and self._next_sweep <= now:
                self._sweep(now)

            expires_at = now + ttl_sec
            self._data.pop(key, None)        # re-insert at the end of the eviction order
            self._data[key] = (zone, expires_at)
            if self._next_sweep is None:
                self._next_sweep = expires_at

            while len(self._data) > self.max_entries:
                oldest = next(iter(self._data))
                del self._data[oldest]

    def _sweep(self, now: float) -> None:
        # caller holds the lock
        expired = [k for k, (_, exp) in self._data.items() if exp <= now]
        for k in expired:
            del self._data[k]
        earliest = min((exp for _, exp in self._data.values()), default=None)
        self._next_sweep = None if earliest is None else max(earliest, now + self.sweep_interval_sec)
        if expired:
            logger.debug("zone cache swept %d expired entries", len(expired))

    def invalidate(self, pickup: Optional[str] = None, delivery: Optional[str] = None) -> int:
        with self._lock:
            if pickup is None and delivery is None:
                n = len(self._data)
                self._data.clear()
                self._next_sweep = None
                return n
            doomed = [
                k for k in self._data
                if (pickup is None or k.split(":", 1)[0] == pickup)
                and (delivery is None or k.split(":", 1)[1] == delivery)
            ]
            for k in doomed:
                del self._data[k]
            return len(doomed)


"""
Shared cache across workers; keys: {prefix}:{env}:{pickup}:{delivery}
"""
class RedisZoneCache:

    def __init__(self, client: "redis.Redis", prefix: str = "shipquote:zone", env: str = "dev"):
        self.r = client
        self.prefix = f"{prefix}:{env}"

    def _key(self, pickup: str, delivery: str) -> str:
        return f"{self.prefix}:{cache_key(pickup, delivery)}"

    def get(self, pickup: str, delivery: str) -> Optional[str]:
        val = self.r.get(self._key(pickup, delivery))
        if val is None:
            return None
        return val.decode("utf-8") if isinstance(val, bytes) else str(val)

    def set(self, pickup: str, delivery: str, zone: str, ttl_sec: int) -> None:
        if ttl_sec <= 0:
            return
        self.r.setex(self._key(pickup, delivery), ttl_sec, zone)

    def invalidate(self, pickup: Optional[str] = None, delivery: Optional[str] = None) -> int:
        if pickup is not None and delivery is not None:
            return int(self.r.delete(self._key(pickup, delivery)))
        pattern = f"{self.prefix}:{pickup or '*'}:{delivery or '*'}"
        keys = list(self.r.scan_iter(match=pattern, count=500))
        if not keys:
            return 0
        return int(self.r.delete(*keys))


def build_zone_cache(s: Settings) -> ZoneCache:
    backend = (s.ZONE_CACHE_BACKEND or "memory").strip().lower()
    if backend == "none":
        return NullZoneCache()
    if backend == "redis":
        if not s.REDIS_URL:
            raise ValueError("ZONE_CACHE_BACKEND=redis requires REDIS_URL")
        client = redis.Redis.from_url(s.REDIS_URL, socket_timeout=1.0, socket_connect_timeout=1.0)
        return RedisZoneCache(client, prefix=s.ZONE_CACHE_KEY_PREFIX, env=s.ENVIRONMENT)
    if backend != "memory":
        logger.warning("unknown ZONE_CACHE_BACKEND=%r, using in-memory cache", backend)
    return InMemoryZoneCache(max_entries=s.ZONE_CACHE_MAX_ENTRIES)


@lru_cache(maxsize=1)
def get_zone_cache() -> ZoneCache:
    """Process-wide cache instance."""
    return build_zone_cache(settings)
