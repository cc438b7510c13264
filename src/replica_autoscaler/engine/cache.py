"""Decision cache persisted as an ordered list of entries on the autoscaler status."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from ..resources import AutoscalerStatus, CacheEntry, CacheEntryKey

DEFAULT_CACHE_TTL = timedelta(minutes=10)


def lookup(status: AutoscalerStatus, key: CacheEntryKey, now: datetime) -> Optional[int]:
    """Return the cached value for ``key`` if a live entry exists."""
    for entry in status.cache_entries:
        if entry.key == key and not entry.is_expired(now):
            return entry.value
    return None


def prepare_append(
    status: AutoscalerStatus,
    key: CacheEntryKey,
    value: int,
    now: datetime,
    ttl: Optional[timedelta] = None,
) -> List[CacheEntry]:
    """Drop expired entries and append a fresh one expiring at ``now + ttl``.

    The returned list is new; ``status`` is left untouched. A non-positive
    ``ttl`` falls back to :data:`DEFAULT_CACHE_TTL`.
    """
    if ttl is None or ttl <= timedelta(0):
        ttl = DEFAULT_CACHE_TTL
    entries = [entry for entry in status.cache_entries if not entry.is_expired(now)]
    entries.append(CacheEntry(key=key, value=value, expiration_time=now + ttl))
    return entries
