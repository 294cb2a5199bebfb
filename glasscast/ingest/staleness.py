"""Staleness checks for cached weather readings."""

import time

from glasscast.models.weather import CacheEntry


def entry_age_seconds(entry: CacheEntry, now: float | None = None) -> float:
    """Wall-clock age of a cache entry in seconds."""
    if now is None:
        now = time.time()
    return now - entry.fetched_at


def is_entry_stale(entry: CacheEntry, ttl_seconds: float, now: float | None = None) -> bool:
    """An entry is fresh strictly under the TTL; at or past it, it is stale."""
    return entry_age_seconds(entry, now) >= ttl_seconds
