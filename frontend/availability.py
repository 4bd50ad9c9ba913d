"""
Court availability with a short-lived cache and range prefetching.

Availability payloads include per-member details (own bookings, cancel
rights), so entries are cached per member and date.
"""

import logging
import time
from datetime import date, timedelta

from django.core.cache import cache

from frontend.api import courts as courts_api
from frontend.exceptions import BackendError

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 30
# Entries outlive their freshness so stale data can back a failed refresh
CACHE_RETENTION_SECONDS = 15 * 60
PREFETCH_DAYS = 14
PREFETCH_BUFFER = 3
PREFETCH_CHUNK = 7


class AvailabilityCache:
    def __init__(self, owner):
        self.owner = owner or "public"

    def _key(self, day):
        return f"availability:{self.owner}:{day}"

    def get(self, day):
        """Return ``(data, is_stale)`` or None."""
        entry = cache.get(self._key(day))
        if entry is None:
            return None
        age = time.time() - entry["fetched_at"]
        return entry["data"], age > CACHE_TTL_SECONDS

    def set(self, day, data):
        cache.set(self._key(day), {"data": data, "fetched_at": time.time()}, CACHE_RETENTION_SECONDS)

    def has(self, day):
        return cache.get(self._key(day)) is not None

    def delete(self, day):
        cache.delete(self._key(day))


class AvailabilityService:
    """Cache-first access to the availability endpoints."""

    def __init__(self, client, owner=None):
        self.client = client
        self.cache = AvailabilityCache(owner)

    def get_for_date(self, day):
        """Return ``(data, from_cache)`` for an ISO date."""
        cached = self.cache.get(day)
        if cached is None:
            return self.fetch_single(day), False

        data, is_stale = cached
        if not is_stale:
            return data, True

        try:
            return self.fetch_single(day), False
        except BackendError as e:
            logger.warning("Refreshing availability for %s failed, serving cached data: %s", day, e)
            return data, True

    def fetch_single(self, day):
        data = courts_api.get_availability(self.client, day)
        self.cache.set(day, data)
        return data

    def fetch_range(self, start, days):
        fetched = courts_api.get_availability_range(self.client, start, days)
        for day, data in fetched.items():
            self.cache.set(day, data)
        return fetched

    def initial_load(self, today):
        """Warm the cache with the next two weeks."""
        try:
            self.fetch_range(today.isoformat(), PREFETCH_DAYS)
        except BackendError as e:
            logger.warning("Range fetch failed, falling back to single date: %s", e)
            self.fetch_single(today.isoformat())

    def prefetch_around(self, day):
        """Fetch a week ahead or behind when ``day`` is near the cache edge."""
        center = date.fromisoformat(day)
        ahead = (center + timedelta(days=PREFETCH_BUFFER)).isoformat()
        behind = (center - timedelta(days=PREFETCH_BUFFER)).isoformat()

        if not self.cache.has(ahead):
            self._prefetch((center + timedelta(days=1)).isoformat())
        if not self.cache.has(behind):
            self._prefetch((center - timedelta(days=PREFETCH_CHUNK)).isoformat())

    def _prefetch(self, start):
        try:
            self.fetch_range(start, PREFETCH_CHUNK)
        except BackendError as e:
            logger.warning("Prefetch from %s failed: %s", start, e)

    def invalidate(self, day):
        self.cache.delete(day)


def service_for(request):
    member = request.member
    return AvailabilityService(request.api, owner=member.id if member else None)
