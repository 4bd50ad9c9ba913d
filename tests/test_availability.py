import time
from datetime import date
from unittest import mock

import requests

from frontend.api.client import BackendClient
from frontend.availability import CACHE_TTL_SECONDS, PREFETCH_CHUNK, PREFETCH_DAYS, AvailabilityService

BASE_URL = "http://backend.test"
DAY = "2026-01-24"
START = time.time()


def make_service(owner="m-1"):
    return AvailabilityService(BackendClient(BASE_URL, token="abc"), owner=owner)


def test_second_read_is_served_from_cache(backend):
    backend.add("GET", "/api/courts/availability", {"courts": [], "marker": 1})
    service = make_service()

    first, first_cached = service.get_for_date(DAY)
    second, second_cached = service.get_for_date(DAY)

    assert first == second == {"courts": [], "marker": 1}
    assert (first_cached, second_cached) == (False, True)
    assert len(backend.called("GET", "/api/courts/availability")) == 1


def test_cache_is_per_member(backend):
    make_service("m-1").get_for_date(DAY)
    make_service("m-2").get_for_date(DAY)
    assert len(backend.called("GET", "/api/courts/availability")) == 2


def test_stale_entry_is_refreshed(backend):
    backend.sequence("GET", "/api/courts/availability", (200, {"v": 1}), (200, {"v": 2}))
    service = make_service()

    with mock.patch("frontend.availability.time.time", return_value=START):
        service.get_for_date(DAY)
    with mock.patch("frontend.availability.time.time", return_value=START + CACHE_TTL_SECONDS + 1):
        data, from_cache = service.get_for_date(DAY)

    assert data == {"v": 2}
    assert not from_cache


def test_stale_entry_backs_a_failed_refresh(backend):
    backend.add("GET", "/api/courts/availability", {"v": 1})
    service = make_service()

    with mock.patch("frontend.availability.time.time", return_value=START):
        service.get_for_date(DAY)

    backend.fail("GET", "/api/courts/availability", requests.exceptions.ConnectionError("down"))
    with mock.patch("frontend.availability.time.time", return_value=START + CACHE_TTL_SECONDS + 1):
        data, from_cache = service.get_for_date(DAY)

    assert data == {"v": 1}
    assert from_cache


def test_initial_load_fills_cache_from_range(backend):
    backend.add("GET", "/api/courts/availability/range", {"days": {DAY: {"v": "range"}, "2026-01-25": {"v": "next"}}})
    service = make_service()

    service.initial_load(date(2026, 1, 24))

    call = backend.called("GET", "/api/courts/availability/range")[-1]
    assert call.params == {"start": DAY, "days": PREFETCH_DAYS}
    assert service.get_for_date("2026-01-25") == ({"v": "next"}, True)
    assert not backend.called("GET", "/api/courts/availability")


def test_initial_load_falls_back_to_single_date(backend):
    backend.add("GET", "/api/courts/availability/range", {"error": "boom"}, status=500)
    backend.add("GET", "/api/courts/availability", {"v": "single"})
    service = make_service()

    service.initial_load(date(2026, 1, 24))

    assert service.cache.has(DAY)
    assert backend.called("GET", "/api/courts/availability")[-1].params == {"date": DAY}


def test_prefetch_around_loads_both_directions(backend):
    service = make_service()
    service.prefetch_around(DAY)

    starts = [c.params["start"] for c in backend.called("GET", "/api/courts/availability/range")]
    assert starts == ["2026-01-25", "2026-01-17"]
    assert all(c.params["days"] == PREFETCH_CHUNK for c in backend.called("GET", "/api/courts/availability/range"))


def test_prefetch_skips_cached_edges(backend):
    service = make_service()
    service.cache.set("2026-01-27", {})
    service.cache.set("2026-01-21", {})

    service.prefetch_around(DAY)

    assert not backend.called("GET", "/api/courts/availability/range")


def test_prefetch_errors_are_swallowed(backend):
    backend.add("GET", "/api/courts/availability/range", {"error": "boom"}, status=500)
    make_service().prefetch_around(DAY)


def test_invalidate_forces_refetch(backend):
    service = make_service()
    service.get_for_date(DAY)
    service.invalidate(DAY)
    service.get_for_date(DAY)

    assert len(backend.called("GET", "/api/courts/availability")) == 2
