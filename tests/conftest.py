import json
from dataclasses import dataclass
from datetime import timedelta
from unittest import mock
from urllib.parse import urlparse

import pytest
import requests
from django.core.cache import cache
from django.utils import timezone


@dataclass
class Call:
    method: str
    path: str
    params: dict | None
    json: dict | None
    headers: dict


class FakeBackend:
    """Stands in for the backend API at the ``requests.Session`` level.

    Routes map ``(method, path)`` to ``(status, payload)``. A list of
    responses is consumed in order, the last one repeating. An exception
    instance is raised instead of answering.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, payload=None, status=200):
        self.routes[(method, path)] = (status, payload)

    def sequence(self, method, path, *responses):
        self.routes[(method, path)] = list(responses)

    def fail(self, method, path, exception):
        self.routes[(method, path)] = exception

    def called(self, method, path):
        return [c for c in self.calls if c.method == method and c.path == path]

    def request(self, method, url, params=None, json=None, files=None, headers=None, timeout=None, **kwargs):
        path = urlparse(url).path
        self.calls.append(Call(method, path, params, json, headers or {}))

        route = self.routes.get((method, path))
        if isinstance(route, Exception):
            raise route
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if route is None:
            route = (404, {"error": f"No route for {method} {path}"})
        status, payload = route
        return make_response(url, status, payload)


def make_response(url, status, payload):
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    response.headers["Content-Type"] = "application/json"
    if payload is None:
        response._content = b""
    elif isinstance(payload, (bytes, str)):
        response._content = payload if isinstance(payload, bytes) else payload.encode()
    else:
        response._content = json.dumps(payload).encode()
    return response


def member_payload(**overrides):
    data = {
        "id": "m-1",
        "firstname": "Max",
        "lastname": "Mustermann",
        "name": "Max Mustermann",
        "email": "max@example.com",
        "email_verified": True,
        "role": "member",
        "is_active": True,
        "fee_paid": True,
    }
    data.update(overrides)
    return data


def status_payload(regular=0, short_notice=0, payment_deadline=None):
    return {
        "limits": {
            "regular_reservations": {"limit": 2, "current": regular, "available": 2 - regular, "can_book": regular < 2},
            "short_notice_bookings": {"limit": 1, "current": short_notice, "available": 1 - short_notice, "can_book": short_notice < 1},
        },
        "payment_deadline": payment_deadline,
    }


def future_day(days=3):
    return timezone.localdate() + timedelta(days=days)


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def backend():
    fake = FakeBackend()
    fake.add("GET", "/api/courts/availability/range", {"days": {}})
    fake.add("GET", "/api/courts/availability", {"courts": []})
    fake.add("GET", "/api/reservations/status", status_payload())
    fake.add("GET", "/api/reservations/", {"current_time": None, "reservations": []})
    fake.add("GET", "/api/members/me/favourites", {"favourites": []})
    with mock.patch.object(requests.Session, "request", new=fake.request):
        yield fake


def login_as(client, backend, **overrides):
    payload = member_payload(**overrides)
    backend.add("POST", "/auth/login/api", {"access_token": "token-123", "user": payload})
    backend.add("GET", "/api/members/me", payload)
    response = client.post("/login", {"email": payload["email"], "password": "geheim123"})
    assert response.status_code == 302
    return payload


@pytest.fixture
def member_client(client, backend):
    login_as(client, backend)
    return client


@pytest.fixture
def admin_client(client, backend):
    login_as(client, backend, id="a-1", firstname="Anna", lastname="Admin", name="Anna Admin", role="administrator")
    return client


@pytest.fixture
def teamster_client(client, backend):
    login_as(client, backend, id="t-1", firstname="Tom", lastname="Wart", name="Tom Wart", role="teamster")
    return client
