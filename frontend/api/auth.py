"""Login and logout against the backend."""

from typing import Any

from frontend.api.client import BackendClient
from frontend.models import Member


def login(client: BackendClient, email: str, password: str) -> tuple[str, Member]:
    """Log in and return the bearer token together with the member."""
    data: dict[str, Any] = client.post("/auth/login/api", json={"email": email, "password": password})
    return data["access_token"], Member.from_api(data["user"])


def logout(client: BackendClient) -> None:
    client.post("/auth/logout/api")
