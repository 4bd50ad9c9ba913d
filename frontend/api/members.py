"""Member endpoints: own profile, favourites, search and statistics."""

from typing import Any

from frontend.api.client import BackendClient
from frontend.models import Member


def get_profile(client: BackendClient) -> Member:
    return Member.from_api(client.get("/api/members/me"))


def update_profile(client: BackendClient, data: dict[str, Any]) -> Member:
    return Member.from_api(client.patch("/api/members/me", json=data))


def change_password(client: BackendClient, current_password: str, new_password: str) -> str:
    data = client.post(
        "/api/members/me/password",
        json={"current_password": current_password, "new_password": new_password},
    )
    return (data or {}).get("message", "")


def search_members(client: BackendClient, query: str) -> list[Member]:
    data = client.get("/api/members/search", params={"q": query})
    return [Member.from_api(m) for m in (data or {}).get("results", [])]


def get_favourites(client: BackendClient) -> list[Member]:
    data = client.get("/api/members/me/favourites")
    return [Member.from_api(m) for m in (data or {}).get("favourites", [])]


def add_favourite(client: BackendClient, favourite_id: str) -> str:
    data = client.post("/api/members/me/favourites", json={"favourite_id": favourite_id})
    return (data or {}).get("message", "")


def remove_favourite(client: BackendClient, favourite_id: str) -> str:
    data = client.delete(f"/api/members/me/favourites/{favourite_id}")
    return (data or {}).get("message", "")


def upload_profile_picture(client: BackendClient, upload) -> str:
    """Forward an uploaded file (Django ``UploadedFile``) to the backend."""
    files = {"file": (upload.name, upload.read(), upload.content_type)}
    data = client.post("/api/members/me/profile-picture", files=files)
    return (data or {}).get("message", "")


def delete_profile_picture(client: BackendClient) -> str:
    data = client.delete("/api/members/me/profile-picture")
    return (data or {}).get("message", "")


def resend_verification_email(client: BackendClient) -> str:
    data = client.post("/auth/resend-verification")
    return (data or {}).get("message", "")


def confirm_payment(client: BackendClient) -> str:
    data = client.post("/api/members/me/confirm-payment")
    return (data or {}).get("message", "")


def get_member_statistics(client: BackendClient, member_id: str, year: int | None = None) -> dict[str, Any]:
    params = {"year": year} if year else None
    return client.get(f"/api/members/{member_id}/statistics", params=params) or {}
