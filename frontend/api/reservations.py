"""Reservation endpoints."""

from datetime import datetime
from typing import Any

from frontend.api.client import BackendClient
from frontend.exceptions import APIResponseError
from frontend.exceptions import BookingLimitError
from frontend.models import ActiveSession
from frontend.models import Reservation
from frontend.models import ReservationStatus
from frontend.models import to_local_naive


def get_reservations(client: BackendClient, include_past: bool = False) -> tuple[datetime | None, list[Reservation]]:
    """Return the backend's current time and the member's reservations."""
    data: dict[str, Any] = client.get(
        "/api/reservations/",
        params={"include_past": "true" if include_past else "false"},
    )
    return to_local_naive(data.get("current_time")), [Reservation.from_api(r) for r in data.get("reservations", [])]


def create_reservation(
    client: BackendClient,
    court_id: int,
    day: str,
    start_time: str,
    booked_for_id: str | None = None,
) -> Reservation:
    """Book a court.

    Raises:
        BookingLimitError: The backend reported conflicting active sessions
    """
    body: dict[str, Any] = {"court_id": court_id, "date": day, "start_time": start_time}
    if booked_for_id:
        body["booked_for_id"] = booked_for_id

    try:
        data = client.post("/api/reservations/", json=body)
    except APIResponseError as e:
        sessions = e.payload.get("active_sessions")
        if sessions:
            raise BookingLimitError(
                e.message,
                [ActiveSession.from_api(s) for s in sessions],
                e.status_code,
                e.payload,
            ) from e
        raise
    return Reservation.from_api(data["reservation"])


def cancel_reservation(client: BackendClient, reservation_id: int) -> str:
    data = client.delete(f"/api/reservations/{reservation_id}")
    return (data or {}).get("message", "")


def get_reservation_status(client: BackendClient) -> ReservationStatus:
    return ReservationStatus.from_api(client.get("/api/reservations/status"))
