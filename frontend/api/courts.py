"""Court availability endpoints."""

from typing import Any

from frontend.api.client import BackendClient


def get_availability(client: BackendClient, day: str) -> dict[str, Any]:
    """Sparse availability for one ISO date: courts with their occupied slots."""
    return client.get("/api/courts/availability", params={"date": day})


def get_availability_range(client: BackendClient, start: str, days: int) -> dict[str, dict[str, Any]]:
    """Availability for ``days`` consecutive dates, keyed by ISO date."""
    data = client.get("/api/courts/availability/range", params={"start": start, "days": days})
    return (data or {}).get("days") or {}
