"""
Booking conflict flow.

When the backend rejects a booking because the member reached the booking
limit, it lists the member's active sessions. The requested booking is kept
in the session while the member picks one of them to cancel; the booking is
then retried.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from frontend.api import reservations as reservations_api
from frontend.models import ActiveSession

logger = logging.getLogger(__name__)

SESSION_KEY = "pending_booking"


@dataclass
class PendingBooking:
    court_id: int
    date: date
    start_time: str
    booked_for_id: str | None = None
    sessions: list[ActiveSession] = field(default_factory=list)

    @property
    def is_short_notice_conflict(self):
        return any(s.is_short_notice for s in self.sessions)

    @property
    def title(self):
        if self.is_short_notice_conflict:
            return "Kurzfristige Buchung aktiv"
        return "Buchungslimit erreicht"

    def session_for(self, reservation_id):
        for session in self.sessions:
            if session.reservation_id == reservation_id:
                return session
        return None

    def to_session(self):
        return {
            "court_id": self.court_id,
            "date": self.date.isoformat(),
            "start_time": self.start_time,
            "booked_for_id": self.booked_for_id,
            "sessions": [s.to_api() for s in self.sessions],
        }

    @classmethod
    def from_session(cls, data):
        return cls(
            court_id=data["court_id"],
            date=date.fromisoformat(data["date"]),
            start_time=data["start_time"],
            booked_for_id=data.get("booked_for_id"),
            sessions=[ActiveSession.from_api(s) for s in data.get("sessions", [])],
        )


def save_pending(request, pending):
    request.session[SESSION_KEY] = pending.to_session()


def load_pending(request):
    data = request.session.get(SESSION_KEY)
    if not data:
        return None
    return PendingBooking.from_session(data)


def clear_pending(request):
    request.session.pop(SESSION_KEY, None)


def submit_booking(client, court_id, day, start_time, booked_for_id=None):
    """Create a reservation; raises ``BookingLimitError`` on a conflict."""
    return reservations_api.create_reservation(
        client,
        court_id,
        day.isoformat(),
        start_time,
        booked_for_id=booked_for_id,
    )


def resolve_conflict(client, pending, reservation_id):
    """Cancel one conflicting reservation, then retry the pending booking.

    The cancelled session is removed from ``pending.sessions`` before the
    retry, so a failed retry never offers it again.

    Raises:
        ValueError: The reservation is not a cancellable conflict
        BookingLimitError: The retry still hit the booking limit
    """
    session = pending.session_for(reservation_id)
    if session is None:
        raise ValueError(f"Reservation {reservation_id} is not part of the conflict")
    if session.is_short_notice:
        raise ValueError("Short-notice bookings cannot be cancelled")

    reservations_api.cancel_reservation(client, reservation_id)
    logger.info("Cancelled reservation %s to make room for a new booking", reservation_id)
    pending.sessions = [s for s in pending.sessions if s.reservation_id != reservation_id]
    return submit_booking(client, pending.court_id, pending.date, pending.start_time, pending.booked_for_id)
