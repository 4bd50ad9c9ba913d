from dataclasses import dataclass, field
from datetime import date, datetime, time

from django.utils import timezone


def _parse_date(value):
    if not value:
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def _parse_time(value):
    if not value:
        return None
    if isinstance(value, time):
        return value
    return datetime.strptime(value[:5], "%H:%M").time()


def _parse_datetime(value):
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_local_naive(value):
    """Parse a backend timestamp into naive club-local time."""
    parsed = _parse_datetime(value)
    if parsed is not None and timezone.is_aware(parsed):
        parsed = timezone.make_naive(parsed)
    return parsed


def initials_for(name):
    parts = (name or "").split()
    if not parts:
        return "?"
    if len(parts) == 1:
        return parts[0][0].upper()
    return (parts[0][0] + parts[-1][0]).upper()


@dataclass
class Member:
    id: str
    firstname: str = ""
    lastname: str = ""
    email: str = ""
    name: str = ""
    email_verified: bool = True
    has_profile_picture: bool = False
    profile_picture_version: int = 0
    member_since: date | None = None
    phone: str = ""
    street: str = ""
    city: str = ""
    zip_code: str = ""
    notifications_enabled: bool = False
    notify_own_bookings: bool = False
    notify_other_bookings: bool = False
    notify_court_blocked: bool = False
    notify_booking_overridden: bool = False
    role: str = "member"
    membership_type: str = "full"
    is_active: bool = True
    fee_paid: bool | None = None
    payment_confirmation_requested: bool = False

    @classmethod
    def from_api(cls, data):
        return cls(
            id=str(data["id"]),
            firstname=data.get("firstname") or "",
            lastname=data.get("lastname") or "",
            email=data.get("email") or "",
            name=data.get("name") or "",
            email_verified=data.get("email_verified", True),
            has_profile_picture=data.get("has_profile_picture", False),
            profile_picture_version=data.get("profile_picture_version") or 0,
            member_since=_parse_date(data.get("member_since")),
            phone=data.get("phone") or "",
            street=data.get("street") or "",
            city=data.get("city") or "",
            zip_code=data.get("zip_code") or "",
            notifications_enabled=data.get("notifications_enabled", False),
            notify_own_bookings=data.get("notify_own_bookings", False),
            notify_other_bookings=data.get("notify_other_bookings", False),
            notify_court_blocked=data.get("notify_court_blocked", False),
            notify_booking_overridden=data.get("notify_booking_overridden", False),
            role=data.get("role") or "member",
            membership_type=data.get("membership_type") or "full",
            is_active=data.get("is_active", True),
            fee_paid=data.get("fee_paid"),
            payment_confirmation_requested=data.get("payment_confirmation_requested", False),
        )

    @property
    def full_name(self):
        return self.name or f"{self.firstname} {self.lastname}".strip()

    @property
    def initials(self):
        return initials_for(self.full_name)

    @property
    def is_admin(self):
        return self.role == "administrator"

    @property
    def is_teamster(self):
        return self.role == "teamster"

    @property
    def is_staff_member(self):
        return self.is_admin or self.is_teamster

    def __str__(self):
        return self.full_name


@dataclass
class Reservation:
    id: int
    court_id: int
    court_number: int
    date: date
    start_time: time
    end_time: time | None = None
    booked_for_id: str = ""
    booked_for: str = ""
    booked_by_id: str = ""
    booked_by: str = ""
    status: str = "active"
    is_short_notice: bool = False
    can_cancel: bool = True
    reason: str = ""

    @classmethod
    def from_api(cls, data):
        return cls(
            id=data["id"],
            court_id=data.get("court_id") or data.get("court_number"),
            court_number=data.get("court_number") or data.get("court_id"),
            date=_parse_date(data["date"]),
            start_time=_parse_time(data["start_time"]),
            end_time=_parse_time(data.get("end_time")),
            booked_for_id=str(data.get("booked_for_id") or ""),
            booked_for=data.get("booked_for") or data.get("booked_for_name") or "",
            booked_by_id=str(data.get("booked_by_id") or ""),
            booked_by=data.get("booked_by") or data.get("booked_by_name") or "",
            status=data.get("status") or "active",
            is_short_notice=data.get("is_short_notice", False),
            can_cancel=data.get("can_cancel", not data.get("is_short_notice", False)),
            reason=data.get("reason") or "",
        )

    @property
    def starts_at(self):
        return datetime.combine(self.date, self.start_time)

    @property
    def ends_at(self):
        # slots are one hour long when the backend omits the end
        end = self.end_time or time(min(self.start_time.hour + 1, 23))
        return datetime.combine(self.date, end)

    @property
    def is_suspended(self):
        return self.status == "suspended"

    def __str__(self):
        return f"Platz {self.court_number} | {self.date} {self.start_time:%H:%M}"


@dataclass
class ActiveSession:
    """A reservation counted against the member's booking limit."""

    reservation_id: int
    date: date
    start_time: time
    court_number: int
    booked_by_id: str = ""
    booked_by_name: str = ""
    is_short_notice: bool = False

    @classmethod
    def from_api(cls, data):
        return cls(
            reservation_id=data["reservation_id"],
            date=_parse_date(data["date"]),
            start_time=_parse_time(data["start_time"]),
            court_number=data["court_number"],
            booked_by_id=str(data.get("booked_by_id") or ""),
            booked_by_name=data.get("booked_by_name") or "",
            is_short_notice=data.get("is_short_notice", False),
        )

    def to_api(self):
        return {
            "reservation_id": self.reservation_id,
            "date": self.date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M"),
            "court_number": self.court_number,
            "booked_by_id": self.booked_by_id,
            "booked_by_name": self.booked_by_name,
            "is_short_notice": self.is_short_notice,
        }


@dataclass
class BookingLimit:
    limit: int = 0
    current: int = 0
    available: int = 0
    can_book: bool = True

    @classmethod
    def from_api(cls, data):
        data = data or {}
        return cls(
            limit=data.get("limit", 0),
            current=data.get("current", 0),
            available=data.get("available", 0),
            can_book=data.get("can_book", True),
        )


@dataclass
class PaymentDeadline:
    deadline: date | None = None
    days_until: int | None = None
    is_past: bool = False
    unpaid_count: int | None = None

    @classmethod
    def from_api(cls, data):
        if not data:
            return None
        return cls(
            deadline=_parse_date(data.get("deadline")),
            days_until=data.get("days_until"),
            is_past=data.get("is_past", False),
            unpaid_count=data.get("unpaid_count"),
        )


@dataclass
class ReservationStatus:
    regular: BookingLimit = field(default_factory=BookingLimit)
    short_notice: BookingLimit = field(default_factory=BookingLimit)
    payment_deadline: PaymentDeadline | None = None

    @classmethod
    def from_api(cls, data):
        limits = data.get("limits") or {}
        return cls(
            regular=BookingLimit.from_api(limits.get("regular_reservations")),
            short_notice=BookingLimit.from_api(limits.get("short_notice_bookings")),
            payment_deadline=PaymentDeadline.from_api(data.get("payment_deadline")),
        )


@dataclass
class Block:
    id: int
    court_id: int
    court_number: int
    date: date
    start_time: time
    end_time: time
    reason_id: int | None = None
    reason_name: str = ""
    details: str = ""
    batch_id: str = ""
    is_temporary: bool = False
    created_by_name: str = ""

    @classmethod
    def from_api(cls, data):
        return cls(
            id=data["id"],
            court_id=data.get("court_id") or data.get("court_number"),
            court_number=data.get("court_number") or data.get("court_id"),
            date=_parse_date(data["date"]),
            start_time=_parse_time(data["start_time"]),
            end_time=_parse_time(data["end_time"]),
            reason_id=data.get("reason_id"),
            reason_name=data.get("reason_name") or data.get("reason") or "",
            details=data.get("details") or data.get("comment") or "",
            batch_id=data.get("batch_id") or "",
            is_temporary=data.get("is_temporary", False),
            created_by_name=data.get("created_by_name") or "",
        )


@dataclass
class BlockReason:
    id: int
    name: str
    is_active: bool = True
    teamster_usable: bool = False
    is_temporary: bool = False
    usage_count: int = 0

    @classmethod
    def from_api(cls, data):
        return cls(
            id=data["id"],
            name=data["name"],
            is_active=data.get("is_active", True),
            teamster_usable=data.get("teamster_usable", data.get("teamster_allowed", False)),
            is_temporary=data.get("is_temporary", False),
            usage_count=data.get("usage_count", 0),
        )


@dataclass
class AuditLogEntry:
    timestamp: datetime | None
    action: str
    user: str
    type: str
    details: dict = field(default_factory=dict)
    performer_role: str = ""

    @classmethod
    def from_api(cls, data):
        return cls(
            timestamp=_parse_datetime(data.get("timestamp")),
            action=data.get("action") or "",
            user=data.get("user") or "",
            type=data.get("type") or "",
            details=data.get("details") or {},
            performer_role=data.get("performer_role") or "",
        )


@dataclass
class FeatureFlag:
    id: int
    key: str
    name: str
    description: str = ""
    is_enabled: bool = False
    allowed_roles: list = field(default_factory=list)

    @classmethod
    def from_api(cls, data):
        return cls(
            id=data["id"],
            key=data["key"],
            name=data.get("name") or data["key"],
            description=data.get("description") or "",
            is_enabled=data.get("is_enabled", False),
            allowed_roles=data.get("allowed_roles") or [],
        )
