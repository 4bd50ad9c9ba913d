"""
Court grid for the dashboard and the public overview.

The backend reports availability sparsely (only occupied slots per court);
the grid fills in every court and hour so templates can render a table.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

COURTS = [1, 2, 3, 4, 5, 6]
FIRST_HOUR = 8
LAST_HOUR = 21
SHORT_NOTICE_WINDOW = timedelta(hours=24)

# Navigable range around today
DAYS_BEFORE = 30
DAYS_AFTER = 90


def slot_times():
    return [f"{hour:02d}:00" for hour in range(FIRST_HOUR, LAST_HOUR + 1)]


def is_short_notice_slot(day, slot_time, now):
    """True when the slot starts within the next 24 hours."""
    start = datetime.combine(day, datetime.strptime(slot_time, "%H:%M").time())
    return now <= start < now + SHORT_NOTICE_WINDOW


@dataclass
class Slot:
    court: int
    time: str
    status: str = "available"
    details: dict = field(default_factory=dict)
    short_notice: bool = False

    @property
    def is_bookable(self):
        return self.status == "available"

    @property
    def is_own(self):
        return self.status in ("own", "own_short_notice")

    @property
    def can_cancel(self):
        return self.is_own and bool(self.details.get("reservation_id")) and bool(self.details.get("can_cancel"))

    @property
    def reservation_id(self):
        return self.details.get("reservation_id")

    @property
    def label(self):
        if self.status == "available":
            return "Frei"
        if self.is_own:
            return "Meine"
        if self.status in ("reserved", "short_notice"):
            name = self.details.get("booked_for") or ""
            return name.split(" ")[0] if name else "Belegt"
        if self.status in ("blocked", "suspended"):
            return self.details.get("reason") or "Gesperrt"
        return ""

    @property
    def title(self):
        """Hover text for occupied slots."""
        if self.status in ("reserved", "short_notice") or self.is_own:
            name = self.details.get("booked_for") or "Belegt"
            suffix = " (kurzfristig)" if self.status.endswith("short_notice") else ""
            return f"Platz {self.court}, {self.time}: {name}{suffix}"
        if self.status in ("blocked", "suspended"):
            return f"Platz {self.court}, {self.time}: {self.details.get('reason') or 'Gesperrt'}"
        return ""

    @property
    def css_class(self):
        classes = ["slot", f"slot-{self.status.replace('_', '-')}"]
        if self.is_own:
            classes.append("own")
        if self.short_notice or self.status.endswith("short_notice"):
            classes.append("short-notice")
        return " ".join(classes)


def occupied_status(occupied, member_id):
    """Map the backend's slot status onto the grid's status vocabulary."""
    backend_status = occupied.get("status")
    details = occupied.get("details") or {}

    if backend_status in ("reserved", "short_notice"):
        is_short_notice = backend_status == "short_notice" or bool(details.get("is_short_notice"))
        is_own = member_id is not None and str(details.get("booked_for_id") or "") == str(member_id)
        if is_own:
            return "own_short_notice" if is_short_notice else "own"
        return "short_notice" if is_short_notice else "reserved"
    if backend_status == "blocked_temporary":
        return "suspended"
    return "blocked"


def build_grid(availability, member_id, selected_date, now):
    """Return ``[(time, [Slot per court]), ...]`` for the selected day.

    Args:
        availability: Backend availability payload for ``selected_date``
        member_id: Logged-in member, or None on the public overview
        selected_date: Day being shown
        now: Current club-local time (naive)
    """
    today = now.date()
    current_hour = (availability or {}).get("current_hour", now.hour)

    grid = {}
    for court in COURTS:
        grid[court] = {}
        for slot_time in slot_times():
            hour = int(slot_time[:2])
            is_past = selected_date < today or (selected_date == today and hour < current_hour)
            if is_past:
                grid[court][slot_time] = Slot(court, slot_time, "past")
            else:
                grid[court][slot_time] = Slot(
                    court,
                    slot_time,
                    "available",
                    short_notice=is_short_notice_slot(selected_date, slot_time, now),
                )

    for court in (availability or {}).get("courts", []):
        number = court.get("court_number")
        if number not in grid:
            continue
        for occupied in court.get("occupied", []):
            slot_time = (occupied.get("time") or "")[:5]
            if slot_time not in grid[number]:
                continue
            grid[number][slot_time] = Slot(
                number,
                slot_time,
                occupied_status(occupied, member_id),
                occupied.get("details") or {},
            )

    return [(slot_time, [grid[court][slot_time] for court in COURTS]) for slot_time in slot_times()]


def find_slot(rows, court, slot_time):
    for row_time, slots in rows:
        if row_time == slot_time:
            for slot in slots:
                if slot.court == court:
                    return slot
    return None


@dataclass
class DayCell:
    day: date
    is_today: bool
    is_selected: bool

    @property
    def iso(self):
        return self.day.isoformat()


def clamp_date(day, today):
    first = today - timedelta(days=DAYS_BEFORE)
    last = today + timedelta(days=DAYS_AFTER)
    return min(max(day, first), last)


def date_window(selected, today, visible=7):
    """Day strip centred on the selected day, kept inside the navigable range."""
    first = today - timedelta(days=DAYS_BEFORE)
    total = DAYS_BEFORE + DAYS_AFTER + 1
    index = (selected - first).days
    start = max(0, min(index - visible // 2, total - visible))
    return [
        DayCell(day=day, is_today=day == today, is_selected=day == selected)
        for day in (first + timedelta(days=start + i) for i in range(visible))
    ]


def neighbour_days(selected, today):
    """Previous and next navigable day, None at the edges of the range."""
    first = today - timedelta(days=DAYS_BEFORE)
    last = today + timedelta(days=DAYS_AFTER)
    prev_day = selected - timedelta(days=1)
    next_day = selected + timedelta(days=1)
    return (prev_day if prev_day >= first else None, next_day if next_day <= last else None)


def parse_day(value, today):
    """Parse a ``?date=`` parameter, falling back to today."""
    if not value:
        return today
    try:
        day = date.fromisoformat(value)
    except ValueError:
        return today
    return clamp_date(day, today)


def parse_slot_time(value):
    """Validate a ``HH:MM`` slot on the grid, or None."""
    return value if value in slot_times() else None
