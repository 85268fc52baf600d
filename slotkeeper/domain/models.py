"""
Domain models for working windows, bookings and catalogue records.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum

import pendulum
from pendulum import DateTime


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Used for booked intervals and for candidate slots.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """
        Check if this range overlaps with another.

        Ranges are half-open, so a range ending exactly when the other
        starts does not overlap it.
        """
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass
class WorkingWindow:
    """
    Opening hours of one staff member on one calendar date.

    A window with ``is_working=False`` contributes no slots whatever its
    times say.
    """
    date: date
    start_time: time
    end_time: time
    is_working: bool = True

    def anchor(self, day: date, timezone: str) -> TimeRange | None:
        """
        Anchor the window's times of day onto ``day``.

        Returns None for a day off or an inverted/empty window.
        """
        if not self.is_working:
            return None

        start = pendulum.datetime(
            day.year, day.month, day.day,
            self.start_time.hour, self.start_time.minute,
            tz=timezone,
        )
        end = pendulum.datetime(
            day.year, day.month, day.day,
            self.end_time.hour, self.end_time.minute,
            tz=timezone,
        )
        if start >= end:
            return None
        return TimeRange(start=start, end=end)


@dataclass(frozen=True)
class Service:
    """A bookable service from the price list."""
    id: str
    name: str
    duration_minutes: int
    price_cents: int = 0

    def format_price(self) -> str:
        return f"{self.price_cents / 100:.2f}"


class StaffRole(str, Enum):
    ADMIN = "admin"
    BARBER = "barber"


@dataclass(frozen=True)
class StaffMember:
    """Staff profile (owner or barber)."""
    id: str
    full_name: str
    email: str = ""
    role: StaffRole = StaffRole.BARBER

    def display_name(self) -> str:
        return self.full_name or self.email or self.id


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PAID = "paid"
    CANCELLED = "cancelled"


@dataclass
class Appointment:
    """
    A booked appointment as stored in the external datastore.
    """
    id: str
    staff_id: str
    service_id: str
    client_name: str
    client_phone: str
    start: DateTime
    end: DateTime
    status: AppointmentStatus = AppointmentStatus.PENDING
    client_email: str | None = None
    created_at: DateTime = field(default_factory=pendulum.now)

    @property
    def is_active(self) -> bool:
        """Cancelled appointments no longer occupy their time."""
        return self.status != AppointmentStatus.CANCELLED

    def as_time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)
