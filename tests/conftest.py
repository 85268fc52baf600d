"""
Shared fixtures.
"""

from datetime import time

import pendulum
import pytest

from slotkeeper.adapters.memory_store import InMemoryDataStore
from slotkeeper.domain.models import (
    Appointment,
    AppointmentStatus,
    Service,
    StaffMember,
    WorkingWindow,
)
from slotkeeper.domain.slot_planner import SlotPlanner
from slotkeeper.domain.throttle import AttemptThrottle
from slotkeeper.services.availability import AvailabilityService

TZ = "Europe/Warsaw"


def appointment(apt_id, start, end, status=AppointmentStatus.CONFIRMED, staff_id="anna"):
    return Appointment(
        id=apt_id,
        staff_id=staff_id,
        service_id="haircut",
        client_name="Client",
        client_phone="+48500100200",
        start=pendulum.parse(start, tz=TZ),
        end=pendulum.parse(end, tz=TZ),
        status=status,
    )


@pytest.fixture
def make_appointment():
    return appointment


@pytest.fixture
def store() -> InMemoryDataStore:
    """Two working days for Anna, a day off, and a few appointments."""
    return InMemoryDataStore(
        services=[
            Service(id="haircut", name="Haircut", duration_minutes=45, price_cents=8000),
            Service(id="beard", name="Beard trim", duration_minutes=30, price_cents=5000),
        ],
        staff=[StaffMember(id="anna", full_name="Anna Kowalska")],
        windows=[
            ("anna", WorkingWindow(pendulum.date(2026, 10, 20), time(9, 0), time(17, 0))),
            ("anna", WorkingWindow(pendulum.date(2026, 10, 21), time(9, 0), time(12, 0))),
            ("anna", WorkingWindow(pendulum.date(2026, 10, 22), time(9, 0), time(17, 0), is_working=False)),
            ("anna", WorkingWindow(pendulum.date(2026, 10, 23), time(9, 0), time(9, 30))),
        ],
        appointments=[
            appointment("a1", "2026-10-20 10:00", "2026-10-20 10:45"),
            appointment("a2", "2026-10-20 13:00", "2026-10-20 14:00", status=AppointmentStatus.CANCELLED),
        ],
    )


@pytest.fixture
def planner() -> SlotPlanner:
    return SlotPlanner(timezone=TZ, step_minutes=15)


@pytest.fixture
def availability(store, planner) -> AvailabilityService:
    return AvailabilityService(store=store, planner=planner)


@pytest.fixture
def throttle() -> AttemptThrottle:
    return AttemptThrottle()
