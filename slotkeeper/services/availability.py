"""
Application services for offering bookable slots.

The service coordinates fetching working windows and appointments via a
datastore adapter and delegates the actual slot computation to the
domain-level ``SlotPlanner``. The datastore is described by a protocol so
the real backend client or the in-memory store can be plugged in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Protocol, Sequence

import pendulum
from pendulum import DateTime

from ..domain.exceptions import NotFoundError
from ..domain.models import (
    Appointment,
    AppointmentStatus,
    Service,
    StaffMember,
    TimeRange,
    WorkingWindow,
)
from ..domain.slot_planner import SlotPlanner

logger = logging.getLogger(__name__)


class DataStoreProtocol(Protocol):
    """Protocol describing the datastore behaviour needed by the services."""

    async def get_services(self) -> List[Service]:
        """Return the price list."""

    async def get_service(self, service_id: str) -> Service | None:
        """Return one service or None."""

    async def insert_service(self, service: Service) -> Service:
        """Add a service to the price list."""

    async def delete_service(self, service_id: str) -> None:
        """Remove a service from the price list."""

    async def get_staff(self) -> List[StaffMember]:
        """Return all staff profiles."""

    async def get_staff_member(self, staff_id: str) -> StaffMember | None:
        """Return one staff profile or None."""

    async def get_working_window(self, staff_id: str, day: date) -> WorkingWindow | None:
        """Return the working window of a staff member on a date."""

    async def get_working_windows(self, staff_id: str) -> List[WorkingWindow]:
        """Return all configured working windows of a staff member."""

    async def upsert_working_window(self, staff_id: str, window: WorkingWindow) -> WorkingWindow:
        """Create or replace the working window of a staff member on its date."""

    async def get_appointments(
        self,
        staff_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[Appointment]:
        """Return appointments of a staff member overlapping [start, end)."""

    async def insert_appointment(self, appointment: Appointment) -> Appointment:
        """Persist a new appointment."""

    async def update_appointment_status(
        self,
        appointment_id: str,
        status: AppointmentStatus,
    ) -> Appointment:
        """Change the status of an appointment."""


@dataclass
class DayAvailability:
    """Slots offered on one calendar day."""
    day: date
    slots: List[str]


class AvailabilityService:
    """
    Orchestrates datastore reads and slot computation.
    """

    def __init__(self, store: DataStoreProtocol, planner: SlotPlanner) -> None:
        self._store = store
        self._planner = planner

    @property
    def planner(self) -> SlotPlanner:
        return self._planner

    async def get_service(self, service_id: str) -> Service:
        service = await self._store.get_service(service_id)
        if service is None:
            raise NotFoundError(f"Unknown service: '{service_id}'")
        return service

    async def get_staff_member(self, staff_id: str) -> StaffMember:
        member = await self._store.get_staff_member(staff_id)
        if member is None:
            raise NotFoundError(f"Unknown staff member: '{staff_id}'")
        return member

    async def booked_intervals(self, staff_id: str, day: date) -> List[TimeRange]:
        """
        Fetch the intervals already taken on ``day``.

        Cancelled appointments are dropped since they no longer occupy time.
        """
        start = pendulum.datetime(day.year, day.month, day.day, tz=self._planner.timezone)
        end = start.add(days=1)

        appointments = await self._store.get_appointments(staff_id, start, end)
        intervals = [apt.as_time_range() for apt in appointments if apt.is_active]

        logger.debug(
            "Staff %s on %s: %d appointment(s), %d active",
            staff_id,
            day.isoformat(),
            len(appointments),
            len(intervals),
        )
        return intervals

    async def find_slots(
        self,
        *,
        staff_id: str,
        service_id: str,
        day: date,
        now: DateTime,
    ) -> List[str]:
        """
        Retrieve schedule data and compute the slots offered on ``day``.

        Raises:
            NotFoundError: If the staff member or service does not exist
        """
        await self.get_staff_member(staff_id)
        service = await self.get_service(service_id)

        window = await self._store.get_working_window(staff_id, day)
        booked = await self.booked_intervals(staff_id, day)

        return self._planner.compute_slots(
            day,
            window,
            booked,
            service.duration_minutes,
            now,
        )

    async def find_slot_starts(
        self,
        *,
        staff_id: str,
        service_id: str,
        day: date,
        now: DateTime,
    ) -> List[DateTime]:
        """Like :meth:`find_slots` but returns the exact start datetimes."""
        await self.get_staff_member(staff_id)
        service = await self.get_service(service_id)

        window = await self._store.get_working_window(staff_id, day)
        booked = await self.booked_intervals(staff_id, day)

        return list(self._planner.iter_slot_starts(
            day,
            window,
            booked,
            service.duration_minutes,
            now,
        ))

    async def upcoming_slots(
        self,
        *,
        staff_id: str,
        service_id: str,
        now: DateTime,
        days: int = 5,
        per_day: int = 5,
    ) -> List[DayAvailability]:
        """
        Preview the nearest free slots over the next ``days`` days.

        Only the first ``per_day`` slots of each day are kept and days
        without any slot are left out.
        """
        await self.get_staff_member(staff_id)
        service = await self.get_service(service_id)

        first_day = now.in_timezone(self._planner.timezone).date()
        preview: List[DayAvailability] = []

        for offset in range(days):
            day = first_day + timedelta(days=offset)
            window = await self._store.get_working_window(staff_id, day)
            if window is None or not window.is_working:
                continue

            booked = await self.booked_intervals(staff_id, day)
            slots = self._planner.compute_slots(
                day,
                window,
                booked,
                service.duration_minutes,
                now,
            )
            if slots:
                preview.append(DayAvailability(day=day, slots=slots[:per_day]))

        return preview

    async def list_services(self) -> Sequence[Service]:
        return await self._store.get_services()

    async def list_staff(self) -> Sequence[StaffMember]:
        return await self._store.get_staff()
