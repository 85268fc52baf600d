"""
In-memory datastore for development and tests.

Stands in for the external backend that owns the four record collections
(services, staff profiles, working windows, appointments). It can be
seeded from a JSON fixture file.
"""

from __future__ import annotations

import json
import logging
from datetime import date, time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

import pendulum
from pendulum import DateTime

from ..domain.exceptions import DataStoreError, NotFoundError, SlotUnavailableError
from ..domain.models import (
    Appointment,
    AppointmentStatus,
    Service,
    StaffMember,
    StaffRole,
    WorkingWindow,
)

logger = logging.getLogger(__name__)

SAMPLE_DATA_FILE = Path(__file__).parent / "sample_data.json"


class InMemoryDataStore:
    """
    Datastore keeping every collection in plain dictionaries.

    Like the real backend, it refuses an insert that would overlap an
    active appointment of the same staff member.
    """

    def __init__(
        self,
        services: Iterable[Service] = (),
        staff: Iterable[StaffMember] = (),
        windows: Iterable[Tuple[str, WorkingWindow]] = (),
        appointments: Iterable[Appointment] = (),
    ):
        self._services: Dict[str, Service] = {s.id: s for s in services}
        self._staff: Dict[str, StaffMember] = {m.id: m for m in staff}
        self._windows: Dict[Tuple[str, date], WorkingWindow] = {
            (staff_id, window.date): window for staff_id, window in windows
        }
        self._appointments: Dict[str, Appointment] = {a.id: a for a in appointments}

    @classmethod
    def from_json(cls, data_file: Path, timezone: str = "Europe/Warsaw") -> "InMemoryDataStore":
        """
        Load a store from a JSON fixture file.

        Args:
            data_file: Path to the fixture
            timezone: Zone for appointment timestamps lacking an offset

        Raises:
            FileNotFoundError: If the file doesn't exist
            DataStoreError: If the file is not valid JSON
        """
        if not data_file.exists():
            raise FileNotFoundError(f"Data file not found: {data_file}")

        try:
            with open(data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise DataStoreError(f"Invalid JSON in {data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise DataStoreError("Data file must contain an object at the root level.")

        return cls.from_dict(data, timezone=timezone)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], timezone: str = "Europe/Warsaw") -> "InMemoryDataStore":
        services: List[Service] = []
        for item in data.get("services", []):
            try:
                services.append(Service(
                    id=str(item["id"]),
                    name=item["name"],
                    duration_minutes=int(item["duration_minutes"]),
                    price_cents=int(item.get("price_cents", 0)),
                ))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid service entry %r: %s", item, exc)

        staff: List[StaffMember] = []
        for item in data.get("staff", []):
            try:
                staff.append(StaffMember(
                    id=str(item["id"]),
                    full_name=item.get("full_name") or "",
                    email=item.get("email") or "",
                    role=StaffRole(item.get("role", StaffRole.BARBER.value)),
                ))
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping invalid staff entry %r: %s", item, exc)

        windows: List[Tuple[str, WorkingWindow]] = []
        for item in data.get("schedules", []):
            try:
                windows.append((
                    str(item["staff_id"]),
                    WorkingWindow(
                        date=date.fromisoformat(item["date"]),
                        start_time=time.fromisoformat(item["start_time"]),
                        end_time=time.fromisoformat(item["end_time"]),
                        is_working=bool(item.get("is_working", True)),
                    ),
                ))
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping invalid schedule entry %r: %s", item, exc)

        appointments: List[Appointment] = []
        for item in data.get("appointments", []):
            try:
                appointment = Appointment(
                    id=str(item["id"]),
                    staff_id=str(item["staff_id"]),
                    service_id=str(item["service_id"]),
                    client_name=item.get("client_name", ""),
                    client_phone=item.get("client_phone", ""),
                    client_email=item.get("client_email"),
                    start=pendulum.parse(item["start_time"], tz=timezone),
                    end=pendulum.parse(item["end_time"], tz=timezone),
                    status=AppointmentStatus(item.get("status", AppointmentStatus.PENDING.value)),
                )
                appointment.as_time_range()
                appointments.append(appointment)
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping invalid appointment entry %r: %s", item, exc)

        return cls(services=services, staff=staff, windows=windows, appointments=appointments)

    async def get_services(self) -> List[Service]:
        return sorted(self._services.values(), key=lambda s: s.name)

    async def get_service(self, service_id: str) -> Service | None:
        return self._services.get(service_id)

    async def insert_service(self, service: Service) -> Service:
        if service.id in self._services:
            raise DataStoreError(f"Service {service.id} already exists")
        self._services[service.id] = service
        return service

    async def delete_service(self, service_id: str) -> None:
        if self._services.pop(service_id, None) is None:
            raise NotFoundError(f"Unknown service: '{service_id}'")

    async def get_staff(self) -> List[StaffMember]:
        return sorted(self._staff.values(), key=lambda m: m.display_name())

    async def get_staff_member(self, staff_id: str) -> StaffMember | None:
        return self._staff.get(staff_id)

    async def get_working_window(self, staff_id: str, day: date) -> WorkingWindow | None:
        return self._windows.get((staff_id, date(day.year, day.month, day.day)))

    async def get_working_windows(self, staff_id: str) -> List[WorkingWindow]:
        windows = [w for (sid, _), w in self._windows.items() if sid == staff_id]
        return sorted(windows, key=lambda w: w.date)

    async def upsert_working_window(self, staff_id: str, window: WorkingWindow) -> WorkingWindow:
        """Store the window, replacing any existing one for the same staff member and date."""
        self._windows[(staff_id, window.date)] = window
        return window

    async def get_appointments(
        self,
        staff_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[Appointment]:
        """Return appointments of a staff member overlapping [start, end), any status."""
        matches = [
            apt for apt in self._appointments.values()
            if apt.staff_id == staff_id and apt.start < end and start < apt.end
        ]
        return sorted(matches, key=lambda a: a.start)

    async def insert_appointment(self, appointment: Appointment) -> Appointment:
        """
        Store a new appointment.

        Raises:
            DataStoreError: If the id is already used
            SlotUnavailableError: If it overlaps an active appointment
        """
        if appointment.id in self._appointments:
            raise DataStoreError(f"Appointment {appointment.id} already exists")

        if appointment.is_active:
            new_range = appointment.as_time_range()
            for existing in self._appointments.values():
                if (
                    existing.staff_id == appointment.staff_id
                    and existing.is_active
                    and existing.as_time_range().overlaps(new_range)
                ):
                    raise SlotUnavailableError(
                        f"Slot {new_range} is already taken."
                    )

        self._appointments[appointment.id] = appointment
        return appointment

    async def update_appointment_status(
        self,
        appointment_id: str,
        status: AppointmentStatus,
    ) -> Appointment:
        appointment = self._appointments.get(appointment_id)
        if appointment is None:
            raise NotFoundError(f"Unknown appointment: '{appointment_id}'")
        appointment.status = status
        return appointment
