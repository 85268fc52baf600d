"""
Booking submission and cancellation.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Dict

from pendulum import DateTime

from ..domain.exceptions import SlotUnavailableError
from ..domain.models import Appointment, AppointmentStatus
from ..domain.slot_planner import SLOT_FORMAT
from ..domain.throttle import THROTTLE_LIMITS, AttemptThrottle, ThrottleConfig, attempt_throttle
from ..utils.phone import normalize_phone
from .availability import AvailabilityService, DataStoreProtocol
from .guard import run_guarded_async

logger = logging.getLogger(__name__)

BOOKING_THROTTLE_KEY = "booking"


@dataclass
class BookingRequest:
    """What a client submits from the booking form."""
    staff_id: str
    service_id: str
    day: date
    slot: str  # "HH:mm", as offered by the planner
    client_name: str
    client_phone: str
    client_email: str | None = None


class BookingService:
    """
    Turns an offered slot into a pending appointment.

    Submissions go through the ``booking`` throttle. The count is kept after
    a successful booking so a client cannot fire bookings in a loop.
    """

    def __init__(
        self,
        store: DataStoreProtocol,
        availability: AvailabilityService,
        throttle: AttemptThrottle = attempt_throttle,
        limits: Dict[str, ThrottleConfig] | None = None,
    ) -> None:
        self._store = store
        self._availability = availability
        self._throttle = throttle
        self._limits = limits or THROTTLE_LIMITS

    async def submit_booking(self, request: BookingRequest, now: DateTime) -> Appointment:
        """
        Validate and store a booking request.

        Raises:
            ThrottledError: If too many submissions were made
            SlotUnavailableError: If the slot is not offered (anymore)
            NotFoundError: If the staff member or service does not exist
        """
        return await run_guarded_async(
            BOOKING_THROTTLE_KEY,
            self._limits[BOOKING_THROTTLE_KEY],
            lambda: self._create_appointment(request, now),
            throttle=self._throttle,
            reset_on_success=False,
        )

    async def _create_appointment(self, request: BookingRequest, now: DateTime) -> Appointment:
        offered = await self._availability.find_slot_starts(
            staff_id=request.staff_id,
            service_id=request.service_id,
            day=request.day,
            now=now,
        )
        # First match wins when a label repeats on the fall-back day
        start = next((s for s in offered if s.format(SLOT_FORMAT) == request.slot), None)
        if start is None:
            raise SlotUnavailableError(
                f"Slot {request.slot} on {request.day.isoformat()} is no longer available."
            )

        service = await self._availability.get_service(request.service_id)

        appointment = Appointment(
            id=uuid.uuid4().hex,
            staff_id=request.staff_id,
            service_id=request.service_id,
            client_name=request.client_name.strip(),
            client_phone=normalize_phone(request.client_phone),
            client_email=request.client_email,
            start=start,
            end=start.add(minutes=service.duration_minutes),
            status=AppointmentStatus.PENDING,
            created_at=now,
        )

        stored = await self._store.insert_appointment(appointment)
        logger.info(
            "Booked %s for staff %s at %s",
            service.name,
            request.staff_id,
            start.to_datetime_string(),
        )
        return stored

    async def cancel_appointment(self, appointment_id: str) -> Appointment:
        """Mark an appointment as cancelled; its slot becomes bookable again."""
        appointment = await self._store.update_appointment_status(
            appointment_id,
            AppointmentStatus.CANCELLED,
        )
        logger.info("Cancelled appointment %s", appointment_id)
        return appointment
