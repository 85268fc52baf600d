"""
Admin operations on the price list and staff working windows.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, time
from typing import Dict, List

from ..domain.exceptions import NotFoundError
from ..domain.models import Service, WorkingWindow
from ..domain.throttle import THROTTLE_LIMITS, AttemptThrottle, ThrottleConfig, attempt_throttle
from .availability import DataStoreProtocol
from .guard import run_guarded_async

logger = logging.getLogger(__name__)

SERVICE_CREATION_THROTTLE_KEY = "service_creation"


class CatalogueService:
    """
    Manages services and working windows on behalf of an admin.

    Service creation goes through the ``service_creation`` throttle, which
    refuses extra attempts within its window but never blocks.
    """

    def __init__(
        self,
        store: DataStoreProtocol,
        throttle: AttemptThrottle = attempt_throttle,
        limits: Dict[str, ThrottleConfig] | None = None,
    ) -> None:
        self._store = store
        self._throttle = throttle
        self._limits = limits or THROTTLE_LIMITS

    async def create_service(
        self,
        name: str,
        duration_minutes: int,
        price_cents: int = 0,
    ) -> Service:
        """
        Add a service to the price list.

        Raises:
            ThrottledError: If too many services were created recently
            ValueError: If name, duration or price is invalid
        """
        return await run_guarded_async(
            SERVICE_CREATION_THROTTLE_KEY,
            self._limits[SERVICE_CREATION_THROTTLE_KEY],
            lambda: self._insert_service(name, duration_minutes, price_cents),
            throttle=self._throttle,
            reset_on_success=False,
        )

    async def _insert_service(self, name: str, duration_minutes: int, price_cents: int) -> Service:
        name = name.strip()
        if not name:
            raise ValueError("Service name must not be empty")
        if duration_minutes <= 0:
            raise ValueError("Service duration must be positive")
        if price_cents < 0:
            raise ValueError("Service price must not be negative")

        service = await self._store.insert_service(Service(
            id=uuid.uuid4().hex,
            name=name,
            duration_minutes=duration_minutes,
            price_cents=price_cents,
        ))
        logger.info("Created service %s (%d min)", service.name, service.duration_minutes)
        return service

    async def delete_service(self, service_id: str) -> None:
        await self._store.delete_service(service_id)
        logger.info("Deleted service %s", service_id)

    async def set_working_window(
        self,
        staff_id: str,
        day: date,
        start_time: time,
        end_time: time,
        is_working: bool = True,
    ) -> WorkingWindow:
        """
        Create or replace a staff member's working window for ``day``.

        Raises:
            NotFoundError: If the staff member does not exist
            ValueError: If a working window does not start before it ends
        """
        await self._require_staff(staff_id)
        if is_working and start_time >= end_time:
            raise ValueError(f"Working window must start before it ends ({start_time}-{end_time})")

        window = WorkingWindow(
            date=day,
            start_time=start_time,
            end_time=end_time,
            is_working=is_working,
        )
        stored = await self._store.upsert_working_window(staff_id, window)
        logger.info("Set working window of %s on %s", staff_id, day.isoformat())
        return stored

    async def list_working_windows(self, staff_id: str) -> List[WorkingWindow]:
        await self._require_staff(staff_id)
        return await self._store.get_working_windows(staff_id)

    async def _require_staff(self, staff_id: str) -> None:
        if await self._store.get_staff_member(staff_id) is None:
            raise NotFoundError(f"Unknown staff member: '{staff_id}'")
