"""
Core business logic for calculating bookable appointment start times.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O, no live clock).
"""

import logging
from datetime import date, datetime
from typing import Iterable, Iterator, List, Set, Tuple

import pendulum
from pendulum import DateTime

from .models import TimeRange, WorkingWindow

logger = logging.getLogger(__name__)

DEFAULT_STEP_MINUTES = 30
SLOT_FORMAT = "HH:mm"


class SlotPlanner:
    """
    Calculates the slots a client may book on one day.

    Algorithm:
    1. Anchor the working window's opening and closing time onto the day
    2. Walk a cursor from opening time in fixed steps
    3. Keep each start whose slot still ends by closing time, does not
       overlap a booked interval and is not in the past
    4. Return the starts in walk order (already chronological)

    Degenerate input (no window, day off, inverted window, service longer
    than the shift) yields an empty result instead of an error.
    """

    def __init__(self, timezone: str = "Europe/Warsaw", step_minutes: int = DEFAULT_STEP_MINUTES):
        self.timezone = timezone
        self.step_minutes = step_minutes

    def compute_slots(
        self,
        day: date,
        window: WorkingWindow | None,
        booked_intervals: Iterable[TimeRange],
        service_duration_minutes: int,
        now: datetime,
        step_minutes: int | None = None,
    ) -> List[str]:
        """
        Compute the bookable start times for a day.

        On the day clocks fall back, the repeated hour would produce the
        same "HH:mm" twice; only its first occurrence is listed.

        Args:
            day: Calendar date being queried
            window: Working window of the staff member for that date
            booked_intervals: Intervals already taken (any date)
            service_duration_minutes: Length the slot must accommodate
            now: Current moment; earlier starts are dropped
            step_minutes: Spacing between candidates, defaults to the planner's step

        Returns:
            Ordered list of distinct "HH:mm" start times
        """
        labels: List[str] = []
        seen: Set[str] = set()

        for start in self.iter_slot_starts(
            day,
            window,
            booked_intervals,
            service_duration_minutes,
            now,
            step_minutes=step_minutes,
        ):
            label = start.format(SLOT_FORMAT)
            if label in seen:
                continue
            seen.add(label)
            labels.append(label)

        return labels

    def iter_slot_starts(
        self,
        day: date,
        window: WorkingWindow | None,
        booked_intervals: Iterable[TimeRange],
        service_duration_minutes: int,
        now: datetime,
        step_minutes: int | None = None,
    ) -> Iterator[DateTime]:
        """
        Yield accepted slot starts as timezone-aware datetimes.

        Naive ``now`` and naive interval endpoints are read as local time
        in the planner's timezone.
        """
        step = self.step_minutes if step_minutes is None else step_minutes

        if window is None or not window.is_working:
            return
        if service_duration_minutes <= 0 or step <= 0:
            logger.debug(
                "Ignoring non-positive duration/step (%s/%s)",
                service_duration_minutes,
                step,
            )
            return

        shift = window.anchor(day, self.timezone)
        if shift is None:
            return

        current = self._aware(now)
        booked = [(self._aware(b.start), self._aware(b.end)) for b in booked_intervals]
        cursor = shift.start

        # Inclusive boundary: a slot ending exactly at closing time is valid
        while cursor.add(minutes=service_duration_minutes) <= shift.end:
            slot_end = cursor.add(minutes=service_duration_minutes)

            if cursor >= current and not self._collides(cursor, slot_end, booked):
                yield cursor

            cursor = cursor.add(minutes=step)

    def _aware(self, value: datetime) -> DateTime:
        if value.tzinfo is None:
            return pendulum.instance(value, tz=self.timezone)
        return pendulum.instance(value)

    @staticmethod
    def _collides(
        start: DateTime,
        end: DateTime,
        booked: List[Tuple[DateTime, DateTime]],
    ) -> bool:
        """Half-open overlap test; touching endpoints do not collide."""
        return any(start < other_end and other_start < end for other_start, other_end in booked)
