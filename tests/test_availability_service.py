"""
Tests for the AvailabilityService orchestration layer.
"""

import asyncio
from datetime import date

import pendulum
import pytest

from slotkeeper.domain.exceptions import NotFoundError

TZ = "Europe/Warsaw"
NOW = pendulum.parse("2026-10-20 07:00", tz=TZ)


def test_booked_intervals_drop_cancelled_appointments(availability):
    """Only active appointments occupy time."""
    intervals = asyncio.run(availability.booked_intervals("anna", date(2026, 10, 20)))

    assert len(intervals) == 1
    assert intervals[0].start == pendulum.parse("2026-10-20 10:00", tz=TZ)


def test_find_slots_uses_store_data_and_planner(availability):
    """End-to-end call should skip the booked 10:00-10:45 appointment."""
    slots = asyncio.run(
        availability.find_slots(
            staff_id="anna",
            service_id="haircut",
            day=date(2026, 10, 20),
            now=NOW,
        )
    )

    assert slots[0] == "09:00"
    assert slots[-1] == "16:15"
    for blocked in ("09:30", "09:45", "10:00", "10:15", "10:30"):
        assert blocked not in slots
    assert "10:45" in slots
    # Cancelled 13:00-14:00 appointment does not block
    assert "13:00" in slots


def test_find_slots_day_off_is_empty(availability):
    slots = asyncio.run(
        availability.find_slots(
            staff_id="anna",
            service_id="beard",
            day=date(2026, 10, 22),
            now=NOW,
        )
    )

    assert slots == []


def test_find_slots_without_schedule_is_empty(availability):
    slots = asyncio.run(
        availability.find_slots(
            staff_id="anna",
            service_id="beard",
            day=date(2026, 11, 2),
            now=NOW,
        )
    )

    assert slots == []


def test_find_slots_unknown_service_raises(availability):
    with pytest.raises(NotFoundError, match="Unknown service"):
        asyncio.run(
            availability.find_slots(
                staff_id="anna",
                service_id="massage",
                day=date(2026, 10, 20),
                now=NOW,
            )
        )


def test_find_slots_unknown_staff_raises(availability):
    with pytest.raises(NotFoundError, match="Unknown staff member"):
        asyncio.run(
            availability.find_slots(
                staff_id="nobody",
                service_id="haircut",
                day=date(2026, 10, 20),
                now=NOW,
            )
        )


def test_upcoming_slots_caps_per_day_and_skips_empty_days(availability):
    """Day off (22nd) and too-short window (23rd) are left out."""
    preview = asyncio.run(
        availability.upcoming_slots(
            staff_id="anna",
            service_id="haircut",
            now=NOW,
            days=5,
            per_day=3,
        )
    )

    assert [entry.day for entry in preview] == [date(2026, 10, 20), date(2026, 10, 21)]
    assert preview[0].slots == ["09:00", "09:15", "10:45"]
    assert preview[1].slots == ["09:00", "09:15", "09:30"]


def test_upcoming_slots_respects_now(availability):
    late = pendulum.parse("2026-10-20 16:20", tz=TZ)

    preview = asyncio.run(
        availability.upcoming_slots(
            staff_id="anna",
            service_id="haircut",
            now=late,
            days=2,
        )
    )

    assert [entry.day for entry in preview] == [date(2026, 10, 21)]
