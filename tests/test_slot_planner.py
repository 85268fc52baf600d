"""
Tests for slot planner.
"""

import pendulum
from datetime import date, datetime, time

from slotkeeper.domain.models import TimeRange, WorkingWindow
from slotkeeper.domain.slot_planner import SlotPlanner

TZ = "Europe/Warsaw"
DAY = date(2026, 10, 20)
EARLY = pendulum.parse("2026-10-20 07:00", tz=TZ)


def _window(start=time(9, 0), end=time(17, 0), is_working=True) -> WorkingWindow:
    return WorkingWindow(date=DAY, start_time=start, end_time=end, is_working=is_working)


def _booked(start: str, end: str) -> TimeRange:
    return TimeRange(
        start=pendulum.parse(f"2026-10-20 {start}", tz=TZ),
        end=pendulum.parse(f"2026-10-20 {end}", tz=TZ),
    )


class TestSlotPlanner:
    """Tests for SlotPlanner."""

    def setup_method(self):
        self.planner = SlotPlanner(timezone=TZ)

    def test_full_day_no_bookings(self):
        """On the half-hour grid a 45 minute service last starts at 16:00."""
        slots = self.planner.compute_slots(DAY, _window(), [], 45, EARLY)

        assert slots[0] == "09:00"
        assert slots[-1] == "16:00"
        assert "16:30" not in slots
        assert slots == [
            "09:00", "09:30", "10:00", "10:30", "11:00", "11:30", "12:00", "12:30",
            "13:00", "13:30", "14:00", "14:30", "15:00", "15:30", "16:00",
        ]

    def test_slot_ending_at_closing_time_is_valid(self):
        """The boundary is inclusive."""
        slots = self.planner.compute_slots(DAY, _window(), [], 30, EARLY)

        assert slots[-1] == "16:30"
        assert len(slots) == 16

    def test_fifteen_minute_step_reaches_last_fitting_slot(self):
        """With a 15 minute step the walk lands on 16:15 exactly."""
        slots = self.planner.compute_slots(DAY, _window(), [], 45, EARLY, step_minutes=15)

        assert slots[-1] == "16:15"
        assert "16:30" not in slots

    def test_booking_blocks_overlapping_slots(self):
        """Slots touching a 10:00-10:45 booking are excluded, adjacent ones kept."""
        booked = [_booked("10:00", "10:45")]

        slots = self.planner.compute_slots(DAY, _window(), booked, 45, EARLY, step_minutes=15)

        assert "09:15" in slots  # 09:15-10:00 only touches the booking
        assert "09:45" not in slots
        assert "10:00" not in slots
        assert "10:15" not in slots
        assert "10:30" not in slots
        assert "10:45" in slots

    def test_past_slots_are_excluded(self):
        """Nothing before 'now' is offered, no grace period."""
        now = pendulum.parse("2026-10-20 12:10", tz=TZ)

        slots = self.planner.compute_slots(DAY, _window(), [], 30, now)

        assert slots[0] == "12:30"

    def test_slot_starting_exactly_now_is_offered(self):
        now = pendulum.parse("2026-10-20 12:00", tz=TZ)

        slots = self.planner.compute_slots(DAY, _window(), [], 30, now)

        assert slots[0] == "12:00"

    def test_day_off_returns_empty(self):
        slots = self.planner.compute_slots(DAY, _window(is_working=False), [], 30, EARLY)

        assert slots == []

    def test_missing_window_returns_empty(self):
        assert self.planner.compute_slots(DAY, None, [], 30, EARLY) == []

    def test_inverted_window_returns_empty(self):
        """A window closing before it opens degrades to no slots."""
        window = _window(start=time(17, 0), end=time(9, 0))

        assert self.planner.compute_slots(DAY, window, [], 30, EARLY) == []

    def test_service_longer_than_shift_returns_empty(self):
        window = _window(start=time(9, 0), end=time(10, 0))

        assert self.planner.compute_slots(DAY, window, [], 75, EARLY) == []

    def test_non_positive_step_or_duration_returns_empty(self):
        assert self.planner.compute_slots(DAY, _window(), [], 30, EARLY, step_minutes=0) == []
        assert self.planner.compute_slots(DAY, _window(), [], 0, EARLY) == []

    def test_bookings_on_other_days_are_ignored(self):
        other_day = TimeRange(
            start=pendulum.parse("2026-10-21 09:00", tz=TZ),
            end=pendulum.parse("2026-10-21 17:00", tz=TZ),
        )

        slots = self.planner.compute_slots(DAY, _window(), [other_day], 30, EARLY)

        assert len(slots) == 16

    def test_slot_count_formula_without_bookings(self):
        """floor((shift - duration) / step) + 1 slots when nothing is booked."""
        shift_minutes = 8 * 60
        for duration in (15, 30, 45, 60, 90, 480):
            for step in (10, 15, 30, 60):
                slots = self.planner.compute_slots(
                    DAY, _window(), [], duration, EARLY, step_minutes=step
                )
                assert len(slots) == (shift_minutes - duration) // step + 1

    def test_no_slot_overlaps_bookings(self):
        booked = [_booked("09:20", "09:50"), _booked("12:00", "13:30"), _booked("16:40", "17:00")]

        starts = list(
            self.planner.iter_slot_starts(DAY, _window(), booked, 40, EARLY, step_minutes=10)
        )

        assert starts
        for start in starts:
            slot = TimeRange(start=start, end=start.add(minutes=40))
            assert not any(slot.overlaps(b) for b in booked)

    def test_identical_inputs_give_identical_output(self):
        booked = [_booked("11:00", "11:30")]
        now = pendulum.parse("2026-10-20 10:05", tz=TZ)

        first = self.planner.compute_slots(DAY, _window(), booked, 30, now)
        second = self.planner.compute_slots(DAY, _window(), booked, 30, now)

        assert first == second

    def test_iter_slot_starts_are_timezone_aware(self):
        starts = list(self.planner.iter_slot_starts(DAY, _window(), [], 30, EARLY))

        assert starts[0] == pendulum.parse("2026-10-20 09:00", tz=TZ)
        assert starts[0].timezone_name == TZ

    def test_naive_now_is_read_as_local_time(self):
        """A plain datetime without tzinfo means wall-clock time in the planner's zone."""
        slots = self.planner.compute_slots(DAY, _window(), [], 30, datetime(2026, 10, 20, 12, 0))

        assert slots[0] == "12:00"
        assert "11:30" not in slots
        assert len(slots) == 10

    def test_naive_booked_interval_blocks_local_slot(self):
        booked = [TimeRange(start=datetime(2026, 10, 20, 10, 0), end=datetime(2026, 10, 20, 10, 45))]

        slots = self.planner.compute_slots(DAY, _window(), booked, 30, datetime(2026, 10, 20, 7, 0))

        assert "09:30" in slots
        assert "10:00" not in slots
        assert "10:30" not in slots
        assert "11:00" in slots

    def test_fall_back_day_lists_each_label_once(self):
        """On 2026-10-25 Warsaw repeats 02:00-03:00; repeated labels are dropped."""
        fall_back = date(2026, 10, 25)
        window = WorkingWindow(date=fall_back, start_time=time(0, 0), end_time=time(6, 0))
        now = pendulum.parse("2026-10-24 12:00", tz=TZ)

        slots = self.planner.compute_slots(fall_back, window, [], 30, now)
        starts = list(self.planner.iter_slot_starts(fall_back, window, [], 30, now))

        assert slots == sorted(set(slots))
        assert len(slots) == 12
        assert slots[0] == "00:00"
        assert slots[-1] == "05:30"
        assert len(starts) == 14
