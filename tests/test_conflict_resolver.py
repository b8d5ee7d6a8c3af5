from datetime import date, time

from booking_api.schemas.opening_hours import OpeningHours
from booking_api.services.business.booking_policy import BookingPolicy
from booking_api.services.scheduling.conflict_resolver import ConflictResolver
from booking_api.services.scheduling.interval import Interval
from booking_api.services.scheduling.staff_availability import StaffDaySchedule

MONDAY = date(2026, 1, 5)

EVENING = OpeningHours.from_stored({"monday": {"open": "17:00", "close": "23:00"}})


def busy(start: str, end: str, day=MONDAY) -> Interval:
    return Interval.from_date_time(day, time.fromisoformat(start), end_time=time.fromisoformat(end))


def resolver(**overrides) -> ConflictResolver:
    fields = dict(
        opening_hours=EVENING,
        default_duration_minutes=60,
        slot_granularity_minutes=30,
        max_alternatives=5,
    )
    fields.update(overrides)
    return ConflictResolver(BookingPolicy(**fields))


class TestCheck:

    def test_free_slot_is_available(self):
        result = resolver().check(MONDAY, time(19, 0), [])
        assert result.available
        assert result.alternatives == []
        assert result.requested == busy("19:00", "20:00")

    def test_taken_slot_offers_non_overlapping_alternatives(self):
        taken = busy("19:00", "20:30")
        result = resolver().check(MONDAY, time(19, 0), [taken])

        assert not result.available
        assert result.alternatives == ["17:00", "17:30", "18:00", "20:30", "21:00"]
        for slot in result.alternatives:
            candidate = Interval.from_date_time(MONDAY, time.fromisoformat(slot), duration_minutes=60)
            assert not candidate.overlaps(taken)

    def test_alternatives_are_ascending_and_capped(self):
        result = resolver(max_alternatives=3).check(MONDAY, time(19, 0), [busy("19:00", "20:30")])
        assert result.alternatives == sorted(result.alternatives)
        assert len(result.alternatives) == 3

    def test_zero_cap_gives_no_alternatives(self):
        result = resolver(max_alternatives=0).check(MONDAY, time(19, 0), [busy("19:00", "20:30")])
        assert not result.available
        assert result.alternatives == []

    def test_booking_ending_at_request_start_does_not_conflict(self):
        result = resolver().check(MONDAY, time(19, 0), [busy("18:00", "19:00")])
        assert result.available

    def test_longer_duration_reaches_into_next_booking(self):
        result = resolver().check(MONDAY, time(18, 0), [busy("19:00", "20:00")], duration_minutes=90)
        assert not result.available

    def test_request_outside_opening_hours_is_only_checked_for_overlap(self):
        # Opening hours shape alternatives, not the requested slot itself
        result = resolver().check(MONDAY, time(8, 0), [])
        assert result.available

    def test_closed_day_has_no_alternatives(self):
        sunday = date(2026, 1, 11)
        result = resolver().check(sunday, time(12, 0), [busy("12:00", "13:00", day=sunday)])
        assert not result.available
        assert result.alternatives == []

    def test_previous_night_booking_blocks_early_slot(self):
        late = busy("23:30", "01:00", day=date(2026, 1, 4))
        result = resolver().check(MONDAY, time(0, 30), [late])
        assert not result.available


class TestFreeSlots:

    def test_all_slots_on_empty_day(self):
        slots = resolver(slot_granularity_minutes=60).free_slots(MONDAY, [])
        assert slots == ["17:00", "18:00", "19:00", "20:00", "21:00", "22:00"]

    def test_staff_day_limits_slots(self):
        staff_day = StaffDaySchedule(day=MONDAY, working_window=busy("18:00", "21:00"))
        slots = resolver(slot_granularity_minutes=60).free_slots(MONDAY, [], staff_day=staff_day)
        assert slots == ["18:00", "19:00", "20:00"]

    def test_staff_without_shift_has_no_slots(self):
        staff_day = StaffDaySchedule(day=MONDAY)
        assert resolver().free_slots(MONDAY, [], staff_day=staff_day) == []
