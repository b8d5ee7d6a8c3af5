from datetime import date, time
from types import SimpleNamespace

from booking_api.services.scheduling.interval import Interval
from booking_api.services.scheduling.staff_availability import build_staff_day, weekday_index

MONDAY = date(2026, 1, 5)


def shift(start="09:00", end="17:00", is_working=True):
    return SimpleNamespace(
        day_of_week=1,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        is_working=is_working,
    )


def exception(start, end, on=MONDAY):
    return SimpleNamespace(
        exception_date=on,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
    )


def test_weekday_index_starts_on_sunday():
    assert weekday_index(date(2026, 1, 4)) == 0  # Sunday
    assert weekday_index(MONDAY) == 1
    assert weekday_index(date(2026, 1, 10)) == 6  # Saturday


def test_exception_blocks_inside_shift():
    day = build_staff_day(MONDAY, shift(), [exception("13:00", "14:00")])
    assert day.is_available_at(time(10, 0))
    assert not day.is_available_at(time(13, 30))
    assert day.is_available_at(time(16, 0))


def test_shift_bounds_are_half_open():
    day = build_staff_day(MONDAY, shift(), [])
    assert day.is_available_at(time(9, 0))
    assert not day.is_available_at(time(17, 0))
    assert not day.is_available_at(time(8, 59))


def test_exception_end_is_available_again():
    day = build_staff_day(MONDAY, shift(), [exception("13:00", "14:00")])
    assert day.is_available_at(time(14, 0))


def test_no_shift_means_unavailable():
    day = build_staff_day(MONDAY, None, [])
    assert not day.is_available_at(time(10, 0))


def test_not_working_shift_means_unavailable():
    day = build_staff_day(MONDAY, shift(is_working=False), [])
    assert not day.is_available_at(time(10, 0))


def test_exception_on_other_date_is_ignored():
    day = build_staff_day(MONDAY, shift(), [exception("13:00", "14:00", on=date(2026, 1, 12))])
    assert day.is_available_at(time(13, 30))


def test_covers_requires_full_containment():
    day = build_staff_day(MONDAY, shift(), [exception("13:00", "14:00")])

    def at(start, minutes):
        return Interval.from_date_time(MONDAY, time.fromisoformat(start), duration_minutes=minutes)

    assert day.covers(at("09:00", 60))
    assert day.covers(at("14:00", 180))
    assert not day.covers(at("16:30", 60))  # runs past shift end
    assert not day.covers(at("12:30", 60))  # runs into the exception
