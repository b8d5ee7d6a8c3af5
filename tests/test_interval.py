from datetime import date, datetime, time

import pytest

from booking_api.services.scheduling.interval import Interval, overlaps


def span(start: str, end: str, day=date(2026, 1, 5)) -> Interval:
    return Interval.from_date_time(day, time.fromisoformat(start), end_time=time.fromisoformat(end))


def test_overlap_is_symmetric():
    a = span("19:00", "20:30")
    b = span("20:00", "21:00")
    assert overlaps(a, b)
    assert overlaps(b, a)


def test_interval_overlaps_itself():
    a = span("10:00", "11:00")
    assert a.overlaps(a)


def test_touching_endpoints_do_not_overlap():
    assert not overlaps(span("10:00", "11:00"), span("11:00", "12:00"))
    assert not overlaps(span("11:00", "12:00"), span("10:00", "11:00"))


def test_containment_overlaps():
    assert overlaps(span("09:00", "17:00"), span("13:00", "14:00"))


def test_end_before_start_rolls_to_next_day():
    late = span("23:30", "00:30")
    assert late.end == datetime(2026, 1, 6, 0, 30)
    assert late.duration_minutes == 60


def test_midnight_crossing_blocks_next_morning():
    late = span("23:30", "00:30")
    early = Interval.from_date_time(date(2026, 1, 6), time(0, 0), duration_minutes=60)
    assert overlaps(late, early)


def test_duration_builds_end():
    interval = Interval.from_date_time(date(2026, 1, 5), time(19, 0), duration_minutes=90)
    assert interval.end == datetime(2026, 1, 5, 20, 30)


def test_requires_duration_or_end():
    with pytest.raises(ValueError):
        Interval.from_date_time(date(2026, 1, 5), time(19, 0))


def test_contains_instant_is_half_open():
    interval = span("10:00", "11:00")
    assert interval.contains_instant(datetime(2026, 1, 5, 10, 0))
    assert not interval.contains_instant(datetime(2026, 1, 5, 11, 0))
