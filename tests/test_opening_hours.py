from datetime import date, time

import pytest
from pydantic import ValidationError

from booking_api.schemas.opening_hours import DayHours, OpeningHours


def test_defaults():
    hours = OpeningHours()
    assert hours.monday.open_time == time(9, 0)
    assert hours.monday.close_time == time(18, 0)
    assert hours.saturday.close == "14:00"
    assert hours.sunday.closed


def test_for_date_uses_weekday():
    hours = OpeningHours()
    assert hours.for_date(date(2026, 1, 10)).close == "14:00"  # Saturday
    assert hours.for_date(date(2026, 1, 11)).closed  # Sunday


def test_from_stored_merges_partial_days():
    hours = OpeningHours.from_stored({"Monday": {"close": "20:00"}, "sunday": {"closed": False}})
    assert hours.monday.open == "09:00"
    assert hours.monday.close == "20:00"
    assert not hours.sunday.closed
    assert hours.tuesday.close == "18:00"


def test_from_stored_handles_none():
    assert OpeningHours.from_stored(None) == OpeningHours()


def test_single_digit_hour_is_normalised():
    assert DayHours(open="9:00", close="17:00").open == "09:00"


@pytest.mark.parametrize("bad", ["25:00", "9", "09:60", ""])
def test_rejects_bad_times(bad):
    with pytest.raises(ValidationError):
        DayHours(open=bad, close="18:00")


def test_open_must_precede_close():
    with pytest.raises(ValidationError):
        DayHours(open="18:00", close="09:00")
