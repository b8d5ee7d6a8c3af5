from datetime import date, time

import pytest

from booking_api.core.exceptions import ValidationError
from booking_api.utils.date_parsing import (
    parse_date, parse_time, format_time, format_german_date
)


@pytest.mark.parametrize("raw", ["2026-01-05", "05.01.2026", "5.1.2026", " 2026-01-05 "])
def test_parse_date_formats(raw):
    assert parse_date(raw) == date(2026, 1, 5)


@pytest.mark.parametrize("raw", ["2026-02-30", "32.01.2026", "tomorrow", "2026/01/05"])
def test_parse_date_rejects(raw):
    with pytest.raises(ValidationError):
        parse_date(raw)


def test_parse_date_missing():
    with pytest.raises(ValidationError) as exc:
        parse_date(None, "reservation_date")
    assert "reservation_date" in exc.value.message
    assert exc.value.status_code == 400


def test_parse_time_drops_seconds():
    assert parse_time("19:00:45") == time(19, 0)
    assert parse_time("7:30") == time(7, 30)


@pytest.mark.parametrize("raw", ["24:00", "19:60", "19", "", "abc"])
def test_parse_time_rejects(raw):
    with pytest.raises(ValidationError):
        parse_time(raw)


def test_formatting():
    assert format_time(time(9, 5)) == "09:05"
    assert format_german_date(date(2026, 1, 5)) == "Montag, 5.1.2026"
