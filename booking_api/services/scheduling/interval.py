# ============================================================================
# booking_api/services/scheduling/interval.py
# Half-open [start, end) spans on absolute datetimes
# ============================================================================
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional


@dataclass(frozen=True)
class Interval:
    """A [start, end) span. Touching endpoints do not overlap."""
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Interval start {self.start} must be before end {self.end}")

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and self.end > other.start

    def contains(self, other: "Interval") -> bool:
        return self.start <= other.start and other.end <= self.end

    def contains_instant(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    @classmethod
    def from_date_time(
            cls,
            day: date,
            start_time: time,
            duration_minutes: Optional[int] = None,
            end_time: Optional[time] = None
    ) -> "Interval":
        """
        Build an interval from a calendar day and time-of-day values.

        An explicit end_time wins over duration_minutes; an end_time at or
        before start_time is read as falling on the following day.
        """
        start = datetime.combine(day, start_time)

        if end_time is not None:
            end = datetime.combine(day, end_time)
            if end <= start:
                end += timedelta(days=1)
        elif duration_minutes is not None:
            end = start + timedelta(minutes=duration_minutes)
        else:
            raise ValueError("Either duration_minutes or end_time is required")

        return cls(start, end)


def overlaps(a: Interval, b: Interval) -> bool:
    return a.overlaps(b)


def reservation_interval(reservation) -> Interval:
    """Interval occupied by a stored reservation, using its own recorded duration."""
    return Interval.from_date_time(
        reservation.reservation_date,
        reservation.reservation_time,
        duration_minutes=reservation.duration_minutes,
        end_time=reservation.end_time,
    )
