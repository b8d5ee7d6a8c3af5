# ============================================================================
# booking_api/services/scheduling/staff_availability.py
# Recurring weekly shifts overlaid with dated blocking exceptions
# ============================================================================
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List, Optional, Sequence

from booking_api.services.scheduling.interval import Interval


def weekday_index(day: date) -> int:
    """Shift weekday numbering: 0=Sunday ... 6=Saturday."""
    return (day.weekday() + 1) % 7


@dataclass
class StaffDaySchedule:
    """
    What one staff member's working day looks like on a specific date.

    working_window is None when there is no shift for the weekday or the shift
    is marked as not working. Exceptions only ever remove availability.
    """
    day: date
    working_window: Optional[Interval] = None
    blocks: List[Interval] = field(default_factory=list)

    def is_available_at(self, time_of_day: time) -> bool:
        if self.working_window is None:
            return False

        instant = datetime.combine(self.day, time_of_day)
        if not self.working_window.contains_instant(instant):
            return False

        return not any(block.contains_instant(instant) for block in self.blocks)

    def covers(self, interval: Interval) -> bool:
        """True if the whole interval is inside the shift and clear of every block."""
        if self.working_window is None or not self.working_window.contains(interval):
            return False
        return not any(block.overlaps(interval) for block in self.blocks)


def build_staff_day(day: date, shift, exceptions: Sequence) -> StaffDaySchedule:
    """
    Args:
        shift: StaffShift-like row for day's weekday, or None
        exceptions: ShiftException-like rows dated ``day``
    """
    window = None
    if shift is not None and shift.is_working:
        window = Interval.from_date_time(day, shift.start_time, end_time=shift.end_time)

    blocks = [
        Interval.from_date_time(day, exc.start_time, end_time=exc.end_time)
        for exc in exceptions
        if exc.exception_date == day
    ]

    return StaffDaySchedule(day=day, working_window=window, blocks=blocks)
