# ============================================================================
# booking_api/services/scheduling/slot_generator.py
# ============================================================================
"""Candidate start times inside a day's opening window"""
from datetime import date, datetime, time, timedelta
from typing import List

from booking_api.schemas.opening_hours import DayHours


def generate_slots(day: date, hours: DayHours, granularity_minutes: int) -> List[time]:
    """
    Start times from hours.open (inclusive) to hours.close (exclusive) every
    granularity_minutes, ascending. A closed day yields no slots.
    """
    if granularity_minutes <= 0:
        raise ValueError("granularity_minutes must be positive")

    if hours.closed:
        return []

    step = timedelta(minutes=granularity_minutes)
    current = datetime.combine(day, hours.open_time)
    close = datetime.combine(day, hours.close_time)

    slots = []
    while current < close:
        slots.append(current.time())
        current += step

    return slots
