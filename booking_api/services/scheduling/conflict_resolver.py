# ============================================================================
# booking_api/services/scheduling/conflict_resolver.py
# Pure availability logic - no database access, fully testable
# ============================================================================
from dataclasses import dataclass, field
from datetime import date, time
from typing import List, Optional, Sequence

from booking_api.services.business.booking_policy import BookingPolicy
from booking_api.services.scheduling.interval import Interval
from booking_api.services.scheduling.slot_generator import generate_slots
from booking_api.services.scheduling.staff_availability import StaffDaySchedule
from booking_api.utils.date_parsing import format_time


@dataclass
class AvailabilityResult:
    available: bool
    requested: Interval
    alternatives: List[str] = field(default_factory=list)


class ConflictResolver:
    """Decides availability of a requested interval against busy intervals for one day."""

    def __init__(self, policy: BookingPolicy):
        self.policy = policy

    def is_free(
            self,
            candidate: Interval,
            busy: Sequence[Interval],
            staff_day: Optional[StaffDaySchedule] = None
    ) -> bool:
        if any(candidate.overlaps(interval) for interval in busy):
            return False
        if staff_day is not None and not staff_day.covers(candidate):
            return False
        return True

    def free_slots(
            self,
            day: date,
            busy: Sequence[Interval],
            duration_minutes: Optional[int] = None,
            staff_day: Optional[StaffDaySchedule] = None,
            limit: Optional[int] = None
    ) -> List[str]:
        """Free slot start times (HH:MM) in ascending order, at most ``limit``."""
        duration = duration_minutes or self.policy.default_duration_minutes
        hours = self.policy.opening_hours.for_date(day)

        slots = []
        for start in generate_slots(day, hours, self.policy.slot_granularity_minutes):
            if limit is not None and len(slots) >= limit:
                break
            candidate = Interval.from_date_time(day, start, duration_minutes=duration)
            if self.is_free(candidate, busy, staff_day):
                slots.append(format_time(start))

        return slots

    def check(
            self,
            day: date,
            requested_start: time,
            busy: Sequence[Interval],
            duration_minutes: Optional[int] = None,
            staff_day: Optional[StaffDaySchedule] = None
    ) -> AvailabilityResult:
        duration = duration_minutes or self.policy.default_duration_minutes
        requested = Interval.from_date_time(day, requested_start, duration_minutes=duration)

        if self.is_free(requested, busy, staff_day):
            return AvailabilityResult(available=True, requested=requested)

        alternatives = self.free_slots(
            day,
            busy,
            duration_minutes=duration,
            staff_day=staff_day,
            limit=self.policy.max_alternatives,
        )
        return AvailabilityResult(available=False, requested=requested, alternatives=alternatives)
