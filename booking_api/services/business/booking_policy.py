# ============================================================================
# booking_api/services/business/booking_policy.py
# ============================================================================
"""Per-tenant booking configuration passed explicitly into the scheduling core"""
from dataclasses import dataclass, field

from booking_api.schemas.opening_hours import OpeningHours


@dataclass(frozen=True)
class BookingPolicy:
    opening_hours: OpeningHours = field(default_factory=OpeningHours)
    default_duration_minutes: int = 60
    slot_granularity_minutes: int = 60
    max_alternatives: int = 5
