# booking_api/models/__init__.py
from .base import Base
from .business import Business, BusinessSettings, BusinessStatus
from .api_key import APIKey
from .staff import StaffMember, StaffShift, ShiftException
from .reservation import Reservation, ReservationStatus, TENANT_RESOURCE

__all__ = [
    "Base",
    "Business",
    "BusinessSettings",
    "BusinessStatus",
    "APIKey",
    "StaffMember",
    "StaffShift",
    "ShiftException",
    "Reservation",
    "ReservationStatus",
    "TENANT_RESOURCE",
]
