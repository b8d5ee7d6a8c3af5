"""
Pydantic schemas for dashboard reservation management and business settings
"""
from datetime import date, time
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from booking_api.schemas.opening_hours import OpeningHours


class ReservationCreate(BaseModel):
    reservation_date: date
    reservation_time: time
    duration_minutes: Optional[int] = Field(None, ge=1, le=24 * 60)
    staff_member_id: Optional[UUID] = None
    customer_name: Optional[str] = Field(None, max_length=200)
    customer_phone: Optional[str] = Field(None, max_length=50)
    customer_email: Optional[str] = Field(None, max_length=255)
    party_size: Optional[int] = Field(None, ge=1)
    title: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    status: str = Field("confirmed", pattern="^(pending|confirmed)$")


class ReservationStatusUpdate(BaseModel):
    status: str = Field(..., pattern="^(pending|confirmed|completed|cancelled)$")


class BusinessSettingsUpdate(BaseModel):
    opening_hours: Optional[OpeningHours] = None
    default_duration_minutes: Optional[int] = Field(None, ge=1, le=24 * 60)
    slot_granularity_minutes: Optional[int] = Field(None, ge=5, le=24 * 60)
    max_alternatives: Optional[int] = Field(None, ge=0, le=50)
