"""
Request bodies for the integration endpoints
"""
from pydantic import BaseModel, Field
from typing import Optional


class AvailabilityRequest(BaseModel):
    """POST /check-availability"""
    date: Optional[str] = Field(None, description="YYYY-MM-DD or DD.MM.YYYY")
    time: Optional[str] = Field(None, description="HH:MM")
    duration: Optional[int] = Field(None, ge=1, le=24 * 60, description="Duration in minutes")
    staff_member_name: Optional[str] = None


class VoiceAgentRequest(BaseModel):
    """POST /voice-agent-calendar"""
    action: Optional[str] = None
    user_id: Optional[str] = None
    api_key: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, ge=1, le=24 * 60)
    staff_member_name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    title: Optional[str] = None


class ReservationIntakeRequest(BaseModel):
    """POST /reservations (workflow automation intake)"""
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    reservation_date: Optional[str] = None
    reservation_time: Optional[str] = None
    end_time: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, ge=1, le=24 * 60)
    party_size: Optional[int] = Field(None, ge=1)
    staff_member_name: Optional[str] = None
    notes: Optional[str] = None
    source: Optional[str] = None
