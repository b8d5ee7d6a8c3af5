"""
Pydantic schemas for staff members, shifts and shift exceptions
"""
from datetime import date, time, datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict, model_validator


class StaffMemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field("#3b82f6", max_length=20)
    sort_order: int = 0


class StaffMemberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, max_length=20)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class StaffMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    color: Optional[str]
    sort_order: int
    is_active: bool


class ShiftInput(BaseModel):
    staff_member_id: UUID
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday, 6=Saturday")
    start_time: time
    end_time: time
    is_working: bool = True

    @model_validator(mode="after")
    def check_window(self):
        if self.is_working and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class BulkShiftInput(BaseModel):
    shifts: List[ShiftInput] = Field(..., min_length=1)


class ShiftResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    staff_member_id: UUID
    day_of_week: int
    start_time: time
    end_time: time
    is_working: bool


class ShiftExceptionInput(BaseModel):
    staff_member_id: UUID
    exception_date: date
    start_time: time
    end_time: time
    reason: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def check_window(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class ShiftExceptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    staff_member_id: UUID
    exception_date: date
    start_time: time
    end_time: time
    reason: Optional[str]
    created_at: Optional[datetime] = None


class StaffAvailabilityResponse(BaseModel):
    staff_member_id: UUID
    date: date
    time: str
    available: bool
