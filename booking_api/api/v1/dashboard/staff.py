# ============================================================================
# booking_api/api/v1/dashboard/staff.py
# Staff members, weekly shifts and shift exceptions - thin HTTP layer
# ============================================================================
from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session

from booking_api.api.dependencies import get_current_business, raise_http
from booking_api.config.database import get_db
from booking_api.core.exceptions import BookingError
from booking_api.models.business import Business
from booking_api.schemas.staff import (
    StaffMemberCreate, StaffMemberUpdate, StaffMemberResponse,
    ShiftInput, BulkShiftInput, ShiftResponse,
    ShiftExceptionInput, ShiftExceptionResponse, StaffAvailabilityResponse,
)
from booking_api.services.scheduling.availability_service import AvailabilityService
from booking_api.services.staff.shift_service import ShiftService
from booking_api.services.staff.staff_service import StaffService
from booking_api.utils.date_parsing import parse_time, format_time

router = APIRouter(tags=["dashboard-staff"])


# ============================================================================
# Staff members
# ============================================================================

@router.get("/staff", response_model=List[StaffMemberResponse])
async def list_staff(
        active_only: bool = Query(False, description="Only return active staff"),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    return StaffService.list_staff(db, business.id, active_only=active_only)


@router.post("/staff", response_model=StaffMemberResponse, status_code=201)
async def create_staff_member(
        data: StaffMemberCreate,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    return StaffService.create_staff_member(db, business.id, data)


@router.patch("/staff/{staff_member_id}", response_model=StaffMemberResponse)
async def update_staff_member(
        data: StaffMemberUpdate,
        staff_member_id: UUID = Path(...),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """Update a staff member. Send ``is_active: false`` to deactivate."""
    try:
        return StaffService.update_staff_member(db, business.id, staff_member_id, data)
    except BookingError as e:
        raise_http(e)


@router.get("/staff/{staff_member_id}/availability", response_model=StaffAvailabilityResponse)
async def get_staff_availability(
        staff_member_id: UUID = Path(...),
        on_date: date = Query(..., alias="date"),
        at_time: str = Query(..., alias="time", description="HH:MM"),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """Is the staff member scheduled to work at this moment, with no time off?"""
    try:
        StaffService.get_staff_member(db, business.id, staff_member_id)
        time_of_day = parse_time(at_time)
        available = AvailabilityService.is_staff_available(
            db, business.id, staff_member_id, on_date, time_of_day
        )
    except BookingError as e:
        raise_http(e)

    return StaffAvailabilityResponse(
        staff_member_id=staff_member_id,
        date=on_date,
        time=format_time(time_of_day),
        available=available,
    )


# ============================================================================
# Shifts
# ============================================================================

@router.get("/shifts", response_model=List[ShiftResponse])
async def list_shifts(
        staff_member_id: Optional[UUID] = Query(None),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    return ShiftService.list_shifts(db, business.id, staff_member_id)


@router.put("/shifts", response_model=ShiftResponse)
async def upsert_shift(
        data: ShiftInput,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """Create or replace the rule for (staff_member_id, day_of_week)."""
    try:
        return ShiftService.upsert_shift(db, business.id, data)
    except BookingError as e:
        raise_http(e)


@router.put("/shifts/bulk", response_model=List[ShiftResponse])
async def upsert_bulk_shifts(
        data: BulkShiftInput,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """Replace many weekly rules at once; all are saved or none."""
    try:
        return ShiftService.upsert_shifts(db, business.id, data.shifts)
    except BookingError as e:
        raise_http(e)


@router.delete("/shifts/{shift_id}", status_code=204)
async def delete_shift(
        shift_id: UUID = Path(...),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    try:
        ShiftService.delete_shift(db, business.id, shift_id)
    except BookingError as e:
        raise_http(e)


# ============================================================================
# Shift exceptions (time off)
# ============================================================================

@router.get("/shift-exceptions", response_model=List[ShiftExceptionResponse])
async def list_shift_exceptions(
        staff_member_id: Optional[UUID] = Query(None),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    return ShiftService.list_exceptions(db, business.id, staff_member_id)


@router.post("/shift-exceptions", response_model=ShiftExceptionResponse, status_code=201)
async def create_shift_exception(
        data: ShiftExceptionInput,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    try:
        return ShiftService.create_exception(db, business.id, data)
    except BookingError as e:
        raise_http(e)


@router.delete("/shift-exceptions/{exception_id}", status_code=204)
async def delete_shift_exception(
        exception_id: UUID = Path(...),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    try:
        ShiftService.delete_exception(db, business.id, exception_id)
    except BookingError as e:
        raise_http(e)
