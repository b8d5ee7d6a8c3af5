# ============================================================================
# booking_api/api/v1/dashboard/reservations.py
# Session authenticated endpoints - thin HTTP layer
# ============================================================================
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session

from booking_api.api.dependencies import get_current_business, get_booking_policy, raise_http
from booking_api.config.database import get_db
from booking_api.core.exceptions import BookingError
from booking_api.models.business import Business
from booking_api.schemas.reservation import ReservationCreate, ReservationStatusUpdate
from booking_api.services.booking.booking_service import BookingService, BookingDetails
from booking_api.services.business.booking_policy import BookingPolicy
from booking_api.services.reservation.reservation_service import ReservationService
from booking_api.services.scheduling.availability_service import AvailabilityService
from booking_api.services.staff.staff_service import StaffService

router = APIRouter(prefix="/reservations", tags=["dashboard-reservations"])


@router.get("")
async def list_reservations(
        start_date: Optional[date] = Query(None, description="Reservations on or after this date"),
        end_date: Optional[date] = Query(None, description="Reservations on or before this date"),
        status: Optional[str] = Query(None, description="pending, confirmed, completed, cancelled"),
        staff_member_id: Optional[UUID] = Query(None),
        skip: int = Query(0, ge=0),
        limit: int = Query(50, ge=1, le=200),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    return ReservationService.list_reservations(
        db=db,
        business_id=business.id,
        start_date=start_date,
        end_date=end_date,
        status=status,
        staff_member_id=staff_member_id,
        skip=skip,
        limit=limit
    )


@router.get("/slots")
async def get_free_slots(
        on_date: date = Query(..., alias="date"),
        duration_minutes: Optional[int] = Query(None, ge=1, le=24 * 60),
        staff_member_id: Optional[UUID] = Query(None),
        business: Business = Depends(get_current_business),
        policy: BookingPolicy = Depends(get_booking_policy),
        db: Session = Depends(get_db)
):
    """Free start times for the calendar view."""
    try:
        if staff_member_id:
            StaffService.get_staff_member(db, business.id, staff_member_id)
        slots = AvailabilityService.get_available_slots(
            db, business.id, policy, on_date,
            duration_minutes=duration_minutes, staff_member_id=staff_member_id
        )
    except BookingError as e:
        raise_http(e)

    return {"date": on_date.isoformat(), "available_slots": slots}


@router.post("", status_code=201)
async def create_reservation(
        data: ReservationCreate,
        business: Business = Depends(get_current_business),
        policy: BookingPolicy = Depends(get_booking_policy),
        db: Session = Depends(get_db)
):
    """Manual entry from the dashboard; same conflict rules as every other source."""
    try:
        if data.staff_member_id:
            StaffService.get_staff_member(db, business.id, data.staff_member_id)

        reservation = await BookingService.book_appointment(
            db, business.id, policy, data.reservation_date, data.reservation_time,
            duration_minutes=data.duration_minutes,
            details=BookingDetails(
                customer_name=data.customer_name,
                customer_phone=data.customer_phone,
                customer_email=data.customer_email,
                party_size=data.party_size,
                title=data.title,
                notes=data.notes,
            ),
            staff_member_id=data.staff_member_id,
            source="manual",
            status=data.status,
        )
    except BookingError as e:
        raise_http(e)

    return ReservationService.serialize(reservation)


@router.get("/{reservation_id}")
async def get_reservation(
        reservation_id: UUID = Path(...),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    try:
        reservation = ReservationService.get_reservation(db, business.id, reservation_id)
    except BookingError as e:
        raise_http(e)
    return ReservationService.serialize(reservation)


@router.patch("/{reservation_id}/status")
async def update_reservation_status(
        data: ReservationStatusUpdate,
        reservation_id: UUID = Path(...),
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """pending -> confirmed -> completed, or cancel while not yet completed."""
    try:
        reservation = ReservationService.update_status(db, business.id, reservation_id, data.status)
    except BookingError as e:
        raise_http(e)
    return ReservationService.serialize(reservation)
