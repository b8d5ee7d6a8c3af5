# ============================================================================
# booking_api/api/v1/api_key/reservations.py
# POST /reservations - reservation intake from workflow automation
# ============================================================================
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from booking_api.api.v1.api_key.common import read_body, resolve_staff
from booking_api.config.database import get_db
from booking_api.core.exceptions import BookingError, ConflictError, StoreError, ValidationError
from booking_api.models.reservation import ReservationStatus
from booking_api.schemas.availability import ReservationIntakeRequest
from booking_api.services.api_key.api_key_service import APIKeyService
from booking_api.services.booking.booking_service import BookingService, BookingDetails
from booking_api.services.business.business_settings_service import BusinessSettingsService
from booking_api.services.scheduling.interval import Interval
from booking_api.utils.date_parsing import parse_date, parse_time

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api-reservations"])


@router.post("/reservations", status_code=201)
async def create_reservation(
        request: Request,
        x_api_key: Optional[str] = Header(None),
        db: Session = Depends(get_db)
):
    """
    Create a ``pending`` reservation for the tenant behind ``x-api-key``.

    Goes through the same locked re-check as every other booking, so a taken
    slot returns 409 with alternatives instead of a double booking.
    """
    try:
        business = APIKeyService(db).authenticate(x_api_key)
        payload = await read_body(request, ReservationIntakeRequest)

        if not payload.customer_name or not payload.reservation_date or not payload.reservation_time:
            raise ValidationError(
                "Missing required fields: customer_name, reservation_date, reservation_time"
            )

        day = parse_date(payload.reservation_date, "reservation_date")
        start_time = parse_time(payload.reservation_time, "reservation_time")

        duration = payload.duration_minutes
        if payload.end_time:
            end_time = parse_time(payload.end_time, "end_time")
            duration = Interval.from_date_time(day, start_time, end_time=end_time).duration_minutes

        staff = resolve_staff(db, business.id, payload.staff_member_name)
        policy = BusinessSettingsService.get_policy(db, business.id)

        reservation = await BookingService.book_appointment(
            db, business.id, policy, day, start_time,
            duration_minutes=duration,
            details=BookingDetails(
                customer_name=payload.customer_name.strip(),
                customer_phone=(payload.customer_phone or "").strip() or None,
                customer_email=(payload.customer_email or "").strip() or None,
                party_size=payload.party_size or 2,
                notes=(payload.notes or "").strip() or None,
            ),
            staff_member_id=staff.id if staff else None,
            source=payload.source or "n8n",
            status=ReservationStatus.PENDING,
        )

    except ConflictError as e:
        return JSONResponse(status_code=409, content=e.to_dict())

    except BookingError as e:
        if isinstance(e, StoreError):
            logger.error(f"Reservation intake failed: {e.message}")
        body = e.to_dict()
        if e.errors:
            body.update(e.errors)
            body.pop("errors", None)
        return JSONResponse(status_code=e.status_code, content=body)

    logger.info(f"Reservation created successfully: {reservation.id}")
    return {
        "success": True,
        "reservation_id": str(reservation.id),
        "message": "Reservation created successfully"
    }
