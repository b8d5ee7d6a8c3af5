# ============================================================================
# booking_api/api/v1/api_key/availability.py
# POST /check-availability - workflow automation availability check
# ============================================================================
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from booking_api.api.v1.api_key.common import read_body, resolve_staff, staff_ref
from booking_api.config.database import get_db
from booking_api.core.exceptions import BookingError, StoreError, ValidationError
from booking_api.schemas.availability import AvailabilityRequest
from booking_api.services.api_key.api_key_service import APIKeyService
from booking_api.services.business.business_settings_service import BusinessSettingsService
from booking_api.services.scheduling.availability_service import AvailabilityService
from booking_api.services.voice_agent import messages
from booking_api.utils.date_parsing import parse_date, parse_time

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api-availability"])


def _error_response(error: BookingError) -> JSONResponse:
    """Every non-200 keeps availability/alternatives so callers can parse it blindly"""
    body = error.to_dict()
    body.update({"availability": False, "alternatives": []})
    if error.errors:
        body.update(error.errors)
        body.pop("errors", None)
    return JSONResponse(status_code=error.status_code, content=body)


@router.post("/check-availability")
async def check_availability(
        request: Request,
        x_api_key: Optional[str] = Header(None),
        db: Session = Depends(get_db)
):
    """
    Check whether a date/time is free for the tenant behind ``x-api-key``.

    Body: ``{date, time, duration?, staff_member_name?}``. When the slot is
    taken, ``alternatives`` lists up to the tenant's cap of free start times
    on the same day, ascending.
    """
    try:
        business = APIKeyService(db).authenticate(x_api_key)
        payload = await read_body(request, AvailabilityRequest)
        logger.info(f"Availability check request for business {business.id}: {payload.model_dump()}")

        if not payload.date or not payload.time:
            raise ValidationError("Missing required field: date and time")
        day = parse_date(payload.date)
        start_time = parse_time(payload.time)

        staff = resolve_staff(db, business.id, payload.staff_member_name)
        policy = BusinessSettingsService.get_policy(db, business.id)

        result = AvailabilityService.check_availability(
            db, business.id, policy, day, start_time,
            duration_minutes=payload.duration,
            staff_member_id=staff.id if staff else None,
        )

    except BookingError as e:
        if isinstance(e, StoreError):
            logger.error(f"Availability check failed: {e.message}")
        return _error_response(e)

    except Exception:
        logger.exception("Unexpected error in check-availability")
        return _error_response(StoreError())

    return {
        "availability": result.available,
        "alternatives": result.alternatives,
        "requested_date": payload.date,
        "requested_time": payload.time,
        "staff_member": staff_ref(staff),
        "message": messages.short_status(payload.time, result.available, staff.name if staff else None),
    }
