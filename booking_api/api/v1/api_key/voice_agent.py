# ============================================================================
# booking_api/api/v1/api_key/voice_agent.py
# POST /voice-agent-calendar - tool endpoint for the voice AI agent
# ============================================================================
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from booking_api.api.dependencies import Identity, optional_identity
from booking_api.api.v1.api_key.common import read_body, resolve_staff, staff_ref
from booking_api.config.database import get_db
from booking_api.core.exceptions import (
    AuthError, BookingError, ConflictError, InactiveAccountError, StoreError, ValidationError
)
from booking_api.models.business import Business
from booking_api.schemas.availability import VoiceAgentRequest
from booking_api.services.api_key.api_key_service import APIKeyService
from booking_api.services.booking.booking_service import BookingService, BookingDetails
from booking_api.services.business.business_settings_service import BusinessSettingsService
from booking_api.services.reservation.reservation_service import ReservationService
from booking_api.services.scheduling.availability_service import AvailabilityService
from booking_api.services.voice_agent import messages
from booking_api.utils.date_parsing import parse_date, parse_time, format_german_date, format_time

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api-voice-agent"])

ACTIONS = ("check_availability", "get_available_slots", "book_appointment")


def _fail(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error, **extra})


def _authenticate(db: Session, payload: VoiceAgentRequest, identity: Optional[Identity]) -> Business:
    """
    ``api_key`` wins; a bare ``user_id`` is only trusted when the bearer
    token was issued for that same user.
    """
    if payload.api_key:
        return APIKeyService(db).authenticate(payload.api_key)

    if not payload.user_id:
        raise ValidationError("user_id oder api_key erforderlich")

    try:
        user_id = UUID(payload.user_id)
    except ValueError:
        raise AuthError("Ungültige user_id")

    if identity is None or identity.user_id != user_id:
        raise AuthError("user_id muss durch ein gültiges Token bestätigt werden")

    business = db.query(Business).filter(Business.owner_user_id == user_id).first()
    if business is None:
        raise AuthError("Kunde nicht gefunden")
    if not business.is_active:
        raise InactiveAccountError("Kundenkonto inaktiv")
    return business


@router.post("/voice-agent-calendar")
async def voice_agent_calendar(
        request: Request,
        identity: Optional[Identity] = Depends(optional_identity),
        db: Session = Depends(get_db)
):
    """
    Single endpoint for the voice agent's calendar tools.

    ``action`` selects ``check_availability``, ``get_available_slots`` or
    ``book_appointment``. Responses carry German sentences the agent can read
    out verbatim next to the structured fields.
    """
    try:
        payload = await read_body(request, VoiceAgentRequest)
        logger.info(f"Voice Agent Calendar Request: action={payload.action} date={payload.date} time={payload.time}")

        business = _authenticate(db, payload, identity)

        if payload.action not in ACTIONS:
            return _fail(400, "Unbekannte Aktion")

        if payload.action == "get_available_slots":
            if not payload.date:
                raise ValidationError("date erforderlich")
        elif not payload.date or not payload.time:
            raise ValidationError("date und time erforderlich")

        day = parse_date(payload.date)
        staff = resolve_staff(db, business.id, payload.staff_member_name)
        policy = BusinessSettingsService.get_policy(db, business.id)

        if payload.action == "get_available_slots":
            return _get_available_slots(db, business, policy, day, payload, staff)

        start_time = parse_time(payload.time)
        if payload.action == "check_availability":
            return _check_availability(db, business, policy, day, start_time, payload, staff)
        return await _book_appointment(db, business, policy, day, start_time, payload, staff)

    except BookingError as e:
        if isinstance(e, StoreError):
            logger.error(f"Voice Agent Calendar store error: {e.message}")
        return _fail(e.status_code, e.message, **(e.errors or {}))

    except Exception:
        logger.exception("Voice Agent Calendar Error")
        return _fail(500, "Interner Fehler")


def _check_availability(db, business, policy, day, start_time, payload, staff):
    time_str = format_time(start_time)
    staff_name = staff.name if staff else None

    result = AvailabilityService.check_availability(
        db, business.id, policy, day, start_time,
        duration_minutes=payload.duration_minutes,
        staff_member_id=staff.id if staff else None,
    )

    return {
        "success": True,
        "available": result.available,
        "requested_date": day.isoformat(),
        "requested_time": time_str,
        "staff_member": staff_ref(staff),
        "message": (
            messages.slot_available(day, time_str, staff_name) if result.available
            else messages.slot_taken(day, time_str, staff_name)
        ),
        "alternative_slots": result.alternatives,
        "alternative_message": None if result.available else messages.alternatives(day, result.alternatives),
    }


def _get_available_slots(db, business, policy, day, payload, staff):
    slots = AvailabilityService.get_available_slots(
        db, business.id, policy, day,
        duration_minutes=payload.duration_minutes,
        staff_member_id=staff.id if staff else None,
    )

    return {
        "success": True,
        "date": day.isoformat(),
        "formatted_date": format_german_date(day),
        "staff_member": staff_ref(staff),
        "available_slots": slots,
        "message": messages.available_slots(day, slots, staff.name if staff else None),
    }


async def _book_appointment(db, business, policy, day, start_time, payload, staff):
    time_str = format_time(start_time)
    staff_name = staff.name if staff else None

    details = BookingDetails(
        customer_name=payload.customer_name,
        customer_phone=payload.customer_phone,
        customer_email=payload.customer_email,
        title=payload.title or f"Termin für {payload.customer_name or 'Kunde'}",
    )

    try:
        reservation = await BookingService.book_appointment(
            db, business.id, policy, day, start_time,
            duration_minutes=payload.duration_minutes,
            details=details,
            staff_member_id=staff.id if staff else None,
            source="voice_ai",
        )
    except ConflictError as e:
        return _fail(
            409,
            "Termin bereits belegt",
            message=messages.slot_taken(day, time_str, staff_name),
            alternative_slots=e.alternatives,
            alternative_message=messages.alternatives(day, e.alternatives),
        )
    except StoreError as e:
        return _fail(
            e.status_code,
            "Termin konnte nicht gebucht werden",
            message=messages.booking_failed(day, time_str),
        )

    return {
        "success": True,
        "appointment": ReservationService.serialize(reservation),
        "message": messages.booked(day, time_str, staff_name),
        "confirmation": messages.confirmation(day, time_str),
    }
