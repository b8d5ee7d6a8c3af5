# ============================================================================
# booking_api/services/booking/booking_service.py
# Re-validates availability and writes the reservation under per-day locks
# ============================================================================
"""
Booking transaction.

The availability check a client ran earlier is only advisory. Here the same
check is repeated while holding the (tenant, date) locks for the booking day
and the day before, and the insert happens before they are released.
Reservations last at most a day, so two overlapping bookings start on the
same or adjacent days and always share one of these keys.

A partial unique index on live reservations backs this up: an
IntegrityError on insert is reported as a conflict, never as a store failure.
"""
from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import List, Optional
from uuid import UUID
import logging

from redis.exceptions import RedisError
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from booking_api.config.redis import RedisKeys
from booking_api.core.exceptions import ConflictError, StoreError, ValidationError
from booking_api.models.reservation import Reservation, ReservationStatus, TENANT_RESOURCE
from booking_api.services.business.booking_policy import BookingPolicy
from booking_api.services.scheduling.availability_service import AvailabilityService
from booking_api.utils.distributed_locks import distributed_locks, LockNotAcquired

logger = logging.getLogger(__name__)

# Longest bookable span; lock keys and busy-interval loading rely on it
MAX_DURATION_MINUTES = 24 * 60


@dataclass
class BookingDetails:
    """Customer-facing fields copied onto the reservation"""
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    party_size: Optional[int] = None
    title: Optional[str] = None
    notes: Optional[str] = None


class BookingService:
    """Handles the write side of the booking engine"""

    @staticmethod
    def lock_key(business_id: UUID, day: date) -> str:
        return RedisKeys.BOOKING_LOCK.format(business_id=business_id, date=day.isoformat())

    @staticmethod
    def lock_keys(business_id: UUID, day: date) -> List[str]:
        return [
            BookingService.lock_key(business_id, day - timedelta(days=1)),
            BookingService.lock_key(business_id, day),
        ]

    @staticmethod
    async def book_appointment(
            db: Session,
            business_id: UUID,
            policy: BookingPolicy,
            day: date,
            start_time: time,
            duration_minutes: Optional[int] = None,
            details: Optional[BookingDetails] = None,
            staff_member_id: Optional[UUID] = None,
            source: str = "voice_ai",
            status: str = ReservationStatus.CONFIRMED
    ) -> Reservation:
        """
        Book ``start_time`` on ``day`` for ``duration_minutes``.

        Returns:
            The persisted Reservation.

        Raises:
            ConflictError: the slot is taken; ``alternatives`` holds the
                current free slots for the day.
            StoreError: the store or lock backend failed. The reservation may
                or may not exist; re-query before retrying.
        """
        if status not in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED):
            raise ValidationError(f"New reservations cannot start as '{status}'")

        duration = duration_minutes or policy.default_duration_minutes
        if not 0 < duration <= MAX_DURATION_MINUTES:
            raise ValidationError(f"Duration must be between 1 and {MAX_DURATION_MINUTES} minutes")
        details = details or BookingDetails()

        try:
            async with distributed_locks(BookingService.lock_keys(business_id, day)):
                result = AvailabilityService.check_availability(
                    db, business_id, policy, day, start_time,
                    duration_minutes=duration, staff_member_id=staff_member_id,
                )
                if not result.available:
                    logger.info(
                        f"Booking conflict for business {business_id} on {day} {start_time:%H:%M}"
                    )
                    raise ConflictError(alternatives=result.alternatives)

                reservation = Reservation(
                    business_id=business_id,
                    staff_member_id=staff_member_id,
                    resource_key=str(staff_member_id) if staff_member_id else TENANT_RESOURCE,
                    reservation_date=day,
                    reservation_time=start_time,
                    end_time=result.requested.end.time(),
                    duration_minutes=duration,
                    status=status,
                    source=source,
                    customer_name=details.customer_name,
                    customer_phone=details.customer_phone,
                    customer_email=details.customer_email,
                    party_size=details.party_size,
                    title=details.title,
                    notes=details.notes,
                )
                BookingService._insert(db, reservation)

        except IntegrityError:
            logger.warning(
                f"Live reservation already exists for business {business_id} on {day} {start_time:%H:%M}"
            )
            alternatives = AvailabilityService.check_availability(
                db, business_id, policy, day, start_time,
                duration_minutes=duration, staff_member_id=staff_member_id,
            ).alternatives
            raise ConflictError(alternatives=alternatives)

        except LockNotAcquired as e:
            logger.error(f"Booking lock busy: {e}")
            raise StoreError("Booking system is busy, please try again", status_code=503)

        except RedisError as e:
            logger.error(f"Booking lock backend failed: {e}", exc_info=True)
            raise StoreError()

        logger.info(
            f"Booked reservation {reservation.id} for business {business_id} "
            f"on {day} {start_time:%H:%M} ({duration} min, source={source})"
        )
        return reservation

    @staticmethod
    def _insert(db: Session, reservation: Reservation) -> None:
        try:
            db.add(reservation)
            db.commit()
            db.refresh(reservation)
        except IntegrityError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to persist reservation: {e}", exc_info=True)
            raise StoreError()
