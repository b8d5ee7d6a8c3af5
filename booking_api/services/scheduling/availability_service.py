# ============================================================================
# booking_api/services/scheduling/availability_service.py
# ============================================================================
from datetime import date, time, timedelta
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from booking_api.core.exceptions import StoreError
from booking_api.models.reservation import Reservation, ReservationStatus
from booking_api.models.staff import StaffShift, ShiftException
from booking_api.services.business.booking_policy import BookingPolicy
from booking_api.services.scheduling.conflict_resolver import ConflictResolver, AvailabilityResult
from booking_api.services.scheduling.interval import Interval, reservation_interval
from booking_api.services.scheduling.staff_availability import (
    StaffDaySchedule, build_staff_day, weekday_index
)

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Loads a tenant's day from the store and runs the conflict resolver over it"""

    @staticmethod
    def load_busy_intervals(
            db: Session,
            business_id: UUID,
            day: date,
            staff_member_id: Optional[UUID] = None
    ) -> List[Interval]:
        """
        Intervals of live reservations that can touch ``day``.

        Durations are at most a day, so the neighbouring days bound every
        overlap: a reservation from the previous evening can run into ``day``,
        and a late request on ``day`` can run into the next morning.
        """
        query = db.query(Reservation).filter(
            Reservation.business_id == business_id,
            Reservation.reservation_date.in_(
                [day - timedelta(days=1), day, day + timedelta(days=1)]
            ),
            Reservation.status != ReservationStatus.CANCELLED,
        )
        if staff_member_id:
            query = query.filter(Reservation.staff_member_id == staff_member_id)

        reservations = query.order_by(Reservation.reservation_time.asc()).all()
        return [reservation_interval(r) for r in reservations]

    @staticmethod
    def load_staff_day(
            db: Session,
            business_id: UUID,
            staff_member_id: UUID,
            day: date
    ) -> StaffDaySchedule:
        shift = db.query(StaffShift).filter(
            StaffShift.business_id == business_id,
            StaffShift.staff_member_id == staff_member_id,
            StaffShift.day_of_week == weekday_index(day),
        ).first()

        exceptions = db.query(ShiftException).filter(
            ShiftException.business_id == business_id,
            ShiftException.staff_member_id == staff_member_id,
            ShiftException.exception_date == day,
        ).order_by(ShiftException.start_time.asc()).all()

        return build_staff_day(day, shift, exceptions)

    @staticmethod
    def _load(db, business_id, day, staff_member_id):
        try:
            busy = AvailabilityService.load_busy_intervals(db, business_id, day, staff_member_id)
            staff_day = None
            if staff_member_id:
                staff_day = AvailabilityService.load_staff_day(db, business_id, staff_member_id, day)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load schedule for business {business_id} on {day}: {e}", exc_info=True)
            raise StoreError()
        return busy, staff_day

    @staticmethod
    def check_availability(
            db: Session,
            business_id: UUID,
            policy: BookingPolicy,
            day: date,
            start_time: time,
            duration_minutes: Optional[int] = None,
            staff_member_id: Optional[UUID] = None
    ) -> AvailabilityResult:
        busy, staff_day = AvailabilityService._load(db, business_id, day, staff_member_id)

        result = ConflictResolver(policy).check(
            day, start_time, busy, duration_minutes=duration_minutes, staff_day=staff_day
        )

        logger.info(
            f"Availability for business {business_id} on {day} {start_time:%H:%M}: "
            f"available={result.available} alternatives={result.alternatives}"
        )
        return result

    @staticmethod
    def get_available_slots(
            db: Session,
            business_id: UUID,
            policy: BookingPolicy,
            day: date,
            duration_minutes: Optional[int] = None,
            staff_member_id: Optional[UUID] = None
    ) -> List[str]:
        busy, staff_day = AvailabilityService._load(db, business_id, day, staff_member_id)

        return ConflictResolver(policy).free_slots(
            day, busy, duration_minutes=duration_minutes, staff_day=staff_day
        )

    @staticmethod
    def is_staff_available(
            db: Session,
            business_id: UUID,
            staff_member_id: UUID,
            day: date,
            time_of_day: time
    ) -> bool:
        """Shift says working at time_of_day and no exception covers it"""
        try:
            staff_day = AvailabilityService.load_staff_day(db, business_id, staff_member_id, day)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load shifts for staff {staff_member_id}: {e}", exc_info=True)
            raise StoreError()
        return staff_day.is_available_at(time_of_day)
