# ============================================================================
# booking_api/services/reservation/reservation_service.py
# Reservation queries and status lifecycle
# ============================================================================
from datetime import date, datetime, timezone
from typing import Optional, Dict, Any
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from booking_api.core.exceptions import NotFoundError, InvalidTransitionError
from booking_api.models.reservation import Reservation, ReservationStatus

logger = logging.getLogger(__name__)

# pending -> confirmed -> completed; anything live -> cancelled
ALLOWED_TRANSITIONS = {
    ReservationStatus.PENDING: {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED},
    ReservationStatus.CONFIRMED: {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED},
    ReservationStatus.COMPLETED: set(),
    ReservationStatus.CANCELLED: set(),
}


class ReservationService:
    """Service layer for reservation reads and status changes."""

    @staticmethod
    def list_reservations(
            db: Session,
            business_id: UUID,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            status: Optional[str] = None,
            staff_member_id: Optional[UUID] = None,
            skip: int = 0,
            limit: int = 50
    ) -> Dict[str, Any]:
        """Get paginated list of reservations with filters."""
        query = db.query(Reservation).filter(Reservation.business_id == business_id)

        if start_date:
            query = query.filter(Reservation.reservation_date >= start_date)
        if end_date:
            query = query.filter(Reservation.reservation_date <= end_date)
        if status:
            query = query.filter(Reservation.status == status)
        if staff_member_id:
            query = query.filter(Reservation.staff_member_id == staff_member_id)

        query = query.order_by(Reservation.reservation_date.asc(), Reservation.reservation_time.asc())
        total = query.count()
        reservations = query.offset(skip).limit(limit).all()

        return {
            "business_id": str(business_id),
            "total_reservations": total,
            "page": {
                "skip": skip,
                "limit": limit,
                "total_pages": (total + limit - 1) // limit if total > 0 else 0
            },
            "reservations": [ReservationService.serialize(r) for r in reservations]
        }

    @staticmethod
    def get_reservation(db: Session, business_id: UUID, reservation_id: UUID) -> Reservation:
        reservation = db.query(Reservation).filter(
            Reservation.id == reservation_id,
            Reservation.business_id == business_id
        ).first()

        if not reservation:
            raise NotFoundError("Reservation not found or you don't have access to it")
        return reservation

    @staticmethod
    def update_status(
            db: Session,
            business_id: UUID,
            reservation_id: UUID,
            new_status: str
    ) -> Reservation:
        reservation = ReservationService.get_reservation(db, business_id, reservation_id)

        if new_status == reservation.status:
            return reservation

        if new_status not in ALLOWED_TRANSITIONS.get(reservation.status, set()):
            raise InvalidTransitionError(
                f"Cannot change reservation from '{reservation.status}' to '{new_status}'"
            )

        reservation.status = new_status
        if new_status == ReservationStatus.CANCELLED:
            reservation.cancelled_at = datetime.now(timezone.utc)

        db.commit()
        db.refresh(reservation)

        logger.info(f"Reservation {reservation.id} is now {new_status}")
        return reservation

    @staticmethod
    def serialize(reservation: Reservation) -> Dict[str, Any]:
        return {
            "id": str(reservation.id),
            "staff_member_id": str(reservation.staff_member_id) if reservation.staff_member_id else None,
            "customer_name": reservation.customer_name,
            "customer_phone": reservation.customer_phone,
            "customer_email": reservation.customer_email,
            "party_size": reservation.party_size,
            "title": reservation.title,
            "notes": reservation.notes,
            "reservation_date": reservation.reservation_date.isoformat(),
            "reservation_time": reservation.reservation_time.strftime("%H:%M"),
            "end_time": reservation.end_time.strftime("%H:%M") if reservation.end_time else None,
            "duration_minutes": reservation.duration_minutes,
            "status": reservation.status,
            "source": reservation.source,
            "created_at": reservation.created_at.isoformat() if reservation.created_at else None,
            "cancelled_at": reservation.cancelled_at.isoformat() if reservation.cancelled_at else None,
        }
