# ============================================================================
# booking_api/services/staff/shift_service.py
# Weekly shifts (upsert on staff_member_id + day_of_week) and dated exceptions
# ============================================================================
from typing import List, Optional
import uuid
from uuid import UUID
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.sql import func

from booking_api.core.exceptions import NotFoundError, StoreError, ValidationError
from booking_api.models.staff import StaffMember, StaffShift, ShiftException
from booking_api.schemas.staff import ShiftInput, ShiftExceptionInput

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ShiftService:
    """Handles staff shift and shift exception operations"""

    @staticmethod
    def _check_staff_owned(db: Session, business_id: UUID, staff_ids) -> None:
        staff_ids = set(staff_ids)
        owned = {
            row.id for row in db.query(StaffMember.id).filter(
                StaffMember.business_id == business_id,
                StaffMember.id.in_(staff_ids)
            ).all()
        }
        missing = staff_ids - owned
        if missing:
            raise NotFoundError(
                "Staff member not found",
                errors={"staff_member_ids": sorted(str(m) for m in missing)}
            )

    @staticmethod
    def list_shifts(db: Session, business_id: UUID, staff_member_id: Optional[UUID] = None) -> List[StaffShift]:
        query = db.query(StaffShift).filter(StaffShift.business_id == business_id)
        if staff_member_id:
            query = query.filter(StaffShift.staff_member_id == staff_member_id)
        return query.order_by(StaffShift.staff_member_id, StaffShift.day_of_week).all()

    @staticmethod
    def _upsert_statement(db: Session, rows: List[dict]):
        dialect = db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise StoreError(f"Shift upsert is not supported on {dialect}")

        stmt = insert(StaffShift).values(rows)
        return stmt.on_conflict_do_update(
            index_elements=[StaffShift.staff_member_id, StaffShift.day_of_week],
            set_={
                "start_time": stmt.excluded.start_time,
                "end_time": stmt.excluded.end_time,
                "is_working": stmt.excluded.is_working,
                "updated_at": func.now(),
            },
        )

    @staticmethod
    def upsert_shifts(db: Session, business_id: UUID, inputs: List[ShiftInput]) -> List[StaffShift]:
        """
        Insert or replace the weekly rule for every (staff_member_id, day_of_week)
        in ``inputs`` as one statement: either all rows are written or none.
        """
        if not inputs:
            return []

        keys = [(i.staff_member_id, i.day_of_week) for i in inputs]
        if len(set(keys)) != len(keys):
            raise ValidationError("Duplicate (staff_member_id, day_of_week) in request")

        ShiftService._check_staff_owned(db, business_id, [i.staff_member_id for i in inputs])

        rows = [
            {
                "id": uuid.uuid4(),
                "business_id": business_id,
                "staff_member_id": i.staff_member_id,
                "day_of_week": i.day_of_week,
                "start_time": i.start_time,
                "end_time": i.end_time,
                "is_working": i.is_working,
            }
            for i in inputs
        ]

        try:
            db.execute(ShiftService._upsert_statement(db, rows))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to upsert {len(rows)} shifts for business {business_id}: {e}", exc_info=True)
            raise StoreError()

        logger.info(f"Upserted {len(rows)} shifts for business {business_id}")

        # Re-read so callers get the surviving row ids
        shifts = []
        for staff_member_id, day_of_week in keys:
            shifts.append(db.query(StaffShift).filter(
                StaffShift.staff_member_id == staff_member_id,
                StaffShift.day_of_week == day_of_week
            ).populate_existing().one())
        return shifts

    @staticmethod
    def upsert_shift(db: Session, business_id: UUID, data: ShiftInput) -> StaffShift:
        return ShiftService.upsert_shifts(db, business_id, [data])[0]

    @staticmethod
    def delete_shift(db: Session, business_id: UUID, shift_id: UUID) -> None:
        shift = db.query(StaffShift).filter(
            StaffShift.id == shift_id,
            StaffShift.business_id == business_id
        ).first()
        if not shift:
            raise NotFoundError("Shift not found")

        db.delete(shift)
        db.commit()

    # ------------------------------------------------------------------
    # Exceptions
    # ------------------------------------------------------------------

    @staticmethod
    def list_exceptions(
            db: Session,
            business_id: UUID,
            staff_member_id: Optional[UUID] = None
    ) -> List[ShiftException]:
        query = db.query(ShiftException).filter(ShiftException.business_id == business_id)
        if staff_member_id:
            query = query.filter(ShiftException.staff_member_id == staff_member_id)
        return query.order_by(ShiftException.exception_date, ShiftException.start_time).all()

    @staticmethod
    def create_exception(db: Session, business_id: UUID, data: ShiftExceptionInput) -> ShiftException:
        ShiftService._check_staff_owned(db, business_id, [data.staff_member_id])

        exception = ShiftException(
            business_id=business_id,
            staff_member_id=data.staff_member_id,
            exception_date=data.exception_date,
            start_time=data.start_time,
            end_time=data.end_time,
            reason=data.reason,
        )
        db.add(exception)
        db.commit()
        db.refresh(exception)

        logger.info(
            f"Blocked staff {data.staff_member_id} on {data.exception_date} "
            f"{data.start_time:%H:%M}-{data.end_time:%H:%M}"
        )
        return exception

    @staticmethod
    def delete_exception(db: Session, business_id: UUID, exception_id: UUID) -> None:
        exception = db.query(ShiftException).filter(
            ShiftException.id == exception_id,
            ShiftException.business_id == business_id
        ).first()
        if not exception:
            raise NotFoundError("Shift exception not found")

        db.delete(exception)
        db.commit()
