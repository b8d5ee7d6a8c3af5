# ============================================================================
# booking_api/services/staff/staff_service.py
# ============================================================================
"""Service for managing staff members"""
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from booking_api.core.exceptions import NotFoundError, StoreError
from booking_api.models.staff import StaffMember
from booking_api.schemas.staff import StaffMemberCreate, StaffMemberUpdate

logger = logging.getLogger(__name__)


class StaffService:
    """Handles staff member operations"""

    @staticmethod
    def list_staff(db: Session, business_id: UUID, active_only: bool = False) -> List[StaffMember]:
        query = db.query(StaffMember).filter(StaffMember.business_id == business_id)
        if active_only:
            query = query.filter(StaffMember.is_active == True)
        return query.order_by(StaffMember.sort_order.asc(), StaffMember.name.asc()).all()

    @staticmethod
    def get_staff_member(db: Session, business_id: UUID, staff_member_id: UUID) -> StaffMember:
        staff = db.query(StaffMember).filter(
            StaffMember.id == staff_member_id,
            StaffMember.business_id == business_id
        ).first()

        if not staff:
            raise NotFoundError("Staff member not found")
        return staff

    @staticmethod
    def find_by_name(db: Session, business_id: UUID, name: str) -> Optional[StaffMember]:
        """Case-insensitive exact match first, then substring, over active staff"""
        search = name.lower().strip()
        staff_members = StaffService.list_staff(db, business_id, active_only=True)

        for staff in staff_members:
            if staff.name.lower() == search:
                return staff

        for staff in staff_members:
            if search in staff.name.lower():
                return staff

        return None

    @staticmethod
    def resolve_by_name(db: Session, business_id: UUID, name: str) -> StaffMember:
        """Like find_by_name but raises NotFoundError listing the active staff"""
        try:
            staff = StaffService.find_by_name(db, business_id, name)
            if staff:
                return staff
            available = [s.name for s in StaffService.list_staff(db, business_id, active_only=True)]
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up staff '{name}': {e}", exc_info=True)
            raise StoreError()

        raise NotFoundError(
            f'Mitarbeiter "{name}" nicht gefunden',
            errors={"available_staff": available}
        )

    @staticmethod
    def create_staff_member(db: Session, business_id: UUID, data: StaffMemberCreate) -> StaffMember:
        staff = StaffMember(
            business_id=business_id,
            name=data.name.strip(),
            color=data.color,
            sort_order=data.sort_order,
            is_active=True,
        )
        db.add(staff)
        db.commit()
        db.refresh(staff)

        logger.info(f"Created staff member {staff.id} for business {business_id}")
        return staff

    @staticmethod
    def update_staff_member(
            db: Session,
            business_id: UUID,
            staff_member_id: UUID,
            data: StaffMemberUpdate
    ) -> StaffMember:
        """Patch fields; setting is_active=False is the only way to remove staff"""
        staff = StaffService.get_staff_member(db, business_id, staff_member_id)

        for field_name, value in data.model_dump(exclude_unset=True).items():
            setattr(staff, field_name, value)

        db.commit()
        db.refresh(staff)
        return staff
