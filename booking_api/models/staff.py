# ===== booking_api/models/staff.py =====
from sqlalchemy import (
    Column, String, Integer, Boolean, Time, Date, DateTime, ForeignKey, UniqueConstraint, Index
)
from sqlalchemy import Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from booking_api.models.base import Base


class StaffMember(Base):
    __tablename__ = "staff_members"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    color = Column(String(20), default="#3b82f6")
    sort_order = Column(Integer, default=0)

    # Deactivation keeps past reservation references valid
    is_active = Column(Boolean, default=True)

    shifts = relationship("StaffShift", back_populates="staff_member", cascade="all, delete-orphan")
    exceptions = relationship("ShiftException", back_populates="staff_member", cascade="all, delete-orphan")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<StaffMember(id={self.id}, name={self.name})>"


class StaffShift(Base):
    """Recurring weekly working hours, one row per (staff member, weekday)"""
    __tablename__ = "staff_shifts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id"), nullable=False)
    staff_member_id = Column(Uuid(as_uuid=True), ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False)

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_working = Column(Boolean, default=True, nullable=False)

    staff_member = relationship("StaffMember", back_populates="shifts")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("staff_member_id", "day_of_week", name="uq_staff_shifts_staff_day"),
    )


class ShiftException(Base):
    """Dated block (time off) that removes availability inside its window"""
    __tablename__ = "shift_exceptions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id"), nullable=False)
    staff_member_id = Column(Uuid(as_uuid=True), ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False)

    exception_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    reason = Column(String(255), nullable=True)  # "Urlaub", "Arzttermin", ...

    staff_member = relationship("StaffMember", back_populates="exceptions")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_shift_exceptions_business_date", "business_id", "exception_date"),
    )
