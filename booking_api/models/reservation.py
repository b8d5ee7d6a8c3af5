# ===== booking_api/models/reservation.py =====
from sqlalchemy import Column, String, Integer, Text, Date, Time, DateTime, ForeignKey, Index, text
from sqlalchemy import Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from booking_api.models.base import Base


class ReservationStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (PENDING, CONFIRMED, COMPLETED, CANCELLED)


# Stored in resource_key when the reservation is not tied to a staff member
TENANT_RESOURCE = "*"


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id"), nullable=False)
    staff_member_id = Column(Uuid(as_uuid=True), ForeignKey("staff_members.id"), nullable=True)

    # Customer info
    customer_name = Column(String(200), nullable=True)
    customer_phone = Column(String(50), nullable=True)
    customer_email = Column(String(255), nullable=True)
    party_size = Column(Integer, nullable=True)

    # Reservation details
    title = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    reservation_date = Column(Date, nullable=False)
    reservation_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=True)  # NULL = reservation_time + duration_minutes

    # Duration in effect when the row was written; used to derive a missing end_time
    duration_minutes = Column(Integer, nullable=False, default=60)

    # Status tracking
    status = Column(String(20), nullable=False, default=ReservationStatus.PENDING)
    source = Column(String(50), default="manual")  # voice_ai, n8n, manual, api

    # staff_member_id as text, or "*" for tenant-wide bookings
    resource_key = Column(String(64), nullable=False, default=TENANT_RESOURCE)

    staff_member = relationship("StaffMember")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_reservations_business_date", "business_id", "reservation_date"),
        # At most one live reservation per (tenant, resource, date, start)
        Index(
            "uq_reservations_live_slot",
            "business_id", "resource_key", "reservation_date", "reservation_time",
            unique=True,
            postgresql_where=text("status != 'cancelled'"),
            sqlite_where=text("status != 'cancelled'"),
        ),
    )

    def __repr__(self):
        return f"<Reservation(id={self.id}, date={self.reservation_date}, time={self.reservation_time})>"
