# ===== booking_api/models/business.py =====
"""
Business (tenant) model and its booking settings
"""
from sqlalchemy import Column, String, DateTime, JSON, Integer, ForeignKey
from sqlalchemy import Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid

from booking_api.models.base import Base


class BusinessStatus:
    ACTIVE = "active"
    INACTIVE = "inactive"


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)

    # Identity-provider user that owns this tenant (JWT "sub")
    owner_user_id = Column(Uuid(as_uuid=True), nullable=True, unique=True, index=True)
    email = Column(String(255), nullable=True)

    status = Column(String(20), nullable=False, default=BusinessStatus.ACTIVE)

    settings = relationship("BusinessSettings", back_populates="business", uselist=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    @property
    def is_active(self) -> bool:
        return self.status == BusinessStatus.ACTIVE

    def __repr__(self):
        return f"<Business(id={self.id}, name={self.name})>"


class BusinessSettings(Base):
    """Opening hours and booking policy overrides for one tenant"""
    __tablename__ = "business_settings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        Uuid(as_uuid=True), ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False, unique=True
    )

    # {"monday": {"open": "09:00", "close": "18:00", "closed": false}, ...}
    opening_hours = Column(JSON, default=dict)

    # NULL = use the application default from settings
    default_duration_minutes = Column(Integer, nullable=True)
    slot_granularity_minutes = Column(Integer, nullable=True)
    max_alternatives = Column(Integer, nullable=True)

    business = relationship("Business", back_populates="settings")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<BusinessSettings(business_id={self.business_id})>"
