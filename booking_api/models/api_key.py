# ===== booking_api/models/api_key.py =====
from sqlalchemy import Column, String, DateTime, Boolean, Integer, ForeignKey, Index
from sqlalchemy import Uuid
from sqlalchemy.sql import func
import uuid
from booking_api.models.base import Base


class APIKey(Base):
    __tablename__ = "api_keys"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid(as_uuid=True), ForeignKey("businesses.id"), nullable=False)

    # API Key identification
    key_prefix = Column(String(12), nullable=False)  # e.g., "rsv_live_abc"
    key_hash = Column(String(128), nullable=False, unique=True, index=True)  # SHA256 hash

    # Metadata
    name = Column(String(100), nullable=False)  # "Voice Agent", "n8n Workflow"

    # Status & lifecycle
    is_active = Column(Boolean, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    # Usage tracking
    last_used_at = Column(DateTime(timezone=True))
    usage_count = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    revoked_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index('ix_api_keys_business_active', 'business_id', 'is_active'),
    )
