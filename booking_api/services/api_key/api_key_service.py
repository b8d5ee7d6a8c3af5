# ============================================================================
# booking_api/services/api_key/api_key_service.py
# ============================================================================
import secrets
import hashlib
import logging
from typing import Optional, Tuple
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from booking_api.core.exceptions import AuthError, InactiveAccountError, StoreError
from booking_api.models.api_key import APIKey
from booking_api.models.business import Business

logger = logging.getLogger(__name__)


class APIKeyService:
    """Service for issuing API keys and mapping them to tenants"""

    def __init__(self, db: Session):
        self.db = db

    def generate_key(
            self,
            business_id: UUID,
            name: str,
            expires_at: Optional[datetime] = None,
            environment: str = "live"  # "live" or "test"
    ) -> Tuple[APIKey, str]:
        """
        Generate a new API key for a business.

        Returns:
            Tuple of (APIKey model, raw_key_string)
            Raw key is only returned ONCE - never retrievable again!
        """
        random_part = secrets.token_urlsafe(24)
        raw_key = f"rsv_{environment}_{random_part}"

        api_key = APIKey(
            business_id=business_id,
            key_prefix=raw_key[:12],
            key_hash=self._hash_key(raw_key),
            name=name,
            expires_at=expires_at,
            is_active=True
        )

        self.db.add(api_key)
        self.db.commit()
        self.db.refresh(api_key)

        return api_key, raw_key

    def validate_key(self, raw_key: str) -> Optional[APIKey]:
        """
        Return the APIKey if it exists, is active, not revoked and not
        expired; None otherwise.
        """
        api_key = self.db.query(APIKey).filter(
            APIKey.key_hash == self._hash_key(raw_key),
            APIKey.is_active == True,
            APIKey.revoked_at.is_(None)
        ).first()

        if not api_key:
            return None

        if api_key.expires_at:
            expires_at = api_key.expires_at
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            if expires_at < datetime.now(timezone.utc):
                return None

        # Update usage tracking
        api_key.last_used_at = datetime.now(timezone.utc)
        api_key.usage_count = (api_key.usage_count or 0) + 1
        self.db.commit()

        return api_key

    def authenticate(self, raw_key: Optional[str]) -> Business:
        """
        Map a raw key to its active tenant.

        Raises:
            AuthError: key missing, unknown, revoked or expired
            InactiveAccountError: the tenant is not active
        """
        if not raw_key or not raw_key.strip():
            raise AuthError("API key required")

        try:
            api_key = self.validate_key(raw_key.strip())
            business = None
            if api_key:
                business = self.db.query(Business).filter(Business.id == api_key.business_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"API key lookup failed: {e}", exc_info=True)
            raise StoreError()

        if not api_key:
            logger.warning(f"Rejected API key with prefix {raw_key.strip()[:12]}")
            raise AuthError("Invalid API key")
        if not business:
            raise AuthError("Customer not found")
        if not business.is_active:
            raise InactiveAccountError()

        return business

    def revoke_key(self, key_id: UUID, business_id: UUID) -> bool:
        api_key = self.db.query(APIKey).filter(
            APIKey.id == key_id,
            APIKey.business_id == business_id
        ).first()

        if not api_key:
            return False

        api_key.is_active = False
        api_key.revoked_at = datetime.now(timezone.utc)
        self.db.commit()
        return True

    @staticmethod
    def _hash_key(raw_key: str) -> str:
        return hashlib.sha256(raw_key.encode()).hexdigest()
