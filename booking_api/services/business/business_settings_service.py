# ============================================================================
# booking_api/services/business/business_settings_service.py
# ============================================================================
"""Service for tenant opening hours and booking policy"""
from typing import Dict, Any
from uuid import UUID
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from booking_api.config.settings import get_settings
from booking_api.core.exceptions import StoreError
from booking_api.models.business import BusinessSettings
from booking_api.schemas.opening_hours import OpeningHours
from booking_api.schemas.reservation import BusinessSettingsUpdate
from booking_api.services.business.booking_policy import BookingPolicy

logger = logging.getLogger(__name__)


class BusinessSettingsService:
    """Loads and stores per-tenant booking configuration"""

    @staticmethod
    def _get_row(db: Session, business_id: UUID):
        return db.query(BusinessSettings).filter(
            BusinessSettings.business_id == business_id
        ).first()

    @staticmethod
    def policy_from_row(row) -> BookingPolicy:
        """Merge a BusinessSettings row (or None) with application defaults"""
        settings = get_settings()

        if row is None:
            return BookingPolicy(
                opening_hours=OpeningHours(),
                default_duration_minutes=settings.DEFAULT_DURATION_MINUTES,
                slot_granularity_minutes=settings.DEFAULT_SLOT_GRANULARITY_MINUTES,
                max_alternatives=settings.DEFAULT_MAX_ALTERNATIVES,
            )

        return BookingPolicy(
            opening_hours=OpeningHours.from_stored(row.opening_hours),
            default_duration_minutes=row.default_duration_minutes or settings.DEFAULT_DURATION_MINUTES,
            slot_granularity_minutes=row.slot_granularity_minutes or settings.DEFAULT_SLOT_GRANULARITY_MINUTES,
            max_alternatives=(
                row.max_alternatives if row.max_alternatives is not None
                else settings.DEFAULT_MAX_ALTERNATIVES
            ),
        )

    @staticmethod
    def get_policy(db: Session, business_id: UUID) -> BookingPolicy:
        try:
            row = BusinessSettingsService._get_row(db, business_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load settings for business {business_id}: {e}", exc_info=True)
            raise StoreError()
        return BusinessSettingsService.policy_from_row(row)

    @staticmethod
    def serialize_policy(policy: BookingPolicy) -> Dict[str, Any]:
        return {
            "opening_hours": policy.opening_hours.model_dump(),
            "default_duration_minutes": policy.default_duration_minutes,
            "slot_granularity_minutes": policy.slot_granularity_minutes,
            "max_alternatives": policy.max_alternatives,
        }

    @staticmethod
    def update_settings(
            db: Session,
            business_id: UUID,
            update: BusinessSettingsUpdate
    ) -> BookingPolicy:
        """Create the settings row on first write, otherwise patch the given fields"""
        try:
            row = BusinessSettingsService._get_row(db, business_id)
            if row is None:
                row = BusinessSettings(business_id=business_id, opening_hours={})
                db.add(row)

            data = update.model_dump(exclude_unset=True)
            if "opening_hours" in data and update.opening_hours is not None:
                row.opening_hours = update.opening_hours.model_dump()
            for field_name in ("default_duration_minutes", "slot_granularity_minutes", "max_alternatives"):
                if field_name in data:
                    setattr(row, field_name, data[field_name])

            db.commit()
            db.refresh(row)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save settings for business {business_id}: {e}", exc_info=True)
            raise StoreError()

        logger.info(f"Updated booking settings for business {business_id}")
        return BusinessSettingsService.policy_from_row(row)
