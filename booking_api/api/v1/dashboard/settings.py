# ============================================================================
# booking_api/api/v1/dashboard/settings.py
# Opening hours and booking policy
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from booking_api.api.dependencies import get_current_business, get_booking_policy, raise_http
from booking_api.config.database import get_db
from booking_api.core.exceptions import BookingError
from booking_api.models.business import Business
from booking_api.schemas.reservation import BusinessSettingsUpdate
from booking_api.services.business.booking_policy import BookingPolicy
from booking_api.services.business.business_settings_service import BusinessSettingsService

router = APIRouter(prefix="/settings", tags=["dashboard-settings"])


@router.get("")
async def get_business_settings(policy: BookingPolicy = Depends(get_booking_policy)):
    """Stored settings merged with defaults for every missing day or field"""
    return BusinessSettingsService.serialize_policy(policy)


@router.put("")
async def update_business_settings(
        data: BusinessSettingsUpdate,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    try:
        policy = BusinessSettingsService.update_settings(db, business.id, data)
    except BookingError as e:
        raise_http(e)
    return BusinessSettingsService.serialize_policy(policy)
