# ============================================================================
# FILE: booking_api/api/dependencies.py
# Authentication dependencies for API keys and identity-provider tokens
# ============================================================================
from dataclasses import dataclass, field
from typing import Optional, List
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from booking_api.config.database import get_db
from booking_api.config.settings import get_settings
from booking_api.core.exceptions import BookingError
from booking_api.models.business import Business
from booking_api.services.api_key.api_key_service import APIKeyService
from booking_api.services.business.booking_policy import BookingPolicy
from booking_api.services.business.business_settings_service import BusinessSettingsService

# ============================================================================
# Security Schemes
# ============================================================================

jwt_security = HTTPBearer(
    scheme_name="JWT Bearer Token",
    description="Access token issued by the identity provider"
)


@dataclass
class Identity:
    """Authenticated dashboard user as asserted by the identity provider"""
    user_id: UUID
    roles: List[str] = field(default_factory=list)


# ============================================================================
# JWT Token Functions
# ============================================================================

def verify_access_token(token: str) -> dict:
    """
    Verify and decode an identity-provider access token.

    Raises:
        HTTPException: If token is invalid or expired
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False},
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not validate credentials: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )


def identity_from_token(token: str) -> Identity:
    payload = verify_access_token(token)

    try:
        user_id = UUID(payload.get("sub") or "")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user ID in token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    roles = payload.get("roles") or []
    if payload.get("role"):
        roles = [payload["role"], *roles]

    return Identity(user_id=user_id, roles=list(roles))


# ============================================================================
# JWT Authentication Dependencies
# ============================================================================

async def get_current_identity(
        credentials: HTTPAuthorizationCredentials = Depends(jwt_security)
) -> Identity:
    return identity_from_token(credentials.credentials)


async def optional_identity(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(
            HTTPBearer(auto_error=False)
        )
) -> Optional[Identity]:
    """Identity if a valid bearer token was sent, None if no token was sent."""
    if not credentials:
        return None
    return identity_from_token(credentials.credentials)


async def get_current_business(
        identity: Identity = Depends(get_current_identity),
        db: Session = Depends(get_db)
) -> Business:
    """
    Tenant owned by the authenticated user.

    Usage in routes:
        @router.get("/staff")
        async def list_staff(business: Business = Depends(get_current_business)):
            ...
    """
    business = db.query(Business).filter(Business.owner_user_id == identity.user_id).first()

    if business is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User not associated with a business"
        )

    if not business.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Customer account inactive"
        )

    return business


async def get_booking_policy(
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
) -> BookingPolicy:
    return BusinessSettingsService.get_policy(db, business.id)


# ============================================================================
# API Key Dependencies
# ============================================================================

async def get_api_key_service(db: Session = Depends(get_db)) -> APIKeyService:
    """Dependency to get APIKeyService instance."""
    return APIKeyService(db)


def raise_http(error: BookingError):
    """Re-raise a domain error as the HTTPException dashboard routes return"""
    detail = error.to_dict()
    raise HTTPException(status_code=error.status_code, detail=detail)
