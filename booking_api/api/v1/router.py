"""
API v1 router setup
Organized into: api_key (integrations) and dashboard (JWT) routes
"""
from fastapi import APIRouter

from booking_api.api.v1.api_key import availability, voice_agent, reservations as api_reservations
from booking_api.api.v1.dashboard import staff, reservations, settings

api_v1_router = APIRouter()

# ============================================================================
# API KEY ROUTES (voice agent, workflow automation)
# ============================================================================
api_v1_router.include_router(availability.router, tags=["API Key - Availability"])
api_v1_router.include_router(voice_agent.router, tags=["API Key - Voice Agent"])
api_v1_router.include_router(api_reservations.router, tags=["API Key - Reservations"])

# ============================================================================
# DASHBOARD ROUTES (identity-provider JWT required)
# ============================================================================
api_v1_router.include_router(staff.router, prefix="/dashboard", tags=["Dashboard"])
api_v1_router.include_router(reservations.router, prefix="/dashboard", tags=["Dashboard"])
api_v1_router.include_router(settings.router, prefix="/dashboard", tags=["Dashboard"])


@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    Shows the structure of all API routes organized by authentication type.
    """
    return {
        "version": "1.0",
        "authentication": {
            "api_key": "x-api-key header (check-availability, reservations) or api_key body field (voice-agent-calendar)",
            "dashboard": "JWT Bearer token issued by the identity provider",
        }
    }
