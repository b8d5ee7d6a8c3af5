"""Health checks and monitoring endpoints"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from booking_api.config.database import get_db
from booking_api.config.redis import get_redis
from booking_api.config.settings import get_settings

health_router = APIRouter()


@health_router.get("/")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "reservation-booking-api"}


@health_router.get("/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """Detailed health check with dependencies"""
    checks = {
        "api": "healthy",
        "database": "unknown",
        "redis": "unknown",
        "overall": "unknown"
    }

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        checks["database"] = f"unhealthy: {str(e)}"

    # Redis only matters when it backs the booking lock
    if get_settings().BOOKING_LOCK_BACKEND == "redis":
        try:
            redis_client = await get_redis()
            await redis_client.ping()
            checks["redis"] = "healthy"
            await redis_client.close()
        except Exception as e:
            checks["redis"] = f"unhealthy: {str(e)}"
    else:
        checks["redis"] = "not used"

    component_states = [checks["api"], checks["database"], checks["redis"]]
    if all(state in ("healthy", "not used") for state in component_states):
        checks["overall"] = "healthy"
    else:
        checks["overall"] = "degraded"

    return checks
