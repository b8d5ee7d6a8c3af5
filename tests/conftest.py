import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BOOKING_LOCK_BACKEND"] = "local"
os.environ["BOOKING_LOCK_TIMEOUT_SECONDS"] = "2"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import uuid
from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from booking_api.config.database import get_db
from booking_api.config.settings import get_settings
from booking_api.main import app
from booking_api.models import (
    Base, Business, BusinessSettings, BusinessStatus, StaffMember, StaffShift,
    ShiftException, Reservation, ReservationStatus, TENANT_RESOURCE,
)
from booking_api.services.api_key.api_key_service import APIKeyService
from booking_api.services.business.business_settings_service import BusinessSettingsService
from booking_api.utils.distributed_locks import LocalLock

# Monday
MONDAY = date(2026, 1, 5)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def reset_locks():
    LocalLock.reset()
    yield
    LocalLock.reset()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def business(db):
    business = Business(name="Salon Sonne", owner_user_id=uuid.uuid4(), status=BusinessStatus.ACTIVE)
    db.add(business)
    db.commit()
    db.refresh(business)
    return business


@pytest.fixture
def policy(db, business):
    return BusinessSettingsService.get_policy(db, business.id)


@pytest.fixture
def api_key(db, business):
    _, raw_key = APIKeyService(db).generate_key(business.id, "Voice Agent")
    return raw_key


@pytest.fixture
def auth_headers(business):
    return {"Authorization": f"Bearer {make_token(business.owner_user_id)}"}


def make_token(user_id) -> str:
    settings = get_settings()
    return jwt.encode({"sub": str(user_id)}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def add_settings(db, business_id, **fields) -> BusinessSettings:
    row = BusinessSettings(business_id=business_id, opening_hours=fields.pop("opening_hours", {}), **fields)
    db.add(row)
    db.commit()
    return row


def add_staff(db, business_id, name="Anna", is_active=True) -> StaffMember:
    staff = StaffMember(business_id=business_id, name=name, is_active=is_active)
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


def add_shift(db, staff, day_of_week, start, end, is_working=True) -> StaffShift:
    shift = StaffShift(
        business_id=staff.business_id,
        staff_member_id=staff.id,
        day_of_week=day_of_week,
        start_time=start,
        end_time=end,
        is_working=is_working,
    )
    db.add(shift)
    db.commit()
    return shift


def add_exception(db, staff, on, start, end, reason="Arzttermin") -> ShiftException:
    exception = ShiftException(
        business_id=staff.business_id,
        staff_member_id=staff.id,
        exception_date=on,
        start_time=start,
        end_time=end,
        reason=reason,
    )
    db.add(exception)
    db.commit()
    return exception


def add_reservation(db, business_id, on, start: time, duration_minutes=60, end: time = None,
                    status=ReservationStatus.CONFIRMED, staff=None) -> Reservation:
    reservation = Reservation(
        business_id=business_id,
        staff_member_id=staff.id if staff else None,
        resource_key=str(staff.id) if staff else TENANT_RESOURCE,
        reservation_date=on,
        reservation_time=start,
        end_time=end,
        duration_minutes=duration_minutes,
        status=status,
        customer_name="Max Mustermann",
        source="manual",
    )
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    return reservation
