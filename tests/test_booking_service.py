import asyncio
from datetime import date, time

import pytest
from sqlalchemy.exc import OperationalError

from booking_api.core.exceptions import ConflictError, StoreError, ValidationError
from booking_api.models import Reservation, ReservationStatus
from booking_api.services.booking.booking_service import BookingService, BookingDetails
from booking_api.services.scheduling.availability_service import AvailabilityService
from booking_api.services.scheduling.conflict_resolver import AvailabilityResult
from booking_api.config.settings import get_settings
from booking_api.utils.distributed_locks import LocalLock, LockNotAcquired, distributed_lock
from tests.conftest import MONDAY, add_reservation, add_shift, add_staff


def book(db, business, policy, start, **kwargs):
    return asyncio.run(BookingService.book_appointment(db, business.id, policy, MONDAY, start, **kwargs))


def live_count(db, business):
    return db.query(Reservation).filter(
        Reservation.business_id == business.id,
        Reservation.status != ReservationStatus.CANCELLED,
    ).count()


def test_books_free_slot(db, business, policy):
    reservation = book(
        db, business, policy, time(10, 0),
        details=BookingDetails(customer_name="Erika Muster", party_size=2),
    )

    assert reservation.id is not None
    assert reservation.status == ReservationStatus.CONFIRMED
    assert reservation.duration_minutes == 60
    assert reservation.end_time == time(11, 0)
    assert reservation.resource_key == "*"
    assert reservation.customer_name == "Erika Muster"


def test_taken_slot_raises_conflict_with_alternatives(db, business, policy):
    add_reservation(db, business.id, MONDAY, time(10, 0), duration_minutes=90)

    with pytest.raises(ConflictError) as exc:
        book(db, business, policy, time(10, 0))

    assert exc.value.status_code == 409
    assert exc.value.alternatives == ["09:00", "12:00", "13:00", "14:00", "15:00"]
    assert live_count(db, business) == 1


def test_cancelled_reservation_does_not_block(db, business, policy):
    add_reservation(db, business.id, MONDAY, time(19, 0), status=ReservationStatus.CANCELLED)

    reservation = book(db, business, policy, time(19, 0))
    assert reservation.status == ReservationStatus.CONFIRMED


def test_concurrent_identical_bookings_create_one_reservation(db, business, policy):
    async def race():
        attempts = [
            BookingService.book_appointment(db, business.id, policy, MONDAY, time(14, 0))
            for _ in range(5)
        ]
        return await asyncio.gather(*attempts, return_exceptions=True)

    results = asyncio.run(race())

    booked = [r for r in results if isinstance(r, Reservation)]
    conflicts = [r for r in results if isinstance(r, ConflictError)]
    assert len(booked) == 1
    assert len(conflicts) == 4
    assert live_count(db, business) == 1


def test_unique_index_violation_is_reported_as_conflict(db, business, policy, monkeypatch):
    """A stale availability read must still not produce a second live booking"""
    add_reservation(db, business.id, MONDAY, time(10, 0))
    original = AvailabilityService.check_availability
    calls = []

    def stale_then_real(*args, **kwargs):
        calls.append(1)
        if len(calls) == 1:
            result = original(*args, **kwargs)
            return AvailabilityResult(available=True, requested=result.requested)
        return original(*args, **kwargs)

    monkeypatch.setattr(AvailabilityService, "check_availability", staticmethod(stale_then_real))

    with pytest.raises(ConflictError) as exc:
        book(db, business, policy, time(10, 0))

    assert "11:00" in exc.value.alternatives
    assert "10:00" not in exc.value.alternatives
    assert live_count(db, business) == 1


def test_store_failure_is_not_a_conflict(db, business, policy, monkeypatch):
    def broken_commit():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", broken_commit)

    with pytest.raises(StoreError) as exc:
        book(db, business, policy, time(10, 0))
    assert not isinstance(exc.value, ConflictError)
    assert exc.value.status_code == 500


def test_busy_lock_is_a_store_error(db, business, policy, monkeypatch):
    async def never_acquired(self):
        return False

    monkeypatch.setattr("booking_api.utils.distributed_locks.LocalLock.acquire", never_acquired)

    with pytest.raises(StoreError) as exc:
        book(db, business, policy, time(10, 0))
    assert exc.value.status_code == 503


def test_cannot_create_completed_reservation(db, business, policy):
    with pytest.raises(ValidationError):
        book(db, business, policy, time(10, 0), status=ReservationStatus.COMPLETED)


def test_existing_booking_uses_its_own_duration(db, business, policy):
    # 30-minute booking recorded before the tenant default changed
    add_reservation(db, business.id, MONDAY, time(10, 0), duration_minutes=30)

    reservation = book(db, business, policy, time(10, 30))
    assert reservation.reservation_time == time(10, 30)


class TestStaffScoped:

    def test_other_staff_bookings_do_not_block(self, db, business, policy):
        anna = add_staff(db, business.id, "Anna")
        ben = add_staff(db, business.id, "Ben")
        add_shift(db, anna, 1, time(9, 0), time(17, 0))
        add_reservation(db, business.id, MONDAY, time(10, 0), staff=ben)

        reservation = book(db, business, policy, time(10, 0), staff_member_id=anna.id)
        assert reservation.staff_member_id == anna.id
        assert reservation.resource_key == str(anna.id)

    def test_staff_booking_outside_shift_conflicts(self, db, business, policy):
        anna = add_staff(db, business.id, "Anna")
        add_shift(db, anna, 1, time(9, 0), time(12, 0))

        with pytest.raises(ConflictError) as exc:
            book(db, business, policy, time(14, 0), staff_member_id=anna.id)
        assert exc.value.alternatives == ["09:00", "10:00", "11:00"]

    def test_same_staff_same_slot_conflicts(self, db, business, policy):
        anna = add_staff(db, business.id, "Anna")
        add_shift(db, anna, 1, time(9, 0), time(17, 0))
        add_reservation(db, business.id, MONDAY, time(10, 0), staff=anna)

        with pytest.raises(ConflictError):
            book(db, business, policy, time(10, 0), staff_member_id=anna.id)


def test_lock_not_acquired_message():
    error = LockNotAcquired("lock:booking:x:2026-01-05", 2)
    assert "lock:booking:x:2026-01-05" in str(error)


class TestAcrossMidnight:
    TUESDAY = date(2026, 1, 6)

    def test_late_request_sees_next_morning_booking(self, db, business, policy):
        add_reservation(db, business.id, self.TUESDAY, time(0, 0))

        result = AvailabilityService.check_availability(
            db, business.id, policy, MONDAY, time(23, 30), duration_minutes=90
        )
        assert result.available is False

        with pytest.raises(ConflictError):
            book(db, business, policy, time(23, 30), duration_minutes=90)
        assert live_count(db, business) == 1

    def test_previous_evening_booking_blocks_early_slot(self, db, business, policy):
        add_reservation(db, business.id, MONDAY, time(23, 0), duration_minutes=120)

        result = AvailabilityService.check_availability(db, business.id, policy, self.TUESDAY, time(0, 30))
        assert result.available is False

    def test_adjacent_days_share_a_lock_key(self, business):
        monday = BookingService.lock_keys(business.id, MONDAY)
        tuesday = BookingService.lock_keys(business.id, self.TUESDAY)

        assert set(monday) & set(tuesday) == {BookingService.lock_key(business.id, MONDAY)}
        assert tuesday == sorted(tuesday)

    def test_next_day_booking_waits_for_previous_day_lock(self, db, business, policy, monkeypatch):
        monkeypatch.setattr(get_settings(), "BOOKING_LOCK_TIMEOUT_SECONDS", 0.05)

        async def book_while_monday_is_held():
            async with distributed_lock(BookingService.lock_key(business.id, MONDAY)):
                await BookingService.book_appointment(db, business.id, policy, self.TUESDAY, time(0, 0))

        with pytest.raises(StoreError) as exc:
            asyncio.run(book_while_monday_is_held())
        assert exc.value.status_code == 503
        assert live_count(db, business) == 0


def test_duration_longer_than_a_day_is_rejected(db, business, policy):
    with pytest.raises(ValidationError):
        book(db, business, policy, time(10, 0), duration_minutes=24 * 60 + 1)


def test_local_locks_are_dropped_after_use(db, business, policy):
    book(db, business, policy, time(10, 0))
    assert LocalLock._locks == {}
    assert LocalLock._users == {}

    async def contended():
        async with distributed_lock("lock:booking:held"):
            assert not await LocalLock("lock:booking:held", timeout=0.05).acquire()
            assert LocalLock._users == {"lock:booking:held": 1}

    asyncio.run(contended())
    assert LocalLock._locks == {}


def test_availability_check_is_repeatable(db, business, policy):
    add_reservation(db, business.id, MONDAY, time(10, 0), duration_minutes=90)

    first = AvailabilityService.check_availability(db, business.id, policy, MONDAY, time(10, 30))
    second = AvailabilityService.check_availability(db, business.id, policy, MONDAY, time(10, 30))

    assert first == second
    assert first.available is False
