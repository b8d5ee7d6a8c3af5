from datetime import time

from booking_api.models import Reservation, ReservationStatus
from tests.conftest import MONDAY, add_reservation, add_staff, add_shift

URL = "/api/v1/reservations"


def intake(client, api_key, **body):
    return client.post(URL, json=body, headers={"x-api-key": api_key})


def test_creates_pending_reservation(client, db, business, api_key):
    response = intake(
        client, api_key,
        customer_name=" Erika Muster ",
        customer_phone="+49301234567",
        reservation_date="2026-01-05",
        reservation_time="18:00:00",
        end_time="20:00",
        notes="Fensterplatz",
    )

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True

    reservation = db.query(Reservation).filter(Reservation.business_id == business.id).one()
    assert str(reservation.id) == data["reservation_id"]
    assert reservation.status == ReservationStatus.PENDING
    assert reservation.source == "n8n"
    assert reservation.customer_name == "Erika Muster"
    assert reservation.party_size == 2
    assert reservation.duration_minutes == 120
    assert reservation.end_time == time(20, 0)


def test_missing_fields(client, api_key):
    response = intake(client, api_key, customer_name="Erika Muster", reservation_date="2026-01-05")
    assert response.status_code == 400
    assert "reservation_time" in response.json()["error"]


def test_conflict_returns_alternatives(client, db, business, api_key):
    add_reservation(db, business.id, MONDAY, time(10, 0))

    response = intake(
        client, api_key,
        customer_name="Erika Muster", reservation_date="2026-01-05", reservation_time="10:30",
    )

    assert response.status_code == 409
    data = response.json()
    assert data["code"] == "ConflictError"
    assert data["alternatives"][:2] == ["09:00", "11:00"]


def test_pending_reservation_blocks_slot(client, api_key):
    body = dict(customer_name="A", reservation_date="2026-01-05", reservation_time="16:00")

    assert intake(client, api_key, **body).status_code == 201
    assert intake(client, api_key, **body).status_code == 409


def test_staff_reservation(client, db, business, api_key):
    anna = add_staff(db, business.id, "Anna")
    add_shift(db, anna, 1, time(9, 0), time(17, 0))

    response = intake(
        client, api_key,
        customer_name="Erika", reservation_date="2026-01-05", reservation_time="09:00",
        staff_member_name="Anna",
    )

    assert response.status_code == 201
    reservation = db.query(Reservation).one()
    assert reservation.staff_member_id == anna.id


def test_requires_api_key(client):
    response = client.post(URL, json={"customer_name": "A"})
    assert response.status_code == 401
