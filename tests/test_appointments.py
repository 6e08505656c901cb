from datetime import date, datetime, timedelta, timezone

import pytest

from barbershop.models import Appointment, utcnow
from barbershop.slots import SLOT_CATALOG

NOW = datetime(2024, 6, 1, 9, 0)


@pytest.fixture
def frozen_now(monkeypatch):
    monkeypatch.setattr("barbershop.booking.shop_now", lambda: NOW)
    monkeypatch.setattr("barbershop.slots.shop_now", lambda: NOW)
    return NOW


def booking_payload(**overrides):
    payload = {
        "serviceId": 1,
        "barberId": 1,
        "date": "2024-06-10",
        "time": "2:00 PM",
        "timeOfDay": "evening",  # derived server side, ignored
        "firstName": "Jordan",
        "lastName": "Reyes",
        "email": "jordan@example.com",
        "phone": "555-0142",
        "notes": "Skin fade please",
        "totalPrice": "1.00",  # never trusted
    }
    payload.update(overrides)
    return payload


def test_create_appointment(client, frozen_now):
    resp = client.post("/api/appointments", json=booking_payload())
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["status"] == "pending"
    assert body["date"] == "2024-06-10"
    assert body["time"] == "2:00 PM"
    assert body["timeOfDay"] == "afternoon"
    assert body["totalPrice"] == "35.00"  # Classic Haircut
    assert body["stripePaymentId"] is None
    assert body["barberId"] == 1 and body["serviceId"] == 1


def test_string_datetime_and_plain_date_persist_to_same_day(client, session, frozen_now):
    first = client.post(
        "/api/appointments",
        json=booking_payload(date="2024-06-01T09:00:00Z", time="5:00 PM"),
    )
    second = client.post(
        "/api/appointments",
        json=booking_payload(date=date(2024, 6, 1).isoformat(), time="5:30 PM", barberId=2),
    )
    assert first.status_code == 201, first.text
    assert second.status_code == 201, second.text
    assert first.json()["date"] == second.json()["date"] == "2024-06-01"

    stored = session.get(Appointment, first.json()["id"])
    assert stored.date == date(2024, 6, 1)


def test_missing_fields_are_a_400_with_error_list(client, frozen_now):
    payload = booking_payload()
    del payload["email"]
    del payload["date"]
    resp = client.post("/api/appointments", json=payload)
    assert resp.status_code == 400
    body = resp.json()
    fields = {tuple(e["loc"])[-1] for e in body["errors"]}
    assert {"email", "date"} <= fields


@pytest.mark.parametrize("overrides", [
    {"date": "not-a-date"},
    {"time": "14:00"},
    {"email": "not-an-email"},
    {"firstName": ""},
])
def test_malformed_fields_are_rejected(client, frozen_now, overrides):
    resp = client.post("/api/appointments", json=booking_payload(**overrides))
    assert resp.status_code == 400


def test_time_outside_catalog_is_rejected(client, frozen_now):
    resp = client.post("/api/appointments", json=booking_payload(time="8:00 PM"))
    assert resp.status_code == 400
    assert "not a bookable time slot" in resp.json()["detail"]


@pytest.mark.parametrize("overrides, detail", [
    ({"serviceId": 999}, "Service not found"),
    ({"barberId": 999}, "Barber not found"),
])
def test_unknown_service_or_barber(client, frozen_now, overrides, detail):
    resp = client.post("/api/appointments", json=booking_payload(**overrides))
    assert resp.status_code == 404
    assert resp.json()["detail"] == detail


def test_double_booking_is_refused(client, frozen_now):
    assert client.post("/api/appointments", json=booking_payload()).status_code == 201
    resp = client.post("/api/appointments", json=booking_payload(email="other@example.com"))
    assert resp.status_code == 409

    # same time with another barber is fine
    assert client.post("/api/appointments", json=booking_payload(barberId=2)).status_code == 201


def test_lead_time_is_enforced_on_creation(client, monkeypatch):
    monkeypatch.setattr("barbershop.booking.shop_now", lambda: datetime(2024, 6, 10, 8, 0))
    too_soon = client.post("/api/appointments", json=booking_payload(time="2:00 PM"))
    assert too_soon.status_code == 409
    assert "8 hours" in too_soon.json()["detail"]

    assert client.post("/api/appointments", json=booking_payload(time="4:00 PM")).status_code == 201


def test_time_slots_omit_booked_time(client, frozen_now):
    client.post("/api/appointments", json=booking_payload(time="2:00 PM"))

    resp = client.get("/api/time-slots", params={"date": "2024-06-10", "barberId": 1})
    assert resp.status_code == 200
    slots = resp.json()
    assert "2:00 PM" not in slots
    assert slots == [s for s in SLOT_CATALOG if s != "2:00 PM"]

    other = client.get("/api/time-slots", params={"date": "2024-06-10", "barberId": 2}).json()
    assert "2:00 PM" in other


def test_time_slots_grouped(client, frozen_now):
    resp = client.get("/api/time-slots/grouped", params={"date": "2024-06-10", "barberId": 1})
    assert resp.status_code == 200
    grouped = resp.json()
    assert grouped["morning"][0] == "9:00 AM"
    assert grouped["afternoon"][0] == "12:00 PM"
    assert grouped["evening"] == ["5:00 PM", "5:30 PM"]


def test_time_slots_same_day_respects_lead_time(client, monkeypatch):
    monkeypatch.setattr("barbershop.slots.shop_now", lambda: datetime(2024, 6, 10, 8, 0))
    slots = client.get("/api/time-slots", params={"date": "2024-06-10", "barberId": 1}).json()
    assert slots == ["4:00 PM", "4:30 PM", "5:00 PM", "5:30 PM"]


def test_time_slots_unknown_barber_is_empty(client, frozen_now):
    resp = client.get("/api/time-slots", params={"date": "2024-06-10", "barberId": 999})
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.parametrize("params", [
    {"date": "2024-06-10"},
    {"barberId": 1},
    {"date": "tomorrow", "barberId": 1},
    {"date": "2024-06-10", "barberId": "abc"},
])
def test_time_slots_require_valid_params(client, params):
    assert client.get("/api/time-slots", params=params).status_code == 400


def test_stale_pending_appointment_releases_its_slot(client, session, frozen_now):
    created = client.post("/api/appointments", json=booking_payload()).json()
    appt = session.get(Appointment, created["id"])
    appt.created_at = utcnow() - timedelta(hours=1)
    session.add(appt)
    session.commit()

    slots = client.get("/api/time-slots", params={"date": "2024-06-10", "barberId": 1}).json()
    assert "2:00 PM" in slots
    assert client.get(f"/api/appointments/{created['id']}").json()["status"] == "cancelled"

    # and the slot can be booked again
    assert client.post("/api/appointments", json=booking_payload()).status_code == 201


def test_get_appointment(client, frozen_now):
    created = client.post("/api/appointments", json=booking_payload()).json()
    resp = client.get(f"/api/appointments/{created['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["firstName"] == "Jordan"
    assert body["status"] == "pending"
    # contact details stay with the admin listing
    for private in ("email", "phone", "lastName", "notes", "stripePaymentId"):
        assert private not in body
    assert client.get("/api/appointments/999").status_code == 404


def test_list_appointments_requires_admin(client, frozen_now, customer_headers):
    assert client.get("/api/appointments").status_code == 401
    assert client.get("/api/appointments", headers=customer_headers).status_code == 403


def test_list_appointments_filters(client, frozen_now, admin_headers):
    client.post("/api/appointments", json=booking_payload(time="9:00 AM"))
    client.post("/api/appointments", json=booking_payload(time="9:00 AM", barberId=2))
    client.post("/api/appointments", json=booking_payload(time="9:00 AM", date="2024-06-11"))

    everything = client.get("/api/appointments", headers=admin_headers).json()
    assert len(everything) == 3

    barber_one = client.get("/api/appointments", params={"barberId": 1}, headers=admin_headers).json()
    assert {a["date"] for a in barber_one} == {"2024-06-10", "2024-06-11"}

    on_day = client.get(
        "/api/appointments", params={"barberId": 1, "date": "2024-06-10"}, headers=admin_headers
    ).json()
    assert len(on_day) == 1

    confirmed = client.get("/api/appointments", params={"status": "confirmed"}, headers=admin_headers).json()
    assert confirmed == []


def test_status_changes(client, frozen_now, admin_headers):
    appt_id = client.post("/api/appointments", json=booking_payload()).json()["id"]
    url = f"/api/appointments/{appt_id}/status"

    resp = client.patch(url, json={"status": "confirmed"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "confirmed"

    resp = client.patch(url, json={"status": "completed"}, headers=admin_headers)
    assert resp.json()["status"] == "completed"

    # completed is terminal
    resp = client.patch(url, json={"status": "pending"}, headers=admin_headers)
    assert resp.status_code == 409

    resp = client.patch(url, json={"status": "bogus"}, headers=admin_headers)
    assert resp.status_code == 400


def test_cancelled_slot_can_be_rebooked(client, frozen_now, admin_headers):
    appt_id = client.post("/api/appointments", json=booking_payload()).json()["id"]
    client.patch(f"/api/appointments/{appt_id}/status", json={"status": "cancelled"}, headers=admin_headers)

    assert client.post("/api/appointments", json=booking_payload()).status_code == 201


def test_status_change_requires_admin(client, frozen_now, customer_headers):
    appt_id = client.post("/api/appointments", json=booking_payload()).json()["id"]
    resp = client.patch(
        f"/api/appointments/{appt_id}/status", json={"status": "cancelled"}, headers=customer_headers
    )
    assert resp.status_code == 403


def test_concurrent_booking_of_same_slot_is_a_conflict(client, monkeypatch, frozen_now):
    assert client.post("/api/appointments", json=booking_payload()).status_code == 201

    # the other request checked availability before the first one committed
    monkeypatch.setattr("barbershop.booking.booked_times", lambda session, barber_id, on_date: [])
    resp = client.post("/api/appointments", json=booking_payload(email="other@example.com"))
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Time slot is no longer available"

    # the losing request leaves the session usable
    assert client.post("/api/appointments", json=booking_payload(time="3:00 PM")).status_code == 201


def test_created_at_is_stored_as_utc(client, session, frozen_now):
    created = client.post("/api/appointments", json=booking_payload()).json()
    assert created["createdAt"]

    stored = session.get(Appointment, created["id"])
    created_at = stored.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    assert abs(utcnow() - created_at) < timedelta(minutes=5)
