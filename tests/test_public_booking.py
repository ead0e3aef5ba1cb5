import pytest

from clinicdesk.services import public_booking_service
from clinicdesk.services.slot_lock import SLOT_TAKEN
from tests.helpers import next_weekday


@pytest.fixture
async def booking_page(client, auth_headers, clinic, schedule):
    response = await client.put(
        f"/api/v1/clinics/{clinic['tenant_id']}/public-booking",
        json={
            "booking_enabled": True,
            "booking_slug": "Lakeside",
            "booking_clinic_name": "Lakeside Family Clinic",
            "require_phone_number": False,
            "terms_and_conditions": "Arrive 10 minutes early.",
        },
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["booking_slug"] == "lakeside"
    return "lakeside"


def booking_request(doctor, day, time="09:00", **extra):
    return {
        "doctor_id": doctor["id"],
        "date": day.isoformat(),
        "time": time,
        "patient_name": "Riya Thomas",
        "patient_email": "Riya@Example.test",
        "agreed_to_terms": True,
        **extra,
    }


async def test_disabled_page_is_not_found(client, clinic):
    response = await client.get("/api/v1/public-booking/lakeside")
    assert response.status_code == 404
    assert response.json()["detail"] == "Clinic not found or public booking is disabled"


async def test_enabling_requires_a_slug(client, auth_headers, clinic):
    response = await client.put(
        f"/api/v1/clinics/{clinic['tenant_id']}/public-booking",
        json={"booking_enabled": True},
        headers=auth_headers,
    )
    assert response.status_code == 400


async def test_booking_page_info(client, auth_headers, clinic, doctor, booking_page):
    response = await client.get(f"/api/v1/public-booking/{booking_page}")
    assert response.status_code == 200
    data = response.json()
    assert data["clinic"]["name"] == "Lakeside Family Clinic"
    assert data["clinic"]["captcha_site_key"] is None
    assert [d["id"] for d in data["doctors"]] == [doctor["id"]]
    assert data["doctors"][0]["consultation_fee"] == 500

    await client.put(
        f"/api/v1/clinics/{clinic['tenant_id']}/public-booking",
        json={"show_doctor_fees": False},
        headers=auth_headers,
    )
    response = await client.get(f"/api/v1/public-booking/{booking_page}")
    assert response.json()["doctors"][0]["consultation_fee"] is None


async def test_public_slots(client, doctor, booking_page):
    response = await client.get(
        f"/api/v1/public-booking/{booking_page}/slots",
        params={"doctor_id": doctor["id"], "date": next_weekday(0).isoformat()},
    )
    assert response.status_code == 200
    assert response.json()["available_slots"] == ["09:00", "09:30"]


async def test_public_slots_when_online_booking_is_off(client, auth_headers, doctor, schedule, booking_page):
    await client.put(
        f"/api/v1/schedules/{schedule['id']}", json={"accepts_online_booking": False}, headers=auth_headers
    )
    monday = next_weekday(0)

    response = await client.get(
        f"/api/v1/public-booking/{booking_page}/slots",
        params={"doctor_id": doctor["id"], "date": monday.isoformat()},
    )
    data = response.json()
    assert data["available_slots"] == []
    assert data["message"] == "Doctor is not accepting online appointments"

    response = await client.post(f"/api/v1/public-booking/{booking_page}/book", json=booking_request(doctor, monday))
    assert response.status_code == 400
    assert response.json()["detail"] == "Doctor is not accepting online appointments"

    # Staff still see the day
    response = await client.get(
        f"/api/v1/schedules/doctor/{doctor['id']}/availability",
        params={"date": monday.isoformat()},
        headers=auth_headers,
    )
    assert response.json()["available_slots"] == ["09:00", "09:30"]


async def test_book_online(client, auth_headers, doctor, booking_page):
    monday = next_weekday(0)
    response = await client.post(f"/api/v1/public-booking/{booking_page}/book", json=booking_request(doctor, monday))
    assert response.status_code == 201
    data = response.json()
    assert data["appointment_code"] == "APT000001"
    assert data["appointment"] == {"date": monday.isoformat(), "time": "09:00", "end_time": "09:30", "duration": 30}
    assert data["confirmation_message"]

    response = await client.get(f"/api/v1/appointments/{data['appointment_id']}", headers=auth_headers)
    appointment = response.json()
    assert appointment["source"] == "online"

    response = await client.get(f"/api/v1/patients/{appointment['patient_id']}", headers=auth_headers)
    patient = response.json()
    assert patient["patient_code"] == "PAT000001"
    assert (patient["first_name"], patient["last_name"]) == ("Riya", "Thomas")
    assert patient["email"] == "riya@example.test"

    response = await client.get(
        f"/api/v1/public-booking/{booking_page}/slots",
        params={"doctor_id": doctor["id"], "date": monday.isoformat()},
    )
    assert response.json()["available_slots"] == ["09:30"]


async def test_returning_patient_is_matched_by_email(client, auth_headers, doctor, booking_page):
    monday = next_weekday(0)
    first = (await client.post(f"/api/v1/public-booking/{booking_page}/book", json=booking_request(doctor, monday))).json()
    second = (await client.post(
        f"/api/v1/public-booking/{booking_page}/book", json=booking_request(doctor, monday, "09:30")
    )).json()

    first_appointment = (await client.get(f"/api/v1/appointments/{first['appointment_id']}", headers=auth_headers)).json()
    second_appointment = (await client.get(f"/api/v1/appointments/{second['appointment_id']}", headers=auth_headers)).json()
    assert first_appointment["patient_id"] == second_appointment["patient_id"]


async def test_taken_slot(client, doctor, booking_page):
    monday = next_weekday(0)
    await client.post(f"/api/v1/public-booking/{booking_page}/book", json=booking_request(doctor, monday))

    response = await client.post(f"/api/v1/public-booking/{booking_page}/book", json=booking_request(doctor, monday))
    assert response.status_code == 409
    assert response.json()["detail"] == SLOT_TAKEN


async def test_booking_a_time_outside_the_schedule(client, doctor, booking_page):
    response = await client.post(
        f"/api/v1/public-booking/{booking_page}/book", json=booking_request(doctor, next_weekday(0), "11:00")
    )
    assert response.status_code == 409


async def test_booking_a_day_off(client, doctor, booking_page):
    response = await client.post(
        f"/api/v1/public-booking/{booking_page}/book", json=booking_request(doctor, next_weekday(5))
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Doctor is not available on this day"


async def test_required_fields(client, doctor, booking_page):
    monday = next_weekday(0)

    response = await client.post(
        f"/api/v1/public-booking/{booking_page}/book", json=booking_request(doctor, monday, patient_email=None)
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Email is required"

    response = await client.post(
        f"/api/v1/public-booking/{booking_page}/book", json=booking_request(doctor, monday, agreed_to_terms=False)
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "You must agree to the terms and conditions"


async def test_captcha(client, auth_headers, clinic, doctor, booking_page, monkeypatch):
    await client.put(
        f"/api/v1/clinics/{clinic['tenant_id']}/public-booking",
        json={"captcha_enabled": True, "captcha_site_key": "site", "captcha_secret_key": "secret"},
        headers=auth_headers,
    )
    calls = []

    async def fake_verify(token, secret_key):
        calls.append((token, secret_key))
        return token == "solved"

    monkeypatch.setattr(public_booking_service, "verify_captcha", fake_verify)
    monday = next_weekday(0)
    url = f"/api/v1/public-booking/{booking_page}/book"

    response = await client.post(url, json=booking_request(doctor, monday))
    assert response.status_code == 400
    assert response.json()["detail"] == "Please complete the CAPTCHA verification"

    response = await client.post(url, json=booking_request(doctor, monday, captcha_token="guess"))
    assert response.status_code == 400
    assert response.json()["detail"] == "CAPTCHA verification failed. Please try again."

    response = await client.post(url, json=booking_request(doctor, monday, captcha_token="solved"))
    assert response.status_code == 201
    assert calls == [("guess", "secret"), ("solved", "secret")]
