from clinicdesk.services.slot_lock import SLOT_TAKEN
from tests.helpers import next_weekday


def booking(doctor, patient, day, start_time="09:00", **extra):
    return {
        "doctor_id": doctor["id"],
        "patient_id": patient["id"],
        "appointment_date": day.isoformat(),
        "start_time": start_time,
        "reason": "Fever",
        **extra,
    }


async def available(client, headers, doctor, day):
    response = await client.get(
        f"/api/v1/schedules/doctor/{doctor['id']}/availability",
        params={"date": day.isoformat()},
        headers=headers,
    )
    return response.json()["available_slots"]


async def test_create_appointment(client, auth_headers, doctor, patient, schedule):
    monday = next_weekday(0)
    response = await client.post("/api/v1/appointments/", json=booking(doctor, patient, monday), headers=auth_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["appointment_code"] == "APT000001"
    assert data["end_time"] == "09:30"
    assert data["duration"] == 30
    assert data["status"] == "scheduled"
    assert data["source"] == "staff"

    assert await available(client, auth_headers, doctor, monday) == ["09:30"]

    response = await client.post(
        "/api/v1/appointments/", json=booking(doctor, patient, monday, "09:30"), headers=auth_headers
    )
    assert response.json()["appointment_code"] == "APT000002"


async def test_double_booking_is_rejected(client, auth_headers, doctor, patient, schedule):
    monday = next_weekday(0)
    await client.post("/api/v1/appointments/", json=booking(doctor, patient, monday), headers=auth_headers)

    response = await client.post("/api/v1/appointments/", json=booking(doctor, patient, monday), headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["detail"] == "Doctor already has an appointment at this time"


async def test_slot_capacity(client, auth_headers, doctor, patient, schedule):
    await client.post(
        "/api/v1/schedules/", json={"doctor_id": doctor["id"], "max_patients_per_slot": 2}, headers=auth_headers
    )
    monday = next_weekday(0)
    for _ in range(2):
        response = await client.post(
            "/api/v1/appointments/", json=booking(doctor, patient, monday), headers=auth_headers
        )
        assert response.status_code == 201

    response = await client.post("/api/v1/appointments/", json=booking(doctor, patient, monday), headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["detail"] == SLOT_TAKEN


async def test_cancelling_frees_the_slot(client, auth_headers, doctor, patient, schedule):
    monday = next_weekday(0)
    created = (await client.post(
        "/api/v1/appointments/", json=booking(doctor, patient, monday), headers=auth_headers
    )).json()

    response = await client.put(
        f"/api/v1/appointments/{created['id']}", json={"status": "cancelled"}, headers=auth_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["cancellation_reason"] == "Cancelled by clinic"
    assert data["cancelled_at"] is not None

    assert await available(client, auth_headers, doctor, monday) == ["09:00", "09:30"]


async def test_reopening_needs_a_free_slot(client, auth_headers, doctor, patient, schedule):
    monday = next_weekday(0)
    first = (await client.post(
        "/api/v1/appointments/", json=booking(doctor, patient, monday), headers=auth_headers
    )).json()
    await client.put(f"/api/v1/appointments/{first['id']}", json={"status": "cancelled"}, headers=auth_headers)
    await client.post("/api/v1/appointments/", json=booking(doctor, patient, monday), headers=auth_headers)

    response = await client.put(
        f"/api/v1/appointments/{first['id']}", json={"status": "scheduled"}, headers=auth_headers
    )
    assert response.status_code == 409


async def test_moving_an_appointment(client, auth_headers, doctor, patient, schedule):
    monday = next_weekday(0)
    created = (await client.post(
        "/api/v1/appointments/", json=booking(doctor, patient, monday), headers=auth_headers
    )).json()

    response = await client.put(
        f"/api/v1/appointments/{created['id']}", json={"start_time": "09:30"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["end_time"] == "10:00"
    assert await available(client, auth_headers, doctor, monday) == ["09:00"]


async def test_busy_slot_lock(client, auth_headers, clinic, doctor, patient, schedule, fake_redis):
    monday = next_weekday(0)
    key = f"slot:{clinic['tenant_id']}:{doctor['id']}:{monday.isoformat()}:09:00"
    fake_redis.store[key] = "another-request"

    response = await client.post("/api/v1/appointments/", json=booking(doctor, patient, monday), headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["detail"] == SLOT_TAKEN
    assert fake_redis.store[key] == "another-request"


async def test_lock_is_released(client, auth_headers, doctor, patient, schedule, fake_redis):
    await client.post("/api/v1/appointments/", json=booking(doctor, patient, next_weekday(0)), headers=auth_headers)
    assert not [key for key in fake_redis.store if key.startswith("slot:")]


async def test_appointment_past_midnight(client, auth_headers, doctor, patient):
    response = await client.post(
        "/api/v1/appointments/",
        json=booking(doctor, patient, next_weekday(0), "23:45"),
        headers=auth_headers,
    )
    assert response.status_code == 400


async def test_list_appointments(client, auth_headers, doctor, patient, schedule):
    monday = next_weekday(0)
    for start in ("09:30", "09:00"):
        await client.post(
            "/api/v1/appointments/", json=booking(doctor, patient, monday, start), headers=auth_headers
        )

    response = await client.get(
        "/api/v1/appointments/", params={"date": monday.isoformat(), "limit": 1}, headers=auth_headers
    )
    data = response.json()
    assert data["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}
    assert data["data"][0]["start_time"] == "09:00"

    response = await client.get("/api/v1/appointments/", params={"status": "cancelled"}, headers=auth_headers)
    assert response.json()["pagination"]["total"] == 0


async def test_delete_appointment(client, auth_headers, doctor, patient, schedule):
    created = (await client.post(
        "/api/v1/appointments/", json=booking(doctor, patient, next_weekday(0)), headers=auth_headers
    )).json()

    response = await client.delete(f"/api/v1/appointments/{created['id']}", headers=auth_headers)
    assert response.status_code == 200

    response = await client.get(f"/api/v1/appointments/{created['id']}", headers=auth_headers)
    assert response.status_code == 404


async def test_null_fields_leave_appointment_unchanged(client, auth_headers, doctor, patient, schedule):
    created = (await client.post(
        "/api/v1/appointments/", json=booking(doctor, patient, next_weekday(0)), headers=auth_headers
    )).json()

    response = await client.put(
        f"/api/v1/appointments/{created['id']}", json={"start_time": None}, headers=auth_headers
    )
    assert response.status_code == 200
    assert (response.json()["start_time"], response.json()["end_time"]) == ("09:00", "09:30")

    response = await client.put(
        f"/api/v1/appointments/{created['id']}", json={"status": None, "reason": None}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "scheduled"
    assert response.json()["reason"] == "Fever"


async def test_changing_duration_moves_end_time(client, auth_headers, doctor, patient, schedule):
    created = (await client.post(
        "/api/v1/appointments/", json=booking(doctor, patient, next_weekday(0)), headers=auth_headers
    )).json()

    response = await client.put(
        f"/api/v1/appointments/{created['id']}", json={"duration": 60}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["duration"] == 60
    assert response.json()["end_time"] == "10:00"
