import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from clinicdesk.core.redis import redis_client
from clinicdesk.db import models  # noqa: F401
from clinicdesk.db.session import get_session
from clinicdesk.main import app


class FakeRedis:
    """In-memory stand-in for the handful of redis commands the app issues."""

    def __init__(self):
        self.store = {}

    async def set(self, key, value, ex=None, nx=False):
        if nx and key in self.store:
            return None
        self.store[key] = value
        return True

    async def get(self, key):
        return self.store.get(key)

    async def delete(self, *keys):
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    async def eval(self, script, numkeys, key, owner):
        # Mirrors the compare-and-delete release script
        if self.store.get(key) == owner:
            del self.store[key]
            return 1
        return 0

    async def close(self):
        pass


@pytest.fixture
def fake_redis(monkeypatch):
    backend = FakeRedis()
    monkeypatch.setattr(redis_client, "redis", backend)
    return backend


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory, fake_redis):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def clinic(client):
    response = await client.post(
        "/api/v1/clinics/",
        json={"name": "Lakeside Clinic", "city": "Kochi", "phone": "0484123456", "email": "desk@lakeside.test"},
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
async def admin_token(client, clinic):
    credentials = clinic["admin_credentials"]
    response = await client.post(
        "/api/v1/auth/login",
        json={
            "clinic_slug": clinic["clinic"]["slug"],
            "username": credentials["username"],
            "password": credentials["password"],
        },
    )
    assert response.status_code == 200
    return response.json()["access_token"]


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
async def doctor(client, auth_headers):
    response = await client.post(
        "/api/v1/doctors/",
        json={"name": "Dr. Meera Nair", "specialty": "General Medicine"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def weekly_schedule():
    working = [{"start_time": "09:00", "end_time": "10:00"}]
    days = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
    return [
        {"day": day, "is_working": day not in ("saturday", "sunday"), "slots": working if day not in ("saturday", "sunday") else []}
        for day in days
    ]


@pytest.fixture
async def schedule(client, auth_headers, doctor, weekly_schedule):
    response = await client.post(
        "/api/v1/schedules/",
        json={
            "doctor_id": doctor["id"],
            "weekly_schedule": weekly_schedule,
            "slot_duration": 30,
            "buffer_time": 0,
            "max_patients_per_slot": 1,
            "advance_booking_days": 30,
            "accepts_online_booking": True,
            "consultation_fee": 500,
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
async def patient(client, auth_headers):
    response = await client.post(
        "/api/v1/patients/",
        json={"first_name": "Anil", "last_name": "Kumar", "phone": "9847000001", "email": "anil@example.test"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()
