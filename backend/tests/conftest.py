"""
Shared pytest fixtures.

Database: in-memory SQLite shared through a StaticPool, schema created from
the ORM metadata for every test.
Redis: replaced with a MagicMock so no server is needed.
"""

import os
import uuid
from datetime import datetime
from typing import Generator
from unittest.mock import MagicMock

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["EVENTS_ENABLED"] = "true"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from vet_appointments.database import enable_sqlite_fk, get_db
from vet_appointments.main import app
from vet_appointments.models import Appointment, AppointmentStatus, Base
from vet_appointments.schemas.appointments import AppointmentCreate

VET_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
OTHER_VET_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")
CLIENT_ID = uuid.UUID("33333333-3333-3333-3333-333333333333")


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_fk)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Fresh session per test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine) -> Generator[TestClient, None, None]:
    """TestClient with get_db bound to the test engine."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============================================================================
# REDIS FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def mock_redis(monkeypatch) -> MagicMock:
    """Replace the Redis client everywhere it is used."""
    mock = MagicMock()
    mock.rpush.return_value = 1
    mock.ping.return_value = True
    monkeypatch.setattr("vet_appointments.services.events.redis_client", mock)
    monkeypatch.setattr("vet_appointments.main.redis_client", mock)
    return mock


# ============================================================================
# TEST DATA
# ============================================================================


def appointment_data(**overrides) -> dict:
    """Valid create payload (JSON-compatible)."""
    data = {
        "client_id": str(CLIENT_ID),
        "veterinarian_id": str(VET_ID),
        "pet_name": "Firulais",
        "pet_species": "dog",
        "pet_breed": "beagle",
        "pet_age": 4,
        "appointment_date": "2099-06-15T10:00:00",
        "type": "consultation",
        "reason": "Annual checkup",
        "client_name": "Ana Gomez",
        "client_email": "ana@example.com",
        "client_phone": "+573001234567",
        "veterinarian_name": "Dr. Ruiz",
        "cost": 45.5,
        "is_emergency": False,
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_create():
    """Factory for AppointmentCreate models."""

    def _make(**overrides) -> AppointmentCreate:
        return AppointmentCreate(**appointment_data(**overrides))

    return _make


@pytest.fixture
def add_appointment(db_session):
    """Insert an appointment row directly, bypassing the service guards."""

    def _add(
        appointment_date: datetime,
        veterinarian_id: uuid.UUID = VET_ID,
        status: AppointmentStatus = AppointmentStatus.SCHEDULED,
    ) -> Appointment:
        obj = Appointment(
            client_id=CLIENT_ID,
            veterinarian_id=veterinarian_id,
            pet_name="Michi",
            pet_species="cat",
            pet_age=2,
            appointment_date=appointment_date,
            type="consultation",
            status=status.value,
            client_name="Ana Gomez",
            client_email="ana@example.com",
            veterinarian_name="Dr. Ruiz",
        )
        db_session.add(obj)
        db_session.commit()
        db_session.refresh(obj)
        return obj

    return _add
