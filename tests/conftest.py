"""Shared fixtures: in-memory SQLite database, seeded users/schedule/services, HTTP client"""
import os

# Configure the app for tests before any detailing module reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["NOTIFICATIONS_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from detailing.api.dependencies import get_current_user
from detailing.config.database import get_db
from detailing.main import app
from detailing.models import (
    Appointment,
    Base,
    BusinessHours,
    Service,
    User,
    UserRole,
    Vehicle,
)

MONDAY = "2025-06-02"
TUESDAY = "2025-06-03"
SUNDAY = "2025-06-01"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin(db):
    user = User(external_id="idp|admin", name="Ada Admin", email="admin@example.com", role=UserRole.ADMIN)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def client_user(db):
    user = User(
        external_id="idp|client",
        name="Casey Client",
        email="casey@example.com",
        phone="+15555550100",
        role=UserRole.CLIENT,
        street="12 Elm St",
        city="Springfield",
        state="IL",
        zip="62701",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def other_client(db):
    user = User(external_id="idp|other", name="Olive Other", email="olive@example.com", role=UserRole.CLIENT)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def monday_hours(db):
    """Open Monday (day 1) 07:00-20:00, closed every other day."""
    hours = BusinessHours(day_of_week=1, start_time="07:00", end_time="20:00", is_active=True)
    db.add(hours)
    db.commit()
    return hours


@pytest.fixture
def services(db):
    wash = Service(
        name="Exterior Wash",
        description="Hand wash and dry",
        base_price=40.0,
        base_price_small=30.0,
        base_price_medium=40.0,
        base_price_large=55.0,
        duration=60,
    )
    interior = Service(
        name="Interior Detail",
        description="Vacuum, shampoo, wipe-down",
        base_price=80.0,
        duration=90,
    )
    db.add_all([wash, interior])
    db.commit()
    db.refresh(wash)
    db.refresh(interior)
    return {"wash": wash, "interior": interior}


@pytest.fixture
def vehicle(db, client_user):
    car = Vehicle(user_id=client_user.id, year=2020, make="Honda", model="Civic", size="small")
    db.add(car)
    db.commit()
    db.refresh(car)
    return car


@pytest.fixture
def make_appointment(db):
    """Insert an appointment row directly, bypassing availability checks."""

    def _make(user, scheduled_date, scheduled_time="09:00", duration=60, status="pending",
              total_price=100.0, service_ids=None):
        appointment = Appointment(
            user_id=user.id,
            vehicle_ids=[],
            service_ids=[str(sid) for sid in (service_ids or [])],
            scheduled_date=scheduled_date,
            scheduled_time=scheduled_time,
            duration=duration,
            street="1 Main St",
            city="Springfield",
            state="IL",
            zip="62701",
            status=status,
            total_price=total_price,
            created_by=user.id,
        )
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    return _make


@pytest.fixture
def api(db):
    """
    TestClient bound to the test session. Call api.act_as(user) to choose the
    authenticated caller; without it every protected route returns 401.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    client = TestClient(app)

    def act_as(user):
        app.dependency_overrides[get_current_user] = lambda: user

    client.act_as = act_as
    yield client
    app.dependency_overrides.clear()
