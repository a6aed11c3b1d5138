"""Shared fixtures: an in-memory database wired into the FastAPI app.

Environment overrides are applied before any application module is imported
so the settings object sees them.
"""
import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("WRITE_DATABASE_URL", "sqlite:///./test_meal_subscription.db")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.auth import Principal
from core.csrf import CSRF_HEADER_NAME
from core.enums import PlanLifecycle, Role
from core.security import create_access_token, hash_password
from database import models
from database.deps import get_db_read, get_db_write
from database.models import Base
from main import app

TEST_ENGINE = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=TEST_ENGINE)

DEFAULT_PASSWORD = "Str0ng!Pass"


@pytest.fixture(autouse=True)
def fresh_schema():
    """Recreate every table so each test starts from an empty database."""
    Base.metadata.drop_all(bind=TEST_ENGINE)
    Base.metadata.create_all(bind=TEST_ENGINE)
    yield


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """TestClient whose requests use the in-memory database."""

    def override_session():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_read] = override_session
    app.dependency_overrides[get_db_write] = override_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db, email="customer@example.com", role=Role.CUSTOMER, name="Test Customer",
              password=DEFAULT_PASSWORD):
    user = models.User(name=name, email=email, password_hash=hash_password(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_plan(db, price=30000, name="Diet Plan", active=True):
    plan = models.MealPlan(
        name=name,
        price=Decimal(str(price)),
        description="Healthy balanced meals for every day",
        features=["Fresh vegetables", "Lean proteins"],
        icon="🥗",
        lifecycle=PlanLifecycle.ACTIVE if active else PlanLifecycle.RETIRED,
    )
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


def principal_for(user):
    return Principal.from_user(user)


def bearer(user):
    return {"Authorization": f"Bearer {create_access_token(principal_for(user).to_claims())}"}


def csrf(client):
    """Fetch a CSRF token (the client keeps the cookie) and return the header."""
    token = client.get("/csrf-token").json()["csrfToken"]
    return {CSRF_HEADER_NAME: token}


def order_payload(plan_id, **overrides):
    payload = {
        "name": "Jane Doe",
        "phoneNumber": "081234567890",
        "planId": plan_id,
        "mealTypes": ["Breakfast", "Lunch"],
        "deliveryDays": ["Monday", "Wednesday", "Friday"],
        "allergies": "Peanuts",
    }
    payload.update(overrides)
    return payload
