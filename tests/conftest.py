import os
import sys

PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app import models  # noqa: F401  register models with metadata
from app.main import app
from app.dependencies.permissions import UserSession, get_current_user
from app.models.enums import UserRole
from app.services.household_service import HouseholdService


test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(test_engine)
    Base.metadata.create_all(test_engine)
    yield
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def login_as():
    """Make every request run as the given session"""

    def _login(user_id, name="User", email=None, role=UserRole.HELPER.value, household_id=None):
        session = UserSession(
            id=user_id,
            email=email or f"{user_id}@example.com",
            name=name,
            role=role,
            household_id=household_id,
        )
        app.dependency_overrides[get_current_user] = lambda: session
        return session

    return _login


@pytest.fixture
def household(db):
    """A manager household with two helpers; returns ids and the invite code"""
    service = HouseholdService(db)
    created = service.create_household("mgr", "Morgan", "morgan@example.com").data
    for helper_id, name in (("h1", "Hana"), ("h2", "Hugo")):
        service.join_household(
            created["invite_code"],
            helper_id,
            f"{helper_id}@example.com",
            name,
        )
    return {
        "household_id": created["household_id"],
        "invite_code": created["invite_code"],
        "manager_id": "mgr",
        "helper_ids": ["h1", "h2"],
    }
