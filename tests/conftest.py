"""
Shared fixtures: an in-memory database per test and authenticated clients.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from prospectflow.main import app
from prospectflow.db.base import Base
import prospectflow.db.models  # noqa: F401
from prospectflow.db.models.user import User
from prospectflow.core.auth_dependency import get_db
from prospectflow.core.plan_limits import get_plan
from prospectflow.core.rate_limit import rate_limit_store
from prospectflow.services import ai_service, billing_service
from prospectflow.services.subscription_service import activate_plan

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def fresh_database(monkeypatch):
    """Empty schema, empty rate limiter and no external services for every test."""
    Base.metadata.create_all(bind=engine)
    rate_limit_store.clear()
    monkeypatch.setattr(ai_service, "OPENAI_API_KEY", None)
    monkeypatch.setattr(billing_service, "STRIPE_SECRET_KEY", None)
    monkeypatch.setattr(billing_service, "STRIPE_WEBHOOK_SECRET", None)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    """Database session fixture."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


def signup_and_login(client: TestClient, email: str, full_name: str = "Test User", password: str = "testpass123") -> dict:
    """Create an account and return Authorization headers for it."""
    response = client.post(
        "/auth/signup",
        json={"full_name": full_name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text

    response = client.post(
        "/auth/login",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return signup_and_login(client, "owner@example.com", full_name="Olivia Owner")


@pytest.fixture
def other_headers(client):
    return signup_and_login(client, "intruder@example.com", full_name="Ivan Intruder")


def make_premium(db, email: str, plan_id: str = "premium-1m") -> None:
    """Put a user on an active premium plan."""
    user = db.query(User).filter(User.email == email).first()
    activate_plan(db, user.id, get_plan(plan_id))
    db.commit()


def create_opening(client: TestClient, headers: dict, **overrides) -> dict:
    payload = {
        "company_name": "Acme Corp",
        "role_title": "Backend Engineer",
        "contacts": [{"name": "Rita Recruiter", "email": "rita@acme-example.com"}],
        "initial_email_date": "2026-03-02",
    }
    payload.update(overrides)
    response = client.post("/job-openings", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
