"""
Tests for signup, login and profile endpoints.
"""
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.db.models.user_settings import UserSettings
from prospectflow.db.models.subscription import Subscription
from conftest import signup_and_login


def test_signup_success(client, db: Session):
    """Signup creates the user with default settings and a free plan."""
    response = client.post(
        "/auth/signup",
        json={"full_name": "Test User", "email": "Test_Signup@Example.com", "password": "testpass123"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User created successfully"
    assert "user_id" in body

    user = db.query(User).filter(User.email == "test_signup@example.com").first()
    assert user is not None
    assert user.full_name == "Test User"

    settings = db.query(UserSettings).filter(UserSettings.user_id == user.id).first()
    assert settings.follow_up_cadence_days == [7, 14, 21]
    assert settings.usage_preference == "job_hunt"

    subscription = db.query(Subscription).filter(Subscription.user_id == user.id).first()
    assert subscription.tier == "free"
    assert subscription.status == "active"


def test_signup_duplicate_email(client):
    """Test signup with duplicate email returns 409."""
    payload = {"full_name": "Existing User", "email": "dup@example.com", "password": "password123"}
    assert client.post("/auth/signup", json=payload).status_code == 201

    response = client.post("/auth/signup", json={**payload, "full_name": "New User"})

    assert response.status_code == 409
    assert "Email already registered" in response.json()["detail"]


def test_signup_missing_fields(client):
    response = client.post("/auth/signup", json={"email": "test@example.com", "password": "testpass123"})
    assert response.status_code == 422


def test_signup_short_password(client):
    response = client.post(
        "/auth/signup",
        json={"full_name": "Test User", "email": "short@example.com", "password": "1234567"},
    )
    assert response.status_code == 422
    assert "at least 8 characters" in response.text


def test_signup_password_over_72_bytes(client):
    """19 four-byte emoji is 76 bytes, over the bcrypt limit."""
    response = client.post(
        "/auth/signup",
        json={"full_name": "Test User", "email": "long@example.com", "password": "\U0001F680" * 19},
    )
    assert response.status_code == 422
    assert "72 bytes or fewer" in response.text


def test_signup_password_exactly_72_bytes(client):
    response = client.post(
        "/auth/signup",
        json={"full_name": "Test User", "email": "exact@example.com", "password": "a" * 72},
    )
    assert response.status_code == 201


def test_signup_rate_limited(client):
    for i in range(5):
        response = client.post(
            "/auth/signup",
            json={"full_name": "User", "email": f"user{i}@example.com", "password": "testpass123"},
        )
        assert response.status_code == 201

    response = client.post(
        "/auth/signup",
        json={"full_name": "User", "email": "user5@example.com", "password": "testpass123"},
    )
    assert response.status_code == 429


def test_login_success(client):
    headers = signup_and_login(client, "login@example.com")
    assert headers["Authorization"].startswith("Bearer ")


def test_login_wrong_password(client):
    signup_and_login(client, "login@example.com")

    response = client.post(
        "/auth/login",
        data={"username": "login@example.com", "password": "wrongpass123"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_login_unknown_user(client):
    response = client.post(
        "/auth/login",
        data={"username": "nobody@example.com", "password": "testpass123"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 401


def test_get_and_update_profile(client, auth_headers):
    response = client.get("/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == "owner@example.com"
    assert response.json()["full_name"] == "Olivia Owner"

    response = client.put("/auth/me", json={"full_name": "  Olivia O.  "}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["full_name"] == "Olivia O."


def test_blank_names_rejected(client, auth_headers):
    response = client.post(
        "/auth/signup",
        json={"full_name": "   ", "email": "blank@example.com", "password": "testpass123"},
    )
    assert response.status_code == 422

    for full_name in ("", "   "):
        response = client.put("/auth/me", json={"full_name": full_name}, headers=auth_headers)
        assert response.status_code == 422

    assert client.get("/auth/me", headers=auth_headers).json()["full_name"] == "Olivia Owner"


def test_profile_requires_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"}).status_code == 401
