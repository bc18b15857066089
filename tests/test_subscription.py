"""
Tests for effective tier, plan periods and the subscription summary.
"""
from datetime import datetime, timedelta, timezone

import pytest

from prospectflow.db.models.user import User
from prospectflow.db.models.company import Company
from prospectflow.db.models.subscription import Subscription
from prospectflow.core.plan_limits import get_plan, TIER_FREE, TIER_PREMIUM
from prospectflow.services.subscription_service import (
    add_months,
    compute_new_period,
    effective_tier,
    time_left_message,
)
from conftest import make_premium

NOW = datetime(2026, 3, 10, 12, 0, 0)


def _subscription(tier=TIER_PREMIUM, status="active", start=None, expiry=None):
    return Subscription(user_id=1, tier=tier, status=status, plan_start_date=start, plan_expiry_date=expiry)


@pytest.mark.parametrize("start,months,expected", [
    (datetime(2026, 1, 31), 1, datetime(2026, 2, 28)),
    (datetime(2024, 1, 31), 1, datetime(2024, 2, 29)),
    (datetime(2026, 3, 15), 6, datetime(2026, 9, 15)),
    (datetime(2026, 11, 30), 3, datetime(2027, 2, 28)),
    (datetime(2026, 5, 31), 12, datetime(2027, 5, 31)),
])
def test_add_months_clamps_day(start, months, expected):
    assert add_months(start, months) == expected


def test_effective_tier():
    future = NOW + timedelta(days=5)
    past = NOW - timedelta(days=1)

    assert effective_tier(None, NOW) == TIER_FREE
    assert effective_tier(_subscription(expiry=future), NOW) == TIER_PREMIUM
    assert effective_tier(_subscription(expiry=past), NOW) == TIER_FREE
    assert effective_tier(_subscription(status="cancelled", expiry=future), NOW) == TIER_FREE
    assert effective_tier(_subscription(expiry=None), NOW) == TIER_FREE
    assert effective_tier(_subscription(tier=TIER_FREE, expiry=future), NOW) == TIER_FREE


def test_effective_tier_accepts_aware_expiry():
    aware = datetime(2026, 3, 11, tzinfo=timezone.utc)
    assert effective_tier(_subscription(expiry=aware), NOW) == TIER_PREMIUM


def test_new_period_starts_now_without_active_premium():
    start, expiry = compute_new_period(None, get_plan("premium-6m"), NOW)
    assert start == NOW
    assert expiry == datetime(2026, 9, 10, 12, 0, 0)

    expired = _subscription(start=datetime(2025, 1, 1), expiry=datetime(2026, 1, 1))
    start, expiry = compute_new_period(expired, get_plan("premium-1m"), NOW)
    assert start == NOW
    assert expiry == datetime(2026, 4, 10, 12, 0, 0)


def test_new_period_extends_active_premium():
    active = _subscription(start=datetime(2026, 2, 1), expiry=datetime(2026, 4, 1))

    start, expiry = compute_new_period(active, get_plan("premium-12m"), NOW)

    assert start == datetime(2026, 2, 1)
    assert expiry == datetime(2027, 4, 1)


@pytest.mark.parametrize("expiry,days,text", [
    (NOW + timedelta(days=12, hours=1), 12, "12 days left"),
    (NOW + timedelta(days=1, hours=2), 1, "1 day left"),
    (NOW + timedelta(hours=5), 0, "Expires today"),
    (NOW - timedelta(hours=5), -1, "Expired"),
])
def test_time_left_message(expiry, days, text):
    assert time_left_message(expiry, NOW) == (days, text)


def test_summary_for_free_user(client, auth_headers, db):
    user = db.query(User).filter(User.email == "owner@example.com").first()
    db.add_all([Company(user_id=user.id, name=f"Company {i}") for i in range(3)])
    db.commit()

    response = client.get("/billing/summary", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["plan_name"] == "Free Plan"
    assert body["is_premium"] is False
    assert body["time_left_text"] is None
    assert body["usage"]["companies"] == {"used": 3, "limit": 25, "over_limit": False}
    assert body["usage"]["job_openings"]["limit"] == 30


def test_summary_for_premium_user(client, auth_headers, db):
    make_premium(db, "owner@example.com", "premium-6m")

    response = client.get("/billing/summary", headers=auth_headers)

    body = response.json()
    assert body["plan_name"] == "Premium Plan"
    assert body["effective_tier"] == TIER_PREMIUM
    assert body["days_left"] > 150
    assert body["time_left_text"].endswith("days left")
    assert body["usage"]["contacts"]["limit"] is None


def test_expired_premium_counts_as_free(client, auth_headers, db):
    user = db.query(User).filter(User.email == "owner@example.com").first()
    subscription = db.query(Subscription).filter(Subscription.user_id == user.id).first()
    subscription.tier = TIER_PREMIUM
    subscription.plan_expiry_date = datetime.utcnow() - timedelta(days=1)
    db.commit()

    body = client.get("/billing/summary", headers=auth_headers).json()

    assert body["tier"] == TIER_PREMIUM
    assert body["effective_tier"] == TIER_FREE
    assert body["plan_name"] == "Free Plan"


def test_over_limit_flag_after_downgrade(client, auth_headers, db):
    user = db.query(User).filter(User.email == "owner@example.com").first()
    db.add_all([Company(user_id=user.id, name=f"Company {i}") for i in range(26)])
    db.commit()

    body = client.get("/billing/summary", headers=auth_headers).json()

    assert body["usage"]["companies"] == {"used": 26, "limit": 25, "over_limit": True}


def test_activate_free_plan(client, auth_headers, db):
    response = client.post("/billing/activate-free", headers=auth_headers)
    assert response.status_code == 409
    assert "already on the Free Plan" in response.json()["detail"]

    user = db.query(User).filter(User.email == "owner@example.com").first()
    subscription = db.query(Subscription).filter(Subscription.user_id == user.id).first()
    subscription.tier = TIER_PREMIUM
    subscription.plan_expiry_date = datetime.utcnow() - timedelta(days=1)
    db.commit()

    response = client.post("/billing/activate-free", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["tier"] == TIER_FREE

    response = client.get("/billing/subscription", headers=auth_headers)
    assert response.json()["tier"] == TIER_FREE
    assert response.json()["status"] == "active"


def test_activate_free_keeps_active_premium(client, auth_headers, db):
    make_premium(db, "owner@example.com", "premium-12m")
    expiry_before = client.get("/billing/subscription", headers=auth_headers).json()["plan_expiry_date"]

    response = client.post("/billing/activate-free", headers=auth_headers)

    assert response.status_code == 409
    assert "still active" in response.json()["detail"]
    assert client.get("/billing/summary", headers=auth_headers).json()["effective_tier"] == TIER_PREMIUM
    assert client.get("/billing/subscription", headers=auth_headers).json()["plan_expiry_date"] == expiry_before
