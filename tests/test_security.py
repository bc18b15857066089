"""
Tests for password hashing and the auth rate limiter.
"""
import time

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from prospectflow.core.rate_limit import check_rate_limit, rate_limit_store
from prospectflow.core.security import hash_password, verify_password


def _request(ip: str) -> Request:
    return Request({"type": "http", "method": "POST", "path": "/auth/login", "headers": [], "client": (ip, 50000)})


def test_hash_and_verify_password():
    hashed = hash_password("testpass123")

    assert hashed.startswith("$2b$")
    assert verify_password("testpass123", hashed) is True
    assert verify_password("wrongpass123", hashed) is False


def test_verify_password_malformed_hash():
    assert verify_password("testpass123", "not-a-bcrypt-hash") is False
    assert verify_password("testpass123", None) is False


def test_rate_limit_drops_idle_clients():
    stale = time.time() - 120
    rate_limit_store["login:10.0.0.1"] = [stale, stale + 1]
    rate_limit_store["signup:10.0.0.1"] = [stale]

    check_rate_limit(_request("10.0.0.2"), "login", max_requests=5, window_seconds=60)

    assert "login:10.0.0.1" not in rate_limit_store
    assert len(rate_limit_store["login:10.0.0.2"]) == 1
    # Other scopes use their own window
    assert "signup:10.0.0.1" in rate_limit_store


def test_rate_limit_blocks_within_window():
    for _ in range(3):
        check_rate_limit(_request("10.0.0.3"), "login", max_requests=3, window_seconds=60)

    with pytest.raises(HTTPException) as exc:
        check_rate_limit(_request("10.0.0.3"), "login", max_requests=3, window_seconds=60)

    assert exc.value.status_code == 429
    assert len(rate_limit_store["login:10.0.0.3"]) == 3
