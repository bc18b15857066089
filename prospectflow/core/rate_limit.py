"""
Simple in-memory rate limiter for the authentication endpoints.
"""
import logging
import time
from typing import Dict, List
from fastapi import Request, HTTPException, status

logger = logging.getLogger(__name__)

# {"<scope>:<ip>": [timestamps]}
rate_limit_store: Dict[str, List[float]] = {}


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # First IP in the proxy chain is the client
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


def prune_rate_limit_store(scope: str, cutoff: float) -> None:
    """Drop keys of a scope whose newest request is older than the cutoff."""
    prefix = f"{scope}:"
    stale = [
        key for key, timestamps in rate_limit_store.items()
        if key.startswith(prefix) and (not timestamps or timestamps[-1] <= cutoff)
    ]
    for key in stale:
        del rate_limit_store[key]


def check_rate_limit(request: Request, scope: str, max_requests: int = 10, window_seconds: int = 60) -> None:
    """
    Check if a client has exceeded the rate limit for a scope.

    Raises:
        HTTPException: 429 if rate limit exceeded
    """
    key = f"{scope}:{get_client_ip(request)}"
    now = time.time()

    cutoff = now - window_seconds
    recent = [ts for ts in rate_limit_store.get(key, []) if ts > cutoff]

    request_count = len(recent)
    if request_count >= max_requests:
        logger.warning(f"Rate limit exceeded for {key} ({request_count} requests in {window_seconds}s)")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds."
        )

    recent.append(now)
    rate_limit_store[key] = recent
    prune_rate_limit_store(scope, now - window_seconds)


def rate_limit(scope: str, max_requests: int = 10, window_seconds: int = 60):
    """Dependency factory applying check_rate_limit to a route."""
    def limiter(request: Request) -> None:
        check_rate_limit(request, scope, max_requests, window_seconds)

    return limiter
