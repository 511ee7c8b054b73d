"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment variables are set before any app import so settings pick up
the in-memory adapters and a shared HS256 secret for session tokens.
"""

import itertools
import os
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("IDENTITY_PROVIDER", "memory")
os.environ.setdefault("IDENTITY_SESSION_TOKEN_KEY", "test-session-secret")
os.environ.setdefault("IDENTITY_SESSION_TOKEN_ALGORITHMS", "HS256")
os.environ.setdefault("APP_RATE_LIMIT_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.adapters.identity.in_memory import InMemoryIdentityProvider
from app.adapters.posts.in_memory import InMemoryPostStore
from app.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from app.api.deps import get_post_service, get_profile_service
from app.main import app
from app.services.post_service import PostService
from app.services.profile_service import ProfileService

SESSION_SECRET = "test-session-secret"

ALICE = {
    "id": "user_alice",
    "username": "alice",
    "image_url": "https://img.example.com/alice.png",
    "email_addresses": [{"email_address": "alice@example.com"}],
    "private_metadata": {"plan": "pro"},
}
BOB = {
    "id": "user_bob",
    "username": "bob",
    "profile_image_url": "https://img.example.com/bob.png",
    "email_addresses": [{"email_address": "bob@example.com"}],
}


def make_session_token(user_id: str, **claims) -> str:
    payload = {"sub": user_id, "exp": int(time.time()) + 3600, **claims}
    return jwt.encode(payload, SESSION_SECRET, algorithm="HS256")


@pytest.fixture
def identity() -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider([ALICE, BOB])


@pytest.fixture
def store() -> InMemoryPostStore:
    """Post store whose clock advances one second per post."""
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ticks = itertools.count()
    return InMemoryPostStore(clock=lambda: start + timedelta(seconds=next(ticks)))


@pytest.fixture
def limiter_clock() -> Mock:
    return Mock(return_value=1_000.0)


@pytest.fixture
def rate_limiter(limiter_clock: Mock) -> InMemorySlidingWindowRateLimiter:
    return InMemorySlidingWindowRateLimiter(limit=3, window_seconds=60, clock=limiter_clock)


@pytest.fixture
def post_service(store, identity, rate_limiter) -> PostService:
    return PostService(store=store, identity=identity, rate_limiter=rate_limiter)


@pytest.fixture
def client(post_service: PostService, identity: InMemoryIdentityProvider):
    """Test client wired to the in-memory fakes above."""
    app.dependency_overrides[get_post_service] = lambda: post_service
    app.dependency_overrides[get_profile_service] = lambda: ProfileService(identity=identity)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Factory for Authorization headers carrying a valid session token."""

    def _make(user_id: str = ALICE["id"], **claims) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_session_token(user_id, **claims)}"}

    return _make
