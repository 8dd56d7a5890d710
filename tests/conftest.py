"""Shared fixtures for building clients against a fake transport."""

from __future__ import annotations

from typing import Any

import pytest

from amwal_payments import AmwalClient, ClientConfig, RateLimiter

from .fakes import API_URL, PUBLIC_KEY, SECRET_KEY, FakeSession, RecordingSleep


@pytest.fixture
def limiter() -> RateLimiter:
    return RateLimiter()


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_client(limiter, sleeper):
    def _make(session: FakeSession, **options: Any) -> AmwalClient:
        options.setdefault("environment", "test")
        options.setdefault("api_url", API_URL)
        config = ClientConfig.build(secret_key=SECRET_KEY, public_key=PUBLIC_KEY, **options)
        return AmwalClient(config, session=session, rate_limiter=limiter, sleep=sleeper)

    return _make
