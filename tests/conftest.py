"""Shared fixtures for URL Shortener Service tests."""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from shorturls.core.registry import Registry, get_registry
from shorturls.main import app


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def registry(clock):
    """Create an empty registry driven by the fake clock."""
    return Registry(clock=clock)


@pytest.fixture
def client(registry):
    """Create a test client backed by the test registry."""
    app.dependency_overrides[get_registry] = lambda: registry

    original_lifespan = app.router.lifespan_context

    # Skip the default lifespan, which would build its own registry
    @asynccontextmanager
    async def test_lifespan(app):
        yield

    app.router.lifespan_context = test_lifespan

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client

    app.router.lifespan_context = original_lifespan
    app.dependency_overrides.clear()
