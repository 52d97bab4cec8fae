"""Pytest configuration and shared fixtures."""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from inventory_api.app.main import create_app
from inventory_api.app.services.registry import ServiceRegistry


class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def services(clock):
    """Empty stores sharing one audit log and the fake clock."""
    return ServiceRegistry.build(clock=clock)


@pytest.fixture
def item_service(services):
    return services.items


@pytest.fixture
def product_service(services):
    return services.products


@pytest.fixture
def order_service(services):
    return services.orders


@pytest.fixture
def user_service(services):
    return services.users


@pytest.fixture
def review_service(services):
    return services.reviews


@pytest.fixture
def app(services):
    return create_app(services=services)


@pytest.fixture
def test_client(app):
    """FastAPI test client over empty stores."""
    return TestClient(app)


@pytest.fixture
def seeded_client():
    """Test client over stores loaded with the sample records."""
    return TestClient(create_app(seed=True))
