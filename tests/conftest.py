"""Pytest configuration and fixtures for testing."""

import datetime as dt

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.adapters.fx import CurrencyService, RateCache
from backend.app.db import models  # noqa: F401  registers tables
from backend.app.db.base import Base
from backend.app.db.trips import create_trip
from backend.app.models.itinerary import TripCreate

TEST_RATES_EUR = {"EUR": 1.0, "USD": 1.1, "GBP": 0.85, "JPY": 160.0}


@pytest.fixture(scope="function")
def test_db_engine():
    """Create a test database engine with in-memory SQLite."""
    # StaticPool keeps a single connection so the TestClient worker thread
    # sees the same in-memory database as the test body
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_db_engine):
    """Create a test database session."""
    SessionFactory = sessionmaker(bind=test_db_engine, expire_on_commit=False)
    session = SessionFactory()

    yield session

    session.close()


@pytest.fixture
def sample_trip(test_session: Session):
    """A three-day trip (2024-03-01 .. 2024-03-03) with no activities."""
    trip = create_trip(
        test_session,
        TripCreate(
            title="Summer in Lisbon",
            destination="Lisbon",
            start_date=dt.date(2024, 3, 1),
            end_date=dt.date(2024, 3, 3),
            budget=1000,
            currency="EUR",
        ),
    )
    test_session.commit()
    return trip


def rates_transport(rates_by_base: dict[str, dict[str, float]] | None = None) -> httpx.MockTransport:
    """Mock rates API answering ``GET /<BASE>`` from EUR-anchored test rates."""

    def handler(request: httpx.Request) -> httpx.Response:
        base = request.url.path.rstrip("/").rsplit("/", 1)[-1]
        if rates_by_base is not None:
            rates = rates_by_base.get(base)
        else:
            divisor = TEST_RATES_EUR.get(base)
            rates = {k: v / divisor for k, v in TEST_RATES_EUR.items()} if divisor else None
        if rates is None:
            return httpx.Response(404, json={"error": "unknown base"})
        return httpx.Response(200, json={"base": base, "rates": rates})

    return httpx.MockTransport(handler)


@pytest.fixture
def currency_service() -> CurrencyService:
    """Currency service backed by a mocked rates API and no redis."""
    return CurrencyService(
        cache=RateCache(ttl_seconds=3600),
        http_client=httpx.Client(transport=rates_transport()),
        base_url="https://rates.test/latest",
        timeout_s=1.0,
    )


@pytest.fixture
def client(test_session, currency_service):
    """Create a test client with database session and currency overrides."""
    from backend.app.adapters.fx import get_currency_service
    from backend.app.db.session import get_db_session
    from backend.app.main import app

    def override_get_session():
        try:
            yield test_session
        finally:
            pass  # Don't close the session, it's managed by the test

    app.dependency_overrides[get_db_session] = override_get_session
    app.dependency_overrides[get_currency_service] = lambda: currency_service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
