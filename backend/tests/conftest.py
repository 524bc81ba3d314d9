"""Shared fixtures for the transactions API tests."""
import os

# Importing transactions_api.main builds a module-level app; keep it off PostgreSQL.
os.environ.setdefault("TXN_DB_URL", "sqlite://")

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from transactions_api.config import Settings
from transactions_api.db import Base, build_engine, build_session_factory, session_scope
from transactions_api.errors import ZoneResolutionError
from transactions_api.main import create_app
from transactions_api.models import Transaction


class FixedTimezoneLookup:
    """Coordinates -> zone id from a fixed table, so tests don't load timezonefinder data."""

    ZONES = {
        (40.7128, -74.006): "America/New_York",
        (50.4501, 30.5234): "Europe/Kiev",
        (35.6762, 139.6503): "Asia/Tokyo",
        (0.0, -45.0): "Etc/GMT+3",
    }

    def __init__(self):
        self.calls = []

    def resolve(self, latitude, longitude):
        self.calls.append((latitude, longitude))
        try:
            return self.ZONES[(latitude, longitude)]
        except KeyError:
            raise ZoneResolutionError(f"No time zone found for coordinates ({latitude}, {longitude}).")


def make_transaction(
    transaction_id="T1",
    transaction_date=datetime(2024, 1, 1, 2, 0, 0),
    timezone="America/New_York",
    status="Pending",
    name="Alice",
    amount=Decimal("10.00"),
):
    return Transaction(
        transaction_id=transaction_id,
        name=name,
        email=f"{name.lower()}@example.com",
        amount=amount,
        transaction_date=transaction_date,
        client_location="40.7128, -74.006",
        timezone=timezone,
        status=status,
    )


@pytest.fixture
def session_factory():
    """Fresh in-memory SQLite database with the schema created."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def session(session_factory):
    with session_scope(session_factory) as session:
        yield session


@pytest.fixture
def timezone_lookup():
    return FixedTimezoneLookup()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url="sqlite://",
        export_dir=str(tmp_path / "export"),
        create_tables=True,
    )


@pytest.fixture
def client(settings, timezone_lookup):
    app = create_app(settings, timezone_lookup=timezone_lookup)
    with TestClient(app) as client:
        yield client
