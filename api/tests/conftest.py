"""Shared test fixtures for API tests."""

import os
from datetime import datetime, timezone

import pytest
from unittest.mock import MagicMock

# Set required env vars before importing the app
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")
os.environ.setdefault("DASHBOARD_API_KEY", "test-api-key")

from fastapi.testclient import TestClient
from main import app, API_KEY, get_assembler, get_db
from usage_dashboard.assembler import DashboardAssembler
from usage_dashboard.source import InMemoryLogSource

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _make_chain(rows=None):
    """Mocked Supabase query chain: table().select().gte().lte().order().range().execute()."""
    chain = MagicMock()
    for method in ("gte", "lte", "order", "range"):
        getattr(chain, method).return_value = chain
    chain.execute.return_value = MagicMock(data=rows or [])
    return chain


@pytest.fixture
def auth_headers():
    """Valid authorization headers."""
    return {"Authorization": f"Bearer {API_KEY}"}


@pytest.fixture
def make_chain():
    """Builder for mocked query chains."""
    return _make_chain


@pytest.fixture
def mock_db():
    """Mocked Supabase client returning no rows."""
    db = MagicMock()
    db.table.return_value.select.return_value = _make_chain()
    return db


@pytest.fixture
def client(mock_db):
    """Test client backed by the mocked Supabase client."""
    app.dependency_overrides[get_db] = lambda: mock_db
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def records_client():
    """Factory for a test client serving fixed records at a fixed clock."""
    def _make(records):
        assembler = DashboardAssembler(InMemoryLogSource(records), clock=lambda: NOW)
        app.dependency_overrides[get_assembler] = lambda: assembler
        return TestClient(app, raise_server_exceptions=False)

    yield _make
    app.dependency_overrides.clear()
