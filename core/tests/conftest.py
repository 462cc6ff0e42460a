"""Shared test fixtures for pipeline tests."""

from datetime import datetime, timezone

import pytest

from usage_dashboard.assembler import DashboardAssembler
from usage_dashboard.source import InMemoryLogSource
from usage_dashboard.types import LogRecord

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed 'current' instant: Thursday 2026-01-15 12:00 UTC."""
    return NOW


@pytest.fixture
def round_trip_records():
    """Two rows whose model and provider names normalize to the same canonical names."""
    return [
        LogRecord(
            provider="cloud",
            model="zai-glm-4.6",
            status="success",
            prompt_tokens=60,
            completion_tokens=40,
            total_tokens=100,
            cost=0.5,
            latency=2000,
            timestamp=datetime(2026, 1, 14, 10, 0, tzinfo=timezone.utc),
        ),
        LogRecord(
            provider="OpenRouter",
            model="glm-4.6",
            status="error",
            prompt_tokens=40,
            completion_tokens=10,
            total_tokens=50,
            cost=0.1,
            latency=1000,
            timestamp=datetime(2026, 1, 14, 11, 0, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def make_assembler(now):
    """Build an assembler over fixed records at the fixed clock."""
    def _make(records, **kwargs):
        return DashboardAssembler(InMemoryLogSource(records), clock=lambda: now, **kwargs)
    return _make
