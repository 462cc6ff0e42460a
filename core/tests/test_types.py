"""Tests for LogRecord."""

from datetime import datetime, timezone

import pytest

from usage_dashboard.types import LogRecord


class TestLogRecord:
    """Tests for the LogRecord dataclass."""

    def test_default_timestamp_is_aware(self):
        record = LogRecord(provider="openai", model="gpt-5")
        assert record.timestamp.tzinfo is not None

    def test_defaults(self):
        record = LogRecord(provider="openai", model="gpt-5")
        assert record.status == "success"
        assert record.total_tokens == 0
        assert record.cost == 0.0
        assert record.is_success

    def test_status_other_than_success(self):
        assert not LogRecord(provider="p", model="m", status="error").is_success
        assert not LogRecord(provider="p", model="m", status="Success").is_success

    def test_is_frozen(self):
        record = LogRecord(provider="p", model="m")
        with pytest.raises(AttributeError):
            record.cost = 1.0

    def test_to_dict(self):
        """to_dict() should use the logs table column names."""
        ts = datetime(2026, 1, 14, 10, 0, tzinfo=timezone.utc)
        record = LogRecord(
            provider="cloud", model="zai-glm-4.6", status="error",
            prompt_tokens=60, completion_tokens=40, total_tokens=100,
            cost=0.5, latency=2000, timestamp=ts,
        )
        assert record.to_dict() == {
            "timestamp": "2026-01-14T10:00:00+00:00",
            "provider": "cloud",
            "model": "zai-glm-4.6",
            "status": "error",
            "prompt_tokens": 60,
            "completion_tokens": 40,
            "total_tokens": 100,
            "cost": 0.5,
            "latency": 2000,
        }
