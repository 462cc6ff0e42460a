"""Type definitions for the usage dashboard pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class LogRecord:
    """A single LLM API call as stored in the logs table."""

    provider: str
    model: str
    status: str = "success"
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cost: float = 0.0
    latency: int = 0  # milliseconds
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict:
        """Convert to a row dict using the logs table column names."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "provider": self.provider,
            "model": self.model,
            "status": self.status,
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
            "cost": self.cost,
            "latency": self.latency,
        }


# --- Aggregate rows ---
# Built fresh for every dashboard request and never persisted.

@dataclass
class SummaryTotals:
    """Window-wide sums."""
    requests: int = 0
    total_tokens: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    cost: float = 0.0
    latency: int = 0
    successes: int = 0


@dataclass
class BucketTotals:
    """Sums for one trend bucket ("HH:00" or "MM-DD")."""
    date: str
    prompt: int = 0
    completion: int = 0
    cost: float = 0.0
    requests: int = 0


@dataclass
class ProviderTotals:
    provider: str
    tokens: int = 0
    cost: float = 0.0


@dataclass
class ModelTotals:
    """Sums for one canonical model name."""
    model: str
    tokens: int = 0
    cost: float = 0.0
    completion_tokens: int = 0
    latency: int = 0
    requests: int = 0


@dataclass
class BrandTotals:
    brand: str
    tokens: int = 0
    cost: float = 0.0


@dataclass
class DayTotals:
    """Heatmap sums for one calendar day."""
    requests: int = 0
    tokens: int = 0
