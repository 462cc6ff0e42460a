"""
Derived ratios and indicators.

Every division returns 0 when its denominator is 0: an empty window is a
normal state, not an error.
"""

from dataclasses import dataclass
from typing import Sequence

from .types import SummaryTotals


def safe_div(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0


def avg_latency(totals: SummaryTotals) -> float:
    return safe_div(totals.latency, totals.requests)


def tokens_per_second(completion_tokens: int, latency_ms: float) -> float:
    """Completion tokens per second from a summed ms latency."""
    return safe_div(completion_tokens, latency_ms) * 1000


def avg_tps(totals: SummaryTotals) -> float:
    return tokens_per_second(totals.completion_tokens, totals.latency)


def avg_tokens_per_request(totals: SummaryTotals) -> float:
    return safe_div(totals.total_tokens, totals.requests)


def avg_cost_per_request(totals: SummaryTotals) -> float:
    return safe_div(totals.cost, totals.requests)


def success_rate(totals: SummaryTotals) -> float:
    """Percentage of successful requests, 0-100."""
    return safe_div(totals.successes, totals.requests) * 100


@dataclass(frozen=True)
class TrendDirection:
    percentage: float
    is_up: bool


def trend_direction(values: Sequence[float]) -> TrendDirection:
    """
    Compare the second half of a series with the first half.

    The series is split at floor(n/2). This is a coarse two-bucket
    comparison for a UI indicator, not a regression.
    """
    if len(values) < 2:
        return TrendDirection(percentage=0, is_up=True)

    midpoint = len(values) // 2
    first = sum(values[:midpoint])
    second = sum(values[midpoint:])

    if first == 0:
        return TrendDirection(percentage=100 if second > 0 else 0, is_up=True)

    change = (second - first) / first * 100
    return TrendDirection(percentage=abs(change), is_up=change >= 0)


# --- Heatmap intensity ---
# Levels 0-4: 0 is no activity, 4 is above the third quartile.

@dataclass(frozen=True)
class Quartiles:
    q1: float = 0
    q2: float = 0
    q3: float = 0


def quartiles(values: Sequence[float]) -> Quartiles:
    """Nearest-rank quartiles of the non-zero values."""
    ordered = sorted(v for v in values if v > 0)
    n = len(ordered)
    if n == 0:
        return Quartiles()
    return Quartiles(
        q1=ordered[int(n * 0.25)],
        q2=ordered[int(n * 0.5)],
        q3=ordered[int(n * 0.75)],
    )


def intensity_level(value: float, q: Quartiles) -> int:
    if value == 0:
        return 0
    if value <= q.q1:
        return 1
    if value <= q.q2:
        return 2
    if value <= q.q3:
        return 3
    return 4
