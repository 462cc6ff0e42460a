"""
Grouped sums over raw log records.

All functions take records that are already restricted to the active window
and return fresh aggregate rows. Provider and model keys are normalized
before grouping, so raw names sharing a canonical name merge into one row.
Brand totals are built from the per-model rows, never from raw records.
"""

from datetime import timezone, tzinfo
from typing import Callable, Iterable, Optional, TypeVar

from .names import NameNormalizer, default_normalizer
from .timebuckets import BucketFormat, bucket_key, day_key
from .types import (
    BrandTotals, BucketTotals, DayTotals, LogRecord, ModelTotals, ProviderTotals, SummaryTotals,
)

TOP_N = 10

T = TypeVar("T")


def summarize(records: Iterable[LogRecord]) -> SummaryTotals:
    totals = SummaryTotals()
    for r in records:
        totals.requests += 1
        totals.total_tokens += r.total_tokens
        totals.prompt_tokens += r.prompt_tokens
        totals.completion_tokens += r.completion_tokens
        totals.cost += r.cost
        totals.latency += r.latency
        if r.is_success:
            totals.successes += 1
    return totals


def trend_buckets(
    records: Iterable[LogRecord],
    fmt: BucketFormat,
    tz: tzinfo = timezone.utc,
) -> list[BucketTotals]:
    """
    Per-bucket sums, ascending by bucket key.

    Only buckets with at least one record appear; trend series are not
    zero-filled. Lexicographic order is chronological for both "HH:00" and
    "MM-DD" labels.
    """
    buckets: dict[str, BucketTotals] = {}
    for r in records:
        key = bucket_key(r.timestamp, fmt, tz)
        if key not in buckets:
            buckets[key] = BucketTotals(date=key)
        b = buckets[key]
        b.prompt += r.prompt_tokens
        b.completion += r.completion_tokens
        b.cost += r.cost
        b.requests += 1
    return [buckets[key] for key in sorted(buckets)]


def by_provider(
    records: Iterable[LogRecord],
    normalizer: Optional[NameNormalizer] = None,
) -> list[ProviderTotals]:
    """Tokens and cost per canonical provider, largest token share first."""
    normalizer = normalizer or default_normalizer
    providers: dict[str, ProviderTotals] = {}
    for r in records:
        name = normalizer.normalize_provider(r.provider)
        if name not in providers:
            providers[name] = ProviderTotals(provider=name)
        providers[name].tokens += r.total_tokens
        providers[name].cost += r.cost
    return sorted(providers.values(), key=lambda p: p.tokens, reverse=True)


def by_model(
    records: Iterable[LogRecord],
    normalizer: Optional[NameNormalizer] = None,
) -> list[ModelTotals]:
    """Sums per canonical model, in order of first appearance."""
    normalizer = normalizer or default_normalizer
    models: dict[str, ModelTotals] = {}
    for r in records:
        name = normalizer.normalize_model(r.model)
        if name not in models:
            models[name] = ModelTotals(model=name)
        m = models[name]
        m.tokens += r.total_tokens
        m.cost += r.cost
        m.completion_tokens += r.completion_tokens
        m.latency += r.latency
        m.requests += 1
    return list(models.values())


def by_brand(
    model_rows: Iterable[ModelTotals],
    normalizer: Optional[NameNormalizer] = None,
) -> list[BrandTotals]:
    """Roll per-model rows up into brands, largest token share first."""
    normalizer = normalizer or default_normalizer
    brands: dict[str, BrandTotals] = {}
    for row in model_rows:
        brand = normalizer.brand_of(row.model)
        if brand not in brands:
            brands[brand] = BrandTotals(brand=brand)
        brands[brand].tokens += row.tokens
        brands[brand].cost += row.cost
    return sorted(brands.values(), key=lambda b: b.tokens, reverse=True)


def daily_totals(
    records: Iterable[LogRecord],
    tz: tzinfo = timezone.utc,
) -> dict[str, DayTotals]:
    """Requests and tokens per "YYYY-MM-DD" day, for the heatmap."""
    days: dict[str, DayTotals] = {}
    for r in records:
        key = day_key(r.timestamp, tz)
        if key not in days:
            days[key] = DayTotals()
        days[key].requests += 1
        days[key].tokens += r.total_tokens
    return days


def top_n(rows: Iterable[T], key: Callable[[T], float], n: int = TOP_N) -> list[T]:
    """Largest ``n`` rows by ``key``; ties keep their input order."""
    return sorted(rows, key=key, reverse=True)[:n]
