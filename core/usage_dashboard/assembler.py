"""Builds dashboard responses from raw log records."""

import logging
import time
from datetime import datetime, timezone, tzinfo
from typing import Any, Callable, Mapping, Optional, Union

from .aggregator import TOP_N, by_brand, by_model, by_provider, daily_totals, summarize, top_n, trend_buckets
from .metrics import (
    avg_cost_per_request, avg_latency, avg_tokens_per_request, avg_tps, intensity_level,
    quartiles, success_rate, tokens_per_second, trend_direction,
)
from .names import NameNormalizer, default_normalizer
from .query import DashboardQuery, parse_query
from .schemas import (
    ActivityData, ActivityDay, ActivityWeek, ByBrandItem, ByProviderItem, CostTrendItem,
    DashboardData, DashboardSummary, Heatmap, HeatmapCell, MostActiveDay, RequestsTrendItem,
    TokensByModelItem, TokensTrendItem, TpsByModelItem, TrendIndicator, TrendsData,
)
from .source import LogSource
from .timebuckets import (
    bucket_format, heatmap_days, heatmap_weeks, heatmap_window, local_today, resolve_window,
)
from .types import DayTotals, LogRecord, SummaryTotals

logger = logging.getLogger(__name__)

QueryInput = Union[DashboardQuery, Mapping[str, Any], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DashboardAssembler:
    """
    Orchestrates one dashboard request.

    Validates the query, resolves its window, reads the window's rows and the
    heatmap's trailing-year rows from ``source``, aggregates and derives. Any
    error aborts the whole build; nothing partial is returned.
    """

    def __init__(
        self,
        source: LogSource,
        normalizer: Optional[NameNormalizer] = None,
        tz: tzinfo = timezone.utc,
        top_n: int = TOP_N,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.source = source
        self.normalizer = normalizer or default_normalizer
        self.tz = tz
        self.top_n = top_n
        self.clock = clock or _utcnow

    def build(self, query: QueryInput = None) -> DashboardData:
        query = parse_query(query)
        now = self.clock()
        window = resolve_window(query, now)
        fmt = bucket_format(window)
        started = time.perf_counter()

        # Sequential reads; neither depends on the other.
        records = self.source.fetch(window)
        heatmap_records = self._fetch_heatmap(now)

        totals = summarize(records)
        buckets = trend_buckets(records, fmt, self.tz)
        models = by_model(records, self.normalizer)
        tps_rows = [
            TpsByModelItem(model=m.model, tps=tokens_per_second(m.completion_tokens, m.latency))
            for m in models
        ]

        data = DashboardData(
            summary=self._summary(totals),
            tokens_trend=[
                TokensTrendItem(date=b.date, prompt=b.prompt, completion=b.completion)
                for b in buckets
            ],
            cost_trend=[CostTrendItem(date=b.date, cost=b.cost) for b in buckets],
            requests_trend=[RequestsTrendItem(date=b.date, requests=b.requests) for b in buckets],
            by_provider=[
                ByProviderItem(provider=p.provider, tokens=p.tokens, cost=p.cost)
                for p in by_provider(records, self.normalizer)
            ],
            by_brand=[
                ByBrandItem(brand=b.brand, tokens=b.tokens, cost=b.cost)
                for b in by_brand(models, self.normalizer)
            ],
            tokens_by_model=[
                TokensByModelItem(model=m.model, tokens=m.tokens)
                for m in top_n(models, key=lambda m: m.tokens, n=self.top_n)
            ],
            tps_by_model=top_n(tps_rows, key=lambda t: t.tps, n=self.top_n),
            heatmap=self._heatmap(heatmap_records, now),
        )

        logger.info(
            "Built dashboard for %s (%s buckets, %d records) in %.1f ms",
            query.to_params(), fmt.value, totals.requests, (time.perf_counter() - started) * 1000,
        )
        return data

    def build_activity(self) -> ActivityData:
        """Heatmap grid with per-day intensity levels and activity stats."""
        now = self.clock()
        days = heatmap_days(local_today(self.tz, now))
        daily = daily_totals(self._fetch_heatmap(now), self.tz)
        in_grid = [daily[d.isoformat()] for d in days if d.isoformat() in daily]
        q = quartiles([t.requests for t in in_grid])

        weeks = []
        most_active: Optional[MostActiveDay] = None
        for week in heatmap_weeks(days):
            cells = []
            for day in week.days:
                key = day.isoformat()
                totals = daily.get(key, DayTotals())
                cells.append(ActivityDay(
                    date=key,
                    requests=totals.requests,
                    tokens=totals.tokens,
                    level=intensity_level(totals.requests, q),
                ))
                if totals.requests > 0 and (most_active is None or totals.requests > most_active.requests):
                    most_active = MostActiveDay(date=key, requests=totals.requests)
            weeks.append(ActivityWeek(days=cells, month_start=week.month_start))

        return ActivityData(
            weeks=weeks,
            total_requests=sum(t.requests for t in in_grid),
            total_tokens=sum(t.tokens for t in in_grid),
            active_days=sum(1 for t in in_grid if t.requests > 0),
            most_active=most_active,
        )

    def build_trends(self, query: QueryInput = None) -> TrendsData:
        """Up/down indicators for the tokens, cost and requests series."""
        query = parse_query(query)
        window = resolve_window(query, self.clock())
        buckets = trend_buckets(self.source.fetch(window), bucket_format(window), self.tz)

        def indicator(values: list[float]) -> TrendIndicator:
            direction = trend_direction(values)
            return TrendIndicator(percentage=direction.percentage, is_up=direction.is_up)

        return TrendsData(
            tokens=indicator([b.prompt + b.completion for b in buckets]),
            cost=indicator([b.cost for b in buckets]),
            requests=indicator([b.requests for b in buckets]),
        )

    def _fetch_heatmap(self, now: datetime) -> list[LogRecord]:
        return self.source.fetch(heatmap_window(local_today(self.tz, now), self.tz, now))

    def _summary(self, totals: SummaryTotals) -> DashboardSummary:
        return DashboardSummary(
            total_requests=totals.requests,
            total_tokens=totals.total_tokens,
            total_cost=totals.cost,
            completion_tokens=totals.completion_tokens,
            avg_latency=avg_latency(totals),
            avg_tps=avg_tps(totals),
            avg_tokens_per_request=avg_tokens_per_request(totals),
            avg_cost_per_request=avg_cost_per_request(totals),
            success_rate=success_rate(totals),
        )

    def _heatmap(self, records: list[LogRecord], now: datetime) -> Heatmap:
        daily = daily_totals(records, self.tz)
        requests, tokens = [], []
        for day in heatmap_days(local_today(self.tz, now)):
            key = day.isoformat()
            totals = daily.get(key, DayTotals())
            requests.append(HeatmapCell(date=key, value=totals.requests))
            tokens.append(HeatmapCell(date=key, value=totals.tokens))
        return Heatmap(requests=requests, tokens=tokens)
