"""
Time windows and bucket labels.

Trend series are bucketed by hour ("HH:00") when the active window spans at
most 24 hours and by day ("MM-DD") otherwise. The activity heatmap uses its
own fixed window: the trailing year up to today, widened to whole
Sunday-to-Saturday weeks, keyed by "YYYY-MM-DD".
"""

import enum
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional

from .query import DashboardQuery

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

PRESET_DURATIONS: dict[str, timedelta] = {
    "1d": timedelta(hours=24),
    "7d": timedelta(hours=168),
    "30d": timedelta(hours=720),
}

HOURLY_MAX_SPAN = timedelta(hours=24)


class BucketFormat(enum.Enum):
    HOURLY = "HH:00"
    DAILY = "MM-DD"


@dataclass(frozen=True)
class TimeWindow:
    """
    A resolved query window.

    ``end`` is None for open-ended (preset) windows; ``as_of`` is the instant
    the window was resolved and stands in for the end when measuring span.
    """
    start: datetime
    end: Optional[datetime]
    as_of: datetime

    @property
    def span(self) -> timedelta:
        return (self.end or self.as_of) - self.start

    def contains(self, ts: datetime) -> bool:
        ts = _aware(ts)
        if ts < self.start:
            return False
        return self.end is None or ts <= self.end


def _aware(ts: datetime) -> datetime:
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def resolve_window(query: DashboardQuery, now: Optional[datetime] = None) -> TimeWindow:
    """Turn a validated query into a concrete time window."""
    now = _aware(now) if now else datetime.now(timezone.utc)
    if query.is_custom:
        return TimeWindow(start=query.from_, end=query.to, as_of=now)
    if query.range == "all":
        return TimeWindow(start=EPOCH, end=None, as_of=now)
    return TimeWindow(start=now - PRESET_DURATIONS[query.range], end=None, as_of=now)


def bucket_format(window: TimeWindow) -> BucketFormat:
    return BucketFormat.HOURLY if window.span <= HOURLY_MAX_SPAN else BucketFormat.DAILY


def bucket_key(ts: datetime, fmt: BucketFormat, tz: tzinfo = timezone.utc) -> str:
    """Label a timestamp with its trend bucket in the display timezone."""
    local = _aware(ts).astimezone(tz)
    if fmt is BucketFormat.HOURLY:
        return f"{local.hour:02d}:00"
    return local.strftime("%m-%d")


def day_key(ts: datetime, tz: tzinfo = timezone.utc) -> str:
    return _aware(ts).astimezone(tz).strftime("%Y-%m-%d")


# --- Heatmap grid ---

@dataclass
class HeatmapWeek:
    """One column of the heatmap: Sunday through Saturday."""
    days: list[date] = field(default_factory=list)
    month_start: Optional[int] = None  # 1-12 when this week starts a new month


def local_today(tz: tzinfo = timezone.utc, now: Optional[datetime] = None) -> date:
    now = _aware(now) if now else datetime.now(timezone.utc)
    return now.astimezone(tz).date()


def _one_year_before(day: date) -> date:
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        # Feb 29
        return day.replace(year=day.year - 1, day=28)


def heatmap_range(today: date) -> tuple[date, date]:
    """First Sunday and last Saturday of the trailing-year grid."""
    start = _one_year_before(today)
    start -= timedelta(days=(start.weekday() + 1) % 7)
    end = today + timedelta(days=(5 - today.weekday()) % 7)
    return start, end


def heatmap_days(today: date) -> list[date]:
    start, end = heatmap_range(today)
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def heatmap_weeks(days: list[date]) -> list[HeatmapWeek]:
    """Chunk a Sunday-aligned day list into week columns with month labels."""
    weeks: list[HeatmapWeek] = []
    last_month: Optional[int] = None
    for i in range(0, len(days), 7):
        week = HeatmapWeek(days=days[i:i + 7])
        sunday = week.days[0]
        if sunday.month != last_month:
            week.month_start = sunday.month
            last_month = sunday.month
        weeks.append(week)
    return weeks


def heatmap_window(today: date, tz: tzinfo = timezone.utc, as_of: Optional[datetime] = None) -> TimeWindow:
    """Window used to fetch heatmap rows, independent of the active query."""
    start, _ = heatmap_range(today)
    return TimeWindow(
        start=datetime.combine(start, time.min, tzinfo=tz),
        end=None,
        as_of=_aware(as_of) if as_of else datetime.now(timezone.utc),
    )
