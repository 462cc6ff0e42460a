"""
Raw log row sources.

Everything the pipeline knows about upstream rows goes through
``parse_log_row``: absent or null numerics become 0 there and nowhere else,
and rows that cannot be read as a LogRecord are rejected rather than guessed.
"""

import logging
import math
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Iterable

import httpx
from postgrest.exceptions import APIError
from pydantic import TypeAdapter, ValidationError
from supabase import Client

from .errors import SchemaMismatchError, UpstreamError
from .timebuckets import TimeWindow
from .types import LogRecord

logger = logging.getLogger(__name__)

LOG_COLUMNS = (
    "timestamp",
    "provider",
    "model",
    "status",
    "prompt_tokens",
    "completion_tokens",
    "total_tokens",
    "cost",
    "latency",
)


def _number(row: dict, key: str) -> float:
    value = row.get(key)
    if value is None:
        return 0
    if isinstance(value, bool):
        raise SchemaMismatchError(f"Column {key!r} is a boolean, expected a number", row)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise SchemaMismatchError(f"Column {key!r} is not numeric: {value!r}", row)
    if math.isnan(number) or number < 0:
        raise SchemaMismatchError(f"Column {key!r} must be a non-negative number: {value!r}", row)
    return number


def _text(row: dict, key: str) -> str:
    value = row.get(key)
    if not isinstance(value, str):
        raise SchemaMismatchError(f"Column {key!r} must be a string, got {value!r}", row)
    return value


_DATETIME = TypeAdapter(datetime)


def _timestamp(row: dict) -> datetime:
    value = row.get("timestamp")
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str):
        # PostgREST trims trailing zeros from fractional seconds
        try:
            ts = _DATETIME.validate_python(value)
        except ValidationError:
            raise SchemaMismatchError(f"Unparseable timestamp: {value!r}", row)
    else:
        raise SchemaMismatchError(f"Missing timestamp, got {value!r}", row)
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def parse_log_row(row: Any) -> LogRecord:
    """
    Convert one upstream row into a LogRecord.

    Raises:
        SchemaMismatchError: if the row is not a mapping, lacks its
            timestamp/provider/model, or holds non-numeric or negative
            numbers.
    """
    if not isinstance(row, dict):
        raise SchemaMismatchError(f"Expected a row object, got {type(row).__name__}")
    return LogRecord(
        timestamp=_timestamp(row),
        provider=_text(row, "provider"),
        model=_text(row, "model"),
        status=str(row.get("status") or "unknown"),
        prompt_tokens=math.floor(_number(row, "prompt_tokens")),
        completion_tokens=math.floor(_number(row, "completion_tokens")),
        total_tokens=math.floor(_number(row, "total_tokens")),
        cost=_number(row, "cost"),
        latency=math.floor(_number(row, "latency")),
    )


class LogSource(ABC):
    """A provider of raw per-request log records."""

    @abstractmethod
    def fetch(self, window: TimeWindow) -> list[LogRecord]:
        """All records whose timestamp falls inside ``window``."""


class SupabaseLogSource(LogSource):
    """
    Reads log rows from a Supabase table.

    Each fetch is one logical read: pages are pulled until a short page comes
    back, and any client failure aborts the whole read. Rows are ordered by
    timestamp and then by the unique ``id_column`` so that offset paging
    never repeats or skips rows sharing a timestamp.
    """

    def __init__(
        self,
        client: Client,
        table: str = "logs",
        page_size: int = 1000,
        id_column: str = "id",
    ):
        self.client = client
        self.table = table
        self.page_size = page_size
        self.id_column = id_column

    def fetch(self, window: TimeWindow) -> list[LogRecord]:
        rows: list[dict] = []
        offset = 0
        try:
            while True:
                query = (
                    self.client.table(self.table)
                    .select(",".join(LOG_COLUMNS))
                    .gte("timestamp", window.start.isoformat())
                )
                if window.end is not None:
                    query = query.lte("timestamp", window.end.isoformat())
                result = (
                    query.order("timestamp")
                    .order(self.id_column)
                    .range(offset, offset + self.page_size - 1)
                    .execute()
                )
                page = result.data or []
                rows.extend(page)
                if len(page) < self.page_size:
                    break
                offset += self.page_size
        except (APIError, httpx.HTTPError) as e:
            raise UpstreamError(f"Failed to read {self.table!r}: {e}", cause=e) from e

        logger.debug("Fetched %d rows from %s since %s", len(rows), self.table, window.start.isoformat())
        return [parse_log_row(row) for row in rows]


class InMemoryLogSource(LogSource):
    """Serves a fixed list of records, filtered by window."""

    def __init__(self, records: Iterable[LogRecord] = ()):
        self.records = list(records)

    def fetch(self, window: TimeWindow) -> list[LogRecord]:
        return [r for r in self.records if window.contains(r.timestamp)]
