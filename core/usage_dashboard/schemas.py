"""Response models. Serialized with camelCase keys (``by_alias=True``)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Dashboard ---

class DashboardSummary(CamelModel):
    """Window-wide totals and derived ratios."""
    total_requests: int = Field(..., ge=0)
    total_tokens: int = Field(..., ge=0)
    total_cost: float = Field(..., ge=0)
    completion_tokens: int = Field(..., ge=0)
    avg_latency: float = Field(..., ge=0)  # ms
    avg_tps: float = Field(..., ge=0)
    avg_tokens_per_request: float = Field(..., ge=0)
    avg_cost_per_request: float = Field(..., ge=0)
    success_rate: float = Field(..., ge=0, le=100)


class TokensTrendItem(CamelModel):
    date: str
    prompt: int
    completion: int


class CostTrendItem(CamelModel):
    date: str
    cost: float


class RequestsTrendItem(CamelModel):
    date: str
    requests: int


class ByProviderItem(CamelModel):
    provider: str
    tokens: int
    cost: float


class ByBrandItem(CamelModel):
    brand: str
    tokens: int
    cost: float


class TokensByModelItem(CamelModel):
    model: str
    tokens: int


class TpsByModelItem(CamelModel):
    model: str
    tps: float


class HeatmapCell(CamelModel):
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    value: int = Field(..., ge=0)


class Heatmap(CamelModel):
    """Zero-filled daily values over the Sunday-aligned trailing year."""
    requests: list[HeatmapCell]
    tokens: list[HeatmapCell]


class DashboardData(CamelModel):
    summary: DashboardSummary
    tokens_trend: list[TokensTrendItem]
    cost_trend: list[CostTrendItem]
    requests_trend: list[RequestsTrendItem]
    by_provider: list[ByProviderItem]
    by_brand: list[ByBrandItem]
    tokens_by_model: list[TokensByModelItem]  # top 10, desc
    tps_by_model: list[TpsByModelItem]  # top 10, desc
    heatmap: Heatmap


# --- Activity grid ---

class ActivityDay(CamelModel):
    date: str
    requests: int
    tokens: int
    level: int = Field(..., ge=0, le=4)  # quartile intensity of requests


class ActivityWeek(CamelModel):
    days: list[ActivityDay]  # Sunday first
    month_start: Optional[int] = None


class MostActiveDay(CamelModel):
    date: str
    requests: int


class ActivityData(CamelModel):
    weeks: list[ActivityWeek]
    total_requests: int
    total_tokens: int
    active_days: int
    most_active: Optional[MostActiveDay] = None


# --- Trend indicators ---

class TrendIndicator(CamelModel):
    percentage: float
    is_up: bool


class TrendsData(CamelModel):
    """Second-half vs first-half change of each trend series."""
    tokens: TrendIndicator
    cost: TrendIndicator
    requests: TrendIndicator
