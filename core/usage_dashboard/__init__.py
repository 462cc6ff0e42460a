"""LLM Usage Dashboard - aggregation and derived metrics for LLM API usage logs."""

from .assembler import DashboardAssembler
from .client import DashboardClient, DashboardPoller
from .errors import DashboardError, QueryValidationError, SchemaMismatchError, UpstreamError
from .names import NameNormalizer, brand_of, normalize_model, normalize_provider
from .query import DashboardQuery, parse_query
from .source import InMemoryLogSource, LogSource, SupabaseLogSource
from .types import LogRecord

__all__ = [
    "DashboardAssembler",
    "DashboardClient",
    "DashboardPoller",
    "DashboardError",
    "QueryValidationError",
    "SchemaMismatchError",
    "UpstreamError",
    "NameNormalizer",
    "brand_of",
    "normalize_model",
    "normalize_provider",
    "DashboardQuery",
    "parse_query",
    "InMemoryLogSource",
    "LogSource",
    "SupabaseLogSource",
    "LogRecord",
]
__version__ = "0.1.0"
