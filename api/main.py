"""
LLM Usage Dashboard API

A FastAPI service that serves aggregated LLM usage data to the dashboard.
Features: summary stats, trend series, provider/brand/model breakdowns,
activity heatmap, trend indicators.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Header, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from supabase import create_client, Client

from usage_dashboard import __version__
from usage_dashboard.assembler import DashboardAssembler
from usage_dashboard.errors import QueryValidationError, SchemaMismatchError, UpstreamError
from usage_dashboard.schemas import ActivityData, DashboardData, TrendsData
from usage_dashboard.source import LogSource, SupabaseLogSource

load_dotenv()

# --- Configuration ---

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")
API_KEY = os.getenv("DASHBOARD_API_KEY", "")  # empty = no auth
LOGS_TABLE = os.getenv("LOGS_TABLE", "logs")
DASHBOARD_TZ = os.getenv("DASHBOARD_TZ", "UTC")

try:
    DISPLAY_TZ = ZoneInfo(DASHBOARD_TZ)
except (ZoneInfoNotFoundError, ValueError):
    raise RuntimeError(f"Unknown DASHBOARD_TZ: {DASHBOARD_TZ!r}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate required configuration on startup."""
    missing = []
    if not SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not SUPABASE_KEY:
        missing.append("SUPABASE_KEY")
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")
    if not API_KEY:
        logger.warning("DASHBOARD_API_KEY is not set; dashboard routes are unauthenticated")
    logger.info("LLM Usage Dashboard API starting up (table=%s, tz=%s)", LOGS_TABLE, DASHBOARD_TZ)
    yield
    logger.info("LLM Usage Dashboard API shutting down")


app = FastAPI(
    title="LLM Usage Dashboard API",
    description="Aggregated LLM API usage: tokens, cost, latency, requests",
    version=__version__,
    lifespan=lifespan,
)

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# --- Database ---

def get_db() -> Client:
    """Get Supabase client."""
    if not SUPABASE_URL or not SUPABASE_KEY:
        raise HTTPException(500, "Database not configured")
    return create_client(SUPABASE_URL, SUPABASE_KEY)


def get_source(db: Client = Depends(get_db)) -> LogSource:
    return SupabaseLogSource(db, table=LOGS_TABLE)


def get_assembler(source: LogSource = Depends(get_source)) -> DashboardAssembler:
    return DashboardAssembler(source, tz=DISPLAY_TZ)


# --- Auth ---

def verify_api_key(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Bearer API key check, skipped when no key is configured."""
    if not API_KEY:
        return None

    if not authorization:
        raise HTTPException(401, "Missing Authorization header")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(401, "Invalid Authorization format")

    if parts[1] != API_KEY:
        raise HTTPException(403, "Invalid API key")

    return parts[1]


# --- Error handling ---

@app.exception_handler(QueryValidationError)
async def query_validation_error_handler(request: Request, exc: QueryValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": exc.message, "details": exc.details},
    )


@app.exception_handler(UpstreamError)
@app.exception_handler(SchemaMismatchError)
async def upstream_error_handler(request: Request, exc: Exception):
    logger.error("Dashboard API error on %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to fetch dashboard data"},
    )


# --- Routes: Health ---

@app.get("/")
def root():
    """Health check."""
    return {"status": "ok", "service": "llm-usage-dashboard", "version": __version__}


# --- Routes: Dashboard ---

@app.get("/api/dashboard", response_model=DashboardData)
def get_dashboard(
    assembler: DashboardAssembler = Depends(get_assembler),
    _: Optional[str] = Depends(verify_api_key),
    range_: Optional[str] = Query(None, alias="range", description="Preset: 1d, 7d, 30d or all"),
    from_: Optional[str] = Query(None, alias="from", description="Start (ISO-8601), with 'to'"),
    to: Optional[str] = Query(None, description="End (ISO-8601), with 'from'"),
):
    """Summary, trends, breakdowns and heatmap for one time window."""
    return assembler.build({"range": range_, "from": from_, "to": to})


@app.get("/api/dashboard/activity", response_model=ActivityData)
def get_activity(
    assembler: DashboardAssembler = Depends(get_assembler),
    _: Optional[str] = Depends(verify_api_key),
):
    """Trailing-year activity grid with quartile intensity levels."""
    return assembler.build_activity()


@app.get("/api/dashboard/trends", response_model=TrendsData)
def get_trends(
    assembler: DashboardAssembler = Depends(get_assembler),
    _: Optional[str] = Depends(verify_api_key),
    range_: Optional[str] = Query(None, alias="range"),
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = Query(None),
):
    """Second-half vs first-half change of the tokens, cost and requests series."""
    return assembler.build_trends({"range": range_, "from": from_, "to": to})
