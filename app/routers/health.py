# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness / readiness for monitoring. Readiness probes the tables the public
# page reads and the photo bucket.
# =============================================================================

from datetime import datetime, timezone
from typing import Callable

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from lib.supabase_client import SupabaseClient

router = APIRouter()

API_VERSION = "1.0.0"

# Tables a public page render touches
PROBED_TABLES = ("profiles", "sections", "section_links", "section_photos")


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ReadinessResponse(BaseModel):
    """`checks` maps each probed dependency to "healthy" or the error."""
    status: str
    checks: dict[str, str]
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _probe(check: Callable[[], object]) -> str:
    # Any failure, including client creation, only degrades readiness
    try:
        check()
        return "healthy"
    except Exception as e:
        return f"unhealthy: {str(e)[:80]}"


def _table_probe(table: str) -> Callable[[], object]:
    return lambda: SupabaseClient.get_client().table(table).select("id").limit(1).execute()


def _bucket_probe() -> object:
    return SupabaseClient.get_client().storage.get_bucket(settings.STORAGE_BUCKET)


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Cheap status check; touches no dependency.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Whether Supabase tables and the photo bucket answer.

    Returns "degraded" (still 200) when any probe fails.
    """
    checks = {f"table:{table}": _probe(_table_probe(table)) for table in PROBED_TABLES}
    checks[f"bucket:{settings.STORAGE_BUCKET}"] = _probe(_bucket_probe)

    ready = all(result == "healthy" for result in checks.values())
    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live")
async def liveness_check():
    """Process is up."""
    return {"status": "alive", "timestamp": _now()}
