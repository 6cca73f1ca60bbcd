"""Health and observability routes."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.health import Status
from utils.timestamp import format_timestamp, now_millis

router = APIRouter(prefix="/api/v1", tags=["health"])

# These will be set by app.py
_health_checker = None


def init(health_checker):
    """Initialize with health checker reference."""
    global _health_checker
    _health_checker = health_checker


@router.get("/health")
async def health():
    """Health check with component status."""
    report = await _health_checker.check()
    status_code = 200 if report.status != Status.FAIL else 503
    return JSONResponse(content=report.to_dict(), status_code=status_code)


@router.get("/heartbeat")
async def heartbeat():
    """Lightweight heartbeat for frequent polling."""
    millis = now_millis()
    return {
        "status": "ok",
        "timestamp": format_timestamp(millis),
        "now_ms": millis,
        "uptime_s": round(_health_checker.uptime, 1),
    }
