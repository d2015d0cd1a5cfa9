"""
Health Check Endpoints
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request, response: Response) -> HealthResponse:
    """
    Health check endpoint.

    Checks:
    - Storage backend reachability
    """
    settings = request.app.state.settings
    checks = {}
    overall_status = "healthy"

    try:
        kv = request.app.state.record_store.kv
        if kv.ping():
            checks["storage"] = {"status": "healthy", "backend": settings.storage.backend}
        else:
            checks["storage"] = {"status": "unhealthy", "backend": settings.storage.backend}
            overall_status = "unhealthy"
    except Exception as e:
        checks["storage"] = {"status": "unhealthy", "error": str(e)}
        overall_status = "unhealthy"

    if overall_status != "healthy":
        response.status_code = 503

    return HealthResponse(
        status=overall_status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
def liveness_check() -> Dict[str, str]:
    """Returns 200 if the application is running."""
    return {"status": "alive"}
