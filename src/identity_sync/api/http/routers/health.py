"""Health check endpoints for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.identity_sync.api.http.app_data import ApplicationDependencies
from src.identity_sync.api.http.deps import get_app_dependencies

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 as long as the process is running."""
    return {"status": "healthy", "service": "identity-sync"}


@router.get("/ready", response_model=None)
async def readiness(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 503 until the database answers and providers are wired."""
    db_healthy = app_deps.database_service.health_check()
    checks = {
        "database": {"status": "healthy" if db_healthy else "unhealthy"},
        "webhook_providers": sorted(app_deps.webhook_secrets),
    }
    if not db_healthy:
        return JSONResponse(status_code=503, content={"status": "not_ready", "checks": checks})
    return {"status": "ready", "checks": checks}
