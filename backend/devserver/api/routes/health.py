"""Health probe."""

from fastapi import APIRouter, Request

from devserver.api.dependencies import SettingsDep
from devserver.models.health import HealthResponse

router = APIRouter()


@router.api_route("/health", methods=["GET", "HEAD"])
async def health_check(request: Request, settings: SettingsDep) -> HealthResponse:
    """Liveness check with a fixed shape and no side effects."""
    return HealthResponse(
        status="healthy",
        version=request.app.version,
        environment=settings.environment,
    )
