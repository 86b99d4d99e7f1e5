"""Health check endpoints: liveness and readiness (database + cache)."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from msls.core.config import get_settings
from msls.infrastructure.persistence.database import ping_database
from msls.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app.version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database unavailable", "model": ReadinessResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 when the database answers; 503 otherwise.

    The cache is reported but never fails readiness (requests work without it).
    """
    checks: dict[str, str] = {}
    checks["database"] = "ok" if await ping_database() else "unavailable"

    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        checks["cache"] = "disabled"
    else:
        checks["cache"] = "ok" if await cache.ping() else "unavailable"

    if checks["database"] != "ok":
        return JSONResponse(
            status_code=503,
            content=ReadinessResponse(status="not_ready", checks=checks).model_dump(),
        )
    return ReadinessResponse(checks=checks)
