"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")
    version: str | None = None


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready: status plus per-dependency checks."""

    status: str = Field(default="ok", description="ok or not_ready")
    checks: dict[str, str] = Field(
        default_factory=dict, description="database/cache -> ok | unavailable | disabled"
    )
