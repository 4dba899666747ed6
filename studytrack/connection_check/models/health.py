"""Models for the health-check endpoint."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthCheck(BaseModel):
    """Status of one health check."""

    status: Literal["pass", "fail", "warn"] = Field(..., description="Check status")
    message: str = Field(..., description="Human-readable explanation")
    response_time_ms: int | None = Field(default=None)
    details: dict[str, object] | None = Field(default=None)


class HealthStatus(BaseModel):
    """Aggregated health of the configured dependencies."""

    status: Literal["healthy", "degraded", "unhealthy"] = Field(
        ..., description="unhealthy on any fail, degraded on any warn"
    )
    checks: dict[str, HealthCheck] = Field(default_factory=dict)
