"""Models for validation, probe and connection test results."""

from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

from studytrack.connection_check.models.service_config import ServiceName

ErrorKind = Literal["format", "connectivity", "authorization", "unexpected"]


class ValidationOutcome(BaseModel):
    """Result of a format validator."""

    model_config = ConfigDict(frozen=True)

    success: bool = Field(..., description="Whether the check passed")
    message: str = Field(..., description="Human-readable explanation")
    details: dict[str, object] | None = Field(
        default=None, description="Parsed host, key length, algorithm, ..."
    )

    @classmethod
    def failure(
        cls,
        message: str,
        error_type: ErrorKind = "format",
        **details: object,
    ) -> "ValidationOutcome":
        """Build a failed outcome tagged with its error type."""
        return cls(
            success=False,
            message=message,
            details={"error_type": error_type, **details},
        )


class ProbeOutcome(ValidationOutcome):
    """Result of a connectivity probe."""

    response_time_ms: int | None = Field(
        default=None, description="Time spent in the probe call"
    )


class ServiceTestResult(BaseModel):
    """Aggregated validation and probe result for one service."""

    service: ServiceName = Field(..., description="Service name")
    status: Literal["pass", "fail", "warn"] = Field(
        ..., description="fail for required services, warn for optional ones"
    )
    success: bool = Field(..., description="Format and connectivity both passed")
    required: bool = Field(..., description="Whether the service gates setup")
    message: str = Field(..., description="Human-readable explanation")
    details: dict[str, object] | None = Field(default=None)
    response_time_ms: int | None = Field(default=None)


class TestReport(BaseModel):
    """Outcome of one connection test run across all services."""

    __test__: ClassVar[bool] = False

    success: bool = Field(..., description="All required services succeeded")
    message: str = Field(..., description="Summary message")
    results: dict[ServiceName, ServiceTestResult] = Field(default_factory=dict)

    def failed_services(self) -> list[ServiceName]:
        """Return names of services that did not succeed."""
        return [name for name, result in self.results.items() if not result.success]
