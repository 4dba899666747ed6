"""Data models for service configurations, outcomes and reports."""

from studytrack.connection_check.models.health import HealthCheck, HealthStatus
from studytrack.connection_check.models.outcome import (
    ErrorKind,
    ProbeOutcome,
    ServiceTestResult,
    TestReport,
    ValidationOutcome,
)
from studytrack.connection_check.models.service_config import (
    SERVICE_ORDER,
    ConnectionTestConfig,
    EmbeddingsConfig,
    LLMConfig,
    NeonConfig,
    ProbeSettings,
    QdrantConfig,
    ServiceConfig,
    ServiceName,
    TranscriptionConfig,
)

__all__ = [
    "SERVICE_ORDER",
    "ConnectionTestConfig",
    "EmbeddingsConfig",
    "ErrorKind",
    "HealthCheck",
    "HealthStatus",
    "LLMConfig",
    "NeonConfig",
    "ProbeOutcome",
    "ProbeSettings",
    "QdrantConfig",
    "ServiceConfig",
    "ServiceName",
    "ServiceTestResult",
    "TestReport",
    "TranscriptionConfig",
    "ValidationOutcome",
]
