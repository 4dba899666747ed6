"""Connection test state for one setup session."""

import logging
from enum import Enum

from studytrack.connection_check.models.outcome import TestReport
from studytrack.connection_check.models.service_config import ConnectionTestConfig
from studytrack.connection_check.orchestrator import ConnectionTestOrchestrator

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Connection test state of a setup session."""

    NOT_TESTED = "not_tested"
    TESTING = "testing"
    PASSED = "passed"
    FAILED = "failed"


class ConnectionTestSession:
    """Gates completion of the setup flow on a passing connection test.

    Runs are user-initiated only: ``not_tested`` and ``failed`` may start a
    run, ``testing`` and ``passed`` may not. Nothing is persisted.
    """

    def __init__(
        self, orchestrator: ConnectionTestOrchestrator, config: ConnectionTestConfig
    ) -> None:
        """Initialize session for a captured configuration."""
        self.orchestrator = orchestrator
        self.config = config
        self.state = SessionState.NOT_TESTED
        self.report: TestReport | None = None

    @property
    def can_complete_setup(self) -> bool:
        """Whether the setup flow may advance past the test step."""
        return self.state is SessionState.PASSED

    def update_config(self, config: ConnectionTestConfig) -> None:
        """Replace the captured configuration after a user edit.

        Raises:
            RuntimeError: If a test is running or the session already passed

        """
        if self.state in {SessionState.TESTING, SessionState.PASSED}:
            raise RuntimeError(f"Cannot edit configuration while {self.state.value}")
        self.config = config
        self.state = SessionState.NOT_TESTED
        self.report = None

    async def run(self) -> TestReport:
        """Run the connection test and record the resulting state.

        Returns:
            Report of this run

        Raises:
            RuntimeError: If a test is already running or has already passed

        """
        if self.state is SessionState.TESTING:
            raise RuntimeError("A connection test is already running")
        if self.state is SessionState.PASSED:
            raise RuntimeError("Connection test already passed for this session")

        logger.info(f"Connection test: {self.state.value} -> testing")
        self.state = SessionState.TESTING
        try:
            report = await self.orchestrator.run(self.config)
        except BaseException:
            self.state = SessionState.FAILED
            raise

        self.report = report
        self.state = SessionState.PASSED if report.success else SessionState.FAILED
        logger.info(f"Connection test: testing -> {self.state.value}")
        return report
