"""PostgreSQL connectivity probe."""

from urllib.parse import unquote, urlparse

import asyncpg

from studytrack.connection_check.models.outcome import ProbeOutcome
from studytrack.connection_check.models.service_config import NeonConfig
from studytrack.connection_check.probes.base import ConnectivityProbe

AUTHORIZATION_ERRORS = (
    asyncpg.InvalidPasswordError,
    asyncpg.InvalidAuthorizationSpecificationError,
    asyncpg.InsufficientPrivilegeError,
)


class PostgresProbe(ConnectivityProbe):
    """Open a connection, run ``SELECT 1`` and close it."""

    service = "neon"

    def __init__(
        self, config: NeonConfig, connect_timeout: float, timeout: float
    ) -> None:
        """Initialize probe with the Neon configuration and timeouts."""
        super().__init__(timeout)
        self.config = config
        self.connect_timeout = connect_timeout

    def secrets(self) -> list[str]:
        """Return the connection string and its password."""
        connection_string = self.config.connection_string
        secrets = [connection_string]
        try:
            password = urlparse(connection_string).password
        except ValueError:
            password = None
        if password:
            secrets.extend([password, unquote(password)])
        return secrets

    async def probe(self) -> ProbeOutcome:
        """Connect and run a trivial query."""
        try:
            connection = await asyncpg.connect(
                self.config.connection_string, timeout=self.connect_timeout
            )
        except AUTHORIZATION_ERRORS as e:
            return ProbeOutcome.failure(
                f"PostgreSQL authentication failed: {e}", error_type="authorization"
            )
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            return ProbeOutcome.failure(
                f"PostgreSQL connection failed: {e}", error_type="connectivity"
            )

        try:
            value = await connection.fetchval("SELECT 1")
        except asyncpg.PostgresError as e:
            return ProbeOutcome.failure(
                f"PostgreSQL query failed: {e}", error_type="unexpected"
            )
        finally:
            await connection.close()

        if value != 1:
            return ProbeOutcome.failure(
                f"PostgreSQL returned an unexpected result: {value!r}",
                error_type="unexpected",
            )

        return ProbeOutcome(
            success=True, message="PostgreSQL connection successful", details=None
        )
