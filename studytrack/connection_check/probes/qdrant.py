"""Qdrant vector store connectivity probe."""

from studytrack.connection_check.models.outcome import ProbeOutcome
from studytrack.connection_check.models.service_config import QdrantConfig
from studytrack.connection_check.probes.base import HttpProbe


class QdrantProbe(HttpProbe):
    """List collections with the API key attached."""

    service = "qdrant"
    provider_label = "Qdrant"

    def __init__(self, config: QdrantConfig, timeout: float) -> None:
        """Initialize probe with the Qdrant configuration."""
        super().__init__(timeout)
        self.config = config

    def secrets(self) -> list[str]:
        """Return the API key."""
        return [self.config.api_key]

    async def probe(self) -> ProbeOutcome:
        """Call ``GET /collections``."""
        url = f"{self.config.url.rstrip('/')}/collections"
        headers = {"api-key": self.config.api_key, "Accept": "application/json"}

        status, payload, text = await self._request("GET", url, headers=headers)

        if not 200 <= status < 300:
            return self._status_failure(status, payload, text)

        names = self._collection_names(payload)
        details: dict[str, object] = {
            "status_code": status,
            "collections": len(names),
        }
        message = "Qdrant connection successful"
        if self.config.collection_name:
            found = self.config.collection_name in names
            details["collection_found"] = found
            if not found:
                message = (
                    f'{message} (collection "{self.config.collection_name}" '
                    "does not exist yet)"
                )

        return ProbeOutcome(success=True, message=message, details=details)

    def _collection_names(self, payload: object) -> list[str]:
        """Extract collection names from ``{"result": {"collections": [...]}}``."""
        if not isinstance(payload, dict):
            return []
        result = payload.get("result")
        if not isinstance(result, dict):
            return []
        collections = result.get("collections")
        if not isinstance(collections, list):
            return []
        return [
            str(item["name"])
            for item in collections
            if isinstance(item, dict) and "name" in item
        ]
