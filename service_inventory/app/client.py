"""HTTP client the Inventory service uses to read System properties.

Methods return the raw response body as text so callers (and contract tests)
see exactly what the System service sent. A 404 yields the empty string
rather than an exception; transport failures propagate as ``httpx`` errors.
"""

from typing import Optional

import httpx
import structlog

from libs.common.config import InventoryConfig

logger = structlog.get_logger("inventory.client")

SERVER_NAME_KEY = "wlp.server.name"
DEFAULT_DIRECTORY_KEY = "wlp.user.dir.isDefault"


class InventoryClient:
    """Synchronous client for the System properties API.

    Parameters
    - base_url: Root URL of the System service (including any root path)
    - timeout: Per-request timeout in seconds
    - client: Optional pre-built ``httpx.Client`` (its base URL is used as is)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)
        self._owns_client = client is None

    @classmethod
    def from_config(cls, config: InventoryConfig) -> "InventoryClient":
        return cls(config.sp_system_service_url, timeout=config.sp_http_timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "InventoryClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _get(self, path: str) -> str:
        response = self._client.get(path)
        if response.status_code != 200:
            logger.info("System service returned non-200", path=path, status=response.status_code)
        return response.text

    def get_property(self, key: str) -> str:
        """Raw ``/properties/key/{key}`` body."""
        return self._get(f"/properties/key/{key}")

    def get_server_name(self) -> str:
        return self.get_property(SERVER_NAME_KEY)

    def get_edition(self) -> str:
        """Whether the server runs from the default user directory."""
        return self.get_property(DEFAULT_DIRECTORY_KEY)

    def get_version(self) -> str:
        return self._get("/properties/version")

    def get_properties(self) -> str:
        return self._get("/properties")

    def get_invalid_property(self) -> str:
        """Request a path the System service does not serve."""
        return self._get("/properties/invalidProperty")
