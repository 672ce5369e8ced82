"""
ConnectionManager - Shared PocketBase connection for the camp workflow.

Provides a process-wide client plus a factory for isolated clients, which
realtime subscriptions use so their SSE connection does not share auth state
with request handlers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from pocketbase import PocketBase

logger = logging.getLogger(__name__)


@dataclass
class ConnectionConfig:
    """Configuration for PocketBase connections."""

    url: str = "http://127.0.0.1:8090"
    admin_email: str | None = None
    admin_password: str | None = None

    @classmethod
    def from_env(cls) -> ConnectionConfig:
        """Load configuration from environment variables."""
        return cls(
            url=os.environ.get("POCKETBASE_URL", "http://127.0.0.1:8090"),
            admin_email=os.environ.get("POCKETBASE_ADMIN_EMAIL"),
            admin_password=os.environ.get("POCKETBASE_ADMIN_PASSWORD"),
        )


class ConnectionManager:
    """
    Manages PocketBase connections with singleton pattern.

    Usage:
        client = ConnectionManager.get_instance().get_client()

        # Separate client for a long-lived subscription
        isolated = ConnectionManager.get_instance().create_isolated_client()

        # Reset singleton (for testing)
        ConnectionManager.reset()
    """

    _instance: ConnectionManager | None = None

    def __init__(self, config: ConnectionConfig | None = None):
        self._config = config or ConnectionConfig.from_env()
        self._client: PocketBase | None = None

    @classmethod
    def get_instance(cls, config: ConnectionConfig | None = None) -> ConnectionManager:
        """Get the singleton instance. `config` only applies on first call."""
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance. Used for testing."""
        cls._instance = None

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    def get_client(self) -> PocketBase:
        """Get the shared PocketBase client, creating it on first use."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def create_isolated_client(self) -> PocketBase:
        """Create a new, uncached client."""
        return self._create_client()

    def _create_client(self) -> PocketBase:
        pb = PocketBase(self._config.url)
        if self._config.admin_email and self._config.admin_password:
            self._authenticate(pb)
        else:
            logger.warning("Admin credentials not provided, using unauthenticated PocketBase client")
        return pb

    def _authenticate(self, pb: PocketBase) -> None:
        """Authenticate through the _superusers collection (PocketBase 0.23+)."""
        try:
            pb.collection("_superusers").auth_with_password(self._config.admin_email, self._config.admin_password)
            logger.debug("Authenticated via _superusers collection")
        except Exception as e:
            logger.error(f"Authentication failed: {e}")
            raise
