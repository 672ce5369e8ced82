"""
Shared dependencies for the Bloodcamp API.

This module provides:
- PocketBase client management (global instance authenticated on startup)
- Repository and workflow construction per request
- Coordinator identity resolution
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import Header
from pocketbase import PocketBase

from bloodcamp.data.repository_factory import RepositoryFactory
from bloodcamp.workflow import CampCoordinationWorkflow

from .settings import get_settings

logger = logging.getLogger(__name__)

# ========================================
# PocketBase Client
# ========================================

# One client for the whole process, authenticated as superuser on startup.
# Only the superuser auth store is ever used, so sharing it between requests
# is safe.
_settings = get_settings()
pb_url = _settings.pocketbase_url
pb = PocketBase(pb_url)


async def authenticate_pb() -> None:
    """Authenticate with PocketBase as superuser."""
    settings = get_settings()
    try:
        await asyncio.to_thread(
            pb.collection("_superusers").auth_with_password,
            settings.pocketbase_admin_email,
            settings.pocketbase_admin_password,
        )
        logger.info("Successfully authenticated with PocketBase")
    except Exception as e:
        logger.error(f"Failed to authenticate with PocketBase: {e}")
        raise


async def get_pb_client() -> PocketBase:
    """FastAPI dependency to get authenticated PocketBase client."""
    return pb


# ========================================
# Workflow
# ========================================


def get_repositories() -> RepositoryFactory:
    """Repositories over the shared client (overridable in tests)."""
    return RepositoryFactory(pb)


def get_workflow() -> CampCoordinationWorkflow:
    """Workflow configured from settings (overridable in tests)."""
    settings = get_settings()
    return CampCoordinationWorkflow(
        get_repositories(),
        transactional_writes=settings.transactional_writes,
        enforce_request_progression=settings.enforce_request_progression,
    )


# ========================================
# Coordinator identity
# ========================================


async def get_coordinator_uid(x_coordinator_uid: str | None = Header(default=None)) -> str:
    """Coordinator identity from the X-Coordinator-Uid header.

    Authentication happens in front of this service; an absent header is
    recorded as "unknown".
    """
    uid = (x_coordinator_uid or "").strip()
    return uid or "unknown"


__all__ = [
    "pb",
    "pb_url",
    "authenticate_pb",
    "get_pb_client",
    "get_repositories",
    "get_workflow",
    "get_coordinator_uid",
]
