#!/usr/bin/env python3
"""
Centralized authentication module for PocketBase.
Uses environment variables for credentials to avoid hardcoding.
"""

from __future__ import annotations

import os

# Note: ClientResponseError import may show as attr-defined error due to
# pocketbase library not exporting it explicitly, but it works at runtime
from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]

from bloodcamp.logging_config import get_logger
from pocketbase import PocketBase

logger = get_logger(__name__)


def authenticate_pocketbase(pb_url: str | None = None) -> PocketBase:
    """
    Authenticate with PocketBase as a superuser using environment variables.

    Args:
        pb_url: The PocketBase URL (default: POCKETBASE_URL or http://localhost:8090)

    Returns:
        Authenticated PocketBase client

    Raises:
        ClientResponseError: If authentication fails
    """
    pb = PocketBase(pb_url or os.getenv("POCKETBASE_URL", "http://localhost:8090"))

    admin_email = os.getenv("POCKETBASE_ADMIN_EMAIL", "admin@bloodcamp.local")
    admin_password = os.getenv("POCKETBASE_ADMIN_PASSWORD", "bloodcamp123")

    try:
        pb.collection("_superusers").auth_with_password(admin_email, admin_password)
        return pb
    except ClientResponseError as e:
        logger.error(f"Failed to authenticate with PocketBase as {admin_email}: {e}")
        logger.error("Make sure POCKETBASE_ADMIN_EMAIL and POCKETBASE_ADMIN_PASSWORD are set correctly")
        raise
