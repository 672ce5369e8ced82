#!/usr/bin/env python3
"""
Create the PocketBase collections the coordinator dashboard reads and writes.

- camps: one record per camp session, with the eight per-blood-type
  inventory counters stored as number fields
- donors: one record per contribution, related to its camp
- requests: hospital blood requests routed to a camp

Collections that already exist are left untouched.
"""

from __future__ import annotations

import os
import sys
from typing import Any

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from dotenv import load_dotenv

# Note: ClientResponseError import may show as attr-defined error due to
# pocketbase library not exporting it explicitly, but it works at runtime
from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]

from bloodcamp.data.records import CAMPS, DONORS, REQUESTS
from bloodcamp.logging_config import configure_logging, get_logger
from bloodcamp.models import INVENTORY_FIELDS, BloodType, CampStatus, RequestStatus
from pocketbase import PocketBase
from scripts.utils.auth import authenticate_pocketbase

logger = get_logger(__name__)

AUTH_RULE = "@request.auth.id != ''"

# At most one active camp per coordinator, enforced by the store
ONE_ACTIVE_CAMP_INDEX = (
    f"CREATE UNIQUE INDEX idx_one_active_camp ON {CAMPS} (coordinator_uid) "
    f"WHERE status = '{CampStatus.ACTIVE.value}'"
)


def _text(name: str, required: bool = False) -> dict[str, Any]:
    return {"name": name, "type": "text", "required": required}


def _number(name: str, required: bool = False, only_int: bool = False) -> dict[str, Any]:
    return {"name": name, "type": "number", "required": required, "onlyInt": only_int}


def _select(name: str, values: list[str]) -> dict[str, Any]:
    return {"name": name, "type": "select", "required": True, "maxSelect": 1, "values": values}


def _autodate(name: str) -> dict[str, Any]:
    return {"name": name, "type": "autodate", "onCreate": True, "onUpdate": False}


def _base_collection(name: str, fields: list[dict[str, Any]], indexes: list[str] | None = None) -> dict[str, Any]:
    return {
        "name": name,
        "type": "base",
        "fields": fields,
        "indexes": indexes or [],
        "listRule": AUTH_RULE,
        "viewRule": AUTH_RULE,
        "createRule": AUTH_RULE,
        "updateRule": AUTH_RULE,
        "deleteRule": AUTH_RULE,
    }


def camps_schema() -> dict[str, Any]:
    fields = [
        _text("location", required=True),
        _text("coordinator", required=True),
        _text("coordinator_uid", required=True),
        _number("latitude"),
        _number("longitude"),
        _select("status", [status.value for status in CampStatus]),
        _autodate("started_at"),
        {"name": "ended_at", "type": "date"},
    ]
    # Counters may go negative; no min constraint
    fields.extend(_number(field, only_int=True) for field in INVENTORY_FIELDS.values())
    return _base_collection(CAMPS, fields, indexes=[ONE_ACTIVE_CAMP_INDEX])


def donors_schema(camps_id: str) -> dict[str, Any]:
    fields = [
        _text("donor_code", required=True),
        _text("contact", required=True),
        _select("blood_type", [blood_type.value for blood_type in BloodType]),
        _number("units", required=True, only_int=True),
        {"name": "camp", "type": "relation", "required": True, "collectionId": camps_id, "maxSelect": 1},
        _text("camp_location"),
        _autodate("donated_at"),
    ]
    return _base_collection(DONORS, fields)


def requests_schema(camps_id: str) -> dict[str, Any]:
    fields = [
        _text("hospital", required=True),
        _select("blood_type", [blood_type.value for blood_type in BloodType]),
        _number("units", required=True, only_int=True),
        {"name": "urgent", "type": "bool"},
        _number("distance"),
        _select("status", [status.value for status in RequestStatus]),
        {"name": "camp", "type": "relation", "required": True, "collectionId": camps_id, "maxSelect": 1},
        _autodate("requested_at"),
    ]
    return _base_collection(REQUESTS, fields)


def ensure_collection(pb: PocketBase, schema: dict[str, Any]) -> str:
    """Create the collection unless it exists. Returns its id."""
    name = schema["name"]
    try:
        existing = pb.collections.get_one(name)
        logger.info(f"Collection {name} already exists, skipping")
        return str(existing.id)
    except ClientResponseError as e:
        if getattr(e, "status", None) != 404:
            raise

    created = pb.collections.create(schema)
    logger.info(f"Created collection {name}")
    return str(created.id)


def main() -> None:
    load_dotenv()
    configure_logging(source="setup")

    try:
        pb = authenticate_pocketbase()
        logger.info("Authenticated with PocketBase as admin")
    except Exception as e:
        logger.error(f"Failed to authenticate: {e}")
        sys.exit(1)

    try:
        camps_id = ensure_collection(pb, camps_schema())
        ensure_collection(pb, donors_schema(camps_id))
        ensure_collection(pb, requests_schema(camps_id))
    except ClientResponseError as e:
        logger.error(f"Failed to create collections: {e}")
        if hasattr(e, "data"):
            logger.error(f"Details: {e.data}")
        sys.exit(1)


if __name__ == "__main__":
    main()
