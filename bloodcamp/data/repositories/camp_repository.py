"""Camp repository for data access.

Handles all database operations on the `camps` collection, including the
inventory counters stored as one number field per blood type."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pocketbase import PocketBase

from ...errors import CampAlreadyActiveError, ExternalStoreError, NotFoundError
from ...models import (
    BloodType,
    Camp,
    CampStatus,
    Coordinates,
)
from ..batch import WriteOp
from ..records import (
    CAMPS,
    error_status,
    field_value,
    format_datetime,
    is_unique_violation,
    parse_datetime,
    quote,
)

logger = logging.getLogger(__name__)


class CampRepository:
    """Repository for Camp data access"""

    def __init__(self, pb_client: PocketBase) -> None:
        self.pb = pb_client

    def create(
        self,
        location: str,
        coordinator: str,
        coordinator_uid: str,
        coordinates: Coordinates,
        inventory: dict[BloodType, int],
    ) -> Camp:
        """Create an active camp. `started_at` is assigned by the server.

        The `idx_one_active_camp` index rejects a second active camp for the
        same coordinator, which surfaces as CampAlreadyActiveError.
        """
        data: dict[str, Any] = {
            "location": location,
            "coordinator": coordinator,
            "coordinator_uid": coordinator_uid,
            "latitude": coordinates.latitude,
            "longitude": coordinates.longitude,
            "status": CampStatus.ACTIVE.value,
        }
        data.update(self.inventory_fields(inventory))

        try:
            record = self.pb.collection(CAMPS).create(data)
        except Exception as e:
            if is_unique_violation(e):
                active = self.find_active(coordinator_uid)
                existing_id = active[0].id if active else ""
                logger.warning(f"Coordinator {coordinator_uid} already has active camp {existing_id or '(unknown)'}")
                raise CampAlreadyActiveError(coordinator_uid, existing_id) from e
            logger.error(f"Error creating camp at {location!r} for coordinator {coordinator_uid}: {e}")
            raise ExternalStoreError("starting camp", e) from e

        return self.map_from_db(record)

    def get(self, camp_id: str) -> Camp:
        try:
            record = self.pb.collection(CAMPS).get_one(camp_id)
        except Exception as e:
            if error_status(e) == 404:
                raise NotFoundError("Camp", camp_id) from e
            logger.error(f"Error loading camp {camp_id}: {e}")
            raise ExternalStoreError("loading camp", e) from e
        return self.map_from_db(record)

    def find_by_coordinator(self, coordinator_uid: str, status: CampStatus) -> list[Camp]:
        """All camps of a coordinator with the given status"""
        filter_str = f"coordinator_uid = {quote(coordinator_uid)} && status = {quote(status.value)}"
        try:
            records = self.pb.collection(CAMPS).get_full_list(query_params={"filter": filter_str})
        except Exception as e:
            logger.error(f"Error querying {status.value} camps for coordinator {coordinator_uid}: {e}")
            raise ExternalStoreError("loading camps", e) from e
        return [self.map_from_db(record) for record in records]

    def find_active(self, coordinator_uid: str) -> list[Camp]:
        return self.find_by_coordinator(coordinator_uid, CampStatus.ACTIVE)

    def find_past(self, coordinator_uid: str) -> list[Camp]:
        return self.find_by_coordinator(coordinator_uid, CampStatus.INACTIVE)

    def mark_inactive(self, camp_id: str, ended_at: datetime) -> Camp:
        try:
            record = self.pb.collection(CAMPS).update(
                camp_id,
                {"status": CampStatus.INACTIVE.value, "ended_at": format_datetime(ended_at)},
            )
        except Exception as e:
            if error_status(e) == 404:
                raise NotFoundError("Camp", camp_id) from e
            logger.error(f"Error marking camp {camp_id} inactive: {e}")
            raise ExternalStoreError("ending camp", e) from e
        return self.map_from_db(record)

    def set_inventory(self, camp_id: str, inventory: dict[BloodType, int]) -> Camp:
        """Overwrite all eight counters. Only the reconcile operation does this."""
        try:
            record = self.pb.collection(CAMPS).update(camp_id, self.inventory_fields(inventory))
        except Exception as e:
            logger.error(f"Error overwriting inventory of camp {camp_id}: {e}")
            raise ExternalStoreError("reconciling inventory", e) from e
        return self.map_from_db(record)

    def adjust_inventory_op(self, camp_id: str, deltas: dict[BloodType, int]) -> WriteOp | None:
        """Build the atomic increment write for a set of per-type deltas.

        Zero deltas are dropped; returns None when nothing changes.
        """
        body: dict[str, int] = {}
        for blood_type, delta in deltas.items():
            if delta > 0:
                body[f"{blood_type.inventory_field}+"] = delta
            elif delta < 0:
                body[f"{blood_type.inventory_field}-"] = -delta

        if not body:
            return None
        return WriteOp("PATCH", CAMPS, record_id=camp_id, body=body)

    @staticmethod
    def inventory_fields(inventory: dict[BloodType, int]) -> dict[str, int]:
        return {blood_type.inventory_field: int(inventory.get(blood_type, 0)) for blood_type in BloodType}

    def map_from_db(self, record: Any) -> Camp:
        latitude = field_value(record, "latitude")
        longitude = field_value(record, "longitude")
        coordinates = None
        if latitude is not None and longitude is not None:
            coordinates = Coordinates(latitude=float(latitude), longitude=float(longitude))

        return Camp(
            id=field_value(record, "id", ""),
            location=field_value(record, "location", ""),
            coordinator=field_value(record, "coordinator", ""),
            coordinator_uid=field_value(record, "coordinator_uid", ""),
            status=CampStatus(field_value(record, "status", CampStatus.INACTIVE.value)),
            coordinates=coordinates,
            inventory={
                blood_type: int(field_value(record, blood_type.inventory_field, 0)) for blood_type in BloodType
            },
            started_at=parse_datetime(field_value(record, "started_at")) or parse_datetime(
                field_value(record, "created")
            ),
            ended_at=parse_datetime(field_value(record, "ended_at")),
        )
