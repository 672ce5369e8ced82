"""Request repository for data access.

Handles all database operations on hospital blood requests. Requests are
created by hospitals elsewhere; this side only reads them and moves their
status."""

from __future__ import annotations

import logging
from typing import Any

from pocketbase import PocketBase

from ...errors import ExternalStoreError, NotFoundError
from ...models import BloodRequest, BloodType, RequestStatus
from ..records import REQUESTS, error_status, field_value, parse_datetime, quote

logger = logging.getLogger(__name__)


class RequestRepository:
    """Repository for BloodRequest data access"""

    def __init__(self, pb_client: PocketBase) -> None:
        self.pb = pb_client

    def get(self, request_id: str) -> BloodRequest:
        try:
            record = self.pb.collection(REQUESTS).get_one(request_id)
        except Exception as e:
            if error_status(e) == 404:
                raise NotFoundError("Request", request_id) from e
            logger.error(f"Error loading request {request_id}: {e}")
            raise ExternalStoreError("loading request", e) from e
        return self.map_from_db(record)

    def find_all(self) -> list[BloodRequest]:
        """Every request, for client-side filtering by camp"""
        try:
            records = self.pb.collection(REQUESTS).get_full_list()
        except Exception as e:
            logger.error(f"Error loading requests: {e}")
            raise ExternalStoreError("loading requests", e) from e
        return [self.map_from_db(record) for record in records]

    def find_pending_for_camp(self, camp_id: str) -> list[BloodRequest]:
        filter_str = f"camp = {quote(camp_id)} && status = {quote(RequestStatus.PENDING.value)}"
        try:
            records = self.pb.collection(REQUESTS).get_full_list(query_params={"filter": filter_str})
        except Exception as e:
            logger.error(f"Error querying pending requests for camp {camp_id}: {e}")
            raise ExternalStoreError("closing pending requests", e) from e
        return [self.map_from_db(record) for record in records]

    def update_status(self, request_id: str, status: RequestStatus) -> BloodRequest:
        try:
            record = self.pb.collection(REQUESTS).update(request_id, {"status": status.value})
        except Exception as e:
            if error_status(e) == 404:
                raise NotFoundError("Request", request_id) from e
            logger.warning(f"Error updating request {request_id} to {status.value!r}: {e}")
            raise ExternalStoreError("updating request status", e) from e
        return self.map_from_db(record)

    def map_from_db(self, record: Any) -> BloodRequest:
        distance = field_value(record, "distance")
        return BloodRequest(
            id=field_value(record, "id", ""),
            hospital=field_value(record, "hospital", ""),
            blood_type=BloodType(field_value(record, "blood_type")),
            units=int(field_value(record, "units", 0)),
            status=RequestStatus(field_value(record, "status", RequestStatus.PENDING.value)),
            camp_id=field_value(record, "camp", ""),
            urgent=bool(field_value(record, "urgent", False)),
            # PocketBase reports an unset number field as 0
            distance_km=float(distance) if distance else None,
            requested_at=parse_datetime(field_value(record, "requested_at")) or parse_datetime(
                field_value(record, "created")
            ),
        )
