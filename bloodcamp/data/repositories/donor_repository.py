"""Donor repository for data access.

Donor writes are never sent on their own: the repository only builds WriteOps
so the registry can pair each one with the matching inventory adjustment."""

from __future__ import annotations

import logging
from typing import Any

from pocketbase import PocketBase

from ...errors import ExternalStoreError, NotFoundError
from ...models import BloodType, Donor
from ..batch import WriteOp
from ..records import DONORS, error_status, field_value, parse_datetime, quote

logger = logging.getLogger(__name__)


class DonorRepository:
    """Repository for Donor data access"""

    def __init__(self, pb_client: PocketBase) -> None:
        self.pb = pb_client

    def get(self, donor_id: str) -> Donor:
        try:
            record = self.pb.collection(DONORS).get_one(donor_id)
        except Exception as e:
            if error_status(e) == 404:
                raise NotFoundError("Donor", donor_id) from e
            logger.error(f"Error loading donor {donor_id}: {e}")
            raise ExternalStoreError("loading donor", e) from e
        return self.map_from_db(record)

    def find_by_camp(self, camp_id: str) -> list[Donor]:
        try:
            records = self.pb.collection(DONORS).get_full_list(query_params={"filter": f"camp = {quote(camp_id)}"})
        except Exception as e:
            logger.error(f"Error loading donors for camp {camp_id}: {e}")
            raise ExternalStoreError("loading donors", e) from e
        return [self.map_from_db(record) for record in records]

    def find_all(self) -> list[Donor]:
        try:
            records = self.pb.collection(DONORS).get_full_list()
        except Exception as e:
            logger.error(f"Error loading donors: {e}")
            raise ExternalStoreError("loading donors", e) from e
        return [self.map_from_db(record) for record in records]

    def create_op(
        self,
        donor_code: str,
        contact: str,
        blood_type: BloodType,
        units: int,
        camp_id: str,
        camp_location: str,
    ) -> WriteOp:
        """Write that creates a donor. `donated_at` is assigned by the server."""
        return WriteOp(
            "POST",
            DONORS,
            body={
                "donor_code": donor_code,
                "contact": contact,
                "blood_type": blood_type.value,
                "units": units,
                "camp": camp_id,
                "camp_location": camp_location,
            },
        )

    def update_op(self, donor_id: str, contact: str, blood_type: BloodType, units: int) -> WriteOp:
        return WriteOp(
            "PATCH",
            DONORS,
            record_id=donor_id,
            body={"contact": contact, "blood_type": blood_type.value, "units": units},
        )

    def delete_op(self, donor_id: str) -> WriteOp:
        return WriteOp("DELETE", DONORS, record_id=donor_id)

    def map_from_db(self, record: Any) -> Donor:
        return Donor(
            id=field_value(record, "id", ""),
            donor_code=field_value(record, "donor_code", ""),
            contact=field_value(record, "contact", ""),
            blood_type=BloodType(field_value(record, "blood_type")),
            units=int(field_value(record, "units", 0)),
            camp_id=field_value(record, "camp", ""),
            camp_location=field_value(record, "camp_location", ""),
            donated_at=parse_datetime(field_value(record, "donated_at")) or parse_datetime(
                field_value(record, "created")
            ),
        )
