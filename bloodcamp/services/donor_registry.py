"""Donor registry - create, update and delete donor contributions.

Each mutation is sent as one WriteBatch holding the donor write and the
matching inventory adjustment, so the ledger invariant (per blood type, camp
inventory == sum of donor units) holds after every operation.
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from collections.abc import Iterable
from typing import Any

from ..data.repository_factory import RepositoryFactory
from ..errors import ConfirmationRequiredError, ExternalStoreError, ValidationError
from ..models import BloodType, Camp, Donor
from .inventory_ledger import adjustment_for_add, adjustment_for_delete, adjustment_for_update
from .validation import parse_blood_type, parse_units, require_text

logger = logging.getLogger(__name__)


def new_donor_code() -> str:
    """Opaque donor code shown to the donor before the record is saved"""
    return str(uuid.uuid4())


def list_donors_by_blood_type(donors: Iterable[Donor], blood_type: BloodType) -> list[Donor]:
    return [donor for donor in donors if donor.blood_type is blood_type]


def donor_counts_by_blood_type(donors: Iterable[Donor]) -> dict[BloodType, int]:
    """Number of donor records per type; zero disables the "view donors" action"""
    counts = Counter(donor.blood_type for donor in donors)
    return {blood_type: counts.get(blood_type, 0) for blood_type in BloodType}


def _require_active(camp: Camp) -> None:
    if not camp.is_active:
        raise ValidationError(f"Camp {camp.id} is not active")


class DonorRegistry:
    """Donor mutations paired with inventory adjustments"""

    def __init__(self, repositories: RepositoryFactory, transactional: bool = True) -> None:
        self.repositories = repositories
        self.transactional = transactional

    async def add_donor(
        self,
        camp: Camp,
        contact: Any,
        blood_type: Any,
        units: Any,
        donor_code: str | None = None,
    ) -> Donor:
        """Record a donation and increment the camp inventory by its units."""
        contact = require_text(contact, "Please fill in all fields")
        units = parse_units(units)
        blood_type = parse_blood_type(blood_type)
        _require_active(camp)
        donor_code = donor_code or new_donor_code()

        batch = self.repositories.batch(transactional=self.transactional)
        batch.add(
            self.repositories.donors.create_op(
                donor_code=donor_code,
                contact=contact,
                blood_type=blood_type,
                units=units,
                camp_id=camp.id,
                camp_location=camp.location,
            )
        )
        batch.add(self.repositories.camps.adjust_inventory_op(camp.id, adjustment_for_add(blood_type, units)))
        results = await batch.commit("saving donor information")

        donor = self._donor_from_result(results[0], "saving donor information")
        logger.info(f"Donor {donor.donor_code} added to camp {camp.id}: {units} unit(s) of {blood_type.value}")
        return donor

    async def update_donor(
        self,
        camp: Camp,
        donor: Donor,
        new_contact: Any,
        new_blood_type: Any,
        new_units: Any,
    ) -> Donor:
        """Edit a donor and move its contribution in the inventory accordingly."""
        contact = require_text(new_contact, "Please fill in all fields")
        units = parse_units(new_units)
        blood_type = parse_blood_type(new_blood_type)
        _require_active(camp)
        if donor.camp_id != camp.id:
            raise ValidationError(f"Donor {donor.id} does not belong to camp {camp.id}")

        deltas = adjustment_for_update(donor.blood_type, donor.units, blood_type, units)

        batch = self.repositories.batch(transactional=self.transactional)
        batch.add(self.repositories.donors.update_op(donor.id, contact, blood_type, units))
        batch.add(self.repositories.camps.adjust_inventory_op(camp.id, deltas))
        results = await batch.commit("updating donor information")

        updated = self._donor_from_result(results[0], "updating donor information")
        logger.info(
            f"Donor {donor.id} updated at camp {camp.id}: "
            f"{donor.units} {donor.blood_type.value} -> {units} {blood_type.value}"
        )
        return updated

    async def delete_donor(
        self,
        camp: Camp,
        donor_id: str,
        blood_type: Any,
        units: Any,
        confirmed: bool = False,
    ) -> None:
        """Delete a donor record and decrement the camp inventory by its units.

        No floor at zero: the decrement is issued even if it drives the
        counter negative.
        """
        if not confirmed:
            raise ConfirmationRequiredError("deleting this donor record")
        blood_type = parse_blood_type(blood_type)
        units = parse_units(units)
        _require_active(camp)

        batch = self.repositories.batch(transactional=self.transactional)
        batch.add(self.repositories.donors.delete_op(donor_id))
        batch.add(self.repositories.camps.adjust_inventory_op(camp.id, adjustment_for_delete(blood_type, units)))
        await batch.commit("deleting donor")

        recorded = camp.inventory.get(blood_type, 0)
        if recorded < units:
            logger.warning(
                f"Deleting donor {donor_id} removed {units} unit(s) of {blood_type.value} "
                f"from camp {camp.id} which only recorded {recorded}"
            )
        logger.info(f"Donor {donor_id} deleted from camp {camp.id}")

    def _donor_from_result(self, result: Any, action: str) -> Donor:
        if result is None:
            raise ExternalStoreError(action, "store returned no donor record")
        return self.repositories.donors.map_from_db(result)
