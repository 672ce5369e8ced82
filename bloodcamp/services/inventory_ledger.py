"""Inventory ledger - per-blood-type unit counts on a camp.

The ledger has no writes of its own in normal operation: every donor mutation
carries the matching adjustment (see DonorRegistry). This module holds the
arithmetic for those adjustments plus the explicit reconcile operation that
rebuilds the counters from donor records.

Counters are not clamped at zero. Deleting a donor whose units exceed the
current counter drives it negative, which flags earlier inconsistent data
entry; `reconcile` is the way to repair it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..data.repositories import CampRepository, DonorRepository
from ..models import BloodType, Camp, Donor, zero_inventory

logger = logging.getLogger(__name__)


def adjustment_for_add(blood_type: BloodType, units: int) -> dict[BloodType, int]:
    return {blood_type: units}


def adjustment_for_delete(blood_type: BloodType, units: int) -> dict[BloodType, int]:
    return {blood_type: -units}


def adjustment_for_update(
    old_type: BloodType,
    old_units: int,
    new_type: BloodType,
    new_units: int,
) -> dict[BloodType, int]:
    """Deltas that move a donor's contribution from its old to its new values.

    Same type: a single delta of the difference. Type change: the old type
    loses all old units and the new type gains all new units.
    """
    if old_type is new_type:
        return {new_type: new_units - old_units}
    return {old_type: -old_units, new_type: new_units}


def totals_from_donors(donors: Iterable[Donor]) -> dict[BloodType, int]:
    """Inventory implied by a set of donor records"""
    totals = zero_inventory()
    for donor in donors:
        totals[donor.blood_type] += donor.units
    return totals


def find_discrepancies(camp: Camp, donors: Iterable[Donor]) -> dict[BloodType, tuple[int, int]]:
    """Blood types whose counter disagrees with the donor records.

    Returns:
        {blood_type: (recorded, expected)} for each mismatching type
    """
    expected = totals_from_donors(d for d in donors if d.camp_id == camp.id)
    return {
        blood_type: (camp.inventory.get(blood_type, 0), expected[blood_type])
        for blood_type in BloodType
        if camp.inventory.get(blood_type, 0) != expected[blood_type]
    }


@dataclass
class ReconcileResult:
    """Outcome of rebuilding a camp's inventory from its donors"""

    camp_id: str
    before: dict[BloodType, int]
    after: dict[BloodType, int]

    @property
    def changed(self) -> dict[BloodType, tuple[int, int]]:
        return {bt: (self.before[bt], self.after[bt]) for bt in BloodType if self.before[bt] != self.after[bt]}


class InventoryLedger:
    """Admin-side operations on camp inventory"""

    def __init__(self, camps: CampRepository, donors: DonorRepository) -> None:
        self.camps = camps
        self.donors = donors

    async def reconcile(self, camp_id: str) -> ReconcileResult:
        """Recompute a camp's counters from its donor records and overwrite them.

        Skips the write when the counters already match.
        """
        camp, donors = await asyncio.gather(
            asyncio.to_thread(self.camps.get, camp_id),
            asyncio.to_thread(self.donors.find_by_camp, camp_id),
        )

        before = {bt: camp.inventory.get(bt, 0) for bt in BloodType}
        after = totals_from_donors(donors)
        result = ReconcileResult(camp_id=camp_id, before=before, after=after)

        if not result.changed:
            logger.info(f"Inventory of camp {camp_id} already matches its {len(donors)} donor record(s)")
            return result

        changes = ", ".join(f"{bt.value}: {old} -> {new}" for bt, (old, new) in result.changed.items())
        logger.warning(f"Reconciling inventory of camp {camp_id}: {changes}")
        await asyncio.to_thread(self.camps.set_inventory, camp_id, after)
        return result
