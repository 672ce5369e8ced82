"""Derived dashboard views.

Everything here is recomputed from full snapshots on every change; there is
no incremental state."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from .models import BloodRequest, BloodType, Camp, Donor, zero_inventory
from .services.camp_lifecycle import sort_past_camps
from .services.donor_registry import donor_counts_by_blood_type
from .services.request_triage import requests_for_camp

_EPOCH = datetime.min.replace(tzinfo=UTC)


def sort_donors_newest_first(donors: Iterable[Donor]) -> list[Donor]:
    # Donors still waiting for a server timestamp sort last
    return sorted(donors, key=lambda d: d.donated_at or _EPOCH, reverse=True)


@dataclass
class PastCampSummary:
    """Totals shown for a finished camp"""

    camp: Camp
    total_units: int
    donor_count: int
    breakdown: list[tuple[BloodType, int]]


def past_camp_summaries(past_camps: Iterable[Camp], all_donors: Iterable[Donor]) -> list[PastCampSummary]:
    donors_per_camp: dict[str, int] = {}
    for donor in all_donors:
        donors_per_camp[donor.camp_id] = donors_per_camp.get(donor.camp_id, 0) + 1

    return [
        PastCampSummary(
            camp=camp,
            total_units=camp.total_units,
            donor_count=donors_per_camp.get(camp.id, 0),
            breakdown=sorted(camp.inventory.items(), key=lambda item: item[0].value),
        )
        for camp in sort_past_camps(list(past_camps))
    ]


@dataclass
class DashboardSnapshot:
    """Everything the coordinator dashboard renders"""

    active_camp: Camp | None = None
    inventory: dict[BloodType, int] = field(default_factory=zero_inventory)
    donor_counts: dict[BloodType, int] = field(default_factory=lambda: donor_counts_by_blood_type([]))
    donors: list[Donor] = field(default_factory=list)
    requests: list[BloodRequest] = field(default_factory=list)
    past_camps: list[PastCampSummary] = field(default_factory=list)


def build_snapshot(
    active_camp: Camp | None,
    past_camps: Iterable[Camp],
    donors: Iterable[Donor],
    requests: Iterable[BloodRequest],
    all_donors: Iterable[Donor],
) -> DashboardSnapshot:
    """Recompute every derived view from the latest query results.

    `donors` should already be limited to the active camp; anything else is
    dropped here as well.
    """
    camp_id = active_camp.id if active_camp else None
    camp_donors = sort_donors_newest_first(d for d in donors if d.camp_id == camp_id) if camp_id else []

    return DashboardSnapshot(
        active_camp=active_camp,
        inventory=dict(active_camp.inventory) if active_camp else zero_inventory(),
        donor_counts=donor_counts_by_blood_type(camp_donors),
        donors=camp_donors,
        requests=requests_for_camp(requests, camp_id),
        # Past camps are only listed while no camp is running
        past_camps=past_camp_summaries(past_camps, all_donors) if active_camp is None else [],
    )
