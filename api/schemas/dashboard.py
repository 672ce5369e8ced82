"""
Pydantic schemas for the coordinator dashboard snapshot.
"""

from __future__ import annotations

from pydantic import BaseModel

from bloodcamp.views import DashboardSnapshot, PastCampSummary

from .camps import CampResponse, inventory_to_dict
from .donors import DonorResponse
from .requests import BloodRequestResponse


class PastCampSummaryResponse(BaseModel):
    camp: CampResponse
    total_units: int
    donor_count: int
    breakdown: dict[str, int]

    @classmethod
    def from_summary(cls, summary: PastCampSummary) -> PastCampSummaryResponse:
        return cls(
            camp=CampResponse.from_camp(summary.camp),
            total_units=summary.total_units,
            donor_count=summary.donor_count,
            breakdown={blood_type.value: units for blood_type, units in summary.breakdown},
        )


class DashboardResponse(BaseModel):
    """Everything the coordinator dashboard renders."""

    active_camp: CampResponse | None = None
    inventory: dict[str, int]
    donor_counts: dict[str, int]
    donors: list[DonorResponse]
    requests: list[BloodRequestResponse]
    past_camps: list[PastCampSummaryResponse]

    @classmethod
    def from_snapshot(cls, snapshot: DashboardSnapshot) -> DashboardResponse:
        return cls(
            active_camp=CampResponse.from_camp(snapshot.active_camp) if snapshot.active_camp else None,
            inventory=inventory_to_dict(snapshot.inventory),
            donor_counts=inventory_to_dict(snapshot.donor_counts),
            donors=[DonorResponse.from_donor(d) for d in snapshot.donors],
            requests=[BloodRequestResponse.from_request(r) for r in snapshot.requests],
            past_camps=[PastCampSummaryResponse.from_summary(s) for s in snapshot.past_camps],
        )
