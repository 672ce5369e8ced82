"""
Pydantic schemas for camp endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from bloodcamp.models import BloodType, Camp
from bloodcamp.services import ReconcileResult, SweepResult


def inventory_to_dict(inventory: dict[BloodType, int]) -> dict[str, int]:
    """Inventory keyed by blood type label, in display order."""
    return {blood_type.value: inventory.get(blood_type, 0) for blood_type in BloodType}


class StartCampRequest(BaseModel):
    """Request model for starting a camp.

    Coordinates come from the coordinator's device. `location_error` carries
    the device's reason when it could not provide a position.
    """

    location: str = ""
    coordinator_name: str = ""
    latitude: float | None = None
    longitude: float | None = None
    location_error: str | None = None


class CampResponse(BaseModel):
    """Response model for camps."""

    id: str
    location: str
    coordinator: str
    coordinator_uid: str
    status: str
    latitude: float | None = None
    longitude: float | None = None
    inventory: dict[str, int]
    total_units: int
    started_at: datetime | None = None
    ended_at: datetime | None = None

    @classmethod
    def from_camp(cls, camp: Camp) -> CampResponse:
        return cls(
            id=camp.id,
            location=camp.location,
            coordinator=camp.coordinator,
            coordinator_uid=camp.coordinator_uid,
            status=camp.status.value,
            latitude=camp.coordinates.latitude if camp.coordinates else None,
            longitude=camp.coordinates.longitude if camp.coordinates else None,
            inventory=inventory_to_dict(camp.inventory),
            total_units=camp.total_units,
            started_at=camp.started_at,
            ended_at=camp.ended_at,
        )


class StartCampResponse(BaseModel):
    message: str
    camp: CampResponse


class EndCampResponse(BaseModel):
    """Response model for ending a camp (close-out sweep outcome)."""

    message: str
    camp_id: str
    closed_request_ids: list[str]

    @classmethod
    def from_result(cls, message: str, result: SweepResult) -> EndCampResponse:
        return cls(message=message, camp_id=result.camp_id, closed_request_ids=result.closed)


class ReconcileResponse(BaseModel):
    message: str
    camp_id: str
    before: dict[str, int]
    after: dict[str, int]
    changed: list[str]

    @classmethod
    def from_result(cls, message: str, result: ReconcileResult) -> ReconcileResponse:
        return cls(
            message=message,
            camp_id=result.camp_id,
            before=inventory_to_dict(result.before),
            after=inventory_to_dict(result.after),
            changed=[blood_type.value for blood_type in result.changed],
        )
