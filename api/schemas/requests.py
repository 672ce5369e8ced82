"""
Pydantic schemas for hospital request endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from bloodcamp.models import BloodRequest


class RequestStatusUpdate(BaseModel):
    """Request model for changing a request's status."""

    status: str


class BloodRequestResponse(BaseModel):
    """Response model for hospital requests."""

    id: str
    hospital: str
    blood_type: str
    units: int
    urgent: bool
    distance_km: float | None = None
    status: str
    camp_id: str
    requested_at: datetime | None = None

    @classmethod
    def from_request(cls, request: BloodRequest) -> BloodRequestResponse:
        return cls(
            id=request.id,
            hospital=request.hospital,
            blood_type=request.blood_type.value,
            units=request.units,
            urgent=request.urgent,
            distance_km=round(request.distance_km, 2) if request.distance_km is not None else None,
            status=request.status.value,
            camp_id=request.camp_id,
            requested_at=request.requested_at,
        )


class RequestStatusResponse(BaseModel):
    message: str
    request: BloodRequestResponse
