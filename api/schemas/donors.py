"""
Pydantic schemas for donor endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from bloodcamp.models import Donor


class DonorCreate(BaseModel):
    """Request model for recording a donor.

    `units` is taken as entered in the form; the service validates it.
    `donor_code` is the code shown to the donor before saving (from
    GET /api/donors/new-code); one is generated when omitted.
    """

    contact: str = ""
    blood_type: str = "A+"
    units: int | str | None = None
    donor_code: str | None = None


class DonorUpdate(BaseModel):
    """Request model for editing a donor."""

    contact: str = ""
    blood_type: str
    units: int | str | None = None


class DonorResponse(BaseModel):
    """Response model for donors."""

    id: str
    donor_code: str
    contact: str
    blood_type: str
    units: int
    camp_id: str
    camp_location: str
    donated_at: datetime | None = None

    @classmethod
    def from_donor(cls, donor: Donor) -> DonorResponse:
        return cls(
            id=donor.id,
            donor_code=donor.donor_code,
            contact=donor.contact,
            blood_type=donor.blood_type.value,
            units=donor.units,
            camp_id=donor.camp_id,
            camp_location=donor.camp_location,
            donated_at=donor.donated_at,
        )


class DonorMutationResponse(BaseModel):
    message: str
    donor: DonorResponse | None = None


class NewDonorCodeResponse(BaseModel):
    donor_code: str
