"""
Donors Router - Donor contribution endpoints.

Every write here also adjusts the owning camp's inventory.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from bloodcamp.errors import WorkflowError
from bloodcamp.workflow import CampCoordinationWorkflow

from ..dependencies import get_workflow
from ..errors import to_http_exception
from ..schemas.donors import (
    DonorCreate,
    DonorMutationResponse,
    DonorResponse,
    DonorUpdate,
    NewDonorCodeResponse,
)

router = APIRouter(prefix="/api", tags=["donors"])


@router.get("/donors/new-code", response_model=NewDonorCodeResponse)
async def new_donor_code(workflow: CampCoordinationWorkflow = Depends(get_workflow)) -> NewDonorCodeResponse:
    """Pre-generate the donor code shown on the form before saving."""
    return NewDonorCodeResponse(donor_code=workflow.new_donor_code())


@router.get("/camps/{camp_id}/donors", response_model=list[DonorResponse])
async def list_donors(
    camp_id: str,
    blood_type: str | None = Query(default=None, description="Only donors of this blood type"),
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> list[DonorResponse]:
    try:
        donors = await workflow.list_donors(camp_id, blood_type)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return [DonorResponse.from_donor(donor) for donor in donors]


@router.post("/camps/{camp_id}/donors", response_model=DonorMutationResponse, status_code=201)
async def add_donor(
    camp_id: str,
    body: DonorCreate,
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> DonorMutationResponse:
    try:
        result = await workflow.add_donor(camp_id, body.contact, body.blood_type, body.units, body.donor_code)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return DonorMutationResponse(message=result.message, donor=DonorResponse.from_donor(result.value))


@router.put("/camps/{camp_id}/donors/{donor_id}", response_model=DonorMutationResponse)
async def update_donor(
    camp_id: str,
    donor_id: str,
    body: DonorUpdate,
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> DonorMutationResponse:
    try:
        result = await workflow.update_donor(camp_id, donor_id, body.contact, body.blood_type, body.units)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return DonorMutationResponse(message=result.message, donor=DonorResponse.from_donor(result.value))


@router.delete("/camps/{camp_id}/donors/{donor_id}", response_model=DonorMutationResponse)
async def delete_donor(
    camp_id: str,
    donor_id: str,
    confirm: bool = Query(default=False, description="Must be true to delete"),
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> DonorMutationResponse:
    try:
        result = await workflow.delete_donor(camp_id, donor_id, confirmed=confirm)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return DonorMutationResponse(message=result.message)
