"""
Camps Router - Camp lifecycle and inventory endpoints.

Start/end a camp for the calling coordinator, list their camps, and rebuild
a camp's inventory from its donor records.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from bloodcamp.errors import WorkflowError
from bloodcamp.location import ReportedLocation
from bloodcamp.workflow import CampCoordinationWorkflow

from ..dependencies import get_coordinator_uid, get_workflow
from ..errors import to_http_exception
from ..schemas.camps import (
    CampResponse,
    EndCampResponse,
    ReconcileResponse,
    StartCampRequest,
    StartCampResponse,
)

router = APIRouter(prefix="/api/camps", tags=["camps"])


@router.post("", response_model=StartCampResponse, status_code=201)
async def start_camp(
    body: StartCampRequest,
    coordinator_uid: str = Depends(get_coordinator_uid),
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> StartCampResponse:
    """Start a camp at the coordinator's current position."""
    location = ReportedLocation(latitude=body.latitude, longitude=body.longitude, error=body.location_error)
    try:
        result = await workflow.start_camp(coordinator_uid, body.location, body.coordinator_name, location)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return StartCampResponse(message=result.message, camp=CampResponse.from_camp(result.value))


@router.get("/active", response_model=CampResponse | None)
async def get_active_camp(
    coordinator_uid: str = Depends(get_coordinator_uid),
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> CampResponse | None:
    """The coordinator's active camp, or null."""
    try:
        camp = await workflow.get_active_camp(coordinator_uid)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return CampResponse.from_camp(camp) if camp else None


@router.get("/past", response_model=list[CampResponse])
async def list_past_camps(
    coordinator_uid: str = Depends(get_coordinator_uid),
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> list[CampResponse]:
    """The coordinator's ended camps, most recent first."""
    try:
        camps = await workflow.list_past_camps(coordinator_uid)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return [CampResponse.from_camp(camp) for camp in camps]


@router.get("/{camp_id}", response_model=CampResponse)
async def get_camp(camp_id: str, workflow: CampCoordinationWorkflow = Depends(get_workflow)) -> CampResponse:
    try:
        camp = await workflow.get_camp(camp_id)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return CampResponse.from_camp(camp)


@router.post("/{camp_id}/end", response_model=EndCampResponse)
async def end_camp(
    camp_id: str,
    confirm: bool = Query(default=False, description="Must be true; ending a camp closes its pending requests"),
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> EndCampResponse:
    """End a camp and close its pending requests.

    If some requests cannot be closed the camp still ends and a 502 lists
    the requests that were left pending.
    """
    try:
        result = await workflow.end_camp(camp_id, confirmed=confirm)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return EndCampResponse.from_result(result.message, result.value)


@router.post("/{camp_id}/reconcile", response_model=ReconcileResponse)
async def reconcile_inventory(
    camp_id: str,
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> ReconcileResponse:
    """Rebuild the camp inventory from its donor records (admin repair)."""
    try:
        result = await workflow.reconcile_inventory(camp_id)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return ReconcileResponse.from_result(result.message, result.value)
