"""
Requests Router - Hospital request triage endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from bloodcamp.errors import WorkflowError
from bloodcamp.workflow import CampCoordinationWorkflow

from ..dependencies import get_workflow
from ..errors import to_http_exception
from ..schemas.requests import BloodRequestResponse, RequestStatusResponse, RequestStatusUpdate

router = APIRouter(prefix="/api", tags=["requests"])


@router.get("/camps/{camp_id}/requests", response_model=list[BloodRequestResponse])
async def list_camp_requests(
    camp_id: str,
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> list[BloodRequestResponse]:
    """Requests routed to a camp, newest first."""
    try:
        requests = await workflow.list_requests(camp_id)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return [BloodRequestResponse.from_request(request) for request in requests]


@router.patch("/requests/{request_id}/status", response_model=RequestStatusResponse)
async def update_request_status(
    request_id: str,
    body: RequestStatusUpdate,
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> RequestStatusResponse:
    """Move a request to Pending, Delivering or Delivered."""
    try:
        result = await workflow.update_request_status(request_id, body.status)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return RequestStatusResponse(message=result.message, request=BloodRequestResponse.from_request(result.value))
