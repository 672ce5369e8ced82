"""
Dashboard Router - One-shot coordinator dashboard snapshot.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from bloodcamp.errors import WorkflowError
from bloodcamp.workflow import CampCoordinationWorkflow

from ..dependencies import get_coordinator_uid, get_workflow
from ..errors import to_http_exception
from ..schemas.dashboard import DashboardResponse

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    coordinator_uid: str = Depends(get_coordinator_uid),
    workflow: CampCoordinationWorkflow = Depends(get_workflow),
) -> DashboardResponse:
    try:
        snapshot = await workflow.dashboard(coordinator_uid)
    except WorkflowError as e:
        raise to_http_exception(e) from e
    return DashboardResponse.from_snapshot(snapshot)
