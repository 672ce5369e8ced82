"""
Pydantic schemas for the Bloodcamp API.

Re-exports all schemas for convenient importing.
"""

from __future__ import annotations

from .camps import (
    CampResponse,
    EndCampResponse,
    ReconcileResponse,
    StartCampRequest,
    StartCampResponse,
)
from .dashboard import DashboardResponse, PastCampSummaryResponse
from .donors import (
    DonorCreate,
    DonorMutationResponse,
    DonorResponse,
    DonorUpdate,
    NewDonorCodeResponse,
)
from .requests import BloodRequestResponse, RequestStatusResponse, RequestStatusUpdate

__all__ = [
    # Camps
    "CampResponse",
    "EndCampResponse",
    "ReconcileResponse",
    "StartCampRequest",
    "StartCampResponse",
    # Dashboard
    "DashboardResponse",
    "PastCampSummaryResponse",
    # Donors
    "DonorCreate",
    "DonorMutationResponse",
    "DonorResponse",
    "DonorUpdate",
    "NewDonorCodeResponse",
    # Requests
    "BloodRequestResponse",
    "RequestStatusResponse",
    "RequestStatusUpdate",
]
