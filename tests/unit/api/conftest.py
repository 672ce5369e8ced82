"""Fixtures for API router tests."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from bloodcamp.workflow import CampCoordinationWorkflow


@pytest.fixture
def client(workflow: CampCoordinationWorkflow) -> TestClient:
    """App with every router, backed by the in-memory store."""
    from api.dependencies import get_workflow
    from api.routers import camps, dashboard, donors, requests

    app = FastAPI()
    app.include_router(camps.router)
    app.include_router(donors.router)
    app.include_router(requests.router)
    app.include_router(dashboard.router)
    app.dependency_overrides[get_workflow] = lambda: workflow
    return TestClient(app)
