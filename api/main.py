#!/usr/bin/env python3
"""
Bloodcamp API - HTTP API for blood-donation camp coordinators.

This is the FastAPI application that backs the coordinator dashboard. It
exposes:
- Camp start/end (with the request close-out sweep)
- Donor contributions with paired inventory adjustments
- Hospital request triage
- Dashboard snapshots
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bloodcamp.errors import WorkflowError
from bloodcamp.logging_config import configure_logging, get_logger

from .dependencies import authenticate_pb
from .errors import status_code_for
from .settings import get_settings

# Format: 2026-01-06T14:05:52Z [api] LEVEL message
configure_logging(source="api")
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle - startup and shutdown."""
    settings = get_settings()

    if not settings.skip_pb_auth:
        await authenticate_pb()
    else:
        logger.warning("Skipping PocketBase authentication (SKIP_PB_AUTH=true)")

    if not settings.transactional_writes:
        logger.warning(
            "TRANSACTIONAL_WRITES=false: donor records and inventory are written independently "
            "and can briefly disagree"
        )

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Bloodcamp API", description="Blood-donation camp coordination API", lifespan=lifespan)

    # Fallback for workflow errors raised outside a router's own handling
    @app.exception_handler(WorkflowError)
    async def workflow_error_handler(request: Request, exc: WorkflowError) -> JSONResponse:
        return JSONResponse(status_code=status_code_for(exc), content={"detail": exc.message})

    settings = get_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    from .routers import camps, dashboard, donors, requests

    app.include_router(camps.router)
    app.include_router(donors.router)
    app.include_router(requests.router)
    app.include_router(dashboard.router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "bloodcamp-api"}

    return app


# Create app instance for uvicorn
app = create_app()
