"""
CampCoordinationWorkflow - one entry point for every coordinator action.

Composes the lifecycle manager, inventory ledger, donor registry and request
triage around a single RepositoryFactory. Each action either returns a
WorkflowResult with a confirmation message or raises a WorkflowError whose
message names what was attempted. Nothing is retried and nothing already
committed is rolled back.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .data.repository_factory import RepositoryFactory
from .errors import ValidationError, WorkflowError
from .location import LocationProvider
from .models import BloodRequest, Camp, Donor
from .services import (
    CampLifecycleManager,
    DonorRegistry,
    InventoryLedger,
    ReconcileResult,
    RequestTriage,
    SweepResult,
    list_donors_by_blood_type,
    new_donor_code,
    requests_for_camp,
)
from .services.validation import parse_blood_type
from .views import DashboardSnapshot, build_snapshot, sort_donors_newest_first

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class WorkflowResult(Generic[T]):
    """Successful outcome plus the confirmation shown to the coordinator"""

    message: str
    value: T


class CampCoordinationWorkflow:
    """Coordinator-facing camp, donor and request operations"""

    def __init__(
        self,
        repositories: RepositoryFactory,
        transactional_writes: bool = True,
        enforce_request_progression: bool = False,
    ) -> None:
        self.repositories = repositories
        self.triage = RequestTriage(
            repositories.requests, repositories.camps, enforce_progression=enforce_request_progression
        )
        self.lifecycle = CampLifecycleManager(repositories.camps, self.triage)
        self.ledger = InventoryLedger(repositories.camps, repositories.donors)
        self.registry = DonorRegistry(repositories, transactional=transactional_writes)

    async def _run(self, action: str, success_message: str, operation: Awaitable[T]) -> WorkflowResult[T]:
        try:
            value = await operation
        except WorkflowError as e:
            logger.warning(f"{action} failed: {e.message}")
            raise
        logger.info(success_message)
        return WorkflowResult(success_message, value)

    # ---- Camp lifecycle ----

    async def start_camp(
        self,
        coordinator_uid: str,
        location: Any,
        coordinator_name: Any,
        location_provider: LocationProvider,
    ) -> WorkflowResult[Camp]:
        return await self._run(
            "Starting camp",
            "Camp started successfully!",
            self.lifecycle.start_camp(coordinator_uid, location, coordinator_name, location_provider),
        )

    async def end_camp(self, camp_id: str, confirmed: bool = False) -> WorkflowResult[SweepResult]:
        return await self._run(
            "Ending camp",
            "Camp ended successfully!",
            self.lifecycle.end_camp(camp_id, confirmed=confirmed),
        )

    async def get_active_camp(self, coordinator_uid: str) -> Camp | None:
        return await self.lifecycle.get_active_camp(coordinator_uid)

    async def list_past_camps(self, coordinator_uid: str) -> list[Camp]:
        return await self.lifecycle.list_past_camps(coordinator_uid)

    async def get_camp(self, camp_id: str) -> Camp:
        return await asyncio.to_thread(self.repositories.camps.get, camp_id)

    async def reconcile_inventory(self, camp_id: str) -> WorkflowResult[ReconcileResult]:
        return await self._run(
            "Reconciling inventory",
            "Inventory reconciled with donor records",
            self.ledger.reconcile(camp_id),
        )

    # ---- Donors ----

    @staticmethod
    def new_donor_code() -> str:
        return new_donor_code()

    async def list_donors(self, camp_id: str, blood_type: Any = None) -> list[Donor]:
        donors = await asyncio.to_thread(self.repositories.donors.find_by_camp, camp_id)
        if blood_type is not None:
            donors = list_donors_by_blood_type(donors, parse_blood_type(blood_type))
        return sort_donors_newest_first(donors)

    async def add_donor(
        self,
        camp_id: str,
        contact: Any,
        blood_type: Any,
        units: Any,
        donor_code: str | None = None,
    ) -> WorkflowResult[Donor]:
        camp = await self.get_camp(camp_id)
        return await self._run(
            "Saving donor",
            "Donor information saved and inventory updated!",
            self.registry.add_donor(camp, contact, blood_type, units, donor_code=donor_code),
        )

    async def update_donor(
        self,
        camp_id: str,
        donor_id: str,
        contact: Any,
        blood_type: Any,
        units: Any,
    ) -> WorkflowResult[Donor]:
        camp, donor = await asyncio.gather(
            self.get_camp(camp_id),
            asyncio.to_thread(self.repositories.donors.get, donor_id),
        )
        return await self._run(
            "Updating donor",
            "Donor information updated!",
            self.registry.update_donor(camp, donor, contact, blood_type, units),
        )

    async def delete_donor(
        self,
        camp_id: str,
        donor_id: str,
        confirmed: bool = False,
        blood_type: Any = None,
        units: Any = None,
    ) -> WorkflowResult[None]:
        """Delete a donor of this camp. Blood type and units default to the stored record."""
        camp = await self.get_camp(camp_id)
        donor = await asyncio.to_thread(self.repositories.donors.get, donor_id)
        if donor.camp_id != camp_id:
            raise ValidationError(f"Donor {donor_id} does not belong to camp {camp_id}")
        blood_type = donor.blood_type if blood_type is None else blood_type
        units = donor.units if units is None else units
        return await self._run(
            "Deleting donor",
            "Donor record deleted successfully!",
            self.registry.delete_donor(camp, donor_id, blood_type, units, confirmed=confirmed),
        )

    # ---- Requests ----

    async def list_requests(self, camp_id: str) -> list[BloodRequest]:
        feed = await asyncio.to_thread(self.repositories.requests.find_all)
        return requests_for_camp(feed, camp_id)

    async def update_request_status(self, request_id: str, new_status: Any) -> WorkflowResult[BloodRequest]:
        return await self._run(
            "Updating request status",
            "Request status updated",
            self.triage.update_request_status(request_id, new_status),
        )

    # ---- Dashboard ----

    async def dashboard(self, coordinator_uid: str) -> DashboardSnapshot:
        """One-shot dashboard snapshot built from current query results"""
        repos = self.repositories
        active_camp, past_camps, requests, all_donors = await asyncio.gather(
            self.get_active_camp(coordinator_uid),
            asyncio.to_thread(repos.camps.find_past, coordinator_uid),
            asyncio.to_thread(repos.requests.find_all),
            asyncio.to_thread(repos.donors.find_all),
        )
        return build_snapshot(active_camp, past_camps, all_donors, requests, all_donors)
