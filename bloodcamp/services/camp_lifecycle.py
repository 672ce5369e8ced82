"""Camp lifecycle manager - start and end camp sessions.

A coordinator has at most one active camp. Ending a camp flips it to
inactive first and then runs the request close-out sweep; a failing sweep
never reverts the status change.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from ..data.repositories import CampRepository
from ..errors import CampAlreadyActiveError, CloseOutSweepError, ConfirmationRequiredError
from ..location import LocationProvider
from ..models import Camp, zero_inventory
from .request_triage import RequestTriage, SweepResult
from .validation import require_text

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=UTC)


def sort_past_camps(camps: list[Camp]) -> list[Camp]:
    """Most recently ended first"""
    return sorted(camps, key=lambda c: c.ended_at or _EPOCH, reverse=True)


class CampLifecycleManager:
    """Opens and closes camps for a coordinator"""

    def __init__(self, camps: CampRepository, triage: RequestTriage) -> None:
        self.camps = camps
        self.triage = triage

    async def get_active_camp(self, coordinator_uid: str) -> Camp | None:
        active = await asyncio.to_thread(self.camps.find_active, coordinator_uid)
        if len(active) > 1:
            logger.warning(
                f"Coordinator {coordinator_uid} has {len(active)} active camps: {[c.id for c in active]}"
            )
        return active[0] if active else None

    async def list_past_camps(self, coordinator_uid: str) -> list[Camp]:
        return sort_past_camps(await asyncio.to_thread(self.camps.find_past, coordinator_uid))

    async def start_camp(
        self,
        coordinator_uid: str,
        location: Any,
        coordinator_name: Any,
        location_provider: LocationProvider,
    ) -> Camp:
        """Open a camp with a zeroed inventory over all eight blood types.

        Raises:
            ValidationError: location or coordinator name is blank
            LocationUnavailable: coordinates could not be obtained
            CampAlreadyActiveError: the coordinator already runs a camp
            ExternalStoreError: the camp could not be created
        """
        message = "Please enter camp location and coordinator name"
        location = require_text(location, message)
        coordinator_name = require_text(coordinator_name, message)

        coordinates = await location_provider.get_location()

        existing = await self.get_active_camp(coordinator_uid)
        if existing is not None:
            raise CampAlreadyActiveError(coordinator_uid, existing.id)

        camp = await asyncio.to_thread(
            self.camps.create,
            location,
            coordinator_name,
            coordinator_uid,
            coordinates,
            zero_inventory(),
        )
        logger.info(f"Camp {camp.id} started at {location!r} by {coordinator_name} ({coordinator_uid})")
        return camp

    async def end_camp(self, camp_id: str, confirmed: bool = False) -> SweepResult:
        """Mark a camp inactive, then close its pending requests.

        Ending an already inactive camp keeps the original end time and only
        re-runs the sweep, which is a no-op once nothing is pending.

        Raises:
            ConfirmationRequiredError: `confirmed` is False
            CloseOutSweepError: some requests could not be closed; the camp
                is inactive regardless
        """
        if not confirmed:
            raise ConfirmationRequiredError("ending this camp session")

        camp = await asyncio.to_thread(self.camps.get, camp_id)
        if camp.is_active:
            await asyncio.to_thread(self.camps.mark_inactive, camp_id, datetime.now(UTC))
            logger.info(f"Camp {camp_id} marked inactive")
        else:
            logger.info(f"Camp {camp_id} already inactive; re-running close-out sweep")

        result = await self.triage.close_out_sweep(camp_id)
        if result.failed:
            raise CloseOutSweepError(result)
        return result
