"""Request triage - hospital requests routed to a camp.

Coordinators move requests along Pending -> Delivering -> Delivered. When a
camp ends, the close-out sweep moves every still-pending request to the
terminal "Camp Closed Before Approving Request" status.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from ..data.repositories import CampRepository, RequestRepository
from ..errors import ValidationError
from ..models import ALLOWED_TRANSITIONS, BloodRequest, RequestStatus
from .validation import parse_request_status

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=UTC)


def requests_for_camp(requests: Iterable[BloodRequest], camp_id: str | None) -> list[BloodRequest]:
    """Requests routed to a camp, newest first.

    The request feed covers every camp; filtering happens here, client-side.
    """
    if not camp_id:
        return []
    matching = [request for request in requests if request.camp_id == camp_id]
    matching.sort(key=lambda r: r.requested_at or _EPOCH, reverse=True)
    return matching


@dataclass
class SweepResult:
    """Per-request outcome of a close-out sweep"""

    camp_id: str
    closed: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        """Number of status writes issued"""
        return len(self.closed) + len(self.failed)


class RequestTriage:
    """Status transitions on hospital requests"""

    def __init__(
        self,
        requests: RequestRepository,
        camps: CampRepository,
        enforce_progression: bool = False,
    ) -> None:
        """
        Args:
            requests: Request repository
            camps: Camp repository, used to refuse changes on closed camps
            enforce_progression: Reject backwards moves (e.g. Delivered -> Pending)
                using ALLOWED_TRANSITIONS. Off by default: coordinators may
                correct a mistaken status.
        """
        self.requests = requests
        self.camps = camps
        self.enforce_progression = enforce_progression

    async def update_request_status(self, request_id: str, new_status: Any) -> BloodRequest:
        status = parse_request_status(new_status)
        current = await asyncio.to_thread(self.requests.get, request_id)

        if current.status.is_terminal:
            raise ValidationError(f"Request {request_id} was closed with its camp and can no longer change status")
        camp = await asyncio.to_thread(self.camps.get, current.camp_id)
        if not camp.is_active:
            raise ValidationError(
                f"Request {request_id} belongs to closed camp {camp.id} and can no longer change status"
            )
        if current.status is status:
            return current
        if self.enforce_progression and status not in ALLOWED_TRANSITIONS[current.status]:
            raise ValidationError(
                f"Request {request_id} cannot move from {current.status.value!r} back to {status.value!r}"
            )

        updated = await asyncio.to_thread(self.requests.update_status, request_id, status)
        logger.info(f"Request {request_id} status {current.status.value!r} -> {status.value!r}")
        return updated

    async def close_out_sweep(self, camp_id: str) -> SweepResult:
        """Close every pending request of a camp.

        All updates are dispatched concurrently and the sweep completes once
        every one has settled. Failures are logged and reported in the result,
        never retried. Running it again when nothing is pending issues no writes.
        """
        pending = await asyncio.to_thread(self.requests.find_pending_for_camp, camp_id)
        result = SweepResult(camp_id=camp_id)
        if not pending:
            logger.debug(f"No pending requests to close for camp {camp_id}")
            return result

        logger.info(f"Closing {len(pending)} pending request(s) for camp {camp_id}")
        outcomes = await asyncio.gather(
            *(asyncio.to_thread(self.requests.update_status, r.id, RequestStatus.CAMP_CLOSED) for r in pending),
            return_exceptions=True,
        )

        for request, outcome in zip(pending, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Failed to close request {request.id} for camp {camp_id}: {outcome}")
                result.failed[request.id] = str(outcome)
            else:
                result.closed.append(request.id)

        if result.failed:
            logger.warning(
                f"Close-out sweep for camp {camp_id}: {len(result.closed)} closed, {len(result.failed)} failed"
            )
        return result
