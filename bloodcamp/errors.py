"""Workflow error classes.

Every failure a coordinator can see derives from WorkflowError and carries a
message that is safe to show as-is.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .services.request_triage import SweepResult


class WorkflowError(Exception):
    """Base exception for camp coordination failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(WorkflowError):
    """Raised when a required field is blank or invalid. No store call has been made."""

    pass


class CampAlreadyActiveError(ValidationError):
    """Raised when a coordinator tries to start a second active camp."""

    def __init__(self, coordinator_uid: str, camp_id: str):
        self.coordinator_uid = coordinator_uid
        self.camp_id = camp_id
        super().__init__(f"Coordinator already has an active camp ({camp_id}). End it before starting another.")


class ConfirmationRequiredError(WorkflowError):
    """Raised when a destructive or session-ending action was not confirmed."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Confirmation required before {action}")


class LocationUnavailable(WorkflowError):
    """Raised when device coordinates are unsupported, denied or invalid."""

    pass


class NotFoundError(WorkflowError):
    """Raised when a referenced camp, donor or request does not exist."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class ExternalStoreError(WorkflowError):
    """Raised when a create/update/delete/query against PocketBase fails.

    Never retried. Effects that were already committed are left in place.
    """

    def __init__(self, action: str, cause: object):
        self.action = action
        self.cause = cause
        super().__init__(f"Error {action}: {cause}")


class CloseOutSweepError(ExternalStoreError):
    """Raised when some pending requests could not be closed after a camp ended.

    The camp itself stays inactive.
    """

    def __init__(self, result: SweepResult):
        self.result = result
        failed = ", ".join(f"{request_id} ({error})" for request_id, error in sorted(result.failed.items()))
        super().__init__("closing pending requests", f"{len(result.failed)} request(s) not closed: {failed}")
