"""
Translate workflow errors into HTTP errors.

Every failure reaches the client as {"detail": message}, with the message
naming the attempted action where the store was involved.
"""

from __future__ import annotations

from fastapi import HTTPException

from bloodcamp.errors import (
    CampAlreadyActiveError,
    ConfirmationRequiredError,
    ExternalStoreError,
    LocationUnavailable,
    NotFoundError,
    ValidationError,
    WorkflowError,
)

# Checked in order; subclasses before their bases
_STATUS_CODES: list[tuple[type[WorkflowError], int]] = [
    (CampAlreadyActiveError, 409),
    (ValidationError, 422),
    (LocationUnavailable, 422),
    (ConfirmationRequiredError, 400),
    (NotFoundError, 404),
    (ExternalStoreError, 502),
]


def status_code_for(error: WorkflowError) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


def to_http_exception(error: WorkflowError) -> HTTPException:
    return HTTPException(status_code=status_code_for(error), detail=error.message)
