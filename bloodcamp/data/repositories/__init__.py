"""Data repositories for camp coordination.

Provides database access for camps, donors and hospital requests."""

from __future__ import annotations

from .camp_repository import CampRepository
from .donor_repository import DonorRepository
from .request_repository import RequestRepository

__all__ = [
    "CampRepository",
    "DonorRepository",
    "RequestRepository",
]
