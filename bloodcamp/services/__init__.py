"""
Camp coordination services.

- camp_lifecycle: start/end camps, one active camp per coordinator
- inventory_ledger: inventory arithmetic and explicit reconcile
- donor_registry: donor mutations paired with inventory adjustments
- request_triage: request status transitions and the close-out sweep
"""

from .camp_lifecycle import CampLifecycleManager, sort_past_camps
from .donor_registry import (
    DonorRegistry,
    donor_counts_by_blood_type,
    list_donors_by_blood_type,
    new_donor_code,
)
from .inventory_ledger import (
    InventoryLedger,
    ReconcileResult,
    adjustment_for_update,
    find_discrepancies,
    totals_from_donors,
)
from .request_triage import RequestTriage, SweepResult, requests_for_camp

__all__ = [
    # Lifecycle
    "CampLifecycleManager",
    "sort_past_camps",
    # Donors
    "DonorRegistry",
    "donor_counts_by_blood_type",
    "list_donors_by_blood_type",
    "new_donor_code",
    # Ledger
    "InventoryLedger",
    "ReconcileResult",
    "adjustment_for_update",
    "find_discrepancies",
    "totals_from_donors",
    # Triage
    "RequestTriage",
    "SweepResult",
    "requests_for_camp",
]
