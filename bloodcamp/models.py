"""Core domain models for camp coordination.

Camps own a per-blood-type inventory. Donors and requests reference a camp by
id but are stored in their own collections, so consistency between them is
maintained by the services rather than by the database."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class BloodType(Enum):
    """The eight ABO/Rh blood types, in display order"""

    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"

    @property
    def inventory_field(self) -> str:
        """Name of the camp number field holding this type's unit count"""
        return INVENTORY_FIELDS[self]


# Camp record field per blood type. Separate number fields (instead of one
# JSON map) so each entry accepts PocketBase's atomic `field+`/`field-` modifiers.
INVENTORY_FIELDS: dict[BloodType, str] = {
    BloodType.A_POS: "inventory_a_pos",
    BloodType.A_NEG: "inventory_a_neg",
    BloodType.B_POS: "inventory_b_pos",
    BloodType.B_NEG: "inventory_b_neg",
    BloodType.AB_POS: "inventory_ab_pos",
    BloodType.AB_NEG: "inventory_ab_neg",
    BloodType.O_POS: "inventory_o_pos",
    BloodType.O_NEG: "inventory_o_neg",
}


class CampStatus(Enum):
    """Lifecycle status of a camp"""

    ACTIVE = "active"
    INACTIVE = "inactive"


class RequestStatus(Enum):
    """Status of a hospital blood request

    Pending -> Delivering -> Delivered is the interactive pipeline.
    CAMP_CLOSED is terminal and only set by the close-out sweep.
    """

    PENDING = "Pending"
    DELIVERING = "Delivering"
    DELIVERED = "Delivered"
    CAMP_CLOSED = "Camp Closed Before Approving Request"

    @property
    def is_terminal(self) -> bool:
        return self is RequestStatus.CAMP_CLOSED


# Statuses a coordinator may pick from the triage control
INTERACTIVE_STATUSES: tuple[RequestStatus, ...] = (
    RequestStatus.PENDING,
    RequestStatus.DELIVERING,
    RequestStatus.DELIVERED,
)

# Forward-only pipeline, applied when progression enforcement is enabled
ALLOWED_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.DELIVERING, RequestStatus.DELIVERED}),
    RequestStatus.DELIVERING: frozenset({RequestStatus.DELIVERED}),
    RequestStatus.DELIVERED: frozenset(),
    RequestStatus.CAMP_CLOSED: frozenset(),
}


def zero_inventory() -> dict[BloodType, int]:
    """Inventory map with every blood type present at zero units"""
    return {blood_type: 0 for blood_type in BloodType}


@dataclass(frozen=True)
class Coordinates:
    """Geographic coordinate pair in decimal degrees"""

    latitude: float
    longitude: float


@dataclass
class Camp:
    """A time-bounded donation event owned by one coordinator"""

    id: str
    location: str
    coordinator: str
    coordinator_uid: str
    status: CampStatus
    coordinates: Coordinates | None = None
    inventory: dict[BloodType, int] = field(default_factory=zero_inventory)
    started_at: datetime | None = None
    ended_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status is CampStatus.ACTIVE

    @property
    def total_units(self) -> int:
        """Sum of units across all blood types"""
        return sum(self.inventory.values())


@dataclass
class Donor:
    """One donation event recorded at a camp"""

    id: str
    donor_code: str
    contact: str
    blood_type: BloodType
    units: int
    camp_id: str
    camp_location: str = ""
    donated_at: datetime | None = None


@dataclass
class BloodRequest:
    """A hospital's request for units from a specific camp"""

    id: str
    hospital: str
    blood_type: BloodType
    units: int
    status: RequestStatus
    camp_id: str
    urgent: bool = False
    distance_km: float | None = None
    requested_at: datetime | None = None
