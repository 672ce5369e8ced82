"""
CoordinatorDashboard - live view model for one coordinator session.

Owns the live queries (active camp, past camps, active-camp donors, request
feed, all donors), recomputes the DashboardSnapshot whenever any of them
delivers, and holds the per-session form and modal state with explicit reset
points.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from .data.connection_manager import ConnectionManager
from .data.live_query import LiveQuery
from .data.records import CAMPS, DONORS, REQUESTS, quote
from .data.repository_factory import RepositoryFactory
from .models import BloodRequest, BloodType, Camp, CampStatus, Donor
from .services.donor_registry import list_donors_by_blood_type, new_donor_code
from .views import DashboardSnapshot, build_snapshot

logger = logging.getLogger(__name__)


@dataclass
class DonorDraft:
    """Donor form contents. `units` stays a string until submitted."""

    donor_code: str = ""
    contact: str = ""
    blood_type: BloodType = BloodType.A_POS
    units: str = ""
    is_editing: bool = False
    record_id: str = ""

    @classmethod
    def for_new_donor(cls) -> DonorDraft:
        return cls(donor_code=new_donor_code())

    @classmethod
    def for_existing(cls, donor: Donor) -> DonorDraft:
        return cls(
            donor_code=donor.donor_code,
            contact=donor.contact,
            blood_type=donor.blood_type,
            units=str(donor.units),
            is_editing=True,
            record_id=donor.id,
        )


@dataclass
class SessionState:
    """Modal visibility and form drafts for one dashboard session"""

    show_start_modal: bool = False
    show_donor_modal: bool = False
    show_donors_list_modal: bool = False
    selected_blood_type: BloodType | None = None
    camp_location: str = ""
    coordinator_name: str = ""
    donor_draft: DonorDraft = field(default_factory=DonorDraft)


class CoordinatorDashboard:
    """
    Live dashboard for one coordinator.

    Usage:
        dashboard = CoordinatorDashboard("uid-123", RepositoryFactory(pb), on_change=render)
        dashboard.start()
        dashboard.open_new_donor_form()
        ...
        dashboard.close()
    """

    def __init__(
        self,
        coordinator_uid: str,
        repositories: RepositoryFactory,
        on_change: Callable[[DashboardSnapshot], None] | None = None,
    ) -> None:
        self.coordinator_uid = coordinator_uid
        self.repositories = repositories
        self.on_change = on_change
        self.state = SessionState()
        self.snapshot = DashboardSnapshot()

        self._active_camp: Camp | None = None
        self._past_camps: list[Camp] = []
        self._donors: list[Donor] = []
        self._requests: list[BloodRequest] = []
        self._all_donors: list[Donor] = []

        self._lock = threading.RLock()
        self._queries: list[LiveQuery] = []
        self._donor_query: LiveQuery[Donor] | None = None

    @classmethod
    def connect(
        cls,
        coordinator_uid: str,
        on_change: Callable[[DashboardSnapshot], None] | None = None,
    ) -> CoordinatorDashboard:
        """Dashboard over a dedicated PocketBase client for its realtime connection"""
        client = ConnectionManager.get_instance().create_isolated_client()
        return cls(coordinator_uid, RepositoryFactory(client), on_change=on_change)

    # ---- Subscriptions ----

    def start(self) -> CoordinatorDashboard:
        pb = self.repositories.client
        uid = quote(self.coordinator_uid)
        self._queries = [
            LiveQuery(
                pb,
                CAMPS,
                self.repositories.camps.map_from_db,
                self._on_active_camps,
                filter_str=f"coordinator_uid = {uid} && status = {quote(CampStatus.ACTIVE.value)}",
                name="active camp",
            ),
            LiveQuery(
                pb,
                CAMPS,
                self.repositories.camps.map_from_db,
                self._on_past_camps,
                filter_str=f"coordinator_uid = {uid} && status = {quote(CampStatus.INACTIVE.value)}",
                name="past camps",
            ),
            LiveQuery(pb, REQUESTS, self.repositories.requests.map_from_db, self._on_requests, name="requests"),
            LiveQuery(pb, DONORS, self.repositories.donors.map_from_db, self._on_all_donors, name="all donors"),
        ]
        for query in self._queries:
            query.start()
        logger.info(f"Dashboard started for coordinator {self.coordinator_uid}")
        return self

    def close(self) -> None:
        """Stop every subscription and reset session state"""
        with self._lock:
            for query in self._queries:
                query.stop()
            self._queries = []
            if self._donor_query is not None:
                self._donor_query.stop()
                self._donor_query = None
            self.state = SessionState()
        logger.info(f"Dashboard closed for coordinator {self.coordinator_uid}")

    def _retarget_donor_query(self, camp_id: str | None) -> None:
        current = self._donor_query
        if current is not None and camp_id and current.filter_str == f"camp = {quote(camp_id)}":
            return
        if current is not None:
            current.stop()
            self._donor_query = None
        self._donors = []
        if camp_id:
            self._donor_query = LiveQuery(
                self.repositories.client,
                DONORS,
                self.repositories.donors.map_from_db,
                self._on_camp_donors,
                filter_str=f"camp = {quote(camp_id)}",
                name="camp donors",
            )
            self._donor_query.start()

    # ---- Snapshot handlers ----

    def _on_active_camps(self, camps: list[Camp]) -> None:
        with self._lock:
            if len(camps) > 1:
                logger.warning(f"Coordinator {self.coordinator_uid} has {len(camps)} active camps")
            previous_id = self._active_camp.id if self._active_camp else None
            self._active_camp = camps[0] if camps else None
            new_id = self._active_camp.id if self._active_camp else None
            if new_id != previous_id:
                self._retarget_donor_query(new_id)
            self._recompute()

    def _on_past_camps(self, camps: list[Camp]) -> None:
        with self._lock:
            self._past_camps = camps
            self._recompute()

    def _on_camp_donors(self, donors: list[Donor]) -> None:
        with self._lock:
            self._donors = donors
            self._recompute()

    def _on_requests(self, requests: list[BloodRequest]) -> None:
        with self._lock:
            self._requests = requests
            self._recompute()

    def _on_all_donors(self, donors: list[Donor]) -> None:
        with self._lock:
            self._all_donors = donors
            self._recompute()

    def _recompute(self) -> None:
        self.snapshot = build_snapshot(
            self._active_camp,
            self._past_camps,
            self._donors,
            self._requests,
            self._all_donors,
        )
        if self.on_change is not None:
            self.on_change(self.snapshot)

    # ---- Session state ----

    @property
    def active_camp(self) -> Camp | None:
        return self.snapshot.active_camp

    def open_start_modal(self) -> None:
        self.state.show_start_modal = True

    def close_start_modal(self) -> None:
        """Reset point after a camp start (or cancel)"""
        self.state.show_start_modal = False
        self.state.camp_location = ""
        self.state.coordinator_name = ""

    def open_new_donor_form(self) -> DonorDraft:
        """Fresh draft with a pre-generated donor code shown before saving"""
        self.state.donor_draft = DonorDraft.for_new_donor()
        self.state.show_donor_modal = True
        return self.state.donor_draft

    def open_edit_donor_form(self, donor: Donor) -> DonorDraft:
        self.state.donor_draft = DonorDraft.for_existing(donor)
        self.state.show_donor_modal = True
        return self.state.donor_draft

    def close_donor_form(self) -> None:
        """Reset point after a donor save (or cancel)"""
        self.state.show_donor_modal = False
        self.state.donor_draft = DonorDraft()

    def open_donors_list(self, blood_type: BloodType) -> list[Donor]:
        """Show donors of one type; refused while that type has no donors"""
        donors = list_donors_by_blood_type(self.snapshot.donors, blood_type)
        if not donors:
            return []
        self.state.selected_blood_type = blood_type
        self.state.show_donors_list_modal = True
        return donors

    def close_donors_list(self) -> None:
        self.state.show_donors_list_modal = False
        self.state.selected_blood_type = None

    def can_view_donors(self, blood_type: BloodType) -> bool:
        return self.snapshot.donor_counts.get(blood_type, 0) > 0
