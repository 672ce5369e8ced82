"""
Root test configuration and fixtures for the bloodcamp project.

This conftest.py provides common fixtures for all test categories:
- unit/: Fast, isolated tests against the in-memory PocketBase fake
- unit/api/: Router tests through FastAPI's TestClient

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).parent / "fixtures"))

# Never try to reach a real PocketBase from the API lifespan
os.environ.setdefault("SKIP_PB_AUTH", "true")

from fake_pocketbase import FakePocketBase  # noqa: E402

from bloodcamp.data.repository_factory import RepositoryFactory  # noqa: E402
from bloodcamp.models import INVENTORY_FIELDS, BloodType, CampStatus, RequestStatus  # noqa: E402
from bloodcamp.workflow import CampCoordinationWorkflow  # noqa: E402


@pytest.fixture
def fake_pb() -> FakePocketBase:
    """Fresh in-memory PocketBase for each test."""
    return FakePocketBase()


@pytest.fixture
def repositories(fake_pb: FakePocketBase) -> RepositoryFactory:
    return RepositoryFactory(fake_pb)  # type: ignore[arg-type]


@pytest.fixture
def workflow(repositories: RepositoryFactory) -> CampCoordinationWorkflow:
    return CampCoordinationWorkflow(repositories)


def seed_camp(
    fake_pb: FakePocketBase,
    coordinator_uid: str = "coord-1",
    status: CampStatus = CampStatus.ACTIVE,
    inventory: dict[BloodType, int] | None = None,
    **fields: Any,
) -> dict[str, Any]:
    """Insert a camp record with all eight counters present."""
    counters = {field: 0 for field in INVENTORY_FIELDS.values()}
    for blood_type, units in (inventory or {}).items():
        counters[blood_type.inventory_field] = units
    fields.setdefault("location", "Town Hall")
    fields.setdefault("coordinator", "Ada")
    fields.setdefault("latitude", 6.5244)
    fields.setdefault("longitude", 3.3792)
    return fake_pb.seed(
        "camps",
        coordinator_uid=coordinator_uid,
        status=status.value,
        **counters,
        **fields,
    )


def seed_request(
    fake_pb: FakePocketBase,
    camp_id: str,
    status: RequestStatus = RequestStatus.PENDING,
    blood_type: BloodType = BloodType.O_NEG,
    units: int = 2,
    **fields: Any,
) -> dict[str, Any]:
    fields.setdefault("hospital", "General Hospital")
    fields.setdefault("urgent", False)
    fields.setdefault("distance", 4.2)
    return fake_pb.seed(
        "requests",
        camp=camp_id,
        status=status.value,
        blood_type=blood_type.value,
        units=units,
        **fields,
    )


def seed_donor(
    fake_pb: FakePocketBase,
    camp_id: str,
    blood_type: BloodType = BloodType.A_POS,
    units: int = 1,
    **fields: Any,
) -> dict[str, Any]:
    fields.setdefault("donor_code", f"code-{len(fake_pb.records('donors')) + 1}")
    fields.setdefault("contact", "0800 000 0000")
    fields.setdefault("camp_location", "Town Hall")
    return fake_pb.seed(
        "donors",
        camp=camp_id,
        blood_type=blood_type.value,
        units=units,
        **fields,
    )


@pytest.fixture
def make_camp(fake_pb: FakePocketBase):
    def _make(**kwargs: Any) -> dict[str, Any]:
        return seed_camp(fake_pb, **kwargs)

    return _make


@pytest.fixture
def make_request(fake_pb: FakePocketBase):
    def _make(camp_id: str, **kwargs: Any) -> dict[str, Any]:
        return seed_request(fake_pb, camp_id, **kwargs)

    return _make


@pytest.fixture
def make_donor(fake_pb: FakePocketBase):
    def _make(camp_id: str, **kwargs: Any) -> dict[str, Any]:
        return seed_donor(fake_pb, camp_id, **kwargs)

    return _make


def inventory_of(fake_pb: FakePocketBase, camp_id: str) -> dict[BloodType, int]:
    """Current stored counters of a camp, keyed by blood type."""
    record = fake_pb.record("camps", camp_id)
    return {blood_type: record.get(blood_type.inventory_field, 0) for blood_type in BloodType}


@pytest.fixture
def camp_inventory(fake_pb: FakePocketBase):
    def _inventory(camp_id: str) -> dict[BloodType, int]:
        return inventory_of(fake_pb, camp_id)

    return _inventory
