"""Tests for starting and ending camps."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest

from bloodcamp.errors import (
    CampAlreadyActiveError,
    CloseOutSweepError,
    ConfirmationRequiredError,
    LocationUnavailable,
    ValidationError,
)
from bloodcamp.location import ReportedLocation
from bloodcamp.models import BloodType, CampStatus, Coordinates, RequestStatus
from bloodcamp.services.camp_lifecycle import CampLifecycleManager
from bloodcamp.services.request_triage import RequestTriage

HERE = ReportedLocation(latitude=6.5244, longitude=3.3792)


@pytest.fixture
def lifecycle(repositories):
    return CampLifecycleManager(repositories.camps, RequestTriage(repositories.requests, repositories.camps))


class TestReportedLocation:
    @pytest.mark.asyncio
    async def test_returns_coordinates(self):
        assert await HERE.get_location() == Coordinates(6.5244, 3.3792)

    @pytest.mark.asyncio
    async def test_device_error(self):
        with pytest.raises(LocationUnavailable, match="Could not get location: User denied Geolocation"):
            await ReportedLocation(error="User denied Geolocation").get_location()

    @pytest.mark.asyncio
    async def test_missing_coordinates(self):
        with pytest.raises(LocationUnavailable, match="Geolocation is not supported"):
            await ReportedLocation(latitude=6.5).get_location()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("latitude,longitude", [(91.0, 0.0), (0.0, -181.0), (float("nan"), 0.0)])
    async def test_invalid_coordinates(self, latitude, longitude):
        with pytest.raises(LocationUnavailable):
            await ReportedLocation(latitude=latitude, longitude=longitude).get_location()


class TestStartCamp:
    @pytest.mark.asyncio
    async def test_creates_active_camp_with_zero_inventory(self, lifecycle, fake_pb):
        camp = await lifecycle.start_camp("coord-1", " Town Hall ", "Ada", HERE)

        assert camp.is_active
        assert camp.location == "Town Hall"
        assert camp.coordinator == "Ada"
        assert camp.coordinator_uid == "coord-1"
        assert camp.coordinates == Coordinates(6.5244, 3.3792)
        assert camp.inventory == {blood_type: 0 for blood_type in BloodType}
        assert camp.total_units == 0
        assert fake_pb.writes == [("POST", "camps", camp.id)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("location,name", [("", "Ada"), ("Town Hall", "  "), (None, None)])
    async def test_blank_fields_write_nothing(self, lifecycle, fake_pb, location, name):
        with pytest.raises(ValidationError, match="Please enter camp location and coordinator name"):
            await lifecycle.start_camp("coord-1", location, name, HERE)
        assert fake_pb.writes == []

    @pytest.mark.asyncio
    async def test_location_failure_writes_nothing(self, lifecycle, fake_pb):
        with pytest.raises(LocationUnavailable):
            await lifecycle.start_camp("coord-1", "Town Hall", "Ada", ReportedLocation(error="timeout"))
        assert fake_pb.writes == []

    @pytest.mark.asyncio
    async def test_second_active_camp_rejected(self, lifecycle, make_camp, fake_pb):
        existing = make_camp(coordinator_uid="coord-1")

        with pytest.raises(CampAlreadyActiveError) as exc_info:
            await lifecycle.start_camp("coord-1", "Town Hall", "Ada", HERE)

        assert exc_info.value.camp_id == existing["id"]
        assert fake_pb.writes == []

    @pytest.mark.asyncio
    async def test_concurrent_starts_leave_one_active_camp(self, lifecycle, fake_pb):
        outcomes = await asyncio.gather(
            lifecycle.start_camp("coord-1", "Town Hall", "Ada", HERE),
            lifecycle.start_camp("coord-1", "Market Square", "Ada", HERE),
            return_exceptions=True,
        )

        active = [r for r in fake_pb.records("camps") if r["status"] == "active"]
        assert len(active) == 1
        [started] = [o for o in outcomes if not isinstance(o, BaseException)]
        [rejected] = [o for o in outcomes if isinstance(o, BaseException)]
        assert isinstance(rejected, CampAlreadyActiveError)
        assert rejected.camp_id == started.id == active[0]["id"]

    @pytest.mark.asyncio
    async def test_other_coordinators_camp_does_not_block(self, lifecycle, make_camp):
        make_camp(coordinator_uid="coord-2")
        camp = await lifecycle.start_camp("coord-1", "Town Hall", "Ada", HERE)
        assert camp.is_active


class TestEndCamp:
    @pytest.mark.asyncio
    async def test_requires_confirmation(self, lifecycle, make_camp, make_request, fake_pb):
        camp = make_camp()
        make_request(camp["id"])

        with pytest.raises(ConfirmationRequiredError):
            await lifecycle.end_camp(camp["id"])

        assert fake_pb.record("camps", camp["id"])["status"] == "active"
        assert fake_pb.writes == []

    @pytest.mark.asyncio
    async def test_marks_inactive_then_closes_pending(self, lifecycle, make_camp, make_request, fake_pb):
        camp = make_camp()
        first = make_request(camp["id"])
        second = make_request(camp["id"])
        delivered = make_request(camp["id"], status=RequestStatus.DELIVERED)
        before = datetime.now(UTC)

        result = await lifecycle.end_camp(camp["id"], confirmed=True)

        record = fake_pb.record("camps", camp["id"])
        assert record["status"] == "inactive"
        ended = (await lifecycle.list_past_camps("coord-1"))[0].ended_at
        assert ended is not None
        assert ended >= before.replace(microsecond=(before.microsecond // 1000) * 1000)
        assert sorted(result.closed) == sorted([first["id"], second["id"]])
        assert fake_pb.record("requests", delivered["id"])["status"] == "Delivered"
        # Status flip happens before any request is touched
        assert fake_pb.writes[0] == ("PATCH", "camps", camp["id"])

    @pytest.mark.asyncio
    async def test_ending_twice_keeps_end_time_and_writes_nothing(self, lifecycle, make_camp, make_request, fake_pb):
        camp = make_camp()
        make_request(camp["id"])
        await lifecycle.end_camp(camp["id"], confirmed=True)
        ended_at = fake_pb.record("camps", camp["id"])["ended_at"]
        writes = len(fake_pb.writes)

        result = await lifecycle.end_camp(camp["id"], confirmed=True)

        assert result.attempted == 0
        assert len(fake_pb.writes) == writes
        assert fake_pb.record("camps", camp["id"])["ended_at"] == ended_at

    @pytest.mark.asyncio
    async def test_sweep_failure_keeps_camp_inactive(self, lifecycle, make_camp, make_request, fake_pb):
        camp = make_camp()
        ok = make_request(camp["id"])
        stuck = make_request(camp["id"])
        fake_pb.fail("PATCH", "requests", stuck["id"])

        with pytest.raises(CloseOutSweepError) as exc_info:
            await lifecycle.end_camp(camp["id"], confirmed=True)

        assert fake_pb.record("camps", camp["id"])["status"] == "inactive"
        assert exc_info.value.result.closed == [ok["id"]]
        assert stuck["id"] in exc_info.value.message
        assert exc_info.value.message.startswith("Error closing pending requests:")


class TestQueries:
    @pytest.mark.asyncio
    async def test_past_camps_newest_first(self, lifecycle, make_camp):
        older = make_camp(status=CampStatus.INACTIVE, ended_at="2026-02-01 10:00:00.000Z")
        newer = make_camp(status=CampStatus.INACTIVE, ended_at="2026-02-20 10:00:00.000Z")
        make_camp(status=CampStatus.INACTIVE, coordinator_uid="coord-2")

        past = await lifecycle.list_past_camps("coord-1")

        assert [c.id for c in past] == [newer["id"], older["id"]]

    @pytest.mark.asyncio
    async def test_no_active_camp(self, lifecycle):
        assert await lifecycle.get_active_camp("coord-1") is None
