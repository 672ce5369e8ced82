"""Tests for request status transitions and the close-out sweep."""

from __future__ import annotations

import pytest

from bloodcamp.errors import NotFoundError, ValidationError
from bloodcamp.models import BloodRequest, BloodType, RequestStatus
from bloodcamp.services.request_triage import RequestTriage, requests_for_camp


@pytest.fixture
def triage(repositories):
    return RequestTriage(repositories.requests, repositories.camps)


class TestUpdateRequestStatus:
    @pytest.mark.asyncio
    async def test_moves_along_pipeline(self, triage, make_camp, make_request, fake_pb):
        request = make_request(make_camp()["id"])

        updated = await triage.update_request_status(request["id"], "Delivering")

        assert updated.status is RequestStatus.DELIVERING
        assert fake_pb.record("requests", request["id"])["status"] == "Delivering"

    @pytest.mark.asyncio
    async def test_regression_allowed_by_default(self, triage, make_camp, make_request):
        request = make_request(make_camp()["id"], status=RequestStatus.DELIVERED)

        updated = await triage.update_request_status(request["id"], "Pending")

        assert updated.status is RequestStatus.PENDING

    @pytest.mark.asyncio
    async def test_regression_rejected_when_enforced(self, repositories, make_camp, make_request, fake_pb):
        triage = RequestTriage(repositories.requests, repositories.camps, enforce_progression=True)
        request = make_request(make_camp()["id"], status=RequestStatus.DELIVERED)

        with pytest.raises(ValidationError, match="cannot move"):
            await triage.update_request_status(request["id"], "Pending")
        assert fake_pb.writes == []

    @pytest.mark.asyncio
    async def test_closed_request_cannot_change(self, triage, make_camp, make_request, fake_pb):
        request = make_request(make_camp()["id"], status=RequestStatus.CAMP_CLOSED)

        with pytest.raises(ValidationError, match="closed with its camp"):
            await triage.update_request_status(request["id"], "Delivered")
        assert fake_pb.writes == []

    @pytest.mark.asyncio
    async def test_terminal_status_not_selectable(self, triage, make_camp, make_request, fake_pb):
        request = make_request(make_camp()["id"])

        with pytest.raises(ValidationError):
            await triage.update_request_status(request["id"], RequestStatus.CAMP_CLOSED.value)
        assert fake_pb.writes == []

    @pytest.mark.asyncio
    async def test_request_on_ended_camp_cannot_change(self, workflow, make_camp, make_request, fake_pb):
        camp = make_camp()
        request = make_request(camp["id"], status=RequestStatus.DELIVERING)
        await workflow.end_camp(camp["id"], confirmed=True)
        writes_after_end = list(fake_pb.writes)

        with pytest.raises(ValidationError, match="closed camp"):
            await workflow.update_request_status(request["id"], "Pending")

        assert fake_pb.writes == writes_after_end
        assert fake_pb.record("requests", request["id"])["status"] == "Delivering"

    @pytest.mark.asyncio
    async def test_unchanged_status_is_not_written(self, triage, make_camp, make_request, fake_pb):
        request = make_request(make_camp()["id"])

        result = await triage.update_request_status(request["id"], "Pending")

        assert result.status is RequestStatus.PENDING
        assert fake_pb.writes == []

    @pytest.mark.asyncio
    async def test_missing_request(self, triage):
        with pytest.raises(NotFoundError):
            await triage.update_request_status("missing", "Delivered")


class TestCloseOutSweep:
    @pytest.mark.asyncio
    async def test_closes_only_pending(self, triage, make_camp, make_request, fake_pb):
        camp = make_camp()
        first = make_request(camp["id"])
        second = make_request(camp["id"])
        delivered = make_request(camp["id"], status=RequestStatus.DELIVERED)

        result = await triage.close_out_sweep(camp["id"])

        assert sorted(result.closed) == sorted([first["id"], second["id"]])
        assert result.failed == {}
        assert fake_pb.record("requests", first["id"])["status"] == "Camp Closed Before Approving Request"
        assert fake_pb.record("requests", second["id"])["status"] == "Camp Closed Before Approving Request"
        assert fake_pb.record("requests", delivered["id"])["status"] == "Delivered"

    @pytest.mark.asyncio
    async def test_leaves_other_camps_alone(self, triage, make_camp, make_request, fake_pb):
        camp = make_camp()
        other = make_camp(coordinator_uid="coord-2")
        foreign = make_request(other["id"])

        await triage.close_out_sweep(camp["id"])

        assert fake_pb.record("requests", foreign["id"])["status"] == "Pending"

    @pytest.mark.asyncio
    async def test_second_sweep_issues_no_writes(self, triage, make_camp, make_request, fake_pb):
        camp = make_camp()
        make_request(camp["id"])
        await triage.close_out_sweep(camp["id"])
        writes_after_first = len(fake_pb.writes)

        result = await triage.close_out_sweep(camp["id"])

        assert result.attempted == 0
        assert len(fake_pb.writes) == writes_after_first

    @pytest.mark.asyncio
    async def test_partial_failure_reported_per_request(self, triage, make_camp, make_request, fake_pb):
        camp = make_camp()
        ok = make_request(camp["id"])
        stuck = make_request(camp["id"])
        fake_pb.fail("PATCH", "requests", stuck["id"])

        result = await triage.close_out_sweep(camp["id"])

        assert result.closed == [ok["id"]]
        assert list(result.failed) == [stuck["id"]]
        assert "updating request status" in result.failed[stuck["id"]]
        assert fake_pb.record("requests", stuck["id"])["status"] == "Pending"


class TestRequestsForCamp:
    def test_filters_and_sorts_newest_first(self, repositories, make_camp, make_request):
        camp = make_camp()
        other = make_camp(coordinator_uid="coord-2")
        older = make_request(camp["id"])
        make_request(other["id"])
        newer = make_request(camp["id"])
        feed = repositories.requests.find_all()

        result = requests_for_camp(feed, camp["id"])

        assert [r.id for r in result] == [newer["id"], older["id"]]

    def test_no_camp_means_no_requests(self):
        request = BloodRequest(
            id="r1", hospital="H", blood_type=BloodType.O_NEG, units=1, status=RequestStatus.PENDING, camp_id="c1"
        )
        assert requests_for_camp([request], None) == []
