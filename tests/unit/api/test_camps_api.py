"""Tests for the camps router."""

from __future__ import annotations

from fastapi.testclient import TestClient

from bloodcamp.models import BloodType, CampStatus, RequestStatus

COORDINATOR = {"X-Coordinator-Uid": "coord-1"}


class TestStartCamp:
    def test_start_camp(self, client: TestClient, fake_pb) -> None:
        response = client.post(
            "/api/camps",
            json={"location": "Town Hall", "coordinator_name": "Ada", "latitude": 6.52, "longitude": 3.37},
            headers=COORDINATOR,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Camp started successfully!"
        assert body["camp"]["status"] == "active"
        assert body["camp"]["coordinator_uid"] == "coord-1"
        assert body["camp"]["inventory"] == {bt.value: 0 for bt in BloodType}
        assert list(body["camp"]["inventory"]) == ["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]

    def test_blank_fields(self, client: TestClient, fake_pb) -> None:
        response = client.post(
            "/api/camps", json={"location": "", "coordinator_name": "Ada", "latitude": 1, "longitude": 1}
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "Please enter camp location and coordinator name"
        assert fake_pb.writes == []

    def test_location_unavailable(self, client: TestClient) -> None:
        response = client.post(
            "/api/camps",
            json={"location": "Hall", "coordinator_name": "Ada", "location_error": "User denied Geolocation"},
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "Could not get location: User denied Geolocation"

    def test_second_active_camp_conflict(self, client: TestClient, make_camp) -> None:
        make_camp(coordinator_uid="coord-1")

        response = client.post(
            "/api/camps",
            json={"location": "Hall", "coordinator_name": "Ada", "latitude": 1, "longitude": 1},
            headers=COORDINATOR,
        )

        assert response.status_code == 409

    def test_missing_header_records_unknown_coordinator(self, client: TestClient) -> None:
        response = client.post(
            "/api/camps", json={"location": "Hall", "coordinator_name": "Ada", "latitude": 1, "longitude": 1}
        )
        assert response.json()["camp"]["coordinator_uid"] == "unknown"


class TestCampQueries:
    def test_active_camp(self, client: TestClient, make_camp) -> None:
        camp = make_camp(coordinator_uid="coord-1", inventory={BloodType.O_NEG: 3})

        response = client.get("/api/camps/active", headers=COORDINATOR)

        assert response.status_code == 200
        assert response.json()["id"] == camp["id"]
        assert response.json()["total_units"] == 3

    def test_no_active_camp_is_null(self, client: TestClient) -> None:
        response = client.get("/api/camps/active", headers=COORDINATOR)
        assert response.status_code == 200
        assert response.json() is None

    def test_past_camps(self, client: TestClient, make_camp) -> None:
        make_camp(status=CampStatus.INACTIVE, ended_at="2026-01-01 10:00:00.000Z")
        newest = make_camp(status=CampStatus.INACTIVE, ended_at="2026-02-01 10:00:00.000Z")

        response = client.get("/api/camps/past", headers=COORDINATOR)

        assert response.json()[0]["id"] == newest["id"]
        assert len(response.json()) == 2

    def test_unknown_camp(self, client: TestClient) -> None:
        response = client.get("/api/camps/missing")
        assert response.status_code == 404


class TestEndCamp:
    def test_requires_confirm_flag(self, client: TestClient, make_camp, fake_pb) -> None:
        camp = make_camp()

        response = client.post(f"/api/camps/{camp['id']}/end")

        assert response.status_code == 400
        assert response.json()["detail"] == "Confirmation required before ending this camp session"
        assert fake_pb.record("camps", camp["id"])["status"] == "active"

    def test_end_closes_pending(self, client: TestClient, make_camp, make_request, fake_pb) -> None:
        camp = make_camp()
        request = make_request(camp["id"])

        response = client.post(f"/api/camps/{camp['id']}/end", params={"confirm": "true"})

        assert response.status_code == 200
        assert response.json() == {
            "message": "Camp ended successfully!",
            "camp_id": camp["id"],
            "closed_request_ids": [request["id"]],
        }
        assert fake_pb.record("requests", request["id"])["status"] == RequestStatus.CAMP_CLOSED.value

    def test_partial_sweep_failure_is_502(self, client: TestClient, make_camp, make_request, fake_pb) -> None:
        camp = make_camp()
        stuck = make_request(camp["id"])
        fake_pb.fail("PATCH", "requests", stuck["id"])

        response = client.post(f"/api/camps/{camp['id']}/end", params={"confirm": "true"})

        assert response.status_code == 502
        assert stuck["id"] in response.json()["detail"]
        assert fake_pb.record("camps", camp["id"])["status"] == "inactive"


class TestReconcile:
    def test_reconcile(self, client: TestClient, make_camp, make_donor) -> None:
        camp = make_camp(inventory={BloodType.A_POS: -1})
        make_donor(camp["id"], blood_type=BloodType.A_POS, units=2)

        response = client.post(f"/api/camps/{camp['id']}/reconcile")

        assert response.status_code == 200
        body = response.json()
        assert body["before"]["A+"] == -1
        assert body["after"]["A+"] == 2
        assert body["changed"] == ["A+"]
