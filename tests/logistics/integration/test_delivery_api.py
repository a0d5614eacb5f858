"""Integration tests for the delivery endpoints."""

import pytest

DEPOT = {"latitude": 13.75, "longitude": 100.5, "address": "Depot"}
DOOR = {"latitude": 13.73, "longitude": 100.52, "address": "Customer door"}


@pytest.fixture()
def assignment(client):
    consolidation = client.post("/consolidations", json={"reference_code": "REF-D", "created_by": "creator-1"}).json()
    response = client.post(
        "/deliveries/assign",
        json={"consolidation_id": consolidation["id"], "driver_id": "driver-1"},
    )
    assert response.status_code == 201
    return response.json()


class TestDeliveryEndpoints:
    def test_start_and_end(self, client, assignment):
        delivery_id = assignment["delivery_id"]
        started = client.post(f"/deliveries/{delivery_id}/start", json=DEPOT)
        assert started.status_code == 200
        assert started.json()["status"] == "in_progress"
        assert started.json()["start_location"]["address"] == "Depot"

        ended = client.post(f"/deliveries/{delivery_id}/end", json={**DOOR, "notes": "Signed"})
        assert ended.status_code == 200
        assert ended.json()["status"] == "completed"

        consolidation = client.get(f"/consolidations/id/{assignment['consolidation_id']}").json()
        assert consolidation["status"] == "delivered"
        assert consolidation["delivery_status"]["ended"] is True

    def test_start_twice_is_409(self, client, assignment):
        delivery_id = assignment["delivery_id"]
        client.post(f"/deliveries/{delivery_id}/start", json=DEPOT)
        response = client.post(f"/deliveries/{delivery_id}/start", json=DEPOT)
        assert response.status_code == 409
        assert response.json()["details"] == {"status": ["Delivery already in progress"]}

    def test_end_without_start_is_409(self, client, assignment):
        response = client.post(f"/deliveries/{assignment['delivery_id']}/end", json=DOOR)
        assert response.status_code == 409

    def test_start_requires_coordinates(self, client, assignment):
        response = client.post(f"/deliveries/{assignment['delivery_id']}/start", json={"address": "Depot"})
        assert response.status_code == 400

    def test_location_ping(self, client, assignment):
        delivery_id = assignment["delivery_id"]
        client.post(f"/deliveries/{delivery_id}/start", json=DEPOT)
        response = client.patch(f"/deliveries/{delivery_id}/location", json=DOOR)
        assert response.json()["current_location"]["address"] == "Customer door"
        assert len(response.json()["location_history"]) == 2

    def test_active_and_driver_listings(self, client, assignment):
        active = client.get("/deliveries/active", params={"driver_id": "driver-1"}).json()
        assert [d["id"] for d in active] == [assignment["delivery_id"]]
        assert len(client.get("/deliveries/driver/driver-1").json()) == 1

    def test_latest_for_consolidation(self, client, assignment):
        response = client.get(f"/deliveries/consolidation/{assignment['consolidation_id']}")
        assert response.json()["id"] == assignment["delivery_id"]

    def test_cancel(self, client, assignment):
        response = client.post(f"/deliveries/{assignment['delivery_id']}/cancel", json={"reason": "Flat tyre"})
        assert response.json()["status"] == "cancelled"

    def test_unknown_delivery_is_404(self, client):
        assert client.get("/deliveries/missing").status_code == 404

    def test_cancelled_consolidation_leaves_no_active_delivery(self, client, assignment):
        client.patch(f"/consolidations/{assignment['consolidation_id']}/status", json={"status": "cancelled"})
        assert client.get("/deliveries/active", params={"driver_id": "driver-1"}).json() == []
        assert client.get(f"/deliveries/{assignment['delivery_id']}").json()["status"] == "cancelled"
