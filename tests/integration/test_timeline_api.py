"""Integration tests for timeline and configuration endpoints."""

from fastapi.testclient import TestClient

# Anchor batch 2025-G11 farrows on this day
AS_OF = {"as_of": "2025-05-24"}


def batches_by_id(body: dict) -> dict:
    return {b["batch_id"]: b for b in body["batches"]}


class TestTimeline:
    """Tests for GET /api/timeline."""

    def test_empty_store_gives_theoretical_window(self, client: TestClient):
        response = client.get("/api/timeline", params=AS_OF)

        assert response.status_code == 200
        body = response.json()
        assert body["farm_id"] == "YL"
        assert body["as_of"] == "2025-05-24"
        assert len(body["batches"]) == 20
        assert body["total_inventory"] == 0
        assert all(b["is_theoretical"] for b in body["batches"])

        anchor = batches_by_id(body)["2025-G11"]
        assert anchor["index"] == 0
        assert anchor["stage"] == "lactation"
        assert anchor["unit"] == "unassigned"

    def test_recorded_data_flows_into_timeline(self, client: TestClient):
        client.put("/api/base-records/2025-G11", json={"farrow_date": "2025-05-24", "liveborn_qty": 312})
        client.put("/api/daily-records/2025-G11/2025-05-24", json={"pig_death_qty": 2})
        client.put("/api/daily-records/2025-G11/2025-05-25", json={"pig_death_qty": 9})

        body = client.get("/api/timeline", params=AS_OF).json()
        anchor = batches_by_id(body)["2025-G11"]

        assert anchor["inventory"] == 310
        assert anchor["is_half_landed"] is True
        assert anchor["base"]["liveborn_qty"] == 312
        assert [r["record_date"] for r in anchor["records"]] == ["2025-05-24"]
        assert body["total_inventory"] == 310

    def test_override_hand_off(self, client: TestClient):
        client.put(
            "/api/overrides/2025-G08/nursery",
            json={"assigned_unit": "N1", "affects_following": True},
        )

        batches = batches_by_id(client.get("/api/timeline", params=AS_OF).json())

        assert batches["2025-G08"]["unit"] == "N1"
        assert batches["2025-G09"]["unit"] == "N2"

    def test_invalid_date_returns_422(self, client: TestClient):
        response = client.get("/api/timeline", params={"as_of": "yesterday"})
        assert response.status_code == 422

    def test_date_near_calendar_limit_returns_422(self, client: TestClient):
        response = client.get("/api/timeline", params={"as_of": "9999-12-01"})
        assert response.status_code == 422
        assert "calendar limits" in response.json()["detail"]

    def test_far_future_date_is_served(self, client: TestClient):
        response = client.get("/api/timeline", params={"as_of": "9900-01-01"})
        assert response.status_code == 200
        assert len(response.json()["batches"]) == 20


class TestBatchSnapshot:
    """Tests for GET /api/timeline/{batch_id}."""

    def test_single_batch(self, client: TestClient):
        response = client.get("/api/timeline/2025-G09", params=AS_OF)

        assert response.status_code == 200
        data = response.json()
        assert data["age_days"] == 42
        assert data["week_index"] == 6
        assert data["stage"] == "nursery"

    def test_outside_window_returns_404(self, client: TestClient):
        response = client.get("/api/timeline/2023-G01", params=AS_OF)
        assert response.status_code == 404
        assert "not in the timeline window" in response.json()["detail"]

    def test_malformed_id_returns_422(self, client: TestClient):
        response = client.get("/api/timeline/G09", params=AS_OF)
        assert response.status_code == 422

    def test_date_near_calendar_limit_returns_422(self, client: TestClient):
        response = client.get("/api/timeline/2025-G11", params={"as_of": "9999-12-01"})
        assert response.status_code == 422


class TestConfig:
    """Tests for GET /api/config and /health."""

    def test_config(self, client: TestClient):
        response = client.get("/api/config")

        assert response.status_code == 200
        data = response.json()
        assert data["anchor_batch_id"] == "2025-G11"
        assert data["interval_days"] == 21
        assert data["rotations"]["nursery"]["units"] == ["N1", "N2", "N3"]

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_correlation_id_is_echoed(self, client: TestClient):
        response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"
