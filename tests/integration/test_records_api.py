"""Integration tests for record API endpoints."""

from fastapi.testclient import TestClient

BASE_DATA = {
    "farrow_date": "2025-05-24",
    "liveborn_qty": 312,
    "nursery_unit": "N2",
}


class TestBaseRecords:
    """Tests for /api/base-records."""

    def test_put_creates_then_updates(self, client: TestClient):
        """First PUT returns 201, later PUTs 200."""
        response = client.put("/api/base-records/2025-G11", json=BASE_DATA)
        assert response.status_code == 201
        data = response.json()
        assert data["batch_id"] == "2025-G11"
        assert data["liveborn_qty"] == 312
        assert "id" in data

        response = client.put("/api/base-records/2025-G11", json={"wean_qty": 290})
        assert response.status_code == 200
        assert response.json()["wean_qty"] == 290
        assert response.json()["liveborn_qty"] is None

    def test_get_and_list(self, client: TestClient):
        client.put("/api/base-records/2025-G11", json=BASE_DATA)
        client.put("/api/base-records/2025-G10", json={"breed_qty": 30})

        assert client.get("/api/base-records/2025-G11").json()["nursery_unit"] == "N2"

        listing = client.get("/api/base-records").json()
        assert listing["total"] == 2
        assert [r["batch_id"] for r in listing["base_records"]] == ["2025-G10", "2025-G11"]

    def test_get_missing_returns_404(self, client: TestClient):
        response = client.get("/api/base-records/2025-G01")
        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    def test_invalid_batch_id_returns_422(self, client: TestClient):
        response = client.put("/api/base-records/2025-11", json=BASE_DATA)
        assert response.status_code == 422
        assert "YYYY-GNN" in response.json()["detail"]

    def test_negative_quantity_returns_422(self, client: TestClient):
        response = client.put("/api/base-records/2025-G11", json={"wean_qty": -5})
        assert response.status_code == 422

    def test_padded_id_reads_back_through_the_same_path(self, client: TestClient):
        assert client.put("/api/base-records/2025-G011", json=BASE_DATA).status_code == 201

        response = client.get("/api/base-records/2025-G011")
        assert response.status_code == 200
        assert response.json()["batch_id"] == "2025-G11"

    def test_get_invalid_batch_id_returns_422(self, client: TestClient):
        assert client.get("/api/base-records/2025-11").status_code == 422


class TestDailyRecords:
    """Tests for /api/daily-records."""

    def test_put_merges_fields(self, client: TestClient):
        response = client.put("/api/daily-records/2025-G05/2025-06-01", json={"pig_death_qty": 2})
        assert response.status_code == 201

        response = client.put(
            "/api/daily-records/2025-G05/2025-06-01",
            json={"pig_sale_qty": 40, "pig_sale_avg_weight_kg": 118.5},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["pig_death_qty"] == 2
        assert data["pig_sale_qty"] == 40
        assert data["pig_sale_avg_weight_kg"] == 118.5

    def test_list_filtered_by_batch(self, client: TestClient):
        client.put("/api/daily-records/2025-G05/2025-06-01", json={"pig_death_qty": 1})
        client.put("/api/daily-records/2025-G06/2025-06-01", json={"pig_death_qty": 1})

        response = client.get("/api/daily-records", params={"batch_id": "2025-G05"})
        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert response.json()["daily_records"][0]["batch_id"] == "2025-G05"

    def test_delete(self, client: TestClient):
        client.put("/api/daily-records/2025-G05/2025-06-01", json={"sow_abortion_qty": 1})

        assert client.delete("/api/daily-records/2025-G05/2025-06-01").status_code == 204
        assert client.delete("/api/daily-records/2025-G05/2025-06-01").status_code == 404

    def test_padded_id_filters_and_deletes(self, client: TestClient):
        client.put("/api/daily-records/2025-G005/2025-06-01", json={"pig_death_qty": 1})

        listing = client.get("/api/daily-records", params={"batch_id": "2025-G005"}).json()
        assert listing["total"] == 1
        assert client.delete("/api/daily-records/2025-G005/2025-06-01").status_code == 204

    def test_filter_with_invalid_batch_id_returns_422(self, client: TestClient):
        response = client.get("/api/daily-records", params={"batch_id": "G5"})
        assert response.status_code == 422

    def test_bad_date_returns_422(self, client: TestClient):
        response = client.put("/api/daily-records/2025-G05/2025-13-01", json={"pig_death_qty": 1})
        assert response.status_code == 422


class TestOverrides:
    """Tests for /api/overrides."""

    def test_put_and_list(self, client: TestClient):
        response = client.put(
            "/api/overrides/2025-G08/nursery",
            json={"assigned_unit": "N1", "affects_following": True},
        )
        assert response.status_code == 201
        assert response.json()["stage"] == "nursery"

        response = client.put("/api/overrides/2025-G08/nursery", json={"assigned_unit": "N2"})
        assert response.status_code == 200
        assert response.json()["affects_following"] is False

        client.put("/api/overrides/2025-G05/piglet", json={"assigned_unit": "P3"})
        listing = client.get("/api/overrides", params={"stage": "piglet"}).json()
        assert listing["total"] == 1
        assert listing["overrides"][0]["assigned_unit"] == "P3"

    def test_unknown_stage_returns_422(self, client: TestClient):
        response = client.put("/api/overrides/2025-G08/barn", json={"assigned_unit": "B1"})
        assert response.status_code == 422

    def test_empty_unit_returns_422(self, client: TestClient):
        response = client.put("/api/overrides/2025-G08/nursery", json={"assigned_unit": ""})
        assert response.status_code == 422

    def test_delete(self, client: TestClient):
        client.put("/api/overrides/2025-G08/nursery", json={"assigned_unit": "N1"})

        assert client.delete("/api/overrides/2025-G08/nursery").status_code == 204
        assert client.delete("/api/overrides/2025-G08/nursery").status_code == 404

    def test_delete_with_padded_id(self, client: TestClient):
        client.put("/api/overrides/2025-G008/nursery", json={"assigned_unit": "N1"})

        assert client.delete("/api/overrides/2025-G008/nursery").status_code == 204
        assert client.get("/api/overrides").json()["total"] == 0

    def test_delete_invalid_batch_id_returns_422(self, client: TestClient):
        assert client.delete("/api/overrides/G08/nursery").status_code == 422
