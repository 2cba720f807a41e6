"""
Unit tests for hydrostab/deployment/api.py

Exercises every route through the FastAPI TestClient against the
in-memory service fixture.
"""

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient

from hydrostab import __version__
from hydrostab.deployment.api import create_app


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__


class TestHydrostaticsEndpoints:

    def test_get_hydrostatics(self, client):
        response = client.get("/api/v1/vessels/barge/hydrostatics", params={"draft": 5.0})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["result"]["volume"] == 10000.0
        assert body["result"]["gmt"] is None

    def test_get_hydrostatics_with_loadcase(self, client):
        response = client.get(
            "/api/v1/vessels/barge/hydrostatics",
            params={"draft": 5.0, "loadcase_id": "barge_kg8"},
        )
        assert response.json()["result"]["gmt"] == 1.166667

    def test_unknown_vessel_is_404(self, client):
        response = client.get("/api/v1/vessels/ark/hydrostatics", params={"draft": 5.0})
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "HYD_001"

    def test_negative_draft_is_400(self, client):
        response = client.get("/api/v1/vessels/barge/hydrostatics", params={"draft": -1.0})
        assert response.status_code == 400
        assert response.json()["error"]["details"]["param"] == "draft"

    def test_missing_draft_is_422(self, client):
        assert client.get("/api/v1/vessels/barge/hydrostatics").status_code == 422

    def test_incomplete_geometry_is_422(self, client, geometry_provider):
        from hydrostab.geometry.models import HullGeometry

        geometry_provider.add("bare", HullGeometry())
        response = client.get("/api/v1/vessels/bare/hydrostatics", params={"draft": 1.0})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "HYD_002"

    def test_table(self, client):
        response = client.post("/api/v1/vessels/triangle/hydrostatics/table", json={"drafts": [2.0, 4.0]})
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert body["results"][1]["volume"] == 720.0


class TestCurvesEndpoints:

    def test_curves(self, client):
        response = client.post(
            "/api/v1/vessels/barge/curves",
            json={"curve_types": ["kb", "bmt"], "min_draft": 1.0, "max_draft": 5.0, "points": 5},
        )
        assert response.status_code == 200
        curves = response.json()["curves"]
        assert [c["type"] for c in curves] == ["kb", "bmt"]
        assert curves[0]["points"][-1] == {"x": 5.0, "y": 2.5}

    def test_unknown_curve_type_is_400(self, client):
        response = client.post(
            "/api/v1/vessels/barge/curves",
            json={"curve_types": ["sheer"], "min_draft": 1.0, "max_draft": 5.0},
        )
        assert response.status_code == 400

    def test_bonjean(self, client):
        response = client.get("/api/v1/vessels/triangle/curves/bonjean")
        assert response.status_code == 200
        curves = response.json()["curves"]
        assert curves[0]["station_index"] == 0
        assert curves[0]["type"] == "bonjean"


class TestStabilityEndpoints:

    def test_methods(self, client):
        response = client.get("/api/v1/stability/methods")
        assert [m["id"] for m in response.json()["methods"]] == ["WallSided", "FullImmersion"]

    def test_gz(self, client):
        response = client.post(
            "/api/v1/vessels/barge/stability/gz",
            json={"loadcase_id": "barge_kg8", "max_angle": 30.0, "angle_increment": 10.0},
        )
        assert response.status_code == 200
        curve = response.json()["curve"]
        assert curve["method"] == "WallSided"
        assert len(curve["points"]) == 4
        assert curve["warnings"]

    def test_gz_default_request(self, client):
        response = client.post("/api/v1/vessels/barge/stability/gz", json={"loadcase_id": "barge_kg8"})
        assert response.status_code == 200
        curve = response.json()["curve"]
        assert len(curve["points"]) == 90
        assert curve["points"][-1]["heel_angle"] == 89.0
        assert curve["points"][0]["gm_at_angle"] is None

    def test_gz_wall_sided_past_90_only_is_400(self, client):
        response = client.post(
            "/api/v1/vessels/barge/stability/gz",
            json={"loadcase_id": "barge_kg8", "min_angle": 90.0, "max_angle": 180.0},
        )
        assert response.status_code == 400
        assert response.json()["error"]["details"]["param"] == "max_angle"

    def test_gz_without_kg_is_400(self, client):
        response = client.post("/api/v1/vessels/barge/stability/gz", json={"loadcase_id": "seawater"})
        assert response.status_code == 400
        assert response.json()["error"]["details"]["param"] == "loadcase_id"

    def test_gz_bad_method_is_400(self, client):
        response = client.post(
            "/api/v1/vessels/barge/stability/gz",
            json={"loadcase_id": "barge_kg8", "method": "Guess"},
        )
        assert response.status_code == 400

    def test_kn(self, client):
        response = client.post(
            "/api/v1/vessels/barge/stability/kn",
            json={"max_angle": 20.0, "angle_increment": 10.0, "method": "FullImmersion"},
        )
        assert response.status_code == 200
        assert set(response.json()["curve"]["points"][0]) == {"heel_angle", "kn"}

    def test_criteria(self, client):
        response = client.post(
            "/api/v1/vessels/barge/stability/criteria",
            json={"loadcase_id": "barge_kg8", "max_angle": 60.0, "angle_increment": 2.0, "method": "FullImmersion"},
        )
        assert response.status_code == 200
        criteria = response.json()["criteria"]
        assert len(criteria["criteria"]) == 6
        assert criteria["standard"] == "IMO A.749(18)"


class TestTrimAndValidationEndpoints:

    def test_trim(self, client):
        response = client.post("/api/v1/vessels/barge/trim", json={"target_displacement_t": 5125.0})
        assert response.status_code == 200
        solution = response.json()["solution"]
        assert solution["converged"] is True
        assert solution["mean_draft"] == pytest.approx(2.5, abs=1e-4)

    def test_trim_bad_target_is_400(self, client):
        response = client.post("/api/v1/vessels/barge/trim", json={"target_displacement_t": -1.0})
        assert response.status_code == 400

    def test_validation(self, client):
        response = client.get("/api/v1/vessels/wigley/validation")
        assert response.status_code == 200
        assert response.json()["is_valid"] is True
