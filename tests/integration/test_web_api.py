"""Integration tests for the REST API."""

import pytest
from fastapi.testclient import TestClient

from laserbox.web.app import create_app

DIMENSIONS = {"width": 120, "depth": 80, "height": 60}


@pytest.fixture
def client() -> TestClient:
    """Create a test client for a fresh app."""
    return TestClient(create_app())


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestGenerateEndpoint:
    """Tests for POST /api/v1/generate."""

    def test_simple_box(self, client: TestClient) -> None:
        response = client.post("/api/v1/generate", json={"dimensions": DIMENSIONS})

        assert response.status_code == 200
        body = response.json()
        assert body["is_valid"]
        assert body["box_type"] == "simple"
        assert [f["id"] for f in body["faces"]] == [
            "simple-front",
            "simple-back",
            "simple-left",
            "simple-right",
            "simple-bottom",
        ]
        assert body["dimensions"]["inner_width"] == pytest.approx(114)
        assert body["packing"] is None
        assert all(f["cut_paths"] == 1 for f in body["faces"])

    def test_hinged_box_reports_holes(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/generate", json={"box_type": "hinged", "dimensions": DIMENSIONS}
        )

        assert response.status_code == 200
        holes = response.json()["hinge_holes"]
        assert holes["left"]["r"] == holes["right"]["r"]
        assert holes["left"]["cy"] == pytest.approx(holes["right"]["cy"])

    def test_drawer_box_reports_sizes(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/generate", json={"box_type": "drawer", "dimensions": DIMENSIONS}
        )

        assert response.status_code == 200
        drawer = response.json()["drawer"]
        assert drawer["drawer_width"] < drawer["outer_width"]

    def test_packing(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/generate",
            json={"dimensions": DIMENSIONS, "sheet": {"width": 600, "height": 400}},
        )

        packing = response.json()["packing"]
        assert packing["ready_count"] == 5
        assert packing["overflow_count"] == 0
        assert packing["edge_margin"] == 3.0
        assert packing["placements"][0] == {
            "face_id": "simple-front",
            "x": 3.0,
            "y": 3.0,
            "rotation": 0,
            "overflow": False,
        }

    def test_overlay_is_engraved(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/export/svg",
            json={
                "dimensions": DIMENSIONS,
                "overlays": [{"target": "front", "path": "M 0 0 L 20 0 L 20 10 Z"}],
            },
        )

        assert response.status_code == 200
        assert response.text.count('class="engrave"') == 1

    def test_sliding_lid_groove_settings(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/generate",
            json={
                "dimensions": DIMENSIONS,
                "lid": "sliding_lid",
                "groove_offset": 50,
                "groove_depth": 10,
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_valid"]
        assert any("clipped" in w for w in body["warnings"])

    def test_generation_errors_are_422(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/generate",
            json={
                "dimensions": {"width": 120, "depth": 80, "height": 18},
                "fingers": {"width": 10},
            },
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "Box generation failed"
        assert body["error_type"] == "generation"
        assert any("too short" in d["message"] for d in body["details"])

    def test_missing_dimensions(self, client: TestClient) -> None:
        response = client.post("/api/v1/generate", json={})

        assert response.status_code == 422


class TestGenerateFromConfig:
    """Tests for POST /api/v1/generate/from-config."""

    def test_valid_config(self, client: TestClient) -> None:
        config = {"schema_version": "1.0", "box": DIMENSIONS, "lid": {"type": "flat_lid"}}

        response = client.post("/api/v1/generate/from-config", json={"config": config})

        assert response.status_code == 200
        assert "simple-top" in [f["id"] for f in response.json()["faces"]]

    def test_invalid_config(self, client: TestClient) -> None:
        config = {"schema_version": "1.0", "box": {"width": 120}}

        response = client.post("/api/v1/generate/from-config", json={"config": config})

        assert response.status_code == 422
        body = response.json()
        assert body["error_type"] == "validation"
        assert {d["path"] for d in body["details"]} == {"box.depth", "box.height"}


class TestValidateEndpoint:
    """Tests for POST /api/v1/validate."""

    def test_valid(self, client: TestClient) -> None:
        config = {"schema_version": "1.0", "box": DIMENSIONS}

        response = client.post("/api/v1/validate", json={"config": config})

        assert response.status_code == 200
        assert response.json() == {"is_valid": True, "errors": [], "warnings": []}

    def test_schema_error(self, client: TestClient) -> None:
        config = {"schema_version": "1.0", "box": {**DIMENSIONS, "colour": "red"}}

        response = client.post("/api/v1/validate", json={"config": config})

        assert response.status_code == 200
        body = response.json()
        assert not body["is_valid"]
        assert body["errors"][0]["path"] == "box.colour"

    def test_fabrication_error(self, client: TestClient) -> None:
        config = {
            "schema_version": "1.0",
            "box": DIMENSIONS,
            "material": {"thickness": 1, "kerf": 1},
        }

        response = client.post("/api/v1/validate", json={"config": config})

        body = response.json()
        assert not body["is_valid"]
        assert body["errors"][0]["path"] == "material.kerf"

    def test_warnings(self, client: TestClient) -> None:
        config = {
            "schema_version": "1.0",
            "box": DIMENSIONS,
            "sheet": {"width": 100, "height": 400},
        }

        response = client.post("/api/v1/validate", json={"config": config})

        body = response.json()
        assert body["is_valid"]
        assert len(body["warnings"]) == 3
        assert body["warnings"][0]["path"] == "sheet"


class TestExportEndpoints:
    """Tests for the export endpoints."""

    def test_formats(self, client: TestClient) -> None:
        response = client.get("/api/v1/export/formats")

        assert response.status_code == 200
        assert response.json() == {"formats": ["dxf", "panels", "svg"]}

    def test_svg(self, client: TestClient) -> None:
        response = client.post("/api/v1/export/svg", json={"dimensions": DIMENSIONS})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert "box.svg" in response.headers["content-disposition"]
        assert "<svg" in response.text
        assert 'id="simple-front"' in response.text

    def test_svg_sheet_layout(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/export/svg",
            json={"dimensions": DIMENSIONS, "sheet": {"width": 300, "height": 200}},
        )

        assert response.status_code == 200
        assert 'id="sheet-panels"' in response.text

    def test_dxf(self, client: TestClient) -> None:
        response = client.post("/api/v1/export/dxf", json={"dimensions": DIMENSIONS})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/dxf")
        assert "LWPOLYLINE" in response.text

    def test_broken_box_is_refused(self, client: TestClient) -> None:
        payload = {
            "dimensions": {"width": 120, "depth": 80, "height": 18},
            "fingers": {"width": 10},
        }

        response = client.post("/api/v1/export/svg", json=payload)

        assert response.status_code == 422
        assert response.json()["error_type"] == "generation"

    def test_force_exports_broken_box(self, client: TestClient) -> None:
        payload = {
            "dimensions": {"width": 120, "depth": 80, "height": 18},
            "fingers": {"width": 10},
            "force": True,
        }

        response = client.post("/api/v1/export/svg", json=payload)

        assert response.status_code == 200
        assert 'data-valid="false"' in response.text
