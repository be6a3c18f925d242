"""
Integration tests for the API endpoints.
"""

import logging
import math
import pytest
from pathlib import Path
from fastapi.testclient import TestClient

# Adjust Python path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from keypoint_api.main import app


@pytest.fixture
def client():
    """Create a test client."""
    return TestClient(app)


@pytest.fixture
def identity_keypoint():
    """Wire form of a default keypoint at (10, 20)."""
    return {
        "x": 10.0,
        "y": 20.0,
        "weight": 1.0,
        "constraint_point_id": -1,
        "a11": 1.0,
        "a12": 0.0,
        "a21": 0.0,
        "a22": 1.0,
    }


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check(self, client):
        """Test that health endpoint returns healthy status."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data


class TestLifespan:
    """Tests for startup logging."""

    def test_startup_logs_route_prefix(self, caplog):
        """Startup reports where the keypoint routes are mounted."""
        caplog.set_level(logging.INFO, logger="keypoint_api.main")

        with TestClient(app):
            pass

        assert "Keypoint routes mounted at /api/v1/keypoints" in caplog.text
        assert "Keypoint service stopped" in caplog.text


class TestRootEndpoint:
    """Tests for root endpoint."""

    def test_root_returns_info(self, client):
        """Test that root returns API info."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert "version" in data
        assert "docs" in data


class TestCreateEndpoints:
    """Tests for keypoint construction endpoints."""

    def test_create_from_position(self, client):
        """Position-only keypoint has identity shape."""
        response = client.post("/api/v1/keypoints", json={"x": 1.5, "y": 2.5, "weight": 0.3})

        assert response.status_code == 200
        data = response.json()
        assert data["keypoint"]["x"] == 1.5
        assert data["keypoint"]["weight"] == 0.3
        assert data["keypoint"]["constraint_point_id"] == -1
        assert data["shape"]["scale"] == 1.0
        assert data["shape"]["orientation_rad"] == 0.0

    def test_create_missing_position(self, client):
        """Test create fails without coordinates."""
        response = client.post("/api/v1/keypoints", json={"weight": 1.0})

        assert response.status_code == 422

    def test_create_from_shape(self, client):
        """Isotropic shape is reported back by the decomposition."""
        response = client.post(
            "/api/v1/keypoints/shape",
            json={"x": 0, "y": 0, "constraint_point_id": 5, "scale": 2.0, "orientation": 0.5},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["keypoint"]["constraint_point_id"] == 5
        assert abs(data["keypoint"]["a11"] - 2.0 * math.cos(0.5)) < 1e-9
        assert abs(data["shape"]["scale"] - 2.0) < 1e-6
        assert abs(data["shape"]["orientation_rad"] - 0.5) < 1e-6

    def test_create_from_shape_negative_scale(self, client):
        """Negative scale is rejected with INVALID_ARGUMENT."""
        response = client.post(
            "/api/v1/keypoints/shape",
            json={"x": 0, "y": 0, "scale": -1.0},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["detail"]["code"] == "INVALID_ARGUMENT"
        assert data["detail"]["details"]["parameter"] == "scale"

    def test_create_from_shape_nan_scale(self, client):
        """NaN scale is rejected with INVALID_ARGUMENT rather than a server error."""
        response = client.post(
            "/api/v1/keypoints/shape",
            content='{"x": 0, "y": 0, "scale": NaN}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["detail"]["code"] == "INVALID_ARGUMENT"
        assert data["detail"]["details"]["value"] == "nan"

    def test_create_from_shape_parameters(self, client):
        """Anisotropic axis-aligned keypoint."""
        response = client.post(
            "/api/v1/keypoints/shape-parameters",
            json={"x": 10, "y": 20, "scale_x": 2, "scale_y": 3, "orientation": 0, "shear": 0},
        )

        assert response.status_code == 200
        data = response.json()
        kp = data["keypoint"]
        assert kp["a11"] == 2.0
        assert abs(kp["a12"]) < 1e-12
        assert kp["a21"] == 0.0
        assert kp["a22"] == 3.0
        assert data["shape"]["scale_x"] == 2.0
        assert data["shape"]["scale_y"] == 3.0
        assert data["shape"]["scale"] == 2.5

    def test_create_from_shape_parameters_negative(self, client):
        response = client.post(
            "/api/v1/keypoints/shape-parameters",
            json={"x": 0, "y": 0, "scale_x": 1, "scale_y": -3},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["details"]["parameter"] == "scale_y"

    def test_create_from_matrix_accepts_reflection(self, client):
        """Raw matrices are stored without validation."""
        response = client.post(
            "/api/v1/keypoints/matrix",
            json={"x": 0, "y": 0, "a11": -1, "a12": 0, "a21": 0, "a22": 1},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["keypoint"]["a11"] == -1.0
        assert data["shape"]["scale_x"] == 1.0


class TestRescaleEndpoint:
    """Tests for rescale endpoint."""

    def test_rescale_anisotropic(self, client, identity_keypoint):
        response = client.post(
            "/api/v1/keypoints/rescale",
            json={"keypoint": identity_keypoint, "scale_x": 2, "scale_y": 3},
        )

        assert response.status_code == 200
        kp = response.json()["keypoint"]
        assert (kp["x"], kp["y"]) == (20.0, 60.0)
        assert (kp["a11"], kp["a12"], kp["a21"], kp["a22"]) == (2.0, 0.0, 0.0, 3.0)

    def test_rescale_uniform(self, client, identity_keypoint):
        """Omitting scale_y rescales both axes."""
        response = client.post(
            "/api/v1/keypoints/rescale",
            json={"keypoint": identity_keypoint, "scale_x": 0.5},
        )

        assert response.status_code == 200
        kp = response.json()["keypoint"]
        assert (kp["x"], kp["y"]) == (5.0, 10.0)
        assert (kp["a11"], kp["a22"]) == (0.5, 0.5)

    def test_rescale_zero_factor(self, client, identity_keypoint):
        response = client.post(
            "/api/v1/keypoints/rescale",
            json={"keypoint": identity_keypoint, "scale_x": 0, "scale_y": 1},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_ARGUMENT"

    def test_rescale_negative_infinity(self, client):
        """Non-finite factors are rejected with a readable error."""
        response = client.post(
            "/api/v1/keypoints/rescale",
            content='{"keypoint": {}, "scale_x": -Infinity}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["detail"]["code"] == "INVALID_ARGUMENT"
        assert data["detail"]["details"]["value"] == "-inf"


class TestDecomposeEndpoint:
    """Tests for decompose endpoint."""

    def test_decompose(self, client):
        keypoint = {
            "x": 0,
            "y": 0,
            "a11": 0.0,
            "a12": -2.0,
            "a21": 2.0,
            "a22": 0.0,
        }
        response = client.post("/api/v1/keypoints/decompose", json={"keypoint": keypoint})

        assert response.status_code == 200
        data = response.json()
        assert abs(data["scale"] - 2.0) < 1e-6
        assert abs(data["orientation_deg"] - 90.0) < 1e-4
        assert abs(data["shear_rad"]) < 1e-6

    def test_matrix_with_large_entries(self, client):
        """Large entries decompose to finite scales."""
        response = client.post(
            "/api/v1/keypoints/matrix",
            json={"x": 0, "y": 0, "a11": 1e200, "a12": 0.0, "a21": 1e200, "a22": 1.0},
        )

        assert response.status_code == 200
        shape = response.json()["shape"]
        assert shape["scale_x"] is not None
        assert abs(shape["scale_x"] / (math.sqrt(2.0) * 1e200) - 1.0) < 1e-9
        assert shape["scale_y"] == 1.0
        assert shape["scale"] is not None

    def test_decompose_defaults(self, client):
        """Missing fields fall back to the default keypoint."""
        response = client.post("/api/v1/keypoints/decompose", json={"keypoint": {}})

        assert response.status_code == 200
        assert response.json()["scale"] == 1.0
