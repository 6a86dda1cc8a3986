"""
Integration tests for the TENS lab API endpoints.
Tests request validation, response formats and wiring to the simulation engine.
"""
import pytest
from fastapi.testclient import TestClient

from main import app as root_app
from tens_simulator.api import app, get_tissue_config_service
from tens_simulator.api_models import TensParameters, TissueRiskRequest
from tens_simulator.tissue.presets import DEFAULT_TISSUE_CONFIG
from tens_simulator.tissue_config_service import InMemoryTissueConfigService


class TestAPIEndpoints:
    """Test TENS API endpoint functionality."""

    @pytest.fixture
    def client(self):
        service = InMemoryTissueConfigService()
        app.dependency_overrides[get_tissue_config_service] = lambda: service
        yield TestClient(app)
        app.dependency_overrides.clear()

    @pytest.mark.integration
    def test_simulate_tens(self, client, reference_params):
        response = client.post("/simulate_tens", json=reference_params.model_dump(mode="json"))

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"comfort_level", "activation_level", "comfort_message"}
        assert data["comfort_level"] == 72
        assert data["comfort_message"] == "Comfortable stimulation"

    @pytest.mark.integration
    def test_simulate_tens_rejects_unknown_mode(self, client):
        response = client.post("/simulate_tens", json={"frequency_hz": 80, "mode": "acupuntura"})
        assert response.status_code == 422

    @pytest.mark.integration
    def test_simulate_tens_clamps_out_of_range_values(self, client):
        high = client.post("/simulate_tens", json={"intensity_ma": 1000}).json()
        top = client.post("/simulate_tens", json={"intensity_ma": 80}).json()
        assert high == top

    @pytest.mark.integration
    def test_simulate_tissue_risk(self, client, reference_params, implant_tissue):
        request = TissueRiskRequest(parameters=reference_params, tissue=implant_tissue)
        response = client.post("/simulate_tissue_risk", json=request.model_dump(mode="json"))

        assert response.status_code == 200
        data = response.json()
        assert data["risk_score"] == 32
        assert data["risk_level"] == "low"
        assert "metal implant" in data["messages"][0]

    @pytest.mark.integration
    def test_simulate_tissue_risk_requires_implant_geometry(self, client, reference_params):
        tissue = DEFAULT_TISSUE_CONFIG.model_dump(mode="json")
        tissue["has_metal_implant"] = True
        response = client.post("/simulate_tissue_risk", json={
            "parameters": reference_params.model_dump(mode="json"),
            "tissue": tissue,
        })
        assert response.status_code == 422

    @pytest.mark.integration
    def test_list_presets(self, client):
        response = client.get("/tissue_presets")

        assert response.status_code == 200
        presets = response.json()
        assert [preset["id"] for preset in presets] == [
            "forearm_slim", "forearm_muscular", "thigh_obese_implant", "ankle_bony",
        ]
        assert all(preset["is_custom"] is False for preset in presets)

    @pytest.mark.integration
    def test_get_preset(self, client):
        response = client.get("/tissue_presets/ankle_bony")
        assert response.status_code == 200
        assert response.json()["bone_depth"] == 0.30

        assert client.get("/tissue_presets/custom").status_code == 404

    @pytest.mark.integration
    def test_store_and_resolve_tissue_config(self, client):
        payload = DEFAULT_TISSUE_CONFIG.model_copy(update={"name": "Saved shoulder"}).model_dump(mode="json")
        created = client.post("/tissue_configs", json=payload)
        assert created.status_code == 201
        config_id = created.json()["id"]

        fetched = client.get(f"/tissue_configs/{config_id}")
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Saved shoulder"

    @pytest.mark.integration
    def test_unknown_tissue_config_falls_back_to_default(self, client):
        response = client.get("/tissue_configs/does-not-exist")
        assert response.status_code == 200
        assert response.json()["id"] == DEFAULT_TISSUE_CONFIG.id

    @pytest.mark.integration
    def test_evaluate_lab_with_preset(self, client):
        response = client.post("/evaluate_lab", json={
            "parameters": {"frequency_hz": 80, "pulse_width_us": 200, "intensity_ma": 60, "mode": "conventional"},
            "selection": {"kind": "preset", "preset_id": "thigh_obese_implant"},
        })

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"parameters", "electrodes", "tissue", "simulation", "risk", "field"}
        assert data["tissue"]["id"] == "thigh_obese_implant"
        assert data["risk"]["messages"][0].startswith("ALERT")

    @pytest.mark.integration
    def test_evaluate_lab_applies_lab_config(self, client):
        response = client.post("/evaluate_lab", json={
            "parameters": {"intensity_ma": 75, "mode": "conventional"},
            "selection": {"kind": "custom", "config": DEFAULT_TISSUE_CONFIG.model_dump(mode="json")},
            "lab_config": {"intensity_range": {"min": 0, "max": 30}},
        })

        assert response.status_code == 200
        data = response.json()
        assert data["parameters"]["intensity_ma"] == 30
        assert data["tissue"]["id"] == "custom"

    @pytest.mark.integration
    def test_evaluate_lab_rejects_disallowed_mode(self, client):
        response = client.post("/evaluate_lab", json={
            "parameters": {"mode": "burst"},
            "selection": {"kind": "preset", "preset_id": "forearm_slim"},
            "lab_config": {"allowed_modes": ["conventional"]},
        })
        assert response.status_code == 422

    @pytest.mark.integration
    def test_evaluate_lab_unknown_preset(self, client):
        response = client.post("/evaluate_lab", json={
            "selection": {"kind": "preset", "preset_id": "retired_preset"},
        })
        assert response.status_code == 404


    @pytest.mark.integration
    def test_evaluate_lab_uses_electrodes(self, client):
        def field_at(distance_cm):
            return client.post("/evaluate_lab", json={
                "parameters": {"intensity_ma": 40},
                "electrodes": {"distance_cm": distance_cm, "size_cm": 4},
                "selection": {"kind": "preset", "preset_id": "forearm_slim"},
                "lab_config": {"electrode_distance_range": {"min": 2, "max": 10}},
            }).json()

        near, far = field_at(2), field_at(12)
        assert far["electrodes"]["distance_cm"] == 10
        assert far["field"]["activation_depth_mm"] > near["field"]["activation_depth_mm"]
        assert near["field"]["distance_explanation"].startswith("Short distance")
        assert far["risk"] == near["risk"]

    @pytest.mark.integration
    def test_evaluate_lab_resolves_lab_tissue_config(self, client):
        payload = DEFAULT_TISSUE_CONFIG.model_copy(update={"name": "Saved knee", "bone_depth": 0.25}).model_dump(mode="json")
        config_id = client.post("/tissue_configs", json=payload).json()["id"]

        response = client.post("/evaluate_lab", json={"lab_config": {"tissue_config_id": config_id}})
        assert response.status_code == 200
        assert response.json()["tissue"]["id"] == config_id
        assert response.json()["tissue"]["name"] == "Saved knee"

        fallback = client.post("/evaluate_lab", json={}).json()
        assert fallback["tissue"]["id"] == DEFAULT_TISSUE_CONFIG.id

    @pytest.mark.integration
    def test_list_electrode_placements(self, client):
        response = client.get("/electrode_placements")
        assert response.status_code == 200
        assert {entry["placement"]: entry["distance_cm"] for entry in response.json()} == {
            "default": 6, "muscle_target": 5, "superficial": 3, "spread": 10,
        }


class TestRootApp:

    @pytest.mark.integration
    def test_health_and_mount(self):
        client = TestClient(root_app)
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/").json()["status"] == "ok"

        response = client.post("/api/simulate_tens", json=TensParameters().model_dump(mode="json"))
        assert response.status_code == 200
        assert response.json()["comfort_level"] == 72
