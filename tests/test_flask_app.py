"""Tests for the Flask app used in local development."""

import pytest

import main
from engine import CostProcessor


@pytest.fixture
def client():
    main.app.config["TESTING"] = True
    with main.app.test_client() as client:
        yield client


class TestFlaskApp:
    """Routes, status codes and the response envelope."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"

    def test_api_info(self, client):
        response = client.get("/api")

        assert response.status_code == 200
        assert "calculate_costs" in response.get_json()["endpoints"]

    def test_calculate_costs(self, client):
        response = client.post("/calculate_costs", json={"categoria": "CRI", "volume": 200000000})

        assert response.status_code == 200
        body = response.get_json()
        assert body["success"] is True
        assert body["data"]["tabela_origem"] == "CRI_origem"

    def test_legacy_route(self, client):
        response = client.post("/custos_por_combinacao", json={"categoria": "CRA", "volume": 100000000})

        assert response.status_code == 200
        assert response.get_json()["data"]["tabela_origem"] == "CRA_origem"

    def test_cors_header(self, client):
        response = client.post(
            "/calculate_costs",
            json={"categoria": "CRI", "volume": 200000000},
            headers={"Origin": "http://localhost:3000"},
        )
        assert response.headers.get("Access-Control-Allow-Origin") in ("*", "http://localhost:3000")

    def test_no_body(self, client):
        response = client.post("/calculate_costs", data="")

        assert response.status_code == 400
        assert response.get_json()["success"] is False

    def test_validation_error(self, client):
        response = client.post("/calculate_costs", json={"categoria": "DEB", "volume": -5})

        assert response.status_code == 400
        assert "volume" in response.get_json()["error"]

    def test_unexpected_error_is_generic(self, client, monkeypatch):
        def boom(self, data, rate_tables=None):
            raise RuntimeError("catalog store offline")

        monkeypatch.setattr(CostProcessor, "process_from_dict", boom)
        response = client.post("/calculate_costs", json={"categoria": "DEB", "volume": 1})

        assert response.status_code == 500
        assert "offline" not in response.get_json()["error"]

    def test_variable_fee(self, client):
        response = client.post("/variable_fee/market_association", json={"categoria": "CRI", "volume": 200000000})

        assert response.status_code == 200
        assert response.get_json()["data"]["valor_upfront_liquido"] == 2830.0

    def test_variable_fee_unknown(self, client):
        response = client.post("/variable_fee/stamp_duty", json={"categoria": "CRI", "volume": 1})
        assert response.status_code == 400

    @pytest.mark.parametrize("literal", ["NaN", "Infinity"])
    def test_non_finite_volume_is_a_validation_error(self, client, literal):
        body = '{"categoria": "DEB", "tipo_oferta": "publica", "volume": %s}' % literal
        response = client.post("/calculate_costs", data=body, content_type="application/json")

        assert response.status_code == 400
        assert "volume" in response.get_json()["error"]
