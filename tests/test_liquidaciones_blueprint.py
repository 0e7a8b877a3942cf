"""Tests for the liquidaciones API endpoints."""

import json
from unittest.mock import patch

import pytest


class TestLiquidacionEndpoint:
    """Test cases for GET /api/pensionados/<id>/liquidaciones/<variant>."""

    def test_evolucion_mesada(self, client):
        """Test running a liquidation over stored documents."""
        response = client.get("/api/pensionados/P-001/liquidaciones/evolucion-mesada")

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["variant"] == "evolucion-mesada"
        assert data["pensioner_id"] == "P-001"
        assert data["mesada_pensional_inicial"] == 1_950_000
        assert [row["year"] for row in data["before_sharing"]] == [2017, 2018, 2019, 2020]

    def test_cutoff_year_override(self, client):
        """Test overriding the cutoff year per request."""
        response = client.get(
            "/api/pensionados/P-001/liquidaciones/evolucion-mesada?cutoff_year=2018"
        )

        data = json.loads(response.data)
        assert data["before_sharing"][-1]["year"] == 2018

    def test_difference_basis(self, client):
        """Test the difference basis option."""
        response = client.get(
            "/api/pensionados/P-001/liquidaciones/evolucion-mesada?difference_basis=paid"
        )
        assert response.status_code == 200

    @pytest.mark.parametrize(
        "query",
        [
            "difference_basis=salary",
            "split_strategy=weekly",
            "cutoff_year=1900",
            "cutoff_year=abc",
        ],
    )
    def test_invalid_query(self, client, query):
        """Test that invalid options return 400."""
        response = client.get(
            f"/api/pensionados/P-001/liquidaciones/evolucion-mesada?{query}"
        )

        assert response.status_code == 400
        assert json.loads(response.data)["error"] == "Invalid liquidation request"

    def test_option_not_supported_by_variant(self, client):
        """Test that an option the variant does not accept returns 400."""
        response = client.get(
            "/api/pensionados/P-001/liquidaciones/certificado?difference_basis=paid"
        )
        assert response.status_code == 400

    def test_anexo_ley_4_outside_eligible_dependencies(self, client):
        """Test that Anexo Ley 4 reports an unavailable result with the reason."""
        response = client.get("/api/pensionados/P-001/liquidaciones/anexo-ley-4")

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["variant"] == "anexo-ley-4"
        assert data["available"] is False
        assert "ATLANTICO, MAGDALENA o GUAJIRA" in data["warnings"][0]

    def test_unknown_variant(self, client):
        """Test that an unknown variant returns 404."""
        response = client.get("/api/pensionados/P-001/liquidaciones/magia")

        assert response.status_code == 404
        assert "Unknown liquidation variant" in json.loads(response.data)["error"]

    def test_unknown_pensioner(self, client):
        """Test that an unknown pensioner returns 404."""
        response = client.get("/api/pensionados/missing/liquidaciones/certificado")

        assert response.status_code == 404
        assert json.loads(response.data) == {"error": "Pensioner not found"}

    def test_csv_export(self, client):
        """Test exporting the rows as CSV."""
        response = client.get(
            "/api/pensionados/P-001/liquidaciones/certificado?format=csv&formatted=true"
        )

        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        assert "P-001-certificado.csv" in response.headers["Content-Disposition"]
        text = response.data.decode("utf-8")
        assert text.splitlines()[0].startswith("year,")
        assert "$ 2.000.000" in text

    def test_unexpected_error(self, client):
        """Test that unexpected errors return 500."""
        with patch(
            "liquidador.blueprints.liquidaciones.LiquidationService.run",
            side_effect=RuntimeError("boom"),
        ):
            response = client.get("/api/pensionados/P-001/liquidaciones/certificado")

        assert response.status_code == 500
        assert json.loads(response.data) == {"error": "Internal server error"}


class TestSimuladorEndpoint:
    """Test cases for POST /api/simulador."""

    def test_run_simulation(self, client):
        """Test a valid simulation."""
        response = client.post(
            "/api/simulador",
            json={
                "base_mesada": 1_000_000,
                "start_year": 2003,
                "end_year": 2004,
                "employer_share_pct": 40,
                "iss_share_pct": 60,
            },
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["total_general_retroactivo"] == pytest.approx(187_600)
        assert data["sharing_date"] == "2014-06-13"

    def test_invalid_simulation(self, client):
        """Test that invalid percentages return 400."""
        response = client.post(
            "/api/simulador",
            json={
                "base_mesada": 1_000_000,
                "start_year": 2003,
                "employer_share_pct": 40,
                "iss_share_pct": 40,
            },
        )

        assert response.status_code == 400
        assert json.loads(response.data)["error"] == "Invalid simulation"

    def test_body_must_be_an_object(self, client):
        """Test that a non-object body returns 400."""
        response = client.post("/api/simulador", json=[1, 2, 3])
        assert response.status_code == 400


class TestIndicesEndpoint:
    """Test cases for GET /api/indices."""

    def test_get_indices(self, client, reference_table):
        """Test the reference table dump."""
        response = client.get("/api/indices")

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["first_year"] == 1982
        assert data["last_year"] == reference_table.last_year
        assert data["indices"][0]["year"] == 1982
        assert len(data["indices"]) == len(reference_table.years())
