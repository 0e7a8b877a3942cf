"""Tests for the Anexo Ley 4 liquidation."""

import pytest

from liquidador.models.parameters import LiquidationParameters
from liquidador.models.records import (
    HistoricalPaymentRecord,
    Pensioner,
    PensionerRecords,
)
from liquidador.models.variants import VARIANTS, run_anexo_ley_4
from liquidador.models.variants.anexo_ley_4 import standardize_dependency

# SMLMV increases: 2000 10.00%, 2001 9.96%, 2002 8.04%
PROJECTED_2000 = 1_000_000 * 1.10
PROJECTED_2002 = PROJECTED_2000 * 1.0996 * 1.0804


@pytest.fixture
def barranquilla_pensioner():
    return Pensioner(
        id="P-004",
        documento="4444",
        empleado="MARIA GOMEZ (C.C. 4444)",
        dependencia1="BARRANQUILLA - PLANTA",
    )


@pytest.fixture
def ley4_records(barranquilla_pensioner, full_year_factory):
    """1999 and 2000 itemized, 2002 from a legacy snapshot, other years unknown."""
    return PensionerRecords(
        pensioner=barranquilla_pensioner,
        payments=full_year_factory(1999, 1_000_000) + full_year_factory(2000, 1_092_300),
        historical_records=[
            HistoricalPaymentRecord(ANO_RET=2002, VALOR_ACT="1.250.000,00")
        ],
    )


class TestStandardizeDependency:
    """Test cases for the eligible dependencies."""

    @pytest.mark.parametrize(
        "dependency, expected",
        [
            ("BARRANQUILLA - PLANTA", "ATLANTICO"),
            ("Atlantico", "ATLANTICO"),
            ("SANTA MARTA", "MAGDALENA"),
            ("riohacha", "GUAJIRA"),
            ("BOGOTA", None),
            (None, None),
        ],
    )
    def test_standardize(self, dependency, expected):
        assert standardize_dependency(dependency) == expected


class TestAnexoLey4:
    """Test cases for run_anexo_ley_4."""

    def test_registered(self):
        """Test that the variant is available by its URL name."""
        assert VARIANTS["anexo-ley-4"] is run_anexo_ley_4

    def test_only_paid_years_are_liquidated(
        self, ley4_records, reference_table, parameters
    ):
        """Test that years without a paid mesada are left out of the window."""
        result = run_anexo_ley_4(ley4_records, reference_table, parameters)

        assert result.available
        assert [row.year for row in result.before_sharing] == [1999, 2000, 2002]
        assert result.after_sharing == []
        assert result.mesada_pensional_inicial == 1_000_000

    def test_mesada_counts_and_differences(
        self, ley4_records, reference_table, parameters
    ):
        """Test the 13 mesadas of 2000 and the differences against the paid mesada."""
        result = run_anexo_ley_4(ley4_records, reference_table, parameters)
        row_1999, row_2000, row_2002 = result.before_sharing

        assert [row.mesada_count for row in result.before_sharing] == [14, 13, 14]
        assert row_1999.mesada_difference == 0.0
        assert row_2000.projected_mesada_by_smlmv == pytest.approx(PROJECTED_2000)
        assert row_2000.payable_mesada == 1_092_300
        assert row_2000.retroactive_subtotal == pytest.approx(7_700 * 13)
        assert row_2002.payable_mesada == pytest.approx(1_250_000)

        expected = 7_700 * 13 + (PROJECTED_2002 - 1_250_000) * 14
        assert result.total_general_retroactivo == pytest.approx(expected)

    def test_fixed_window(self, barranquilla_pensioner, full_year_factory, reference_table):
        """Test that the window is 1999-2007 whatever the cutoff year."""
        payments = (
            full_year_factory(1999, 1_000_000)
            + full_year_factory(2007, 1_400_000)
            + full_year_factory(2008, 1_450_000)
        )
        records = PensionerRecords(pensioner=barranquilla_pensioner, payments=payments)

        for cutoff_year in (2003, 2020):
            result = run_anexo_ley_4(
                records, reference_table, LiquidationParameters(cutoff_year=cutoff_year)
            )
            assert [row.year for row in result.before_sharing] == [1999, 2007]

    def test_ineligible_dependency(
        self, pensioner, full_year_factory, reference_table, parameters
    ):
        """Test that other dependencies get an unavailable result."""
        records = PensionerRecords(
            pensioner=pensioner, payments=full_year_factory(1999, 1_000_000)
        )
        result = run_anexo_ley_4(records, reference_table, parameters)

        assert not result.available
        assert result.rows == []
        assert "Planta" in result.warnings[0]

    def test_without_1999_mesada(
        self, barranquilla_pensioner, full_year_factory, reference_table, parameters
    ):
        """Test that the liquidation needs the 1999 mesada."""
        records = PensionerRecords(
            pensioner=barranquilla_pensioner, payments=full_year_factory(2001, 1_000_000)
        )
        result = run_anexo_ley_4(records, reference_table, parameters)

        assert not result.available
        assert result.total_general_retroactivo == 0.0
