"""Tests for the Precedente SERP (Ley 4 de 1976) ledger."""

from datetime import date

import pytest

from liquidador.models.parameters import LiquidationParameters
from liquidador.models.records import PensionerRecords, SharingRecord
from liquidador.models.variants.precedente_serp import (
    indexation_factor,
    ley4_applies,
    run_precedente_serp,
)


@pytest.fixture
def serp_parameters():
    return LiquidationParameters(cutoff_year=2012)


def flat_payments(full_year_factory, mesada, years=(2010, 2011, 2012)):
    payments = []
    for year in years:
        payments += full_year_factory(year, mesada)
    return payments


class TestLey4Adjustment:
    """Test cases for the yearly adjustment."""

    def test_fifteen_percent_below_five_smlmv(
        self, pensioner, full_year_factory, flat_table, serp_parameters
    ):
        """Test the ledger of a mesada the employer never adjusted."""
        records = PensionerRecords(
            pensioner=pensioner, payments=flat_payments(full_year_factory, 1_000_000)
        )
        result = run_precedente_serp(records, flat_table, serp_parameters)
        first, second, third = result.before_sharing

        assert result.after_sharing == []
        assert first.porcentaje_ajuste == 0.0
        assert first.mesada_reajustada == 1_000_000
        assert first.diferencias_insolutas == 0.0
        assert first.numero_mesadas == 14

        assert second.numero_smlmv == pytest.approx(1_000_000 / 1_100_000)
        assert second.porcentaje_ajuste == 15.0
        assert second.mesada_reajustada == pytest.approx(1_150_000)
        assert second.diferencias_insolutas == pytest.approx(150_000)
        assert second.diferencias_anuales == pytest.approx(2_100_000)
        assert second.indexacion == pytest.approx(105_000)
        assert second.diferencias_indexadas == pytest.approx(2_205_000)
        assert second.diferencias_ordinarias == pytest.approx(1_800_000)
        assert second.descuento_salud == pytest.approx(216_000)

        assert third.mesada_reajustada == pytest.approx(1_322_500)
        assert third.diferencias_anuales == pytest.approx(4_515_000)
        assert third.indexacion == pytest.approx(0.0)

    def test_totals(self, pensioner, full_year_factory, flat_table, serp_parameters):
        """Test the ledger totals."""
        records = PensionerRecords(
            pensioner=pensioner, payments=flat_payments(full_year_factory, 1_000_000)
        )
        result = run_precedente_serp(records, flat_table, serp_parameters)

        assert result.cutoff_year == 2012
        assert result.total_diferencias_anuales == pytest.approx(6_615_000)
        assert result.total_general_retroactivo == pytest.approx(6_615_000)
        assert result.total_diferencias_indexadas == pytest.approx(6_720_000)
        assert result.total_descuento_salud == pytest.approx(680_400)
        assert result.total_neto == pytest.approx(6_039_600)
        assert result.mesada_pensional_inicial == 1_000_000
        assert result.fecha_primera_mesada == date(2010, 1, 1)

    def test_ipc_above_five_smlmv(
        self, pensioner, full_year_factory, flat_table, serp_parameters
    ):
        """Test that incomes above 5 SMLMV only grow by IPC."""
        records = PensionerRecords(
            pensioner=pensioner, payments=flat_payments(full_year_factory, 6_000_000)
        )
        second = run_precedente_serp(records, flat_table, serp_parameters).before_sharing[1]

        assert second.porcentaje_ajuste == 5.0
        assert second.mesada_reajustada == pytest.approx(6_300_000)
        assert second.diferencias_insolutas == pytest.approx(300_000)

    def test_ceiling_caps_the_adjustment(
        self, pensioner, full_year_factory, flat_table, serp_parameters
    ):
        """Test that the 15% increase never goes above 5 SMLMV."""
        records = PensionerRecords(
            pensioner=pensioner, payments=flat_payments(full_year_factory, 4_800_000)
        )
        second = run_precedente_serp(records, flat_table, serp_parameters).before_sharing[1]

        assert second.tope_5_smlmv == pytest.approx(5_500_000)
        assert second.mesada_reajustada == pytest.approx(5_500_000)

    def test_without_bonus_mesadas(self, pensioner, full_year_factory, flat_table):
        """Test that bonus mesadas can be excluded."""
        records = PensionerRecords(
            pensioner=pensioner, payments=flat_payments(full_year_factory, 1_000_000)
        )
        parameters = LiquidationParameters(cutoff_year=2012, include_bonus_mesadas=False)
        rows = run_precedente_serp(records, flat_table, parameters).before_sharing

        assert [row.numero_mesadas for row in rows] == [12, 12, 12]
        assert all(row.mesadas_adicionales == 0 for row in rows)


class TestPensionVejez:
    """Test cases for the ISS old-age pension."""

    @pytest.fixture
    def records(self, pensioner, full_year_factory, payment_factory):
        payments = full_year_factory(2010, 1_000_000)
        payments += [
            payment_factory(2011, month, 1_000_000 if month < 7 else 700_000)
            for month in range(1, 13)
        ]
        payments += [payment_factory(2012, month, 700_000) for month in range(1, 13)]
        sharing = SharingRecord(
            fecha_desde=date(2011, 7, 1),
            tipo_aum="ISS",
            valor_empresa=700_000,
            valor_iss=400_000,
        )
        return PensionerRecords(
            pensioner=pensioner, payments=payments, sharing_records=[sharing]
        )

    def test_split_at_payment_drop(self, records, flat_table, serp_parameters):
        """Test that the year the employer starts paying less is split."""
        result = run_precedente_serp(records, flat_table, serp_parameters)
        periods = [(r.year, r.start_month, r.end_month) for r in result.rows]

        assert periods == [(2010, 1, 12), (2011, 1, 6), (2011, 7, 12), (2012, 1, 12)]
        assert len(result.before_sharing) == 2
        assert len(result.after_sharing) == 2

    def test_old_age_pension_is_subtracted(self, records, flat_table, serp_parameters):
        """Test the employer charge once the old-age pension starts."""
        result = run_precedente_serp(records, flat_table, serp_parameters)
        first_half = result.before_sharing[1]
        second_half, row_2012 = result.after_sharing

        assert first_half.mesada_reajustada == pytest.approx(1_150_000)
        assert first_half.numero_mesadas == 7

        assert second_half.porcentaje_ajuste == 0.0
        assert second_half.mesada_reajustada == pytest.approx(1_150_000)
        assert second_half.pension_vejez == 400_000
        assert not second_half.pension_vejez_proyectada
        assert second_half.cargo_empresa == pytest.approx(750_000)
        assert second_half.diferencias_insolutas == pytest.approx(50_000)

        assert row_2012.pension_vejez == pytest.approx(420_000)
        assert row_2012.pension_vejez_proyectada
        assert row_2012.mesada_reajustada == pytest.approx(1_322_500)
        assert row_2012.diferencias_insolutas == pytest.approx(202_500)


class TestHelpers:
    """Test cases for the ledger helpers."""

    def test_ley4_applies(self):
        parameters = LiquidationParameters()
        assert ley4_applies(5.0, parameters)
        assert not ley4_applies(5.01, parameters)

    def test_indexation_factor(self, flat_table):
        """Test IPC accumulated after the year up to the cutoff."""
        assert indexation_factor(2010, 2012, flat_table) == pytest.approx(1.05 ** 2)
        assert indexation_factor(2012, 2012, flat_table) == 1.0

    def test_no_mesada(self, pensioner, flat_table, serp_parameters):
        """Test a pensioner without data."""
        result = run_precedente_serp(
            PensionerRecords(pensioner=pensioner), flat_table, serp_parameters
        )
        assert not result.available
        assert result.rows == []
