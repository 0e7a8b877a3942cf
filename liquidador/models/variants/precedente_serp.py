"""
Precedente SERP (Ley 4 de 1976) liquidation.

Rebuilds the mesada the employer should have paid and the unlawful damage
(daño antijurídico) of paying less. Each year the adjusted mesada grows 15%
while the previous total income is at most 5 SMLMV, and by IPC otherwise.
Once the ISS/Colpensiones old-age pension (pensión de vejez) starts, the
employer only owes the adjusted mesada minus that pension.

Decisions on the 5 SMLMV ceiling: the 15% increase is capped so it never
takes the adjusted mesada above 5 SMLMV, but the mesada never grows less
than IPC. The cap applies to the full adjusted mesada, before subtracting the
pensión de vejez.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..normalizer import (
    MesadaNormalizer,
    count_mesadas_by_kind,
    find_payment_drop_month,
    first_mesada_year,
    get_mesada_for_month,
    payments_for_year,
)
from ..parameters import LiquidationParameters
from ..records import PensionerRecords, SharingRecord
from ..reference_tables import ReferenceTable
from ..results import PrecedenteLiquidation
from ..rows import PrecedenteRow
from ..sharing import BONUS_MONTHS, period_end
from .base import build_normalizer, first_payment_date, liquidation_years

logger = logging.getLogger(__name__)

VARIANT_NAME = "precedente-serp"


@dataclass
class CalculationPeriod:
    """A year, or part of a year split at a payment drop, with its mesada."""

    year: int
    start_month: int
    end_month: int
    mesada: float


def build_calculation_periods(
    records: PensionerRecords,
    normalizer: MesadaNormalizer,
    start_year: int,
    cutoff_year: int,
    index_table: ReferenceTable,
) -> List[CalculationPeriod]:
    """Periods with a known mesada; years where the mesada drops are split in two."""
    periods = []
    for year in liquidation_years(index_table, cutoff_year, start_year):
        split_month = find_payment_drop_month(year, records.payments)
        if split_month is None:
            mesada = normalizer.get_mesada_for_year(year)
            if mesada > 0:
                periods.append(CalculationPeriod(year, 1, 12, mesada))
            continue

        first_mesada = get_mesada_for_month(year, 1, records.payments)
        if first_mesada <= 0:
            first_mesada = normalizer.get_mesada_for_year(year)
        if first_mesada > 0:
            periods.append(CalculationPeriod(year, 1, split_month - 1, first_mesada))

        second_mesada = get_mesada_for_month(year, split_month, records.payments)
        if second_mesada > 0:
            periods.append(CalculationPeriod(year, split_month, 12, second_mesada))

    return periods


def ley4_applies(smlmv_count: float, parameters: LiquidationParameters) -> bool:
    """The 15% increase applies while the previous income is at most 5 SMLMV."""
    return smlmv_count <= parameters.ley4_threshold_smlmv


def indexation_factor(year: int, cutoff_year: int, index_table: ReferenceTable) -> float:
    """IPC accumulated from the end of a year to the cutoff year."""
    rates = [
        index_table.ipc_growth_pct(y) / 100
        for y in range(year + 1, cutoff_year + 1)
        if index_table.covers(y)
    ]
    if not rates:
        return 1.0
    return float(np.prod(1 + np.array(rates)))


def _old_age_record(
    records: List[SharingRecord], period: CalculationPeriod
) -> Optional[SharingRecord]:
    end = period_end(period.year, period.end_month)
    effective = [
        record
        for record in records
        if record.effective_from is not None
        and record.effective_from <= end
        and record.iss_share_value > 0
    ]
    return max(effective, key=lambda record: record.effective_from) if effective else None


def run_precedente_serp(
    records: PensionerRecords,
    index_table: ReferenceTable,
    parameters: LiquidationParameters,
) -> PrecedenteLiquidation:
    """Run the Precedente SERP ledger for a pensioner."""
    pensioner_id = records.pensioner.id
    cutoff_year = parameters.resolve_cutoff_year()
    normalizer = build_normalizer(records, parameters)

    start_year = first_mesada_year(normalizer, liquidation_years(index_table, cutoff_year))
    if start_year is None:
        logger.warning(f"No mesada found for pensioner {pensioner_id}")
        return PrecedenteLiquidation(
            variant=VARIANT_NAME,
            pensioner_id=pensioner_id,
            available=False,
            cutoff_year=cutoff_year,
            warnings=["No se encontró ninguna mesada para el pensionado"],
        )

    periods = build_calculation_periods(
        records, normalizer, start_year, cutoff_year, index_table
    )
    if not periods:
        return PrecedenteLiquidation(
            variant=VARIANT_NAME,
            pensioner_id=pensioner_id,
            available=False,
            cutoff_year=cutoff_year,
            warnings=["No se encontró ninguna mesada para el pensionado"],
        )

    include_bonus = parameters.include_bonus_mesadas
    initial_mesada = periods[0].mesada

    previous_adjusted = initial_mesada
    previous_income = initial_mesada
    previous_old_age = 0.0
    previous_year: Optional[int] = None
    rows: List[PrecedenteRow] = []

    for index, period in enumerate(periods):
        year = period.year
        new_year = year != previous_year
        smlmv = index_table.smlmv(year)
        ceiling = smlmv * parameters.ley4_threshold_smlmv
        ipc_pct = index_table.ipc_growth_pct(year)
        smlmv_count = previous_income / smlmv if smlmv > 0 else 0.0

        # The yearly adjustment applies once, on the first period of each year
        pct = 0.0
        adjusted = previous_adjusted
        if index == 0:
            adjusted = initial_mesada
        elif new_year and ley4_applies(smlmv_count, parameters):
            pct = parameters.ley4_adjustment_pct
            by_law = min(previous_adjusted * (1 + pct / 100), ceiling)
            adjusted = max(by_law, previous_adjusted * (1 + ipc_pct / 100))
        elif new_year:
            pct = ipc_pct
            adjusted = previous_adjusted * (1 + pct / 100)

        old_age = 0.0
        old_age_projected = False
        record = _old_age_record(records.sharing_records, period)
        if record is not None and record.effective_from.year == year:
            old_age = record.iss_share_value
        elif previous_old_age > 0:
            old_age = previous_old_age * (1 + ipc_pct / 100) if new_year else previous_old_age
            old_age_projected = True
        elif record is not None:
            old_age = record.iss_share_value

        employer_charge = adjusted - old_age
        paid = period.mesada
        unpaid = max(0.0, employer_charge - paid)

        full_first_year = (
            year == start_year and period.start_month == 1 and period.end_month == 12
        )
        if full_first_year and payments_for_year(records.payments, year):
            # The first pension year may be partial: count what was paid
            ordinary, bonus = count_mesadas_by_kind(year, records.payments)
        else:
            ordinary = period.end_month - period.start_month + 1
            bonus = sum(
                1 for month in BONUS_MONTHS if period.start_month <= month <= period.end_month
            )
        if not include_bonus:
            bonus = 0
        mesadas = ordinary + bonus

        yearly = unpaid * mesadas
        factor = indexation_factor(year, cutoff_year, index_table)
        indexed = yearly * factor
        ordinary_differences = unpaid * ordinary

        rows.append(
            PrecedenteRow(
                year=year,
                start_month=period.start_month,
                end_month=period.end_month,
                mesada=paid,
                tope_5_smlmv=ceiling,
                numero_smlmv=smlmv_count,
                porcentaje_ajuste=pct,
                mesada_reajustada=adjusted,
                pension_vejez=old_age,
                pension_vejez_proyectada=old_age_projected,
                cargo_empresa=employer_charge,
                pagado_empresa=paid,
                diferencias_insolutas=unpaid,
                mesadas_ordinarias=ordinary,
                mesadas_adicionales=bonus,
                numero_mesadas=mesadas,
                dano_antijuridico=yearly,
                diferencias_anuales=yearly,
                indexacion=indexed - yearly,
                diferencias_indexadas=indexed,
                diferencias_ordinarias=ordinary_differences,
                descuento_salud=ordinary_differences * parameters.health_discount_rate,
            )
        )

        previous_adjusted = adjusted
        previous_old_age = old_age if old_age > 0 else previous_old_age
        previous_income = paid + old_age
        previous_year = year

    split_index = next(
        (i for i, row in enumerate(rows) if row.pension_vejez > 0), len(rows)
    )

    total_yearly = float(np.sum([row.diferencias_anuales for row in rows]))
    total_indexed = float(np.sum([row.diferencias_indexadas for row in rows]))
    total_health = float(np.sum([row.descuento_salud for row in rows]))

    logger.info(
        f"Precedente SERP for {pensioner_id}: {len(rows)} periods, "
        f"total {total_yearly:.2f}"
    )
    return PrecedenteLiquidation(
        variant=VARIANT_NAME,
        pensioner_id=pensioner_id,
        before_sharing=rows[:split_index],
        after_sharing=rows[split_index:],
        cutoff_year=cutoff_year,
        total_general_retroactivo=total_yearly,
        total_diferencias_anuales=total_yearly,
        total_diferencias_indexadas=total_indexed,
        total_descuento_salud=total_health,
        total_neto=total_indexed - total_health,
        mesada_pensional_inicial=initial_mesada,
        fecha_primera_mesada=first_payment_date(records.payments, start_year),
    )
