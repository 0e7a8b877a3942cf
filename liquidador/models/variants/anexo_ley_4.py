"""
Anexo Ley 4.

Reajuste of the mesada for pensioners of the Atlántico, Magdalena and
Guajira dependencies over the fixed 1999-2007 window. The 1999 mesada is
projected by the SMLMV increase and compared against the mesada actually
paid each year; only years with a known paid mesada are liquidated. The year
2000 was paid with 13 mesadas, every other year with 14.
"""

import logging
from typing import Dict, Optional

from ..parameters import LiquidationParameters
from ..projection import GrowthSelector
from ..records import PensionerRecords
from ..reference_tables import ReferenceTable
from ..results import RetroactiveLiquidation
from ..retroactive import (
    build_year_rows,
    compute_differences,
    total_retroactive,
    with_difference_basis,
)
from .base import build_normalizer, first_payment_date, liquidation_years

logger = logging.getLogger(__name__)

VARIANT_NAME = "anexo-ley-4"

START_YEAR = 1999
END_YEAR = 2007
REDUCED_MESADA_YEARS = {2000: 13}

# Standardized dependency -> names that identify it
ELIGIBLE_DEPENDENCIES = {
    "ATLANTICO": ("ATLANTICO", "BARRANQUILLA"),
    "MAGDALENA": ("MAGDALENA", "SANTA MARTA"),
    "GUAJIRA": ("GUAJIRA", "RIOHACHA"),
}


def standardize_dependency(dependency: Optional[str]) -> Optional[str]:
    """Map a dependencia1 value to ATLANTICO, MAGDALENA or GUAJIRA, if it is one."""
    if not dependency:
        return None
    upper = dependency.upper()
    for standard, names in ELIGIBLE_DEPENDENCIES.items():
        if any(name in upper for name in names):
            return standard
    return None


def run_anexo_ley_4(
    records: PensionerRecords,
    index_table: ReferenceTable,
    parameters: LiquidationParameters,
) -> RetroactiveLiquidation:
    """
    Run the Anexo Ley 4 liquidation.

    Pensioners outside the eligible dependencies, or without a 1999 mesada,
    get an unavailable result with a warning.
    """
    pensioner = records.pensioner
    dependency = standardize_dependency(pensioner.dependency)
    if dependency is None:
        logger.info(
            f"Anexo Ley 4 not applicable to {pensioner.id} ({pensioner.dependency})"
        )
        return RetroactiveLiquidation(
            variant=VARIANT_NAME,
            pensioner_id=pensioner.id,
            available=False,
            warnings=[
                "El cálculo de Anexo Ley 4 solo está disponible para pensionados de "
                "ATLANTICO, MAGDALENA o GUAJIRA "
                f"(dependencia: {pensioner.dependency or 'No definida'})"
            ],
        )

    normalizer = build_normalizer(records, parameters)
    base_mesada = normalizer.get_mesada_for_year(START_YEAR)
    if base_mesada <= 0:
        logger.warning(f"No {START_YEAR} mesada for pensioner {pensioner.id}")
        return RetroactiveLiquidation(
            variant=VARIANT_NAME,
            pensioner_id=pensioner.id,
            available=False,
            warnings=[f"No se encontró la mesada de {START_YEAR}"],
        )

    years = liquidation_years(index_table, END_YEAR, START_YEAR)
    paid_values = {year: normalizer.get_mesada_for_year(year) for year in years}
    mesada_counts: Dict[int, int] = {
        year: REDUCED_MESADA_YEARS.get(year, 14) for year in years
    }

    rows = build_year_rows(
        base_mesada,
        START_YEAR,
        END_YEAR,
        index_table,
        GrowthSelector.SMLMV_ONLY,
        parameters.mesadas_per_year,
        paid_values,
        mesada_counts,
    )
    paid_rows = [row for row in with_difference_basis(rows, "paid") if row.available]
    computed = compute_differences(paid_rows)

    logger.info(
        f"Anexo Ley 4 for {pensioner.id} ({dependency}): {len(computed)} paid years"
    )
    return RetroactiveLiquidation(
        variant=VARIANT_NAME,
        pensioner_id=pensioner.id,
        before_sharing=computed,
        total_general_retroactivo=total_retroactive(computed),
        mesada_pensional_inicial=base_mesada,
        fecha_primera_mesada=first_payment_date(records.payments, START_YEAR),
    )
