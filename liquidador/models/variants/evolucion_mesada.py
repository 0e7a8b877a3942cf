"""
Evolución de la Mesada.

Compares the mesada projected by the SMLMV increase with the mesada indexed
by IPC alone, from the first year with a known mesada to the cutoff year.
When a causante record starts a compartición, the timeline is split and the
post-sharing years are valued against the employer/ISS split.
"""

import logging
from typing import Optional

from ..normalizer import count_mesadas_in_year, first_mesada_year
from ..parameters import LiquidationParameters, SplitStrategyName
from ..projection import GrowthSelector
from ..records import PensionerRecords
from ..reference_tables import ReferenceTable
from ..results import RetroactiveLiquidation
from ..retroactive import (
    DifferenceBasis,
    build_year_rows,
    compute_differences,
    total_retroactive,
    with_difference_basis,
)
from ..sharing import (
    apply_sharing_values,
    create_split_strategy,
    initial_sharing_record,
    split_by_sharing,
)
from .base import build_normalizer, first_payment_date, liquidation_years, unavailable_years

logger = logging.getLogger(__name__)

VARIANT_NAME = "evolucion-mesada"


def run_evolucion_mesada(
    records: PensionerRecords,
    index_table: ReferenceTable,
    parameters: LiquidationParameters,
    difference_basis: DifferenceBasis = "ipc_projection",
    split_strategy: Optional[SplitStrategyName] = None,
) -> RetroactiveLiquidation:
    """
    Run the Evolución de la Mesada liquidation.

    Args:
        records: Pensioner documents
        index_table: Reference table
        parameters: Liquidation parameters
        difference_basis: Compare the SMLMV projection with the IPC projection
            or with the mesada actually paid
        split_strategy: Override the configured sharing split strategy

    Returns:
        Rows before and after the sharing date with the retroactive totals

    Raises:
        SharingSplitError: If the fixed strategy is used with another date
    """
    pensioner_id = records.pensioner.id
    cutoff_year = parameters.resolve_cutoff_year()
    normalizer = build_normalizer(records, parameters)

    start_year = first_mesada_year(normalizer, liquidation_years(index_table, cutoff_year))
    if start_year is None:
        logger.warning(f"No mesada found for pensioner {pensioner_id}")
        return RetroactiveLiquidation(
            variant=VARIANT_NAME,
            pensioner_id=pensioner_id,
            available=False,
            warnings=["No se encontró ninguna mesada para el pensionado"],
        )

    years = liquidation_years(index_table, cutoff_year, start_year)
    base_mesada = normalizer.get_mesada_for_year(start_year)
    paid_values = {year: normalizer.get_mesada_for_year(year) for year in years}
    mesada_counts = {
        year: count_mesadas_in_year(
            year,
            records.payments,
            records.historical_records,
            parameters.include_bonus_mesadas,
        )
        for year in years
    }

    rows = build_year_rows(
        base_mesada,
        start_year,
        cutoff_year,
        index_table,
        GrowthSelector.SMLMV_ONLY,
        parameters.mesadas_per_year,
        paid_values,
        mesada_counts,
    )

    initial_record = initial_sharing_record(records.sharing_records)
    sharing_date = initial_record.effective_from if initial_record else None
    if sharing_date is not None:
        split = split_by_sharing(
            rows,
            sharing_date,
            create_split_strategy(parameters, split_strategy),
            parameters.include_bonus_mesadas,
        )
        before = split.before_sharing
        after = apply_sharing_values(
            split.after_sharing, records.sharing_records, initial_record
        )
    else:
        before, after = rows, []

    before = with_difference_basis(before, difference_basis)
    computed = compute_differences([*before, *after])
    before, after = computed[: len(before)], computed[len(before):]

    warnings = [
        f"Mesada no disponible para {year}"
        for year in unavailable_years(years, normalizer)
    ]

    logger.info(
        f"Evolución de la mesada for {pensioner_id}: {start_year}-{cutoff_year}, "
        f"{len(computed)} rows"
    )
    return RetroactiveLiquidation(
        variant=VARIANT_NAME,
        pensioner_id=pensioner_id,
        before_sharing=before,
        after_sharing=after,
        sharing_date=sharing_date,
        employer_share_pct=initial_record.employer_share_pct if initial_record else None,
        total_general_retroactivo=total_retroactive(computed),
        mesada_pensional_inicial=base_mesada,
        fecha_primera_mesada=first_payment_date(records.payments, start_year),
        warnings=warnings,
    )
