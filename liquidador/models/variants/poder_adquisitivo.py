"""
Poder adquisitivo (purchasing power) of the pension unit.

The pension unit (unidad pensional) of a year is what the company pays plus
the ISS/Colpensiones old-age pension. Expressed in minimum wages it shows how
much purchasing power the pensioner lost over time.

A causante record effective in year Y sets the old-age pension from Y + 1 on
(the sharing year itself is partial). Years without a record carry the
previous value forward with the IPC adjustment and are flagged as projected.
"""

import logging
from typing import List, Optional

from ..normalizer import MesadaNormalizer, first_mesada_year, get_mesada_for_month
from ..parameters import LiquidationParameters
from ..projection import number_of_smlmv
from ..records import PensionerRecords, SharingRecord
from ..reference_tables import ReferenceTable
from ..results import PoderAdquisitivoResult
from ..rows import PoderAdquisitivoRow
from ..sharing import initial_sharing_record
from .base import build_normalizer, first_payment_date, liquidation_years

logger = logging.getLogger(__name__)

VARIANT_NAME = "poder-adquisitivo"


def _record_from_previous_year(
    records: List[SharingRecord], year: int
) -> Optional[SharingRecord]:
    candidates = [
        record
        for record in records
        if record.effective_from is not None
        and record.effective_from.year + 1 == year
        and record.iss_share_value > 0
    ]
    return max(candidates, key=lambda record: record.effective_from) if candidates else None


def mesada_before_sharing(
    records: PensionerRecords, normalizer: MesadaNormalizer, sharing: SharingRecord
) -> float:
    """Mesada paid the month before the sharing started."""
    sharing_date = sharing.effective_from
    if sharing_date.month > 1:
        value = get_mesada_for_month(
            sharing_date.year, sharing_date.month - 1, records.payments
        )
        if value > 0:
            return value
    return normalizer.get_mesada_for_year(sharing_date.year - 1)


def run_poder_adquisitivo(
    records: PensionerRecords,
    index_table: ReferenceTable,
    parameters: LiquidationParameters,
) -> PoderAdquisitivoResult:
    """Compute the purchasing power series of a pensioner."""
    pensioner_id = records.pensioner.id
    cutoff_year = parameters.resolve_cutoff_year()
    normalizer = build_normalizer(records, parameters)

    start_year = first_mesada_year(normalizer, liquidation_years(index_table, cutoff_year))
    if start_year is None:
        logger.warning(f"No mesada found for pensioner {pensioner_id}")
        return PoderAdquisitivoResult(
            variant=VARIANT_NAME,
            pensioner_id=pensioner_id,
            available=False,
            warnings=["No se encontró ninguna mesada para el pensionado"],
        )

    rows: List[PoderAdquisitivoRow] = []
    previous_old_age = 0.0
    for year in liquidation_years(index_table, cutoff_year, start_year):
        paid = normalizer.get_mesada_for_year(year)
        ipc_pct = index_table.ipc_growth_pct(year)

        old_age = 0.0
        projected = False
        record = _record_from_previous_year(records.sharing_records, year)
        if record is not None:
            old_age = record.iss_share_value
        elif previous_old_age > 0:
            old_age = previous_old_age * (1 + ipc_pct / 100)
            projected = True

        unidad = paid + old_age
        rows.append(
            PoderAdquisitivoRow(
                year=year,
                smlmv=index_table.smlmv(year),
                paid_by_company=paid,
                pension_vejez=old_age,
                pension_vejez_projected=projected,
                unidad_pensional=unidad,
                smlmv_count=round(number_of_smlmv(unidad, year, index_table), 2),
                ipc_growth_pct=ipc_pct,
            )
        )
        previous_old_age = old_age

    known = [row for row in rows if row.unidad_pensional > 0]
    first_row, last_row = known[0], known[-1]

    summary = {}
    sharing = initial_sharing_record(records.sharing_records)
    if sharing is not None:
        summary = {
            "sharing_date": sharing.effective_from,
            "mesada_before_sharing": mesada_before_sharing(records, normalizer, sharing),
            "iss_share_value": sharing.iss_share_value,
            "employer_share_value": sharing.employer_share_value,
            "employer_share_pct": sharing.employer_share_pct * 100,
            "iss_share_pct": (1 - sharing.employer_share_pct) * 100
            if sharing.total_value > 0
            else 0.0,
        }

    logger.info(
        f"Poder adquisitivo for {pensioner_id}: {first_row.smlmv_count} -> "
        f"{last_row.smlmv_count} SMLMV"
    )
    return PoderAdquisitivoResult(
        variant=VARIANT_NAME,
        pensioner_id=pensioner_id,
        rows=rows,
        first_mesada=first_row.unidad_pensional,
        last_mesada=last_row.unidad_pensional,
        first_smlmv_count=first_row.smlmv_count,
        last_smlmv_count=last_row.smlmv_count,
        smlmv_loss=round(first_row.smlmv_count - last_row.smlmv_count, 2),
        mesada_pensional_inicial=first_row.paid_by_company,
        fecha_primera_mesada=first_payment_date(records.payments, start_year),
        **summary,
    )
