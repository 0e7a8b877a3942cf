"""
Certificado de mesadas.

Lists, for every year from the configured start year to the cutoff, the
mesada of the first and last payment of the year and the change of the last
mesada against the previous year. No retroactive math is involved.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..normalizer import HistoricalRecordResolver, get_mesada_for_month
from ..parameters import LiquidationParameters
from ..records import PensionerRecords, RawPaymentRecord
from ..reference_tables import ReferenceTable
from ..results import CertificadoResult
from ..rows import CertificadoRow
from ..sharing import initial_sharing_record, recognition_record

logger = logging.getLogger(__name__)

VARIANT_NAME = "certificado"


def _dated_mesada_payments(
    payments: Sequence[RawPaymentRecord], year: int
) -> List[RawPaymentRecord]:
    in_year = [
        payment
        for payment in payments
        if payment.period is not None and payment.period.year == year and payment.has_mesada
    ]
    return sorted(in_year, key=lambda payment: payment.sort_key)


def first_and_last_mesada(
    payments: Sequence[RawPaymentRecord], year: int
) -> Optional[Tuple[RawPaymentRecord, float, RawPaymentRecord, float]]:
    """First and last mesada payments of a year with their (monthly) amounts."""
    dated = _dated_mesada_payments(payments, year)
    if not dated:
        return None

    first, last = dated[0], dated[-1]
    first_mesada = get_mesada_for_month(year, first.period.month, dated)
    last_mesada = get_mesada_for_month(year, last.period.month, dated)
    return first, first_mesada, last, last_mesada


def run_certificado(
    records: PensionerRecords,
    index_table: ReferenceTable,
    parameters: LiquidationParameters,
) -> CertificadoResult:
    """Build the mesada certificate of a pensioner."""
    pensioner_id = records.pensioner.id
    cutoff_year = parameters.resolve_cutoff_year()
    historical = HistoricalRecordResolver(
        records.historical_records,
        value_field=parameters.historical_value_field,
        locale=parameters.historical_number_locale,
    )

    rows: List[CertificadoRow] = []
    previous_last = 0.0
    for year in range(parameters.certificado_start_year, cutoff_year + 1):
        found = first_and_last_mesada(records.payments, year)
        if found is not None:
            first, first_mesada, last, last_mesada = found
            row = CertificadoRow(
                year=year,
                first_payment_date=first.period.start_date,
                first_mesada=first_mesada,
                last_payment_date=last.period.start_date,
                last_mesada=last_mesada,
                source="itemized",
            )
        else:
            value = historical.resolve(year)
            row = CertificadoRow(
                year=year,
                first_mesada=value or 0.0,
                last_mesada=value or 0.0,
                source="historical" if value else None,
            )

        if previous_last > 0 and row.last_mesada > 0:
            variation = row.last_mesada - previous_last
            row = row.model_copy(
                update={
                    "variation_value": variation,
                    "variation_pct": variation / previous_last * 100,
                }
            )

        rows.append(row)
        previous_last = row.last_mesada

    recognition = recognition_record(records.sharing_records)
    sharing = initial_sharing_record(records.sharing_records)
    available_rows = [row for row in rows if row.available]
    first_row = available_rows[0] if available_rows else None

    logger.info(f"Certificado for {pensioner_id}: {len(available_rows)} years with data")
    return CertificadoResult(
        variant=VARIANT_NAME,
        pensioner_id=pensioner_id,
        available=bool(available_rows),
        rows=rows,
        recognition_date=recognition.effective_from if recognition else None,
        sharing_date=sharing.effective_from if sharing and sharing.is_iss else None,
        mesada_pensional_inicial=first_row.first_mesada if first_row else 0.0,
        fecha_primera_mesada=first_row.first_payment_date if first_row else None,
    )
