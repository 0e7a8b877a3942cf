"""Helpers shared by the liquidation variants."""

import logging
from datetime import date
from typing import List, Optional, Sequence

from ..normalizer import MesadaNormalizer, payments_for_year
from ..parameters import LiquidationParameters
from ..records import PensionerRecords, RawPaymentRecord
from ..reference_tables import ReferenceTable

logger = logging.getLogger(__name__)


def build_normalizer(
    records: PensionerRecords, parameters: LiquidationParameters
) -> MesadaNormalizer:
    return MesadaNormalizer.from_records(
        records.payments, records.historical_records, records.sharing_records, parameters
    )


def liquidation_years(
    index_table: ReferenceTable, cutoff_year: int, start_year: Optional[int] = None
) -> List[int]:
    """Covered years from start_year (or the first reference year) to the cutoff."""
    start = start_year if start_year is not None else index_table.first_year
    return [year for year in index_table.years() if start <= year <= cutoff_year]


def first_payment_date(payments: Sequence[RawPaymentRecord], year: int) -> Optional[date]:
    """Start date of the earliest readable mesada payment of a year."""
    for payment in payments_for_year(payments, year):
        if payment.has_mesada and payment.period is not None:
            return payment.period.start_date
    return None


def unavailable_years(years: Sequence[int], normalizer: MesadaNormalizer) -> List[int]:
    """Years whose paid mesada cannot be resolved."""
    missing = [year for year in years if normalizer.get_mesada_for_year(year) <= 0]
    if missing:
        logger.info(f"Mesada unavailable for years {missing}")
    return missing
