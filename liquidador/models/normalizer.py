"""
Payment record normalizer.

Extracts the canonical mesada of a year from three sources, tried in order:

1. Itemized payments (monthly or biweekly cadence)
2. Legacy historical snapshots (locale formatted strings)
3. Causante (sharing) records effective in that year

Each source is a resolver returning the mesada or None; the first resolver
that yields a value wins. A result of 0 means "unknown", never a zero pension.
"""

import logging
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from .parameters import HistoricalValueField, LiquidationParameters, NumberLocale
from .parsing import parse_locale_decimal
from .records import HistoricalPaymentRecord, RawPaymentRecord, SharingRecord

logger = logging.getLogger(__name__)

# Months scanned first when looking for a complete biweekly month
BIWEEKLY_PRIMARY_MONTHS = 3


class MesadaResolver(Protocol):
    """A source able to produce the mesada of a year."""

    name: str

    def resolve(self, year: int) -> Optional[float]:
        """Return the mesada for the year, or None when this source has none."""
        ...


def payments_for_year(payments: Sequence[RawPaymentRecord], year: int) -> List[RawPaymentRecord]:
    """Payments recorded for a year in chronological order (unparseable last)."""
    in_year = [payment for payment in payments if payment.year == year]
    return sorted(in_year, key=lambda payment: payment.sort_key)


def group_by_month(payments: Sequence[RawPaymentRecord]) -> Dict[int, List[RawPaymentRecord]]:
    """Group payments with a readable period by start month, in month order."""
    grouped: Dict[int, List[RawPaymentRecord]] = {}
    for payment in payments:
        if payment.month is not None:
            grouped.setdefault(payment.month, []).append(payment)
    return dict(sorted(grouped.items()))


def is_biweekly(payments: Sequence[RawPaymentRecord]) -> bool:
    """Biweekly cadence: some month holds two or more payment events."""
    return any(len(group) >= 2 for group in group_by_month(payments).values())


def deduplicate_payments(payments: Sequence[RawPaymentRecord]) -> List[RawPaymentRecord]:
    """Drop repeated uploads of the same payment period (first one wins)."""
    seen = set()
    unique = []
    for payment in payments:
        key = payment.period_label.strip()
        if key in seen:
            continue
        seen.add(key)
        unique.append(payment)
    return unique


class ItemizedPaymentResolver:
    """Mesada from itemized payment slips."""

    name = "itemized"

    def __init__(self, payments: Sequence[RawPaymentRecord]):
        self.payments = list(payments)

    def resolve(self, year: int) -> Optional[float]:
        in_year = payments_for_year(self.payments, year)
        with_mesada = [p for p in in_year if p.has_mesada]
        if not with_mesada:
            return None

        # Cadence is detected on every payment event, mesada or not
        if not is_biweekly(in_year):
            return with_mesada[0].mesada_amount()

        return self._resolve_biweekly(year, in_year, with_mesada)

    def _resolve_biweekly(
        self,
        year: int,
        in_year: List[RawPaymentRecord],
        with_mesada: List[RawPaymentRecord],
    ) -> float:
        months = group_by_month(in_year)

        primary = [m for m in months if m <= BIWEEKLY_PRIMARY_MONTHS]
        remainder = [m for m in months if m > BIWEEKLY_PRIMARY_MONTHS]
        for month in primary + remainder:
            group = months[month]
            if len(group) < 2:
                continue
            # Slips without a mesada (bonus only, adjustments) add nothing
            halves = [p for p in group if p.has_mesada][:2]
            if not halves:
                continue
            if len(halves) == 1 and halves[0].period.is_half_month:
                continue
            return sum(p.mesada_amount() for p in halves)

        # Only half-month payments: estimate the full mesada
        logger.debug(f"No complete biweekly month in {year}, doubling a half payment")
        return with_mesada[0].mesada_amount() * 2


class HistoricalRecordResolver:
    """Mesada from legacy yearly snapshots."""

    name = "historical"

    def __init__(
        self,
        records: Sequence[HistoricalPaymentRecord],
        value_field: HistoricalValueField = "after",
        locale: NumberLocale = "es_CO",
    ):
        self.records = list(records)
        self.value_field = value_field
        self.locale = locale

    def resolve(self, year: int) -> Optional[float]:
        for record in self.records:
            if record.year != year:
                continue

            raw = record.value_after if self.value_field == "after" else record.value_before
            value = parse_locale_decimal(raw, self.locale)
            if value is None:
                if raw not in (None, ""):
                    logger.warning(f"Unparseable historical value {raw!r} for {year}")
                continue
            if value > 0:
                return value
        return None


class SharingRecordResolver:
    """Employer share of a causante record effective in the year."""

    name = "sharing"

    def __init__(self, records: Sequence[SharingRecord]):
        self.records = list(records)

    def resolve(self, year: int) -> Optional[float]:
        for record in self.records:
            if record.effective_from is None or record.effective_from.year != year:
                continue
            if record.employer_share_value > 0:
                return record.employer_share_value
        return None


class MesadaNormalizer:
    """First-success-wins combination of mesada resolvers."""

    def __init__(self, resolvers: Sequence[MesadaResolver]):
        self.resolvers = list(resolvers)

    def get_mesada_for_year(self, year: int) -> float:
        for resolver in self.resolvers:
            value = resolver.resolve(year)
            if value is not None and value > 0:
                return value

        logger.debug(f"No mesada source for {year}")
        return 0.0

    @classmethod
    def from_records(
        cls,
        payments: Sequence[RawPaymentRecord],
        historical_records: Sequence[HistoricalPaymentRecord],
        sharing_records: Sequence[SharingRecord],
        parameters: Optional[LiquidationParameters] = None,
    ) -> "MesadaNormalizer":
        parameters = parameters or LiquidationParameters()
        return cls(
            [
                ItemizedPaymentResolver(payments),
                HistoricalRecordResolver(
                    historical_records,
                    value_field=parameters.historical_value_field,
                    locale=parameters.historical_number_locale,
                ),
                SharingRecordResolver(sharing_records),
            ]
        )


def get_mesada_for_year(
    year: int,
    payments: Sequence[RawPaymentRecord],
    historical_records: Sequence[HistoricalPaymentRecord],
    sharing_records: Sequence[SharingRecord],
    parameters: Optional[LiquidationParameters] = None,
) -> float:
    """
    Canonical mesada of a year.

    Returns:
        The mesada, or 0 when no source knows it
    """
    normalizer = MesadaNormalizer.from_records(
        payments, historical_records, sharing_records, parameters
    )
    return normalizer.get_mesada_for_year(year)


def get_mesada_for_month(year: int, month: int, payments: Sequence[RawPaymentRecord]) -> float:
    """Mesada paid in a given month (both halves summed for biweekly payments)."""
    in_month = [
        p
        for p in payments_for_year(payments, year)
        if p.month == month and p.has_mesada
    ]
    return sum(p.mesada_amount() for p in in_month[:2])


def count_mesadas_by_kind(year: int, payments: Sequence[RawPaymentRecord]) -> Tuple[int, int]:
    """
    Ordinary and bonus mesadas paid in a year, from itemized payments.

    Biweekly halves of the same month count as one ordinary mesada.
    """
    ordinary_periods = set()
    bonus = 0
    for payment in payments_for_year(payments, year):
        if payment.has_mesada:
            ordinary_periods.add(payment.month or payment.period_label)
        bonus += payment.bonus_mesada_count()
    return len(ordinary_periods), bonus


def count_mesadas_in_year(
    year: int,
    payments: Sequence[RawPaymentRecord],
    historical_records: Sequence[HistoricalPaymentRecord] = (),
    include_bonus: bool = True,
) -> int:
    """
    Mesadas actually paid in a year: ordinary months plus bonus line items.

    Years known only from the legacy snapshots are assumed complete (14, or
    12 without bonus mesadas). Returns 0 when nothing is known.
    """
    if payments_for_year(payments, year):
        ordinary, bonus = count_mesadas_by_kind(year, payments)
        return ordinary + (bonus if include_bonus else 0)

    if any(record.year == year for record in historical_records):
        return 14 if include_bonus else 12
    return 0


def first_mesada_year(
    normalizer: MesadaNormalizer, candidate_years: Sequence[int]
) -> Optional[int]:
    """Earliest candidate year with a known mesada."""
    for year in sorted(candidate_years):
        if normalizer.get_mesada_for_year(year) > 0:
            return year
    return None


def find_payment_drop_month(year: int, payments: Sequence[RawPaymentRecord]) -> Optional[int]:
    """
    First month of the year whose mesada is lower than the previous month's.

    A drop marks the month the employer starts paying only its share of a
    shared pension. Returns None when the mesada never decreases.
    """
    months = group_by_month([p for p in payments_for_year(payments, year) if p.has_mesada])
    previous = 0.0
    for month in months:
        current = get_mesada_for_month(year, month, payments)
        if previous > 0 and 0 < current < previous:
            return month
        previous = current
    return None
