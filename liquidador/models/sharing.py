"""
Sharing-period splitter.

When the pension starts being shared with ISS/Colpensiones (compartición),
the liquidation timeline is split in a pre-sharing and a post-sharing segment.
The sharing year itself is divided by a split strategy:

- ``ProratedMesadaSplit`` (default): works for any sharing date. Months before
  the sharing month go before; the sharing month and later go after. Each
  part counts its ordinary months plus the June/December bonus mesadas that
  fall inside it.
- ``FixedMesadaSplit``: the FONECA rule. Only valid for one configured date
  (13 June 2014) and carries fixed mesada counts (11 before, 3 after).

Post-sharing rows are then valued against the employer/ISS split of the
causante record for that year, or a proportional split of the IPC projection
using the initial record's percentages when the year has no record.
"""

import calendar
import logging
from datetime import date
from typing import List, Optional, Protocol, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .errors import SharingSplitError
from .parameters import LiquidationParameters
from .records import SharingRecord
from .rows import YearRow

logger = logging.getLogger(__name__)

BONUS_MONTHS = (6, 12)


class SplitResult(BaseModel):
    """Rows divided around the sharing date."""

    model_config = ConfigDict(frozen=True)

    before_sharing: List[YearRow] = Field(default_factory=list)
    after_sharing: List[YearRow] = Field(default_factory=list)
    sharing_date: Optional[date] = Field(default=None)

    @property
    def rows(self) -> List[YearRow]:
        return [*self.before_sharing, *self.after_sharing]


def mesadas_in_months(start_month: int, end_month: int, include_bonus: bool = True) -> int:
    """Ordinary months in [start_month, end_month] plus bonus mesadas inside it."""
    if end_month < start_month:
        return 0
    count = end_month - start_month + 1
    if include_bonus:
        count += sum(1 for month in BONUS_MONTHS if start_month <= month <= end_month)
    return count


class SplitStrategy(Protocol):
    """Divides the sharing year into a before and an after part."""

    def split_year(
        self, row: YearRow, sharing_date: date, include_bonus: bool
    ) -> Tuple[Optional[YearRow], Optional[YearRow]]:
        ...


class ProratedMesadaSplit:
    """Split the sharing year by month, for any sharing date."""

    def split_year(
        self, row: YearRow, sharing_date: date, include_bonus: bool = True
    ) -> Tuple[Optional[YearRow], Optional[YearRow]]:
        month = sharing_date.month
        after = row.model_copy(
            update={
                "start_month": month,
                "end_month": 12,
                "mesada_count": mesadas_in_months(month, 12, include_bonus),
            }
        )
        if month == 1:
            return None, after

        before = row.model_copy(
            update={
                "start_month": 1,
                "end_month": month - 1,
                "mesada_count": mesadas_in_months(1, month - 1, include_bonus),
            }
        )
        return before, after


class FixedMesadaSplit:
    """Split at one fixed sharing date with fixed mesada counts."""

    def __init__(self, split_date: date, before_count: int = 11, after_count: int = 3):
        self.split_date = split_date
        self.before_count = before_count
        self.after_count = after_count

    def split_year(
        self, row: YearRow, sharing_date: date, include_bonus: bool = True
    ) -> Tuple[Optional[YearRow], Optional[YearRow]]:
        if sharing_date != self.split_date:
            raise SharingSplitError(
                f"Fixed split is defined for {self.split_date.isoformat()}, "
                f"not for sharing date {sharing_date.isoformat()}"
            )

        total = self.before_count + self.after_count
        expected = 14 if include_bonus else 12
        if total != expected:
            logger.warning(f"Fixed split counts add up to {total}, not {expected}")

        month = sharing_date.month
        before = row.model_copy(
            update={"start_month": 1, "end_month": month - 1, "mesada_count": self.before_count}
        )
        after = row.model_copy(
            update={"start_month": month, "end_month": 12, "mesada_count": self.after_count}
        )
        return before, after


def create_split_strategy(
    parameters: LiquidationParameters, name: Optional[str] = None
) -> SplitStrategy:
    """Build the split strategy selected by name (defaults to the configured one)."""
    name = name or parameters.sharing_split_strategy
    if name == "prorated":
        return ProratedMesadaSplit()
    if name == "fixed":
        return FixedMesadaSplit(
            parameters.fixed_split_date,
            parameters.fixed_split_before_count,
            parameters.fixed_split_after_count,
        )
    raise ValueError(f"Unknown sharing split strategy: {name}")


def split_by_sharing(
    rows: Sequence[YearRow],
    sharing_date: date,
    strategy: Optional[SplitStrategy] = None,
    include_bonus: bool = True,
) -> SplitResult:
    """
    Split full-year rows around a sharing date.

    Args:
        rows: Full-year rows in year order
        sharing_date: Date the sharing begins
        strategy: How to divide the sharing year (prorated by default)
        include_bonus: Whether bonus mesadas are counted

    Returns:
        Rows before and after the sharing date
    """
    strategy = strategy or ProratedMesadaSplit()
    before: List[YearRow] = []
    after: List[YearRow] = []

    for row in rows:
        if row.year < sharing_date.year:
            before.append(row)
        elif row.year > sharing_date.year:
            after.append(row)
        else:
            before_part, after_part = strategy.split_year(row, sharing_date, include_bonus)
            if before_part is not None:
                before.append(before_part)
            if after_part is not None:
                after.append(after_part)

    return SplitResult(before_sharing=before, after_sharing=after, sharing_date=sharing_date)


def initial_sharing_record(records: Sequence[SharingRecord]) -> Optional[SharingRecord]:
    """The record that starts the sharing: earliest ISS record, else earliest dated one."""
    dated = sorted(
        (record for record in records if record.effective_from is not None),
        key=lambda record: record.effective_from,
    )
    for record in dated:
        if record.is_iss:
            return record
    return dated[0] if dated else None


def recognition_record(records: Sequence[SharingRecord]) -> Optional[SharingRecord]:
    """Earliest dated causante record (pension recognition)."""
    dated = [record for record in records if record.effective_from is not None]
    return min(dated, key=lambda record: record.effective_from) if dated else None


def sharing_record_for_year(
    records: Sequence[SharingRecord], year: int
) -> Optional[SharingRecord]:
    """Latest record effective during the year, if any."""
    in_year = [
        record
        for record in records
        if record.effective_from is not None and record.effective_from.year == year
    ]
    return max(in_year, key=lambda record: record.effective_from) if in_year else None


def period_end(year: int, end_month: int) -> date:
    return date(year, end_month, calendar.monthrange(year, end_month)[1])


def apply_sharing_values(
    rows: Sequence[YearRow],
    records: Sequence[SharingRecord],
    initial_record: Optional[SharingRecord],
    employer_share_pct: Optional[float] = None,
) -> List[YearRow]:
    """
    Value post-sharing rows against the employer/ISS split.

    A year with its own causante record uses that record's values. Otherwise
    the IPC projection is divided with the given employer share (0-1) or, by
    default, the initial record's percentages. The payable mesada is the sum
    of both parts, so the difference measures what the employer still owes
    over the ISS pension.
    """
    if employer_share_pct is None and initial_record is not None:
        employer_share_pct = initial_record.employer_share_pct

    updated = []
    for row in rows:
        record = sharing_record_for_year(records, row.year)
        if record is not None and record.total_value > 0:
            employer = record.employer_share_value
            iss = record.iss_share_value
            source = "record"
        elif employer_share_pct is not None:
            employer = row.projected_mesada_by_ipc * employer_share_pct
            iss = row.projected_mesada_by_ipc - employer
            source = "proportional"
        else:
            logger.warning(f"No sharing values for {row.year}, keeping IPC projection")
            updated.append(row)
            continue

        updated.append(
            row.model_copy(
                update={
                    "employer_share_value": employer,
                    "iss_share_value": iss,
                    "sharing_source": source,
                    "payable_mesada": employer + iss,
                }
            )
        )
    return updated
