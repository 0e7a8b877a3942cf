"""
Retroactive-difference calculator.

Builds the year rows of a liquidation from two parallel projections and
computes the yearly difference, the retroactive subtotal and the running
total:

    mesada_difference = max(0, projected_by_smlmv - payable)
    subtotal = mesada_difference * mesada_count
    cumulative[i] = cumulative[i - 1] + subtotal[i]

``payable`` is the IPC projection (what indexation by IPC alone paid) unless a
row carries an explicit payable value (post-sharing employer/ISS values, or
the mesada actually paid when that basis is selected).
"""

import logging
from typing import Dict, List, Literal, Mapping, Optional, Sequence

import numpy as np

from .projection import GrowthSelector, number_of_smlmv, project_series
from .reference_tables import ReferenceTable
from .rows import YearRow

logger = logging.getLogger(__name__)

DifferenceBasis = Literal["ipc_projection", "paid"]


def percent_loss(projected_by_smlmv: float, projected_by_ipc: float) -> float:
    """Percentage of the SMLMV projection lost by indexing with IPC only."""
    if projected_by_smlmv <= 0:
        return 0.0
    return 100 * (1 - projected_by_ipc / projected_by_smlmv)


def build_year_rows(
    base_mesada: float,
    start_year: int,
    end_year: int,
    index_table: ReferenceTable,
    comparison_selector: GrowthSelector = GrowthSelector.SMLMV_ONLY,
    mesadas_per_year: int = 14,
    paid_values: Optional[Mapping[int, float]] = None,
    mesada_counts: Optional[Mapping[int, int]] = None,
) -> List[YearRow]:
    """
    Build one row per covered year with both projections and their metrics.

    Args:
        base_mesada: Mesada of the start year
        start_year: First liquidated year
        end_year: Last liquidated year (inclusive)
        index_table: Reference table
        comparison_selector: Selector of the favorable projection
            (SMLMV_ONLY or MAX_OF_SMLMV_AND_IPC)
        mesadas_per_year: Mesadas of a full year (12 or 14)
        paid_values: Normalized mesada actually paid, by year
        mesada_counts: Mesadas actually paid, by year. Years missing from
            the mapping (or counted 0) are charged a full year

    Returns:
        Rows without differences (see compute_differences)
    """
    paid_values = paid_values or {}
    mesada_counts = mesada_counts or {}
    favorable = project_series(
        base_mesada, start_year, end_year, index_table, comparison_selector
    )
    by_ipc: Dict[int, float] = {
        point.year: point.projected_value
        for point in project_series(
            base_mesada, start_year, end_year, index_table, GrowthSelector.IPC_ONLY
        )
    }

    rows = []
    for point in favorable:
        year = point.year
        projected_smlmv = point.projected_value
        projected_ipc = by_ipc[year]
        smlmv_count_smlmv = number_of_smlmv(projected_smlmv, year, index_table)
        smlmv_count_ipc = number_of_smlmv(projected_ipc, year, index_table)

        mesada_count = mesadas_per_year
        if mesada_counts.get(year):
            mesada_count = min(mesada_counts[year], mesadas_per_year)

        rows.append(
            YearRow(
                year=year,
                smlmv=index_table.smlmv(year),
                smlmv_growth_pct=index_table.smlmv_growth_pct(year),
                projected_mesada_by_smlmv=projected_smlmv,
                smlmv_count_at_smlmv_projection=smlmv_count_smlmv,
                ipc_growth_pct=index_table.ipc_growth_pct(year),
                projected_mesada_by_ipc=projected_ipc,
                smlmv_count_at_ipc_projection=smlmv_count_ipc,
                percent_loss_of_ipc_projection=percent_loss(projected_smlmv, projected_ipc),
                smlmv_loss_of_ipc_projection=smlmv_count_smlmv - smlmv_count_ipc,
                mesada_actually_paid=paid_values.get(year, 0.0),
                mesada_count=mesada_count,
            )
        )

    return rows


def with_difference_basis(rows: Sequence[YearRow], basis: DifferenceBasis) -> List[YearRow]:
    """
    Set the payable value of rows that do not carry one yet.

    With the "paid" basis the mesada actually paid is used; years whose paid
    mesada is unknown keep the IPC projection.
    """
    if basis == "ipc_projection":
        return list(rows)

    updated = []
    for row in rows:
        if row.payable_mesada is None and row.available:
            row = row.model_copy(update={"payable_mesada": row.mesada_actually_paid})
        updated.append(row)
    return updated


def compute_differences(rows: Sequence[YearRow]) -> List[YearRow]:
    """
    Populate mesada_difference, retroactive_subtotal and the running total.

    Rows are taken in the given order; the running total spans all of them.
    """
    if not rows:
        return []

    differences = []
    for row in rows:
        payable = (
            row.payable_mesada
            if row.payable_mesada is not None
            else row.projected_mesada_by_ipc
        )
        differences.append(max(0.0, row.projected_mesada_by_smlmv - payable))

    counts = np.array([row.mesada_count for row in rows], dtype=float)
    subtotals = np.array(differences) * counts
    cumulative = np.cumsum(subtotals)

    return [
        row.model_copy(
            update={
                "mesada_difference": float(difference),
                "retroactive_subtotal": float(subtotal),
                "cumulative_retroactive_total": float(total),
            }
        )
        for row, difference, subtotal, total in zip(rows, differences, subtotals, cumulative)
    ]


def total_retroactive(rows: Sequence[YearRow]) -> float:
    """Final cumulative total of a computed row sequence (0 when empty)."""
    if not rows:
        return 0.0
    return rows[-1].cumulative_retroactive_total
