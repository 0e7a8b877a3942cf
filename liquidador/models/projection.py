"""
Mesada projection engine.

Projects a base mesada year by year, compounding it by the SMLMV increase,
the IPC adjustment, or the more favorable of the two. Every liquidation
variant builds on this recurrence:

    projected[start] = base
    projected[Y] = projected[Y - 1] * (1 + growth(Y) / 100)

Years without reference data are skipped and never receive a value; the
recurrence continues from the last projected year.
"""

import logging
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .reference_tables import ReferenceTable

logger = logging.getLogger(__name__)


class GrowthSelector(str, Enum):
    """Which annual growth rate drives a projection."""

    SMLMV_ONLY = "smlmv_only"
    IPC_ONLY = "ipc_only"
    MAX_OF_SMLMV_AND_IPC = "max_of_smlmv_and_ipc"


class ProjectionPoint(BaseModel):
    """Projected mesada for one year."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., description="Calendar year")
    projected_value: float = Field(..., description="Projected mesada (COP)")
    growth_pct: float = Field(default=0.0, description="Growth applied this year (%)")


def selected_growth_pct(
    year: int, index_table: ReferenceTable, growth_selector: GrowthSelector
) -> float:
    """Growth percentage the selector picks for a year."""
    smlmv_pct = index_table.smlmv_growth_pct(year)
    ipc_pct = index_table.ipc_growth_pct(year)

    if growth_selector == GrowthSelector.SMLMV_ONLY:
        return smlmv_pct
    if growth_selector == GrowthSelector.IPC_ONLY:
        return ipc_pct
    return max(smlmv_pct, ipc_pct)


def project_series(
    base_mesada: float,
    start_year: int,
    end_year: int,
    index_table: ReferenceTable,
    growth_selector: GrowthSelector,
) -> List[ProjectionPoint]:
    """
    Project a base mesada from start_year through end_year.

    Args:
        base_mesada: Mesada in the start year (no growth applied to it)
        start_year: First projected year
        end_year: Last projected year (inclusive)
        index_table: Reference table with the yearly growth rates
        growth_selector: Growth rate to compound by

    Returns:
        Ordered projection points, one per covered year. Empty when the start
        year itself has no reference data.

    Raises:
        ValueError: If end_year is before start_year
    """
    if end_year < start_year:
        raise ValueError(f"end_year {end_year} is before start_year {start_year}")

    if not index_table.covers(start_year):
        logger.warning(f"Start year {start_year} not covered by reference table")
        return []

    points = [ProjectionPoint(year=start_year, projected_value=base_mesada)]
    previous_value = base_mesada

    for year in range(start_year + 1, end_year + 1):
        if not index_table.covers(year):
            logger.debug(f"Skipping year {year}: no reference data")
            continue

        growth_pct = selected_growth_pct(year, index_table, growth_selector)
        projected_value = previous_value * (1 + growth_pct / 100)
        points.append(
            ProjectionPoint(year=year, projected_value=projected_value, growth_pct=growth_pct)
        )
        previous_value = projected_value

    return points


def number_of_smlmv(value: float, year: int, index_table: ReferenceTable) -> float:
    """
    Express a mesada as a multiple of the year's minimum wage.

    Returns 0 when the year has no (or a zero) minimum wage.
    """
    smlmv = index_table.smlmv(year)
    if smlmv <= 0:
        return 0.0
    return value / smlmv
