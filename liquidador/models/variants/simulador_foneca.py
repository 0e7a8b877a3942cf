"""
Simulador FONECA.

Projects a hypothetical mesada with the more favorable of the SMLMV and IPC
increases and compares it with IPC indexation, splitting the timeline at a
sharing date with employer/ISS percentages chosen by the user instead of
read from causante records. By default the sharing year is split with the
fixed 13 June 2014 rule (11 mesadas before, 3 after).
"""

import logging
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ..errors import InvalidParametersError
from ..parameters import LiquidationParameters, SplitStrategyName
from ..projection import GrowthSelector
from ..reference_tables import ReferenceTable
from ..results import RetroactiveLiquidation
from ..retroactive import build_year_rows, compute_differences, total_retroactive
from ..sharing import apply_sharing_values, create_split_strategy, split_by_sharing

logger = logging.getLogger(__name__)

VARIANT_NAME = "simulador"

# Tolerance when checking that the percentages add up to 100
PERCENT_TOLERANCE = 0.01


class SimuladorInput(BaseModel):
    """Parameters of one simulation."""

    base_mesada: float = Field(..., gt=0, description="Mesada in the start year (COP)")
    start_year: int = Field(..., ge=1982, le=2100, description="First simulated year")
    end_year: Optional[int] = Field(
        default=None, ge=1982, le=2100, description="Last simulated year"
    )
    sharing_date: Optional[date] = Field(
        default=None, description="Sharing date (defaults to the fixed split date)"
    )
    employer_share_pct: float = Field(..., ge=0, le=100, description="Employer share (%)")
    iss_share_pct: float = Field(..., ge=0, le=100, description="ISS share (%)")
    split_strategy: SplitStrategyName = Field(default="fixed")
    growth_selector: GrowthSelector = Field(default=GrowthSelector.MAX_OF_SMLMV_AND_IPC)


def run_simulador_foneca(
    simulation: SimuladorInput,
    index_table: ReferenceTable,
    parameters: LiquidationParameters,
) -> RetroactiveLiquidation:
    """
    Run a FONECA simulation.

    Raises:
        InvalidParametersError: If the percentages do not add up to 100 or the
            year range is empty
        SharingSplitError: If the fixed strategy is used with another date
    """
    total_pct = simulation.employer_share_pct + simulation.iss_share_pct
    if abs(total_pct - 100) > PERCENT_TOLERANCE:
        raise InvalidParametersError(
            f"Employer and ISS percentages must add up to 100, got {total_pct}"
        )

    end_year = simulation.end_year or parameters.resolve_cutoff_year()
    if end_year < simulation.start_year:
        raise InvalidParametersError(
            f"end_year {end_year} is before start_year {simulation.start_year}"
        )
    if not index_table.covers(simulation.start_year):
        raise InvalidParametersError(
            f"No reference data for start year {simulation.start_year}"
        )

    sharing_date = simulation.sharing_date or parameters.fixed_split_date
    include_bonus = parameters.include_bonus_mesadas
    rows = build_year_rows(
        simulation.base_mesada,
        simulation.start_year,
        end_year,
        index_table,
        simulation.growth_selector,
        parameters.mesadas_per_year,
    )

    split = split_by_sharing(
        rows,
        sharing_date,
        create_split_strategy(parameters, simulation.split_strategy),
        include_bonus,
    )
    employer_share = simulation.employer_share_pct / 100
    after = apply_sharing_values(
        split.after_sharing, [], None, employer_share_pct=employer_share
    )

    before = split.before_sharing
    computed = compute_differences([*before, *after])

    logger.info(
        f"Simulation {simulation.start_year}-{end_year} sharing {sharing_date.isoformat()} "
        f"({simulation.employer_share_pct}% employer)"
    )
    return RetroactiveLiquidation(
        variant=VARIANT_NAME,
        before_sharing=computed[: len(before)],
        after_sharing=computed[len(before):],
        sharing_date=sharing_date,
        employer_share_pct=employer_share,
        total_general_retroactivo=total_retroactive(computed),
        mesada_pensional_inicial=simulation.base_mesada,
        fecha_primera_mesada=date(simulation.start_year, 1, 1),
    )
