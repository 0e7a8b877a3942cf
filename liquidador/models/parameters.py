"""
Immutable liquidation parameters.

Built once from the application settings and passed explicitly to every
liquidation variant, so the calculation engine never reads global state.
"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

NumberLocale = Literal["es_CO", "en_US"]
HistoricalValueField = Literal["before", "after"]
SplitStrategyName = Literal["prorated", "fixed"]


class LiquidationParameters(BaseModel):
    """Parameters shared by the liquidation variants."""

    model_config = ConfigDict(frozen=True)

    include_bonus_mesadas: bool = Field(
        default=True, description="Count the two bonus mesadas (14 per year)"
    )
    historical_number_locale: NumberLocale = Field(
        default="es_CO", description="Locale of legacy money strings"
    )
    historical_value_field: HistoricalValueField = Field(
        default="after", description="Legacy snapshot value to read"
    )
    sharing_split_strategy: SplitStrategyName = Field(
        default="prorated", description="How the sharing year is split"
    )
    fixed_split_date: date = Field(
        default=date(2014, 6, 13), description="Sharing date of the fixed split"
    )
    fixed_split_before_count: int = Field(
        default=11, ge=0, description="Mesadas before the fixed split date"
    )
    fixed_split_after_count: int = Field(
        default=3, ge=0, description="Mesadas after the fixed split date"
    )
    certificado_start_year: int = Field(
        default=2003, ge=1982, description="First year listed in certificates"
    )
    cutoff_year: Optional[int] = Field(
        default=None, ge=1982, le=2100, description="Last liquidated year"
    )
    ley4_threshold_smlmv: float = Field(
        default=5.0, gt=0, description="# SMLMV ceiling for the Ley 4 adjustment"
    )
    ley4_adjustment_pct: float = Field(
        default=15.0, ge=0, description="Ley 4 adjustment percentage"
    )
    health_discount_rate: float = Field(
        default=0.12, ge=0, le=1, description="Health contribution on differences"
    )

    @property
    def mesadas_per_year(self) -> int:
        """Mesadas in a full year."""
        return 14 if self.include_bonus_mesadas else 12

    def resolve_cutoff_year(self) -> int:
        """Last year to liquidate (defaults to the current year)."""
        if self.cutoff_year is not None:
            return self.cutoff_year
        return datetime.now().year
