"""
Table rows produced by the liquidation variants.

Rows are immutable; every computation stage returns updated copies
(``model_copy(update=...)``) so a row set can be recomputed freely.
Money fields hold plain numbers; formatting happens at export time.
"""

from datetime import date
from typing import ClassVar, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field


class LiquidationRow(BaseModel):
    """Base class of every liquidation table row."""

    model_config = ConfigDict(frozen=True)

    # Fields rendered as currency when a table is exported formatted
    MONEY_FIELDS: ClassVar[FrozenSet[str]] = frozenset()

    year: int = Field(..., description="Calendar year")


class YearRow(LiquidationRow):
    """One year (or sub-year period) of a retroactive liquidation."""

    MONEY_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {
            "smlmv",
            "projected_mesada_by_smlmv",
            "projected_mesada_by_ipc",
            "mesada_actually_paid",
            "employer_share_value",
            "iss_share_value",
            "payable_mesada",
            "mesada_difference",
            "retroactive_subtotal",
            "cumulative_retroactive_total",
        }
    )

    start_month: int = Field(default=1, ge=1, le=12)
    end_month: int = Field(default=12, ge=1, le=12)
    smlmv: float = Field(default=0.0, description="Minimum wage of the year")
    smlmv_growth_pct: float = Field(default=0.0)
    projected_mesada_by_smlmv: float = Field(
        default=0.0, description="Mesada projected by the SMLMV (or max) selector"
    )
    smlmv_count_at_smlmv_projection: float = Field(default=0.0)
    ipc_growth_pct: float = Field(default=0.0)
    projected_mesada_by_ipc: float = Field(
        default=0.0, description="Mesada projected by IPC only"
    )
    smlmv_count_at_ipc_projection: float = Field(default=0.0)
    percent_loss_of_ipc_projection: float = Field(default=0.0)
    smlmv_loss_of_ipc_projection: float = Field(default=0.0)
    mesada_actually_paid: float = Field(
        default=0.0, description="Normalized mesada paid (0 when unknown)"
    )
    employer_share_value: Optional[float] = Field(default=None)
    iss_share_value: Optional[float] = Field(default=None)
    sharing_source: Optional[str] = Field(
        default=None, description="'record' or 'proportional' once sharing applies"
    )
    payable_mesada: Optional[float] = Field(
        default=None, description="Value the difference is computed against"
    )
    mesada_difference: float = Field(default=0.0, ge=0)
    mesada_count: int = Field(default=14, ge=0)
    retroactive_subtotal: float = Field(default=0.0)
    cumulative_retroactive_total: float = Field(default=0.0)

    @property
    def available(self) -> bool:
        """False when the paid mesada of the year is unknown."""
        return self.mesada_actually_paid > 0


class PrecedenteRow(LiquidationRow):
    """One period of the Precedente SERP (Ley 4 de 1976) ledger."""

    MONEY_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {
            "mesada",
            "tope_5_smlmv",
            "mesada_reajustada",
            "pension_vejez",
            "cargo_empresa",
            "pagado_empresa",
            "diferencias_insolutas",
            "dano_antijuridico",
            "diferencias_anuales",
            "indexacion",
            "diferencias_indexadas",
            "diferencias_ordinarias",
            "descuento_salud",
        }
    )

    start_month: int = Field(default=1, ge=1, le=12)
    end_month: int = Field(default=12, ge=1, le=12)
    mesada: float = Field(default=0.0, description="Mesada paid in the period")
    tope_5_smlmv: float = Field(default=0.0)
    numero_smlmv: float = Field(default=0.0, description="Previous total income in SMLMV")
    porcentaje_ajuste: float = Field(default=0.0)
    mesada_reajustada: float = Field(default=0.0)
    pension_vejez: float = Field(default=0.0)
    pension_vejez_proyectada: bool = Field(
        default=False, description="Pension de vejez carried forward with IPC"
    )
    cargo_empresa: float = Field(default=0.0)
    pagado_empresa: float = Field(default=0.0)
    diferencias_insolutas: float = Field(default=0.0, ge=0)
    mesadas_ordinarias: int = Field(default=0, ge=0)
    mesadas_adicionales: int = Field(default=0, ge=0)
    numero_mesadas: int = Field(default=0, ge=0)
    dano_antijuridico: float = Field(default=0.0)
    diferencias_anuales: float = Field(default=0.0)
    indexacion: float = Field(default=0.0)
    diferencias_indexadas: float = Field(default=0.0)
    diferencias_ordinarias: float = Field(default=0.0)
    descuento_salud: float = Field(default=0.0)


class CertificadoRow(LiquidationRow):
    """First and last mesada paid in a year."""

    MONEY_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"first_mesada", "last_mesada", "variation_value"}
    )

    first_payment_date: Optional[date] = Field(default=None)
    first_mesada: float = Field(default=0.0)
    last_payment_date: Optional[date] = Field(default=None)
    last_mesada: float = Field(default=0.0)
    variation_value: float = Field(
        default=0.0, description="Last mesada change against the previous year"
    )
    variation_pct: float = Field(default=0.0)
    source: Optional[str] = Field(default=None, description="Resolver that found it")

    @property
    def available(self) -> bool:
        return self.first_mesada > 0


class PoderAdquisitivoRow(LiquidationRow):
    """Purchasing power of the pension unit in one year."""

    MONEY_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"smlmv", "paid_by_company", "pension_vejez", "unidad_pensional"}
    )

    smlmv: float = Field(default=0.0)
    paid_by_company: float = Field(default=0.0)
    pension_vejez: float = Field(default=0.0)
    pension_vejez_projected: bool = Field(default=False)
    unidad_pensional: float = Field(default=0.0)
    smlmv_count: float = Field(default=0.0)
    ipc_growth_pct: float = Field(default=0.0)
