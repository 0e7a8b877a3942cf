"""Result models returned by the liquidation variants."""

from datetime import date
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .rows import CertificadoRow, LiquidationRow, PoderAdquisitivoRow, PrecedenteRow, YearRow


class LiquidationResult(BaseModel):
    """Common summary of every liquidation variant."""

    model_config = ConfigDict(frozen=True)

    variant: str = Field(..., description="Variant name")
    pensioner_id: Optional[str] = Field(default=None)
    available: bool = Field(
        default=True, description="False when no mesada could be resolved"
    )
    total_general_retroactivo: float = Field(default=0.0)
    mesada_pensional_inicial: float = Field(default=0.0)
    fecha_primera_mesada: Optional[date] = Field(default=None)
    warnings: List[str] = Field(default_factory=list)

    def table_rows(self) -> Sequence[LiquidationRow]:
        """Rows of the variant's table, in display order."""
        return []


class RetroactiveLiquidation(LiquidationResult):
    """Evolución de la Mesada and Simulador FONECA results."""

    before_sharing: List[YearRow] = Field(default_factory=list)
    after_sharing: List[YearRow] = Field(default_factory=list)
    sharing_date: Optional[date] = Field(default=None)
    employer_share_pct: Optional[float] = Field(
        default=None, description="Employer share used for proportional values (0-1)"
    )

    @property
    def rows(self) -> List[YearRow]:
        return [*self.before_sharing, *self.after_sharing]

    def table_rows(self) -> Sequence[YearRow]:
        return self.rows


class PrecedenteLiquidation(LiquidationResult):
    """Precedente SERP ledger."""

    before_sharing: List[PrecedenteRow] = Field(default_factory=list)
    after_sharing: List[PrecedenteRow] = Field(default_factory=list)
    cutoff_year: Optional[int] = Field(default=None)
    total_diferencias_anuales: float = Field(default=0.0)
    total_diferencias_indexadas: float = Field(default=0.0)
    total_descuento_salud: float = Field(default=0.0)
    total_neto: float = Field(default=0.0, description="Indexed differences minus health")

    @property
    def rows(self) -> List[PrecedenteRow]:
        return [*self.before_sharing, *self.after_sharing]

    def table_rows(self) -> Sequence[PrecedenteRow]:
        return self.rows


class CertificadoResult(LiquidationResult):
    """First/last mesada of each year."""

    rows: List[CertificadoRow] = Field(default_factory=list)
    recognition_date: Optional[date] = Field(default=None)
    sharing_date: Optional[date] = Field(default=None)

    def table_rows(self) -> Sequence[CertificadoRow]:
        return self.rows


class PoderAdquisitivoResult(LiquidationResult):
    """Purchasing power of the pension unit over time."""

    rows: List[PoderAdquisitivoRow] = Field(default_factory=list)
    first_mesada: float = Field(default=0.0)
    last_mesada: float = Field(default=0.0)
    first_smlmv_count: float = Field(default=0.0)
    last_smlmv_count: float = Field(default=0.0)
    smlmv_loss: float = Field(default=0.0, description="SMLMV multiples lost")
    sharing_date: Optional[date] = Field(default=None)
    mesada_before_sharing: float = Field(default=0.0)
    iss_share_value: float = Field(default=0.0)
    employer_share_value: float = Field(default=0.0)
    iss_share_pct: float = Field(default=0.0, description="ISS share (%)")
    employer_share_pct: float = Field(default=0.0, description="Employer share (%)")

    def table_rows(self) -> Sequence[PoderAdquisitivoRow]:
        return self.rows
