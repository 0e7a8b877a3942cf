"""
Pydantic models for pensioner documents read from the document store.

Raw documents keep their stored field names (``año``, ``periodoPago``,
``VALOR_ACT``, ``fecha_desde``...). The models expose them under English
attribute names through aliases; both spellings are accepted on input.
"""

from datetime import date, datetime, timezone
from functools import cached_property
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .parsing import PaymentPeriod, parse_payment_period

MESADA_CODES = {"MESAD", "MESADA"}
BONUS_CODES = {"MESAD14"}


def coerce_document_date(value: Any) -> Any:
    """Normalize stored dates (ISO strings or timestamp objects) to a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if seconds is None:
            return value
        return datetime.fromtimestamp(int(seconds), tz=timezone.utc).date()
    if isinstance(value, str) and len(value) > 10 and value[10] in ("T", " "):
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


class Pensioner(BaseModel):
    """Pensioner identity record."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(..., description="Document store identifier")
    document_number: str = Field(..., alias="documento", description="Cédula")
    employee_name: str = Field(default="", alias="empleado", description="Full name")
    dependency: Optional[str] = Field(default=None, alias="dependencia1")

    @field_validator("document_number", mode="before")
    @classmethod
    def validate_document_number(cls, v):
        return str(v) if v is not None else v

    @property
    def display_name(self) -> str:
        """Employee name without the trailing "(C.C. ...)" suffix."""
        name = self.employee_name.split(" (C.C.")[0].strip()
        return name or self.employee_name


class PaymentLineItem(BaseModel):
    """A single concept of a payment slip."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    code: Optional[str] = Field(default=None, alias="codigo")
    name: str = Field(default="", alias="nombre")
    income_amount: float = Field(default=0.0, alias="ingresos")
    deduction_amount: float = Field(default=0.0, alias="egresos")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        return v or ""

    @property
    def is_mesada(self) -> bool:
        """Ordinary monthly pension concept."""
        if self.code and self.code.strip().upper() in MESADA_CODES:
            return True
        return "mesada pensional" in self.name.lower()

    @property
    def is_bonus_mesada(self) -> bool:
        """Additional (June / December) mesada concept."""
        if self.code and self.code.strip().upper() in BONUS_CODES:
            return True
        return "mesada adicional" in self.name.lower()


class RawPaymentRecord(BaseModel):
    """One payment event for a pensioner."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: Optional[str] = Field(default=None)
    year: int = Field(..., alias="año", description="Payment year")
    period_label: str = Field(default="", alias="periodoPago")
    line_items: List[PaymentLineItem] = Field(default_factory=list, alias="detalles")

    @cached_property
    def period(self) -> Optional[PaymentPeriod]:
        return parse_payment_period(self.period_label)

    @property
    def sort_key(self) -> date:
        """Start date used for chronological ordering (unparseable sorts last)."""
        return self.period.start_date if self.period else date.max

    @property
    def month(self) -> Optional[int]:
        return self.period.month if self.period else None

    def mesada_amount(self) -> float:
        """Amount of the ordinary mesada line item (0 when absent)."""
        for item in self.line_items:
            if item.is_mesada and item.income_amount > 0:
                return item.income_amount
        return 0.0

    def bonus_mesada_count(self) -> int:
        """Number of bonus mesada line items paid in this event."""
        return sum(
            1 for item in self.line_items if item.is_bonus_mesada and item.income_amount > 0
        )

    @property
    def has_mesada(self) -> bool:
        return self.mesada_amount() > 0


class HistoricalPaymentRecord(BaseModel):
    """Legacy yearly payment snapshot, used when no itemized payment exists."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    year: int = Field(..., alias="ANO_RET")
    value_before: Optional[Union[float, str]] = Field(default=None, alias="VALOR_ANT")
    value_after: Optional[Union[float, str]] = Field(default=None, alias="VALOR_ACT")
    start_date: Optional[str] = Field(default=None, alias="FECHA_INI")
    adjustment_type: Optional[str] = Field(default=None, alias="TIPO_AUM")
    percentage: Optional[Union[float, str]] = Field(default=None, alias="PORCENTAJE")


class SharingRecord(BaseModel):
    """Causante record describing how the pension is shared with ISS/Colpensiones."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    effective_from: Optional[date] = Field(default=None, alias="fecha_desde")
    effective_to: Optional[date] = Field(default=None, alias="fecha_hasta")
    sharing_type: str = Field(default="", alias="tipo_aum")
    employer_share_value: float = Field(default=0.0, alias="valor_empresa")
    iss_share_value: float = Field(default=0.0, alias="valor_iss")
    beneficiary_id: Optional[str] = Field(default=None, alias="cedula_beneficiario")
    note: str = Field(default="", alias="observacion")

    @field_validator("effective_from", "effective_to", mode="before")
    @classmethod
    def validate_dates(cls, v):
        return coerce_document_date(v)

    @field_validator("employer_share_value", "iss_share_value", mode="before")
    @classmethod
    def validate_share_values(cls, v):
        return 0.0 if v is None or v == "" else v

    @field_validator("beneficiary_id", mode="before")
    @classmethod
    def validate_beneficiary_id(cls, v):
        return str(v) if v is not None else v

    @field_validator("note", "sharing_type", mode="before")
    @classmethod
    def validate_text(cls, v):
        return v or ""

    @property
    def is_iss(self) -> bool:
        return self.sharing_type.strip().upper() == "ISS"

    @property
    def total_value(self) -> float:
        return self.employer_share_value + self.iss_share_value

    @property
    def employer_share_pct(self) -> float:
        """Employer fraction of the shared pension (0-1)."""
        total = self.total_value
        return self.employer_share_value / total if total > 0 else 0.0


class PensionerRecords(BaseModel):
    """Everything the engine needs about one pensioner."""

    model_config = ConfigDict(frozen=True)

    pensioner: Pensioner
    payments: List[RawPaymentRecord] = Field(default_factory=list)
    historical_records: List[HistoricalPaymentRecord] = Field(default_factory=list)
    sharing_records: List[SharingRecord] = Field(default_factory=list)
