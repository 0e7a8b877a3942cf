"""Pension liquidation engine: reference data, normalizer, projections and variants."""

from .errors import (
    InvalidParametersError,
    LiquidationError,
    SharingSplitError,
    UnknownVariantError,
)
from .normalizer import (
    MesadaNormalizer,
    count_mesadas_in_year,
    get_mesada_for_month,
    get_mesada_for_year,
)
from .parameters import LiquidationParameters
from .parsing import PaymentPeriod, parse_locale_decimal, parse_payment_period
from .projection import GrowthSelector, ProjectionPoint, number_of_smlmv, project_series
from .records import (
    HistoricalPaymentRecord,
    PaymentLineItem,
    Pensioner,
    PensionerRecords,
    RawPaymentRecord,
    SharingRecord,
)
from .reference_tables import (
    ReferenceTable,
    YearlyEconomicIndex,
    get_default_reference_table,
    load_reference_table,
)
from .retroactive import build_year_rows, compute_differences, percent_loss
from .rows import CertificadoRow, PoderAdquisitivoRow, PrecedenteRow, YearRow
from .sharing import (
    FixedMesadaSplit,
    ProratedMesadaSplit,
    SplitResult,
    apply_sharing_values,
    split_by_sharing,
)

__all__ = [
    "LiquidationError",
    "SharingSplitError",
    "UnknownVariantError",
    "InvalidParametersError",
    "MesadaNormalizer",
    "get_mesada_for_year",
    "get_mesada_for_month",
    "count_mesadas_in_year",
    "LiquidationParameters",
    "PaymentPeriod",
    "parse_payment_period",
    "parse_locale_decimal",
    "GrowthSelector",
    "ProjectionPoint",
    "project_series",
    "number_of_smlmv",
    "Pensioner",
    "PaymentLineItem",
    "RawPaymentRecord",
    "HistoricalPaymentRecord",
    "SharingRecord",
    "PensionerRecords",
    "ReferenceTable",
    "YearlyEconomicIndex",
    "load_reference_table",
    "get_default_reference_table",
    "build_year_rows",
    "compute_differences",
    "percent_loss",
    "YearRow",
    "PrecedenteRow",
    "CertificadoRow",
    "PoderAdquisitivoRow",
    "SplitResult",
    "ProratedMesadaSplit",
    "FixedMesadaSplit",
    "split_by_sharing",
    "apply_sharing_values",
]
