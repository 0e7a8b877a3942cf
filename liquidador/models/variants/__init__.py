"""
Liquidation variants.

Each variant wires the normalizer, the projection engine, the sharing
splitter and the retroactive calculator together for one report. Variants
that read a pensioner's documents share the signature
``(records, index_table, parameters) -> LiquidationResult`` and are
registered by their URL name.
"""

from typing import Callable, Dict, Set

from ..errors import UnknownVariantError
from ..results import LiquidationResult
from .anexo_ley_4 import run_anexo_ley_4
from .certificado import run_certificado
from .evolucion_mesada import run_evolucion_mesada
from .poder_adquisitivo import run_poder_adquisitivo
from .precedente_serp import run_precedente_serp
from .simulador_foneca import SimuladorInput, run_simulador_foneca

VariantRunner = Callable[..., LiquidationResult]

VARIANTS: Dict[str, VariantRunner] = {
    "evolucion-mesada": run_evolucion_mesada,
    "precedente-serp": run_precedente_serp,
    "certificado": run_certificado,
    "poder-adquisitivo": run_poder_adquisitivo,
    "anexo-ley-4": run_anexo_ley_4,
}

# Keyword options each variant accepts besides (records, index_table, parameters)
VARIANT_OPTIONS: Dict[str, Set[str]] = {
    "evolucion-mesada": {"difference_basis", "split_strategy"},
}


def get_variant(name: str) -> VariantRunner:
    """
    Look up a pensioner liquidation variant by name.

    Raises:
        UnknownVariantError: If no variant has that name
    """
    try:
        return VARIANTS[name]
    except KeyError:
        raise UnknownVariantError(
            f"Unknown liquidation variant '{name}'. Available: {sorted(VARIANTS)}"
        )


__all__ = [
    "VARIANTS",
    "VARIANT_OPTIONS",
    "get_variant",
    "run_anexo_ley_4",
    "run_certificado",
    "run_evolucion_mesada",
    "run_poder_adquisitivo",
    "run_precedente_serp",
    "run_simulador_foneca",
    "SimuladorInput",
]
