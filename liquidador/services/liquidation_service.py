"""
Liquidation service.

Loads a pensioner's documents from the document store, validates them into
engine models and runs a liquidation variant. The reference table and the
liquidation parameters are injected, so the engine never reads global state.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from liquidador.models.errors import InvalidParametersError
from liquidador.models.normalizer import deduplicate_payments
from liquidador.models.parameters import LiquidationParameters
from liquidador.models.records import (
    HistoricalPaymentRecord,
    Pensioner,
    PensionerRecords,
    RawPaymentRecord,
    SharingRecord,
)
from liquidador.models.reference_tables import ReferenceTable
from liquidador.models.results import LiquidationResult, RetroactiveLiquidation
from liquidador.models.variants import (
    VARIANT_OPTIONS,
    SimuladorInput,
    get_variant,
    run_simulador_foneca,
)
from liquidador.storage.base import DocumentStore

logger = logging.getLogger(__name__)


class LiquidationService:
    """Service for running liquidations over stored pensioner documents."""

    def __init__(
        self,
        store: DocumentStore,
        index_table: ReferenceTable,
        parameters: Optional[LiquidationParameters] = None,
    ) -> None:
        """Initialize the liquidation service."""
        self.store = store
        self.index_table = index_table
        self.parameters = parameters or LiquidationParameters()
        self.logger = logging.getLogger(__name__)

    def load_records(self, pensioner_id: str) -> PensionerRecords:
        """
        Load and validate every document of a pensioner.

        Payments uploaded more than once for the same period are kept once.
        Invalid individual payments or records are skipped with a warning.

        Raises:
            StorageNotFoundError: If the pensioner does not exist
            ValidationError: If the pensioner record itself is invalid
        """
        pensioner = Pensioner.model_validate(self.store.get_pensioner(pensioner_id))
        document_number = pensioner.document_number

        payments = self._validate_all(
            RawPaymentRecord, self.store.list_payments(pensioner_id), "payment"
        )
        historical = self._validate_all(
            HistoricalPaymentRecord,
            self.store.get_historical_records(document_number),
            "historical record",
        )
        sharing = self._validate_all(
            SharingRecord,
            self.store.get_sharing_records(document_number),
            "causante record",
        )

        unique_payments = deduplicate_payments(payments)
        if len(unique_payments) != len(payments):
            self.logger.info(
                f"Dropped {len(payments) - len(unique_payments)} duplicated payments "
                f"for pensioner {pensioner_id}"
            )

        return PensionerRecords(
            pensioner=pensioner,
            payments=unique_payments,
            historical_records=historical,
            sharing_records=sharing,
        )

    def _validate_all(self, model, documents: List[Dict[str, Any]], label: str) -> list:
        validated = []
        for document in documents:
            try:
                validated.append(model.model_validate(document))
            except ValidationError as e:
                self.logger.warning(f"Skipping invalid {label}: {e.error_count()} errors")
        return validated

    def run(
        self,
        pensioner_id: str,
        variant: str,
        parameters: Optional[LiquidationParameters] = None,
        **options: Any,
    ) -> LiquidationResult:
        """
        Run a liquidation variant for a pensioner.

        Args:
            pensioner_id: Pensioner document id
            variant: Variant name (see liquidador.models.variants.VARIANTS)
            parameters: Per-request parameter override
            **options: Variant specific options (difference_basis, ...)

        Raises:
            UnknownVariantError: If the variant does not exist
            StorageNotFoundError: If the pensioner does not exist
        """
        runner = get_variant(variant)
        unsupported = set(options) - VARIANT_OPTIONS.get(variant, set())
        if unsupported:
            raise InvalidParametersError(
                f"Unsupported options for {variant}: {sorted(unsupported)}"
            )

        records = self.load_records(pensioner_id)

        self.logger.info(f"Running {variant} for pensioner {pensioner_id}")
        return runner(records, self.index_table, parameters or self.parameters, **options)

    def simulate(
        self, simulation: SimuladorInput, parameters: Optional[LiquidationParameters] = None
    ) -> RetroactiveLiquidation:
        """Run the FONECA simulator (no stored documents involved)."""
        return run_simulador_foneca(
            simulation, self.index_table, parameters or self.parameters
        )
