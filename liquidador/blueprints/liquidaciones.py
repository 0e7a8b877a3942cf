"""
Liquidaciones blueprint.

This module provides API endpoints for running pension liquidations over a
pensioner's stored documents, the FONECA simulator and the reference table.
"""

from typing import Any, Dict

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError

from liquidador.models.errors import (
    InvalidParametersError,
    LiquidationError,
    UnknownVariantError,
)
from liquidador.models.export import rows_to_csv
from liquidador.models.parameters import LiquidationParameters
from liquidador.models.variants import SimuladorInput
from liquidador.services.liquidation_service import LiquidationService
from liquidador.storage.base import StorageNotFoundError

liquidaciones_bp = Blueprint("liquidaciones", __name__, url_prefix="/api")

DIFFERENCE_BASES = {"ipc_projection", "paid"}
SPLIT_STRATEGIES = {"prorated", "fixed"}
TRUE_VALUES = {"1", "true", "yes", "si"}


def _get_service() -> LiquidationService:
    return LiquidationService(
        store=current_app.extensions["document_store"],
        index_table=current_app.extensions["reference_table"],
        parameters=current_app.extensions["liquidation_parameters"],
    )


def _request_parameters(service: LiquidationService) -> LiquidationParameters:
    """Apply per-request overrides (cutoff_year) to the configured parameters."""
    cutoff_year = request.args.get("cutoff_year")
    if cutoff_year is None:
        return service.parameters

    values = service.parameters.model_dump()
    values["cutoff_year"] = cutoff_year
    return LiquidationParameters.model_validate(values)


def _variant_options(variant: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {}

    difference_basis = request.args.get("difference_basis")
    if difference_basis is not None:
        if difference_basis not in DIFFERENCE_BASES:
            raise InvalidParametersError(
                f"difference_basis must be one of {sorted(DIFFERENCE_BASES)}"
            )
        options["difference_basis"] = difference_basis

    split_strategy = request.args.get("split_strategy")
    if split_strategy is not None:
        if split_strategy not in SPLIT_STRATEGIES:
            raise InvalidParametersError(
                f"split_strategy must be one of {sorted(SPLIT_STRATEGIES)}"
            )
        options["split_strategy"] = split_strategy

    return options


@liquidaciones_bp.route(
    "/pensionados/<pensioner_id>/liquidaciones/<variant>", methods=["GET"]
)
def get_liquidacion(pensioner_id: str, variant: str) -> Any:
    """Run a liquidation variant for a pensioner.

    Args:
        pensioner_id: Pensioner document id
        variant: evolucion-mesada, precedente-serp, certificado,
            poder-adquisitivo or anexo-ley-4

    Returns:
        JSON result, or CSV rows with ?format=csv (&formatted=true for COP)
    """
    try:
        service = _get_service()
        parameters = _request_parameters(service)
        result = service.run(
            pensioner_id, variant, parameters=parameters, **_variant_options(variant)
        )

        if request.args.get("format") == "csv":
            formatted = request.args.get("formatted", "").lower() in TRUE_VALUES
            return Response(
                rows_to_csv(result.table_rows(), formatted=formatted),
                mimetype="text/csv",
                headers={
                    "Content-Disposition": (
                        f"attachment; filename={pensioner_id}-{variant}.csv"
                    )
                },
            )

        return jsonify(result.model_dump(mode="json")), 200

    except UnknownVariantError as e:
        return jsonify({"error": str(e)}), 404
    except StorageNotFoundError:
        return jsonify({"error": "Pensioner not found"}), 404
    except (LiquidationError, ValidationError) as e:
        return jsonify({"error": "Invalid liquidation request", "message": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error running {variant} for {pensioner_id}: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@liquidaciones_bp.route("/simulador", methods=["POST"])
def run_simulador() -> Any:
    """Run the FONECA simulator.

    Returns:
        JSON simulation result
    """
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400

        simulation = SimuladorInput.model_validate(data)
        service = _get_service()
        result = service.simulate(simulation, parameters=_request_parameters(service))
        return jsonify(result.model_dump(mode="json")), 200

    except (LiquidationError, ValidationError) as e:
        return jsonify({"error": "Invalid simulation", "message": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Error running simulation: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@liquidaciones_bp.route("/indices", methods=["GET"])
def get_indices() -> Any:
    """Get the SMLMV/IPC reference table.

    Returns:
        JSON response with one entry per year
    """
    table = current_app.extensions["reference_table"]
    return (
        jsonify(
            {
                "source": table.source,
                "first_year": table.first_year,
                "last_year": table.last_year,
                "indices": [index.model_dump() for index in table.indices],
            }
        ),
        200,
    )
