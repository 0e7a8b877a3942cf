"""Health check blueprint."""

from flask import Blueprint, Response, current_app, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/healthz")
def health_check() -> Response:
    """Health check endpoint.

    Returns:
        JSON response with status and reference data coverage
    """
    table = current_app.extensions.get("reference_table")
    return jsonify(
        {
            "status": "ok",
            "reference_years": (
                f"{table.first_year}-{table.last_year}" if table is not None else None
            ),
        }
    )
