"""Liquidador de Mesadas Flask Application Factory."""

import logging
from typing import Optional

from flask import Flask

from liquidador.config import Settings, get_global_settings


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        settings: Settings to use instead of the global environment settings

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = settings or get_global_settings()
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["ENV"] = settings.app_env
    app.config["DEBUG"] = settings.app_env == "development"
    app.config["TESTING"] = settings.app_env == "testing"

    logging.basicConfig(level=settings.log_level)
    app.logger.setLevel(settings.log_level)

    # Shared, read-only collaborators
    from liquidador.models.reference_tables import (
        get_default_reference_table,
        load_reference_table,
    )
    from liquidador.storage.factory import create_document_store

    app.extensions["reference_table"] = (
        load_reference_table(settings.reference_table_path)
        if settings.reference_table_path
        else get_default_reference_table()
    )
    app.extensions["document_store"] = create_document_store(settings)
    app.extensions["liquidation_parameters"] = settings.to_liquidation_parameters()

    # Register blueprints
    from liquidador.blueprints.health import health_bp
    from liquidador.blueprints.liquidaciones import liquidaciones_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(liquidaciones_bp)

    return app
