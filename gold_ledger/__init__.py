"""Gold program ledger Flask application package."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv
from flask import Flask


def create_app(overrides: Mapping[str, Any] | None = None) -> Flask:
    """Application factory.

    Args:
        overrides: config keys applied after the environment config
            (the tests point DATABASE_URL at a temporary database).

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from gold_ledger.config import get_config
    from gold_ledger.db import init_db
    from gold_ledger.error_handlers import register_error_handlers
    from gold_ledger.logging_config import configure_logging
    from gold_ledger.routes.health import health_bp
    from gold_ledger.routes.lots import lots_bp
    from gold_ledger.routes.monthly_data import monthly_data_bp
    from gold_ledger.routes.programs import programs_bp
    from gold_ledger.routes.users import users_bp
    from gold_ledger.routes.winners import winners_bp
    from gold_ledger.utils.converters import IdConverter

    app = Flask(__name__)
    app.url_map.converters["id"] = IdConverter
    app.config.from_object(get_config())
    if overrides:
        app.config.update(overrides)

    configure_logging(app)
    init_db(app)
    register_error_handlers(app)

    prefix = str(app.config.get("API_PREFIX", "/api")).rstrip("/")

    app.register_blueprint(health_bp)
    for blueprint in (programs_bp, lots_bp, monthly_data_bp, winners_bp, users_bp):
        app.register_blueprint(blueprint, url_prefix=prefix)

    return app
