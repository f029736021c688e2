"""Flask application package for the Pension Lottery analytics dashboard."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv
from flask import Flask


def create_app(config_overrides: Mapping[str, Any] | None = None) -> Flask:
    """Application factory.

    Args:
        config_overrides: values applied on top of the environment config
            (used by tests and scripts).

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from pension_lottery.config import get_config
    from pension_lottery.db import init_db
    from pension_lottery.error_handlers import register_error_handlers
    from pension_lottery.logging_config import configure_logging
    from pension_lottery.repositories.draw_repository import get_draw_repository
    from pension_lottery.routes.analysis import analysis_bp
    from pension_lottery.routes.health import health_bp
    from pension_lottery.routes.lottery_data import lottery_data_bp
    from pension_lottery.routes.prediction import prediction_bp

    app = Flask(__name__)
    app.config.from_object(get_config())
    if config_overrides:
        app.config.update(dict(config_overrides))

    configure_logging(app)
    init_db(app)
    register_error_handlers(app)

    app.extensions["draw_repository"] = get_draw_repository(app.config)

    app.register_blueprint(health_bp)
    app.register_blueprint(lottery_data_bp)
    app.register_blueprint(analysis_bp)
    app.register_blueprint(prediction_bp)

    return app
