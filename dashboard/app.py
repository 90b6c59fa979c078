"""Flask application for the dose calculation dashboard API."""

import logging

from flask import Flask

from dose_engine.config import config
from dashboard.routes import dose_calculation_bp

logger = logging.getLogger(__name__)


def create_app(test_config: dict | None = None) -> Flask:
    """Create and configure the dashboard app."""
    app = Flask(__name__)
    # Keep result fields in the order the models emit them
    app.json.sort_keys = False
    if test_config:
        app.config.update(test_config)

    app.register_blueprint(dose_calculation_bp)
    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    create_app().run(host=config.DASHBOARD_HOST, port=config.DASHBOARD_PORT)
