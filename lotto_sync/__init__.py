"""Lotto draw sync job and read API."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv
from flask import Flask


def create_app(overrides: Mapping[str, Any] | None = None) -> Flask:
    """Application factory.

    Args:
        overrides: config values applied on top of the environment config.

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from lotto_sync.config import get_config
    from lotto_sync.db import init_db
    from lotto_sync.error_handlers import register_error_handlers
    from lotto_sync.logging_config import configure_logging
    from lotto_sync.routes.health import health_bp
    from lotto_sync.routes.lotto_draws import lotto_draws_bp

    app = Flask(__name__)
    app.config.from_object(get_config())
    if overrides:
        app.config.update(overrides)

    configure_logging(app)
    init_db(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(lotto_draws_bp, url_prefix="/api")

    return app
