"""Logging configuration."""

from __future__ import annotations

import logging

from flask import Flask


def setup_logging(level_name: str = "INFO") -> None:
    """Configure root logging for the app and the CLI.

    Progress and run summaries of a sync are plain log lines.
    """

    level = getattr(logging, str(level_name or "INFO").upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Reduce noisy loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)


def configure_logging(app: Flask) -> None:
    """Configure logging from the Flask app config."""

    setup_logging(str(app.config.get("LOG_LEVEL", "INFO")))
