"""Logging configuration for the app and the maintenance scripts."""

from __future__ import annotations

import logging

from flask import Flask, request

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Third-party loggers that flood INFO with per-statement or per-connection lines.
_QUIET_LOGGERS = ("sqlalchemy.engine", "urllib3.connectionpool")


def _level(name: str | None) -> int:
    return getattr(logging, str(name or "INFO").upper(), logging.INFO)


def configure_script_logging(level_name: str | None = "INFO") -> None:
    logging.basicConfig(level=_level(level_name), format=LOG_FORMAT)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_logging(app: Flask) -> None:
    """Apply ``LOG_LEVEL`` to the package loggers and log each API request at DEBUG."""

    configure_script_logging(app.config.get("LOG_LEVEL"))
    level = _level(app.config.get("LOG_LEVEL"))
    logging.getLogger("pension_lottery").setLevel(level)
    app.logger.setLevel(level)

    access_logger = logging.getLogger("pension_lottery.access")

    @app.after_request
    def _log_request(response):  # type: ignore[no-untyped-def]
        if request.path.startswith("/api/"):
            access_logger.debug("%s %s -> %s", request.method, request.path, response.status_code)
        return response
