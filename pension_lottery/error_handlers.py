"""Map exceptions to the ``{success, data, error}`` JSON envelope."""

from __future__ import annotations

import logging

from flask import Flask, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from pension_lottery.errors import AppError, ConflictError, ValidationError
from pension_lottery.utils.responses import fail

logger = logging.getLogger(__name__)


def _respond(err: AppError):  # type: ignore[no-untyped-def]
    return fail(err.code, err.message, err.status_code, err.details)


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        # Storage and record format problems mean the data file needs attention.
        if exc.status_code >= 500 or exc.code == "invalid_record":
            logger.warning("%s on %s %s: %s", exc.code, request.method, request.path, exc.message)
        else:
            logger.debug("%s on %s: %s", exc.code, request.path, exc.message)
        return _respond(exc)

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        # exc.messages is a dict of field -> list[str]
        return _respond(ValidationError(message="Invalid request", details=exc.messages))

    @app.errorhandler(IntegrityError)
    def _handle_integrity_error(exc: IntegrityError):
        # Two writers raced past the existence check for the same round.
        logger.info("Integrity error while storing a round", exc_info=exc)
        return _respond(ConflictError(message="Round already exists", details=str(exc.orig or exc)))

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        status = int(exc.code or 500)
        if status == 404:
            return fail("not_found", "Not found", 404, details={"path": request.path})
        if status == 405:
            return fail("method_not_allowed", f"{request.method} is not allowed here", 405)

        return fail("http_error", exc.description or "HTTP error", status, details={"name": exc.name})

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.path)
        return fail("internal_error", "Internal server error", 500)
