"""
Translate exceptions into JSON error responses.

Known application errors carry their own HTTP status. Anything else is
logged with its traceback and answered with a generic 500 body.
"""

import logging

from flask import Flask, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from mentorship.core.exceptions import AppError

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        if error.status_code >= 500:
            logger.error(
                "Application error",
                extra={"context": {"path": request.path, "error": error.message}},
                exc_info=True,
            )
        else:
            logger.info(
                "Request rejected",
                extra={
                    "context": {
                        "path": request.path,
                        "status_code": error.status_code,
                        "error_type": type(error).__name__,
                    }
                },
            )
        return jsonify({"error": error.message}), error.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error: IntegrityError):
        # Unique or foreign key violation that slipped past the service checks
        logger.warning(
            "Integrity error",
            extra={"context": {"path": request.path, "error": str(error.orig)}},
        )
        return jsonify({"error": "conflicting data"}), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        return jsonify({"error": (error.description or error.name)}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.error(
            "Unhandled exception",
            extra={
                "context": {
                    "path": request.path,
                    "method": request.method,
                    "error_type": type(error).__name__,
                }
            },
            exc_info=True,
        )
        return jsonify({"error": "internal server error"}), 500
