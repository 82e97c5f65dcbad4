"""
Health controller - liveness and readiness endpoints for monitoring.

No authentication required.
"""

import logging

from flask import Blueprint, current_app, jsonify

from mentorship.db.session import check_database_connection

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")


@health_bp.route("", methods=["GET"])
def liveness():
    """The process is up and serving requests."""
    return jsonify({"status": "ok"}), 200


@health_bp.route("/ready", methods=["GET"])
def readiness():
    """
    Check that the database answers a round trip.

    Status codes:
        200: database reachable
        503: database unreachable
    """
    db_ok = check_database_connection()
    if not db_ok:
        logger.warning(
            "Readiness check failed",
            extra={"context": {"endpoint": "/health/ready", "database": "disconnected"}},
        )
    return (
        jsonify(
            {
                "status": "ready" if db_ok else "unavailable",
                "database": "connected" if db_ok else "disconnected",
                "version": current_app.config.get("GIT_SHA", "unknown"),
            }
        ),
        200 if db_ok else 503,
    )
