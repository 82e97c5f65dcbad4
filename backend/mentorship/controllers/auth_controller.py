"""
Auth controller: registration, login and the caller's own profile.
"""

import logging

from flask import Blueprint, g, jsonify

from mentorship.controllers.helpers import (
    build_auth_service,
    build_user_service,
    get_json_body,
)
from mentorship.core.auth_decorators import jwt_required
from mentorship.core.limiter_config import AUTH_RATE_LIMIT, limiter
from mentorship.db.session import SessionLocal
from mentorship.schemas.dtos import (
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/register", methods=["POST"])
@limiter.limit(AUTH_RATE_LIMIT)
def register():
    """Create an account. An unknown or missing role registers an employee."""
    payload = RegisterRequest.from_json(get_json_body())
    payload.validate()

    db = SessionLocal()
    try:
        service = build_auth_service(db)
        user = service.register(
            name=payload.name,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            department=payload.department,
            job_title=payload.job_title,
            telegram=payload.telegram,
        )
        return jsonify(UserResponse.from_domain(user).to_dict()), 201
    finally:
        db.close()


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(AUTH_RATE_LIMIT)
def login():
    payload = LoginRequest.from_json(get_json_body())
    payload.validate()

    db = SessionLocal()
    try:
        service = build_auth_service(db)
        token, user = service.login(payload.email, payload.password)
        return (
            jsonify({"token": token, "user": UserResponse.from_domain(user).to_dict()}),
            200,
        )
    finally:
        db.close()


@auth_bp.route("/me", methods=["GET"])
@jwt_required
def get_me():
    db = SessionLocal()
    try:
        user = build_auth_service(db).get_user_by_id(g.current_user_id)
        return jsonify(UserResponse.from_domain(user).to_dict()), 200
    finally:
        db.close()


@auth_bp.route("/me", methods=["PUT"])
@jwt_required
def update_me():
    payload = ProfileUpdateRequest.from_json(get_json_body())
    payload.validate()

    db = SessionLocal()
    try:
        user = build_user_service(db).update_current_user(
            g.current_user_id, payload.changes
        )
        return jsonify(UserResponse.from_domain(user).to_dict()), 200
    finally:
        db.close()
