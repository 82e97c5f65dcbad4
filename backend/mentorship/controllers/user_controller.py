"""
User administration endpoints (admin only).
"""

from flask import Blueprint, jsonify

from mentorship.controllers.helpers import (
    build_learning_service,
    build_request_service,
    build_user_service,
    get_json_body,
    list_payload,
)
from mentorship.core.auth_decorators import admin_required
from mentorship.db.session import SessionLocal
from mentorship.schemas.dtos import (
    LearningResponse,
    ProfileUpdateRequest,
    TrainingRequestResponse,
    UserResponse,
)

user_bp = Blueprint("users", __name__, url_prefix="/api/users")


@user_bp.route("", methods=["GET"])
@admin_required
def list_users():
    db = SessionLocal()
    try:
        users = build_user_service(db).list_users()
        return jsonify(list_payload(users, UserResponse)), 200
    finally:
        db.close()


@user_bp.route("/<int:user_id>", methods=["GET"])
@admin_required
def get_user(user_id):
    db = SessionLocal()
    try:
        user = build_user_service(db).get_user(user_id)
        return jsonify(UserResponse.from_domain(user).to_dict()), 200
    finally:
        db.close()


@user_bp.route("/<int:user_id>", methods=["PUT"])
@admin_required
def update_user(user_id):
    payload = ProfileUpdateRequest.from_json(get_json_body())
    payload.validate()

    db = SessionLocal()
    try:
        user = build_user_service(db).update_user(user_id, payload.changes)
        return jsonify(UserResponse.from_domain(user).to_dict()), 200
    finally:
        db.close()


@user_bp.route("/<int:user_id>", methods=["DELETE"])
@admin_required
def delete_user(user_id):
    db = SessionLocal()
    try:
        build_user_service(db).delete_user(user_id)
        return jsonify({"message": "user deleted"}), 200
    finally:
        db.close()


@user_bp.route("/<int:user_id>/requests", methods=["GET"])
@admin_required
def get_user_requests(user_id):
    db = SessionLocal()
    try:
        build_user_service(db).get_user(user_id)
        requests = build_request_service(db).get_user_requests(user_id)
        return jsonify(list_payload(requests, TrainingRequestResponse)), 200
    finally:
        db.close()


@user_bp.route("/<int:user_id>/learnings", methods=["GET"])
@admin_required
def get_user_learnings(user_id):
    db = SessionLocal()
    try:
        build_user_service(db).get_user(user_id)
        learnings = build_learning_service(db).get_user_learnings(user_id)
        return jsonify(list_payload(learnings, LearningResponse)), 200
    finally:
        db.close()
