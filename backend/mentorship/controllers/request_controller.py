"""
Training request endpoints.

Employees create and read their own requests; administrators list,
approve, reject and assign mentors.
"""

from flask import Blueprint, g, jsonify, request

from mentorship.controllers.helpers import (
    build_learning_service,
    build_request_service,
    get_json_body,
    list_payload,
)
from mentorship.core.auth_decorators import (
    admin_required,
    ensure_owner_or_admin,
    jwt_required,
)
from mentorship.db.session import SessionLocal
from mentorship.schemas.dtos import (
    AssignMentorRequest,
    CreateTrainingRequest,
    LearningResponse,
    TrainingRequestResponse,
    UpdateTrainingRequest,
)

request_bp = Blueprint("requests", __name__, url_prefix="/api/requests")


@request_bp.route("", methods=["POST"])
@jwt_required
def create_request():
    payload = CreateTrainingRequest.from_json(get_json_body())
    payload.validate()

    db = SessionLocal()
    try:
        created = build_request_service(db).create_request(
            g.current_user_id, payload.topic, payload.description
        )
        return jsonify(TrainingRequestResponse.from_domain(created).to_dict()), 201
    finally:
        db.close()


@request_bp.route("/my", methods=["GET"])
@jwt_required
def get_my_requests():
    db = SessionLocal()
    try:
        requests = build_request_service(db).get_user_requests(g.current_user_id)
        return jsonify(list_payload(requests, TrainingRequestResponse)), 200
    finally:
        db.close()


@request_bp.route("", methods=["GET"])
@admin_required
def list_requests():
    """All requests, optionally filtered with ?status=pending|approved|rejected."""
    status = request.args.get("status") or None
    db = SessionLocal()
    try:
        requests = build_request_service(db).get_all_requests(status)
        return jsonify(list_payload(requests, TrainingRequestResponse)), 200
    finally:
        db.close()


@request_bp.route("/<int:request_id>", methods=["GET"])
@jwt_required
def get_request(request_id):
    db = SessionLocal()
    try:
        training_request = build_request_service(db).get_request(request_id)
        ensure_owner_or_admin(training_request.user_id)
        return jsonify(TrainingRequestResponse.from_domain(training_request).to_dict()), 200
    finally:
        db.close()


@request_bp.route("/<int:request_id>", methods=["PUT"])
@jwt_required
def update_request(request_id):
    payload = UpdateTrainingRequest.from_json(get_json_body())

    db = SessionLocal()
    try:
        service = build_request_service(db)
        ensure_owner_or_admin(service.get_request(request_id).user_id)
        payload.validate()
        updated = service.update_request(request_id, payload.topic, payload.description)
        return jsonify(TrainingRequestResponse.from_domain(updated).to_dict()), 200
    finally:
        db.close()


@request_bp.route("/<int:request_id>/approve", methods=["POST"])
@admin_required
def approve_request(request_id):
    db = SessionLocal()
    try:
        approved = build_request_service(db).approve_request(request_id)
        return jsonify(TrainingRequestResponse.from_domain(approved).to_dict()), 200
    finally:
        db.close()


@request_bp.route("/<int:request_id>/reject", methods=["POST"])
@admin_required
def reject_request(request_id):
    db = SessionLocal()
    try:
        rejected = build_request_service(db).reject_request(request_id)
        return jsonify(TrainingRequestResponse.from_domain(rejected).to_dict()), 200
    finally:
        db.close()


@request_bp.route("/<int:request_id>/assign", methods=["POST"])
@admin_required
def assign_mentor(request_id):
    """Approve the request if still pending and start its learning process."""
    payload = AssignMentorRequest.from_json(get_json_body())
    payload.validate()

    db = SessionLocal()
    try:
        learning = build_learning_service(db).assign_mentor(request_id, payload.mentor_id)
        return jsonify(LearningResponse.from_domain(learning).to_dict()), 200
    finally:
        db.close()
