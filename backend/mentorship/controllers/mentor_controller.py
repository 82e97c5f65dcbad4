"""
Mentor endpoints. Any authenticated user may browse mentors; changes are
admin only.
"""

from flask import Blueprint, jsonify, request

from mentorship.controllers.helpers import (
    build_learning_service,
    build_mentor_service,
    get_json_body,
    list_payload,
)
from mentorship.core.auth_decorators import admin_required, jwt_required
from mentorship.db.session import SessionLocal
from mentorship.schemas.dtos import LearningResponse, MentorRequest, MentorResponse

mentor_bp = Blueprint("mentors", __name__, url_prefix="/api/mentors")


@mentor_bp.route("", methods=["GET"])
@jwt_required
def list_mentors():
    """All mentors, or only those with a free slot when ?available=true."""
    available = request.args.get("available", "").strip().lower() in ("true", "1", "yes")
    db = SessionLocal()
    try:
        service = build_mentor_service(db)
        mentors = service.get_available_mentors() if available else service.get_all_mentors()
        return jsonify(list_payload(mentors, MentorResponse)), 200
    finally:
        db.close()


@mentor_bp.route("/<int:mentor_id>", methods=["GET"])
@jwt_required
def get_mentor(mentor_id):
    db = SessionLocal()
    try:
        mentor = build_mentor_service(db).get_mentor(mentor_id)
        return jsonify(MentorResponse.from_domain(mentor).to_dict()), 200
    finally:
        db.close()


@mentor_bp.route("", methods=["POST"])
@admin_required
def create_mentor():
    payload = MentorRequest.from_json(get_json_body())
    payload.validate()

    db = SessionLocal()
    try:
        mentor = build_mentor_service(db).create_mentor(
            name=payload.name,
            job_title=payload.job_title,
            email=payload.email,
            experience=payload.experience,
            telegram=payload.telegram,
        )
        return jsonify(MentorResponse.from_domain(mentor).to_dict()), 201
    finally:
        db.close()


@mentor_bp.route("/<int:mentor_id>", methods=["PUT"])
@admin_required
def update_mentor(mentor_id):
    """Full update, workload included (administrative override)."""
    payload = MentorRequest.from_json(get_json_body())
    payload.validate()

    db = SessionLocal()
    try:
        mentor = build_mentor_service(db).update_mentor(
            mentor_id,
            name=payload.name,
            job_title=payload.job_title,
            email=payload.email,
            experience=payload.experience,
            telegram=payload.telegram,
            workload=payload.workload,
        )
        return jsonify(MentorResponse.from_domain(mentor).to_dict()), 200
    finally:
        db.close()


@mentor_bp.route("/<int:mentor_id>", methods=["DELETE"])
@admin_required
def delete_mentor(mentor_id):
    db = SessionLocal()
    try:
        build_mentor_service(db).delete_mentor(mentor_id)
        return jsonify({"message": "mentor deleted"}), 200
    finally:
        db.close()


@mentor_bp.route("/<int:mentor_id>/learnings", methods=["GET"])
@admin_required
def get_mentor_learnings(mentor_id):
    db = SessionLocal()
    try:
        learnings = build_learning_service(db).get_mentor_learnings(mentor_id)
        return jsonify(list_payload(learnings, LearningResponse)), 200
    finally:
        db.close()
