"""
Learning process endpoints.

Every per-process route is restricted to the mentee who owns the process
or an administrator. Plan and notes changes only apply to active
processes; completion is terminal.
"""

from flask import Blueprint, g, jsonify

from mentorship.controllers.helpers import (
    build_learning_service,
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
    CompleteLearningRequest,
    LearningOverrideRequest,
    LearningResponse,
    PlanItemRequest,
    UpdateNotesRequest,
    UpdatePlanRequest,
)

learning_bp = Blueprint("learnings", __name__, url_prefix="/api/learnings")


def _owned_learning_service(db, learning_id):
    """Build the service and check the caller may touch this process."""
    service = build_learning_service(db)
    learning = service.get_learning(learning_id)
    ensure_owner_or_admin(learning.user_id)
    return service, learning


def _learning_response(learning, status_code=200):
    return jsonify(LearningResponse.from_domain(learning).to_dict()), status_code


@learning_bp.route("", methods=["GET"])
@jwt_required
def list_my_learnings():
    db = SessionLocal()
    try:
        learnings = build_learning_service(db).get_user_learnings(g.current_user_id)
        return jsonify(list_payload(learnings, LearningResponse)), 200
    finally:
        db.close()


@learning_bp.route("/all", methods=["GET"])
@admin_required
def list_all_learnings():
    db = SessionLocal()
    try:
        learnings = build_learning_service(db).get_all_learnings()
        return jsonify(list_payload(learnings, LearningResponse)), 200
    finally:
        db.close()


@learning_bp.route("/<int:learning_id>", methods=["GET"])
@jwt_required
def get_learning(learning_id):
    db = SessionLocal()
    try:
        _, learning = _owned_learning_service(db, learning_id)
        return _learning_response(learning)
    finally:
        db.close()


@learning_bp.route("/<int:learning_id>/progress", methods=["GET"])
@jwt_required
def get_progress(learning_id):
    db = SessionLocal()
    try:
        _, learning = _owned_learning_service(db, learning_id)
        return (
            jsonify(
                {
                    "learningId": learning.id,
                    "progress": learning.progress(),
                    "completedItems": learning.completed_items_count,
                    "totalItems": len(learning.plan),
                }
            ),
            200,
        )
    finally:
        db.close()


@learning_bp.route("/<int:learning_id>/plan", methods=["PUT"])
@jwt_required
def update_plan(learning_id):
    payload = UpdatePlanRequest.from_json(get_json_body(allow_list=True))

    db = SessionLocal()
    try:
        service, _ = _owned_learning_service(db, learning_id)
        payload.validate()
        return _learning_response(service.update_plan(learning_id, payload.plan))
    finally:
        db.close()


@learning_bp.route("/<int:learning_id>/plan", methods=["POST"])
@jwt_required
def add_plan_item(learning_id):
    payload = PlanItemRequest.from_json(get_json_body())

    db = SessionLocal()
    try:
        service, _ = _owned_learning_service(db, learning_id)
        payload.validate_for_add()
        return _learning_response(service.add_plan_item(learning_id, payload.text), 201)
    finally:
        db.close()


@learning_bp.route("/<int:learning_id>/plan/<int:item_id>", methods=["PUT"])
@jwt_required
def update_plan_item(learning_id, item_id):
    """Set text (empty keeps the current text) and completion of one item."""
    payload = PlanItemRequest.from_json(get_json_body())

    db = SessionLocal()
    try:
        service, _ = _owned_learning_service(db, learning_id)
        payload.validate_for_update()
        learning = service.update_plan_item(
            learning_id, item_id, payload.text, payload.completed
        )
        return _learning_response(learning)
    finally:
        db.close()


@learning_bp.route("/<int:learning_id>/plan/<int:item_id>/toggle", methods=["PATCH"])
@jwt_required
def toggle_plan_item(learning_id, item_id):
    db = SessionLocal()
    try:
        service, _ = _owned_learning_service(db, learning_id)
        return _learning_response(service.toggle_plan_item(learning_id, item_id))
    finally:
        db.close()


@learning_bp.route("/<int:learning_id>/plan/<int:item_id>", methods=["DELETE"])
@jwt_required
def remove_plan_item(learning_id, item_id):
    db = SessionLocal()
    try:
        service, _ = _owned_learning_service(db, learning_id)
        return _learning_response(service.remove_plan_item(learning_id, item_id))
    finally:
        db.close()


@learning_bp.route("/<int:learning_id>/notes", methods=["PUT"])
@jwt_required
def update_notes(learning_id):
    payload = UpdateNotesRequest.from_json(get_json_body())

    db = SessionLocal()
    try:
        service, _ = _owned_learning_service(db, learning_id)
        return _learning_response(service.update_notes(learning_id, payload.notes))
    finally:
        db.close()


@learning_bp.route("/<int:learning_id>/complete", methods=["POST"])
@jwt_required
def complete_learning(learning_id):
    payload = CompleteLearningRequest.from_json(get_json_body())

    db = SessionLocal()
    try:
        service, _ = _owned_learning_service(db, learning_id)
        payload.validate()
        learning = service.complete_learning(learning_id, payload.rating, payload.comment)
        return _learning_response(learning)
    finally:
        db.close()


@learning_bp.route("/<int:learning_id>", methods=["PUT"])
@admin_required
def override_learning(learning_id):
    """Administrative correction of status, plan, notes and feedback."""
    payload = LearningOverrideRequest.from_json(get_json_body())
    payload.validate()

    db = SessionLocal()
    try:
        learning = build_learning_service(db).update_learning(learning_id, payload.changes)
        return _learning_response(learning)
    finally:
        db.close()
