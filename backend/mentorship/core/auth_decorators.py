"""
Authentication helpers for the JSON API.

Every protected route expects ``Authorization: Bearer <token>``. The
decorators validate the token with the application's ``TokenManager``
(stored in ``app.extensions``) and place the caller's identity on ``g``:

- ``g.current_user_id``
- ``g.current_user_role``
- ``g.current_user_email``

DECORATOR GUIDE:
- @jwt_required: any authenticated user
- @admin_required: authenticated user with role 'admin' (implies jwt_required)
- ensure_owner_or_admin(owner_id): call inside a route once the resource
  owner is known; raises ForbiddenError otherwise

Examples:
    @learning_bp.route("/<int:learning_id>", methods=["GET"])
    @jwt_required
    def get_learning(learning_id):
        learning = service.get_learning(learning_id)
        ensure_owner_or_admin(learning.user_id)
        ...
"""

from functools import wraps

from flask import current_app, g, jsonify, request

from mentorship.core.exceptions import AppError, ForbiddenError
from mentorship.domain.entities import UserRole

TOKEN_MANAGER_EXTENSION = "mentorship.tokens"


def _authenticate():
    """Validate the bearer token; returns an error response or None."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return jsonify({"error": "missing or invalid authorization header"}), 401

    token = auth_header[len("Bearer "):].strip()
    if not token:
        return jsonify({"error": "missing or invalid authorization header"}), 401

    tokens = current_app.extensions[TOKEN_MANAGER_EXTENSION]
    try:
        claims = tokens.validate(token)
    except AppError as e:
        return jsonify({"error": e.message}), e.status_code

    g.current_user_id = claims.user_id
    g.current_user_role = claims.role
    g.current_user_email = claims.email
    return None


def jwt_required(f):
    """Decorator to require JWT authentication for API endpoints.

    If the header is missing, malformed, tampered or expired, returns 401.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        error = _authenticate()
        if error is not None:
            return error
        return f(*args, **kwargs)

    return decorated_function


def admin_required(f):
    """Decorator to require an authenticated administrator.

    Returns:
        - 401 if no valid token
        - 403 if the token belongs to a non-admin
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        error = _authenticate()
        if error is not None:
            return error
        if g.current_user_role != UserRole.ADMIN:
            return jsonify({"error": ForbiddenError.default_message}), 403
        return f(*args, **kwargs)

    return decorated_function


def is_admin() -> bool:
    return g.get("current_user_role") == UserRole.ADMIN


def is_owner_or_admin(owner_id: int) -> bool:
    """True when the caller owns the resource or has the admin role."""
    return is_admin() or g.get("current_user_id") == owner_id


def ensure_owner_or_admin(owner_id: int) -> None:
    if not is_owner_or_admin(owner_id):
        raise ForbiddenError("forbidden: access denied")
