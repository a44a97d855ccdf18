# Overview: Flask API routes for user management (admin).

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_auth, require_permission
from ..services import auth_service
from ..services.auth_service import AuthorizationError
from ..validation import ValidationError, ConflictError, coerce_int


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
@require_permission("MANAGE_USERS")
def list_users_route():
    try:
        page = coerce_int("page", request.args.get("page", "1"), minimum=1)
        limit = min(coerce_int("limit", request.args.get("limit", "10"), minimum=1), 500)
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    return jsonify(auth_service.list_users(page=page, limit=limit))


@users_bp.post("")
@require_auth
@require_permission("MANAGE_USERS")
def create_user_route():
    """
    Request body:
    {
        "username": "kasir1",
        "password": "rahasia123",
        "role": "user"  (optional, default user)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        user = auth_service.create_user(
            username=data.get("username"),
            password=data.get("password") or "",
            role=data.get("role") or "user",
        )
        return jsonify({"user": user.to_dict()}), 201

    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to create user")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.put("/<int:user_id>/role")
@require_auth
@require_permission("CHANGE_USER_ROLE")
def change_role_route(user_id: int):
    """
    Request body:
    {
        "role": "admin"
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        user = auth_service.change_role(g.current_user, user_id, data.get("role"))
        return jsonify({"user": user.to_dict()})
    except AuthorizationError as e:
        return jsonify({"error": str(e)}), 403
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except LookupError as e:
        return jsonify({"error": str(e)}), 404
