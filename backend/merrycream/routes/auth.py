# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

- POST /api/register         create an account (public)
- POST /api/login            exchange credentials for a 1 hour token (public)
- POST /api/change-password  rotate own password (token required)
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service
from ..services import token_service
from ..services.auth_service import AuthenticationError
from ..validation import ValidationError, ConflictError, require_json_object
from ..decorators import require_token


auth_bp = Blueprint("auth", __name__, url_prefix="/api")


@auth_bp.post("/register")
def register_route():
    try:
        data = require_json_object(request.get_json(silent=True))
        user = auth_service.create_user(
            data.get("username"),
            data.get("password"),
            data.get("role"),
        )
        return jsonify(user.to_dict()), 201
    except ConflictError as exc:
        return jsonify({"error": str(exc)}), 400
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception:
        current_app.logger.exception("Failed to register user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/login")
def login_route():
    """
    Authenticate and issue a session token.

    Wrong password and unknown username both answer 401 with the same body.
    """
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Invalid credentials"}), 401

        username = data.get("username")
        try:
            user = auth_service.authenticate(username, data.get("password"))
        except AuthenticationError:
            current_app.logger.info("Failed login for username %r", username)
            return jsonify({"error": "Invalid credentials"}), 401

        token = token_service.issue_token(user)
        body = {"token": token}
        if user.must_change_password:
            body["password_change_required"] = True
        return jsonify(body), 200

    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/change-password")
@require_token
def change_password_route():
    """
    Rotate the caller's password.

    The only protected route open to a token that still carries a pending
    password change. Log in again afterwards for a token without it.
    """
    try:
        data = require_json_object(request.get_json(silent=True))
        auth_service.change_password(
            g.current_user.id,
            data.get("current_password"),
            data.get("new_password"),
        )
        return jsonify({"message": "Password changed; please log in again"}), 200
    except AuthenticationError as exc:
        return jsonify({"error": str(exc)}), 401
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception:
        current_app.logger.exception("Failed to change password")
        return jsonify({"error": "Internal server error"}), 500
