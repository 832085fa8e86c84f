# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .services import token_service
from .services.token_service import TokenError


def _bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _authenticate(f, *, allow_pending_password_change: bool):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _bearer_token()
        if not token:
            return jsonify({"error": "Authentication required"}), 401

        try:
            claims = token_service.verify_token(token)
        except TokenError:
            return jsonify({"error": "Invalid or expired token"}), 403

        if claims.password_change_required and not allow_pending_password_change:
            return jsonify({"error": "Password change required"}), 403

        g.current_user = claims
        return f(*args, **kwargs)

    return decorated_function


def require_auth(f):
    """
    Require a valid session token.

    Sets g.current_user to the verified TokenClaims.

    Returns 401 when the Authorization header is missing or not a Bearer
    token, 403 when the token is invalid, expired, or belongs to an account
    that still has to change its password.
    """
    return _authenticate(f, allow_pending_password_change=False)


def require_token(f):
    """Like require_auth, but lets a pending password change through."""
    return _authenticate(f, allow_pending_password_change=True)
