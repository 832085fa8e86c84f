# Overview: Service-layer operations for session tokens; stateless signed JWTs.

"""
Session Token Service

Tokens are self-contained HS256 JWTs signed with SECRET_KEY. Nothing is
stored server side: a token is valid until its exp claim, with no sliding
expiry and no re-issuance on use.

Claims: id, username, role, iat, exp, and pwd_change while the account
still has to rotate its password.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from flask import current_app
from jose import jwt, JWTError, ExpiredSignatureError

from ..models import User
from merrycream.time_utils import utcnow


class TokenError(Exception):
    """Raised when a token is invalid or expired (403)."""
    pass


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified token."""
    id: int
    username: str
    role: str
    expires_at: datetime
    password_change_required: bool = False

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "role": self.role}


def token_ttl() -> timedelta:
    return timedelta(seconds=current_app.config["TOKEN_TTL_SECONDS"])


def issue_token(user: User, *, now: datetime | None = None) -> str:
    """
    Sign a token for the user, valid for TOKEN_TTL_SECONDS from `now`.

    `now` defaults to the current UTC time (naive, as utcnow returns).
    """
    issued_at = now or utcnow()
    claims = {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "iat": issued_at,
        "exp": issued_at + token_ttl(),
    }
    if user.must_change_password:
        claims["pwd_change"] = True

    return jwt.encode(
        claims,
        current_app.config["SECRET_KEY"],
        algorithm=current_app.config["JWT_ALGORITHM"],
    )


def verify_token(token: str) -> TokenClaims:
    """
    Verify signature and expiry and return the embedded claims unchanged.

    Raises TokenError for bad signatures, expired tokens and tokens that
    lack the identity claims.
    """
    try:
        payload = jwt.decode(
            token,
            current_app.config["SECRET_KEY"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
        )
    except ExpiredSignatureError:
        raise TokenError("Token expired")
    except JWTError:
        raise TokenError("Invalid token")

    user_id = payload.get("id")
    username = payload.get("username")
    role = payload.get("role")
    expires = payload.get("exp")
    if not isinstance(user_id, int) or not isinstance(username, str) or not isinstance(role, str):
        raise TokenError("Invalid token")
    if not isinstance(expires, int):
        raise TokenError("Invalid token")

    return TokenClaims(
        id=user_id,
        username=username,
        role=role,
        expires_at=datetime.fromtimestamp(expires, tz=timezone.utc).replace(tzinfo=None),
        password_change_required=bool(payload.get("pwd_change", False)),
    )
