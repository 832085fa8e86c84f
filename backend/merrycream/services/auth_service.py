# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Credential store operations: registration, credential checks, bootstrap of the
first administrator and password rotation.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor 12, random salt per hash)
- Unknown username and wrong password fail identically
- Session tokens are issued separately (see token_service.py)
"""

import bcrypt
from functools import lru_cache
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import User, ROLES, DEFAULT_ROLE
from ..validation import ValidationError, ConflictError, coerce_text
from merrycream.time_utils import utcnow


MIN_PASSWORD_LENGTH = 8

DEFAULT_BCRYPT_ROUNDS = 12


class AuthenticationError(Exception):
    """Raised when credentials are missing or wrong (401)."""
    pass


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet strength requirements."""
    pass


def validate_password_strength(password: str) -> None:
    if not isinstance(password, str) or not password:
        raise PasswordValidationError("password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


def _bcrypt_rounds() -> int:
    return current_app.config.get("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS)


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    # Checked when the username is unknown so both failure paths cost the same
    return bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def hash_password(password: str) -> str:
    """Hash password using bcrypt (cost factor 12 unless BCRYPT_ROUNDS says otherwise)."""
    salt = bcrypt.gensalt(rounds=_bcrypt_rounds())
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() compares in constant time. A malformed stored hash
    counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def get_user(user_id: int) -> User | None:
    return db.session.get(User, user_id)


def list_users() -> list[User]:
    return db.session.query(User).order_by(User.id.asc()).all()


def create_user(
    username,
    password,
    role=None,
    *,
    must_change_password: bool = False,
    enforce_strength: bool = True,
) -> User:
    """
    Register a new account.

    Raises:
        ValidationError: missing username, weak password, unknown role
        ConflictError: username already taken
    """
    username = coerce_text("username", username, required=True, max_length=64)
    if enforce_strength:
        validate_password_strength(password)
    elif not isinstance(password, str) or not password:
        raise PasswordValidationError("password is required")

    role = DEFAULT_ROLE if role is None else role
    if role not in ROLES:
        raise ValidationError(f"role must be one of: {', '.join(ROLES)}")

    if db.session.query(User.id).filter_by(username=username).first():
        raise ConflictError("Username already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
        must_change_password=must_change_password,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        db.session.rollback()
        raise ConflictError("Username already exists")
    return user


def authenticate(username, password) -> User:
    """
    Check credentials and return the user.

    Raises AuthenticationError for an unknown username or a wrong password;
    callers cannot tell the two apart.
    """
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise AuthenticationError("Invalid credentials")

    user = db.session.query(User).filter_by(username=username.strip()).first()
    if not user:
        verify_password(password, _dummy_hash(_bcrypt_rounds()))
        raise AuthenticationError("Invalid credentials")

    if not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")

    user.last_login_at = utcnow()
    db.session.commit()
    return user


def change_password(user_id: int, current_password, new_password) -> User:
    """
    Rotate a password and clear any pending forced rotation.

    Raises:
        AuthenticationError: current password wrong or user gone
        PasswordValidationError: new password weak or unchanged
    """
    user = get_user(user_id)
    if not user or not isinstance(current_password, str) or not verify_password(current_password, user.password_hash):
        raise AuthenticationError("Invalid credentials")

    validate_password_strength(new_password)
    if new_password == current_password:
        raise PasswordValidationError("New password must differ from the current password")

    user.password_hash = hash_password(new_password)
    user.must_change_password = False
    db.session.commit()
    return user


def ensure_bootstrap_admin() -> User | None:
    """
    Create the default administrator if, and only if, no users exist.

    The account must change its password on first login. Returns the new
    user, or None when users already exist.
    """
    if db.session.query(User.id).first():
        return None

    username = current_app.config["BOOTSTRAP_ADMIN_USERNAME"]
    password = current_app.config["BOOTSTRAP_ADMIN_PASSWORD"]
    if not password:
        raise RuntimeError("BOOTSTRAP_ADMIN_PASSWORD must be configured to create the first administrator")

    try:
        user = create_user(
            username,
            password,
            "admin",
            must_change_password=True,
            enforce_strength=False,
        )
    except ConflictError:
        # Another worker bootstrapped first
        return None

    current_app.logger.warning(
        "Created bootstrap administrator %r; password change is required on first login",
        user.username,
    )
    return user
