from __future__ import annotations

from ..extensions import db


ROLES = ("admin", "manager")
DEFAULT_ROLE = "manager"


class User(db.Model):
    """
    Accounts that may log in and obtain a session token.

    Passwords are kept only as bcrypt hashes. The bootstrap administrator is
    created with must_change_password set so the well-known default is
    rotated on first use.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.CheckConstraint("role IN ('admin', 'manager')", name="ck_users_role"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), nullable=False, unique=True, index=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(32), nullable=False, default=DEFAULT_ROLE, server_default=DEFAULT_ROLE)
    must_change_password = db.Column(db.Boolean, nullable=False, default=False, server_default="0")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    last_login_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} role={self.role!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
        }
