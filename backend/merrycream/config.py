# backend/merrycream/config.py
from __future__ import annotations
import os


DEV_SECRET_KEY = "dev-secret-key-change-me"
DEV_BOOTSTRAP_PASSWORD = "admin123"


def _csv(value: str) -> set[str]:
    return {item.strip() for item in value.split(",") if item.strip()}


class Config:
    # Signs session tokens; the dev default is rejected by ProductionConfig
    SECRET_KEY = os.environ.get("SECRET_KEY", DEV_SECRET_KEY)
    TOKEN_TTL_SECONDS = int(os.environ.get("TOKEN_TTL_SECONDS", "3600"))
    JWT_ALGORITHM = "HS256"
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    # SQLite DB stored next to the process by default
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",  # optional alternative location
        "sqlite:///merrycream.db",  # default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_SCHEMA = True

    INVOICE_OUTPUT_DIR = os.environ.get("INVOICE_OUTPUT_DIR", "invoices")
    INVOICE_NUMBER_PREFIX = os.environ.get("INVOICE_NUMBER_PREFIX", "INV")
    INVOICE_TITLE = "Merry Cream Invoice"

    PORT = int(os.environ.get("PORT", "5000"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    CORS_ORIGINS = _csv(os.environ.get("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:5500"))

    BOOTSTRAP_ON_STARTUP = True
    BOOTSTRAP_ADMIN_USERNAME = os.environ.get("BOOTSTRAP_ADMIN_USERNAME", "admin")
    BOOTSTRAP_ADMIN_PASSWORD = os.environ.get("BOOTSTRAP_ADMIN_PASSWORD", DEV_BOOTSTRAP_PASSWORD)


class OpenConfig(Config):
    """Single-page deployment: any origin, separate database file."""
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///database.db")
    CORS_ORIGINS = _csv(os.environ.get("CORS_ORIGINS", "*"))


class ProductionConfig(Config):
    SECRET_KEY = os.environ.get("SECRET_KEY")
    BOOTSTRAP_ADMIN_PASSWORD = os.environ.get("BOOTSTRAP_ADMIN_PASSWORD")
    # Schema comes from `flask db upgrade`
    AUTO_CREATE_SCHEMA = False


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    BCRYPT_ROUNDS = 4
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    BOOTSTRAP_ADMIN_PASSWORD = DEV_BOOTSTRAP_PASSWORD


CONFIGS = {
    "default": Config,
    "open": OpenConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(name: str | None = None) -> type[Config]:
    name = name or os.environ.get("MERRYCREAM_CONFIG", "default")
    try:
        return CONFIGS[name]
    except KeyError:
        raise ValueError(f"Unknown config {name!r}; expected one of {', '.join(sorted(CONFIGS))}")


def check_required_secrets(config) -> None:
    """Refuse to run production without operator-supplied secrets."""
    missing = [key for key in ("SECRET_KEY", "BOOTSTRAP_ADMIN_PASSWORD") if not config.get(key)]
    if missing:
        raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")
