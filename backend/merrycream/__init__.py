# backend/merrycream/__init__.py
import os

from flask import Flask, request
from sqlalchemy import inspect

from .config import get_config, check_required_secrets, ProductionConfig
from .extensions import db, migrate


def create_app(config_name: str | None = None, config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    if config_overrides:
        app.config.update(config_overrides)

    if issubclass(config_class, ProductionConfig):
        check_required_secrets(app.config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db, directory=os.path.join(os.path.dirname(app.root_path), "migrations"))

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.auth import auth_bp
    from .routes.stores import stores_bp
    from .routes.invoices import invoices_bp
    from .routes.reports import reports_bp
    from .routes.documents import documents_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(stores_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(documents_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = app.config["CORS_ORIGINS"]
        if "*" in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = "*"
        elif origin and origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
        else:
            return response
        response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
        return response

    with app.app_context():
        if app.config["AUTO_CREATE_SCHEMA"]:
            db.create_all()
        if app.config["BOOTSTRAP_ON_STARTUP"] and inspect(db.engine).has_table("users"):
            from .services.auth_service import ensure_bootstrap_admin
            ensure_bootstrap_admin()

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
