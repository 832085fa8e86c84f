"""Run modes, secrets and CORS."""

import pytest

from merrycream import create_app
from merrycream.config import Config, OpenConfig, get_config


class TestConfigSelection:

    def test_named_configs(self):
        assert get_config("default") is Config
        assert get_config("open") is OpenConfig

    def test_unknown_config(self):
        with pytest.raises(ValueError):
            get_config("staging")

    def test_env_selects_config(self, monkeypatch):
        monkeypatch.setenv("MERRYCREAM_CONFIG", "open")
        assert get_config() is OpenConfig

    def test_modes_use_different_databases(self):
        assert Config.SQLALCHEMY_DATABASE_URI != OpenConfig.SQLALCHEMY_DATABASE_URI


class TestProductionSecrets:

    def test_refuses_to_start_without_secrets(self, tmp_path):
        with pytest.raises(RuntimeError, match="SECRET_KEY"):
            create_app("production", {
                "SECRET_KEY": None,
                "BOOTSTRAP_ADMIN_PASSWORD": "Str0ng-Bootstrap",
                "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'prod.sqlite3'}",
            })

    def test_refuses_to_start_without_bootstrap_password(self, tmp_path):
        with pytest.raises(RuntimeError, match="BOOTSTRAP_ADMIN_PASSWORD"):
            create_app("production", {
                "SECRET_KEY": "prod-secret",
                "BOOTSTRAP_ADMIN_PASSWORD": None,
                "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'prod.sqlite3'}",
            })

    def test_starts_with_secrets(self, tmp_path):
        app = create_app("production", {
            "SECRET_KEY": "prod-secret",
            "BOOTSTRAP_ADMIN_PASSWORD": "Str0ng-Bootstrap",
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'prod.sqlite3'}",
        })
        assert app.config["AUTO_CREATE_SCHEMA"] is False


class TestCors:

    def test_allowed_origin_echoed(self, client):
        resp = client.post("/api/login", json={}, headers={"Origin": "http://localhost:3000"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"
        assert resp.headers["Vary"] == "Origin"

    def test_other_origin_gets_no_header(self, client):
        resp = client.post("/api/login", json={}, headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers

    def test_open_mode_allows_any_origin(self, tmp_path):
        app = create_app("open", {
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'open.sqlite3'}",
            "INVOICE_OUTPUT_DIR": str(tmp_path / "invoices"),
            "BCRYPT_ROUNDS": 4,
        })
        resp = app.test_client().options("/api/stores", headers={"Origin": "http://anywhere.example"})
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert "Authorization" in resp.headers["Access-Control-Allow-Headers"]
