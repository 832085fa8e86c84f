"""
Pytest fixtures for the Merry Cream backend tests.

Each test gets its own SQLite file and invoice output directory under
tmp_path, a test client, and an authenticated manager account.
"""

import pytest

from merrycream import create_app
from merrycream.extensions import db
from merrycream.models import Store


MANAGER_PASSWORD = "Password123!"


@pytest.fixture
def app(tmp_path):
    """Create application for testing."""
    app = create_app("testing", {
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'merrycream-test.sqlite3'}",
        "INVOICE_OUTPUT_DIR": str(tmp_path / "invoices"),
    })

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def invoice_dir(app):
    from merrycream.services import document_service
    return document_service.output_dir()


def register(client, username: str, password: str = MANAGER_PASSWORD, role: str | None = None):
    body = {"username": username, "password": password}
    if role is not None:
        body["role"] = role
    return client.post("/api/register", json=body)


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post("/api/login", json={
        "username": username,
        "password": password,
    })
    if response.status_code == 200:
        return response.json.get("token")
    return None


def bearer(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client):
    """Headers for a freshly registered manager."""
    response = register(client, "manager1")
    assert response.status_code == 201
    return bearer(get_auth_token(client, "manager1", MANAGER_PASSWORD))


@pytest.fixture
def store(app):
    store = Store(name="Corner Cafe", location="12 Main St", contact="555-0100")
    db.session.add(store)
    db.session.commit()
    return store


@pytest.fixture
def other_store(app):
    store = Store(name="Harbor Deli", location="3 Pier Rd", contact=None)
    db.session.add(store)
    db.session.commit()
    return store


def create_invoice(client, headers, store_id, cups=100, price=2.5, is_paid=None):
    body = {"store_id": store_id, "cups_delivered": cups, "price_per_cup": price}
    if is_paid is not None:
        body["is_paid"] = is_paid
    return client.post("/api/invoices", json=body, headers=headers)
