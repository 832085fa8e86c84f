from __future__ import annotations

from merrycream.extensions import db
from merrycream.models import Store
from merrycream.services.concurrency import run_with_retry
from merrycream.validation import coerce_text


def create_store(name, location=None, contact=None) -> Store:
    """Register a delivery destination. Raises ValidationError on a blank name."""
    name = coerce_text("name", name, required=True, max_length=120)
    location = coerce_text("location", location, max_length=255)
    contact = coerce_text("contact", contact, max_length=255)

    def _op():
        store = Store(name=name, location=location, contact=contact)
        db.session.add(store)
        db.session.commit()
        return store

    return run_with_retry(_op)


def get_store(store_id: int) -> Store | None:
    return db.session.get(Store, store_id)


def list_stores() -> list[Store]:
    return db.session.query(Store).order_by(Store.id.asc()).all()
