"""
Invoice number uniqueness.

Invoice numbers are time derived, so these tests freeze the clock to make
every creation land in the same millisecond.
"""

from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace

import pytest

from merrycream.extensions import db
from merrycream.models import Invoice
from merrycream.services import invoice_service
from merrycream.time_utils import today
from merrycream.validation import ConflictError
from tests.conftest import create_invoice


FROZEN_NS = 1_760_880_000_123_456_789


@pytest.fixture
def frozen_clock(monkeypatch):
    monkeypatch.setattr(invoice_service, "time", SimpleNamespace(time_ns=lambda: FROZEN_NS))


class TestGenerateInvoiceNumber:

    def test_format(self, frozen_clock):
        number = invoice_service.generate_invoice_number("INV")
        prefix, millis, seq, tail = number.split("-")
        assert prefix == "INV"
        assert millis == str(FROZEN_NS // 1_000_000)
        assert len(seq) == 6 and seq.isdigit()
        assert len(tail) == 4

    def test_same_millisecond_numbers_differ(self, frozen_clock):
        numbers = [invoice_service.generate_invoice_number() for _ in range(1000)]
        assert len(set(numbers)) == 1000

    def test_threads_in_same_millisecond(self, frozen_clock):
        with ThreadPoolExecutor(max_workers=16) as pool:
            numbers = list(pool.map(lambda _: invoice_service.generate_invoice_number(), range(500)))
        assert len(set(numbers)) == 500


class TestUniqueConstraint:

    def test_duplicate_number_rejected_by_database(self, app, store):
        from sqlalchemy.exc import IntegrityError

        for _ in range(2):
            db.session.add(Invoice(
                invoice_number="INV-DUP", date=today(), store_id=store.id,
                cups_delivered=1, price_per_cup_cents=100,
            ))
            try:
                db.session.commit()
            except IntegrityError:
                db.session.rollback()
                break
        else:
            pytest.fail("second INV-DUP insert was accepted")
        assert db.session.query(Invoice).count() == 1

    def test_collision_is_retried_with_new_number(self, app, store, monkeypatch):
        numbers = iter(["INV-DUP", "INV-DUP", "INV-FRESH"])
        monkeypatch.setattr(invoice_service, "generate_invoice_number", lambda prefix="INV": next(numbers))

        first = invoice_service.create_invoice(store.id, 10, "2.00")
        second = invoice_service.create_invoice(store.id, 10, "2.00")

        assert first.invoice.invoice_number == "INV-DUP"
        assert second.invoice.invoice_number == "INV-FRESH"
        assert db.session.query(Invoice).count() == 2

    def test_gives_up_after_repeated_collisions(self, app, store, monkeypatch):
        monkeypatch.setattr(invoice_service, "generate_invoice_number", lambda prefix="INV": "INV-DUP")
        invoice_service.create_invoice(store.id, 10, "2.00")

        with pytest.raises(ConflictError):
            invoice_service.create_invoice(store.id, 10, "2.00")
        assert db.session.query(Invoice).count() == 1


class TestConcurrentCreation:

    def test_fifty_simultaneous_creates(self, app, auth_headers, store, invoice_dir, frozen_clock):
        store_id = store.id

        def _create(_):
            return create_invoice(app.test_client(), auth_headers, store_id, cups=1, price=1)

        with ThreadPoolExecutor(max_workers=8) as pool:
            responses = list(pool.map(_create, range(50)))

        assert [r.status_code for r in responses] == [201] * 50
        numbers = {r.json["invoice_number"] for r in responses}
        assert len(numbers) == 50
        assert db.session.query(Invoice).count() == 50
        assert len(list(invoice_dir.glob("*.pdf"))) == 50
