# Overview: Service-layer operations for the invoice ledger; numbering, creation and listing.

"""
Invoice Ledger Service

INVOICE NUMBERS: "<prefix>-<epoch millis>-<process sequence>-<random>".
The sequence is process-wide and lock-protected, so two invoices created
in the same millisecond by one process still differ. The random tail keeps
separate worker processes apart. The UNIQUE constraint on invoice_number
is the final guard: a collision is rolled back and retried with a fresh
number.

DOCUMENTS: the PDF receipt is rendered after the invoice row is committed.
A rendering failure is logged and reported as a warning; the invoice is
not rolled back. POST /api/invoices/<id>/document re-renders it.
"""

from __future__ import annotations

import itertools
import secrets
import threading
import time
from dataclasses import dataclass

from flask import current_app
from sqlalchemy.exc import IntegrityError

from merrycream.extensions import db
from merrycream.models import Invoice, Store
from merrycream.services import document_service
from merrycream.services.concurrency import run_with_retry
from merrycream.time_utils import today
from merrycream.validation import (
    MAX_CUPS,
    MAX_ID,
    ConflictError,
    NotFoundError,
    coerce_bool,
    coerce_int,
    coerce_price_cents,
)


NUMBER_ATTEMPTS = 5
DOCUMENT_WARNING = "Invoice saved but the PDF document could not be generated"

_sequence = itertools.count(1)
_sequence_lock = threading.Lock()


@dataclass
class InvoiceCreation:
    invoice: Invoice
    pdf_url: str | None
    warning: str | None = None

    def to_dict(self) -> dict:
        data = self.invoice.to_dict()
        data["pdf_url"] = self.pdf_url
        if self.warning:
            data["warning"] = self.warning
        return data


def generate_invoice_number(prefix: str = "INV") -> str:
    millis = time.time_ns() // 1_000_000
    with _sequence_lock:
        seq = next(_sequence)
    return f"{prefix}-{millis}-{seq:06d}-{secrets.token_hex(2).upper()}"


def _number_taken(invoice_number: str) -> bool:
    return db.session.query(Invoice.id).filter_by(invoice_number=invoice_number).first() is not None


def create_invoice(store_id, cups_delivered, price_per_cup, is_paid=None) -> InvoiceCreation:
    """
    Record a delivery and render its receipt.

    Raises:
        ValidationError: malformed or missing fields
        NotFoundError: store_id does not reference a store
        ConflictError: no unique invoice number after NUMBER_ATTEMPTS tries
    """
    store_id = coerce_int("store_id", store_id, maximum=MAX_ID)
    cups_delivered = coerce_int("cups_delivered", cups_delivered, minimum=0, maximum=MAX_CUPS)
    price_cents = coerce_price_cents("price_per_cup", price_per_cup)
    is_paid = coerce_bool("is_paid", is_paid)

    if db.session.get(Store, store_id) is None:
        raise NotFoundError("Store not found")

    prefix = current_app.config["INVOICE_NUMBER_PREFIX"]

    def _op() -> Invoice:
        for _ in range(NUMBER_ATTEMPTS):
            invoice_number = generate_invoice_number(prefix)
            invoice = Invoice(
                invoice_number=invoice_number,
                date=today(),
                store_id=store_id,
                cups_delivered=cups_delivered,
                price_per_cup_cents=price_cents,
                is_paid=is_paid,
            )
            db.session.add(invoice)
            try:
                db.session.commit()
                return invoice
            except IntegrityError:
                db.session.rollback()
                if not _number_taken(invoice_number):
                    raise
                current_app.logger.warning("Invoice number %s already taken; retrying", invoice_number)
        raise ConflictError("Could not allocate a unique invoice number")

    invoice = run_with_retry(_op)
    current_app.logger.info(
        "Created invoice %s for store %s (%s cups)",
        invoice.invoice_number, invoice.store_id, invoice.cups_delivered,
    )

    try:
        document_service.render_invoice(invoice)
    except Exception:
        current_app.logger.exception(
            "Invoice %s saved but its document could not be rendered", invoice.invoice_number
        )
        return InvoiceCreation(invoice=invoice, pdf_url=None, warning=DOCUMENT_WARNING)

    return InvoiceCreation(
        invoice=invoice,
        pdf_url=document_service.document_url(invoice.invoice_number),
    )


def get_invoice(invoice_id: int) -> Invoice | None:
    return db.session.get(Invoice, invoice_id)


def list_invoices() -> list[dict]:
    """
    Every invoice with its store's name.

    Inner join: an invoice without a store would be left out, which the
    foreign key makes impossible.
    """
    rows = (
        db.session.query(Invoice, Store.name)
        .join(Store, Invoice.store_id == Store.id)
        .order_by(Invoice.id.asc())
        .all()
    )
    result = []
    for invoice, store_name in rows:
        data = invoice.to_dict()
        data["store_name"] = store_name
        result.append(data)
    return result


def invoice_detail(invoice: Invoice) -> dict:
    data = invoice.to_dict()
    data["store_name"] = invoice.store.name
    data["pdf_url"] = (
        document_service.document_url(invoice.invoice_number)
        if document_service.has_document(invoice.invoice_number)
        else None
    )
    return data


def regenerate_document(invoice_id: int) -> tuple[Invoice, str]:
    """Render (or re-render) the receipt for an existing invoice."""
    invoice = get_invoice(invoice_id)
    if invoice is None:
        raise NotFoundError("Invoice not found")
    document_service.render_invoice(invoice)
    return invoice, document_service.document_url(invoice.invoice_number)


def render_missing_documents() -> list[str]:
    """Render receipts for invoices whose PDF is not on disk. Returns their numbers."""
    rendered = []
    for invoice in db.session.query(Invoice).order_by(Invoice.id.asc()).all():
        if document_service.has_document(invoice.invoice_number):
            continue
        document_service.render_invoice(invoice)
        rendered.append(invoice.invoice_number)
    return rendered
