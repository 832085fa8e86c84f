# Overview: Renders invoice receipts as PDF files under INVOICE_OUTPUT_DIR.

from __future__ import annotations

import io
import os
import tempfile
from pathlib import Path

from flask import current_app
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from merrycream.models import Invoice
from merrycream.time_utils import to_iso_date


PAID_LABEL = "PAID"
UNPAID_LABEL = "UNPAID"

MARGIN = 72
TITLE_SIZE = 20
BODY_SIZE = 12
LINE_HEIGHT = 18


def output_dir() -> Path:
    return Path(current_app.config["INVOICE_OUTPUT_DIR"]).resolve()


def document_filename(invoice_number: str) -> str:
    return f"{invoice_number}.pdf"


def document_path(invoice_number: str) -> Path:
    return output_dir() / document_filename(invoice_number)


def document_url(invoice_number: str) -> str:
    return f"/invoices/{document_filename(invoice_number)}"


def status_label(is_paid: bool) -> str:
    return PAID_LABEL if is_paid else UNPAID_LABEL


def invoice_lines(invoice: Invoice) -> list[str]:
    """Body lines of the receipt, in print order."""
    lines = [
        f"Invoice #: {invoice.invoice_number}",
        f"Date: {to_iso_date(invoice.date)}",
        f"Store ID: {invoice.store_id}",
    ]
    if invoice.store is not None:
        lines.append(f"Store: {invoice.store.name}")
    lines.extend([
        f"Cups Delivered: {invoice.cups_delivered}",
        f"Price per Cup: ${invoice.price_per_cup:.2f}",
        f"Total: ${invoice.total:.2f}",
        f"Status: {status_label(invoice.is_paid)}",
    ])
    return lines


def _render_pdf(title: str, lines: list[str]) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter, pageCompression=0)
    pdf.setTitle(title)
    width, height = letter

    y = height - MARGIN
    pdf.setFont("Helvetica-Bold", TITLE_SIZE)
    pdf.drawCentredString(width / 2, y, title)
    y -= LINE_HEIGHT * 2

    pdf.setFont("Helvetica", BODY_SIZE)
    for line in lines:
        if y < MARGIN:
            pdf.showPage()
            pdf.setFont("Helvetica", BODY_SIZE)
            y = height - MARGIN
        pdf.drawString(MARGIN, y, line)
        y -= LINE_HEIGHT

    pdf.save()
    return buffer.getvalue()


def render_invoice(invoice: Invoice) -> Path:
    """
    Write the receipt for an invoice and return its path.

    The file name is derived from invoice_number only, so re-rendering the
    same invoice replaces its own file and never another invoice's. Bytes
    go to a temp file first and are moved into place, so readers never see
    a half-written PDF.
    """
    content = _render_pdf(current_app.config["INVOICE_TITLE"], invoice_lines(invoice))

    path = document_path(invoice.invoice_number)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(dir=path.parent, suffix=".tmp", delete=False)
    try:
        with tmp:
            tmp.write(content)
        os.replace(tmp.name, path)
    except Exception:
        os.unlink(tmp.name)
        raise
    return path


def has_document(invoice_number: str) -> bool:
    return document_path(invoice_number).is_file()
