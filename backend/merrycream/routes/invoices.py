# Overview: Flask API routes for invoice operations; parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request

from merrycream.decorators import require_auth
from merrycream.services import invoice_service
from merrycream.validation import (
    ConflictError,
    NotFoundError,
    ValidationError,
    require_json_object,
)


invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


@invoices_bp.get("")
@require_auth
def list_invoices():
    return jsonify(invoice_service.list_invoices()), 200


@invoices_bp.post("")
@require_auth
def create_invoice():
    """
    Create an invoice and its PDF receipt.

    201 with pdf_url on success. If only the PDF failed, still 201, with
    pdf_url null and a warning.
    """
    try:
        data = require_json_object(request.get_json(silent=True))
        created = invoice_service.create_invoice(
            store_id=data.get("store_id"),
            cups_delivered=data.get("cups_delivered"),
            price_per_cup=data.get("price_per_cup"),
            is_paid=data.get("is_paid"),
        )
        return jsonify(created.to_dict()), 201
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    except ConflictError as exc:
        return jsonify({"error": str(exc)}), 409
    except Exception:
        current_app.logger.exception("Failed to create invoice")
        return jsonify({"error": "Internal server error"}), 500


@invoices_bp.get("/<int:invoice_id>")
@require_auth
def get_invoice(invoice_id: int):
    invoice = invoice_service.get_invoice(invoice_id)
    if not invoice:
        return jsonify({"error": "Invoice not found"}), 404
    return jsonify(invoice_service.invoice_detail(invoice)), 200


@invoices_bp.post("/<int:invoice_id>/document")
@require_auth
def regenerate_document(invoice_id: int):
    try:
        invoice, pdf_url = invoice_service.regenerate_document(invoice_id)
        return jsonify({"invoice_number": invoice.invoice_number, "pdf_url": pdf_url}), 200
    except NotFoundError as exc:
        return jsonify({"error": str(exc)}), 404
    except Exception:
        current_app.logger.exception("Failed to render document for invoice %s", invoice_id)
        return jsonify({"error": "Internal server error"}), 500
