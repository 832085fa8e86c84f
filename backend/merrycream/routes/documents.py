# Overview: Serves generated invoice PDFs from INVOICE_OUTPUT_DIR.

from flask import Blueprint, send_from_directory

from merrycream.services import document_service


documents_bp = Blueprint("documents", __name__, url_prefix="/invoices")


@documents_bp.get("/<path:filename>")
def get_document(filename: str):
    # send_from_directory rejects paths that escape the directory (404)
    return send_from_directory(
        document_service.output_dir(),
        filename,
        mimetype="application/pdf",
    )
