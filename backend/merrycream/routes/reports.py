from flask import Blueprint, current_app, jsonify, request

from merrycream.decorators import require_auth
from merrycream.services import reporting_service
from merrycream.validation import ValidationError


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("")
@require_auth
def summary_report():
    try:
        report = reporting_service.summarize(
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
            store_id=request.args.get("store_id"),
        )
        return jsonify(report), 200
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception:
        current_app.logger.exception("Failed to build sales report")
        return jsonify({"error": "Internal server error"}), 500
