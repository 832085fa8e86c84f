# Overview: Flask API routes for stores operations; parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request

from merrycream.decorators import require_auth
from merrycream.services import store_service
from merrycream.validation import ValidationError, require_json_object


stores_bp = Blueprint("stores", __name__, url_prefix="/api/stores")


@stores_bp.get("")
@require_auth
def list_stores():
    stores = store_service.list_stores()
    return jsonify([store.to_dict() for store in stores]), 200


@stores_bp.post("")
@require_auth
def create_store():
    try:
        data = require_json_object(request.get_json(silent=True))
        store = store_service.create_store(
            name=data.get("name"),
            location=data.get("location"),
            contact=data.get("contact"),
        )
        return jsonify(store.to_dict()), 201
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception:
        current_app.logger.exception("Failed to create store")
        return jsonify({"error": "Internal server error"}), 500


@stores_bp.get("/<int:store_id>")
@require_auth
def get_store(store_id: int):
    store = store_service.get_store(store_id)
    if not store:
        return jsonify({"error": "Store not found"}), 404
    return jsonify(store.to_dict()), 200
