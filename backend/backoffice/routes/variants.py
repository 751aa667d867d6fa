# Overview: Flask API routes for single size variants.

from flask import Blueprint, current_app, jsonify, request

from ..models import ProductVariant
from ..services import inventory_service
from ..validation import BackofficeError, ValidationError, require_json_object, validate_payload
from .products import VARIANT_POLICY

variants_bp = Blueprint("variants", __name__, url_prefix="/api/variants")


@variants_bp.patch("/<int:variant_id>")
def update_variant_route(variant_id: int):
    """Payload: any of size, stock, sort_order."""
    try:
        payload = require_json_object(request.get_json(silent=True))
        patch = validate_payload(model=ProductVariant, payload=payload, policy=VARIANT_POLICY, partial=True)
        if not patch:
            raise ValidationError("Nothing to update")
        updated = inventory_service.update_variant(variant_id=variant_id, patch=patch)
        return jsonify({"success": True, "data": updated}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to update variant")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@variants_bp.put("/<int:variant_id>/stock")
def update_variant_stock_route(variant_id: int):
    """Payload: {"stock": 12}"""
    try:
        payload = require_json_object(request.get_json(silent=True))
        if "stock" not in payload:
            raise ValidationError("stock is required")
        patch = validate_payload(
            model=ProductVariant, payload={"stock": payload["stock"]}, policy=VARIANT_POLICY, partial=True
        )
        updated = inventory_service.update_variant_stock(variant_id=variant_id, new_stock=patch["stock"])
        return jsonify({"success": True, "data": updated}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to update variant stock")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@variants_bp.delete("/<int:variant_id>")
def delete_variant_route(variant_id: int):
    try:
        result = inventory_service.delete_variant(variant_id=variant_id)
        return jsonify({"success": True, "data": result}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to delete variant")
        return jsonify({"success": False, "error": "Internal server error"}), 500
