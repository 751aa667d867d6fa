from flask import Blueprint, current_app, jsonify

from ..services import inventory_service
from ..validation import BackofficeError


inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.get("/low-stock")
def low_stock_route():
    try:
        return jsonify({"success": True, "data": inventory_service.low_stock_report()}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to build low stock report")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@inventory_bp.post("/recompute-stock")
def recompute_all_stock_route():
    try:
        return jsonify({"success": True, "data": inventory_service.recompute_all_product_stock()}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to recompute product stock")
        return jsonify({"success": False, "error": "Internal server error"}), 500
