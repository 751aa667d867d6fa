# Overview: Flask API routes for orders; status and payment status updates.

from flask import Blueprint, current_app, jsonify, request

from ..services import orders_service
from ..validation import BackofficeError, ValidationError, require_json_object

orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.get("")
def list_orders_route():
    """
    List orders with their items, newest first.

    Query params:
    - status: pending | processing | shipped | delivered | cancelled (optional)
    - brand_id: int (optional) - orders containing this brand's products
    - search: str (optional) - order id, customer name/email/phone
    """
    try:
        result = orders_service.list_orders(
            status=request.args.get("status"),
            brand_id=request.args.get("brand_id", type=int),
            search=request.args.get("search"),
        )
        return jsonify({"success": True, "data": result}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to list orders")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@orders_bp.get("/<int:order_id>")
def get_order_route(order_id: int):
    try:
        return jsonify({"success": True, "data": orders_service.get_order(order_id=order_id)}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to load order")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@orders_bp.patch("/<int:order_id>/status")
def update_order_status_route(order_id: int):
    """Payload: {"status": "shipped"}"""
    try:
        payload = require_json_object(request.get_json(silent=True))
        if "status" not in payload:
            raise ValidationError("status is required")
        updated = orders_service.update_order_status(order_id=order_id, status=payload["status"])
        return jsonify({"success": True, "data": updated}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to update order status")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@orders_bp.patch("/<int:order_id>/payment-status")
def update_payment_status_route(order_id: int):
    """Payload: {"payment_status": "completed"}"""
    try:
        payload = require_json_object(request.get_json(silent=True))
        if "payment_status" not in payload:
            raise ValidationError("payment_status is required")
        updated = orders_service.update_payment_status(
            order_id=order_id, payment_status=payload["payment_status"]
        )
        return jsonify({"success": True, "data": updated}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to update payment status")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@orders_bp.delete("/<int:order_id>")
def delete_order_route(order_id: int):
    """Delete an order and all of its line items."""
    try:
        orders_service.delete_order(order_id=order_id)
        return jsonify({"success": True}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to delete order")
        return jsonify({"success": False, "error": "Internal server error"}), 500
