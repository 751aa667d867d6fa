# Overview: Flask API routes for products and their size variants.

# backend/backoffice/routes/products.py
"""
Product management routes.

Variant writes answer with product_stock, the product total after the
rollup, so a client can update its listing without refetching.
"""
from flask import Blueprint, current_app, jsonify, request

from ..models import Product, ProductVariant
from ..services import inventory_service, products_service
from ..validation import (
    BackofficeError,
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_product,
    require_json_object,
    validate_payload,
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields=set(products_service.PRODUCT_MUTABLE_FIELDS),
    required_on_create={"name", "category", "price"},
    list_fields={"images", "tags"},
)

VARIANT_POLICY = ModelValidationPolicy(
    writable_fields=set(inventory_service.VARIANT_MUTABLE_FIELDS),
    required_on_create={"size"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


def _brand_id_from(payload: dict) -> int | None:
    brand_id = payload.pop("brand_id", None)
    if brand_id is None or brand_id == "":
        return None
    try:
        return int(brand_id)
    except (TypeError, ValueError):
        raise ValidationError("brand_id must be an integer")


@products_bp.get("")
def list_products_route():
    """
    List products, newest first.

    Query params:
    - brand_id: int (optional) - only this brand's products
    - page: int (optional) - page number (1-indexed). If omitted, returns all items.
    - per_page: int (optional) - items per page (default 20, max 100)
    """
    brand_id = request.args.get("brand_id", type=int)
    page = request.args.get("page", type=int)
    per_page = request.args.get("per_page", type=int)

    try:
        result = products_service.list_products(brand_id=brand_id, page=page, per_page=per_page)
        return jsonify({"success": True, "data": result}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to list products")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@products_bp.post("")
def create_product_route():
    """Create a product; brand_id is required in the payload."""
    try:
        payload = dict(require_json_object(request.get_json(silent=True)))
        brand_id = _brand_id_from(payload)
        if brand_id is None:
            raise ValidationError("brand_id is required")
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        created = products_service.create_product(brand_id=brand_id, patch=patch)
        return jsonify({"success": True, "data": created}), 201
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@products_bp.get("/<int:product_id>")
def get_product_route(product_id: int):
    try:
        return jsonify({"success": True, "data": products_service.get_product(product_id=product_id)}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to load product")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@products_bp.put("/<int:product_id>")
def update_product_route(product_id: int):
    """
    Update a product.

    stock is rejected with 409 once the product is tracked by size variants.
    """
    try:
        payload = dict(require_json_object(request.get_json(silent=True)))
        brand_id = _brand_id_from(payload)
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
        updated = products_service.update_product(product_id=product_id, patch=patch, brand_id=brand_id)
        return jsonify({"success": True, "data": updated}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to update product")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@products_bp.delete("/<int:product_id>")
def delete_product_route(product_id: int):
    try:
        products_service.delete_product(product_id=product_id)
        return jsonify({"success": True}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@products_bp.get("/<int:product_id>/variants")
def list_variants_route(product_id: int):
    try:
        variants = inventory_service.list_variants(product_id)
        return jsonify({"success": True, "data": variants}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to list variants")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@products_bp.post("/<int:product_id>/variants")
def create_variant_route(product_id: int):
    """
    Add a size variant.

    Payload: {"size": "M", "stock": 10, "sort_order": 0}
    """
    try:
        payload = require_json_object(request.get_json(silent=True))
        patch = validate_payload(model=ProductVariant, payload=payload, policy=VARIANT_POLICY, partial=False)
        created = inventory_service.create_variant(
            product_id=product_id,
            size=patch["size"],
            stock=patch.get("stock", 0),
            sort_order=patch.get("sort_order", 0),
        )
        return jsonify({"success": True, "data": created}), 201
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create variant")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@products_bp.post("/<int:product_id>/recompute-stock")
def recompute_stock_route(product_id: int):
    try:
        stock = inventory_service.recompute_product_stock(product_id=product_id)
        return jsonify({"success": True, "data": {"product_id": product_id, "stock": stock}}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to recompute product stock")
        return jsonify({"success": False, "error": "Internal server error"}), 500
