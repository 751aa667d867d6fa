# Overview: Flask API routes for brands; parses input and returns JSON results.

# backend/backoffice/routes/brands.py
"""
Brand management routes.

Deleting a brand is refused with 409 while it still owns products; the
response carries product_count so the caller can say how many.
"""
from flask import Blueprint, current_app, jsonify, request

from ..models import Brand, BrandHeroBanner, Product
from ..services import brands_service, content_service, products_service
from ..validation import (
    BackofficeError,
    ModelValidationPolicy,
    enforce_rules_brand,
    enforce_rules_product,
    require_json_object,
    validate_payload,
)
from .content import BRAND_HERO_BANNER_POLICY
from .products import PRODUCT_POLICY

BRAND_POLICY = ModelValidationPolicy(
    writable_fields=set(brands_service.BRAND_MUTABLE_FIELDS),
    required_on_create={"name", "slug"},
)

brands_bp = Blueprint("brands", __name__, url_prefix="/api/brands")


@brands_bp.get("")
def list_brands_route():
    """
    List brands with product counts.

    Query params:
    - search: str (optional) - case-insensitive match on name
    """
    try:
        result = brands_service.list_brands(search=request.args.get("search"))
        return jsonify({"success": True, "data": result}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to list brands")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@brands_bp.post("")
def create_brand_route():
    try:
        payload = require_json_object(request.get_json(silent=True))
        patch = validate_payload(model=Brand, payload=payload, policy=BRAND_POLICY, partial=False)
        enforce_rules_brand(patch)
        created = brands_service.create_brand(patch=patch)
        return jsonify({"success": True, "data": created}), 201
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create brand")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@brands_bp.get("/<int:brand_id>")
def get_brand_route(brand_id: int):
    try:
        return jsonify({"success": True, "data": brands_service.get_brand(brand_id=brand_id)}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to load brand")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@brands_bp.put("/<int:brand_id>")
def update_brand_route(brand_id: int):
    try:
        payload = require_json_object(request.get_json(silent=True))
        patch = validate_payload(model=Brand, payload=payload, policy=BRAND_POLICY, partial=True)
        enforce_rules_brand(patch)
        updated = brands_service.update_brand(brand_id=brand_id, patch=patch)
        return jsonify({"success": True, "data": updated}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to update brand")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@brands_bp.get("/<int:brand_id>/can-delete")
def can_delete_brand_route(brand_id: int):
    try:
        return jsonify({"success": True, "data": brands_service.brand_delete_check(brand_id=brand_id)}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to check brand products")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@brands_bp.delete("/<int:brand_id>")
def delete_brand_route(brand_id: int):
    """
    Delete a brand.

    Returns 409 with product_count while the brand still owns products.
    """
    try:
        brands_service.delete_brand(brand_id=brand_id)
        return jsonify({"success": True}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to delete brand")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@brands_bp.get("/<int:brand_id>/products")
def list_brand_products_route(brand_id: int):
    page = request.args.get("page", type=int)
    per_page = request.args.get("per_page", type=int)
    try:
        result = products_service.list_products(brand_id=brand_id, page=page, per_page=per_page)
        return jsonify({"success": True, "data": result}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to list brand products")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@brands_bp.post("/<int:brand_id>/products")
def create_brand_product_route(brand_id: int):
    try:
        payload = require_json_object(request.get_json(silent=True))
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        created = products_service.create_product(brand_id=brand_id, patch=patch)
        return jsonify({"success": True, "data": created}), 201
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@brands_bp.get("/<int:brand_id>/hero-banners")
def list_brand_hero_banners_route(brand_id: int):
    try:
        banners = content_service.list_brand_hero_banners(brand_id=brand_id)
        return jsonify({"success": True, "data": banners}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to list brand hero banners")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@brands_bp.post("/<int:brand_id>/hero-banners")
def create_brand_hero_banner_route(brand_id: int):
    try:
        payload = require_json_object(request.get_json(silent=True))
        patch = validate_payload(
            model=BrandHeroBanner, payload=payload, policy=BRAND_HERO_BANNER_POLICY, partial=False
        )
        created = content_service.create_brand_hero_banner(brand_id=brand_id, patch=patch)
        return jsonify({"success": True, "data": created}), 201
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create brand hero banner")
        return jsonify({"success": False, "error": "Internal server error"}), 500
