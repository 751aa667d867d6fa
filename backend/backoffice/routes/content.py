# Overview: Flask API routes for hero banner content.

from flask import Blueprint, current_app, jsonify, request

from ..models import BrandHeroBanner, HeroBanner
from ..services import content_service
from ..validation import BackofficeError, ModelValidationPolicy, require_json_object, validate_payload

HERO_BANNER_POLICY = ModelValidationPolicy(
    writable_fields=set(content_service.HERO_BANNER_FIELDS),
    required_on_create={"title", "image_link"},
    list_fields={"tags"},
)

BRAND_HERO_BANNER_POLICY = ModelValidationPolicy(
    writable_fields=set(content_service.BRAND_HERO_BANNER_FIELDS),
    required_on_create={"title", "image_link"},
)

content_bp = Blueprint("content", __name__, url_prefix="/api/content")


@content_bp.get("/hero-banners")
def list_hero_banners_route():
    active_only = request.args.get("active", "false").lower() == "true"
    try:
        banners = content_service.list_hero_banners(active_only=active_only)
        return jsonify({"success": True, "data": banners}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to list hero banners")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@content_bp.post("/hero-banners")
def create_hero_banner_route():
    try:
        payload = require_json_object(request.get_json(silent=True))
        patch = validate_payload(model=HeroBanner, payload=payload, policy=HERO_BANNER_POLICY, partial=False)
        created = content_service.create_hero_banner(patch=patch)
        return jsonify({"success": True, "data": created}), 201
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create hero banner")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@content_bp.put("/hero-banners/<int:banner_id>")
def update_hero_banner_route(banner_id: int):
    try:
        payload = require_json_object(request.get_json(silent=True))
        patch = validate_payload(model=HeroBanner, payload=payload, policy=HERO_BANNER_POLICY, partial=True)
        updated = content_service.update_hero_banner(banner_id=banner_id, patch=patch)
        return jsonify({"success": True, "data": updated}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to update hero banner")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@content_bp.delete("/hero-banners/<int:banner_id>")
def delete_hero_banner_route(banner_id: int):
    try:
        content_service.delete_hero_banner(banner_id=banner_id)
        return jsonify({"success": True}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to delete hero banner")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@content_bp.put("/brand-hero-banners/<int:banner_id>")
def update_brand_hero_banner_route(banner_id: int):
    try:
        payload = require_json_object(request.get_json(silent=True))
        patch = validate_payload(
            model=BrandHeroBanner, payload=payload, policy=BRAND_HERO_BANNER_POLICY, partial=True
        )
        updated = content_service.update_brand_hero_banner(banner_id=banner_id, patch=patch)
        return jsonify({"success": True, "data": updated}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to update brand hero banner")
        return jsonify({"success": False, "error": "Internal server error"}), 500


@content_bp.delete("/brand-hero-banners/<int:banner_id>")
def delete_brand_hero_banner_route(banner_id: int):
    try:
        content_service.delete_brand_hero_banner(banner_id=banner_id)
        return jsonify({"success": True}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to delete brand hero banner")
        return jsonify({"success": False, "error": "Internal server error"}), 500
