from flask import Blueprint, current_app, jsonify, request

from ..services import dashboard_service
from ..validation import BackofficeError


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("/stats")
def dashboard_stats():
    """
    Query params:
    - from: YYYY-MM-DD (optional)
    - to: YYYY-MM-DD (optional, whole day included)
    """
    try:
        stats = dashboard_service.fetch_dashboard_stats(
            date_from=request.args.get("from"),
            date_to=request.args.get("to"),
        )
        return jsonify({"success": True, "data": stats}), 200
    except BackofficeError as e:
        return jsonify(e.to_result()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to build dashboard stats")
        return jsonify({"success": False, "error": "Internal server error"}), 500
