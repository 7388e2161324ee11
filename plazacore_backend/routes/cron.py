from flask import Blueprint, current_app, jsonify

from ..extensions import db
from ..security import ADMIN_ROLES, cron_authorized, is_production, roles_required
from ..utils.rent_cycle import generate_rent_bills

cron_bp = Blueprint("cron", __name__)


def _run():
    try:
        return jsonify(generate_rent_bills()), 200
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Rent bill generation failed")
        return jsonify({"error": "Internal server error", "message": str(e)}), 500


@cron_bp.post("/cron/generate-rent-bills")
def cron_generate_rent_bills():
    """Daily call from the external scheduler."""
    if not cron_authorized():
        current_app.logger.warning("Rejected cron call with bad credentials")
        return jsonify({"error": "Unauthorized"}), 401
    return _run()


@cron_bp.get("/cron/generate-rent-bills")
def cron_generate_rent_bills_get():
    # Manual trigger from a browser outside production
    if is_production():
        return jsonify({"error": "Method not allowed"}), 405
    return cron_generate_rent_bills()


@cron_bp.post("/admin/trigger-rent-bills")
@roles_required(*ADMIN_ROLES)
def trigger_rent_bills():
    return _run()
