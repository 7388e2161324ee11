# plazacore_backend/security.py
from functools import wraps

from flask import abort, current_app, jsonify, request
from flask_jwt_extended import get_jwt, verify_jwt_in_request

ADMIN_ROLES = ("owner", "admin")


def roles_required(*allowed):
    """Usage: @roles_required("owner", "admin")"""
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            claims = get_jwt()
            if claims.get("role") not in allowed:
                return jsonify({"error": "forbidden", "message": "insufficient role"}), 403
            return fn(*args, **kwargs)
        return wrapper
    return deco


def current_role():
    return get_jwt().get("role")


def current_business_id():
    """business_id claim of a business-portal token, None for staff tokens."""
    claims = get_jwt()
    if claims.get("role") != "business":
        return None
    return claims.get("business_id")


def current_username():
    return get_jwt().get("username") or "system"


def is_production():
    return current_app.config.get("FLASK_ENV") == "production"


def cron_authorized():
    """Bearer check for the cron endpoint; only enforced in production with a secret set."""
    secret = current_app.config.get("CRON_SECRET")
    if not (is_production() and secret):
        return True
    return request.headers.get("Authorization") == f"Bearer {secret}"


def enforce_business_scope(business_id):
    """Business users may only touch rows of their own business."""
    scoped = current_business_id()
    if scoped is not None and int(scoped) != int(business_id):
        abort(403)
