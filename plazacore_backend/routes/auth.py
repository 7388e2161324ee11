# plazacore_backend/routes/auth.py
from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, get_jwt, jwt_required

from ..extensions import db
from ..models import Admin, Business

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/auth/login")
def login():
    """Username/password login for owners, admins and business users."""
    data = request.get_json(silent=True) or {}
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""

    if not username or not password:
        return jsonify(error="validation_error", message="Username and password are required"), 400

    admin = Admin.query.filter_by(username=username).first()
    if admin is not None:
        if not admin.is_active or not admin.check_password(password):
            current_app.logger.info("Failed admin login for %s", username)
            return jsonify(error="unauthorized", message="Invalid credentials"), 401
        admin.last_login = datetime.utcnow()
        db.session.commit()
        claims = {"role": admin.role, "username": admin.username}
        token = create_access_token(identity=admin.username, additional_claims=claims)
        return jsonify(access_token=token, role=admin.role, user=admin.serialize()), 200

    business = Business.query.filter_by(username=username).first()
    if business is None or not business.is_active or not business.check_password(password):
        current_app.logger.info("Failed login for %s", username)
        return jsonify(error="unauthorized", message="Invalid credentials"), 401

    claims = {"role": "business", "business_id": business.id, "username": business.username}
    token = create_access_token(identity=business.username, additional_claims=claims)
    return jsonify(access_token=token, role="business", user=business.serialize()), 200


@auth_bp.get("/auth/me")
@jwt_required()
def me():
    claims = get_jwt()
    return jsonify(
        username=claims.get("username"),
        role=claims.get("role"),
        business_id=claims.get("business_id"),
    ), 200
