from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from ..errors import require_fields
from ..extensions import db
from ..models import Information, TermsCondition
from ..security import ADMIN_ROLES, roles_required
from ..utils.billing import parse_date

settings_bp = Blueprint("settings", __name__)

INFORMATION_FIELDS = ('business_name', 'contact_email', 'contact_phone', 'address', 'website')


@settings_bp.get("/settings/information")
@jwt_required()
def get_information():
    info = Information.current()
    return jsonify(info.serialize() if info else {"rent_bill_generation_day": None})


@settings_bp.put("/settings/information")
@roles_required("owner", "admin")
def update_information():
    data = request.get_json(silent=True) or {}
    info = Information.get_or_create()
    for field in INFORMATION_FIELDS:
        if field in data:
            setattr(info, field, data[field])
    if 'rent_bill_generation_day' in data:
        info.rent_bill_generation_day = Information.validate_generation_day(data['rent_bill_generation_day'])
    db.session.commit()
    current_app.logger.info("Plaza information updated (generation day %s)", info.rent_bill_generation_day)
    return jsonify(info.serialize())


# ============= TERMS & CONDITIONS =============

@settings_bp.get("/settings/terms")
@jwt_required()
def list_terms():
    terms = TermsCondition.query.order_by(TermsCondition.id.asc()).all()
    return jsonify({"terms": [t.serialize() for t in terms], "count": len(terms)})


@settings_bp.post("/settings/terms")
@roles_required(*ADMIN_ROLES)
def create_term():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['title'])
    term = TermsCondition(title=data['title'], description=data.get('description'))
    if data.get('effective_date'):
        term.effective_date = parse_date(data['effective_date'], 'effective_date')
    db.session.add(term)
    db.session.commit()
    return jsonify(term.serialize()), 201


@settings_bp.put("/settings/terms/<int:term_id>")
@roles_required(*ADMIN_ROLES)
def update_term(term_id):
    term = db.get_or_404(TermsCondition, term_id)
    data = request.get_json(silent=True) or {}
    for field in ('title', 'description'):
        if field in data:
            setattr(term, field, data[field])
    if data.get('effective_date'):
        term.effective_date = parse_date(data['effective_date'], 'effective_date')
    db.session.commit()
    return jsonify(term.serialize())


@settings_bp.delete("/settings/terms/<int:term_id>")
@roles_required(*ADMIN_ROLES)
def delete_term(term_id):
    term = db.get_or_404(TermsCondition, term_id)
    db.session.delete(term)
    db.session.commit()
    return jsonify({"message": "Term deleted"})
