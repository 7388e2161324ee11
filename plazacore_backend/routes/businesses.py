from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from ..errors import ValidationError, require_fields
from ..extensions import db
from ..models import Business
from ..security import ADMIN_ROLES, enforce_business_scope, roles_required
from ..utils.billing import parse_date, to_bool, to_decimal, to_int

businesses_bp = Blueprint("businesses", __name__)

BUSINESS_STATUSES = ('active', 'inactive', 'terminated')
TEXT_FIELDS = (
    'name', 'type', 'contact_person', 'phone', 'email', 'shop_number',
    'electricity_consumer_number', 'gas_consumer_number', 'username',
)
MONEY_FIELDS = ('rent_amount', 'security_deposit', 'area_sqft')
DATE_FIELDS = ('lease_start_date', 'lease_end_date')


def _apply(business, data):
    for field in TEXT_FIELDS:
        if field in data:
            setattr(business, field, data[field] or None)
    for field in MONEY_FIELDS:
        if field in data:
            setattr(business, field, to_decimal(data[field], field))
    for field in DATE_FIELDS:
        if field in data:
            setattr(business, field, parse_date(data[field], field) if data[field] else None)
    if 'floor_number' in data:
        business.floor_number = to_int(data['floor_number'] or 0, 'floor_number')
    if 'rent_management' in data:
        business.rent_management = to_bool(data['rent_management'])
    if 'status' in data:
        if data['status'] not in BUSINESS_STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(BUSINESS_STATUSES)}")
        business.status = data['status']
    if data.get('password'):
        business.set_password(data['password'])
    if business.lease_start_date and business.lease_end_date \
            and business.lease_end_date < business.lease_start_date:
        raise ValidationError("lease_end_date cannot be before lease_start_date")


def _save():
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError("username is already taken")


@businesses_bp.get("/businesses")
@roles_required(*ADMIN_ROLES)
def list_businesses():
    query = Business.query
    status = request.args.get('status')
    floor = request.args.get('floor_number', type=int)
    search = request.args.get('q')

    if status:
        query = query.filter(Business.status == status)
    if floor is not None:
        query = query.filter(Business.floor_number == floor)
    if search:
        like = f"%{search}%"
        query = query.filter(or_(Business.name.ilike(like), Business.shop_number.ilike(like)))

    businesses = query.order_by(Business.created_at.desc(), Business.id.desc()).all()
    return jsonify({"businesses": [b.serialize() for b in businesses], "count": len(businesses)})


@businesses_bp.post("/businesses")
@roles_required(*ADMIN_ROLES)
def create_business():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['name', 'rent_amount'])

    business = Business(status='active')
    _apply(business, data)
    db.session.add(business)
    _save()
    current_app.logger.info("Business %s created: %s", business.id, business.name)
    return jsonify(business.serialize()), 201


@businesses_bp.get("/businesses/<int:business_id>")
@jwt_required()
def get_business(business_id):
    enforce_business_scope(business_id)
    business = db.get_or_404(Business, business_id)
    return jsonify(business.serialize())


@businesses_bp.put("/businesses/<int:business_id>")
@roles_required(*ADMIN_ROLES)
def update_business(business_id):
    business = db.get_or_404(Business, business_id)
    data = request.get_json(silent=True) or {}
    if 'name' in data and not data['name']:
        raise ValidationError("name cannot be empty")
    _apply(business, data)
    _save()
    return jsonify(business.serialize())


@businesses_bp.delete("/businesses/<int:business_id>")
@roles_required(*ADMIN_ROLES)
def terminate_business(business_id):
    business = db.get_or_404(Business, business_id)
    business.terminate()
    db.session.commit()
    current_app.logger.info("Business %s terminated", business.id)
    return jsonify({"message": "Business terminated", "business": business.serialize()})
