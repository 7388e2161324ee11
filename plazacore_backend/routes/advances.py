from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from ..errors import ValidationError, require_fields
from ..extensions import db
from ..models import Advance, Business
from ..security import ADMIN_ROLES, current_business_id, roles_required
from ..utils.billing import parse_date, to_decimal, to_int

advances_bp = Blueprint("advances", __name__)


@advances_bp.get("/advances")
@jwt_required()
def list_advances():
    query = Advance.query
    business_id = current_business_id() or request.args.get('business_id', type=int)
    for field in ('type', 'status'):
        if request.args.get(field):
            query = query.filter(getattr(Advance, field) == request.args[field])
    for field in ('month', 'year'):
        value = request.args.get(field, type=int)
        if value:
            query = query.filter(getattr(Advance, field) == value)
    if business_id:
        query = query.filter(Advance.business_id == business_id)

    advances = query.order_by(Advance.year.desc(), Advance.month.desc(), Advance.id.desc()).all()
    return jsonify({"advances": [a.serialize() for a in advances], "count": len(advances)})


@advances_bp.post("/advances")
@roles_required(*ADMIN_ROLES)
def create_advance():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['business_id', 'amount', 'type', 'month', 'year'])
    Advance.validate(data['type'], data['month'], data.get('status'))

    if db.session.get(Business, data['business_id']) is None:
        raise ValidationError("Business not found")
    amount = to_decimal(data['amount'])
    if amount <= 0:
        raise ValidationError("amount must be greater than 0")

    advance = Advance(
        business_id=data['business_id'],
        amount=amount,
        type=data['type'],
        month=to_int(data['month'], 'month'),
        year=to_int(data['year'], 'year'),
        purpose=data.get('purpose'),
        status=data.get('status', 'active'),
    )
    if data.get('advance_date'):
        advance.advance_date = parse_date(data['advance_date'], 'advance_date')
    db.session.add(advance)
    db.session.commit()
    return jsonify(advance.serialize()), 201


@advances_bp.put("/advances/<int:advance_id>")
@roles_required(*ADMIN_ROLES)
def update_advance(advance_id):
    advance = db.get_or_404(Advance, advance_id)
    data = request.get_json(silent=True) or {}
    Advance.validate(data.get('type'), data.get('month'), data.get('status'))

    if 'amount' in data:
        advance.amount = to_decimal(data['amount'])
    for field in ('type', 'purpose', 'status'):
        if field in data:
            setattr(advance, field, data[field])
    for field in ('month', 'year'):
        if field in data:
            setattr(advance, field, to_int(data[field], field))
    db.session.commit()
    return jsonify(advance.serialize())


@advances_bp.delete("/advances/<int:advance_id>")
@roles_required(*ADMIN_ROLES)
def delete_advance(advance_id):
    advance = db.get_or_404(Advance, advance_id)
    db.session.delete(advance)
    db.session.commit()
    return jsonify({"message": "Advance deleted"})
