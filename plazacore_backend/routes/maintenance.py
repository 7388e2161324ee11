from datetime import date, timedelta

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from ..errors import ValidationError, require_fields
from ..extensions import db
from ..models import Business, MaintenanceAdvance, MaintenanceBill, MaintenanceInstalment, MaintenancePayment
from ..models.maintenance import MAINTENANCE_STATUSES
from ..models.payment import validate_payment_method
from ..security import ADMIN_ROLES, current_business_id, enforce_business_scope, roles_required
from ..utils.billing import parse_date, to_decimal

maintenance_bp = Blueprint("maintenance", __name__)


def _business_or_400(business_id):
    business = db.session.get(Business, business_id)
    if business is None:
        raise ValidationError("Business not found")
    return business


def _scoped(query, model):
    business_id = current_business_id() or request.args.get('business_id', type=int)
    if business_id:
        query = query.filter(model.business_id == business_id)
    return query


# ============= MAINTENANCE BILLS =============

@maintenance_bp.get("/maintenance/bills")
@jwt_required()
def list_maintenance_bills():
    query = _scoped(MaintenanceBill.query, MaintenanceBill)
    status = request.args.get('status')
    if status:
        query = query.filter(MaintenanceBill.status == status)
    bills = query.order_by(MaintenanceBill.bill_date.desc(), MaintenanceBill.id.desc()).all()
    return jsonify({"maintenance_bills": [b.serialize() for b in bills], "count": len(bills)})


@maintenance_bp.post("/maintenance/bills")
@roles_required(*ADMIN_ROLES)
def create_maintenance_bill():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['business_id', 'description', 'amount'])
    _business_or_400(data['business_id'])

    bill_date = parse_date(data['bill_date'], 'bill_date') if data.get('bill_date') else None
    if data.get('due_date'):
        due_date = parse_date(data['due_date'], 'due_date')
    else:
        due_date = (bill_date or date.today()) + timedelta(days=current_app.config["RENT_DUE_DAYS"])

    bill = MaintenanceBill.create(
        business_id=data['business_id'],
        description=data['description'],
        amount=to_decimal(data['amount']),
        due_date=due_date,
        category=data.get('category', 'general'),
        bill_date=bill_date,
    )
    db.session.commit()
    current_app.logger.info("Maintenance bill %s created", bill.bill_number)
    return jsonify(bill.serialize()), 201


@maintenance_bp.get("/maintenance/bills/<int:bill_id>")
@jwt_required()
def get_maintenance_bill(bill_id):
    bill = db.get_or_404(MaintenanceBill, bill_id)
    enforce_business_scope(bill.business_id)
    data = bill.serialize()
    data["payments"] = [p.serialize() for p in bill.payments]
    return jsonify(data)


@maintenance_bp.patch("/maintenance/bills/<int:bill_id>/status")
@roles_required(*ADMIN_ROLES)
def update_maintenance_bill_status(bill_id):
    bill = db.get_or_404(MaintenanceBill, bill_id)
    data = request.get_json(silent=True) or {}
    require_fields(data, ['status'])
    if data['status'] not in MAINTENANCE_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(MAINTENANCE_STATUSES)}")
    bill.status = data['status']
    db.session.commit()
    return jsonify(bill.serialize())


@maintenance_bp.post("/maintenance/bills/<int:bill_id>/payments")
@roles_required(*ADMIN_ROLES)
def pay_maintenance_bill(bill_id):
    bill = db.get_or_404(MaintenanceBill, bill_id)
    data = request.get_json(silent=True) or {}
    require_fields(data, ['amount'])

    payment = bill.record_payment(
        amount=to_decimal(data['amount']),
        payment_method=validate_payment_method(data.get('payment_method', 'cash')),
        payment_date=parse_date(data['payment_date'], 'payment_date') if data.get('payment_date') else None,
        reference_number=data.get('reference_number'),
        notes=data.get('notes'),
    )
    db.session.commit()
    return jsonify({"payment": payment.serialize(), "maintenance_bill": bill.serialize()}), 201


@maintenance_bp.get("/maintenance/payments")
@jwt_required()
def list_maintenance_payments():
    query = _scoped(MaintenancePayment.query, MaintenancePayment)
    payments = query.order_by(MaintenancePayment.payment_date.desc(), MaintenancePayment.id.desc()).all()
    return jsonify({"maintenance_payments": [p.serialize() for p in payments], "count": len(payments)})


# ============= ADVANCES =============

@maintenance_bp.get("/maintenance/advances")
@jwt_required()
def list_maintenance_advances():
    advances = _scoped(MaintenanceAdvance.query, MaintenanceAdvance) \
        .order_by(MaintenanceAdvance.advance_date.desc()).all()
    return jsonify({"maintenance_advances": [a.serialize() for a in advances], "count": len(advances)})


@maintenance_bp.post("/maintenance/advances")
@roles_required(*ADMIN_ROLES)
def create_maintenance_advance():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['business_id', 'amount'])
    _business_or_400(data['business_id'])
    amount = to_decimal(data['amount'])
    if amount <= 0:
        raise ValidationError("amount must be greater than 0")

    advance = MaintenanceAdvance(
        business_id=data['business_id'],
        amount=amount,
        used_amount=0,
        remaining_amount=amount,
        purpose=data.get('purpose'),
        status='active',
    )
    if data.get('advance_date'):
        advance.advance_date = parse_date(data['advance_date'], 'advance_date')
    db.session.add(advance)
    db.session.commit()
    return jsonify(advance.serialize()), 201


@maintenance_bp.post("/maintenance/advances/<int:advance_id>/apply")
@roles_required(*ADMIN_ROLES)
def apply_maintenance_advance(advance_id):
    advance = db.get_or_404(MaintenanceAdvance, advance_id)
    data = request.get_json(silent=True) or {}
    require_fields(data, ['amount'])
    advance.apply(to_decimal(data['amount']))
    db.session.commit()
    return jsonify(advance.serialize())


# ============= INSTALMENTS =============

@maintenance_bp.get("/maintenance/instalments")
@jwt_required()
def list_maintenance_instalments():
    plans = _scoped(MaintenanceInstalment.query, MaintenanceInstalment) \
        .order_by(MaintenanceInstalment.start_date.desc()).all()
    return jsonify({"maintenance_instalments": [p.serialize() for p in plans], "count": len(plans)})


@maintenance_bp.post("/maintenance/instalments")
@roles_required(*ADMIN_ROLES)
def create_maintenance_instalment():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['business_id', 'total_amount', 'instalment_amount'])
    _business_or_400(data['business_id'])

    total = to_decimal(data['total_amount'], 'total_amount')
    instalment = to_decimal(data['instalment_amount'], 'instalment_amount')
    plan = MaintenanceInstalment(
        business_id=data['business_id'],
        total_amount=total,
        instalment_amount=instalment,
        instalments_count=MaintenanceInstalment.count_for(total, instalment),
        instalments_paid=0,
        description=data.get('description'),
        status='active',
    )
    if data.get('start_date'):
        plan.start_date = parse_date(data['start_date'], 'start_date')
    db.session.add(plan)
    db.session.commit()
    return jsonify(plan.serialize()), 201


@maintenance_bp.post("/maintenance/instalments/<int:plan_id>/pay")
@roles_required(*ADMIN_ROLES)
def pay_maintenance_instalment(plan_id):
    plan = db.get_or_404(MaintenanceInstalment, plan_id)
    plan.record_instalment()
    db.session.commit()
    return jsonify(plan.serialize())
