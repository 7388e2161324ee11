from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from ..errors import ValidationError, require_fields
from ..extensions import db
from ..models import Business, Payment, PendingPayment, record_business_payment
from ..models.payment import PENDING_BILL_TYPES, validate_payment_method
from ..security import (
    ADMIN_ROLES,
    current_business_id,
    current_username,
    enforce_business_scope,
    roles_required,
)
from ..utils.billing import parse_date, to_decimal

payments_bp = Blueprint("payments", __name__)


# ============= RECORDED PAYMENTS =============

@payments_bp.post("/payments")
@roles_required(*ADMIN_ROLES)
def create_payment():
    """Record a payment against the business's oldest unpaid bill."""
    data = request.get_json(silent=True) or {}
    require_fields(data, ['business_id', 'amount'])

    if db.session.get(Business, data['business_id']) is None:
        raise ValidationError("Business not found")

    payment, bill = record_business_payment(
        business_id=data['business_id'],
        amount=to_decimal(data['amount']),
        payment_method=data.get('payment_method', 'cash'),
        payment_date=parse_date(data['payment_date'], 'payment_date') if data.get('payment_date') else None,
        notes=data.get('notes'),
        reference_number=data.get('reference_number'),
        recorded_by=current_username(),
    )
    db.session.commit()
    return jsonify({
        "message": "Payment recorded successfully",
        "payment": payment.serialize(),
        "bill": bill.serialize(),
    }), 201


@payments_bp.get("/payments")
@jwt_required()
def list_payments():
    query = Payment.query
    business_id = current_business_id() or request.args.get('business_id', type=int)
    bill_id = request.args.get('bill_id', type=int)
    method = request.args.get('payment_method')

    if business_id:
        query = query.filter(Payment.business_id == business_id)
    if bill_id:
        query = query.filter(Payment.bill_id == bill_id)
    if method:
        query = query.filter(Payment.payment_method == method)

    payments = query.order_by(Payment.payment_date.desc(), Payment.id.desc()).all()
    return jsonify({
        "payments": [p.serialize() for p in payments],
        "count": len(payments),
        "total_amount": sum(float(p.amount) for p in payments),
    })


# ============= PENDING PAYMENTS (BUSINESS PORTAL) =============

@payments_bp.post("/pending-payments")
@jwt_required()
def submit_pending_payment():
    """A business user reports a payment for one of its bills; an admin reviews it later."""
    data = request.get_json(silent=True) or {}
    require_fields(data, ['bill_id'])

    bill_type = data.get('bill_type', 'regular')
    if bill_type not in PENDING_BILL_TYPES:
        raise ValidationError(f"bill_type must be one of: {', '.join(PENDING_BILL_TYPES)}")

    target = db.session.get(PendingPayment.target_model(bill_type), data['bill_id'])
    if target is None:
        raise ValidationError("Bill not found")
    enforce_business_scope(target.business_id)

    if data.get('amount') not in (None, ""):
        amount = to_decimal(data['amount'])
    elif bill_type == 'regular' or bill_type == 'maintenance':
        amount = target.remaining_amount
    else:
        amount = to_decimal(target.amount)
    if amount <= 0:
        raise ValidationError("amount must be greater than 0")
    PendingPayment.check_target(target, bill_type, amount)

    pending = PendingPayment(
        business_id=target.business_id,
        bill_id=target.id,
        bill_type=bill_type,
        amount=amount,
        payment_method=validate_payment_method(data.get('payment_method', 'cash')),
        payment_date=parse_date(data['payment_date'], 'payment_date') if data.get('payment_date') else date.today(),
        notes=data.get('notes'),
        submitted_by=current_username(),
        status='pending',
    )
    db.session.add(pending)
    db.session.commit()
    current_app.logger.info("Pending payment %s submitted for %s %s", pending.id, bill_type, target.id)
    return jsonify(pending.serialize()), 201


@payments_bp.get("/pending-payments")
@jwt_required()
def list_pending_payments():
    query = PendingPayment.query
    business_id = current_business_id() or request.args.get('business_id', type=int)
    status = request.args.get('status')

    if business_id:
        query = query.filter(PendingPayment.business_id == business_id)
    if status:
        query = query.filter(PendingPayment.status == status)

    pending = query.order_by(PendingPayment.created_at.desc(), PendingPayment.id.desc()).all()
    return jsonify({"pending_payments": [p.serialize() for p in pending], "count": len(pending)})


@payments_bp.post("/pending-payments/<int:pending_id>/approve")
@roles_required(*ADMIN_ROLES)
def approve_pending_payment(pending_id):
    pending = db.get_or_404(PendingPayment, pending_id)
    data = request.get_json(silent=True) or {}

    created = pending.approve(current_username(), data.get('notes'))
    db.session.commit()
    current_app.logger.info("Pending payment %s approved by %s", pending.id, pending.reviewed_by)
    return jsonify({
        "message": "Payment approved",
        "pending_payment": pending.serialize(),
        "payment": created.serialize(),
    })


@payments_bp.post("/pending-payments/<int:pending_id>/reject")
@roles_required(*ADMIN_ROLES)
def reject_pending_payment(pending_id):
    pending = db.get_or_404(PendingPayment, pending_id)
    data = request.get_json(silent=True) or {}

    pending.reject(current_username(), data.get('reason'))
    db.session.commit()
    current_app.logger.info("Pending payment %s rejected by %s", pending.id, pending.reviewed_by)
    return jsonify({"message": "Payment rejected", "pending_payment": pending.serialize()})
