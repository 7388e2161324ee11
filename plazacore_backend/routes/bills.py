from datetime import date, timedelta

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from ..errors import InvalidStateError, ValidationError, require_fields
from ..extensions import db
from ..models import Bill, Business, MaintenanceBill, MeterReading, Payment
from ..models.bill import BILL_STATUSES
from ..models.payment import validate_payment_method
from ..security import ADMIN_ROLES, current_business_id, current_username, enforce_business_scope, roles_required
from ..utils.billing import BILL_PREFIXES, month_bounds, parse_date, parse_month

bills_bp = Blueprint("bills", __name__)


@bills_bp.get("/bills")
@jwt_required()
def list_bills():
    """Admins see every bill, business users only their own."""
    query = Bill.query
    business_id = current_business_id() or request.args.get('business_id', type=int)
    status = request.args.get('status')
    bill_type = request.args.get('type')
    month = request.args.get('month')  # YYYY-MM

    if business_id:
        query = query.filter(Bill.business_id == business_id)
    if status:
        query = query.filter(Bill.status == status)
    if bill_type:
        if bill_type not in BILL_PREFIXES:
            raise ValidationError(f"type must be one of: {', '.join(BILL_PREFIXES)}")
        query = query.filter(Bill.bill_number.like(f"{BILL_PREFIXES[bill_type]}-%"))
    if month:
        start, end = month_bounds(*parse_month(month))
        query = query.filter(Bill.bill_date >= start, Bill.bill_date < end)

    bills = query.order_by(Bill.bill_date.desc(), Bill.id.desc()).all()
    return jsonify({"bills": [bill.serialize() for bill in bills], "count": len(bills)})


@bills_bp.post("/bills")
@roles_required(*ADMIN_ROLES)
def create_bill():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['business_id', 'bill_type'])

    business = db.session.get(Business, data['business_id'])
    if business is None:
        raise ValidationError("Business not found")

    bill_date = parse_date(data['bill_date'], 'bill_date') if data.get('bill_date') else None
    if data.get('due_date'):
        due_date = parse_date(data['due_date'], 'due_date')
    else:
        due_date = (bill_date or date.today()) + timedelta(days=current_app.config["RENT_DUE_DAYS"])

    bill = Bill.create_manual(
        business,
        data['bill_type'],
        due_date=due_date,
        bill_date=bill_date,
        maintenance_amount=data.get('maintenance_amount'),
        electricity_units=data.get('electricity_units', 0),
        electricity_rate=data.get('electricity_rate', current_app.config["DEFAULT_ELECTRICITY_RATE"]),
        gas_units=data.get('gas_units', 0),
        gas_rate=data.get('gas_rate', current_app.config["DEFAULT_GAS_RATE"]),
        water_charges=data.get('water_charges', 0),
        other_charges=data.get('other_charges', 0),
        terms_ids=data.get('terms_conditions_ids'),
    )
    db.session.commit()
    current_app.logger.info("Bill %s created for business %s", bill.bill_number, business.id)
    return jsonify(bill.serialize()), 201


@bills_bp.get("/bills/<int:bill_id>")
@jwt_required()
def get_bill(bill_id):
    bill = db.get_or_404(Bill, bill_id)
    enforce_business_scope(bill.business_id)
    return jsonify(bill.serialize(with_payments=True))


@bills_bp.patch("/bills/<int:bill_id>/status")
@roles_required(*ADMIN_ROLES)
def update_bill_status(bill_id):
    """
    Change a bill's status.

    Marking a bill paid records a payment for whatever is still owed, so the
    paid total always backs the flag. Other statuses are set as given.
    """
    bill = db.get_or_404(Bill, bill_id)
    data = request.get_json(silent=True) or {}
    require_fields(data, ['status'])
    status = data['status']
    if status not in BILL_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(BILL_STATUSES)}")

    payment = None
    if status == 'paid':
        if bill.status == 'paid':
            raise InvalidStateError("Bill is already paid")
        remaining = bill.remaining_amount
        if remaining > 0:
            payment = Payment(
                business_id=bill.business_id,
                bill_id=bill.id,
                amount=remaining,
                payment_method=validate_payment_method(data.get('payment_method', 'cash')),
                payment_date=parse_date(data['payment_date'], 'payment_date') if data.get('payment_date') else date.today(),
                notes=data.get('notes') or "Marked as paid",
                recorded_by=current_username(),
            )
            db.session.add(payment)
            db.session.flush()
    bill.status = status
    db.session.commit()

    current_app.logger.info("Bill %s status -> %s", bill.bill_number, status)
    body = {"bill": bill.serialize()}
    if payment is not None:
        body["payment"] = payment.serialize()
    return jsonify(body)


@bills_bp.delete("/bills/<int:bill_id>")
@roles_required(*ADMIN_ROLES)
def delete_bill(bill_id):
    bill = db.get_or_404(Bill, bill_id)
    if bill.payments:
        raise InvalidStateError("Bills with recorded payments cannot be deleted")
    db.session.delete(bill)
    db.session.commit()
    return jsonify({"message": "Bill deleted"})


@bills_bp.get("/waveoffs")
@roles_required(*ADMIN_ROLES)
def list_waveoffs():
    bills = Bill.query.filter_by(status='waveoff').order_by(Bill.bill_date.desc()).all()
    maintenance = MaintenanceBill.query.filter_by(status='waveoff').order_by(MaintenanceBill.bill_date.desc()).all()
    readings = MeterReading.query.filter_by(payment_status='waveoff') \
        .order_by(MeterReading.reading_date.desc()).all()

    total = sum(float(b.total_amount) for b in bills) \
        + sum(float(m.amount) for m in maintenance) \
        + sum(float(r.amount) for r in readings)
    return jsonify({
        "bills": [b.serialize() for b in bills],
        "maintenance_bills": [m.serialize() for m in maintenance],
        "meter_readings": [r.serialize() for r in readings],
        "count": len(bills) + len(maintenance) + len(readings),
        "total_amount": total,
    })
