from flask import Blueprint, jsonify, request

from ..errors import ValidationError, require_fields
from ..extensions import db
from ..models import Staff, StaffSalaryRecord
from ..models.payment import validate_payment_method
from ..models.staff import STAFF_CATEGORIES
from ..security import ADMIN_ROLES, roles_required
from ..utils.billing import parse_date, to_decimal
from ..utils.payroll import generate_monthly_salaries

staff_bp = Blueprint("staff", __name__)


def _apply(member, data):
    for field in ('name', 'phone', 'designation'):
        if field in data:
            setattr(member, field, data[field])
    if 'category' in data:
        if data['category'] not in STAFF_CATEGORIES:
            raise ValidationError(f"category must be one of: {', '.join(STAFF_CATEGORIES)}")
        member.category = data['category']
    if 'salary_amount' in data:
        member.salary_amount = to_decimal(data['salary_amount'], 'salary_amount')
    if 'joining_date' in data:
        member.joining_date = parse_date(data['joining_date'], 'joining_date') if data['joining_date'] else None
    if 'status' in data:
        if data['status'] not in ('active', 'inactive'):
            raise ValidationError("status must be active or inactive")
        member.status = data['status']


@staff_bp.get("/staff")
@roles_required(*ADMIN_ROLES)
def list_staff():
    query = Staff.query
    if request.args.get('status'):
        query = query.filter(Staff.status == request.args['status'])
    if request.args.get('category'):
        query = query.filter(Staff.category == request.args['category'])
    members = query.order_by(Staff.created_at.desc(), Staff.id.desc()).all()
    return jsonify({"staff": [m.serialize() for m in members], "count": len(members)})


@staff_bp.post("/staff")
@roles_required(*ADMIN_ROLES)
def create_staff():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['name', 'salary_amount'])
    member = Staff(status='active')
    _apply(member, data)
    db.session.add(member)
    db.session.commit()
    return jsonify(member.serialize()), 201


@staff_bp.get("/staff/<int:staff_id>")
@roles_required(*ADMIN_ROLES)
def get_staff(staff_id):
    member = db.get_or_404(Staff, staff_id)
    data = member.serialize()
    data["salary_records"] = [r.serialize() for r in member.salary_records]
    return jsonify(data)


@staff_bp.put("/staff/<int:staff_id>")
@roles_required(*ADMIN_ROLES)
def update_staff(staff_id):
    member = db.get_or_404(Staff, staff_id)
    _apply(member, request.get_json(silent=True) or {})
    db.session.commit()
    return jsonify(member.serialize())


@staff_bp.delete("/staff/<int:staff_id>")
@roles_required(*ADMIN_ROLES)
def delete_staff(staff_id):
    member = db.get_or_404(Staff, staff_id)
    db.session.delete(member)
    db.session.commit()
    return jsonify({"message": "Staff member deleted"})


# ============= SALARIES =============

@staff_bp.get("/staff/salaries")
@roles_required(*ADMIN_ROLES)
def list_salaries():
    query = StaffSalaryRecord.query
    for field in ('staff_id', 'month', 'year'):
        value = request.args.get(field, type=int)
        if value:
            query = query.filter(getattr(StaffSalaryRecord, field) == value)
    if request.args.get('status'):
        query = query.filter(StaffSalaryRecord.status == request.args['status'])
    records = query.order_by(StaffSalaryRecord.year.desc(), StaffSalaryRecord.month.desc()).all()
    return jsonify({"salary_records": [r.serialize() for r in records], "count": len(records)})


@staff_bp.post("/staff/salaries/generate")
@roles_required(*ADMIN_ROLES)
def generate_salaries():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['month', 'year'])
    return jsonify(generate_monthly_salaries(data['month'], data['year'])), 201


@staff_bp.post("/staff/salaries/<int:record_id>/pay")
@roles_required(*ADMIN_ROLES)
def pay_salary(record_id):
    record = db.get_or_404(StaffSalaryRecord, record_id)
    data = request.get_json(silent=True) or {}
    record.mark_paid(
        payment_method=validate_payment_method(data.get('payment_method', 'cash')),
        paid_date=parse_date(data['paid_date'], 'paid_date') if data.get('paid_date') else None,
    )
    db.session.commit()
    return jsonify(record.serialize())
