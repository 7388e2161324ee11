from datetime import date

from flask import Blueprint, jsonify, request

from ..errors import ValidationError, require_fields
from ..extensions import db
from ..models import FixedExpense, PlazaUtilityBill, VariableExpense
from ..models.expense import EXPENSE_CATEGORIES, UTILITY_TYPES
from ..security import ADMIN_ROLES, roles_required
from ..utils.billing import parse_date, to_bool, to_decimal
from ..utils.expenses import expense_summary, generate_recurring_expenses

expenses_bp = Blueprint("expenses", __name__)


def _positive(value, field="amount"):
    amount = to_decimal(value, field)
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than 0")
    return amount


def _choice(value, choices, field):
    if value not in choices:
        raise ValidationError(f"{field} must be one of: {', '.join(choices)}")
    return value


# ============= VARIABLE EXPENSES =============

@expenses_bp.get("/expenses/variable")
@roles_required(*ADMIN_ROLES)
def list_variable_expenses():
    query = VariableExpense.query
    if request.args.get('category'):
        query = query.filter(VariableExpense.category == request.args['category'])
    if request.args.get('start_date'):
        query = query.filter(VariableExpense.expense_date >= parse_date(request.args['start_date'], 'start_date'))
    if request.args.get('end_date'):
        query = query.filter(VariableExpense.expense_date <= parse_date(request.args['end_date'], 'end_date'))
    expenses = query.order_by(VariableExpense.expense_date.desc()).all()
    return jsonify({"expenses": [e.serialize() for e in expenses], "count": len(expenses)})


@expenses_bp.post("/expenses/variable")
@roles_required(*ADMIN_ROLES)
def create_variable_expense():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['title', 'amount'])
    expense = VariableExpense(
        title=data['title'],
        category=_choice(data.get('category', 'other'), EXPENSE_CATEGORIES, 'category'),
        amount=_positive(data['amount']),
        expense_date=parse_date(data['expense_date'], 'expense_date') if data.get('expense_date') else date.today(),
        vendor=data.get('vendor'),
        notes=data.get('notes'),
    )
    db.session.add(expense)
    db.session.commit()
    return jsonify(expense.serialize()), 201


@expenses_bp.delete("/expenses/variable/<int:expense_id>")
@roles_required(*ADMIN_ROLES)
def delete_variable_expense(expense_id):
    expense = db.get_or_404(VariableExpense, expense_id)
    db.session.delete(expense)
    db.session.commit()
    return jsonify({"message": "Expense deleted"})


# ============= RECURRING (FIXED) EXPENSES =============

@expenses_bp.get("/expenses/fixed")
@roles_required(*ADMIN_ROLES)
def list_fixed_expenses():
    query = FixedExpense.query
    if request.args.get('status'):
        query = query.filter(FixedExpense.status == request.args['status'])
    templates = query.order_by(FixedExpense.next_due_date.asc()).all()
    return jsonify({"fixed_expenses": [t.serialize() for t in templates], "count": len(templates)})


@expenses_bp.post("/expenses/fixed")
@roles_required(*ADMIN_ROLES)
def create_fixed_expense():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['title', 'amount', 'next_due_date'])
    template = FixedExpense(
        title=data['title'],
        description=data.get('description'),
        utility_type=_choice(data.get('utility_type', 'other'), UTILITY_TYPES, 'utility_type'),
        amount=_positive(data['amount']),
        frequency=FixedExpense.validate_frequency(data.get('frequency', 'monthly')),
        next_due_date=parse_date(data['next_due_date'], 'next_due_date'),
        auto_generate=to_bool(data.get('auto_generate', True)),
        status=_choice(data.get('status', 'active'), ('active', 'paused'), 'status'),
    )
    db.session.add(template)
    db.session.commit()
    return jsonify(template.serialize()), 201


@expenses_bp.put("/expenses/fixed/<int:template_id>")
@roles_required(*ADMIN_ROLES)
def update_fixed_expense(template_id):
    template = db.get_or_404(FixedExpense, template_id)
    data = request.get_json(silent=True) or {}
    for field in ('title', 'description'):
        if field in data:
            setattr(template, field, data[field])
    if 'amount' in data:
        template.amount = _positive(data['amount'])
    if 'frequency' in data:
        template.frequency = FixedExpense.validate_frequency(data['frequency'])
    if 'next_due_date' in data:
        template.next_due_date = parse_date(data['next_due_date'], 'next_due_date')
    if 'auto_generate' in data:
        template.auto_generate = to_bool(data['auto_generate'])
    if 'status' in data:
        template.status = _choice(data['status'], ('active', 'paused'), 'status')
    db.session.commit()
    return jsonify(template.serialize())


@expenses_bp.delete("/expenses/fixed/<int:template_id>")
@roles_required(*ADMIN_ROLES)
def delete_fixed_expense(template_id):
    template = db.get_or_404(FixedExpense, template_id)
    db.session.delete(template)
    db.session.commit()
    return jsonify({"message": "Recurring expense deleted"})


@expenses_bp.post("/expenses/fixed/generate")
@roles_required(*ADMIN_ROLES)
def generate_fixed_expenses():
    return jsonify(generate_recurring_expenses())


# ============= PLAZA UTILITY BILLS =============

@expenses_bp.get("/expenses/utility-bills")
@roles_required(*ADMIN_ROLES)
def list_utility_bills():
    query = PlazaUtilityBill.query
    for field in ('month', 'year'):
        value = request.args.get(field, type=int)
        if value:
            query = query.filter(getattr(PlazaUtilityBill, field) == value)
    if request.args.get('status'):
        query = query.filter(PlazaUtilityBill.status == request.args['status'])
    bills = query.order_by(PlazaUtilityBill.bill_date.desc()).all()
    return jsonify({"utility_bills": [b.serialize() for b in bills], "count": len(bills)})


@expenses_bp.post("/expenses/utility-bills")
@roles_required(*ADMIN_ROLES)
def create_utility_bill():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['title', 'amount', 'bill_date'])
    bill_date = parse_date(data['bill_date'], 'bill_date')
    bill = PlazaUtilityBill(
        utility_type=_choice(data.get('utility_type', 'other'), UTILITY_TYPES, 'utility_type'),
        title=data['title'],
        description=data.get('description'),
        amount=_positive(data['amount']),
        bill_date=bill_date,
        due_date=parse_date(data['due_date'], 'due_date') if data.get('due_date') else bill_date,
        month=bill_date.month,
        year=bill_date.year,
        status='pending',
    )
    db.session.add(bill)
    db.session.commit()
    return jsonify(bill.serialize()), 201


@expenses_bp.post("/expenses/utility-bills/<int:bill_id>/pay")
@roles_required(*ADMIN_ROLES)
def pay_utility_bill(bill_id):
    bill = db.get_or_404(PlazaUtilityBill, bill_id)
    data = request.get_json(silent=True) or {}
    bill.mark_paid(parse_date(data['paid_date'], 'paid_date') if data.get('paid_date') else None)
    db.session.commit()
    return jsonify(bill.serialize())


@expenses_bp.get("/expenses/summary")
@roles_required(*ADMIN_ROLES)
def get_expense_summary():
    today = date.today()
    month = request.args.get('month', default=today.month, type=int)
    year = request.args.get('year', default=today.year, type=int)
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    return jsonify(expense_summary(month, year))
