import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import FixedExpense, PlazaUtilityBill, StaffSalaryRecord, VariableExpense
from .billing import month_bounds

logger = logging.getLogger(__name__)


def generate_recurring_expenses(today=None):
    """
    Turn every due, auto-generating fixed expense into a plaza utility bill
    and roll its next due date forward by its frequency.
    """
    today = today or date.today()
    templates = FixedExpense.query.filter(
        FixedExpense.status == 'active',
        FixedExpense.auto_generate.is_(True),
        FixedExpense.next_due_date <= today,
    ).order_by(FixedExpense.next_due_date.asc()).all()

    if not templates:
        return {"success": True, "message": "No recurring bills are due", "generated": 0}

    generated = []
    errors = []
    for template in templates:
        try:
            with db.session.begin_nested():
                bill = PlazaUtilityBill.from_template(template)
                db.session.add(bill)
                template.advance_due_date()
            generated.append(bill)
        except SQLAlchemyError as e:
            errors.append({"config": template.title, "error": str(e)})
            logger.warning("Recurring expense %s failed: %s", template.title, e)
    db.session.commit()

    result = {"success": True, "generated": len(generated)}
    if errors:
        result["message"] = f"Generated {len(generated)} bills with {len(errors)} errors"
        result["errors"] = errors
    else:
        result["message"] = f"Successfully generated {len(generated)} recurring bills"
    return result


def _sum(column, *criteria):
    total = db.session.query(func.coalesce(func.sum(column), 0)).filter(*criteria).scalar()
    return Decimal(str(total))


def expense_summary(month, year):
    start, end = month_bounds(year, month)
    variable = _sum(VariableExpense.amount, VariableExpense.expense_date >= start, VariableExpense.expense_date < end)
    utilities = _sum(PlazaUtilityBill.amount, PlazaUtilityBill.month == month, PlazaUtilityBill.year == year)
    utilities_paid = _sum(
        PlazaUtilityBill.amount,
        PlazaUtilityBill.month == month,
        PlazaUtilityBill.year == year,
        PlazaUtilityBill.status == 'paid',
    )
    salaries = _sum(StaffSalaryRecord.amount, StaffSalaryRecord.month == month, StaffSalaryRecord.year == year)
    salaries_paid = _sum(
        StaffSalaryRecord.amount,
        StaffSalaryRecord.month == month,
        StaffSalaryRecord.year == year,
        StaffSalaryRecord.status == 'paid',
    )
    total = variable + utilities + salaries
    return {
        "month": month,
        "year": year,
        "variable_expenses": float(variable),
        "utility_bills": float(utilities),
        "utility_bills_paid": float(utilities_paid),
        "salaries": float(salaries),
        "salaries_paid": float(salaries_paid),
        "total": float(total),
        "total_paid": float(variable + utilities_paid + salaries_paid),
    }
