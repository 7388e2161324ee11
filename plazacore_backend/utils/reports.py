"""Aggregate figures for the reports screen."""
from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from sqlalchemy import func

from ..extensions import db
from ..models import Advance, Bill, Business, MaintenanceBill, MaintenancePayment, Payment
from ..models.bill import OPEN_STATUSES
from .billing import month_bounds

PAYMENT_METHOD_LABELS = (
    ("cash", "Cash"),
    ("upi", "UPI"),
    ("card", "Card"),
    ("bank_transfer", "Bank Transfer"),
    ("cheque", "Cheque"),
)
TREND_MONTHS = 6


def _total(column, *criteria):
    value = db.session.query(func.coalesce(func.sum(column), 0)).filter(*criteria).scalar()
    return Decimal(str(value))


def _count(model, *criteria):
    return db.session.query(func.count(model.id)).filter(*criteria).scalar() or 0


def customer_report():
    total = _count(Business)
    active = _count(Business, Business.status == 'active')
    by_floor = db.session.query(Business.floor_number, func.count(Business.id)) \
        .group_by(Business.floor_number).order_by(Business.floor_number.asc()).all()
    return {
        "total": total,
        "active": active,
        "inactive": total - active,
        "byFloor": [{"floor": floor, "count": count} for floor, count in by_floor],
    }


def _bill_counts(model, amount_column, *criteria):
    return {
        "total": _count(model, *criteria),
        "paid": _count(model, model.status == 'paid', *criteria),
        "unpaid": _count(model, model.status != 'paid', *criteria),
        "amount": float(_total(amount_column, *criteria)),
    }


def bill_report():
    electricity = _bill_counts(Bill, Bill.total_amount, Bill.electricity_charges > 0)
    maintenance = _bill_counts(MaintenanceBill, MaintenanceBill.amount)
    regular = _bill_counts(Bill, Bill.total_amount)
    combined = {key: regular[key] + maintenance[key] for key in regular}
    return {"electricity": electricity, "maintenance": maintenance, "combined": combined}


def _collected(start=None, end=None):
    criteria, maintenance_criteria = [], []
    if start is not None:
        criteria = [Payment.payment_date >= start, Payment.payment_date < end]
        maintenance_criteria = [MaintenancePayment.payment_date >= start, MaintenancePayment.payment_date < end]
    return _total(Payment.amount, *criteria) + _total(MaintenancePayment.amount, *maintenance_criteria)


def payment_report(today=None):
    today = today or date.today()
    this_start, this_end = month_bounds(today.year, today.month)
    last = this_start - relativedelta(months=1)
    last_start, last_end = month_bounds(last.year, last.month)

    by_method = []
    for method, label in PAYMENT_METHOD_LABELS:
        amount = _total(Payment.amount, Payment.payment_method == method) + \
            _total(MaintenancePayment.amount, MaintenancePayment.payment_method == method)
        count = _count(Payment, Payment.payment_method == method) + \
            _count(MaintenancePayment, MaintenancePayment.payment_method == method)
        by_method.append({"method": label, "amount": float(amount), "count": count})

    return {
        "totalCollected": float(_collected()),
        "thisMonth": float(_collected(this_start, this_end)),
        "lastMonth": float(_collected(last_start, last_end)),
        "byMethod": by_method,
    }


def _outstanding(start=None, end=None):
    bill_criteria = [Bill.status.in_(OPEN_STATUSES)]
    maintenance_criteria = [MaintenanceBill.status.in_(OPEN_STATUSES)]
    if start is not None:
        bill_criteria += [Bill.bill_date >= start, Bill.bill_date < end]
        maintenance_criteria += [MaintenanceBill.bill_date >= start, MaintenanceBill.bill_date < end]
    return _total(Bill.total_amount, *bill_criteria) + _total(MaintenanceBill.amount, *maintenance_criteria)


def financial_report(today=None):
    today = today or date.today()
    first = date(today.year, today.month, 1)

    trend = []
    for offset in range(TREND_MONTHS - 1, -1, -1):
        month_start = first - relativedelta(months=offset)
        start, end = month_bounds(month_start.year, month_start.month)
        trend.append({
            "month": month_start.strftime("%b"),
            "year": month_start.year,
            "revenue": float(_collected(start, end)),
            "outstanding": float(_outstanding(start, end)),
        })

    return {
        "revenue": float(_collected()),
        "outstanding": float(_outstanding()),
        "advances": float(_total(Advance.amount, Advance.status == 'active')),
        "monthlyTrend": trend,
    }


REPORTS = {
    "customers": customer_report,
    "bills": bill_report,
    "payments": payment_report,
    "financial": financial_report,
}


def all_reports(today=None):
    return {
        "customers": customer_report(),
        "bills": bill_report(),
        "payments": payment_report(today),
        "financial": financial_report(today),
    }
