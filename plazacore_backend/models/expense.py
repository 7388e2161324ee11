from datetime import datetime, date

from dateutil.relativedelta import relativedelta

from ..errors import InvalidStateError, ValidationError
from ..extensions import db

EXPENSE_CATEGORIES = ('repairs', 'supplies', 'cleaning', 'security', 'utilities', 'other')
FREQUENCY_STEPS = {
    'monthly': relativedelta(months=1),
    'quarterly': relativedelta(months=3),
    'semi_annual': relativedelta(months=6),
    'annual': relativedelta(years=1),
}
UTILITY_TYPES = ('electricity', 'gas', 'water', 'internet', 'other')


class VariableExpense(db.Model):
    __tablename__ = "variable_expenses"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(30), nullable=False, default='other')
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    expense_date = db.Column(db.Date, nullable=False, default=date.today)
    vendor = db.Column(db.String(200), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def serialize(self):
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "amount": float(self.amount),
            "expense_date": self.expense_date.isoformat(),
            "vendor": self.vendor,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class FixedExpense(db.Model):
    """Recurring expense template; plaza utility bills are generated from it."""
    __tablename__ = "fixed_expenses"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    utility_type = db.Column(db.String(20), nullable=False, default='other')
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    frequency = db.Column(db.String(20), nullable=False, default='monthly')  # monthly, quarterly, semi_annual, annual
    next_due_date = db.Column(db.Date, nullable=False)
    auto_generate = db.Column(db.Boolean, default=True, nullable=False)
    status = db.Column(db.String(20), default='active')  # active, paused

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @staticmethod
    def validate_frequency(frequency):
        if frequency not in FREQUENCY_STEPS:
            raise ValidationError(f"frequency must be one of: {', '.join(FREQUENCY_STEPS)}")
        return frequency

    def advance_due_date(self):
        self.next_due_date = self.next_due_date + FREQUENCY_STEPS.get(self.frequency, FREQUENCY_STEPS['monthly'])
        return self.next_due_date

    def serialize(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "utility_type": self.utility_type,
            "amount": float(self.amount),
            "frequency": self.frequency,
            "next_due_date": self.next_due_date.isoformat(),
            "auto_generate": self.auto_generate,
            "status": self.status,
        }


class PlazaUtilityBill(db.Model):
    __tablename__ = "plaza_utility_bills"

    id = db.Column(db.Integer, primary_key=True)
    fixed_expense_id = db.Column(db.Integer, db.ForeignKey('fixed_expenses.id'), nullable=True, index=True)
    utility_type = db.Column(db.String(20), nullable=False, default='other')
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    bill_date = db.Column(db.Date, nullable=False)
    due_date = db.Column(db.Date, nullable=False)
    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)

    status = db.Column(db.String(20), default='pending')  # pending, paid
    paid_date = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    template = db.relationship('FixedExpense', backref='generated_bills', lazy=True)

    @classmethod
    def from_template(cls, template):
        due = template.next_due_date
        return cls(
            fixed_expense_id=template.id,
            utility_type=template.utility_type,
            title=template.title,
            description=template.description,
            amount=template.amount,
            bill_date=due,
            due_date=due,
            month=due.month,
            year=due.year,
            status='pending',
        )

    def mark_paid(self, paid_date=None):
        if self.status == 'paid':
            raise InvalidStateError("Utility bill is already paid")
        self.status = 'paid'
        self.paid_date = paid_date or date.today()

    def serialize(self):
        return {
            "id": self.id,
            "fixed_expense_id": self.fixed_expense_id,
            "utility_type": self.utility_type,
            "title": self.title,
            "description": self.description,
            "amount": float(self.amount),
            "bill_date": self.bill_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "month": self.month,
            "year": self.year,
            "status": self.status,
            "paid_date": self.paid_date.isoformat() if self.paid_date else None,
        }
