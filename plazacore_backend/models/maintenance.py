import math
from datetime import datetime, date
from decimal import Decimal

from sqlalchemy import func

from ..errors import InvalidStateError, ValidationError
from ..extensions import db
from ..utils.billing import next_bill_number, to_decimal

MAINTENANCE_PREFIX = 'MAINT'
MAINTENANCE_CATEGORIES = ('cleaning', 'repair', 'general', 'emergency')
MAINTENANCE_STATUSES = ('pending', 'paid', 'overdue', 'cancelled', 'waveoff')


class MaintenanceBill(db.Model):
    __tablename__ = "maintenance_bills"

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False, index=True)
    bill_number = db.Column(db.String(40), unique=True, nullable=False)

    bill_date = db.Column(db.Date, nullable=False, default=date.today)
    due_date = db.Column(db.Date, nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(20), nullable=False, default='general')  # cleaning, repair, general, emergency
    amount = db.Column(db.Numeric(12, 2), nullable=False)

    status = db.Column(db.String(20), default='pending', index=True)  # pending, paid, overdue, cancelled, waveoff

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    business = db.relationship('Business', backref='maintenance_bills', lazy=True)
    payments = db.relationship('MaintenancePayment', backref='maintenance_bill', lazy=True)

    def __repr__(self):
        return f'<MaintenanceBill {self.bill_number}: {self.amount} {self.status}>'

    @classmethod
    def generate_number(cls, year):
        existing = [
            number for (number,) in
            db.session.query(cls.bill_number).filter(cls.bill_number.like(f"{MAINTENANCE_PREFIX}-{year}-%"))
        ]
        return next_bill_number(MAINTENANCE_PREFIX, year, existing)

    @classmethod
    def create(cls, business_id, description, amount, due_date, category='general', bill_date=None):
        amount = to_decimal(amount)
        if amount <= 0:
            raise ValidationError("amount must be greater than 0")
        if category not in MAINTENANCE_CATEGORIES:
            raise ValidationError(f"category must be one of: {', '.join(MAINTENANCE_CATEGORIES)}")
        if due_date < date.today():
            raise ValidationError("due_date cannot be in the past")
        bill_date = bill_date or date.today()

        bill = cls(
            business_id=business_id,
            bill_number=cls.generate_number(bill_date.year),
            bill_date=bill_date,
            due_date=due_date,
            description=description,
            category=category,
            amount=amount,
            status='pending',
        )
        db.session.add(bill)
        return bill

    @property
    def paid_amount(self):
        total = db.session.query(func.coalesce(func.sum(MaintenancePayment.amount), 0)) \
            .filter(MaintenancePayment.maintenance_bill_id == self.id).scalar()
        return Decimal(str(total))

    @property
    def remaining_amount(self):
        return Decimal(str(self.amount)) - self.paid_amount

    def refresh_status(self):
        self.status = 'paid' if self.remaining_amount <= 0 else 'pending'
        return self.status

    def record_payment(self, amount, payment_method='cash', payment_date=None,
                       reference_number=None, notes=None):
        """Direct admin payment; never more than what is still owed."""
        if self.status in ('paid', 'cancelled', 'waveoff'):
            raise InvalidStateError(f"Maintenance bill is already {self.status}")
        amount = to_decimal(amount)
        if amount <= 0:
            raise ValidationError("amount must be greater than 0")
        remaining = self.remaining_amount
        if amount > remaining:
            raise ValidationError(f"Payment amount cannot exceed remaining amount of {remaining}")

        payment = MaintenancePayment(
            business_id=self.business_id,
            maintenance_bill_id=self.id,
            amount=amount,
            payment_method=payment_method,
            payment_date=payment_date or date.today(),
            reference_number=reference_number,
            notes=notes,
        )
        db.session.add(payment)
        db.session.flush()
        self.refresh_status()
        return payment

    def serialize(self):
        return {
            "id": self.id,
            "business_id": self.business_id,
            "business_name": self.business.name if self.business else None,
            "bill_number": self.bill_number,
            "bill_date": self.bill_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "description": self.description,
            "category": self.category,
            "amount": float(self.amount),
            "paid_amount": float(self.paid_amount),
            "remaining_amount": float(self.remaining_amount),
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class MaintenancePayment(db.Model):
    __tablename__ = "maintenance_payments"

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False, index=True)
    maintenance_bill_id = db.Column(db.Integer, db.ForeignKey('maintenance_bills.id'), nullable=True, index=True)
    payment_date = db.Column(db.Date, nullable=False, default=date.today)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    payment_method = db.Column(db.String(20), nullable=False, default='cash')
    reference_number = db.Column(db.String(100), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def serialize(self):
        return {
            "id": self.id,
            "business_id": self.business_id,
            "maintenance_bill_id": self.maintenance_bill_id,
            "payment_date": self.payment_date.isoformat(),
            "amount": float(self.amount),
            "payment_method": self.payment_method,
            "reference_number": self.reference_number,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class MaintenanceAdvance(db.Model):
    __tablename__ = "maintenance_advances"

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    used_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    remaining_amount = db.Column(db.Numeric(12, 2), nullable=False)
    advance_date = db.Column(db.Date, nullable=False, default=date.today)
    purpose = db.Column(db.String(255), nullable=True)
    status = db.Column(db.String(20), default='active')  # active, used, refunded
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def apply(self, amount):
        """Draw down the advance; it becomes 'used' once nothing is left."""
        if self.status != 'active':
            raise InvalidStateError(f"Advance is {self.status}")
        amount = to_decimal(amount)
        if amount <= 0:
            raise ValidationError("amount must be greater than 0")
        remaining = Decimal(str(self.remaining_amount))
        if amount > remaining:
            raise ValidationError(f"Only {remaining} remains on this advance")

        self.used_amount = Decimal(str(self.used_amount or 0)) + amount
        self.remaining_amount = remaining - amount
        if self.remaining_amount == 0:
            self.status = 'used'
        return self.remaining_amount

    def serialize(self):
        return {
            "id": self.id,
            "business_id": self.business_id,
            "amount": float(self.amount),
            "used_amount": float(self.used_amount or 0),
            "remaining_amount": float(self.remaining_amount),
            "advance_date": self.advance_date.isoformat(),
            "purpose": self.purpose,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class MaintenanceInstalment(db.Model):
    __tablename__ = "maintenance_instalments"

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False, index=True)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False)
    instalment_amount = db.Column(db.Numeric(12, 2), nullable=False)
    instalments_count = db.Column(db.Integer, nullable=False)
    instalments_paid = db.Column(db.Integer, nullable=False, default=0)
    start_date = db.Column(db.Date, nullable=False, default=date.today)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), default='active')  # active, completed, cancelled
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @staticmethod
    def count_for(total_amount, instalment_amount):
        total_amount = to_decimal(total_amount, 'total_amount')
        instalment_amount = to_decimal(instalment_amount, 'instalment_amount')
        if total_amount <= 0 or instalment_amount <= 0:
            raise ValidationError("total_amount and instalment_amount must be greater than 0")
        if instalment_amount > total_amount:
            raise ValidationError("instalment_amount cannot exceed total_amount")
        return math.ceil(total_amount / instalment_amount)

    def record_instalment(self):
        if self.status != 'active':
            raise InvalidStateError(f"Instalment plan is {self.status}")
        self.instalments_paid = (self.instalments_paid or 0) + 1
        if self.instalments_paid >= self.instalments_count:
            self.status = 'completed'
        return self.instalments_paid

    def serialize(self):
        return {
            "id": self.id,
            "business_id": self.business_id,
            "total_amount": float(self.total_amount),
            "instalment_amount": float(self.instalment_amount),
            "instalments_count": self.instalments_count,
            "instalments_paid": self.instalments_paid,
            "start_date": self.start_date.isoformat(),
            "description": self.description,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
