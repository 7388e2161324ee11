from datetime import datetime, date
from decimal import Decimal

from sqlalchemy import func

from ..errors import InvalidStateError, ValidationError
from ..extensions import db
from ..utils.billing import BILL_PREFIXES, ZERO, calculate_amount, month_bounds, next_bill_number, to_decimal

BILL_STATUSES = ('pending', 'paid', 'overdue', 'cancelled', 'waveoff')
OPEN_STATUSES = ('pending', 'overdue')


class Bill(db.Model):
    __tablename__ = 'bills'

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False, index=True)
    bill_number = db.Column(db.String(40), unique=True, nullable=False)

    bill_date = db.Column(db.Date, nullable=False, default=date.today)
    due_date = db.Column(db.Date, nullable=False)

    # Charges
    rent_amount = db.Column(db.Numeric(12, 2), default=0)
    maintenance_charges = db.Column(db.Numeric(12, 2), default=0)
    electricity_charges = db.Column(db.Numeric(12, 2), default=0)
    gas_charges = db.Column(db.Numeric(12, 2), default=0)
    water_charges = db.Column(db.Numeric(12, 2), default=0)
    other_charges = db.Column(db.Numeric(12, 2), default=0)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False)

    status = db.Column(db.String(20), default='pending', index=True)  # pending, paid, overdue, cancelled, waveoff

    terms_conditions_ids = db.Column(db.JSON, nullable=True)
    terms_conditions_text = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    payments = db.relationship('Payment', backref='bill', lazy=True)

    def __repr__(self):
        return f'<Bill {self.bill_number}: Business {self.business_id}, {self.total_amount} {self.status}>'

    @classmethod
    def generate_number(cls, prefix, year, minted=None):
        """Scan stored numbers for prefix/year and mint the next one."""
        pattern = f"{prefix}-{year}-"
        existing = [
            number for (number,) in
            db.session.query(cls.bill_number).filter(cls.bill_number.like(f"{pattern}%"))
        ]
        bill_number = next_bill_number(prefix, year, existing, minted)
        if minted is not None:
            minted.add(bill_number)
        return bill_number

    @classmethod
    def rent_bill_exists(cls, business_id, year, month):
        start, end = month_bounds(year, month)
        return db.session.query(cls.id).filter(
            cls.business_id == business_id,
            cls.bill_date >= start,
            cls.bill_date < end,
            cls.bill_number.like(f"{BILL_PREFIXES['rent']}%"),
        ).first() is not None

    @classmethod
    def oldest_open_for(cls, business_id):
        return cls.query.filter(
            cls.business_id == business_id,
            cls.status.in_(OPEN_STATUSES),
        ).order_by(cls.bill_date.asc(), cls.id.asc()).first()

    @classmethod
    def create_manual(cls, business, bill_type, due_date, bill_date=None, maintenance_amount=None,
                      electricity_units=0, electricity_rate=0, gas_units=0, gas_rate=0,
                      water_charges=0, other_charges=0, terms_ids=None):
        """
        Admin-entered bill of one type.

        Rent bills carry the rent in maintenance_charges (business rent unless
        an explicit amount is given) and total just the charges. Every other
        type adds the business rent amount on top of its charges.
        """
        from .advance import Advance
        from .settings import TermsCondition

        if bill_type not in BILL_PREFIXES:
            raise ValidationError(f"bill_type must be one of: {', '.join(BILL_PREFIXES)}")
        bill_date = bill_date or date.today()
        rent = to_decimal(business.rent_amount)

        if bill_type == 'rent' and Advance.exists_for(business.id, 'rent', bill_date.month, bill_date.year):
            raise InvalidStateError("An active rent advance already covers this month")

        electricity = gas = maintenance = ZERO
        if bill_type in ('electricity', 'combined'):
            electricity = calculate_amount(electricity_units, electricity_rate)
        if bill_type == 'gas':
            gas = calculate_amount(gas_units, gas_rate)
        if bill_type in ('maintenance', 'combined'):
            maintenance = to_decimal(maintenance_amount, "maintenance_amount")
        if bill_type == 'rent':
            maintenance = to_decimal(maintenance_amount, "maintenance_amount") or rent
        water = to_decimal(water_charges, "water_charges")
        other = to_decimal(other_charges, "other_charges")

        total = electricity + gas + maintenance + water + other
        if bill_type != 'rent':
            total += rent

        ids, text = TermsCondition.attach(terms_ids) if terms_ids else (None, None)
        bill = cls(
            business_id=business.id,
            bill_number=cls.generate_number(BILL_PREFIXES[bill_type], bill_date.year),
            bill_date=bill_date,
            due_date=due_date,
            rent_amount=rent,
            maintenance_charges=maintenance,
            electricity_charges=electricity,
            gas_charges=gas,
            water_charges=water,
            other_charges=other,
            total_amount=total,
            status='pending',
            terms_conditions_ids=ids,
            terms_conditions_text=text,
        )
        db.session.add(bill)
        return bill

    @property
    def bill_type(self):
        for bill_type, prefix in BILL_PREFIXES.items():
            if self.bill_number.startswith(f"{prefix}-"):
                return bill_type
        return 'combined'

    @property
    def paid_amount(self):
        from .payment import Payment

        total = db.session.query(func.coalesce(func.sum(Payment.amount), 0)) \
            .filter(Payment.bill_id == self.id).scalar()
        return Decimal(str(total))

    @property
    def remaining_amount(self):
        return Decimal(str(self.total_amount or 0)) - self.paid_amount

    @property
    def days_overdue(self):
        if self.status in ('paid', 'waveoff', 'cancelled') or self.due_date >= date.today():
            return 0
        return (date.today() - self.due_date).days

    def refresh_status(self):
        """Paid once payments cover the total, otherwise back to pending."""
        self.status = 'paid' if self.remaining_amount <= 0 else 'pending'
        return self.status

    def serialize(self, with_payments=False):
        data = {
            "id": self.id,
            "business_id": self.business_id,
            "business_name": self.business.name if self.business else None,
            "shop_number": self.business.shop_number if self.business else None,
            "bill_number": self.bill_number,
            "bill_type": self.bill_type,
            "bill_date": self.bill_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "rent_amount": float(self.rent_amount or 0),
            "maintenance_charges": float(self.maintenance_charges or 0),
            "electricity_charges": float(self.electricity_charges or 0),
            "gas_charges": float(self.gas_charges or 0),
            "water_charges": float(self.water_charges or 0),
            "other_charges": float(self.other_charges or 0),
            "total_amount": float(self.total_amount),
            "paid_amount": float(self.paid_amount),
            "remaining_amount": float(self.remaining_amount),
            "status": self.status,
            "days_overdue": self.days_overdue,
            "terms_conditions_ids": self.terms_conditions_ids,
            "terms_conditions_text": self.terms_conditions_text,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if with_payments:
            data["payments"] = [payment.serialize() for payment in self.payments]
        return data
