from datetime import datetime, date
from decimal import Decimal

from ..errors import ValidationError
from ..extensions import db
from ..utils.billing import (
    METER_BILL_PREFIXES,
    calculate_amount,
    calculate_consumption,
    next_bill_number,
    to_decimal,
)

METER_TYPES = ('electricity', 'gas')
METER_PAYMENT_STATUSES = ('pending', 'paid', 'overdue', 'waveoff')


class MeterReading(db.Model):
    __tablename__ = 'meter_readings'

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False, index=True)
    meter_type = db.Column(db.String(20), nullable=False, index=True)  # electricity, gas
    reading_date = db.Column(db.Date, nullable=False, default=date.today)

    previous_reading = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    current_reading = db.Column(db.Numeric(12, 2), nullable=False)
    units_consumed = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    rate_per_unit = db.Column(db.Numeric(10, 2), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    payment_status = db.Column(db.String(20), default='pending', index=True)  # pending, paid, overdue, waveoff
    bill_number = db.Column(db.String(40), unique=True, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    payments = db.relationship('Payment', backref='meter_reading', lazy=True)

    def __repr__(self):
        return f'<MeterReading {self.id}: {self.meter_type} business {self.business_id} {self.units_consumed} units>'

    @classmethod
    def latest_for(cls, business_id, meter_type, before=None):
        """Most recent reading for the business and meter, by reading date then id."""
        query = cls.query.filter(cls.business_id == business_id, cls.meter_type == meter_type)
        if before is not None:
            query = query.filter(cls.reading_date <= before)
        return query.order_by(cls.reading_date.desc(), cls.id.desc()).first()

    @classmethod
    def record(cls, business_id, meter_type, current_reading, rate_per_unit, reading_date=None):
        """Build a reading whose previous value is the last stored current reading (or 0)."""
        if meter_type not in METER_TYPES:
            raise ValidationError(f"meter_type must be one of: {', '.join(METER_TYPES)}")
        reading_date = reading_date or date.today()

        last = cls.latest_for(business_id, meter_type, before=reading_date)
        previous = Decimal(str(last.current_reading)) if last else Decimal('0')
        current = to_decimal(current_reading, 'current_reading')
        if current < 0:
            raise ValidationError("current_reading cannot be negative")

        consumption = calculate_consumption(previous, current)
        reading = cls(
            business_id=business_id,
            meter_type=meter_type,
            reading_date=reading_date,
            previous_reading=previous,
            current_reading=current,
            units_consumed=consumption,
            rate_per_unit=to_decimal(rate_per_unit, 'rate_per_unit'),
            amount=calculate_amount(consumption, rate_per_unit),
            payment_status='pending',
        )
        db.session.add(reading)
        return reading

    @classmethod
    def generate_number(cls, meter_type, year):
        prefix = METER_BILL_PREFIXES[meter_type]
        existing = [
            number for (number,) in
            db.session.query(cls.bill_number).filter(cls.bill_number.like(f"{prefix}-{year}-%"))
        ]
        return next_bill_number(prefix, year, existing)

    def set_payment_status(self, status):
        if status not in METER_PAYMENT_STATUSES:
            raise ValidationError(f"payment_status must be one of: {', '.join(METER_PAYMENT_STATUSES)}")
        if not self.bill_number:
            self.bill_number = self.generate_number(self.meter_type, self.reading_date.year)
        self.payment_status = status
        return self

    def serialize(self):
        return {
            "id": self.id,
            "business_id": self.business_id,
            "business_name": self.business.name if self.business else None,
            "meter_type": self.meter_type,
            "reading_date": self.reading_date.isoformat(),
            "previous_reading": float(self.previous_reading),
            "current_reading": float(self.current_reading),
            "units_consumed": float(self.units_consumed),
            "rate_per_unit": float(self.rate_per_unit),
            "amount": float(self.amount),
            "payment_status": self.payment_status,
            "bill_number": self.bill_number,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
