from datetime import datetime, date

from flask import current_app

from ..errors import InvalidStateError, NotFoundError, ValidationError
from ..extensions import db
from ..utils.billing import METER_BILL_PREFIXES, to_decimal
from .bill import OPEN_STATUSES

PAYMENT_METHODS = ('cash', 'cheque', 'bank_transfer', 'upi', 'card')
PENDING_BILL_TYPES = ('regular', 'maintenance', 'electricity', 'gas')


def validate_payment_method(method):
    if method not in PAYMENT_METHODS:
        raise ValidationError(f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}")
    return method


class Payment(db.Model):
    __tablename__ = 'payments'

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False, index=True)
    bill_id = db.Column(db.Integer, db.ForeignKey('bills.id'), nullable=True, index=True)
    meter_reading_id = db.Column(db.Integer, db.ForeignKey('meter_readings.id'), nullable=True, index=True)

    payment_date = db.Column(db.Date, nullable=False, default=date.today)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    payment_method = db.Column(db.String(20), nullable=False, default='cash')  # cash, cheque, bank_transfer, upi, card
    reference_number = db.Column(db.String(100), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    recorded_by = db.Column(db.String(100), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    business = db.relationship('Business', backref='payments', lazy=True)

    def __repr__(self):
        return f'<Payment {self.id}: {self.amount} for bill {self.bill_id}>'

    @property
    def receipt_number(self):
        return f"REC-{self.payment_date.year}-{self.id:03d}"

    def serialize(self):
        return {
            "id": self.id,
            "receipt_number": self.receipt_number,
            "business_id": self.business_id,
            "bill_id": self.bill_id,
            "bill_number": self.bill.bill_number if self.bill else None,
            "meter_reading_id": self.meter_reading_id,
            "payment_date": self.payment_date.isoformat(),
            "amount": float(self.amount),
            "payment_method": self.payment_method,
            "reference_number": self.reference_number,
            "notes": self.notes,
            "recorded_by": self.recorded_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def record_business_payment(business_id, amount, payment_method='cash', payment_date=None,
                            notes=None, reference_number=None, recorded_by=None):
    """
    Record a payment against the business's oldest open bill.

    The whole amount goes to that single bill; anything beyond its remaining
    balance is not carried over to the next bill.
    """
    from .bill import Bill

    amount = to_decimal(amount)
    if amount <= 0:
        raise ValidationError("amount must be greater than 0")

    bill = Bill.oldest_open_for(business_id)
    if bill is None:
        raise NotFoundError("No unpaid bills found for this business")

    payment = Payment(
        business_id=business_id,
        bill_id=bill.id,
        amount=amount,
        payment_method=validate_payment_method(payment_method),
        payment_date=payment_date or date.today(),
        notes=notes,
        reference_number=reference_number,
        recorded_by=recorded_by,
    )
    db.session.add(payment)
    db.session.flush()
    bill.refresh_status()
    current_app.logger.info(
        "Payment %s of %s recorded against %s (status %s)",
        payment.id, amount, bill.bill_number, bill.status,
    )
    return payment, bill


class PendingPayment(db.Model):
    __tablename__ = 'pending_payments'

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False, index=True)

    # bill_id points at bills, maintenance_bills or meter_readings depending on bill_type
    bill_id = db.Column(db.Integer, nullable=False)
    bill_type = db.Column(db.String(20), nullable=False, default='regular')  # regular, maintenance, electricity, gas

    amount = db.Column(db.Numeric(12, 2), nullable=False)
    payment_method = db.Column(db.String(20), nullable=False, default='cash')
    payment_date = db.Column(db.Date, nullable=False, default=date.today)
    notes = db.Column(db.Text, nullable=True)
    submitted_by = db.Column(db.String(200), nullable=True)

    # Review
    status = db.Column(db.String(20), default='pending', index=True)  # pending, approved, rejected
    reviewed_by = db.Column(db.String(100), nullable=True)
    reviewed_at = db.Column(db.DateTime, nullable=True)
    review_notes = db.Column(db.Text, nullable=True)

    # Row created on approval
    payment_id = db.Column(db.Integer, db.ForeignKey('payments.id'), nullable=True)
    maintenance_payment_id = db.Column(db.Integer, db.ForeignKey('maintenance_payments.id'), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    business = db.relationship('Business', backref='pending_payments', lazy=True)
    payment = db.relationship('Payment', lazy=True)

    def __repr__(self):
        return f'<PendingPayment {self.id}: {self.bill_type} {self.bill_id} {self.status}>'

    @staticmethod
    def target_model(bill_type):
        from .bill import Bill
        from .maintenance import MaintenanceBill
        from .meter_reading import MeterReading

        if bill_type == 'regular':
            return Bill
        if bill_type == 'maintenance':
            return MaintenanceBill
        if bill_type in ('electricity', 'gas'):
            return MeterReading
        raise ValidationError(f"bill_type must be one of: {', '.join(PENDING_BILL_TYPES)}")

    def target(self):
        target = db.session.get(self.target_model(self.bill_type), self.bill_id)
        if target is None:
            raise NotFoundError("Bill not found")
        return target

    @staticmethod
    def check_target(target, bill_type, amount):
        """Only open bills and readings of the matching meter take payments."""
        if bill_type in ('electricity', 'gas'):
            if target.meter_type != bill_type:
                raise ValidationError(f"Meter reading is not a {bill_type} reading")
            state = target.payment_status
        else:
            state = target.status
        if state not in OPEN_STATUSES:
            raise InvalidStateError(f"Bill is {state} and cannot take payments")
        if bill_type == 'maintenance' and amount > target.remaining_amount:
            raise ValidationError(f"Payment amount cannot exceed remaining amount of {target.remaining_amount}")

    def _ensure_pending(self):
        if self.status != 'pending':
            raise InvalidStateError(f"Payment has already been {self.status}")

    def approve(self, reviewed_by, notes=None):
        """pending -> approved: record the payment and settle the target bill."""
        from .maintenance import MaintenancePayment

        self._ensure_pending()
        target = self.target()
        self.check_target(target, self.bill_type, to_decimal(self.amount))

        if self.bill_type == 'maintenance':
            created = MaintenancePayment(
                business_id=self.business_id,
                maintenance_bill_id=target.id,
                payment_date=self.payment_date,
                amount=self.amount,
                payment_method=self.payment_method,
                notes=self.notes,
            )
            db.session.add(created)
            db.session.flush()
            target.refresh_status()
            self.maintenance_payment_id = created.id
        else:
            created = Payment(
                business_id=self.business_id,
                payment_date=self.payment_date,
                amount=self.amount,
                payment_method=self.payment_method,
                notes=self.notes,
                recorded_by=reviewed_by,
            )
            if self.bill_type == 'regular':
                created.bill_id = target.id
            else:
                created.meter_reading_id = target.id
            db.session.add(created)
            db.session.flush()
            if self.bill_type == 'regular':
                target.refresh_status()
            else:
                target.set_payment_status('paid')
            self.payment_id = created.id

        self.status = 'approved'
        self.reviewed_by = reviewed_by
        self.reviewed_at = datetime.utcnow()
        self.review_notes = notes
        return created

    def reject(self, reviewed_by, reason):
        """pending -> rejected: terminal, only the reason is kept."""
        self._ensure_pending()
        if not reason:
            raise ValidationError("A reason is required to reject a payment")
        self.status = 'rejected'
        self.reviewed_by = reviewed_by
        self.reviewed_at = datetime.utcnow()
        self.review_notes = reason

    def serialize(self):
        bill_number = None
        target = db.session.get(self.target_model(self.bill_type), self.bill_id)
        if target is not None:
            bill_number = target.bill_number
        if bill_number is None and self.bill_type in METER_BILL_PREFIXES:
            bill_number = f"{METER_BILL_PREFIXES[self.bill_type]}-{self.bill_id}"
        return {
            "id": self.id,
            "business_id": self.business_id,
            "business_name": self.business.name if self.business else None,
            "bill_id": self.bill_id,
            "bill_type": self.bill_type,
            "bill_number": bill_number,
            "amount": float(self.amount),
            "payment_method": self.payment_method,
            "payment_date": self.payment_date.isoformat(),
            "notes": self.notes,
            "submitted_by": self.submitted_by,
            "status": self.status,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "review_notes": self.review_notes,
            "payment_id": self.payment_id,
            "maintenance_payment_id": self.maintenance_payment_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
