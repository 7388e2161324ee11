from datetime import datetime, date

from ..errors import InvalidStateError
from ..extensions import db

STAFF_CATEGORIES = ('security', 'cleaning', 'maintenance', 'management', 'other')


class Staff(db.Model):
    __tablename__ = 'staff'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(30), nullable=True)
    designation = db.Column(db.String(100), nullable=True)
    category = db.Column(db.String(30), nullable=False, default='other')
    salary_amount = db.Column(db.Numeric(12, 2), nullable=False)
    joining_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), default='active', index=True)  # active, inactive

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    salary_records = db.relationship(
        'StaffSalaryRecord', backref='staff', lazy=True, cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Staff {self.id}: {self.name} ({self.category})>'

    def serialize(self):
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "designation": self.designation,
            "category": self.category,
            "salary_amount": float(self.salary_amount),
            "joining_date": self.joining_date.isoformat() if self.joining_date else None,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class StaffSalaryRecord(db.Model):
    __tablename__ = 'staff_salary_records'
    __table_args__ = (
        db.UniqueConstraint('staff_id', 'month', 'year', name='uq_salary_staff_month_year'),
    )

    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.Integer, db.ForeignKey('staff.id'), nullable=False, index=True)
    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)

    status = db.Column(db.String(20), default='pending')  # pending, paid
    paid_date = db.Column(db.Date, nullable=True)
    payment_method = db.Column(db.String(20), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<StaffSalaryRecord staff {self.staff_id} {self.month}/{self.year} {self.status}>'

    def mark_paid(self, payment_method='cash', paid_date=None):
        if self.status == 'paid':
            raise InvalidStateError("Salary is already paid")
        self.status = 'paid'
        self.paid_date = paid_date or date.today()
        self.payment_method = payment_method

    def serialize(self):
        return {
            "id": self.id,
            "staff_id": self.staff_id,
            "staff_name": self.staff.name if self.staff else None,
            "month": self.month,
            "year": self.year,
            "amount": float(self.amount),
            "status": self.status,
            "paid_date": self.paid_date.isoformat() if self.paid_date else None,
            "payment_method": self.payment_method,
            "notes": self.notes,
        }
