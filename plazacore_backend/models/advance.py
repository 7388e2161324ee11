from datetime import datetime, date

from ..errors import ValidationError
from ..extensions import db
from ..utils.billing import to_int

ADVANCE_TYPES = ('rent', 'electricity', 'maintenance')
ADVANCE_STATUSES = ('active', 'adjusted', 'refunded')


class Advance(db.Model):
    __tablename__ = 'advances'

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey('businesses.id'), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    advance_date = db.Column(db.Date, nullable=False, default=date.today)
    purpose = db.Column(db.String(255), nullable=True)

    # Period the prepayment covers
    type = db.Column(db.String(20), nullable=False, default='rent')  # rent, electricity, maintenance
    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)

    status = db.Column(db.String(20), default='active', index=True)  # active, adjusted, refunded
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<Advance {self.id}: {self.type} {self.month}/{self.year} business {self.business_id}>'

    @classmethod
    def exists_for(cls, business_id, advance_type, month, year):
        """True when an active advance of this type covers the month."""
        return db.session.query(cls.id).filter_by(
            business_id=business_id,
            type=advance_type,
            month=month,
            year=year,
            status='active',
        ).first() is not None

    @staticmethod
    def validate(advance_type=None, month=None, status=None):
        if advance_type is not None and advance_type not in ADVANCE_TYPES:
            raise ValidationError(f"type must be one of: {', '.join(ADVANCE_TYPES)}")
        if month is not None and not 1 <= to_int(month, 'month') <= 12:
            raise ValidationError("month must be between 1 and 12")
        if status is not None and status not in ADVANCE_STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(ADVANCE_STATUSES)}")

    def serialize(self):
        return {
            "id": self.id,
            "business_id": self.business_id,
            "business_name": self.business.name if self.business else None,
            "amount": float(self.amount),
            "advance_date": self.advance_date.isoformat(),
            "purpose": self.purpose,
            "type": self.type,
            "month": self.month,
            "year": self.year,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
