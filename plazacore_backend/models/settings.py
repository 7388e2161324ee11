from datetime import datetime, date

from ..errors import ValidationError
from ..extensions import db


class Information(db.Model):
    """Plaza-wide settings; a single row."""
    __tablename__ = "information"

    id = db.Column(db.Integer, primary_key=True)
    business_name = db.Column(db.String(255), nullable=False, default='Plaza')
    contact_email = db.Column(db.String(255), nullable=True)
    contact_phone = db.Column(db.String(30), nullable=True)
    address = db.Column(db.Text, nullable=True)
    website = db.Column(db.String(255), nullable=True)
    rent_bill_generation_day = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @classmethod
    def current(cls):
        return cls.query.order_by(cls.id.asc()).first()

    @classmethod
    def get_or_create(cls):
        info = cls.current()
        if info is None:
            info = cls()
            db.session.add(info)
        return info

    @staticmethod
    def validate_generation_day(value):
        if value in (None, ""):
            return None
        try:
            day = int(value)
        except (TypeError, ValueError):
            raise ValidationError("rent_bill_generation_day must be a number")
        if not 1 <= day <= 31:
            raise ValidationError("rent_bill_generation_day must be between 1 and 31")
        return day

    def serialize(self):
        return {
            "id": self.id,
            "business_name": self.business_name,
            "contact_email": self.contact_email,
            "contact_phone": self.contact_phone,
            "address": self.address,
            "website": self.website,
            "rent_bill_generation_day": self.rent_bill_generation_day,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class TermsCondition(db.Model):
    __tablename__ = "terms_conditions"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    effective_date = db.Column(db.Date, nullable=False, default=date.today)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def text(self):
        return f"{self.title}: {self.description or ''}"

    @classmethod
    def attach(cls, ids=None):
        """(ids, joined text) for the given terms, or all of them when ids is None."""
        query = cls.query.order_by(cls.id.asc())
        if ids is not None:
            query = query.filter(cls.id.in_(ids))
        terms = query.all()
        if not terms:
            return None, None
        return [t.id for t in terms], "\n\n".join(t.text for t in terms)

    def serialize(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "effective_date": self.effective_date.isoformat(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
