from datetime import datetime

from passlib.hash import pbkdf2_sha256 as hasher

from ..extensions import db


class Business(db.Model):
    __tablename__ = 'businesses'

    id = db.Column(db.Integer, primary_key=True)

    # Tenant details
    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(100), nullable=True)
    contact_person = db.Column(db.String(200), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    email = db.Column(db.String(255), nullable=True)

    # Location in the plaza
    floor_number = db.Column(db.Integer, default=0)
    shop_number = db.Column(db.String(50), nullable=True)
    area_sqft = db.Column(db.Numeric(10, 2), default=0)

    # Lease terms
    rent_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    security_deposit = db.Column(db.Numeric(12, 2), default=0)
    lease_start_date = db.Column(db.Date, nullable=True)
    lease_end_date = db.Column(db.Date, nullable=True)
    rent_management = db.Column(db.Boolean, default=False, nullable=False)

    # Utility consumer numbers
    electricity_consumer_number = db.Column(db.String(100), nullable=True)
    gas_consumer_number = db.Column(db.String(100), nullable=True)

    status = db.Column(db.String(20), default='active', index=True)  # active, inactive, terminated

    # Business portal credentials
    username = db.Column(db.String(100), unique=True, nullable=True)
    password_hash = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    bills = db.relationship('Bill', backref='business', lazy=True)
    advances = db.relationship('Advance', backref='business', lazy=True)
    meter_readings = db.relationship('MeterReading', backref='business', lazy=True)

    def __repr__(self):
        return f'<Business {self.id}: {self.name} ({self.shop_number})>'

    def set_password(self, raw):
        self.password_hash = hasher.hash(raw)

    def check_password(self, raw):
        return bool(self.password_hash) and hasher.verify(raw, self.password_hash)

    @property
    def is_active(self):
        return self.status == 'active'

    def terminate(self):
        """Soft delete: businesses are never removed from the register."""
        self.status = 'terminated'

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'contact_person': self.contact_person,
            'phone': self.phone,
            'email': self.email,
            'floor_number': self.floor_number,
            'shop_number': self.shop_number,
            'area_sqft': float(self.area_sqft or 0),
            'rent_amount': float(self.rent_amount or 0),
            'security_deposit': float(self.security_deposit or 0),
            'lease_start_date': self.lease_start_date.isoformat() if self.lease_start_date else None,
            'lease_end_date': self.lease_end_date.isoformat() if self.lease_end_date else None,
            'rent_management': self.rent_management,
            'electricity_consumer_number': self.electricity_consumer_number,
            'gas_consumer_number': self.gas_consumer_number,
            'status': self.status,
            'username': self.username,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
