from datetime import date, timedelta

import pytest
from flask_jwt_extended import create_access_token

from plazacore_backend import create_app
from plazacore_backend.config import TestingConfig
from plazacore_backend.extensions import db
from plazacore_backend.models import Admin, Bill, Business


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _headers(identity, **claims):
    token = create_access_token(identity=identity, additional_claims=claims)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_headers(app):
    return _headers("owner", role="owner", username="owner")


@pytest.fixture
def owner(app):
    admin = Admin(username="owner", full_name="Plaza Owner", role="owner", is_active=True)
    admin.set_password("Owner123!")
    db.session.add(admin)
    db.session.commit()
    return admin


@pytest.fixture
def business(app):
    shop = Business(
        name="Tech Store",
        shop_number="G-01",
        floor_number=0,
        rent_amount=5000,
        rent_management=True,
        status="active",
        username="techstore",
    )
    shop.set_password("shop-pass")
    db.session.add(shop)
    db.session.commit()
    return shop


@pytest.fixture
def other_business(app):
    shop = Business(name="Book Nook", shop_number="F1-04", floor_number=1, rent_amount=3000,
                    rent_management=True, status="active")
    db.session.add(shop)
    db.session.commit()
    return shop


@pytest.fixture
def business_headers(business):
    return _headers(business.username, role="business", business_id=business.id, username=business.username)


@pytest.fixture
def make_bill(app):
    """Insert a pending bill with a fixed number and total."""
    def _make(business, total, bill_number, bill_date=None, status="pending"):
        bill_date = bill_date or date.today()
        bill = Bill(
            business_id=business.id,
            bill_number=bill_number,
            bill_date=bill_date,
            due_date=bill_date + timedelta(days=15),
            rent_amount=total,
            maintenance_charges=total,
            total_amount=total,
            status=status,
        )
        db.session.add(bill)
        db.session.commit()
        return bill
    return _make
