# scripts/seed_owner.py
# Create the first owner account for the management portal.
import os
import sys

from plazacore_backend import create_app
from plazacore_backend.extensions import db
from plazacore_backend.models import Admin

OWNER_USERNAME = os.getenv("OWNER_USERNAME", "owner")
OWNER_PASSWORD = os.getenv("OWNER_PASSWORD", "Owner123!")  # change after first login


def main():
    app = create_app()
    with app.app_context():
        existing = Admin.query.filter_by(username=OWNER_USERNAME).first()
        if existing:
            print(f"Owner already exists: {OWNER_USERNAME}")
            return 0

        owner = Admin(username=OWNER_USERNAME, full_name="Plaza Owner", role="owner", is_active=True)
        owner.set_password(OWNER_PASSWORD)
        db.session.add(owner)
        db.session.commit()
        print(f"Owner created: {OWNER_USERNAME}")
        return 0


if __name__ == "__main__":
    sys.exit(main())
