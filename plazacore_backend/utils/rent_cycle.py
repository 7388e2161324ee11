"""Monthly rent bill run, triggered once a day by the cron endpoint."""
import logging
from datetime import date, timedelta
from decimal import Decimal

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Advance, Bill, Business, Information, TermsCondition
from .billing import BILL_PREFIXES

logger = logging.getLogger(__name__)

COMPLETED_MESSAGE = "Rent bill generation completed"


def _noop(message, **extra):
    result = {"success": True, "message": message, "generated": 0}
    result.update(extra)
    return result


def generate_rent_bills(today=None):
    """
    Create this month's rent bill for every rent-managed business.

    Runs only when ``today`` is the configured generation day. A business is
    skipped when an active rent advance covers the month or a RENT bill
    already exists for it. Each insert sits in its own savepoint, so one
    failing business is reported in ``errors`` and the rest carry on.
    """
    today = today or date.today()

    info = Information.current()
    generation_day = info.rent_bill_generation_day if info else None
    if not generation_day:
        logger.info("Rent bill run skipped: no generation day configured")
        return _noop("No rent bill generation day configured")

    if today.day != generation_day:
        return _noop(
            f"Today is not the rent bill generation day (day {generation_day})",
            currentDay=today.day,
            configuredDay=generation_day,
        )

    businesses = Business.query.filter(Business.rent_management.is_(True)) \
        .order_by(Business.id.asc()).all()
    if not businesses:
        return _noop("No businesses with rent management enabled")

    terms_ids, terms_text = TermsCondition.attach()
    due_days = current_app.config.get("RENT_DUE_DAYS", 15)

    minted = set()
    generated = skipped = failed = 0
    errors = []

    for business in businesses:
        if Advance.exists_for(business.id, 'rent', today.month, today.year):
            skipped += 1
            continue
        if Bill.rent_bill_exists(business.id, today.year, today.month):
            skipped += 1
            continue

        rent = Decimal(str(business.rent_amount or 0))
        try:
            with db.session.begin_nested():
                bill = Bill(
                    business_id=business.id,
                    bill_number=Bill.generate_number(BILL_PREFIXES['rent'], today.year, minted),
                    bill_date=today,
                    due_date=today + timedelta(days=due_days),
                    rent_amount=rent,
                    maintenance_charges=rent,
                    electricity_charges=0,
                    gas_charges=0,
                    water_charges=0,
                    other_charges=0,
                    total_amount=rent,
                    status='pending',
                    terms_conditions_ids=terms_ids,
                    terms_conditions_text=terms_text,
                )
                db.session.add(bill)
            generated += 1
            logger.info("Generated %s for %s", bill.bill_number, business.name)
        except SQLAlchemyError as e:
            failed += 1
            errors.append(f"{business.name}: {e}")
            logger.warning("Rent bill failed for %s: %s", business.name, e)

    db.session.commit()

    result = {
        "success": True,
        "message": COMPLETED_MESSAGE,
        "date": today.isoformat(),
        "generationDay": generation_day,
        "statistics": {
            "total": len(businesses),
            "generated": generated,
            "skipped": skipped,
            "failed": failed,
        },
    }
    if errors:
        result["errors"] = errors
    logger.info("Rent bill run %s: %s", today.isoformat(), result["statistics"])
    return result
