from datetime import date, timedelta

from plazacore_backend.extensions import db
from plazacore_backend.models import Advance, Bill, Business, Information, TermsCondition
from plazacore_backend.utils.rent_cycle import generate_rent_bills

RUN_DAY = date(2025, 3, 1)


def _set_generation_day(day):
    db.session.add(Information(business_name="Plaza", rent_bill_generation_day=day))
    db.session.commit()


def test_no_generation_day_configured(app, business):
    result = generate_rent_bills(RUN_DAY)
    assert result["message"] == "No rent bill generation day configured"
    assert result["generated"] == 0
    assert Bill.query.count() == 0


def test_not_the_generation_day(app, business):
    _set_generation_day(5)
    result = generate_rent_bills(date(2025, 3, 10))
    assert result["generated"] == 0
    assert result["currentDay"] == 10
    assert result["configuredDay"] == 5
    assert Bill.query.count() == 0


def test_no_rent_managed_businesses(app):
    _set_generation_day(1)
    db.session.add(Business(name="Kiosk", rent_amount=1000, rent_management=False, status="active"))
    db.session.commit()
    result = generate_rent_bills(RUN_DAY)
    assert result["message"] == "No businesses with rent management enabled"


def test_generates_one_bill_per_business(app, business, other_business):
    _set_generation_day(1)
    db.session.add(TermsCondition(title="Late fee", description="2% after due date"))
    db.session.commit()

    result = generate_rent_bills(RUN_DAY)

    assert result["statistics"] == {"total": 2, "generated": 2, "skipped": 0, "failed": 0}
    assert result["generationDay"] == 1
    bills = Bill.query.order_by(Bill.id).all()
    assert [b.bill_number for b in bills] == ["RENT-2025-001", "RENT-2025-002"]
    first = bills[0]
    assert float(first.total_amount) == 5000.0
    assert float(first.maintenance_charges) == 5000.0
    assert first.due_date == RUN_DAY + timedelta(days=15)
    assert first.status == "pending"
    assert first.terms_conditions_text == "Late fee: 2% after due date"


def test_second_run_in_the_same_month_skips(app, business):
    _set_generation_day(1)
    generate_rent_bills(RUN_DAY)
    result = generate_rent_bills(RUN_DAY)
    assert result["statistics"]["generated"] == 0
    assert result["statistics"]["skipped"] == 1
    assert Bill.query.count() == 1


def test_active_rent_advance_skips_business(app, business, other_business):
    _set_generation_day(1)
    db.session.add(Advance(business_id=business.id, amount=5000, type="rent", month=3, year=2025, status="active"))
    db.session.commit()

    result = generate_rent_bills(RUN_DAY)

    assert result["statistics"]["generated"] == 1
    assert result["statistics"]["skipped"] == 1
    assert Bill.query.filter_by(business_id=business.id).count() == 0


def test_refunded_advance_does_not_skip(app, business):
    _set_generation_day(1)
    db.session.add(Advance(business_id=business.id, amount=5000, type="rent", month=3, year=2025, status="refunded"))
    db.session.commit()
    assert generate_rent_bills(RUN_DAY)["statistics"]["generated"] == 1


def test_numbering_continues_from_existing_bills(app, business, make_bill, other_business):
    _set_generation_day(1)
    make_bill(other_business, 3000, "RENT-2025-002", bill_date=date(2025, 2, 1))
    generate_rent_bills(RUN_DAY)
    numbers = sorted(b.bill_number for b in Bill.query.all())
    assert numbers == ["RENT-2025-002", "RENT-2025-003", "RENT-2025-004"]


def test_inactive_rent_managed_business_is_still_billed(app, business, other_business):
    _set_generation_day(1)
    business.status = "inactive"
    db.session.commit()

    result = generate_rent_bills(RUN_DAY)

    assert result["statistics"]["total"] == 2
    assert result["statistics"]["generated"] == 2
    assert Bill.query.filter_by(business_id=business.id).count() == 1


def test_failed_insert_is_reported_and_others_still_billed(app, business, other_business, monkeypatch):
    _set_generation_day(1)
    # every business gets the same number, so the second insert breaks the unique constraint
    monkeypatch.setattr(Bill, "generate_number", classmethod(lambda cls, prefix, year, minted=None: "RENT-2025-001"))

    result = generate_rent_bills(RUN_DAY)

    assert result["statistics"] == {"total": 2, "generated": 1, "skipped": 0, "failed": 1}
    assert len(result["errors"]) == 1
    assert result["errors"][0].startswith("Book Nook: ")
    bills = Bill.query.all()
    assert [(b.business_id, b.bill_number) for b in bills] == [(business.id, "RENT-2025-001")]
