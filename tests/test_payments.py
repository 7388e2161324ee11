from datetime import date

from plazacore_backend.extensions import db
from plazacore_backend.models import Bill, MeterReading, Payment, PendingPayment


def _pay(client, headers, business, amount, **extra):
    payload = {"business_id": business.id, "amount": amount}
    payload.update(extra)
    return client.post("/api/payments", json=payload, headers=headers)


def test_full_payment_marks_bill_paid(client, owner_headers, business, make_bill):
    bill = make_bill(business, 5000, "RENT-2025-001")

    resp = _pay(client, owner_headers, business, 5000)

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["bill"]["status"] == "paid"
    assert body["bill"]["remaining_amount"] == 0
    assert body["payment"]["bill_id"] == bill.id
    assert body["payment"]["receipt_number"].startswith(f"REC-{date.today().year}-")


def test_partial_payment_keeps_bill_pending(client, owner_headers, business, make_bill):
    make_bill(business, 5000, "RENT-2025-001")

    body = _pay(client, owner_headers, business, 2000).get_json()

    assert body["bill"]["status"] == "pending"
    assert body["bill"]["paid_amount"] == 2000
    assert body["bill"]["remaining_amount"] == 3000


def test_payment_goes_to_oldest_open_bill(client, owner_headers, business, make_bill):
    newer = make_bill(business, 5000, "RENT-2025-002", bill_date=date(2025, 2, 1))
    older = make_bill(business, 5000, "RENT-2025-001", bill_date=date(2025, 1, 1))

    body = _pay(client, owner_headers, business, 5000).get_json()

    assert body["payment"]["bill_id"] == older.id
    assert db.session.get(Bill, newer.id).status == "pending"


def test_payment_without_open_bill_is_404(client, owner_headers, business, make_bill):
    make_bill(business, 5000, "RENT-2025-001", status="paid")
    resp = _pay(client, owner_headers, business, 100)
    assert resp.status_code == 404
    assert Payment.query.count() == 0


def test_payment_amount_must_be_positive(client, owner_headers, business, make_bill):
    make_bill(business, 5000, "RENT-2025-001")
    assert _pay(client, owner_headers, business, 0).status_code == 400
    assert _pay(client, owner_headers, business, 100, payment_method="barter").status_code == 400


def test_business_users_cannot_record_payments(client, business_headers, business, make_bill):
    make_bill(business, 5000, "RENT-2025-001")
    assert _pay(client, business_headers, business, 5000).status_code == 403


def test_business_sees_only_its_payments(client, owner_headers, business_headers, business,
                                         other_business, make_bill):
    make_bill(business, 5000, "RENT-2025-001")
    make_bill(other_business, 3000, "RENT-2025-002")
    _pay(client, owner_headers, business, 1000)
    _pay(client, owner_headers, other_business, 1000)

    body = client.get("/api/payments", headers=business_headers).get_json()
    assert body["count"] == 1
    assert body["payments"][0]["business_id"] == business.id


# --- pending payments -------------------------------------------------------

def _submit(client, headers, bill_id, **extra):
    payload = {"bill_id": bill_id}
    payload.update(extra)
    return client.post("/api/pending-payments", json=payload, headers=headers)


def test_submitted_amount_defaults_to_remaining(client, business_headers, business, make_bill):
    bill = make_bill(business, 5000, "RENT-2025-001")

    resp = _submit(client, business_headers, bill.id)

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["amount"] == 5000
    assert body["status"] == "pending"
    assert body["bill_number"] == "RENT-2025-001"
    assert Payment.query.count() == 0


def test_business_cannot_submit_for_another_business(client, business_headers, other_business, make_bill):
    bill = make_bill(other_business, 3000, "RENT-2025-001")
    assert _submit(client, business_headers, bill.id).status_code == 403


def test_approval_creates_exactly_one_payment(client, owner_headers, business_headers, business, make_bill):
    bill = make_bill(business, 5000, "RENT-2025-001")
    pending_id = _submit(client, business_headers, bill.id, amount=5000).get_json()["id"]

    resp = client.post(f"/api/pending-payments/{pending_id}/approve", headers=owner_headers)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["pending_payment"]["status"] == "approved"
    assert body["pending_payment"]["payment_id"] == body["payment"]["id"]
    assert Payment.query.count() == 1
    assert db.session.get(Bill, bill.id).status == "paid"


def test_second_review_is_refused(client, owner_headers, business_headers, business, make_bill):
    bill = make_bill(business, 5000, "RENT-2025-001")
    pending_id = _submit(client, business_headers, bill.id).get_json()["id"]
    client.post(f"/api/pending-payments/{pending_id}/approve", headers=owner_headers)

    again = client.post(f"/api/pending-payments/{pending_id}/approve", headers=owner_headers)
    reject = client.post(f"/api/pending-payments/{pending_id}/reject", json={"reason": "dup"},
                         headers=owner_headers)

    assert again.status_code == 409
    assert reject.status_code == 409
    assert Payment.query.count() == 1


def test_rejection_needs_reason_and_creates_no_payment(client, owner_headers, business_headers,
                                                       business, make_bill):
    bill = make_bill(business, 5000, "RENT-2025-001")
    pending_id = _submit(client, business_headers, bill.id).get_json()["id"]

    assert client.post(f"/api/pending-payments/{pending_id}/reject", json={},
                       headers=owner_headers).status_code == 400

    resp = client.post(f"/api/pending-payments/{pending_id}/reject",
                       json={"reason": "Cheque bounced"}, headers=owner_headers)
    assert resp.status_code == 200
    assert resp.get_json()["pending_payment"]["review_notes"] == "Cheque bounced"
    assert db.session.get(PendingPayment, pending_id).status == "rejected"
    assert Payment.query.count() == 0
    assert db.session.get(Bill, bill.id).status == "pending"


def test_approving_meter_reading_payment_marks_reading_paid(client, owner_headers, business_headers, business):
    reading = MeterReading.record(business.id, "electricity", 100, "8.5")
    db.session.commit()

    pending = _submit(client, business_headers, reading.id, bill_type="electricity").get_json()
    assert pending["amount"] == 850
    resp = client.post(f"/api/pending-payments/{pending['id']}/approve", headers=owner_headers)

    assert resp.status_code == 200
    assert resp.get_json()["payment"]["meter_reading_id"] == reading.id
    reading = db.session.get(MeterReading, reading.id)
    assert reading.payment_status == "paid"
    assert reading.bill_number == f"ELE-MR-{date.today().year}-001"


def test_closed_bills_do_not_take_pending_payments(client, owner_headers, business_headers, business, make_bill):
    cancelled = make_bill(business, 5000, "RENT-2025-001", status="cancelled")
    assert _submit(client, business_headers, cancelled.id, amount=100).status_code == 409

    bill = make_bill(business, 5000, "RENT-2025-002")
    pending_id = _submit(client, business_headers, bill.id, amount=100).get_json()["id"]
    client.patch(f"/api/bills/{bill.id}/status", json={"status": "waveoff"}, headers=owner_headers)

    resp = client.post(f"/api/pending-payments/{pending_id}/approve", headers=owner_headers)

    assert resp.status_code == 409
    assert Payment.query.count() == 0
    assert db.session.get(Bill, bill.id).status == "waveoff"
    assert db.session.get(PendingPayment, pending_id).status == "pending"


def test_meter_reading_must_match_bill_type(client, business_headers, business):
    reading = MeterReading.record(business.id, "gas", 3, "150")
    db.session.commit()

    assert _submit(client, business_headers, reading.id, bill_type="electricity").status_code == 400
    assert _submit(client, business_headers, reading.id, bill_type="gas").status_code == 201


def test_non_numeric_amounts_are_rejected(client, owner_headers, business, make_bill):
    make_bill(business, 5000, "RENT-2025-001")
    for amount in ("NaN", "Infinity", "-Infinity", "ten"):
        assert _pay(client, owner_headers, business, amount).status_code == 400
    assert Payment.query.count() == 0
