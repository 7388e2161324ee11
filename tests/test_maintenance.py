from datetime import date, timedelta

from plazacore_backend.extensions import db
from plazacore_backend.models import MaintenanceBill, MaintenancePayment

YEAR = date.today().year


def _bill(client, headers, business, amount=1000, **extra):
    payload = {"business_id": business.id, "description": "Lift repair", "amount": amount}
    payload.update(extra)
    return client.post("/api/maintenance/bills", json=payload, headers=headers)


def test_create_maintenance_bill(client, owner_headers, business):
    resp = _bill(client, owner_headers, business, category="repair")
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["bill_number"] == f"MAINT-{YEAR}-001"
    assert body["status"] == "pending"
    assert body["remaining_amount"] == 1000


def test_maintenance_bill_validation(client, owner_headers, business):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    assert _bill(client, owner_headers, business, amount=0).status_code == 400
    assert _bill(client, owner_headers, business, category="painting").status_code == 400
    assert _bill(client, owner_headers, business, due_date=yesterday).status_code == 400
    assert MaintenanceBill.query.count() == 0


def test_payments_settle_the_bill(client, owner_headers, business):
    bill_id = _bill(client, owner_headers, business).get_json()["id"]
    url = f"/api/maintenance/bills/{bill_id}/payments"

    body = client.post(url, json={"amount": 400}, headers=owner_headers).get_json()
    assert body["maintenance_bill"]["status"] == "pending"
    assert body["maintenance_bill"]["remaining_amount"] == 600

    over = client.post(url, json={"amount": 700}, headers=owner_headers)
    assert over.status_code == 400

    body = client.post(url, json={"amount": 600}, headers=owner_headers).get_json()
    assert body["maintenance_bill"]["status"] == "paid"

    assert client.post(url, json={"amount": 1}, headers=owner_headers).status_code == 409
    assert MaintenancePayment.query.count() == 2


def test_pending_maintenance_payment_approval(client, owner_headers, business_headers, business):
    bill_id = _bill(client, owner_headers, business).get_json()["id"]
    pending = client.post("/api/pending-payments", json={"bill_id": bill_id, "bill_type": "maintenance"},
                          headers=business_headers).get_json()
    assert pending["amount"] == 1000

    resp = client.post(f"/api/pending-payments/{pending['id']}/approve", headers=owner_headers)
    assert resp.status_code == 200
    assert resp.get_json()["pending_payment"]["maintenance_payment_id"] is not None
    assert db.session.get(MaintenanceBill, bill_id).status == "paid"


def test_advance_is_used_up(client, owner_headers, business):
    advance = client.post("/api/maintenance/advances", json={"business_id": business.id, "amount": 1000},
                          headers=owner_headers).get_json()
    url = f"/api/maintenance/advances/{advance['id']}/apply"

    body = client.post(url, json={"amount": 400}, headers=owner_headers).get_json()
    assert body["remaining_amount"] == 600
    assert body["status"] == "active"

    assert client.post(url, json={"amount": 601}, headers=owner_headers).status_code == 400

    body = client.post(url, json={"amount": 600}, headers=owner_headers).get_json()
    assert body["status"] == "used"
    assert body["used_amount"] == 1000

    assert client.post(url, json={"amount": 1}, headers=owner_headers).status_code == 409


def test_instalment_plan_completes(client, owner_headers, business):
    resp = client.post("/api/maintenance/instalments", json={
        "business_id": business.id, "total_amount": 1000, "instalment_amount": 300,
    }, headers=owner_headers)
    assert resp.status_code == 201
    plan = resp.get_json()
    assert plan["instalments_count"] == 4

    url = f"/api/maintenance/instalments/{plan['id']}/pay"
    for _ in range(4):
        body = client.post(url, headers=owner_headers).get_json()
    assert body["status"] == "completed"
    assert body["instalments_paid"] == 4
    assert client.post(url, headers=owner_headers).status_code == 409


def test_instalment_larger_than_total_is_rejected(client, owner_headers, business):
    resp = client.post("/api/maintenance/instalments", json={
        "business_id": business.id, "total_amount": 100, "instalment_amount": 300,
    }, headers=owner_headers)
    assert resp.status_code == 400


def test_pending_maintenance_payment_cannot_exceed_balance(client, owner_headers, business_headers, business):
    bill_id = _bill(client, owner_headers, business).get_json()["id"]
    over = client.post("/api/pending-payments", json={"bill_id": bill_id, "bill_type": "maintenance", "amount": 1500},
                       headers=business_headers)
    assert over.status_code == 400

    pending = client.post("/api/pending-payments", json={"bill_id": bill_id, "bill_type": "maintenance", "amount": 800},
                          headers=business_headers).get_json()
    client.post(f"/api/maintenance/bills/{bill_id}/payments", json={"amount": 500}, headers=owner_headers)

    resp = client.post(f"/api/pending-payments/{pending['id']}/approve", headers=owner_headers)
    assert resp.status_code == 400
    assert MaintenancePayment.query.count() == 1
