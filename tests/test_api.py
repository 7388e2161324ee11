from datetime import date

from plazacore_backend.extensions import db
from plazacore_backend.models import Business, Information, MaintenanceBill, Payment
from plazacore_backend.utils.reports import financial_report, payment_report


# --- auth -------------------------------------------------------------------

def test_owner_login(client, owner):
    resp = client.post("/api/auth/login", json={"username": "owner", "password": "Owner123!"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["role"] == "owner"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.get_json()["username"] == "owner"


def test_business_login_carries_business_id(client, business):
    body = client.post("/api/auth/login", json={"username": "techstore", "password": "shop-pass"}).get_json()
    assert body["role"] == "business"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}).get_json()
    assert me["business_id"] == business.id


def test_login_failures(client, owner, business):
    assert client.post("/api/auth/login", json={"username": "owner"}).status_code == 400
    assert client.post("/api/auth/login", json={"username": "owner", "password": "nope"}).status_code == 401
    assert client.post("/api/auth/login", json={"username": "ghost", "password": "x"}).status_code == 401

    business.status = "terminated"
    db.session.commit()
    resp = client.post("/api/auth/login", json={"username": "techstore", "password": "shop-pass"})
    assert resp.status_code == 401


# --- health -----------------------------------------------------------------

def test_health(client):
    body = client.get("/api/health").get_json()
    assert body["status"] == "ok"
    assert body["service"] == "plazacore-backend"
    assert client.get("/api/readyz").get_json() == {"ok": True}


# --- businesses -------------------------------------------------------------

def test_business_lifecycle(client, owner_headers):
    resp = client.post("/api/businesses", json={
        "name": "Cafe", "rent_amount": 4200, "shop_number": "G-07", "rent_management": True,
        "username": "cafe", "password": "secret",
    }, headers=owner_headers)
    assert resp.status_code == 201
    business_id = resp.get_json()["id"]

    dup = client.post("/api/businesses", json={"name": "Other", "rent_amount": 1, "username": "cafe"},
                      headers=owner_headers)
    assert dup.status_code == 400

    updated = client.put(f"/api/businesses/{business_id}", json={"rent_amount": 4500},
                         headers=owner_headers).get_json()
    assert updated["rent_amount"] == 4500

    removed = client.delete(f"/api/businesses/{business_id}", headers=owner_headers).get_json()
    assert removed["business"]["status"] == "terminated"
    assert db.session.get(Business, business_id) is not None


def test_business_lease_dates_are_checked(client, owner_headers):
    resp = client.post("/api/businesses", json={
        "name": "Shoe Box", "rent_amount": 1000,
        "lease_start_date": "2025-06-01", "lease_end_date": "2025-01-01",
    }, headers=owner_headers)
    assert resp.status_code == 400


def test_business_user_reads_only_itself(client, business_headers, business, other_business):
    assert client.get(f"/api/businesses/{business.id}", headers=business_headers).status_code == 200
    assert client.get(f"/api/businesses/{other_business.id}", headers=business_headers).status_code == 403
    assert client.get("/api/businesses", headers=business_headers).status_code == 403


# --- settings ---------------------------------------------------------------

def test_generation_day_is_validated(client, owner_headers):
    url = "/api/settings/information"
    assert client.put(url, json={"rent_bill_generation_day": 32}, headers=owner_headers).status_code == 400
    assert client.put(url, json={"rent_bill_generation_day": "x"}, headers=owner_headers).status_code == 400

    body = client.put(url, json={"rent_bill_generation_day": 15, "business_name": "City Plaza"},
                      headers=owner_headers).get_json()
    assert body["rent_bill_generation_day"] == 15
    assert Information.current().business_name == "City Plaza"


def test_terms_crud(client, owner_headers):
    created = client.post("/api/settings/terms", json={"title": "Late fee", "description": "2%"},
                          headers=owner_headers)
    assert created.status_code == 201
    term_id = created.get_json()["id"]
    assert client.get("/api/settings/terms", headers=owner_headers).get_json()["count"] == 1
    assert client.delete(f"/api/settings/terms/{term_id}", headers=owner_headers).status_code == 200
    assert client.post("/api/settings/terms", json={}, headers=owner_headers).status_code == 400


# --- reports ----------------------------------------------------------------

def test_unknown_report_is_404(client, owner_headers):
    resp = client.get("/api/reports/secrets", headers=owner_headers)
    assert resp.status_code == 404
    assert "customers" in resp.get_json()["details"]["available"]


def test_customer_report(client, owner_headers, business, other_business):
    other_business.status = "inactive"
    db.session.commit()
    body = client.get("/api/reports/customers", headers=owner_headers).get_json()
    assert body["total"] == 2
    assert body["active"] == 1
    assert body["byFloor"] == [{"floor": 0, "count": 1}, {"floor": 1, "count": 1}]


def test_collected_and_outstanding(app, business, make_bill):
    today = date(2025, 3, 20)
    paid = make_bill(business, 5000, "RENT-2025-001", bill_date=date(2025, 3, 1), status="paid")
    make_bill(business, 5000, "RENT-2025-002", bill_date=date(2025, 2, 1))
    db.session.add(Payment(business_id=business.id, bill_id=paid.id, amount=5000,
                           payment_method="upi", payment_date=date(2025, 3, 5)))
    db.session.add(MaintenanceBill(business_id=business.id, bill_number="MAINT-2025-001",
                                   bill_date=date(2025, 3, 2), due_date=date(2025, 3, 30),
                                   description="Cleaning", amount=800, status="pending"))
    db.session.commit()

    payments = payment_report(today)
    assert payments["totalCollected"] == 5000
    assert payments["thisMonth"] == 5000
    assert payments["lastMonth"] == 0
    assert {"method": "UPI", "amount": 5000.0, "count": 1} in payments["byMethod"]

    financial = financial_report(today)
    assert financial["revenue"] == 5000
    assert financial["outstanding"] == 5800
    assert len(financial["monthlyTrend"]) == 6
    assert financial["monthlyTrend"][-1] == {"month": "Mar", "year": 2025, "revenue": 5000.0, "outstanding": 800.0}
    assert financial["monthlyTrend"][-2]["outstanding"] == 5000.0


def test_reports_are_admin_only(client, business_headers):
    assert client.get("/api/reports", headers=business_headers).status_code == 403


# --- input parsing ----------------------------------------------------------

def test_advance_rejects_non_numeric_month(client, owner_headers, business):
    payload = {"business_id": business.id, "amount": 5000, "type": "rent", "month": "march", "year": 2025}
    assert client.post("/api/advances", json=payload, headers=owner_headers).status_code == 400

    payload.update(month=3, year="next")
    assert client.post("/api/advances", json=payload, headers=owner_headers).status_code == 400

    payload.update(year=2025, amount="NaN")
    assert client.post("/api/advances", json=payload, headers=owner_headers).status_code == 400


def test_business_fields_are_parsed(client, owner_headers, business):
    bad = client.put(f"/api/businesses/{business.id}", json={"floor_number": "ground"}, headers=owner_headers)
    assert bad.status_code == 400

    body = client.put(f"/api/businesses/{business.id}", json={"rent_management": "false", "floor_number": "2"},
                      headers=owner_headers).get_json()
    assert body["rent_management"] is False
    assert body["floor_number"] == 2
