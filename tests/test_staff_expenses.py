from datetime import date

from plazacore_backend.extensions import db
from plazacore_backend.models import FixedExpense, PlazaUtilityBill, Staff, StaffSalaryRecord, VariableExpense
from plazacore_backend.utils.expenses import expense_summary, generate_recurring_expenses


def _staff(app):
    db.session.add_all([
        Staff(name="Guard A", category="security", salary_amount=20000, status="active"),
        Staff(name="Cleaner B", category="cleaning", salary_amount=15000, status="active"),
        Staff(name="Former C", category="other", salary_amount=10000, status="inactive"),
    ])
    db.session.commit()


def test_salary_generation_covers_active_staff_once(client, owner_headers, app):
    _staff(app)
    url = "/api/staff/salaries/generate"

    body = client.post(url, json={"month": 3, "year": 2025}, headers=owner_headers).get_json()
    assert body["generated"] == 2
    assert sorted(r["amount"] for r in body["records"]) == [15000, 20000]

    body = client.post(url, json={"month": 3, "year": 2025}, headers=owner_headers).get_json()
    assert body["generated"] == 0
    assert body["message"] == "All salary records already exist"
    assert StaffSalaryRecord.query.count() == 2


def test_salary_generation_validates_month(client, owner_headers, app):
    resp = client.post("/api/staff/salaries/generate", json={"month": 13, "year": 2025}, headers=owner_headers)
    assert resp.status_code == 400


def test_salary_can_be_paid_once(client, owner_headers, app):
    _staff(app)
    record = client.post("/api/staff/salaries/generate", json={"month": 3, "year": 2025},
                         headers=owner_headers).get_json()["records"][0]
    url = f"/api/staff/salaries/{record['id']}/pay"

    body = client.post(url, json={"payment_method": "bank_transfer"}, headers=owner_headers).get_json()
    assert body["status"] == "paid"
    assert body["paid_date"] == date.today().isoformat()
    assert client.post(url, json={}, headers=owner_headers).status_code == 409


def test_staff_crud_requires_admin(client, owner_headers, business_headers):
    resp = client.post("/api/staff", json={"name": "Guard D", "salary_amount": 18000, "category": "security"},
                       headers=owner_headers)
    assert resp.status_code == 201
    assert client.get("/api/staff", headers=business_headers).status_code == 403
    bad = client.post("/api/staff", json={"name": "X", "salary_amount": 1, "category": "chef"},
                      headers=owner_headers)
    assert bad.status_code == 400


def test_recurring_expenses_roll_forward(app):
    today = date(2025, 3, 1)
    db.session.add_all([
        FixedExpense(title="Building electricity", utility_type="electricity", amount=12000,
                     frequency="monthly", next_due_date=today, auto_generate=True, status="active"),
        FixedExpense(title="Insurance", utility_type="other", amount=50000,
                     frequency="annual", next_due_date=date(2025, 2, 15), auto_generate=True, status="active"),
        FixedExpense(title="Paused lift AMC", utility_type="other", amount=8000,
                     frequency="quarterly", next_due_date=today, auto_generate=True, status="paused"),
    ])
    db.session.commit()

    result = generate_recurring_expenses(today)

    assert result["generated"] == 2
    assert result["message"] == "Successfully generated 2 recurring bills"
    assert PlazaUtilityBill.query.count() == 2
    dues = {t.title: t.next_due_date for t in FixedExpense.query.all()}
    assert dues["Building electricity"] == date(2025, 4, 1)
    assert dues["Insurance"] == date(2026, 2, 15)
    assert dues["Paused lift AMC"] == today


def test_nothing_due(app):
    assert generate_recurring_expenses(date(2025, 3, 1))["message"] == "No recurring bills are due"


def test_expense_summary(app):
    _staff(app)
    db.session.add(VariableExpense(title="Paint", category="repairs", amount=2500, expense_date=date(2025, 3, 5)))
    db.session.add(FixedExpense(title="Water", utility_type="water", amount=1000, frequency="monthly",
                                next_due_date=date(2025, 3, 1), auto_generate=True, status="active"))
    db.session.commit()
    generate_recurring_expenses(date(2025, 3, 1))

    summary = expense_summary(3, 2025)
    assert summary["variable_expenses"] == 2500
    assert summary["utility_bills"] == 1000
    assert summary["utility_bills_paid"] == 0
    assert summary["total"] == 3500


def test_salary_generation_rejects_text_month(client, owner_headers):
    resp = client.post("/api/staff/salaries/generate", json={"month": "x", "year": 2025}, headers=owner_headers)
    assert resp.status_code == 400


def test_auto_generate_accepts_string_false(client, owner_headers):
    resp = client.post("/api/expenses/fixed", json={
        "title": "Generator fuel", "amount": 3000, "next_due_date": "2025-03-01", "auto_generate": "false",
    }, headers=owner_headers)
    assert resp.status_code == 201
    assert FixedExpense.query.one().auto_generate is False
