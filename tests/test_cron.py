from datetime import date

import pytest

from plazacore_backend.extensions import db
from plazacore_backend.models import Bill, Information

URL = "/api/cron/generate-rent-bills"


@pytest.fixture
def generation_today(app):
    db.session.add(Information(business_name="Plaza", rent_bill_generation_day=date.today().day))
    db.session.commit()


@pytest.fixture
def production(app):
    app.config["FLASK_ENV"] = "production"
    yield app
    app.config["FLASK_ENV"] = "testing"


def test_cron_runs_without_secret_outside_production(client, business, generation_today):
    resp = client.post(URL)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "Rent bill generation completed"
    assert body["statistics"]["generated"] == 1
    assert Bill.query.count() == 1


def test_cron_reports_mismatched_day(client, business):
    day = 2 if date.today().day == 1 else 1
    db.session.add(Information(business_name="Plaza", rent_bill_generation_day=day))
    db.session.commit()

    body = client.post(URL).get_json()
    assert body["generated"] == 0
    assert body["configuredDay"] == day
    assert body["currentDay"] == date.today().day


def test_cron_requires_bearer_secret_in_production(client, production, business, generation_today):
    resp = client.post(URL)
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Unauthorized"}

    resp = client.post(URL, headers={"Authorization": "Bearer wrong"})
    assert resp.status_code == 401

    resp = client.post(URL, headers={"Authorization": "Bearer cron-test-secret"})
    assert resp.status_code == 200
    assert resp.get_json()["statistics"]["generated"] == 1


def test_get_alias_is_refused_in_production(client, production):
    resp = client.get(URL)
    assert resp.status_code == 405
    assert resp.get_json() == {"error": "Method not allowed"}


def test_get_alias_runs_outside_production(client, business, generation_today):
    resp = client.get(URL)
    assert resp.status_code == 200
    assert resp.get_json()["statistics"]["generated"] == 1


def test_admin_trigger_requires_admin_role(client, business_headers, owner_headers, generation_today):
    assert client.post("/api/admin/trigger-rent-bills").status_code == 401
    assert client.post("/api/admin/trigger-rent-bills", headers=business_headers).status_code == 403

    resp = client.post("/api/admin/trigger-rent-bills", headers=owner_headers)
    assert resp.status_code == 200
    assert resp.get_json()["statistics"]["generated"] == 1


def test_unexpected_failure_returns_500(client, monkeypatch):
    def explode(today=None):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr("plazacore_backend.routes.cron.generate_rent_bills", explode)
    resp = client.post(URL)
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error", "message": "database unavailable"}
