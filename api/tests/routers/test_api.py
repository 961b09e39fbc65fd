"""
HTTP-level tests for the API surface — no database.

``get_db`` is overridden with a stub session and ``today`` is pinned, so
status-bearing responses are reproducible.
"""
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.clock import today
from app.core.database import get_db
from app.main import app, limiter
from app.models.property import Property
from app.models.rental import Payment, Tenant
from app.routers import dashboard as dashboard_router
from app.services import rent_roll

TODAY = date(2024, 12, 10)
NOW = datetime(2024, 12, 1, tzinfo=timezone.utc)


class StubSession:
    """Stands in for AsyncSession; ``execute`` raises ``error`` when set."""

    def __init__(self, error: Exception | None = None):
        self.error = error

    async def execute(self, *args, **kwargs):
        if self.error is not None:
            raise self.error
        raise AssertionError("unexpected store access")


@pytest.fixture
def session():
    return StubSession()


@pytest.fixture
def client(session, monkeypatch):
    monkeypatch.setattr(limiter, "enabled", False)

    async def _stub_db():
        yield session

    app.dependency_overrides[get_db] = _stub_db
    app.dependency_overrides[today] = lambda: TODAY
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _unit(number: str, status: str, rent: str) -> Property:
    return Property(
        id=uuid.uuid4(), unit_number=number, street_address=f"123 Oak Street, Apt {number}",
        monthly_rent=Decimal(rent), security_deposit=Decimal(rent), occupancy_status=status,
        created_at=NOW, updated_at=NOW,
    )


def _payment(unit: Property, tenant_name: str, due: date, amount_due: str, amount_paid: str,
             paid_on: date | None) -> Payment:
    tenant = Tenant(
        id=uuid.uuid4(), name=tenant_name, property_id=unit.id, created_at=NOW, updated_at=NOW,
    )
    tenant.property = unit
    payment = Payment(
        id=uuid.uuid4(), tenant_id=tenant.id, rent_due_date=due,
        amount_due=Decimal(amount_due), amount_paid=Decimal(amount_paid),
        payment_date=paid_on, payment_method="bank_transfer" if paid_on else None,
        created_at=NOW, updated_at=NOW,
    )
    payment.tenant = tenant
    return payment


@pytest.fixture
def portfolio():
    a, b, c = _unit("101", "occupied", "1200"), _unit("102", "occupied", "1500"), _unit("103", "vacant", "1100")
    payments = [
        _payment(b, "John Roe", date(2024, 12, 15), "1500", "0", None),
        _payment(a, "Jane Doe", date(2024, 12, 1), "1200", "1200", date(2024, 11, 30)),
        _payment(b, "John Roe", date(2024, 11, 1), "1500", "0", None),
    ]
    return [a, b, c], payments


@pytest.fixture
def stub_reads(monkeypatch, portfolio):
    properties, payments = portfolio

    async def _load_properties(db):
        return properties

    async def _load_payments_with_status(db, as_of, tenant_name=None, tenant_id=None):
        rows = [p for p in payments if not tenant_name or tenant_name.lower() in p.tenant.name.lower()]
        return rent_roll.with_status(rows, as_of)

    monkeypatch.setattr(dashboard_router, "load_properties", _load_properties)
    monkeypatch.setattr(dashboard_router, "load_payments_with_status", _load_payments_with_status)
    monkeypatch.setattr(rent_roll, "load_payments_with_status", _load_payments_with_status)


# ── Health / middleware ──────────────────────────────────────────────────────

class TestHealth:
    def test_health_reports_business_date(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["business_date"] == "2024-12-10"

    def test_security_headers(self, client):
        resp = client.get("/health")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "DENY"
        assert "Cache-Control" not in resp.headers

    def test_api_responses_not_cached(self, client):
        resp = client.get("/api/v1/payments/with-status?status=late")
        assert resp.headers["Cache-Control"] == "no-store"

    def test_unknown_route(self, client):
        resp = client.get("/api/v1/nope")
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Not Found"}


# ── Store errors ─────────────────────────────────────────────────────────────

class TestStoreErrors:
    def test_unreachable_store_is_503(self, client, session):
        session.error = OperationalError("SELECT 1", {}, Exception("connection refused"))
        resp = client.get("/health/db")
        assert resp.status_code == 503
        assert resp.json() == {"detail": "connection refused"}

    def test_constraint_violation_is_409(self, client, session):
        session.error = IntegrityError("DELETE", {}, Exception("violates foreign key constraint"))
        resp = client.delete(f"/api/v1/properties/{uuid.uuid4()}")
        assert resp.status_code == 409
        assert "foreign key" in resp.json()["detail"]


# ── Validation ───────────────────────────────────────────────────────────────

class TestValidation:
    def test_paid_without_date_is_422(self, client):
        resp = client.post("/api/v1/payments/", json={
            "tenant_id": str(uuid.uuid4()),
            "rent_due_date": "2024-12-01",
            "amount_due": "1500",
            "amount_paid": "1500",
        })
        assert resp.status_code == 422

    def test_record_requires_every_field(self, client):
        resp = client.post("/api/v1/payments/record", json={
            "tenant_id": str(uuid.uuid4()),
            "amount_paid": "1200",
        })
        assert resp.status_code == 422

    def test_bad_uuid_is_422(self, client):
        assert client.get("/api/v1/tenants/not-a-uuid").status_code == 422

    def test_unknown_status_filter_is_422(self, client):
        assert client.get("/api/v1/payments/with-status?status=late").status_code == 422


# ── Rent roll / dashboard ────────────────────────────────────────────────────

class TestRentRoll:
    def test_statuses_computed_against_pinned_date(self, client, stub_reads):
        resp = client.get("/api/v1/payments/with-status")
        assert resp.status_code == 200
        body = resp.json()
        assert [p["status"] for p in body] == ["pending", "paid_on_time", "overdue"]
        assert {p["as_of"] for p in body} == {"2024-12-10"}
        assert body[2]["status_label"] == "Overdue"
        assert body[2]["tenant"]["property"]["unit_number"] == "102"

    def test_status_filter(self, client, stub_reads):
        body = client.get("/api/v1/payments/with-status?status=overdue").json()
        assert len(body) == 1
        assert Decimal(body[0]["outstanding"]) == Decimal("1500")

    def test_name_search(self, client, stub_reads):
        body = client.get("/api/v1/payments/with-status?q=jane").json()
        assert [p["tenant"]["name"] for p in body] == ["Jane Doe"]


class TestDashboard:
    def test_stats(self, client, stub_reads):
        resp = client.get("/api/v1/dashboard/stats")
        assert resp.status_code == 200
        stats = resp.json()
        assert stats["as_of"] == "2024-12-10"
        assert stats["total_units"] == 3
        assert stats["occupied_units"] == 2
        assert stats["vacancy_rate"] == pytest.approx(100 / 3)
        assert Decimal(stats["expected_monthly_rent"]) == Decimal("2700")
        # Paid 2024-11-30: collected last month
        assert Decimal(stats["total_collected_this_month"]) == Decimal(0)
        assert stats["collection_rate"] == 0
        assert len(stats["overdue_payments"]) == 1
        assert len(stats["pending_payments"]) == 1
        assert Decimal(stats["total_overdue_amount"]) == Decimal("1500")
