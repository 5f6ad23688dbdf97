"""API endpoint tests.

Tests the FastAPI endpoints against an in-memory SQLite database.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from payday.api.app import create_app

from factories import MONTH

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def client(seeded_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to an app using the test database."""
    app = create_app(session_factory=seeded_factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def record_unpaid_leave(client: AsyncClient) -> dict:
    response = await client.post(
        "/api/v1/leaves",
        json={
            "employee_id": "emp-a",
            "leave_type": "unpaid_leave",
            "start_date": "2026-10-05",
            "end_date": "2026-10-07",
            "note": "moving house",
        },
    )
    assert response.status_code == 201
    return response.json()


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        """Health endpoint should return 200."""
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert "timestamp" in data

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestLeaveEndpoints:
    """Test leave endpoints."""

    async def test_quote_leave(self, client: AsyncClient):
        """POST /api/v1/leaves/quote computes without saving."""
        response = await client.post(
            "/api/v1/leaves/quote",
            json={
                "employee_id": "emp-b",
                "leave_type": "sick_leave",
                "start_date": "2026-10-01",
                "end_date": "2026-10-10",
            },
        )
        assert response.status_code == 200

        data = response.json()
        assert data["days"] == 10
        assert float(data["deduction"]) == 133.33

        listing = await client.get("/api/v1/leaves")
        assert listing.json()["total"] == 0

    async def test_quote_for_unknown_employee_is_zero(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/leaves/quote",
            json={
                "employee_id": "ghost",
                "leave_type": "unpaid_leave",
                "start_date": "2026-10-05",
                "end_date": "2026-10-07",
            },
        )
        assert response.status_code == 200
        assert response.json()["days"] == 3
        assert float(response.json()["deduction"]) == 0.0

    async def test_create_leave(self, client: AsyncClient):
        data = await record_unpaid_leave(client)

        assert data["employee_name"] == "Ayla Aksoy"
        assert data["leave_type"] == "unpaid_leave"
        assert data["leave_type_name"] == "Unpaid leave"
        assert data["days"] == 3
        assert float(data["deduction"]) == 300.0
        assert data["month"] == MONTH
        assert data["status"] == "active"

    async def test_reversed_dates_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/leaves",
            json={
                "employee_id": "emp-a",
                "leave_type": "unpaid_leave",
                "start_date": "2026-10-07",
                "end_date": "2026-10-05",
            },
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_unknown_leave_type_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/leaves",
            json={
                "employee_id": "emp-a",
                "leave_type": "sabbatical",
                "start_date": "2026-10-05",
                "end_date": "2026-10-07",
            },
        )
        assert response.status_code == 422

    async def test_unknown_employee_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/leaves",
            json={
                "employee_id": "ghost",
                "leave_type": "annual_leave",
                "start_date": "2026-10-05",
                "end_date": "2026-10-07",
            },
        )
        assert response.status_code == 400

    async def test_list_and_delete(self, client: AsyncClient):
        leave = await record_unpaid_leave(client)

        listing = await client.get("/api/v1/leaves", params={"month": MONTH})
        assert listing.status_code == 200
        assert [l["leave_id"] for l in listing.json()["items"]] == [leave["leave_id"]]

        response = await client.delete(f"/api/v1/leaves/{leave['leave_id']}")
        assert response.status_code == 204

        listing = await client.get("/api/v1/leaves", params={"month": MONTH})
        assert listing.json()["total"] == 0

        again = await client.delete(f"/api/v1/leaves/{leave['leave_id']}")
        assert again.status_code == 404

    async def test_list_rejects_bad_month(self, client: AsyncClient):
        response = await client.get("/api/v1/leaves", params={"month": "October"})
        assert response.status_code == 400


class TestSalaryRunEndpoints:
    """Test salary run review and commit."""

    async def test_get_salary_run(self, client: AsyncClient):
        await record_unpaid_leave(client)

        response = await client.get(f"/api/v1/salary-runs/{MONTH}")
        assert response.status_code == 200

        data = response.json()
        rows = {r["employee_id"]: r for r in data["rows"]}
        assert set(rows) == {"emp-a", "emp-b", "emp-c"}
        assert float(rows["emp-a"]["net_bank_salary"]) == 2700.0
        assert rows["emp-a"]["leave_days"] == 3
        assert all(r["selected"] for r in data["rows"])
        assert float(data["totals"]["bank_total"]) == 9200.0
        assert data["totals"]["unpaid_count"] == 3

    async def test_bad_month_key(self, client: AsyncClient):
        response = await client.get("/api/v1/salary-runs/2026-13")
        assert response.status_code == 400

    async def test_commit_requires_confirmation(self, client: AsyncClient):
        """Without confirmed_total nothing is paid and the total is returned."""
        response = await client.post(
            f"/api/v1/salary-runs/{MONTH}/commit",
            json={
                "payment_date": "2026-10-28",
                "items": [
                    {"employee_id": "emp-a"},
                    {"employee_id": "emp-b", "bank_amount": "1500"},
                ],
            },
        )
        assert response.status_code == 409

        data = response.json()
        assert data["code"] == "CONFIRMATION_REQUIRED"
        assert data["employee_count"] == 2
        assert float(data["total"]) == 4500.0

        run = await client.get(f"/api/v1/salary-runs/{MONTH}")
        assert run.json()["totals"]["paid_count"] == 0

    async def test_commit_with_wrong_total(self, client: AsyncClient):
        response = await client.post(
            f"/api/v1/salary-runs/{MONTH}/commit",
            json={
                "payment_date": "2026-10-28",
                "items": [{"employee_id": "emp-a"}],
                "confirmed_total": "1",
            },
        )
        assert response.status_code == 409

    async def test_confirmed_commit(self, client: AsyncClient):
        await record_unpaid_leave(client)

        response = await client.post(
            f"/api/v1/salary-runs/{MONTH}/commit",
            json={
                "payment_date": "2026-10-28",
                "items": [
                    {"employee_id": "emp-a"},
                    {"employee_id": "emp-b", "bank_amount": "1800"},
                ],
                "confirmed_total": "4500.00",
            },
        )
        assert response.status_code == 200

        report = response.json()
        assert report["success_count"] == 2
        assert report["failure_count"] == 0
        assert float(report["paid_total"]) == 4500.0
        assert report["summary"] == "2 succeeded"

        run = (await client.get(f"/api/v1/salary-runs/{MONTH}")).json()
        rows = {r["employee_id"]: r for r in run["rows"]}
        assert rows["emp-a"]["is_paid"] is True
        assert rows["emp-b"]["is_paid"] is True
        assert rows["emp-c"]["is_paid"] is False
        assert [r["employee_id"] for r in run["rows"]][0] == "emp-c"

    async def test_paid_employee_cannot_be_committed_again(self, client: AsyncClient):
        body = {
            "payment_date": "2026-10-28",
            "items": [{"employee_id": "emp-c"}],
            "confirmed_total": "4500.00",
        }
        first = await client.post(f"/api/v1/salary-runs/{MONTH}/commit", json=body)
        assert first.status_code == 200

        second = await client.post(f"/api/v1/salary-runs/{MONTH}/commit", json=body)
        assert second.status_code == 400

    async def test_default_selection_pays_everyone_unpaid(self, client: AsyncClient):
        response = await client.post(
            f"/api/v1/salary-runs/{MONTH}/commit",
            json={"payment_date": "2026-10-28", "confirmed_total": "9500.00"},
        )
        assert response.status_code == 200
        assert response.json()["success_count"] == 3

    async def test_non_positive_override_rejected(self, client: AsyncClient):
        response = await client.post(
            f"/api/v1/salary-runs/{MONTH}/commit",
            json={
                "payment_date": "2026-10-28",
                "items": [{"employee_id": "emp-a", "bank_amount": "0"}],
                "confirmed_total": "0",
            },
        )
        assert response.status_code == 400

    async def test_duplicate_items_rejected(self, client: AsyncClient):
        """An employee listed twice is refused before anything is written."""
        response = await client.post(
            f"/api/v1/salary-runs/{MONTH}/commit",
            json={
                "payment_date": "2026-10-28",
                "items": [
                    {"employee_id": "emp-a"},
                    {"employee_id": "emp-a", "bank_amount": "1000"},
                ],
                "confirmed_total": "3000.00",
            },
        )
        assert response.status_code == 400
        assert "emp-a" in response.json()["detail"]

        run = await client.get(f"/api/v1/salary-runs/{MONTH}")
        assert run.json()["totals"]["paid_count"] == 0

    async def test_non_finite_override_rejected(self, client: AsyncClient):
        response = await client.post(
            f"/api/v1/salary-runs/{MONTH}/commit",
            json={
                "payment_date": "2026-10-28",
                "items": [{"employee_id": "emp-a", "bank_amount": "NaN"}],
                "confirmed_total": "3000.00",
            },
        )
        assert response.status_code in (400, 422)
