"""API endpoint tests.

Requests go through the ASGI app with the session dependency pointed at the
per-test in-memory database.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from staffing_payroll.api.app import create_app
from staffing_payroll.api.dependencies import get_db_session

pytestmark = pytest.mark.asyncio


@pytest.fixture
async def api_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(use_lifespan=False)

    async def override_session():
        async with session_factory() as db:
            yield db

    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def seeded(session, test_client, test_role, test_employee):
    """Commit the roster so request sessions can see it."""
    await session.commit()
    return {"client": test_client, "role": test_role, "employee": test_employee}


async def create_period(api_client, start="2026-01-01", end="2026-01-14"):
    response = await api_client.post(
        "/api/v1/pay-periods",
        json={"period_start": start, "period_end": end, "period_type": "biweekly"},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def log_hours(api_client, employee_id, period_id):
    for day, hours, spifs in (("2026-01-05", "10", "5.00"), ("2026-01-06", "12", None), ("2026-01-07", "8", None)):
        payload = {
            "employee_id": str(employee_id),
            "pay_period_id": period_id,
            "work_date": day,
            "hours_worked": hours,
        }
        if spifs:
            payload["spifs"] = spifs
        response = await api_client.put("/api/v1/work-entries", json=payload)
        assert response.status_code == 200, response.text


class TestHealthEndpoints:
    async def test_health_check(self, api_client):
        response = await api_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"

    async def test_readiness_and_liveness(self, api_client):
        response = await api_client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready", "missing_tables": []}
        assert (await api_client.get("/live")).json() == {"status": "alive"}

    async def test_not_ready_without_schema(self):
        engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
        factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

        async def empty_session():
            async with factory() as db:
                yield db

        app = create_app(use_lifespan=False)
        app.dependency_overrides[get_db_session] = empty_session
        try:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.get("/ready")
        finally:
            await engine.dispose()

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "schema_missing"
        assert "pay_period" in body["missing_tables"]
        assert "work_entry" in body["missing_tables"]


class TestPayPeriodEndpoints:
    async def test_create_get_and_list(self, api_client):
        period = await create_period(api_client)
        assert period["status"] == "open"

        response = await api_client.get(f"/api/v1/pay-periods/{period['id']}")
        assert response.status_code == 200
        assert response.json()["period_end"] == "2026-01-14"

        response = await api_client.get("/api/v1/pay-periods", params={"status": "open"})
        assert [p["id"] for p in response.json()] == [period["id"]]

    async def test_invalid_dates(self, api_client):
        response = await api_client.post(
            "/api/v1/pay-periods",
            json={"period_start": "2026-01-14", "period_end": "2026-01-01"},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_overlap_conflict(self, api_client):
        await create_period(api_client)
        response = await api_client.post(
            "/api/v1/pay-periods",
            json={"period_start": "2026-01-10", "period_end": "2026-01-24"},
        )
        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    async def test_invalid_transition(self, api_client):
        period = await create_period(api_client)
        response = await api_client.post(
            f"/api/v1/pay-periods/{period['id']}/status", json={"status": "processed"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "INVALID_TRANSITION"
        assert body["details"] == {
            "current": "open",
            "requested": "processed",
            "allowed": ["closed"],
        }

    async def test_unknown_period(self, api_client):
        response = await api_client.get(
            "/api/v1/pay-periods/00000000-0000-0000-0000-000000000000"
        )
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


class TestPayrollFlow:
    async def test_log_close_generate_export(self, api_client, seeded):
        employee = seeded["employee"]
        period = await create_period(api_client)
        await log_hours(api_client, employee.id, period["id"])

        # payroll needs a closed period
        response = await api_client.post(
            "/api/v1/payroll-runs", json={"pay_period_id": period["id"]}
        )
        assert response.status_code == 409
        assert response.json()["code"] == "PRECONDITION_FAILED"

        response = await api_client.post(
            f"/api/v1/pay-periods/{period['id']}/status", json={"status": "closed"}
        )
        assert response.status_code == 200

        # closed periods reject new work
        response = await api_client.put(
            "/api/v1/work-entries",
            json={
                "employee_id": str(employee.id),
                "pay_period_id": period["id"],
                "work_date": "2026-01-08",
                "hours_worked": "4",
            },
        )
        assert response.status_code == 409

        response = await api_client.post(
            "/api/v1/payroll-runs",
            json={"pay_period_id": period["id"], "run_date": "2026-01-15"},
        )
        assert response.status_code == 201, response.text
        run = response.json()
        assert run["status"] == "draft"
        assert run["employee_count"] == 1
        assert run["total_amount"] == "605.00"
        assert run["entries"][0]["employee_name"] == "Jane Doe"

        response = await api_client.post(
            "/api/v1/payroll-runs", json={"pay_period_id": period["id"]}
        )
        assert response.status_code == 409
        assert response.json()["details"]["existing_id"] == run["id"]

        response = await api_client.get(f"/api/v1/payroll-runs/{run['id']}/export")
        assert response.status_code == 409

        response = await api_client.post(
            f"/api/v1/payroll-runs/{run['id']}/status", json={"status": "processed"}
        )
        assert response.status_code == 200

        response = await api_client.get(f"/api/v1/payroll-runs/{run['id']}/export")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert (
            f'filename="payroll-veem-2026-01-15-{run["id"][:8]}.csv"'
            in response.headers["content-disposition"]
        )
        lines = response.text.split("\n")
        assert lines[1] == (
            "jane.doe@example.com,Jane,Doe,605.00,USD,Contractor Payment,"
            "Pay period: 2026-01-01 to 2026-01-14"
        )

        response = await api_client.get(f"/api/v1/payroll-runs/{run['id']}")
        assert response.json()["status"] == "sent"
        response = await api_client.get(f"/api/v1/pay-periods/{period['id']}")
        assert response.json()["status"] == "processed"


class TestInvoiceFlow:
    async def test_generate_and_export(self, api_client, seeded):
        client, role, employee = seeded["client"], seeded["role"], seeded["employee"]
        period = await create_period(api_client)
        await log_hours(api_client, employee.id, period["id"])

        response = await api_client.post(
            f"/api/v1/clients/{client.id}/pricing",
            json={
                "role_id": str(role.id),
                "hourly_rate": "35.00",
                "effective_from": "2025-12-01",
            },
        )
        assert response.status_code == 201, response.text

        response = await api_client.post(
            "/api/v1/invoices",
            json={
                "client_id": str(client.id),
                "pay_period_id": period["id"],
                "invoice_date": "2026-01-20",
            },
        )
        assert response.status_code == 201, response.text
        invoice = response.json()
        assert invoice["invoice_number"] == "INV-2026-0001"
        assert invoice["total_amount"] == "1050.00"
        assert invoice["line_items"][0]["description"] == "Jane Doe - Agent"

        response = await api_client.get(f"/api/v1/invoices/{invoice['id']}/export")
        assert response.status_code == 200
        assert "invoice-INV-2026-0001-Acme-Corp.csv" in response.headers["content-disposition"]
        assert response.text.split("\n")[1] == (
            "INV-2026-0001,Acme Corp,2026-01-20,2026-02-19,Contractor Services,"
            "Jane Doe - Agent,30.00,35.00,1050.00"
        )

        response = await api_client.post(
            f"/api/v1/invoices/{invoice['id']}/status", json={"status": "sent"}
        )
        assert response.json()["status"] == "sent"

    async def test_client_without_hours(self, api_client, seeded):
        period = await create_period(api_client)
        response = await api_client.post(
            "/api/v1/invoices",
            json={"client_id": str(seeded["client"].id), "pay_period_id": period["id"]},
        )
        assert response.status_code == 422
        assert response.json()["code"] == "NO_BILLABLE_HOURS"


class TestTimeOffEndpoints:
    async def test_request_decide_and_summarize(self, api_client, seeded):
        employee = seeded["employee"]
        period = await create_period(api_client)

        response = await api_client.post(
            "/api/v1/time-off",
            json={
                "employee_id": str(employee.id),
                "leave_type": "pto",
                "start_date": "2026-01-08",
                "end_date": "2026-01-12",
            },
        )
        assert response.status_code == 201, response.text
        request = response.json()
        assert request["days_count"] == 3

        response = await api_client.post(
            f"/api/v1/time-off/{request['id']}/decision", json={"status": "approved"}
        )
        assert response.json()["status"] == "approved"

        response = await api_client.get(f"/api/v1/time-off/summary/{period['id']}")
        assert response.json()["items"] == [
            {"employee_id": str(employee.id), "pto": 3, "sick": 0, "unpaid": 0}
        ]


class TestRosterEndpoints:
    async def test_role_in_use_cannot_be_deleted(self, api_client, seeded):
        response = await api_client.delete(f"/api/v1/roles/{seeded['role'].id}")
        assert response.status_code == 409

        response = await api_client.post(
            f"/api/v1/employees/{seeded['employee'].id}/deactivate"
        )
        assert response.json()["status"] == "inactive"

        response = await api_client.delete(f"/api/v1/roles/{seeded['role'].id}")
        assert response.status_code == 204

    async def test_duplicate_pricing_conflicts(self, api_client, seeded):
        payload = {
            "role_id": str(seeded["role"].id),
            "hourly_rate": "35.00",
            "effective_from": "2026-01-01",
        }
        url = f"/api/v1/clients/{seeded['client'].id}/pricing"
        assert (await api_client.post(url, json=payload)).status_code == 201
        assert (await api_client.post(url, json=payload)).status_code == 409

    async def test_document_alerts(self, api_client, seeded):
        response = await api_client.post(
            f"/api/v1/employees/{seeded['employee'].id}/documents",
            json={"document_type": "w8ben", "file_name": "w8.pdf", "upload_date": "2023-01-20"},
        )
        assert response.status_code == 201, response.text
        assert response.json()["expiry_date"] == "2026-01-20"

        response = await api_client.get("/api/v1/documents/alerts", params={"today": "2026-01-10"})
        alerts = response.json()
        assert len(alerts) == 1
        assert alerts[0]["status"] == "expiring"
        assert alerts[0]["employee_name"] == "Jane Doe"
        assert alerts[0]["days_remaining"] == 10


class TestErrorMapping:
    async def test_storage_failure_is_internal_error(self):
        from sqlalchemy.exc import OperationalError

        class BrokenSession:
            async def execute(self, *args, **kwargs):
                raise OperationalError("SELECT", {}, Exception("database is down"))

        async def broken_session():
            yield BrokenSession()

        app = create_app(use_lifespan=False)
        app.dependency_overrides[get_db_session] = broken_session
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/v1/pay-periods")

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "INTERNAL_ERROR"
        assert "SELECT" not in body["detail"]
