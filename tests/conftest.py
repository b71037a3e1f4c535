"""Pytest fixtures for staffing payroll tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from staffing_payroll.config import Settings
from staffing_payroll.models import (
    Base,
    Client,
    Employee,
    PayPeriod,
    Role,
    WorkEntry,
)

# In-memory SQLite per test; Postgres-only features are not used by the models
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """Create a fresh test database engine with savepoint support."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    # pysqlite/aiosqlite emit their own BEGIN lazily, which breaks SAVEPOINT.
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def settings() -> Settings:
    """Settings with the production defaults, independent of the environment."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="INFO",
        currency="USD",
        payment_purpose="Contractor Payment",
        invoice_item="Contractor Services",
        invoice_due_days=30,
        w8ben_validity_years=3,
        document_expiry_warning_days=30,
    )


@pytest.fixture
async def test_role(session: AsyncSession) -> Role:
    """Create a role billed and paid at $20/hour."""
    role = Role(name="Agent", description="Lead qualification", hourly_rate=Decimal("20.00"))
    session.add(role)
    await session.flush()
    return role


@pytest.fixture
async def test_client(session: AsyncSession) -> Client:
    client = Client(name="Acme Corp", email="billing@acme.example", status="active")
    session.add(client)
    await session.flush()
    return client


@pytest.fixture
async def test_employee(
    session: AsyncSession, test_client: Client, test_role: Role
) -> Employee:
    employee = Employee(
        first_name="Jane",
        last_name="Doe",
        email="jane.doe@example.com",
        client_id=test_client.id,
        role_id=test_role.id,
        start_date=date(2025, 6, 1),
        status="active",
    )
    session.add(employee)
    await session.flush()
    return employee


@pytest.fixture
async def open_period(session: AsyncSession) -> PayPeriod:
    """Create an open biweekly period, 2026-01-01 to 2026-01-14."""
    period = PayPeriod(
        period_start=date(2026, 1, 1),
        period_end=date(2026, 1, 14),
        period_type="biweekly",
        status="open",
    )
    session.add(period)
    await session.flush()
    return period


@pytest.fixture
async def worked_period(
    session: AsyncSession, open_period: PayPeriod, test_employee: Employee
) -> PayPeriod:
    """Closed period where Jane logged 10 + 12 + 8 hours and a $5 spif."""
    session.add_all(
        [
            WorkEntry(
                employee_id=test_employee.id,
                pay_period_id=open_period.id,
                work_date=date(2026, 1, 5),
                hours_worked=Decimal("10"),
                leads_processed=4,
                spifs=Decimal("5.00"),
            ),
            WorkEntry(
                employee_id=test_employee.id,
                pay_period_id=open_period.id,
                work_date=date(2026, 1, 6),
                hours_worked=Decimal("12"),
                leads_processed=3,
            ),
            WorkEntry(
                employee_id=test_employee.id,
                pay_period_id=open_period.id,
                work_date=date(2026, 1, 7),
                hours_worked=Decimal("8"),
            ),
        ]
    )
    open_period.status = "closed"
    await session.flush()
    return open_period
