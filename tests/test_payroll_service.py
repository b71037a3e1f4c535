"""Tests for payroll run generation and lifecycle."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from staffing_payroll.exceptions import Conflict, InvalidTransition, PreconditionFailed
from staffing_payroll.models import AuditLog, Employee, PayrollEntry
from staffing_payroll.services.pay_period_service import PayPeriodService
from staffing_payroll.services.payroll_service import PayrollService
from staffing_payroll.services.work_entry_service import WorkEntryService


class TestGeneratePayrollRun:
    async def test_generates_run_for_closed_period(self, session, worked_period, test_employee):
        service = PayrollService(session)

        run = await service.generate_payroll_run(worked_period.id, date(2026, 1, 15))

        assert run.status == "draft"
        assert run.run_date == date(2026, 1, 15)
        assert run.employee_count == 1
        assert run.total_amount == Decimal("605.00")

        loaded = await service.get_payroll_run(run.id)
        entry = loaded.entries[0]
        assert entry.employee_id == test_employee.id
        assert entry.base_hours == Decimal("30")
        assert entry.hourly_rate == Decimal("20")
        assert entry.base_pay == Decimal("600.00")
        assert entry.spifs_bonus == Decimal("5.00")
        assert entry.leads_bonus == Decimal("0")
        assert entry.net_pay == Decimal("605.00")

    async def test_fractional_hours_are_paid_exactly(
        self, session, open_period, test_employee, test_role
    ):
        test_role.hourly_rate = Decimal("25.00")
        entries = WorkEntryService(session)
        await entries.set_work_entry(
            test_employee.id, open_period.id, date(2026, 1, 5), hours_worked=Decimal("24")
        )
        await entries.set_work_entry(
            test_employee.id, open_period.id, date(2026, 1, 6), hours_worked=Decimal("9.333")
        )
        await PayPeriodService(session).transition_status(open_period.id, "closed")
        await session.flush()
        service = PayrollService(session)

        run = await service.generate_payroll_run(open_period.id)

        entry = (await service.get_payroll_run(run.id)).entries[0]
        assert entry.base_hours == Decimal("33.333")
        assert entry.base_pay == Decimal("833.33")
        assert run.total_amount == Decimal("833.33")

    async def test_open_period_rejected(self, session, open_period, test_employee):
        with pytest.raises(PreconditionFailed):
            await PayrollService(session).generate_payroll_run(open_period.id)

    async def test_second_generation_conflicts(self, session, worked_period):
        service = PayrollService(session)
        run = await service.generate_payroll_run(worked_period.id)

        with pytest.raises(Conflict) as exc_info:
            await service.generate_payroll_run(worked_period.id)

        assert exc_info.value.details["existing_id"] == str(run.id)
        count = await session.scalar(select(func.count()).select_from(PayrollEntry))
        assert count == 1

    async def test_inactive_and_idle_employees_excluded(
        self, session, worked_period, test_employee, test_role
    ):
        session.add_all(
            [
                Employee(
                    first_name="Idle",
                    last_name="Worker",
                    email="idle@example.com",
                    role_id=test_role.id,
                    start_date=date(2025, 1, 1),
                    status="active",
                ),
                Employee(
                    first_name="Former",
                    last_name="Worker",
                    email="former@example.com",
                    role_id=test_role.id,
                    start_date=date(2025, 1, 1),
                    status="inactive",
                ),
            ]
        )
        await session.flush()

        run = await PayrollService(session).generate_payroll_run(worked_period.id)

        assert run.employee_count == 1
        assert [entry.employee_id for entry in run.entries] == [test_employee.id]

    async def test_empty_period_produces_empty_run(self, session, open_period, test_employee):
        open_period.status = "closed"
        await session.flush()

        run = await PayrollService(session).generate_payroll_run(open_period.id)

        assert run.employee_count == 0
        assert run.total_amount == Decimal("0.00")

    async def test_generation_is_audited(self, session, worked_period):
        run = await PayrollService(session).generate_payroll_run(worked_period.id)
        await session.flush()

        audit = await session.scalar(select(AuditLog).where(AuditLog.record_id == run.id))
        assert audit.action == "payroll_generated"
        assert audit.new_values == {"total_amount": "605.00", "employee_count": 1}


class TestPayrollRunLifecycle:
    async def test_sent_forces_period_processed(self, session, worked_period):
        service = PayrollService(session)
        run = await service.generate_payroll_run(worked_period.id)

        await service.transition_status(run.id, "processed")
        assert worked_period.status == "closed"

        run = await service.transition_status(run.id, "sent")
        assert run.status == "sent"
        assert run.pay_period.status == "processed"

    async def test_sent_forces_even_a_reopened_period(self, session, worked_period):
        service = PayrollService(session)
        run = await service.generate_payroll_run(worked_period.id)
        await service.transition_status(run.id, "processed")
        worked_period.status = "open"
        await session.flush()

        run = await service.transition_status(run.id, "sent")

        assert run.pay_period.status == "processed"

    async def test_cannot_skip_processed(self, session, worked_period):
        service = PayrollService(session)
        run = await service.generate_payroll_run(worked_period.id)

        with pytest.raises(InvalidTransition):
            await service.transition_status(run.id, "sent")
