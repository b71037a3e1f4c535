"""Payroll run service - generation and lifecycle of payroll runs."""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from staffing_payroll.calculators.engine import PayrollEngine
from staffing_payroll.calculators.work_aggregator import WorkAggregator
from staffing_payroll.exceptions import Conflict, NotFound
from staffing_payroll.models import Employee, PayrollEntry, PayrollRun
from staffing_payroll.services.audit_service import AuditRecorder
from staffing_payroll.services.pay_period_service import PayPeriodService
from staffing_payroll.services.persistence import unique_guard
from staffing_payroll.services.state_machine import PayrollRunStateMachine, PayrollRunStatus

logger = logging.getLogger(__name__)


class PayrollService:
    """Service for managing the payroll run lifecycle.

    Operations:
    - generate_payroll_run: compute and persist the single run of a closed period
    - transition_status: draft -> processed -> sent
    - mark_sent: processed -> sent, forcing the pay period to processed
    """

    def __init__(self, session: AsyncSession, engine: PayrollEngine | None = None):
        self.session = session
        self.engine = engine or PayrollEngine()
        self.aggregator = WorkAggregator(session)
        self.periods = PayPeriodService(session)
        self.audit = AuditRecorder(session)

    async def get_payroll_run(self, payroll_run_id: UUID) -> PayrollRun:
        """Load a run with its period and entries (entries with employees)."""
        result = await self.session.execute(
            select(PayrollRun)
            .where(PayrollRun.id == payroll_run_id)
            .options(
                selectinload(PayrollRun.pay_period),
                selectinload(PayrollRun.entries).selectinload(PayrollEntry.employee),
            )
            .execution_options(populate_existing=True)
        )
        run = result.scalar_one_or_none()
        if run is None:
            raise NotFound("Payroll run", payroll_run_id)
        return run

    async def find_run_for_period(self, pay_period_id: UUID) -> PayrollRun | None:
        result = await self.session.execute(
            select(PayrollRun).where(PayrollRun.pay_period_id == pay_period_id)
        )
        return result.scalar_one_or_none()

    async def generate_payroll_run(
        self,
        pay_period_id: UUID,
        run_date: date | None = None,
    ) -> PayrollRun:
        """Generate the payroll run for a closed pay period.

        Raises:
            NotFound: the period does not exist
            PreconditionFailed: the period is not closed
            Conflict: a run already exists for the period
        """
        period = await self.periods.get_pay_period(pay_period_id)
        self.periods.ensure_payroll_allowed(period)

        existing = await self.find_run_for_period(pay_period_id)
        if existing is not None:
            raise Conflict(
                f"Payroll run {existing.id} already exists for this pay period "
                f"(status: {existing.status})",
                {"existing_id": str(existing.id), "existing_status": existing.status},
            )

        employees = await self._active_employees()
        work = await self.aggregator.totals_by_employee(
            pay_period_id, [employee.id for employee in employees]
        )
        calculation = self.engine.calculate(employees, work)

        run = PayrollRun(
            pay_period_id=pay_period_id,
            run_date=run_date or date.today(),
            total_amount=calculation.total_amount,
            employee_count=calculation.employee_count,
            status=PayrollRunStatus.DRAFT.value,
        )
        run.entries = [
            PayrollEntry(
                employee_id=line.employee_id,
                position=position,
                base_hours=line.base_hours,
                hourly_rate=line.hourly_rate,
                base_pay=line.base_pay,
                leads_bonus=line.leads_bonus,
                spifs_bonus=line.spifs_bonus,
                total_gross=line.total_gross,
                deductions=line.deductions,
                net_pay=line.net_pay,
            )
            for position, line in enumerate(calculation.lines)
        ]

        async with unique_guard(
            self.session,
            "A payroll run already exists for this pay period",
            {"pay_period_id": str(pay_period_id)},
        ):
            self.session.add(run)

        self.audit.add(
            "payroll_generated",
            PayrollRun.__tablename__,
            run.id,
            {"total_amount": run.total_amount, "employee_count": run.employee_count},
        )
        logger.info(
            "Generated payroll run %s for period %s: %d entries, total %s",
            run.id,
            period.label,
            run.employee_count,
            run.total_amount,
        )
        return run

    async def transition_status(self, payroll_run_id: UUID, to_status: str) -> PayrollRun:
        """Move a run along draft -> processed -> sent.

        Reaching sent also forces the owning pay period to processed.
        """
        run = await self.get_payroll_run(payroll_run_id)
        old_status = run.status
        run.status = PayrollRunStateMachine.validate_transition(old_status, to_status)

        if run.status == PayrollRunStatus.SENT.value:
            self.periods.force_processed(run.pay_period)

        self.audit.add(
            f"status_change:{old_status}:{run.status}",
            PayrollRun.__tablename__,
            run.id,
        )
        await self.session.flush()
        return run

    async def mark_sent(self, run: PayrollRun) -> PayrollRun:
        """processed -> sent, used by the export path on an already loaded run."""
        old_status = run.status
        run.status = PayrollRunStateMachine.validate_transition(old_status, PayrollRunStatus.SENT)
        self.periods.force_processed(run.pay_period)
        self.audit.add(
            f"status_change:{old_status}:{run.status}",
            PayrollRun.__tablename__,
            run.id,
            {"reason": "exported"},
        )
        await self.session.flush()
        return run

    async def _active_employees(self) -> list[Employee]:
        result = await self.session.execute(
            select(Employee)
            .where(Employee.status == "active")
            .options(selectinload(Employee.role))
            .order_by(Employee.last_name, Employee.first_name, Employee.id)
        )
        return list(result.scalars().all())
