"""Aggregation of logged work facts per employee over a pay period."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffing_payroll.calculators.types import WorkTotals
from staffing_payroll.models import WorkEntry


class WorkAggregator:
    """Sums hours, leads and spifs per employee for one pay period.

    Employees without entries are absent from the result; callers treat
    them as zero.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def totals_by_employee(
        self,
        pay_period_id: UUID,
        employee_ids: Iterable[UUID],
    ) -> dict[UUID, WorkTotals]:
        employee_ids = list(employee_ids)
        if not employee_ids:
            return {}

        result = await self.session.execute(
            select(
                WorkEntry.employee_id,
                func.coalesce(func.sum(WorkEntry.hours_worked), 0),
                func.coalesce(func.sum(WorkEntry.leads_processed), 0),
                func.coalesce(func.sum(WorkEntry.spifs), 0),
            )
            .where(
                WorkEntry.pay_period_id == pay_period_id,
                WorkEntry.employee_id.in_(employee_ids),
            )
            .group_by(WorkEntry.employee_id)
        )

        return {
            employee_id: WorkTotals(
                hours=Decimal(hours),
                leads=int(leads),
                spifs=Decimal(spifs),
            )
            for employee_id, hours, leads, spifs in result.all()
        }

    async def hours_by_employee(
        self,
        pay_period_id: UUID,
        employee_ids: Iterable[UUID],
    ) -> dict[UUID, Decimal]:
        """Hours only, for invoicing (bonuses are never billed)."""
        totals = await self.totals_by_employee(pay_period_id, employee_ids)
        return {employee_id: work.hours for employee_id, work in totals.items()}
