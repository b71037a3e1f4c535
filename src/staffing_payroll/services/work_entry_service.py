"""Work entry logging, gated on the owning pay period being open."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staffing_payroll.exceptions import NotFound, ValidationError
from staffing_payroll.models import Employee, WorkEntry
from staffing_payroll.services.pay_period_service import PayPeriodService
from staffing_payroll.services.persistence import unique_guard

_UNSET = object()

# Matches the scale of WorkEntry.hours_worked
HOURS_PRECISION = Decimal("0.0001")


def _validate_amounts(
    hours_worked: Decimal | None,
    leads_processed: int | None,
    spifs: Decimal | None,
) -> None:
    if hours_worked is not None and hours_worked < 0:
        raise ValidationError("hours_worked must not be negative", {"hours_worked": str(hours_worked)})
    if hours_worked is not None and hours_worked > 24:
        raise ValidationError("hours_worked cannot exceed 24 per day", {"hours_worked": str(hours_worked)})
    if hours_worked is not None and hours_worked != hours_worked.quantize(HOURS_PRECISION):
        raise ValidationError(
            "hours_worked supports at most 4 decimal places",
            {"hours_worked": str(hours_worked)},
        )
    if leads_processed is not None and leads_processed < 0:
        raise ValidationError("leads_processed must not be negative", {"leads_processed": leads_processed})
    if spifs is not None and spifs < 0:
        raise ValidationError("spifs must not be negative", {"spifs": str(spifs)})


class WorkEntryService:
    """Service for daily work entries.

    One entry per (employee, pay period, work date); submitting the same key
    again replaces the stored values.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.periods = PayPeriodService(session)

    async def get_work_entry(self, entry_id: UUID) -> WorkEntry:
        entry = await self.session.get(WorkEntry, entry_id)
        if entry is None:
            raise NotFound("Work entry", entry_id)
        return entry

    async def list_work_entries(
        self,
        pay_period_id: UUID,
        employee_id: UUID | None = None,
    ) -> list[WorkEntry]:
        query = (
            select(WorkEntry)
            .where(WorkEntry.pay_period_id == pay_period_id)
            .order_by(WorkEntry.work_date, WorkEntry.employee_id)
        )
        if employee_id is not None:
            query = query.where(WorkEntry.employee_id == employee_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def set_work_entry(
        self,
        employee_id: UUID,
        pay_period_id: UUID,
        work_date: date,
        hours_worked: Decimal | None = None,
        leads_processed: int | None = None,
        spifs: Decimal | None = None,
        notes: str | None = None,
    ) -> WorkEntry:
        """Create or replace the entry for (employee, period, date)."""
        period = await self.periods.get_pay_period(pay_period_id)
        self.periods.ensure_inputs_mutable(period, "add")

        if not period.contains(work_date):
            raise ValidationError(
                "work_date must fall within the pay period",
                {
                    "work_date": work_date.isoformat(),
                    "period_start": period.period_start.isoformat(),
                    "period_end": period.period_end.isoformat(),
                },
            )
        _validate_amounts(hours_worked, leads_processed, spifs)

        if await self.session.get(Employee, employee_id) is None:
            raise NotFound("Employee", employee_id)

        result = await self.session.execute(
            select(WorkEntry).where(
                WorkEntry.employee_id == employee_id,
                WorkEntry.pay_period_id == pay_period_id,
                WorkEntry.work_date == work_date,
            )
        )
        entry = result.scalar_one_or_none()
        values = {
            "hours_worked": hours_worked if hours_worked is not None else Decimal("0"),
            "leads_processed": leads_processed if leads_processed is not None else 0,
            "spifs": spifs if spifs is not None else Decimal("0"),
            "notes": notes,
        }

        if entry is not None:
            for key, value in values.items():
                setattr(entry, key, value)
            await self.session.flush()
            return entry

        entry = WorkEntry(
            employee_id=employee_id,
            pay_period_id=pay_period_id,
            work_date=work_date,
            **values,
        )
        async with unique_guard(
            self.session,
            "A work entry already exists for this employee and date",
            {"employee_id": str(employee_id), "work_date": work_date.isoformat()},
        ):
            self.session.add(entry)
        return entry

    async def update_work_entry(
        self,
        entry_id: UUID,
        hours_worked: Decimal | None = None,
        leads_processed: int | None = None,
        spifs: Decimal | None = None,
        notes: str | None | object = _UNSET,
    ) -> WorkEntry:
        """Partially update an entry; only supplied fields change."""
        entry = await self.get_work_entry(entry_id)
        period = await self.periods.get_pay_period(entry.pay_period_id)
        self.periods.ensure_inputs_mutable(period, "edit")
        _validate_amounts(hours_worked, leads_processed, spifs)

        if hours_worked is not None:
            entry.hours_worked = hours_worked
        if leads_processed is not None:
            entry.leads_processed = leads_processed
        if spifs is not None:
            entry.spifs = spifs
        if notes is not _UNSET:
            entry.notes = notes

        await self.session.flush()
        return entry

    async def delete_work_entry(self, entry_id: UUID) -> None:
        entry = await self.get_work_entry(entry_id)
        period = await self.periods.get_pay_period(entry.pay_period_id)
        self.periods.ensure_inputs_mutable(period, "delete")
        await self.session.delete(entry)
        await self.session.flush()
