"""Time-off ledger: leave requests, decisions and per-period summaries."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staffing_payroll.exceptions import NotFound, ValidationError
from staffing_payroll.models import Employee, TimeOff
from staffing_payroll.services.pay_period_service import PayPeriodService
from staffing_payroll.services.state_machine import TimeOffStateMachine, TimeOffStatus

LEAVE_TYPES = ("pto", "sick", "unpaid")


def count_weekdays(start_date: date, end_date: date) -> int:
    """Number of Monday-Friday days in [start_date, end_date], inclusive."""
    if end_date < start_date:
        return 0
    total_days = (end_date - start_date).days + 1
    full_weeks, remainder = divmod(total_days, 7)
    count = full_weeks * 5
    for offset in range(remainder):
        if (start_date + timedelta(days=full_weeks * 7 + offset)).weekday() < 5:
            count += 1
    return count


class TimeOffService:
    """Service for leave requests.

    Requests start pending; approval and denial are final. Approved days are
    exposed per pay period for reporting; they are never deducted from pay.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_time_off(self, time_off_id: UUID) -> TimeOff:
        request = await self.session.get(TimeOff, time_off_id)
        if request is None:
            raise NotFound("Time-off request", time_off_id)
        return request

    async def list_time_off(
        self,
        employee_id: UUID | None = None,
        status: str | None = None,
    ) -> list[TimeOff]:
        query = select(TimeOff).order_by(TimeOff.start_date.desc())
        if employee_id is not None:
            query = query.where(TimeOff.employee_id == employee_id)
        if status:
            query = query.where(TimeOff.status == status)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def request_time_off(
        self,
        employee_id: UUID,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str | None = None,
        days_count: int | None = None,
    ) -> TimeOff:
        if leave_type not in LEAVE_TYPES:
            raise ValidationError(
                f"leave_type must be one of {', '.join(LEAVE_TYPES)}",
                {"leave_type": leave_type},
            )
        if end_date < start_date:
            raise ValidationError(
                "end_date must not be before start_date",
                {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
            )
        if days_count is not None and days_count < 0:
            raise ValidationError("days_count must not be negative", {"days_count": days_count})

        if await self.session.get(Employee, employee_id) is None:
            raise NotFound("Employee", employee_id)

        request = TimeOff(
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days_count=days_count if days_count is not None else count_weekdays(start_date, end_date),
            status=TimeOffStatus.PENDING.value,
            reason=reason,
        )
        self.session.add(request)
        await self.session.flush()
        return request

    async def decide_time_off(self, time_off_id: UUID, status: str) -> TimeOff:
        """Approve or deny a pending request."""
        if status not in (TimeOffStatus.APPROVED.value, TimeOffStatus.DENIED.value):
            raise ValidationError("status must be 'approved' or 'denied'", {"status": status})

        request = await self.get_time_off(time_off_id)
        request.status = TimeOffStateMachine.validate_transition(request.status, status)
        request.decided_at = datetime.now(timezone.utc)
        await self.session.flush()
        return request

    async def summarize_for_period(self, pay_period_id: UUID) -> dict[UUID, dict[str, int]]:
        """Approved weekdays off per employee and leave type inside a pay period."""
        period = await PayPeriodService(self.session).get_pay_period(pay_period_id)
        result = await self.session.execute(
            select(TimeOff).where(
                TimeOff.status == TimeOffStatus.APPROVED.value,
                TimeOff.start_date <= period.period_end,
                TimeOff.end_date >= period.period_start,
            )
        )

        summary: dict[UUID, dict[str, int]] = defaultdict(lambda: dict.fromkeys(LEAVE_TYPES, 0))
        for request in result.scalars().all():
            start = max(request.start_date, period.period_start)
            end = min(request.end_date, period.period_end)
            summary[request.employee_id][request.leave_type] += count_weekdays(start, end)
        return dict(summary)
