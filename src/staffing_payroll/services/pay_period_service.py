"""Pay period lifecycle and the gating rule for time data."""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staffing_payroll.exceptions import Conflict, NotFound, PreconditionFailed, ValidationError
from staffing_payroll.models import PayPeriod
from staffing_payroll.services.audit_service import AuditRecorder
from staffing_payroll.services.state_machine import PayPeriodStateMachine, PayPeriodStatus

logger = logging.getLogger(__name__)

PERIOD_TYPES = ("weekly", "biweekly", "monthly")


class PayPeriodService:
    """Service for managing pay periods.

    Operations:
    - create_pay_period: validate dates and reject overlaps of the same type
    - transition_status: open -> closed -> processed, closed -> open
    - ensure_inputs_mutable: gate for work entry create/update/delete
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.audit = AuditRecorder(session)

    async def get_pay_period(self, pay_period_id: UUID) -> PayPeriod:
        period = await self.session.get(PayPeriod, pay_period_id)
        if period is None:
            raise NotFound("Pay period", pay_period_id)
        return period

    async def list_pay_periods(
        self,
        status: str | None = None,
        limit: int = 20,
    ) -> list[PayPeriod]:
        query = select(PayPeriod).order_by(PayPeriod.period_start.desc()).limit(limit)
        if status:
            query = query.where(PayPeriod.status == status)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_overlapping(
        self,
        period_start: date,
        period_end: date,
        period_type: str,
    ) -> list[PayPeriod]:
        """Open or closed periods of the same type sharing at least one day."""
        result = await self.session.execute(
            select(PayPeriod).where(
                PayPeriod.period_type == period_type,
                PayPeriod.status.in_(sorted(PayPeriodStateMachine.BLOCKS_OVERLAP)),
                PayPeriod.period_start <= period_end,
                PayPeriod.period_end >= period_start,
            )
        )
        return list(result.scalars().all())

    async def create_pay_period(
        self,
        period_start: date,
        period_end: date,
        period_type: str = "biweekly",
    ) -> PayPeriod:
        if period_end <= period_start:
            raise ValidationError(
                "period_end must be after period_start",
                {"period_start": period_start.isoformat(), "period_end": period_end.isoformat()},
            )
        if period_type not in PERIOD_TYPES:
            raise ValidationError(
                f"period_type must be one of {', '.join(PERIOD_TYPES)}",
                {"period_type": period_type},
            )

        overlapping = await self.find_overlapping(period_start, period_end, period_type)
        if overlapping:
            raise Conflict(
                "This period overlaps with an existing open or closed pay period",
                {"overlapping_ids": [str(p.id) for p in overlapping]},
            )

        period = PayPeriod(
            period_start=period_start,
            period_end=period_end,
            period_type=period_type,
            status=PayPeriodStatus.OPEN.value,
        )
        self.session.add(period)
        await self.session.flush()
        logger.info("Created %s pay period %s (%s)", period_type, period.id, period.label)
        return period

    async def transition_status(self, pay_period_id: UUID, to_status: str) -> PayPeriod:
        period = await self.get_pay_period(pay_period_id)
        old_status = period.status
        period.status = PayPeriodStateMachine.validate_transition(old_status, to_status)
        self.audit.add(
            f"status_change:{old_status}:{period.status}",
            PayPeriod.__tablename__,
            period.id,
        )
        await self.session.flush()
        return period

    def ensure_inputs_mutable(self, period: PayPeriod, action: str = "modify") -> None:
        """Raise unless work entries of this period may be changed."""
        if not PayPeriodStateMachine.can_modify_inputs(period.status):
            raise PreconditionFailed(
                f"Can only {action} work entries in open pay periods",
                {
                    "pay_period_id": str(period.id),
                    "current": period.status,
                    "required": PayPeriodStatus.OPEN.value,
                },
            )

    def ensure_payroll_allowed(self, period: PayPeriod) -> None:
        """Raise unless payroll may be generated for this period."""
        if not PayPeriodStateMachine.can_generate_payroll(period.status):
            raise PreconditionFailed(
                "Pay period must be closed before generating payroll",
                {
                    "pay_period_id": str(period.id),
                    "current": period.status,
                    "required": PayPeriodStatus.CLOSED.value,
                },
            )

    def force_processed(self, period: PayPeriod) -> None:
        """Drive the period to processed as a side effect of a sent payroll run."""
        if period.status == PayPeriodStatus.PROCESSED.value:
            return
        if not PayPeriodStateMachine.can_transition(period.status, PayPeriodStatus.PROCESSED):
            logger.warning(
                "Forcing pay period %s from '%s' to 'processed' after payroll was sent",
                period.id,
                period.status,
            )
        old_status = period.status
        period.status = PayPeriodStatus.PROCESSED.value
        self.audit.add(
            f"status_change:{old_status}:{period.status}",
            PayPeriod.__tablename__,
            period.id,
            {"reason": "payroll_sent"},
        )
