"""Hourly rate resolution through an ordered chain of strategies."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Callable, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staffing_payroll.calculators.types import ZERO, RateContext
from staffing_payroll.models import ClientPricing

RateStrategy = Callable[[RateContext], "Decimal | None"]


def employee_override(ctx: RateContext) -> Decimal | None:
    """Per-employee override (stored as ``salary_compensation``), if positive."""
    if ctx.employee_override is not None and ctx.employee_override > 0:
        return ctx.employee_override
    return None


def client_pricing(ctx: RateContext) -> Decimal | None:
    """Client-specific price for the employee's role."""
    if ctx.role_id is None:
        return None
    return ctx.client_rates.get(ctx.role_id)


def role_base_rate(ctx: RateContext) -> Decimal | None:
    """Base hourly rate of the employee's role."""
    return ctx.role_rate


class RateResolver:
    """Resolves an hourly rate by trying strategies in order.

    The first strategy returning a value wins; when none does the rate is
    zero. A zero rate is not an error, it only produces a zero line.

    Chains:
    - payroll (paying the contractor): employee override -> role base rate
    - invoicing (billing the client): client pricing -> role base rate
    """

    def __init__(self, strategies: Sequence[RateStrategy]):
        self.strategies = tuple(strategies)

    @classmethod
    def for_payroll(cls) -> RateResolver:
        return cls([employee_override, role_base_rate])

    @classmethod
    def for_invoicing(cls) -> RateResolver:
        return cls([client_pricing, role_base_rate])

    def resolve_with_source(self, ctx: RateContext) -> tuple[Decimal, str | None]:
        """Resolve the rate and report which strategy supplied it."""
        for strategy in self.strategies:
            rate = strategy(ctx)
            if rate is not None:
                return rate, strategy.__name__
        return ZERO, None

    def resolve(self, ctx: RateContext) -> Decimal:
        """Resolve the hourly rate for a context."""
        rate, _ = self.resolve_with_source(ctx)
        return rate


def has_configured_rate(ctx: RateContext) -> bool:
    """True if either the employee override or the role rate is set and non-zero."""
    return bool(ctx.employee_override) or bool(ctx.role_rate)


async def load_client_rates(
    session: AsyncSession,
    client_id: UUID,
    period_start: date,
    period_end: date,
) -> dict[UUID, Decimal]:
    """Load client pricing overlapping a period, keyed by role.

    Any overlap with the period qualifies. When several rows for one role
    overlap, the one with the latest ``effective_from`` wins.
    """
    result = await session.execute(
        select(ClientPricing)
        .where(
            ClientPricing.client_id == client_id,
            ClientPricing.effective_from <= period_end,
            (ClientPricing.effective_to.is_(None) | (ClientPricing.effective_to >= period_start)),
        )
        .order_by(ClientPricing.effective_from)
    )
    rates: dict[UUID, Decimal] = {}
    for pricing in result.scalars().all():
        rates[pricing.role_id] = pricing.hourly_rate
    return rates
