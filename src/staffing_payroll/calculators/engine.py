"""Payroll calculation engine."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping
from uuid import UUID

from staffing_payroll.calculators.line_builder import LineItemBuilder
from staffing_payroll.calculators.rate_resolver import RateResolver, has_configured_rate
from staffing_payroll.calculators.types import (
    ZERO,
    PayrollCalculation,
    PayrollLine,
    RateContext,
    WorkTotals,
)
from staffing_payroll.models import Employee

logger = logging.getLogger(__name__)


class PayrollEngine:
    """Turns aggregated work into payroll lines.

    Calculation pipeline (stable order per employee):
    1) Look up work totals (absent means nothing logged)
    2) Skip employees with no work and no configured rate
    3) Resolve the hourly rate (override -> role rate -> 0)
    4) Base pay, spifs bonus, gross, net, each rounded to cents
    5) Drop lines with zero net pay and zero hours
    """

    def __init__(self, resolver: RateResolver | None = None):
        self.resolver = resolver or RateResolver.for_payroll()

    def calculate(
        self,
        employees: Iterable[Employee],
        work: Mapping[UUID, WorkTotals],
    ) -> PayrollCalculation:
        lines: list[PayrollLine] = []
        skipped: list[UUID] = []

        for employee in employees:
            line = self.calculate_employee(employee, work.get(employee.id))
            if line is None:
                skipped.append(employee.id)
                continue
            lines.append(line)

        return PayrollCalculation(
            lines=lines,
            total_amount=LineItemBuilder.sum_to_cents([line.net_pay for line in lines]),
            skipped_employee_ids=skipped,
        )

    def calculate_employee(
        self,
        employee: Employee,
        work: WorkTotals | None,
    ) -> PayrollLine | None:
        """Calculate one employee, or return None if nothing is payable."""
        ctx = RateContext.for_employee(employee)

        if work is None and not has_configured_rate(ctx):
            return None

        work = work or WorkTotals()
        hourly_rate = self.resolver.resolve(ctx)
        line = LineItemBuilder.create_payroll_line(employee.id, work, hourly_rate)

        if line.net_pay == ZERO and work.hours == ZERO:
            logger.debug("Dropping empty payroll line for employee %s", employee.id)
            return None

        return line
