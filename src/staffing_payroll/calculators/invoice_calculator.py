"""Client invoice calculation."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping
from uuid import UUID

from staffing_payroll.calculators.line_builder import LineItemBuilder
from staffing_payroll.calculators.rate_resolver import RateResolver
from staffing_payroll.calculators.types import ZERO, InvoiceCalculation, InvoiceLine, RateContext
from staffing_payroll.models import Employee


class InvoiceCalculator:
    """Bills a client's employees for their hours in one period.

    Only hours are billed; spifs and lead counts are payroll-only. Employees
    with no hours produce no line.
    """

    def __init__(self, resolver: RateResolver | None = None):
        self.resolver = resolver or RateResolver.for_invoicing()

    def calculate(
        self,
        employees: Iterable[Employee],
        hours: Mapping[UUID, Decimal],
        client_rates: Mapping[UUID, Decimal],
    ) -> InvoiceCalculation:
        lines: list[InvoiceLine] = []

        for employee in employees:
            employee_hours = hours.get(employee.id, ZERO)
            if employee_hours == ZERO:
                continue

            ctx = RateContext.for_employee(employee, client_rates)
            hourly_rate = self.resolver.resolve(ctx)
            role_name = employee.role.name if employee.role is not None else None

            lines.append(
                LineItemBuilder.create_invoice_line(
                    employee_id=employee.id,
                    description=LineItemBuilder.describe_employee(
                        employee.first_name, employee.last_name, role_name
                    ),
                    hours=employee_hours,
                    hourly_rate=hourly_rate,
                )
            )

        return InvoiceCalculation(
            lines=lines,
            total_amount=LineItemBuilder.sum_to_cents([line.amount for line in lines]),
        )
