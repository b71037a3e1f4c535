"""Line builder: rounding policy and construction of payroll/invoice lines."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from staffing_payroll.calculators.types import ZERO, InvoiceLine, PayrollLine, WorkTotals


class LineItemBuilder:
    """Builds payroll and invoice lines.

    Rounding:
    - USD to 2 decimals, ROUND_HALF_UP
    - Applied at every aggregation boundary (base pay, gross, net, totals),
      not only at output, so stored figures re-add exactly
    """

    OUTPUT_PRECISION = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Decimal | int) -> Decimal:
        """Round amount to 2 decimal places (cents)."""
        return Decimal(amount).quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def format_amount(amount: Decimal | int | None) -> str:
        """Render an amount with exactly two decimal places."""
        return str(LineItemBuilder.round_to_cents(amount if amount is not None else ZERO))

    @staticmethod
    def sum_to_cents(amounts: list[Decimal]) -> Decimal:
        return LineItemBuilder.round_to_cents(sum(amounts, ZERO))

    @staticmethod
    def create_payroll_line(
        employee_id: UUID,
        work: WorkTotals,
        hourly_rate: Decimal,
    ) -> PayrollLine:
        """Compute one contractor's pay.

        Lead counts are carried for reporting only; bonus pay flows through
        spifs. No withholding is modelled, so net equals gross.
        """
        base_pay = LineItemBuilder.round_to_cents(work.hours * hourly_rate)
        leads_bonus = ZERO
        spifs_bonus = LineItemBuilder.round_to_cents(work.spifs)
        total_gross = LineItemBuilder.round_to_cents(base_pay + leads_bonus + spifs_bonus)
        deductions = ZERO
        net_pay = LineItemBuilder.round_to_cents(total_gross - deductions)

        return PayrollLine(
            employee_id=employee_id,
            base_hours=work.hours,
            hourly_rate=hourly_rate,
            base_pay=base_pay,
            leads_bonus=LineItemBuilder.round_to_cents(leads_bonus),
            spifs_bonus=spifs_bonus,
            total_gross=total_gross,
            deductions=LineItemBuilder.round_to_cents(deductions),
            net_pay=net_pay,
            leads_processed=work.leads,
        )

    @staticmethod
    def create_invoice_line(
        employee_id: UUID,
        description: str,
        hours: Decimal,
        hourly_rate: Decimal,
    ) -> InvoiceLine:
        """Compute one billed line (hours x client rate)."""
        return InvoiceLine(
            employee_id=employee_id,
            description=description,
            hours=hours,
            hourly_rate=hourly_rate,
            amount=LineItemBuilder.round_to_cents(hours * hourly_rate),
        )

    @staticmethod
    def describe_employee(first_name: str, last_name: str, role_name: str | None) -> str:
        """Invoice line description: ``"{first} {last} - {role}"``."""
        return f"{first_name} {last_name} - {role_name or 'Unknown Role'}"
