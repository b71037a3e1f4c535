"""Tests for line item builder."""

from decimal import Decimal
from uuid import uuid4

from staffing_payroll.calculators.line_builder import LineItemBuilder
from staffing_payroll.calculators.types import WorkTotals


class TestLineItemBuilder:
    """Test line item builder functionality."""

    def test_round_to_cents(self):
        """Half-up rounding to 2 decimal places."""
        assert LineItemBuilder.round_to_cents(Decimal("833.325")) == Decimal("833.33")
        assert LineItemBuilder.round_to_cents(Decimal("833.335")) == Decimal("833.34")
        assert LineItemBuilder.round_to_cents(Decimal("10.124")) == Decimal("10.12")
        assert LineItemBuilder.round_to_cents(7) == Decimal("7.00")

    def test_format_amount(self):
        assert LineItemBuilder.format_amount(Decimal("605")) == "605.00"
        assert LineItemBuilder.format_amount(Decimal("12.5")) == "12.50"
        assert LineItemBuilder.format_amount(None) == "0.00"

    def test_create_payroll_line(self):
        """Base pay plus spifs; lead counts never add pay."""
        employee_id = uuid4()
        work = WorkTotals(hours=Decimal("30"), leads=7, spifs=Decimal("5.00"))

        line = LineItemBuilder.create_payroll_line(employee_id, work, Decimal("20.00"))

        assert line.employee_id == employee_id
        assert line.base_hours == Decimal("30")
        assert line.base_pay == Decimal("600.00")
        assert line.leads_bonus == Decimal("0.00")
        assert line.spifs_bonus == Decimal("5.00")
        assert line.total_gross == Decimal("605.00")
        assert line.deductions == Decimal("0.00")
        assert line.net_pay == Decimal("605.00")
        assert line.leads_processed == 7

    def test_payroll_line_rounds_base_pay(self):
        work = WorkTotals(hours=Decimal("33.333"), spifs=Decimal("0"))
        line = LineItemBuilder.create_payroll_line(uuid4(), work, Decimal("25.00"))

        # 33.333 * 25 = 833.325
        assert line.base_pay == Decimal("833.33")
        assert line.net_pay == line.total_gross

    def test_create_invoice_line(self):
        line = LineItemBuilder.create_invoice_line(
            employee_id=uuid4(),
            description="Jane Doe - Agent",
            hours=Decimal("12"),
            hourly_rate=Decimal("35.00"),
        )
        assert line.amount == Decimal("420.00")

    def test_describe_employee(self):
        assert LineItemBuilder.describe_employee("Jane", "Doe", "Agent") == "Jane Doe - Agent"
        assert LineItemBuilder.describe_employee("Jane", "Doe", None) == "Jane Doe - Unknown Role"

    def test_sum_to_cents(self):
        amounts = [Decimal("0.10"), Decimal("0.20"), Decimal("0.30")]
        assert LineItemBuilder.sum_to_cents(amounts) == Decimal("0.60")
        assert LineItemBuilder.sum_to_cents([]) == Decimal("0.00")
