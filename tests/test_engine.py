"""Unit tests for PayrollEngine and InvoiceCalculator.

Employees are transient model instances; no database is involved.
"""

from decimal import Decimal
from uuid import uuid4

from staffing_payroll.calculators.engine import PayrollEngine
from staffing_payroll.calculators.invoice_calculator import InvoiceCalculator
from staffing_payroll.calculators.types import WorkTotals
from staffing_payroll.models import Employee, Role


def make_employee(first="Jane", last="Doe", role_rate="20.00", override=None, role=True):
    role_obj = Role(id=uuid4(), name="Agent", hourly_rate=Decimal(role_rate)) if role else None
    return Employee(
        id=uuid4(),
        first_name=first,
        last_name=last,
        email=f"{first.lower()}@example.com",
        role=role_obj,
        role_id=role_obj.id if role_obj else None,
        salary_compensation=Decimal(override) if override is not None else None,
    )


class TestPayrollEngine:
    def test_end_to_end_scenario(self):
        """30h at $20 plus a $5 spif pays $605.00."""
        employee = make_employee()
        work = {employee.id: WorkTotals(hours=Decimal("30"), leads=7, spifs=Decimal("5"))}

        result = PayrollEngine().calculate([employee], work)

        assert result.employee_count == 1
        line = result.lines[0]
        assert line.base_pay == Decimal("600.00")
        assert line.spifs_bonus == Decimal("5.00")
        assert line.net_pay == Decimal("605.00")
        assert result.total_amount == Decimal("605.00")

    def test_override_rate_wins(self):
        employee = make_employee(override="25.00")
        work = {employee.id: WorkTotals(hours=Decimal("10"))}

        line = PayrollEngine().calculate([employee], work).lines[0]

        assert line.hourly_rate == Decimal("25.00")
        assert line.net_pay == Decimal("250.00")

    def test_no_work_and_no_rate_is_skipped(self):
        employee = make_employee(role=False)

        result = PayrollEngine().calculate([employee], {})

        assert result.lines == []
        assert result.skipped_employee_ids == [employee.id]
        assert result.total_amount == Decimal("0.00")

    def test_rate_but_no_work_produces_no_line(self):
        """Zero hours and zero pay is dropped even with a rate configured."""
        employee = make_employee()

        result = PayrollEngine().calculate([employee], {})

        assert result.lines == []

    def test_spifs_without_hours_are_paid(self):
        employee = make_employee()
        work = {employee.id: WorkTotals(spifs=Decimal("15.00"))}

        line = PayrollEngine().calculate([employee], work).lines[0]

        assert line.base_pay == Decimal("0.00")
        assert line.net_pay == Decimal("15.00")

    def test_hours_without_rate_keep_a_zero_line(self):
        employee = make_employee(role=False)
        work = {employee.id: WorkTotals(hours=Decimal("8"))}

        line = PayrollEngine().calculate([employee], work).lines[0]

        assert line.hourly_rate == Decimal("0")
        assert line.net_pay == Decimal("0.00")

    def test_total_is_sum_of_lines_in_order(self):
        alice = make_employee("Alice", "Adams")
        bob = make_employee("Bob", "Brown", role_rate="18.50")
        work = {
            alice.id: WorkTotals(hours=Decimal("10")),
            bob.id: WorkTotals(hours=Decimal("3"), spifs=Decimal("2.25")),
        }

        result = PayrollEngine().calculate([alice, bob], work)

        assert [line.employee_id for line in result.lines] == [alice.id, bob.id]
        assert result.total_amount == Decimal("200.00") + Decimal("57.75")


class TestInvoiceCalculator:
    def test_client_rate_bills_hours(self):
        """12h at a client price of $35 bills $420.00."""
        employee = make_employee()
        client_rates = {employee.role_id: Decimal("35.00")}

        result = InvoiceCalculator().calculate(
            [employee], {employee.id: Decimal("12")}, client_rates
        )

        assert not result.is_empty
        line = result.lines[0]
        assert line.description == "Jane Doe - Agent"
        assert line.hourly_rate == Decimal("35.00")
        assert line.amount == Decimal("420.00")
        assert result.total_amount == Decimal("420.00")

    def test_falls_back_to_role_rate(self):
        employee = make_employee()

        result = InvoiceCalculator().calculate([employee], {employee.id: Decimal("12")}, {})

        assert result.lines[0].hourly_rate == Decimal("20.00")
        assert result.total_amount == Decimal("240.00")

    def test_zero_hours_produce_no_line(self):
        worked = make_employee("Alice", "Adams")
        idle = make_employee("Bob", "Brown")

        result = InvoiceCalculator().calculate(
            [worked, idle], {worked.id: Decimal("4"), idle.id: Decimal("0")}, {}
        )

        assert [line.employee_id for line in result.lines] == [worked.id]

    def test_no_hours_at_all_is_empty(self):
        result = InvoiceCalculator().calculate([make_employee()], {}, {})
        assert result.is_empty
        assert result.total_amount == Decimal("0.00")

    def test_missing_role_is_described_as_unknown(self):
        employee = make_employee(role=False)

        result = InvoiceCalculator().calculate([employee], {employee.id: Decimal("2")}, {})

        assert result.lines[0].description == "Jane Doe - Unknown Role"
        assert result.lines[0].amount == Decimal("0.00")
