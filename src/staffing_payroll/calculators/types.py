"""Type definitions for the calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Mapping
from uuid import UUID

if TYPE_CHECKING:
    from staffing_payroll.models import Employee

ZERO = Decimal("0")


@dataclass(frozen=True)
class WorkTotals:
    """Summed work facts for one employee over one pay period."""

    hours: Decimal = ZERO
    leads: int = 0
    spifs: Decimal = ZERO


@dataclass(frozen=True)
class RateContext:
    """Everything a rate strategy may look at for one employee."""

    employee_override: Decimal | None
    role_id: UUID | None
    role_rate: Decimal | None
    client_rates: Mapping[UUID, Decimal] = field(default_factory=dict)

    @classmethod
    def for_employee(
        cls,
        employee: Employee,
        client_rates: Mapping[UUID, Decimal] | None = None,
    ) -> RateContext:
        """Build a context from an employee whose role is already loaded."""
        role = employee.role
        return cls(
            employee_override=employee.salary_compensation,
            role_id=role.id if role is not None else employee.role_id,
            role_rate=role.hourly_rate if role is not None else None,
            client_rates=client_rates or {},
        )


@dataclass
class PayrollLine:
    """A computed payroll entry before persistence."""

    employee_id: UUID
    base_hours: Decimal
    hourly_rate: Decimal
    base_pay: Decimal
    leads_bonus: Decimal
    spifs_bonus: Decimal
    total_gross: Decimal
    deductions: Decimal
    net_pay: Decimal
    leads_processed: int = 0


@dataclass
class InvoiceLine:
    """A computed invoice line item before persistence."""

    employee_id: UUID
    description: str
    hours: Decimal
    hourly_rate: Decimal
    amount: Decimal


@dataclass
class PayrollCalculation:
    """Result of calculating a whole payroll run."""

    lines: list[PayrollLine]
    total_amount: Decimal = ZERO
    skipped_employee_ids: list[UUID] = field(default_factory=list)

    @property
    def employee_count(self) -> int:
        return len(self.lines)


@dataclass
class InvoiceCalculation:
    """Result of calculating one client invoice."""

    lines: list[InvoiceLine]
    total_amount: Decimal = ZERO

    @property
    def is_empty(self) -> bool:
        return not self.lines
