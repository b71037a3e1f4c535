"""Client invoice service - generation, numbering and lifecycle."""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from staffing_payroll.calculators.invoice_calculator import InvoiceCalculator
from staffing_payroll.calculators.rate_resolver import load_client_rates
from staffing_payroll.calculators.work_aggregator import WorkAggregator
from staffing_payroll.exceptions import Conflict, NoBillableEntity, NoBillableHours, NotFound
from staffing_payroll.models import (
    Client,
    ClientInvoice,
    Employee,
    InvoiceLineItem,
    InvoiceSequence,
)
from staffing_payroll.services.audit_service import AuditRecorder
from staffing_payroll.services.pay_period_service import PayPeriodService
from staffing_payroll.services.persistence import unique_guard
from staffing_payroll.services.state_machine import InvoiceStateMachine, InvoiceStatus

logger = logging.getLogger(__name__)


def format_invoice_number(year: int, sequence: int) -> str:
    """``INV-{year}-{seq}`` with a 4-digit zero-padded sequence."""
    return f"INV-{year}-{sequence:04d}"


class InvoiceService:
    """Service for client invoices.

    Operations:
    - generate_invoice: bill a client's employees for one pay period
    - transition_status: draft -> sent -> paid
    """

    def __init__(self, session: AsyncSession, calculator: InvoiceCalculator | None = None):
        self.session = session
        self.calculator = calculator or InvoiceCalculator()
        self.aggregator = WorkAggregator(session)
        self.periods = PayPeriodService(session)
        self.audit = AuditRecorder(session)

    async def get_invoice(self, invoice_id: UUID) -> ClientInvoice:
        """Load an invoice with client, period and line items."""
        result = await self.session.execute(
            select(ClientInvoice)
            .where(ClientInvoice.id == invoice_id)
            .options(
                selectinload(ClientInvoice.client),
                selectinload(ClientInvoice.pay_period),
                selectinload(ClientInvoice.line_items),
            )
            .execution_options(populate_existing=True)
        )
        invoice = result.scalar_one_or_none()
        if invoice is None:
            raise NotFound("Invoice", invoice_id)
        return invoice

    async def list_invoices(
        self,
        client_id: UUID | None = None,
        limit: int = 20,
    ) -> list[ClientInvoice]:
        query = select(ClientInvoice).order_by(ClientInvoice.created_at.desc()).limit(limit)
        if client_id is not None:
            query = query.where(ClientInvoice.client_id == client_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_invoice(self, client_id: UUID, pay_period_id: UUID) -> ClientInvoice | None:
        result = await self.session.execute(
            select(ClientInvoice).where(
                ClientInvoice.client_id == client_id,
                ClientInvoice.pay_period_id == pay_period_id,
            )
        )
        return result.scalar_one_or_none()

    async def generate_invoice(
        self,
        client_id: UUID,
        pay_period_id: UUID,
        invoice_date: date | None = None,
    ) -> ClientInvoice:
        """Generate the invoice for a client and pay period.

        Raises:
            Conflict: an invoice already exists for (client, period)
            NotFound: the period or client does not exist
            NoBillableEntity: the client has no active employees
            NoBillableHours: none of them logged hours in the period
        """
        existing = await self.find_invoice(client_id, pay_period_id)
        if existing is not None:
            raise Conflict(
                "An invoice already exists for this client and pay period",
                {"existing_id": str(existing.id), "invoice_number": existing.invoice_number},
            )

        period = await self.periods.get_pay_period(pay_period_id)
        client = await self.session.get(Client, client_id)
        if client is None:
            raise NotFound("Client", client_id)

        employees = await self._active_employees(client_id)
        if not employees:
            raise NoBillableEntity(
                "No active employees found for this client",
                {"client_id": str(client_id)},
            )

        hours = await self.aggregator.hours_by_employee(
            pay_period_id, [employee.id for employee in employees]
        )
        client_rates = await load_client_rates(
            self.session, client_id, period.period_start, period.period_end
        )
        calculation = self.calculator.calculate(employees, hours, client_rates)
        if calculation.is_empty:
            raise NoBillableHours(
                "No billable hours found for this client in this period",
                {"client_id": str(client_id), "pay_period_id": str(pay_period_id)},
            )

        invoice_date = invoice_date or date.today()
        async with unique_guard(
            self.session,
            "An invoice already exists for this client and pay period",
            {"client_id": str(client_id), "pay_period_id": str(pay_period_id)},
        ):
            invoice = ClientInvoice(
                client_id=client_id,
                pay_period_id=pay_period_id,
                invoice_number=await self._allocate_invoice_number(invoice_date.year),
                invoice_date=invoice_date,
                total_amount=calculation.total_amount,
                status=InvoiceStatus.DRAFT.value,
            )
            invoice.line_items = [
                InvoiceLineItem(
                    employee_id=line.employee_id,
                    position=position,
                    description=line.description,
                    hours=line.hours,
                    hourly_rate=line.hourly_rate,
                    amount=line.amount,
                )
                for position, line in enumerate(calculation.lines)
            ]
            self.session.add(invoice)

        self.audit.add(
            "invoice_generated",
            ClientInvoice.__tablename__,
            invoice.id,
            {"invoice_number": invoice.invoice_number, "total_amount": invoice.total_amount},
        )
        logger.info(
            "Generated invoice %s for client %s, period %s: %d lines, total %s",
            invoice.invoice_number,
            client.name,
            period.label,
            len(invoice.line_items),
            invoice.total_amount,
        )
        return invoice

    async def transition_status(self, invoice_id: UUID, to_status: str) -> ClientInvoice:
        invoice = await self.get_invoice(invoice_id)
        old_status = invoice.status
        invoice.status = InvoiceStateMachine.validate_transition(old_status, to_status)
        self.audit.add(
            f"status_change:{old_status}:{invoice.status}",
            ClientInvoice.__tablename__,
            invoice.id,
        )
        await self.session.flush()
        return invoice

    async def _allocate_invoice_number(self, year: int) -> str:
        """Increment the per-year counter inside the current transaction."""
        sequence = await self.session.get(InvoiceSequence, year, with_for_update=True)
        if sequence is None:
            sequence = InvoiceSequence(year=year, last_value=0)
            self.session.add(sequence)
        sequence.last_value += 1
        return format_invoice_number(year, sequence.last_value)

    async def _active_employees(self, client_id: UUID) -> list[Employee]:
        result = await self.session.execute(
            select(Employee)
            .where(Employee.client_id == client_id, Employee.status == "active")
            .options(selectinload(Employee.role))
            .order_by(Employee.last_name, Employee.first_name, Employee.id)
        )
        return list(result.scalars().all())
