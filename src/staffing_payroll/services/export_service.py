"""CSV exports for payment (payroll) and accounting (invoice) systems."""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffing_payroll.calculators.line_builder import LineItemBuilder
from staffing_payroll.config import Settings, get_settings
from staffing_payroll.exceptions import PreconditionFailed
from staffing_payroll.models import ClientInvoice, PayrollRun
from staffing_payroll.services.audit_service import AuditRecorder
from staffing_payroll.services.invoice_service import InvoiceService
from staffing_payroll.services.payroll_service import PayrollService
from staffing_payroll.services.state_machine import PayrollRunStateMachine, PayrollRunStatus

logger = logging.getLogger(__name__)

PAYROLL_HEADER = (
    "Recipient Email",
    "Recipient First Name",
    "Recipient Last Name",
    "Amount",
    "Currency",
    "Purpose of Payment",
    "Note",
)

INVOICE_HEADER = (
    "Invoice No",
    "Customer",
    "Invoice Date",
    "Due Date",
    "Item",
    "Description",
    "Quantity",
    "Rate",
    "Amount",
)


@dataclass(frozen=True)
class CsvExport:
    """A rendered export ready for download."""

    filename: str
    content: str
    row_count: int
    media_type: str = "text/csv"


def render_csv(header: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """Render rows as CSV joined by ``\\n`` with no trailing newline.

    Fields containing a comma, quote or newline are quoted, with inner
    quotes doubled.
    """
    lines = []
    for row in [header, *rows]:
        buffer = io.StringIO()
        csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n").writerow(row)
        lines.append(buffer.getvalue()[:-1])
    return "\n".join(lines)


def payroll_rows(run: PayrollRun, settings: Settings) -> list[list[str]]:
    """One row per payroll entry, paying the entry's net amount."""
    note = f"Pay period: {run.pay_period.label}" if run.pay_period else "Pay period: Unknown period"
    return [
        [
            entry.employee.email or "",
            entry.employee.first_name or "",
            entry.employee.last_name or "",
            LineItemBuilder.format_amount(entry.net_pay),
            settings.currency,
            settings.payment_purpose,
            note,
        ]
        for entry in run.entries
    ]


def invoice_rows(invoice: ClientInvoice, settings: Settings) -> list[list[str]]:
    """One row per line item; due date is the invoice date plus the payment terms."""
    due_date = invoice.invoice_date + timedelta(days=settings.invoice_due_days)
    customer = invoice.client.name if invoice.client else ""
    return [
        [
            invoice.invoice_number,
            customer,
            invoice.invoice_date.isoformat(),
            due_date.isoformat(),
            settings.invoice_item,
            item.description or "",
            LineItemBuilder.format_amount(item.hours),
            LineItemBuilder.format_amount(item.hourly_rate),
            LineItemBuilder.format_amount(item.amount),
        ]
        for item in invoice.line_items
    ]


def payroll_filename(run: PayrollRun) -> str:
    return f"payroll-veem-{run.run_date.isoformat()}-{str(run.id)[:8]}.csv"


def invoice_filename(invoice: ClientInvoice) -> str:
    client_name = invoice.client.name if invoice.client else ""
    slug = re.sub(r"\s+", "-", client_name) or "client"
    return f"invoice-{invoice.invoice_number}-{slug}.csv"


class ExportService:
    """Renders payroll runs and invoices as CSV.

    Rendering is a pure function of stored state. Side effects:
    - payroll: a processed run becomes sent (and its period processed)
    - both: a best-effort audit record
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        audit: AuditRecorder | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.audit = audit or AuditRecorder(session)
        self.payroll = PayrollService(session)
        self.invoices = InvoiceService(session)

    async def export_payroll_run(self, payroll_run_id: UUID) -> CsvExport:
        run = await self.payroll.get_payroll_run(payroll_run_id)

        if not PayrollRunStateMachine.can_export(run.status):
            raise PreconditionFailed(
                f"Payroll run must be processed before exporting. Current status: {run.status}",
                {"current": run.status, "required": sorted(PayrollRunStateMachine.EXPORTABLE)},
            )
        if not run.entries:
            raise PreconditionFailed(
                "No payroll entries found for this run",
                {"payroll_run_id": str(run.id)},
            )

        rows = payroll_rows(run, self.settings)
        export = CsvExport(
            filename=payroll_filename(run),
            content=render_csv(PAYROLL_HEADER, rows),
            row_count=len(rows),
        )

        await self.audit.record(
            "payroll_csv_export",
            PayrollRun.__tablename__,
            run.id,
            {"entry_count": len(rows), "total_amount": run.total_amount},
        )

        if run.status == PayrollRunStatus.PROCESSED.value:
            await self.payroll.mark_sent(run)
            logger.info("Payroll run %s exported and marked sent", run.id)

        return export

    async def export_invoice(self, invoice_id: UUID) -> CsvExport:
        invoice = await self.invoices.get_invoice(invoice_id)

        if not invoice.line_items:
            raise PreconditionFailed(
                "No line items found",
                {"invoice_id": str(invoice.id)},
            )

        rows = invoice_rows(invoice, self.settings)
        export = CsvExport(
            filename=invoice_filename(invoice),
            content=render_csv(INVOICE_HEADER, rows),
            row_count=len(rows),
        )

        await self.audit.record(
            "invoice_csv_export",
            ClientInvoice.__tablename__,
            invoice.id,
            {"invoice_number": invoice.invoice_number, "total_amount": invoice.total_amount},
        )
        return export
