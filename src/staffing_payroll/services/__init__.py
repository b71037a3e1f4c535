"""Staffing payroll services."""

from staffing_payroll.services.document_service import DocumentService
from staffing_payroll.services.export_service import CsvExport, ExportService
from staffing_payroll.services.invoice_service import InvoiceService
from staffing_payroll.services.pay_period_service import PayPeriodService
from staffing_payroll.services.payroll_service import PayrollService
from staffing_payroll.services.roster_service import RosterService
from staffing_payroll.services.state_machine import (
    InvoiceStateMachine,
    PayPeriodStateMachine,
    PayrollRunStateMachine,
    TimeOffStateMachine,
    attempt_transition,
)
from staffing_payroll.services.time_off_service import TimeOffService
from staffing_payroll.services.work_entry_service import WorkEntryService

__all__ = [
    "CsvExport",
    "DocumentService",
    "ExportService",
    "InvoiceService",
    "InvoiceStateMachine",
    "PayPeriodService",
    "PayPeriodStateMachine",
    "PayrollRunStateMachine",
    "PayrollService",
    "RosterService",
    "TimeOffService",
    "TimeOffStateMachine",
    "WorkEntryService",
    "attempt_transition",
]
