"""SQLAlchemy ORM models for the staffing payroll engine."""

from staffing_payroll.models.audit import AuditLog
from staffing_payroll.models.base import Base, TimestampMixin
from staffing_payroll.models.documents import Document
from staffing_payroll.models.invoicing import ClientInvoice, InvoiceLineItem, InvoiceSequence
from staffing_payroll.models.payroll import PayrollEntry, PayrollRun
from staffing_payroll.models.staffing import Client, ClientPricing, Employee, Role
from staffing_payroll.models.time_tracking import PayPeriod, TimeOff, WorkEntry

__all__ = [
    "AuditLog",
    "Base",
    "Client",
    "ClientInvoice",
    "ClientPricing",
    "Document",
    "Employee",
    "InvoiceLineItem",
    "InvoiceSequence",
    "PayPeriod",
    "PayrollEntry",
    "PayrollRun",
    "Role",
    "TimeOff",
    "TimestampMixin",
    "WorkEntry",
]
