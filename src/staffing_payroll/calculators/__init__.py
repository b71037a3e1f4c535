"""Payroll and invoicing calculation engine."""

from staffing_payroll.calculators.engine import PayrollEngine
from staffing_payroll.calculators.invoice_calculator import InvoiceCalculator
from staffing_payroll.calculators.line_builder import LineItemBuilder
from staffing_payroll.calculators.rate_resolver import RateResolver, load_client_rates
from staffing_payroll.calculators.work_aggregator import WorkAggregator

__all__ = [
    "InvoiceCalculator",
    "LineItemBuilder",
    "PayrollEngine",
    "RateResolver",
    "WorkAggregator",
    "load_client_rates",
]
