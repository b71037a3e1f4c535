"""Payroll and client invoicing engine for a contractor staffing back office."""

__version__ = "0.1.0"
