"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Pay period schemas
# ============================================================================


class PayPeriodCreate(BaseModel):
    """Schema for creating a pay period."""

    period_start: date
    period_end: date
    period_type: str = "biweekly"


class PayPeriodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    period_start: date
    period_end: date
    period_type: str
    status: str
    created_at: datetime


class StatusUpdate(BaseModel):
    """Requested status for any lifecycle transition."""

    status: str


# ============================================================================
# Work entry schemas
# ============================================================================


class WorkEntryUpsert(BaseModel):
    """Create or replace the entry for (employee, period, date)."""

    employee_id: UUID
    pay_period_id: UUID
    work_date: date
    hours_worked: Decimal | None = None
    leads_processed: int | None = None
    spifs: Decimal | None = None
    notes: str | None = None


class WorkEntryUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    hours_worked: Decimal | None = None
    leads_processed: int | None = None
    spifs: Decimal | None = None
    notes: str | None = None


class WorkEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    pay_period_id: UUID
    work_date: date
    hours_worked: Decimal
    leads_processed: int
    spifs: Decimal
    notes: str | None = None


# ============================================================================
# Time off schemas
# ============================================================================


class TimeOffCreate(BaseModel):
    employee_id: UUID
    leave_type: str
    start_date: date
    end_date: date
    reason: str | None = None
    days_count: int | None = None


class TimeOffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    leave_type: str
    start_date: date
    end_date: date
    days_count: int
    status: str
    reason: str | None = None
    decided_at: datetime | None = None


class TimeOffSummaryItem(BaseModel):
    employee_id: UUID
    pto: int = 0
    sick: int = 0
    unpaid: int = 0


class TimeOffSummaryResponse(BaseModel):
    pay_period_id: UUID
    items: list[TimeOffSummaryItem]


# ============================================================================
# Payroll run schemas
# ============================================================================


class PayrollRunCreate(BaseModel):
    pay_period_id: UUID
    run_date: date | None = None


class PayrollEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    employee_name: str | None = None
    base_hours: Decimal
    hourly_rate: Decimal
    base_pay: Decimal
    leads_bonus: Decimal
    spifs_bonus: Decimal
    total_gross: Decimal
    deductions: Decimal
    net_pay: Decimal


class PayrollRunResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    pay_period_id: UUID
    run_date: date
    total_amount: Decimal
    employee_count: int
    status: str
    created_at: datetime
    entries: list[PayrollEntryResponse] = Field(default_factory=list)


# ============================================================================
# Invoice schemas
# ============================================================================


class InvoiceCreate(BaseModel):
    client_id: UUID
    pay_period_id: UUID
    invoice_date: date | None = None


class InvoiceLineItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    description: str
    hours: Decimal
    hourly_rate: Decimal
    amount: Decimal


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: UUID
    pay_period_id: UUID
    invoice_number: str
    invoice_date: date
    total_amount: Decimal
    status: str
    created_at: datetime
    line_items: list[InvoiceLineItemResponse] = Field(default_factory=list)


# ============================================================================
# Roster schemas
# ============================================================================


class ClientPricingCreate(BaseModel):
    role_id: UUID
    hourly_rate: Decimal
    effective_from: date
    effective_to: date | None = None


class ClientPricingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: UUID
    role_id: UUID
    hourly_rate: Decimal
    effective_from: date
    effective_to: date | None = None


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    client_id: UUID | None = None
    role_id: UUID | None = None
    status: str


class DocumentCreate(BaseModel):
    document_type: str
    file_name: str
    upload_date: date | None = None
    expiry_date: date | None = None
    storage_url: str | None = None


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    document_type: str
    file_name: str
    storage_url: str | None = None
    upload_date: date
    expiry_date: date | None = None
    status: str


class DocumentAlertResponse(BaseModel):
    document: DocumentResponse
    employee_name: str
    status: str
    days_remaining: int


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    details: dict[str, Any] | None = None
