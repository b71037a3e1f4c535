"""Client invoice, line item and invoice number sequence models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffing_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from staffing_payroll.models.staffing import Client, Employee
    from staffing_payroll.models.time_tracking import PayPeriod


class ClientInvoice(Base, TimestampMixin):
    """Bill owed by one client for one pay period."""

    __tablename__ = "client_invoice"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    client_id: Mapped[UUID] = mapped_column(
        ForeignKey("client.id", ondelete="RESTRICT"),
        nullable=False,
    )
    pay_period_id: Mapped[UUID] = mapped_column(
        ForeignKey("pay_period.id", ondelete="RESTRICT"),
        nullable=False,
    )
    invoice_number: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    invoice_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")

    __table_args__ = (
        UniqueConstraint(
            "client_id",
            "pay_period_id",
            name="client_invoice_client_period_unique",
        ),
        CheckConstraint(
            "status IN ('draft', 'sent', 'paid')",
            name="client_invoice_status_check",
        ),
    )

    # Relationships
    client: Mapped[Client] = relationship()
    pay_period: Mapped[PayPeriod] = relationship()
    line_items: Mapped[list[InvoiceLineItem]] = relationship(
        back_populates="invoice",
        order_by="InvoiceLineItem.position",
    )


class InvoiceLineItem(Base, TimestampMixin):
    """Billed hours for one employee on an invoice."""

    __tablename__ = "invoice_line_item"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    invoice_id: Mapped[UUID] = mapped_column(
        ForeignKey("client_invoice.id", ondelete="CASCADE"),
        nullable=False,
    )
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.id", ondelete="RESTRICT"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Relationships
    invoice: Mapped[ClientInvoice] = relationship(back_populates="line_items")
    employee: Mapped[Employee] = relationship()


class InvoiceSequence(Base):
    """Per-year invoice number counter, incremented inside the invoice transaction."""

    __tablename__ = "invoice_sequence"

    year: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    last_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
