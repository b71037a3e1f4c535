"""Payroll run and payroll entry models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffing_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from staffing_payroll.models.staffing import Employee
    from staffing_payroll.models.time_tracking import PayPeriod


class PayrollRun(Base, TimestampMixin):
    """Payments owed to contractors for one pay period.

    At most one run exists per pay period; the unique constraint on
    ``pay_period_id`` backs the lookup done before insert.
    """

    __tablename__ = "payroll_run"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    pay_period_id: Mapped[UUID] = mapped_column(
        ForeignKey("pay_period.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    run_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    employee_count: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'processed', 'sent')",
            name="payroll_run_status_check",
        ),
    )

    # Relationships
    pay_period: Mapped[PayPeriod] = relationship()
    entries: Mapped[list[PayrollEntry]] = relationship(
        back_populates="payroll_run",
        order_by="PayrollEntry.position",
    )


class PayrollEntry(Base, TimestampMixin):
    """One employee's computed pay within a run. Never updated after insert."""

    __tablename__ = "payroll_entry"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    payroll_run_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_run.id", ondelete="CASCADE"),
        nullable=False,
    )
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.id", ondelete="RESTRICT"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    base_hours: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    base_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    leads_bonus: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    spifs_bonus: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_gross: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    deductions: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Relationships
    payroll_run: Mapped[PayrollRun] = relationship(back_populates="entries")
    employee: Mapped[Employee] = relationship()
