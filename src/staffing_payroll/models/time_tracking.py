"""Pay period, work entry and time-off models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
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
    from staffing_payroll.models.staffing import Employee


class PayPeriod(Base, TimestampMixin):
    """Billing window over which work is logged, paid and invoiced."""

    __tablename__ = "pay_period"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    period_type: Mapped[str] = mapped_column(String, nullable=False, default="biweekly")
    status: Mapped[str] = mapped_column(String, nullable=False, default="open")

    __table_args__ = (
        CheckConstraint(
            "period_type IN ('weekly', 'biweekly', 'monthly')",
            name="pay_period_type_check",
        ),
        CheckConstraint(
            "status IN ('open', 'closed', 'processed')",
            name="pay_period_status_check",
        ),
        CheckConstraint("period_end > period_start", name="pay_period_dates_check"),
    )

    # Relationships
    work_entries: Mapped[list[WorkEntry]] = relationship(back_populates="pay_period")

    @property
    def label(self) -> str:
        """Human-readable label used in export notes."""
        return f"{self.period_start.isoformat()} to {self.period_end.isoformat()}"

    def contains(self, day: date) -> bool:
        """Check if a date falls inside the period (inclusive)."""
        return self.period_start <= day <= self.period_end


class WorkEntry(Base, TimestampMixin):
    """Hours, leads and spifs logged by one employee on one day."""

    __tablename__ = "work_entry"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.id", ondelete="CASCADE"),
        nullable=False,
    )
    pay_period_id: Mapped[UUID] = mapped_column(
        ForeignKey("pay_period.id", ondelete="CASCADE"),
        nullable=False,
    )
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    hours_worked: Mapped[Decimal] = mapped_column(
        Numeric(8, 4), nullable=False, default=Decimal("0")
    )
    leads_processed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    spifs: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "pay_period_id",
            "work_date",
            name="work_entry_employee_period_date_unique",
        ),
        CheckConstraint("hours_worked >= 0", name="work_entry_hours_check"),
        CheckConstraint("leads_processed >= 0", name="work_entry_leads_check"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship()
    pay_period: Mapped[PayPeriod] = relationship(back_populates="work_entries")


class TimeOff(Base, TimestampMixin):
    """Leave request (PTO, sick, unpaid)."""

    __tablename__ = "time_off"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.id", ondelete="CASCADE"),
        nullable=False,
    )
    leave_type: Mapped[str] = mapped_column(String, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    days_count: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "leave_type IN ('pto', 'sick', 'unpaid')",
            name="time_off_leave_type_check",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'denied')",
            name="time_off_status_check",
        ),
        CheckConstraint("end_date >= start_date", name="time_off_dates_check"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship()
