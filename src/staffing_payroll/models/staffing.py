"""Client, role, employee and client pricing models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffing_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from staffing_payroll.models.documents import Document


class Client(Base, TimestampMixin):
    """A customer company billed for contractor hours."""

    __tablename__ = "client"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String, nullable=True)
    billing_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")

    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive')", name="client_status_check"),
    )

    # Relationships
    employees: Mapped[list[Employee]] = relationship(back_populates="client")
    pricing: Mapped[list[ClientPricing]] = relationship(back_populates="client")


class Role(Base, TimestampMixin):
    """Job role with an optional base hourly rate."""

    __tablename__ = "role"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    # Relationships
    employees: Mapped[list[Employee]] = relationship(back_populates="role", passive_deletes=True)


class Employee(Base, TimestampMixin):
    """Contractor or employee placed with a client.

    ``salary_compensation`` is an hourly rate override, not a salary.
    Employees are never hard-deleted; deactivation keeps historical payroll
    and invoice rows pointing at a valid record.
    """

    __tablename__ = "employee"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    client_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("client.id"),
        nullable=True,
    )
    role_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("role.id", ondelete="SET NULL"),
        nullable=True,
    )
    employment_type: Mapped[str] = mapped_column(String, nullable=False, default="contractor")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    salary_compensation: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    pay_frequency: Mapped[str] = mapped_column(String, nullable=False, default="biweekly")
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")

    __table_args__ = (
        CheckConstraint(
            "employment_type IN ('contractor', 'employee')",
            name="employee_type_check",
        ),
        CheckConstraint(
            "pay_frequency IN ('weekly', 'biweekly', 'monthly')",
            name="employee_pay_frequency_check",
        ),
        CheckConstraint(
            "status IN ('active', 'inactive', 'terminated')",
            name="employee_status_check",
        ),
    )

    # Relationships
    client: Mapped[Client | None] = relationship(back_populates="employees")
    role: Mapped[Role | None] = relationship(back_populates="employees")
    documents: Mapped[list[Document]] = relationship(back_populates="employee")

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"


class ClientPricing(Base, TimestampMixin):
    """Client-and-role specific hourly rate valid over a date interval."""

    __tablename__ = "client_pricing"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    client_id: Mapped[UUID] = mapped_column(
        ForeignKey("client.id", ondelete="CASCADE"),
        nullable=False,
    )
    role_id: Mapped[UUID] = mapped_column(
        ForeignKey("role.id", ondelete="CASCADE"),
        nullable=False,
    )
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "client_id",
            "role_id",
            "effective_from",
            name="client_pricing_client_role_from_unique",
        ),
        CheckConstraint(
            "effective_to IS NULL OR effective_to >= effective_from",
            name="client_pricing_dates_check",
        ),
    )

    # Relationships
    client: Mapped[Client] = relationship(back_populates="pricing")
    role: Mapped[Role] = relationship()
