"""Compliance document model."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffing_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from staffing_payroll.models.staffing import Employee


class Document(Base, TimestampMixin):
    """Compliance document (contract, W-8BEN) stored outside the database."""

    __tablename__ = "document"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.id", ondelete="CASCADE"),
        nullable=False,
    )
    document_type: Mapped[str] = mapped_column(String, nullable=False)
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    storage_url: Mapped[str | None] = mapped_column(String, nullable=True)
    upload_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")

    __table_args__ = (
        CheckConstraint(
            "document_type IN ('contract', 'w8ben', 'other')",
            name="document_type_check",
        ),
        CheckConstraint(
            "status IN ('active', 'expired', 'replaced')",
            name="document_status_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="documents")
