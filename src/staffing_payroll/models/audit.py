"""Audit log model."""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from staffing_payroll.models.base import Base, TimestampMixin


class AuditLog(Base, TimestampMixin):
    """Append-only record of exports and status changes."""

    __tablename__ = "audit_log"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    action: Mapped[str] = mapped_column(String, nullable=False)
    table_name: Mapped[str] = mapped_column(String, nullable=False)
    record_id: Mapped[UUID] = mapped_column(nullable=False)
    new_values: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
