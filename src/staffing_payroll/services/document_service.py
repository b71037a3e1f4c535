"""Compliance document expiry rules feeding dashboard alerts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from staffing_payroll.config import Settings, get_settings
from staffing_payroll.exceptions import NotFound, ValidationError
from staffing_payroll.models import Document, Employee

DOCUMENT_TYPES = ("contract", "w8ben", "other")


def add_years(day: date, years: int) -> date:
    """Same calendar day ``years`` later; Feb 29 falls back to Feb 28."""
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        return day.replace(year=day.year + years, day=28)


def expiry_status(expiry_date: date | None, today: date, warning_days: int) -> str:
    """Classify a document as expired, expiring (inside the window) or active."""
    if expiry_date is None:
        return "active"
    if expiry_date < today:
        return "expired"
    if expiry_date - today < timedelta(days=warning_days):
        return "expiring"
    return "active"


@dataclass(frozen=True)
class DocumentAlert:
    document: Document
    status: str
    days_remaining: int


class DocumentService:
    """Service for compliance document metadata (files live elsewhere).

    W-8BEN forms expire after a fixed number of years unless an explicit
    expiry date is given.
    """

    def __init__(self, session: AsyncSession, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()

    async def register_document(
        self,
        employee_id: UUID,
        document_type: str,
        file_name: str,
        upload_date: date | None = None,
        expiry_date: date | None = None,
        storage_url: str | None = None,
    ) -> Document:
        if document_type not in DOCUMENT_TYPES:
            raise ValidationError(
                f"document_type must be one of {', '.join(DOCUMENT_TYPES)}",
                {"document_type": document_type},
            )
        if not file_name:
            raise ValidationError("file_name is required")
        if await self.session.get(Employee, employee_id) is None:
            raise NotFound("Employee", employee_id)

        upload_date = upload_date or date.today()
        if expiry_date is None and document_type == "w8ben":
            expiry_date = add_years(upload_date, self.settings.w8ben_validity_years)

        document = Document(
            employee_id=employee_id,
            document_type=document_type,
            file_name=file_name,
            storage_url=storage_url,
            upload_date=upload_date,
            expiry_date=expiry_date,
            status="active",
        )
        self.session.add(document)
        await self.session.flush()
        return document

    async def list_alerts(self, today: date | None = None) -> list[DocumentAlert]:
        """Active documents that are expired or expire inside the warning window."""
        today = today or date.today()
        horizon = today + timedelta(days=self.settings.document_expiry_warning_days)
        result = await self.session.execute(
            select(Document)
            .where(
                Document.status == "active",
                Document.expiry_date.is_not(None),
                Document.expiry_date <= horizon,
            )
            .options(selectinload(Document.employee))
            .order_by(Document.expiry_date)
        )

        alerts = []
        for document in result.scalars().all():
            status = expiry_status(
                document.expiry_date, today, self.settings.document_expiry_warning_days
            )
            if status == "active":
                continue
            alerts.append(
                DocumentAlert(
                    document=document,
                    status=status,
                    days_remaining=(document.expiry_date - today).days,
                )
            )
        return alerts
