"""Audit trail for exports and status changes."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from staffing_payroll.models import AuditLog

logger = logging.getLogger(__name__)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    return value


class AuditRecorder:
    """Writes audit_log rows.

    ``add`` is part of the caller's unit of work and fails with it.
    ``record`` is best-effort: it writes in a savepoint and logs instead of
    raising, so a broken audit table never blocks a financial export.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def add(
        self,
        action: str,
        table_name: str,
        record_id: UUID,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            action=action,
            table_name=table_name,
            record_id=record_id,
            new_values=_jsonable(new_values) if new_values is not None else None,
        )
        self.session.add(entry)
        return entry

    async def record(
        self,
        action: str,
        table_name: str,
        record_id: UUID,
        new_values: dict[str, Any] | None = None,
    ) -> bool:
        """Best-effort write. Returns False if the record could not be stored."""
        try:
            await self._write(action, table_name, record_id, new_values)
        except SQLAlchemyError:
            logger.warning(
                "Failed to write audit record %s for %s %s",
                action,
                table_name,
                record_id,
                exc_info=True,
            )
            return False
        return True

    async def _write(
        self,
        action: str,
        table_name: str,
        record_id: UUID,
        new_values: dict[str, Any] | None,
    ) -> None:
        async with self.session.begin_nested():
            self.add(action, table_name, record_id, new_values)
