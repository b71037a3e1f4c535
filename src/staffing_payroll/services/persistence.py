"""Storage helpers shared by the services."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staffing_payroll.exceptions import Conflict


@asynccontextmanager
async def unique_guard(
    session: AsyncSession,
    message: str,
    details: dict[str, Any] | None = None,
) -> AsyncGenerator[None, None]:
    """Run inserts in a savepoint and turn a unique violation into Conflict.

    The lookup done before an insert gives a descriptive error in the common
    case; the storage constraint closes the window between lookup and insert.
    Only the savepoint is rolled back, so the surrounding unit of work stays
    usable.
    """
    try:
        async with session.begin_nested():
            yield
    except IntegrityError as exc:
        raise Conflict(message, details) from exc
