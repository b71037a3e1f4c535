"""Work entry API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, Response, status

from staffing_payroll.api.dependencies import DbSession
from staffing_payroll.api.schemas import (
    ErrorResponse,
    WorkEntryResponse,
    WorkEntryUpdate,
    WorkEntryUpsert,
)
from staffing_payroll.services.work_entry_service import WorkEntryService

router = APIRouter(prefix="/work-entries", tags=["work-entries"])


@router.put(
    "",
    response_model=WorkEntryResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def set_work_entry(db: DbSession, payload: WorkEntryUpsert) -> WorkEntryResponse:
    """Create or replace the daily entry for an employee."""
    entry = await WorkEntryService(db).set_work_entry(
        employee_id=payload.employee_id,
        pay_period_id=payload.pay_period_id,
        work_date=payload.work_date,
        hours_worked=payload.hours_worked,
        leads_processed=payload.leads_processed,
        spifs=payload.spifs,
        notes=payload.notes,
    )
    await db.commit()
    return WorkEntryResponse.model_validate(entry)


@router.get("", response_model=list[WorkEntryResponse])
async def list_work_entries(
    db: DbSession,
    pay_period_id: Annotated[UUID, Query()],
    employee_id: Annotated[UUID | None, Query()] = None,
) -> list[WorkEntryResponse]:
    entries = await WorkEntryService(db).list_work_entries(pay_period_id, employee_id)
    return [WorkEntryResponse.model_validate(e) for e in entries]


@router.patch(
    "/{entry_id}",
    response_model=WorkEntryResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_work_entry(
    db: DbSession,
    entry_id: Annotated[UUID, Path()],
    payload: WorkEntryUpdate,
) -> WorkEntryResponse:
    changes = payload.model_dump(exclude_unset=True)
    entry = await WorkEntryService(db).update_work_entry(entry_id, **changes)
    await db.commit()
    return WorkEntryResponse.model_validate(entry)


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_work_entry(
    db: DbSession,
    entry_id: Annotated[UUID, Path()],
) -> Response:
    await WorkEntryService(db).delete_work_entry(entry_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
