"""Time-off API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from staffing_payroll.api.dependencies import DbSession
from staffing_payroll.api.schemas import (
    ErrorResponse,
    StatusUpdate,
    TimeOffCreate,
    TimeOffResponse,
    TimeOffSummaryItem,
    TimeOffSummaryResponse,
)
from staffing_payroll.services.time_off_service import TimeOffService

router = APIRouter(prefix="/time-off", tags=["time-off"])


@router.post(
    "",
    response_model=TimeOffResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def request_time_off(db: DbSession, payload: TimeOffCreate) -> TimeOffResponse:
    request = await TimeOffService(db).request_time_off(
        employee_id=payload.employee_id,
        leave_type=payload.leave_type,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
        days_count=payload.days_count,
    )
    await db.commit()
    return TimeOffResponse.model_validate(request)


@router.get("", response_model=list[TimeOffResponse])
async def list_time_off(
    db: DbSession,
    employee_id: Annotated[UUID | None, Query()] = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> list[TimeOffResponse]:
    requests = await TimeOffService(db).list_time_off(employee_id, status_filter)
    return [TimeOffResponse.model_validate(r) for r in requests]


@router.post(
    "/{time_off_id}/decision",
    response_model=TimeOffResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def decide_time_off(
    db: DbSession,
    time_off_id: Annotated[UUID, Path()],
    payload: StatusUpdate,
) -> TimeOffResponse:
    """Approve or deny a pending request."""
    request = await TimeOffService(db).decide_time_off(time_off_id, payload.status)
    await db.commit()
    return TimeOffResponse.model_validate(request)


@router.get(
    "/summary/{pay_period_id}",
    response_model=TimeOffSummaryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def time_off_summary(
    db: DbSession,
    pay_period_id: Annotated[UUID, Path()],
) -> TimeOffSummaryResponse:
    summary = await TimeOffService(db).summarize_for_period(pay_period_id)
    return TimeOffSummaryResponse(
        pay_period_id=pay_period_id,
        items=[
            TimeOffSummaryItem(employee_id=employee_id, **counts)
            for employee_id, counts in summary.items()
        ],
    )
