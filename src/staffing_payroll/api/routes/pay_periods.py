"""Pay period API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from staffing_payroll.api.dependencies import DbSession
from staffing_payroll.api.schemas import (
    ErrorResponse,
    PayPeriodCreate,
    PayPeriodResponse,
    StatusUpdate,
)
from staffing_payroll.services.pay_period_service import PayPeriodService

router = APIRouter(prefix="/pay-periods", tags=["pay-periods"])


@router.post(
    "",
    response_model=PayPeriodResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_pay_period(db: DbSession, payload: PayPeriodCreate) -> PayPeriodResponse:
    """Open a new pay period."""
    period = await PayPeriodService(db).create_pay_period(
        payload.period_start, payload.period_end, payload.period_type
    )
    await db.commit()
    return PayPeriodResponse.model_validate(period)


@router.get("", response_model=list[PayPeriodResponse])
async def list_pay_periods(
    db: DbSession,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> list[PayPeriodResponse]:
    periods = await PayPeriodService(db).list_pay_periods(status_filter, limit)
    return [PayPeriodResponse.model_validate(p) for p in periods]


@router.get(
    "/{pay_period_id}",
    response_model=PayPeriodResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_pay_period(
    db: DbSession,
    pay_period_id: Annotated[UUID, Path()],
) -> PayPeriodResponse:
    period = await PayPeriodService(db).get_pay_period(pay_period_id)
    return PayPeriodResponse.model_validate(period)


@router.post(
    "/{pay_period_id}/status",
    response_model=PayPeriodResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def transition_pay_period(
    db: DbSession,
    pay_period_id: Annotated[UUID, Path()],
    payload: StatusUpdate,
) -> PayPeriodResponse:
    """Move a pay period through open -> closed -> processed."""
    period = await PayPeriodService(db).transition_status(pay_period_id, payload.status)
    await db.commit()
    return PayPeriodResponse.model_validate(period)
