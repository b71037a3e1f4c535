"""Payroll run API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Response, status

from staffing_payroll.api.dependencies import DbSession
from staffing_payroll.api.schemas import (
    ErrorResponse,
    PayrollEntryResponse,
    PayrollRunCreate,
    PayrollRunResponse,
    StatusUpdate,
)
from staffing_payroll.models import PayrollRun
from staffing_payroll.services.export_service import ExportService
from staffing_payroll.services.payroll_service import PayrollService

router = APIRouter(prefix="/payroll-runs", tags=["payroll-runs"])


def _run_response(run: PayrollRun) -> PayrollRunResponse:
    response = PayrollRunResponse.model_validate(run)
    response.entries = [
        PayrollEntryResponse.model_validate(entry).model_copy(
            update={"employee_name": entry.employee.full_name}
        )
        for entry in run.entries
    ]
    return response


@router.post(
    "",
    response_model=PayrollRunResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def generate_payroll_run(db: DbSession, payload: PayrollRunCreate) -> PayrollRunResponse:
    """Generate the payroll run for a closed pay period."""
    service = PayrollService(db)
    run = await service.generate_payroll_run(payload.pay_period_id, payload.run_date)
    await db.commit()
    return _run_response(await service.get_payroll_run(run.id))


@router.get(
    "/{payroll_run_id}",
    response_model=PayrollRunResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_run(
    db: DbSession,
    payroll_run_id: Annotated[UUID, Path()],
) -> PayrollRunResponse:
    run = await PayrollService(db).get_payroll_run(payroll_run_id)
    return _run_response(run)


@router.post(
    "/{payroll_run_id}/status",
    response_model=PayrollRunResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def transition_payroll_run(
    db: DbSession,
    payroll_run_id: Annotated[UUID, Path()],
    payload: StatusUpdate,
) -> PayrollRunResponse:
    service = PayrollService(db)
    run = await service.transition_status(payroll_run_id, payload.status)
    await db.commit()
    return _run_response(await service.get_payroll_run(run.id))


@router.get(
    "/{payroll_run_id}/export",
    response_class=Response,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def export_payroll_run(
    db: DbSession,
    payroll_run_id: Annotated[UUID, Path()],
) -> Response:
    """Download the payout CSV; a processed run becomes sent."""
    export = await ExportService(db).export_payroll_run(payroll_run_id)
    await db.commit()
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
