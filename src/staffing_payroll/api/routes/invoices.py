"""Client invoice API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, Response, status

from staffing_payroll.api.dependencies import DbSession
from staffing_payroll.api.schemas import (
    ErrorResponse,
    InvoiceCreate,
    InvoiceResponse,
    StatusUpdate,
)
from staffing_payroll.services.export_service import ExportService
from staffing_payroll.services.invoice_service import InvoiceService

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def generate_invoice(db: DbSession, payload: InvoiceCreate) -> InvoiceResponse:
    """Generate the invoice for a client's hours in a pay period."""
    service = InvoiceService(db)
    invoice = await service.generate_invoice(
        payload.client_id, payload.pay_period_id, payload.invoice_date
    )
    await db.commit()
    return InvoiceResponse.model_validate(await service.get_invoice(invoice.id))


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    db: DbSession,
    client_id: Annotated[UUID | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> list[InvoiceResponse]:
    service = InvoiceService(db)
    invoices = await service.list_invoices(client_id, limit)
    return [
        InvoiceResponse.model_validate(await service.get_invoice(invoice.id))
        for invoice in invoices
    ]


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    db: DbSession,
    invoice_id: Annotated[UUID, Path()],
) -> InvoiceResponse:
    invoice = await InvoiceService(db).get_invoice(invoice_id)
    return InvoiceResponse.model_validate(invoice)


@router.post(
    "/{invoice_id}/status",
    response_model=InvoiceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def transition_invoice(
    db: DbSession,
    invoice_id: Annotated[UUID, Path()],
    payload: StatusUpdate,
) -> InvoiceResponse:
    """Move an invoice through draft -> sent -> paid."""
    service = InvoiceService(db)
    invoice = await service.transition_status(invoice_id, payload.status)
    await db.commit()
    return InvoiceResponse.model_validate(await service.get_invoice(invoice.id))


@router.get(
    "/{invoice_id}/export",
    response_class=Response,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def export_invoice(
    db: DbSession,
    invoice_id: Annotated[UUID, Path()],
) -> Response:
    export = await ExportService(db).export_invoice(invoice_id)
    await db.commit()
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
