"""Roster endpoints: client pricing, roles, employees and their documents."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, Response, status

from staffing_payroll.api.dependencies import DbSession
from staffing_payroll.api.schemas import (
    ClientPricingCreate,
    ClientPricingResponse,
    DocumentAlertResponse,
    DocumentCreate,
    DocumentResponse,
    EmployeeResponse,
    ErrorResponse,
)
from staffing_payroll.services.document_service import DocumentService
from staffing_payroll.services.roster_service import RosterService

router = APIRouter(tags=["roster"])


@router.post(
    "/clients/{client_id}/pricing",
    response_model=ClientPricingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_client_pricing(
    db: DbSession,
    client_id: Annotated[UUID, Path()],
    payload: ClientPricingCreate,
) -> ClientPricingResponse:
    pricing = await RosterService(db).create_client_pricing(
        client_id=client_id,
        role_id=payload.role_id,
        hourly_rate=payload.hourly_rate,
        effective_from=payload.effective_from,
        effective_to=payload.effective_to,
    )
    await db.commit()
    return ClientPricingResponse.model_validate(pricing)


@router.get("/clients/{client_id}/pricing", response_model=list[ClientPricingResponse])
async def list_client_pricing(
    db: DbSession,
    client_id: Annotated[UUID, Path()],
) -> list[ClientPricingResponse]:
    rows = await RosterService(db).list_client_pricing(client_id)
    return [ClientPricingResponse.model_validate(row) for row in rows]


@router.delete(
    "/roles/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_role(
    db: DbSession,
    role_id: Annotated[UUID, Path()],
) -> Response:
    await RosterService(db).delete_role(role_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/employees/{employee_id}/deactivate",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def deactivate_employee(
    db: DbSession,
    employee_id: Annotated[UUID, Path()],
) -> EmployeeResponse:
    employee = await RosterService(db).deactivate_employee(employee_id)
    await db.commit()
    return EmployeeResponse.model_validate(employee)


@router.post(
    "/employees/{employee_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def register_document(
    db: DbSession,
    employee_id: Annotated[UUID, Path()],
    payload: DocumentCreate,
) -> DocumentResponse:
    document = await DocumentService(db).register_document(
        employee_id=employee_id,
        document_type=payload.document_type,
        file_name=payload.file_name,
        upload_date=payload.upload_date,
        expiry_date=payload.expiry_date,
        storage_url=payload.storage_url,
    )
    await db.commit()
    return DocumentResponse.model_validate(document)


@router.get("/documents/alerts", response_model=list[DocumentAlertResponse])
async def list_document_alerts(
    db: DbSession,
    today: Annotated[date | None, Query()] = None,
) -> list[DocumentAlertResponse]:
    """Expired documents and those expiring inside the warning window."""
    alerts = await DocumentService(db).list_alerts(today)
    return [
        DocumentAlertResponse(
            document=DocumentResponse.model_validate(alert.document),
            employee_name=alert.document.employee.full_name,
            status=alert.status,
            days_remaining=alert.days_remaining,
        )
        for alert in alerts
    ]
