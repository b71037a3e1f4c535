"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from staffing_payroll import __version__
from staffing_payroll.api.routes import (
    health_router,
    invoices_router,
    pay_periods_router,
    payroll_runs_router,
    roster_router,
    time_off_router,
    work_entries_router,
)
from staffing_payroll.database import create_schema, dispose_db
from staffing_payroll.exceptions import InternalError, StaffingError

logger = logging.getLogger(__name__)


def _error_response(exc: StaffingError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "code": exc.error_code,
            "details": exc.details,
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    await create_schema()
    yield
    await dispose_db()


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Staffing Payroll API",
        description="Pay periods, payroll runs and client invoicing for a staffing agency",
        version=__version__,
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StaffingError)
    async def staffing_error_handler(request: Request, exc: StaffingError) -> JSONResponse:
        """Map domain errors to their HTTP status and stable code."""
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc)

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """Storage failures surface as INTERNAL_ERROR without leaking SQL."""
        logger.exception("Storage error on %s %s", request.method, request.url.path)
        return _error_response(InternalError("A storage error occurred"))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    app.include_router(health_router)
    app.include_router(pay_periods_router, prefix="/api/v1")
    app.include_router(work_entries_router, prefix="/api/v1")
    app.include_router(time_off_router, prefix="/api/v1")
    app.include_router(payroll_runs_router, prefix="/api/v1")
    app.include_router(invoices_router, prefix="/api/v1")
    app.include_router(roster_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
