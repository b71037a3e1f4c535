"""API routes."""

from staffing_payroll.api.routes.health import router as health_router
from staffing_payroll.api.routes.invoices import router as invoices_router
from staffing_payroll.api.routes.pay_periods import router as pay_periods_router
from staffing_payroll.api.routes.payroll_runs import router as payroll_runs_router
from staffing_payroll.api.routes.roster import router as roster_router
from staffing_payroll.api.routes.time_off import router as time_off_router
from staffing_payroll.api.routes.work_entries import router as work_entries_router

__all__ = [
    "health_router",
    "invoices_router",
    "pay_periods_router",
    "payroll_runs_router",
    "roster_router",
    "time_off_router",
    "work_entries_router",
]
