"""Roster rules: client pricing, role deletion guard, employee deactivation."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from staffing_payroll.exceptions import Conflict, NotFound, ValidationError
from staffing_payroll.models import Client, ClientPricing, Employee, Role
from staffing_payroll.services.persistence import unique_guard

logger = logging.getLogger(__name__)


class RosterService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_employee(self, employee_id: UUID) -> Employee:
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise NotFound("Employee", employee_id)
        return employee

    async def list_client_pricing(self, client_id: UUID) -> list[ClientPricing]:
        result = await self.session.execute(
            select(ClientPricing)
            .where(ClientPricing.client_id == client_id)
            .order_by(ClientPricing.effective_from.desc())
        )
        return list(result.scalars().all())

    async def create_client_pricing(
        self,
        client_id: UUID,
        role_id: UUID,
        hourly_rate: Decimal,
        effective_from: date,
        effective_to: date | None = None,
    ) -> ClientPricing:
        """Register a client-specific rate for a role.

        At most one row per (client, role, effective_from).
        """
        if hourly_rate <= 0:
            raise ValidationError("hourly_rate must be positive", {"hourly_rate": str(hourly_rate)})
        if effective_to is not None and effective_to < effective_from:
            raise ValidationError(
                "effective_to must not be before effective_from",
                {
                    "effective_from": effective_from.isoformat(),
                    "effective_to": effective_to.isoformat(),
                },
            )
        if await self.session.get(Client, client_id) is None:
            raise NotFound("Client", client_id)
        if await self.session.get(Role, role_id) is None:
            raise NotFound("Role", role_id)

        message = "A pricing entry already exists for this client, role, and effective date"
        details = {
            "client_id": str(client_id),
            "role_id": str(role_id),
            "effective_from": effective_from.isoformat(),
        }
        result = await self.session.execute(
            select(ClientPricing.id).where(
                ClientPricing.client_id == client_id,
                ClientPricing.role_id == role_id,
                ClientPricing.effective_from == effective_from,
            )
        )
        if result.scalar_one_or_none() is not None:
            raise Conflict(message, details)

        pricing = ClientPricing(
            client_id=client_id,
            role_id=role_id,
            hourly_rate=hourly_rate,
            effective_from=effective_from,
            effective_to=effective_to,
        )
        async with unique_guard(self.session, message, details):
            self.session.add(pricing)
        return pricing

    async def delete_role(self, role_id: UUID) -> None:
        """Delete a role that no active employee is assigned to.

        Inactive employees still pointing at the role are detached (role_id
        set to NULL, matching the foreign key's ON DELETE SET NULL). Their
        payroll and invoice history is unaffected: those rows copy the rate
        and description at generation time.
        """
        role = await self.session.get(Role, role_id)
        if role is None:
            raise NotFound("Role", role_id)

        active_count = await self.session.scalar(
            select(func.count())
            .select_from(Employee)
            .where(Employee.role_id == role_id, Employee.status == "active")
        )
        if active_count:
            raise Conflict(
                f"Cannot delete role: {active_count} active employee(s) are assigned to it. "
                "Reassign them first.",
                {"role_id": str(role_id), "active_employees": active_count},
            )

        detached = await self.session.execute(
            update(Employee).where(Employee.role_id == role_id).values(role_id=None)
        )
        if detached.rowcount:
            logger.info(
                "Detached %d inactive employee(s) from deleted role %s",
                detached.rowcount,
                role_id,
            )

        await self.session.delete(role)
        await self.session.flush()

    async def deactivate_employee(self, employee_id: UUID) -> Employee:
        """Soft delete: the row stays so payroll and invoice history resolve."""
        employee = await self.get_employee(employee_id)
        if employee.status != "inactive":
            employee.status = "inactive"
            await self.session.flush()
            logger.info("Deactivated employee %s", employee_id)
        return employee
