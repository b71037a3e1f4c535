"""Tests for compliance document expiry."""

from datetime import date

import pytest

from staffing_payroll.exceptions import NotFound, ValidationError
from staffing_payroll.services.document_service import DocumentService, add_years, expiry_status


class TestExpiryRules:
    def test_add_years(self):
        assert add_years(date(2026, 1, 15), 3) == date(2029, 1, 15)
        assert add_years(date(2024, 2, 29), 3) == date(2027, 2, 28)

    @pytest.mark.parametrize(
        "expiry, expected",
        [
            (None, "active"),
            (date(2026, 1, 9), "expired"),
            (date(2026, 1, 10), "expiring"),
            (date(2026, 2, 8), "expiring"),
            (date(2026, 2, 9), "active"),
        ],
    )
    def test_expiry_status(self, expiry, expected):
        assert expiry_status(expiry, date(2026, 1, 10), 30) == expected


class TestDocumentService:
    async def test_w8ben_defaults_to_three_year_expiry(self, session, test_employee, settings):
        document = await DocumentService(session, settings).register_document(
            test_employee.id, "w8ben", "w8ben.pdf", upload_date=date(2026, 1, 15)
        )
        assert document.expiry_date == date(2029, 1, 15)
        assert document.status == "active"

    async def test_contract_has_no_default_expiry(self, session, test_employee, settings):
        document = await DocumentService(session, settings).register_document(
            test_employee.id, "contract", "contract.pdf", upload_date=date(2026, 1, 15)
        )
        assert document.expiry_date is None

    async def test_invalid_type(self, session, test_employee, settings):
        with pytest.raises(ValidationError):
            await DocumentService(session, settings).register_document(
                test_employee.id, "passport", "scan.pdf"
            )

    async def test_unknown_employee(self, session, settings):
        from uuid import uuid4

        with pytest.raises(NotFound):
            await DocumentService(session, settings).register_document(
                uuid4(), "contract", "contract.pdf"
            )

    async def test_alerts_list_expired_and_expiring(self, session, test_employee, settings):
        service = DocumentService(session, settings)
        expired = await service.register_document(
            test_employee.id, "w8ben", "old.pdf", upload_date=date(2023, 1, 1)
        )
        expiring = await service.register_document(
            test_employee.id, "w8ben", "soon.pdf", upload_date=date(2023, 2, 1)
        )
        await service.register_document(
            test_employee.id, "w8ben", "fresh.pdf", upload_date=date(2025, 6, 1)
        )
        await service.register_document(test_employee.id, "contract", "contract.pdf")

        alerts = await service.list_alerts(today=date(2026, 1, 10))

        assert [(alert.document.id, alert.status) for alert in alerts] == [
            (expired.id, "expired"),
            (expiring.id, "expiring"),
        ]
        assert alerts[0].days_remaining == -9
        assert alerts[1].days_remaining == 22
