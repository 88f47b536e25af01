"""API tests for the audit trail endpoint."""

from datetime import datetime
from unittest.mock import AsyncMock

from pharmastock.api.dependencies import get_list_audit_logs_use_case
from pharmastock.application.use_cases import ListAuditLogsUseCase
from pharmastock.core.entities import AuditAction, AuditLogEntry
from pharmastock.core.exceptions import ValidationError


class TestListAuditLogs:
    async def test_list(self, client, override):
        entries = [
            AuditLogEntry(
                id=2,
                actor_id="user-42",
                actor_name="Amina Pharmacist",
                action=AuditAction.SELL,
                details="Sold 2 x Panadol 500mg",
                timestamp=datetime(2026, 3, 15, 10, 0),
            ),
            AuditLogEntry(
                id=1,
                actor_id="user-42",
                actor_name="Amina Pharmacist",
                action=AuditAction.ADD,
                details="Added Panadol 500mg batch B-1001",
                timestamp=datetime(2026, 3, 15, 9, 0),
            ),
        ]
        uc = AsyncMock(spec=ListAuditLogsUseCase)
        uc.execute.return_value = entries
        uc.to_response.return_value = ListAuditLogsUseCase().to_response(entries)
        override(get_list_audit_logs_use_case, uc)

        response = await client.get("/api/audit-logs", params={"limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [e["action"] for e in body["items"]] == ["Sell", "Add"]
        uc.execute.assert_called_once_with(2)

    async def test_default_limit(self, client, override):
        uc = AsyncMock(spec=ListAuditLogsUseCase)
        uc.execute.return_value = []
        uc.to_response.return_value = ListAuditLogsUseCase().to_response([])
        override(get_list_audit_logs_use_case, uc)

        response = await client.get("/api/audit-logs")

        assert response.status_code == 200
        assert response.json()["items"] == []
        uc.execute.assert_called_once_with(None)

    async def test_invalid_limit(self, client, override):
        uc = AsyncMock(spec=ListAuditLogsUseCase)
        uc.execute.side_effect = ValidationError("limit", "Limit must be positive", 0)
        override(get_list_audit_logs_use_case, uc)

        response = await client.get("/api/audit-logs", params={"limit": 0})

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "limit"
