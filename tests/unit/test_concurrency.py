"""Tests for version-conflict retries and the audit recorder."""

from unittest.mock import AsyncMock

import pytest

from pharmastock.application.audit import AuditRecorder
from pharmastock.application.concurrency import run_with_version_retry
from pharmastock.config import reset_settings
from pharmastock.core.entities import AuditAction
from pharmastock.core.exceptions import ConcurrentUpdateError, MedicineNotFoundError


class TestRunWithVersionRetry:
    async def test_returns_first_success(self):
        operation = AsyncMock(return_value="done")

        assert await run_with_version_retry(operation) == "done"
        operation.assert_awaited_once()

    async def test_retries_conflicts(self):
        operation = AsyncMock(
            side_effect=[ConcurrentUpdateError(1), ConcurrentUpdateError(1), "done"]
        )

        assert await run_with_version_retry(operation, max_attempts=3) == "done"
        assert operation.await_count == 3

    async def test_exhaustion_reports_attempts(self):
        operation = AsyncMock(side_effect=ConcurrentUpdateError(8))

        with pytest.raises(ConcurrentUpdateError) as exc_info:
            await run_with_version_retry(operation, max_attempts=2)

        assert operation.await_count == 2
        assert exc_info.value.details == {"medicine_id": 8, "attempts": 2}

    async def test_other_errors_are_not_retried(self):
        operation = AsyncMock(side_effect=MedicineNotFoundError(3))

        with pytest.raises(MedicineNotFoundError):
            await run_with_version_retry(operation, max_attempts=5)
        operation.assert_awaited_once()

    async def test_attempts_from_settings(self, monkeypatch):
        monkeypatch.setenv("INVENTORY_MAX_UPDATE_ATTEMPTS", "2")
        reset_settings()
        operation = AsyncMock(side_effect=ConcurrentUpdateError(1))

        with pytest.raises(ConcurrentUpdateError):
            await run_with_version_retry(operation)
        assert operation.await_count == 2


class TestAuditRecorder:
    async def test_records_through_sink(self, actor):
        sink = AsyncMock()
        sink.record.return_value = "entry"

        entry = await AuditRecorder(sink).record(actor, AuditAction.EDIT, "Edited Panadol")

        assert entry == "entry"
        sink.record.assert_awaited_once_with(actor, AuditAction.EDIT, "Edited Panadol")

    async def test_sink_failure_is_swallowed(self, actor):
        sink = AsyncMock()
        sink.record.side_effect = RuntimeError("database is locked")

        assert await AuditRecorder(sink).record(actor, AuditAction.ADD, "Added") is None
