"""Audit trail endpoints."""

from fastapi import APIRouter, Depends, Query

from pharmastock.api.dependencies import get_list_audit_logs_use_case
from pharmastock.application.dto.responses import AuditLogListResponse, ErrorResponse
from pharmastock.application.use_cases import ListAuditLogsUseCase

router = APIRouter(prefix="/api/audit-logs", tags=["audit"])


@router.get("", response_model=AuditLogListResponse, responses={400: {"model": ErrorResponse}})
async def list_audit_logs(
    limit: int | None = Query(default=None, description="Entries to return, newest first"),
    use_case: ListAuditLogsUseCase = Depends(get_list_audit_logs_use_case),
) -> AuditLogListResponse:
    entries = await use_case.execute(limit)
    return use_case.to_response(entries)
